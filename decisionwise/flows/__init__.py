"""
Prompt flows backed by a completion endpoint.
"""

from .base import Flow, bullet_list, extract_json
from .best_option import (
    REASONING_MAX_CHARS,
    AnalyzeOptionsInput,
    AnalyzeOptionsOutput,
    best_option_flow,
)
from .summarize import SummarizeOptionsInput, SummarizeOptionsOutput, summarize_flow

__all__ = [
    "REASONING_MAX_CHARS",
    "AnalyzeOptionsInput",
    "AnalyzeOptionsOutput",
    "Flow",
    "SummarizeOptionsInput",
    "SummarizeOptionsOutput",
    "best_option_flow",
    "bullet_list",
    "extract_json",
    "summarize_flow",
]

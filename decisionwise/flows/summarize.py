"""
Summarizes a list of options.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from decisionwise.llm.client import CompletionBackend

from .base import Flow, bullet_list

FLOW_NAME = "summarizeOptionsFlow"


class SummarizeOptionsInput(BaseModel):
    options: list[str] = Field(description="A list of options to be summarized.")


class SummarizeOptionsOutput(BaseModel):
    summary: str = Field(description="A short summary of all the options.")


def render_prompt(flow_input: SummarizeOptionsInput) -> str:
    return (
        "You are an AI expert in summarizing information.\n\n"
        "Given the following list of options, provide a concise summary that "
        "captures the essence of each option:\n\n"
        "Options:\n"
        f"{bullet_list(flow_input.options)}"
    )


def summarize_flow(
    backend: CompletionBackend,
) -> Flow[SummarizeOptionsInput, SummarizeOptionsOutput]:
    return Flow(
        name=FLOW_NAME,
        input_model=SummarizeOptionsInput,
        output_model=SummarizeOptionsOutput,
        render=render_prompt,
        backend=backend,
    )

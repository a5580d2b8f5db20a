"""
Analyzes a list of options and returns the best one.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from decisionwise.llm.client import CompletionBackend

from .base import Flow, bullet_list

FLOW_NAME = "analyzeOptionsAndReturnBestFlow"
REASONING_MAX_CHARS = 240


class AnalyzeOptionsInput(BaseModel):
    """Options to choose from."""
    options: list[str] = Field(
        description="An array of options to choose from. Must have at least two options."
    )


class AnalyzeOptionsOutput(BaseModel):
    """The model's pick and a short justification."""
    model_config = ConfigDict(populate_by_name=True)

    best_option: str = Field(
        alias="bestOption", description="The best option chosen by the AI."
    )
    reasoning: str = Field(
        max_length=REASONING_MAX_CHARS,
        description=(
            "The AI reasoning behind choosing the best option. "
            "Be quirky and use an emoji!"
        ),
    )

    @field_validator("reasoning")
    @classmethod
    def reasoning_fits_utf16_limit(cls, value: str) -> str:
        # Limit is in UTF-16 code units, so an emoji counts as two
        length = len(value.encode("utf-16-le")) // 2
        if length > REASONING_MAX_CHARS:
            raise ValueError(
                f"reasoning is {length} UTF-16 units long, "
                f"at most {REASONING_MAX_CHARS} allowed"
            )
        return value


def render_prompt(flow_input: AnalyzeOptionsInput) -> str:
    return (
        "You are a quirky and fun AI assistant who loves making decisions! 🤪 "
        "Given a list of options, you will choose the best one and explain your "
        "reasoning in a fun, slightly eccentric way. Keep your reasoning under "
        f"{REASONING_MAX_CHARS} characters.\n\n"
        "Options:\n"
        f"{bullet_list(flow_input.options)}"
    )


def best_option_flow(
    backend: CompletionBackend,
) -> Flow[AnalyzeOptionsInput, AnalyzeOptionsOutput]:
    return Flow(
        name=FLOW_NAME,
        input_model=AnalyzeOptionsInput,
        output_model=AnalyzeOptionsOutput,
        render=render_prompt,
        backend=backend,
    )

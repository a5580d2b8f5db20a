"""
Named, schema-validated prompt flows.

A flow pairs a prompt template with pydantic input and output models. The
model call itself goes through a ``CompletionBackend``, so flows can run
against a fake backend in tests.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from decisionwise.llm.client import CompletionBackend
from decisionwise.llm.exceptions import FlowError
from decisionwise.llm.models import LLMMessage, MessageRole
from decisionwise.logging_utils import operation_context

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


def bullet_list(items: list[str]) -> str:
    """Render items as ``- item`` lines."""
    return "".join(f"- {item}\n" for item in items)


def extract_json(text: str) -> Any:
    """Parse a model reply as JSON, falling back to a fenced code block."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        match = _FENCED_JSON.search(text)
        if not match:
            raise
    return json.loads(match.group(1))


class Flow(Generic[InputT, OutputT]):
    """
    A single prompt with typed input and output.

    Invoking a flow validates the input, renders the prompt, asks the backend
    for a JSON reply and validates that reply against ``output_model``. Any
    failure after input validation surfaces as ``FlowError``; no retry is
    attempted.
    """

    def __init__(
        self,
        name: str,
        input_model: type[InputT],
        output_model: type[OutputT],
        render: Callable[[InputT], str],
        backend: CompletionBackend,
    ):
        self.name = name
        self.input_model = input_model
        self.output_model = output_model
        self._render = render
        self.backend = backend

    def build_messages(self, flow_input: InputT) -> list[dict[str, Any]]:
        schema = json.dumps(self.output_model.model_json_schema(by_alias=True))
        system = (
            "Respond with a single JSON object and nothing else. "
            f"It must conform to this JSON schema: {schema}"
        )
        return [
            LLMMessage(MessageRole.SYSTEM, system).to_dict(),
            LLMMessage(MessageRole.USER, self._render(flow_input)).to_dict(),
        ]

    def parse_output(self, text: str) -> OutputT:
        try:
            return self.output_model.model_validate(extract_json(text))
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise FlowError(
                f"{self.name} returned output that does not match "
                f"{self.output_model.__name__}: {e}",
                flow_name=self.name,
            ) from e

    async def invoke(self, flow_input: InputT | dict[str, Any]) -> OutputT:
        """
        Run the flow.

        Args:
            flow_input: An ``input_model`` instance or a dict to validate into one

        Returns:
            The validated output model

        Raises:
            pydantic.ValidationError: If the input does not match ``input_model``
            FlowError: If the model call fails or its reply fails validation
        """
        if not isinstance(flow_input, self.input_model):
            flow_input = self.input_model.model_validate(flow_input)

        messages = self.build_messages(flow_input)

        async with operation_context("flow", context={"flow": self.name}):
            try:
                text = await self.backend.complete(messages)
            except FlowError as e:
                e.flow_name = self.name
                raise
            except Exception as e:
                raise FlowError(
                    f"{self.name} failed: {e!s}", flow_name=self.name
                ) from e

            return self.parse_output(text)

"""Anthropic judge adapter.

Anthropic has no JSON-schema response format, so the schema is offered
as a single tool and the model is forced to call it; the tool input is
the structured answer. Text replies fall back to JSON extraction.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from arbiter.adapters.base import BaseJudge, GenerationConfig
from arbiter.evaluation.errors import JudgeOutputError
from arbiter.evaluation.extraction import extract_json_from_text

_TOOL_NAME = "submit_answer"


class AnthropicJudge(BaseJudge):
    """Judge backed by the Anthropic messages API.

    Uses lazy-initialized AsyncAnthropic client that reads ANTHROPIC_API_KEY
    from the environment automatically.
    """

    def __init__(self, config: GenerationConfig | None = None) -> None:
        self.config = config or GenerationConfig(model="claude-3-5-haiku-latest")
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the AsyncAnthropic client."""
        if self._client is None:
            from anthropic import AsyncAnthropic

            self._client = AsyncAnthropic()
        return self._client

    def _build_tool(self, schema: dict[str, Any]) -> dict[str, Any]:
        """Wrap a JSON schema as the single tool the judge must call."""
        return {
            "name": _TOOL_NAME,
            "description": f"Submit the {schema.get('title', 'answer')} object.",
            "input_schema": schema,
        }

    async def generate_structured(
        self, schema: dict[str, Any], prompt: str
    ) -> dict[str, Any]:
        """Send the prompt with a forced tool call and return its input.

        Raises:
            JudgeOutputError: If neither a tool call nor JSON text came back.
        """
        client = self._get_client()

        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.config.max_tokens if self.config.max_tokens is not None else 4096,
            "tools": [self._build_tool(schema)],
            "tool_choice": {"type": "tool", "name": _TOOL_NAME},
        }

        if self.config.temperature is not None:
            kwargs["temperature"] = self.config.temperature

        # Pass through provider-specific extras
        kwargs.update(self.config.extras)

        response = await client.messages.create(**kwargs)

        text_parts: list[str] = []
        for block in response.content:
            if block.type == "tool_use" and block.name == _TOOL_NAME:
                if isinstance(block.input, dict):
                    logger.debug(
                        "anthropic judge {} answered schema {}",
                        self.config.model,
                        schema.get("title"),
                    )
                    return block.input
            elif block.type == "text":
                text_parts.append(block.text)

        parsed = extract_json_from_text("\n".join(text_parts))
        if parsed is None:
            raise JudgeOutputError(
                f"Judge {self.config.model!r} returned no structured answer for "
                f"schema {schema.get('title', '?')!r}"
            )
        return parsed

    def provider_name(self) -> str:
        """Return the provider name."""
        return "anthropic"

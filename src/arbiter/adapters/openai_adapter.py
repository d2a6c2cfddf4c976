"""OpenAI judge and embedding adapters.

The judge asks for a schema-constrained JSON response and parses the
message content; the embedder batches every value into one request.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from arbiter.adapters.base import (
    BaseEmbedder,
    BaseJudge,
    EmbeddingResult,
    GenerationConfig,
)
from arbiter.evaluation.errors import JudgeOutputError
from arbiter.evaluation.extraction import extract_json_from_text


class OpenAIJudge(BaseJudge):
    """Judge backed by the OpenAI chat completion API.

    Uses lazy-initialized AsyncOpenAI client that reads OPENAI_API_KEY
    from the environment automatically.
    """

    def __init__(self, config: GenerationConfig | None = None) -> None:
        self.config = config or GenerationConfig(model="gpt-4o-mini")
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the AsyncOpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI()
        return self._client

    def _response_format(self, schema: dict[str, Any]) -> dict[str, Any]:
        """Build the json_schema response_format for a schema.

        Strict mode is off because engine schemas use numeric bounds
        that strict mode rejects.
        """
        return {
            "type": "json_schema",
            "json_schema": {
                "name": schema.get("title", "output"),
                "schema": schema,
                "strict": False,
            },
        }

    async def generate_structured(
        self, schema: dict[str, Any], prompt: str
    ) -> dict[str, Any]:
        """Send the prompt and parse the JSON object from the reply.

        Raises:
            JudgeOutputError: If the reply contains no JSON object.
        """
        client = self._get_client()

        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": self._response_format(schema),
        }

        if self.config.temperature is not None:
            kwargs["temperature"] = self.config.temperature

        if self.config.max_tokens is not None:
            kwargs["max_tokens"] = self.config.max_tokens

        # Pass through provider-specific extras
        kwargs.update(self.config.extras)

        response = await client.chat.completions.create(**kwargs)
        content = response.choices[0].message.content

        parsed = extract_json_from_text(content)
        if parsed is None:
            raise JudgeOutputError(
                f"Judge {self.config.model!r} returned no JSON object for "
                f"schema {schema.get('title', '?')!r}"
            )
        logger.debug(
            "openai judge {} answered schema {}", self.config.model, schema.get("title")
        )
        return parsed

    def provider_name(self) -> str:
        """Return the provider name."""
        return "openai"


class OpenAIEmbedder(BaseEmbedder):
    """Embedder backed by the OpenAI embeddings API."""

    def __init__(self, model: str = "text-embedding-3-small") -> None:
        self.model = model
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the AsyncOpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI()
        return self._client

    async def embed_many(self, values: list[str]) -> EmbeddingResult:
        """Embed all values in one request, restoring input order."""
        if not values:
            return EmbeddingResult(embeddings=[])

        client = self._get_client()
        response = await client.embeddings.create(model=self.model, input=values)

        embeddings: list[list[float] | None] = [None] * len(values)
        for item in response.data:
            if 0 <= item.index < len(values):
                embeddings[item.index] = list(item.embedding)

        usage = response.usage.total_tokens if response.usage is not None else 0
        return EmbeddingResult(embeddings=embeddings, usage_tokens=usage)

    def provider_name(self) -> str:
        """Return the provider name."""
        return "openai"

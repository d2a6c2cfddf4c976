"""Judge and embedding capability ABCs plus their result dataclasses.

All provider adapters (OpenAI, Anthropic, custom) subclass BaseJudge or
BaseEmbedder. The scoring engine only ever sees these two interfaces:
it owns the prompts and the expected schema shapes, and the adapter only
has to turn a prompt plus a JSON schema into parsed JSON.

These are plain dataclasses (not Pydantic) to avoid overhead in the
hot path of adapter calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class EmbeddingResult:
    """Embeddings returned by a single embed_many() call.

    One entry per input value, in input order. A provider may return
    None for a value it could not embed.
    """

    embeddings: list[list[float] | None]
    usage_tokens: int = 0


@dataclass
class GenerationConfig:
    """Generation parameters shared by judge adapters."""

    model: str
    temperature: float | None = 0.0
    max_tokens: int | None = 2048
    extras: dict[str, Any] = field(default_factory=dict)


class BaseJudge(ABC):
    """Abstract base class for judge-model capabilities.

    Subclasses must implement generate_structured(), which sends a prompt
    and returns parsed JSON matching the given schema. Generation failures
    are raised, never returned.
    """

    @abstractmethod
    async def generate_structured(
        self, schema: dict[str, Any], prompt: str
    ) -> dict[str, Any]:
        """Generate a JSON object matching *schema* for *prompt*.

        Args:
            schema: JSON schema describing the expected object.
            prompt: Fully rendered prompt string.

        Returns:
            Parsed JSON object.
        """
        ...

    def provider_name(self) -> str:
        """Return the provider name for this judge.

        Default implementation returns the class name.
        """
        return type(self).__name__


class BaseEmbedder(ABC):
    """Abstract base class for embedding-model capabilities."""

    @abstractmethod
    async def embed_many(self, values: list[str]) -> EmbeddingResult:
        """Embed every value in one batched call, preserving order."""
        ...

    def provider_name(self) -> str:
        """Return the provider name for this embedder."""
        return type(self).__name__

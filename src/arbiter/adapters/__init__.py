"""Arbiter adapters - judge and embedding capability layer.

Re-exports the BaseJudge / BaseEmbedder ABCs, their result dataclasses,
the registry functions, and retry wrappers. Concrete provider adapters
are resolved lazily through the registry so that their SDKs stay
optional.
"""

from arbiter.adapters.base import (
    BaseEmbedder,
    BaseJudge,
    EmbeddingResult,
    GenerationConfig,
)
from arbiter.adapters.registry import get_embedder, get_judge
from arbiter.adapters.retry import RetryingEmbedder, RetryingJudge

__all__ = [
    "BaseEmbedder",
    "BaseJudge",
    "EmbeddingResult",
    "GenerationConfig",
    "RetryingEmbedder",
    "RetryingJudge",
    "get_embedder",
    "get_judge",
]

"""Scorer configuration models -- a closed tagged union keyed by ``kind``.

Each config carries only the tuning options of one scorer. Capabilities
(judge, embedder) are injected when the scorer is built, never stored
here. Option values are validated by the scorer factories themselves so
that direct calls and config-driven calls fail the same way.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class AnswerCorrectnessConfig(BaseModel):
    """Options for the answer_correctness scorer."""

    model_config = {"extra": "forbid"}

    kind: Literal["answer_correctness"] = "answer_correctness"
    weights: list[float] = Field(default_factory=lambda: [0.75, 0.25])
    beta: float = 1.0


class FaithfulnessConfig(BaseModel):
    model_config = {"extra": "forbid"}

    kind: Literal["faithfulness"] = "faithfulness"


class NoiseSensitivityConfig(BaseModel):
    """Options for the noise_sensitivity scorer."""

    model_config = {"extra": "forbid"}

    kind: Literal["noise_sensitivity"] = "noise_sensitivity"
    mode: str = "relevant"


class ToolCallAccuracyConfig(BaseModel):
    """Options for the tool_call_accuracy scorer.

    ``weights`` is a partial override of the default weight table.
    """

    model_config = {"extra": "forbid"}

    kind: Literal["tool_call_accuracy"] = "tool_call_accuracy"
    mode: str = "exact"
    weights: dict[str, float] = Field(default_factory=dict)


class AnswerSimilarityConfig(BaseModel):
    model_config = {"extra": "forbid"}

    kind: Literal["answer_similarity"] = "answer_similarity"


class AnswerRelevancyConfig(BaseModel):
    model_config = {"extra": "forbid"}

    kind: Literal["answer_relevancy"] = "answer_relevancy"
    strictness: int = Field(default=3, ge=1, le=10)


class ContextRecallConfig(BaseModel):
    model_config = {"extra": "forbid"}

    kind: Literal["context_recall"] = "context_recall"


class ExactMatchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    kind: Literal["exact_match"] = "exact_match"


class ContainsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    kind: Literal["contains"] = "contains"


ScorerConfig = Annotated[
    Union[
        AnswerCorrectnessConfig,
        FaithfulnessConfig,
        NoiseSensitivityConfig,
        ToolCallAccuracyConfig,
        AnswerSimilarityConfig,
        AnswerRelevancyConfig,
        ContextRecallConfig,
        ExactMatchConfig,
        ContainsConfig,
    ],
    Field(discriminator="kind"),
]

"""Scorer registry -- maps config ``kind`` strings to scorer builders."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from arbiter.evaluation.scorers.answer_correctness import answer_correctness
from arbiter.evaluation.scorers.answer_relevancy import answer_relevancy
from arbiter.evaluation.scorers.answer_similarity import answer_similarity
from arbiter.evaluation.scorers.base import Scorer, create_scorer
from arbiter.evaluation.scorers.context_recall import context_recall
from arbiter.evaluation.scorers.faithfulness import faithfulness
from arbiter.evaluation.scorers.noise_sensitivity import noise_sensitivity
from arbiter.evaluation.scorers.string import contains, exact_match
from arbiter.evaluation.scorers.tool_call_accuracy import tool_call_accuracy

if TYPE_CHECKING:
    from arbiter.adapters.base import BaseEmbedder, BaseJudge

Builder = Callable[[Any, "BaseJudge | None", "BaseEmbedder | None"], Scorer]


def _need(capability: Any, what: str, kind: str) -> Any:
    if capability is None:
        raise ValueError(f"Scorer {kind!r} requires {what}")
    return capability


def _answer_correctness(config, judge, embedder) -> Scorer:
    judge = _need(judge, "a judge", config.kind)
    if len(config.weights) == 2 and config.weights[1] > 0:
        embedder = _need(embedder, "an embedder", config.kind)
    return answer_correctness(judge, embedder, weights=config.weights, beta=config.beta)


SCORER_REGISTRY: dict[str, Builder] = {
    "answer_correctness": _answer_correctness,
    "faithfulness": lambda c, j, e: faithfulness(_need(j, "a judge", c.kind)),
    "noise_sensitivity": lambda c, j, e: noise_sensitivity(
        _need(j, "a judge", c.kind), mode=c.mode
    ),
    "tool_call_accuracy": lambda c, j, e: tool_call_accuracy(
        mode=c.mode, weights=c.weights
    ),
    "answer_similarity": lambda c, j, e: answer_similarity(
        _need(e, "an embedder", c.kind)
    ),
    "answer_relevancy": lambda c, j, e: answer_relevancy(
        _need(j, "a judge", c.kind),
        _need(e, "an embedder", c.kind),
        strictness=c.strictness,
    ),
    "context_recall": lambda c, j, e: context_recall(_need(j, "a judge", c.kind)),
    "exact_match": lambda c, j, e: exact_match(),
    "contains": lambda c, j, e: contains(),
}


def build_scorer(
    config: Any,
    judge: BaseJudge | None = None,
    embedder: BaseEmbedder | None = None,
) -> Scorer:
    """Build the scorer described by *config*, injecting capabilities.

    Raises:
        ValueError: If the kind is unknown or a required capability is
            missing.
    """
    builder = SCORER_REGISTRY.get(config.kind)
    if builder is None:
        available = sorted(SCORER_REGISTRY.keys())
        raise ValueError(
            f"Unknown scorer kind {config.kind!r}. Available kinds: {available}"
        )
    return builder(config, judge, embedder)


__all__ = [
    "SCORER_REGISTRY",
    "Scorer",
    "answer_correctness",
    "answer_relevancy",
    "answer_similarity",
    "build_scorer",
    "contains",
    "context_recall",
    "create_scorer",
    "exact_match",
    "faithfulness",
    "noise_sensitivity",
    "tool_call_accuracy",
]

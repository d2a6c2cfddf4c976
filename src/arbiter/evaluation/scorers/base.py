"""Scorer contract and the higher-order factory every scorer is built with.

A scorer is an async callable ``(*, input, output, expected) -> ScoreResult``.
Scorers are composed, not subclassed: ``create_scorer`` wraps a scoring
coroutine, and each scorer module closes over its injected judge or
embedder and its options.
"""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from loguru import logger

from arbiter.evaluation.errors import ScorerInputError
from arbiter.models.result import ScoreResult
from arbiter.models.sample import SingleTurnSample, is_single_turn_output

ScoreFn = Callable[..., Awaitable[Any]]


class Scorer(Protocol):
    """Callable contract consumed by test runners and the CLI."""

    async def __call__(
        self,
        *,
        input: Any = None,
        output: Any,
        expected: Mapping[str, Any] | None = None,
    ) -> ScoreResult: ...


def create_scorer(name: str, description: str, fn: ScoreFn) -> Scorer:
    """Wrap a scoring coroutine into a Scorer.

    *fn* receives ``input``, ``output`` and ``expected`` as keyword
    arguments and returns either a bare number or a ``(score, metadata)``
    tuple. A non-numeric score raises TypeError; a NaN score is reported
    as 0.0.
    """

    async def scorer(
        *,
        input: Any = None,
        output: Any,
        expected: Mapping[str, Any] | None = None,
    ) -> ScoreResult:
        result = await fn(input=input, output=output, expected=expected)

        if isinstance(result, tuple):
            score, metadata = result
        else:
            score, metadata = result, None

        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise TypeError(
                f"The scorer {name!r} must return a number, got {type(score).__name__}"
            )

        score = float(score)
        if math.isnan(score):
            logger.warning("scorer {!r} produced NaN; reporting 0.0", name)
            score = 0.0

        return ScoreResult(
            name=name, description=description, score=score, metadata=metadata
        )

    scorer.__name__ = name.lower().replace(" ", "_")
    scorer.display_name = name  # type: ignore[attr-defined]
    scorer.__doc__ = description
    return scorer


def require_expected(
    expected: Mapping[str, Any] | None, key: str, scorer: str
) -> Any:
    """Return ``expected[key]``, raising ScorerInputError if it is absent."""
    value = (expected or {}).get(key)
    if value is None:
        raise ScorerInputError(f"{scorer} scorer requires expected.{key}")
    return value


def require_string_list(value: Any, key: str, scorer: str) -> list[str]:
    """Return *value* if it is a list of strings, else raise ScorerInputError."""
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ScorerInputError(
            f"{scorer} scorer requires expected.{key} to be a list of strings"
        )
    return value


def require_single_turn(output: Any, scorer: str) -> str:
    """Return *output* if it is a plain string, else raise ScorerInputError."""
    if not is_single_turn_output(output):
        raise ScorerInputError(f"{scorer} scorer does not support multi-turn output")
    return output


def question_from_input(input: Any) -> str:
    """Return the question carried by *input*.

    Accepts a plain string, a SingleTurnSample, or a mapping with a
    ``query`` key; anything else yields an empty question.
    """
    if isinstance(input, str):
        return input
    if isinstance(input, SingleTurnSample):
        return input.query
    if isinstance(input, Mapping) and isinstance(input.get("query"), str):
        return input["query"]
    return ""

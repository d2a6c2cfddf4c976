"""Deterministic string scorers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from arbiter.evaluation.errors import ScorerInputError
from arbiter.evaluation.scorers.base import Scorer, create_scorer


def _operands(output: Any, expected: Mapping[str, Any] | None) -> tuple[str, str]:
    value = (expected or {}).get("value")
    if not isinstance(output, str) or not isinstance(value, str):
        raise ScorerInputError("Both output and expected.value must be strings")
    return output, value


def exact_match() -> Scorer:
    """Score 1 when ``output`` equals ``expected["value"]``."""

    async def fn(*, input: Any, output: Any, expected: Mapping[str, Any] | None):
        actual, value = _operands(output, expected)
        return (1.0 if actual == value else 0.0), {"expected": value, "output": actual}

    return create_scorer(
        "Exact Match", "Checks if the output is the same as the expected value.", fn
    )


def contains() -> Scorer:
    """Score 1 when ``expected["value"]`` occurs in ``output``."""

    async def fn(*, input: Any, output: Any, expected: Mapping[str, Any] | None):
        actual, value = _operands(output, expected)
        return (1.0 if value in actual else 0.0), {"expected": value, "output": actual}

    return create_scorer(
        "Contains", "Checks if the output contains the expected value.", fn
    )

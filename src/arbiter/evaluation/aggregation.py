"""Pure numeric aggregation used by the scorers.

Nothing in this module performs I/O or keeps state; every function
returns the same value for the same arguments. Divisions by zero are
guarded to 0.0 rather than producing NaN or infinity.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from arbiter.models.result import Classification


def clamp01(value: float) -> float:
    """Clamp *value* into the closed interval [0, 1]."""
    return max(0.0, min(1.0, value))


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return numerator / denominator, or 0.0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def f_beta_score(classification: Classification, beta: float) -> float:
    """Compute the F-beta score of a TP/FP/FN classification.

    beta > 1 weights recall more heavily (omissions cost more); beta < 1
    weights precision more heavily (hallucinations cost more); beta == 1
    is the harmonic mean of precision and recall.

    Raises:
        ValueError: If beta is not positive.
    """
    if beta <= 0:
        raise ValueError(f"beta must be positive, got {beta!r}")

    tp = len(classification.true_positives)
    fp = len(classification.false_positives)
    fn = len(classification.false_negatives)

    precision = safe_ratio(tp, tp + fp)
    recall = safe_ratio(tp, tp + fn)

    beta_squared = beta * beta
    return safe_ratio(
        (1 + beta_squared) * precision * recall,
        beta_squared * precision + recall,
    )


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors.

    Returns 0.0 if either vector has zero magnitude.

    Raises:
        ValueError: If the vectors differ in length.
    """
    if len(a) != len(b):
        raise ValueError(
            f"Vectors must have the same length, got {len(a)} and {len(b)}"
        )

    dot = math.fsum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(math.fsum(x * x for x in a))
    norm_b = math.sqrt(math.fsum(y * y for y in b))
    return safe_ratio(dot, norm_a * norm_b)


def weighted_average(scores: Sequence[float], weights: Sequence[float]) -> float:
    """Average *scores* weighted by *weights*, normalized by their sum."""
    return safe_ratio(
        math.fsum(s * w for s, w in zip(scores, weights)),
        math.fsum(weights),
    )


def transpose(matrix: list[list[bool]]) -> list[list[bool]]:
    """Transpose a rectangular boolean matrix.

    The column count is taken from the first row; an empty matrix
    transposes to an empty matrix.
    """
    if not matrix:
        return []
    num_cols = len(matrix[0])
    return [[row[col] for row in matrix] for col in range(num_cols)]

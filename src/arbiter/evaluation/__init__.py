"""Evaluation package: statement-level judge primitives and aggregation.

Provides statement decomposition, verdict evaluation, TP/FP/FN
classification, and the pure numeric helpers the scorers combine.
Scorers themselves live in ``arbiter.evaluation.scorers``.
"""

from __future__ import annotations

from arbiter.evaluation.aggregation import cosine_similarity, f_beta_score
from arbiter.evaluation.classification import classify_statements
from arbiter.evaluation.errors import JudgeOutputError, ScorerInputError
from arbiter.evaluation.statements import (
    decompose_into_statements,
    evaluate_statements_detailed,
    evaluate_statements_simple,
)

__all__ = [
    "JudgeOutputError",
    "ScorerInputError",
    "classify_statements",
    "cosine_similarity",
    "decompose_into_statements",
    "evaluate_statements_detailed",
    "evaluate_statements_simple",
    "f_beta_score",
]

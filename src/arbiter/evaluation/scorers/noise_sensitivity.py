"""Noise sensitivity -- how much incorrect answer content comes from retrieval.

Two modes:
- ``relevant``: share of answer statements that are incorrect yet
  supported by a relevant context (a context supporting at least one
  reference statement).
- ``irrelevant``: share of answer statements that are incorrect, not
  supported by any relevant context, but supported by an irrelevant one.

All verdict matrices are indexed ``[context][statement]``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from arbiter.evaluation.aggregation import safe_ratio, transpose
from arbiter.evaluation.errors import JudgeOutputError, ScorerInputError
from arbiter.evaluation.scorers.base import (
    Scorer,
    create_scorer,
    question_from_input,
    require_expected,
    require_single_turn,
    require_string_list,
)
from arbiter.evaluation.statements import (
    decompose_into_statements,
    evaluate_statements_simple,
)

if TYPE_CHECKING:
    from arbiter.adapters.base import BaseJudge

NAME = "Noise Sensitivity"
DESCRIPTION = (
    "Evaluates whether incorrect answers are influenced by relevant or "
    "irrelevant retrieved contexts"
)

MODES = ("relevant", "irrelevant")


@dataclass
class NoiseSensitivityBreakdown:
    """Score plus the context partition it was derived from."""

    score: float
    relevant_context_indices: list[int]
    irrelevant_context_indices: list[int]


def validate_mode(mode: Any) -> str:
    """Return *mode* if it is a known literal, else raise ScorerInputError."""
    if mode not in MODES:
        raise ScorerInputError(
            f"Invalid mode: {mode!r}. Must be 'relevant' or 'irrelevant'."
        )
    return mode


def compute_noise_sensitivity(
    retrieved_to_ground_truth: list[list[bool]],
    retrieved_to_answer: list[list[bool]],
    ground_truth_to_answer: list[bool],
    mode: str,
) -> NoiseSensitivityBreakdown:
    """Derive the noise sensitivity score from the three verdict matrices.

    Args:
        retrieved_to_ground_truth: ``[context][reference_statement]`` support.
        retrieved_to_answer: ``[context][answer_statement]`` support.
        ground_truth_to_answer: ``[answer_statement]`` support by the
            reference answer, i.e. correctness.
        mode: ``"relevant"`` or ``"irrelevant"``.
    """
    num_contexts = len(retrieved_to_ground_truth)
    num_answer_statements = len(ground_truth_to_answer)

    # [reference_statement][context] -> context relevance
    ground_truth_by_statement = transpose(retrieved_to_ground_truth)
    relevant_contexts = [
        any(row[c] for row in ground_truth_by_statement) for c in range(num_contexts)
    ]

    # [answer_statement][context]
    answer_by_statement = transpose(retrieved_to_answer)
    relevant_faithful: list[bool] = []
    irrelevant_faithful: list[bool] = []
    for a in range(num_answer_statements):
        row = answer_by_statement[a] if a < len(answer_by_statement) else []
        supported_by = [c for c, supported in enumerate(row) if supported]
        faithful_to_relevant = any(relevant_contexts[c] for c in supported_by)
        faithful_to_irrelevant = any(not relevant_contexts[c] for c in supported_by)
        relevant_faithful.append(faithful_to_relevant)
        irrelevant_faithful.append(faithful_to_irrelevant and not faithful_to_relevant)

    counted = relevant_faithful if mode == "relevant" else irrelevant_faithful
    count = sum(
        1
        for a in range(num_answer_statements)
        if counted[a] and not ground_truth_to_answer[a]
    )

    return NoiseSensitivityBreakdown(
        score=safe_ratio(count, num_answer_statements),
        relevant_context_indices=[c for c, rel in enumerate(relevant_contexts) if rel],
        irrelevant_context_indices=[
            c for c, rel in enumerate(relevant_contexts) if not rel
        ],
    )


def _as_bools(verdicts: list[int]) -> list[bool]:
    return [v == 1 for v in verdicts]


def noise_sensitivity(judge: BaseJudge, mode: str = "relevant") -> Scorer:
    """Build a noise sensitivity scorer.

    The scorer reads the question from ``input``, the answer from
    ``output``, the reference answer from ``expected["reference_answer"]``
    and the retrieved contexts from ``expected["ground_truth"]``.
    """
    mode = validate_mode(mode)

    async def fn(
        *, input: Any, output: Any, expected: Mapping[str, Any] | None
    ) -> tuple[float, dict[str, Any]]:
        reference = require_expected(expected, "reference_answer", NAME)
        contexts = require_string_list(
            require_expected(expected, "ground_truth", NAME), "ground_truth", NAME
        )
        if not contexts:
            raise ScorerInputError(
                "ground_truth (retrieved contexts) is required and must not be "
                "empty for noise sensitivity scorer"
            )
        answer = require_single_turn(output, NAME)
        question = question_from_input(input)

        reference_statements, answer_statements = await asyncio.gather(
            decompose_into_statements(question, reference, judge),
            decompose_into_statements(question, answer, judge),
        )
        if not reference_statements:
            raise JudgeOutputError(
                "No statements were generated from the reference answer"
            )
        if not answer_statements:
            raise JudgeOutputError("No statements were generated from the model output")

        per_context = [
            asyncio.gather(
                evaluate_statements_simple(context, reference_statements, judge),
                evaluate_statements_simple(context, answer_statements, judge),
            )
            for context in contexts
        ]
        context_verdicts, ground_truth_verdicts = await asyncio.gather(
            asyncio.gather(*per_context),
            evaluate_statements_simple(reference, answer_statements, judge),
        )

        retrieved_to_ground_truth = [_as_bools(ref) for ref, _ in context_verdicts]
        retrieved_to_answer = [_as_bools(ans) for _, ans in context_verdicts]
        ground_truth_to_answer = _as_bools(ground_truth_verdicts)

        breakdown = compute_noise_sensitivity(
            retrieved_to_ground_truth,
            retrieved_to_answer,
            ground_truth_to_answer,
            mode,
        )

        metadata = {
            "reference_statements": reference_statements,
            "answer_statements": answer_statements,
            "incorrect_statements": [
                s for s, correct in zip(answer_statements, ground_truth_to_answer)
                if not correct
            ],
            "relevant_context_indices": breakdown.relevant_context_indices,
            "irrelevant_context_indices": breakdown.irrelevant_context_indices,
            "mode": mode,
            "retrieved_to_ground_truth": retrieved_to_ground_truth,
            "retrieved_to_answer": retrieved_to_answer,
            "ground_truth_to_answer": ground_truth_to_answer,
        }
        return breakdown.score, metadata

    return create_scorer(NAME, DESCRIPTION, fn)

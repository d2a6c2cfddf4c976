"""Faithfulness -- share of answer statements supported by retrieved contexts.

The answer is decomposed into statements, every statement is judged
against the joined retrieved contexts, and the score is the fraction of
statements with a positive verdict.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from arbiter.evaluation.aggregation import safe_ratio
from arbiter.evaluation.errors import JudgeOutputError, ScorerInputError
from arbiter.evaluation.scorers.base import Scorer, create_scorer, require_single_turn
from arbiter.evaluation.statements import (
    decompose_into_statements,
    evaluate_statements_detailed,
)
from arbiter.models.sample import SingleTurnSample

if TYPE_CHECKING:
    from arbiter.adapters.base import BaseJudge

NAME = "Faithfulness"
DESCRIPTION = (
    "Evaluates the faithfulness of the model's response to the retrieved contexts"
)


def to_single_turn_sample(input: Any, scorer: str) -> SingleTurnSample:
    """Validate *input* as a SingleTurnSample.

    Raises:
        ScorerInputError: If *input* is not a single-turn sample.
    """
    if isinstance(input, SingleTurnSample):
        return input
    if not isinstance(input, Mapping):
        raise ScorerInputError(
            f"{scorer} scorer requires a single-turn sample input with "
            f"'query' and 'retrieved_contexts', got {type(input).__name__}"
        )
    try:
        return SingleTurnSample.model_validate(dict(input))
    except ValidationError as exc:
        raise ScorerInputError(f"{scorer} scorer received an invalid sample: {exc}") from exc


def faithfulness(judge: BaseJudge) -> Scorer:
    """Build a faithfulness scorer.

    ``input`` must be a single-turn sample carrying ``query`` and a
    non-empty ``retrieved_contexts`` list; ``output`` is the answer text.
    Metadata is the per-statement verdict list with reasons.
    """

    async def fn(
        *, input: Any, output: Any, expected: Mapping[str, Any] | None
    ) -> tuple[float, list[dict[str, Any]]]:
        sample = to_single_turn_sample(input, NAME)
        if not sample.retrieved_contexts:
            raise ScorerInputError(
                "No retrieved contexts provided or the retrieved contexts are empty"
            )
        answer = require_single_turn(output, NAME)

        statements = await decompose_into_statements(sample.query, answer, judge)
        if not statements:
            raise JudgeOutputError("No statements were generated from the answer")

        context = "\n".join(sample.retrieved_contexts)
        verdicts = await evaluate_statements_detailed(context, statements, judge)

        faithful = sum(1 for v in verdicts if v.verdict == 1)
        score = safe_ratio(faithful, len(verdicts))
        return score, [v.model_dump() for v in verdicts]

    return create_scorer(NAME, DESCRIPTION, fn)

"""Answer correctness -- statement-level factuality blended with similarity.

Both the answer and the reference are decomposed into statements, the
answer statements are classified against the reference statements as
TP/FP/FN, and the F-beta score of that classification is averaged with
the embedding similarity of the two texts:

    score = (factuality * w_factuality + similarity * w_similarity)
            / (w_factuality + w_similarity)

The embedder is never called when the similarity weight is 0.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from loguru import logger

from arbiter.evaluation.aggregation import cosine_similarity, f_beta_score, weighted_average
from arbiter.evaluation.classification import classify_statements
from arbiter.evaluation.errors import ScorerInputError
from arbiter.evaluation.scorers.base import (
    Scorer,
    create_scorer,
    question_from_input,
    require_expected,
    require_single_turn,
)
from arbiter.evaluation.statements import decompose_into_statements
from arbiter.models.result import Classification, ScoreResult

if TYPE_CHECKING:
    from arbiter.adapters.base import BaseEmbedder, BaseJudge

NAME = "Answer Correctness"
DESCRIPTION = (
    "Evaluates answer correctness using statement-level classification "
    "(TP/FP/FN) and semantic similarity"
)

DEFAULT_WEIGHTS: tuple[float, float] = (0.75, 0.25)
DEFAULT_BETA = 1.0


def validate_options(weights: Sequence[float], beta: Any) -> tuple[float, float]:
    """Check weights and beta, returning the weights as a 2-tuple.

    Raises:
        ScorerInputError: On a malformed weight pair or a non-positive beta.
    """
    if len(weights) != 2:
        raise ScorerInputError(
            "Weights must be a pair of numbers: [factuality_weight, similarity_weight]"
        )
    if not all(w >= 0 for w in weights):
        raise ScorerInputError("Weights must be non-negative")
    if all(w == 0 for w in weights):
        raise ScorerInputError("At least one weight must be non-zero")
    if isinstance(beta, bool) or not isinstance(beta, (int, float)) or beta <= 0:
        raise ScorerInputError(
            "Beta must be a positive number. Beta > 1 favors recall, "
            "beta < 1 favors precision"
        )
    return (float(weights[0]), float(weights[1]))


def _require_embedder(
    weights: tuple[float, float], embedder: BaseEmbedder | None
) -> None:
    if weights[1] > 0 and embedder is None:
        raise ScorerInputError(
            "answer_correctness needs an embedder when the similarity weight is non-zero"
        )


async def _similarity(reference: str, answer: str, embedder: BaseEmbedder) -> float:
    result = await embedder.embed_many([reference, answer])
    embeddings = list(result.embeddings) + [None, None]
    reference_embedding, answer_embedding = embeddings[0], embeddings[1]
    if not reference_embedding or not answer_embedding:
        logger.warning("embedding missing for answer correctness; similarity is 0")
        return 0.0
    return cosine_similarity(reference_embedding, answer_embedding)


async def _score(
    question: str,
    answer: str,
    reference: str,
    judge: BaseJudge,
    embedder: BaseEmbedder | None,
    weights: tuple[float, float],
    beta: float,
) -> tuple[float, dict[str, Any]]:
    response_statements, reference_statements = await asyncio.gather(
        decompose_into_statements(question, answer, judge),
        decompose_into_statements(question, reference, judge),
    )

    classification = Classification()
    if response_statements and reference_statements:
        classification = await classify_statements(
            question, response_statements, reference_statements, judge
        )
        factuality_score = f_beta_score(classification, beta)
    elif not response_statements and not reference_statements:
        factuality_score = 1.0
    else:
        factuality_score = 0.0

    similarity_score = 0.0
    if weights[1] > 0 and embedder is not None:
        similarity_score = await _similarity(reference, answer, embedder)

    score = weighted_average((factuality_score, similarity_score), weights)

    metadata = {
        "classification": classification.model_dump(by_alias=True),
        "factuality_score": factuality_score,
        "similarity_score": similarity_score,
        "response_statements": response_statements,
        "reference_statements": reference_statements,
        "weights": list(weights),
        "beta": beta,
    }
    return score, metadata


async def score_answer_correctness(
    question: str,
    answer: str,
    reference: str,
    judge: BaseJudge,
    embedder: BaseEmbedder | None = None,
    weights: Sequence[float] = DEFAULT_WEIGHTS,
    beta: float = DEFAULT_BETA,
) -> ScoreResult:
    """Score *answer* against *reference* for the given *question*.

    Args:
        question: The question being answered.
        answer: The answer under evaluation.
        reference: A complete, accurate reference answer.
        judge: Judge capability for decomposition and classification.
        embedder: Embedding capability; only required when the similarity
            weight is non-zero.
        weights: ``(factuality_weight, similarity_weight)``, normalized by
            their sum.
        beta: F-beta parameter. Beta > 1 favors recall, beta < 1 favors
            precision.

    Raises:
        ScorerInputError: On invalid weights or beta, before any model call.
    """
    checked = validate_options(weights, beta)
    _require_embedder(checked, embedder)
    score, metadata = await _score(
        question, answer, reference, judge, embedder, checked, float(beta)
    )
    return ScoreResult(name=NAME, description=DESCRIPTION, score=score, metadata=metadata)


def answer_correctness(
    judge: BaseJudge,
    embedder: BaseEmbedder | None = None,
    weights: Sequence[float] = DEFAULT_WEIGHTS,
    beta: float = DEFAULT_BETA,
) -> Scorer:
    """Build an answer correctness scorer.

    The scorer reads the question from ``input``, the answer from
    ``output`` and the reference from ``expected["reference_answer"]``.
    Options are validated here, when the scorer is built.
    """
    checked = validate_options(weights, beta)
    _require_embedder(checked, embedder)

    async def fn(
        *, input: Any, output: Any, expected: Mapping[str, Any] | None
    ) -> tuple[float, dict[str, Any]]:
        answer = require_single_turn(output, NAME)
        reference = require_expected(expected, "reference_answer", NAME)
        question = question_from_input(input)
        return await _score(
            question, answer, reference, judge, embedder, checked, float(beta)
        )

    return create_scorer(NAME, DESCRIPTION, fn)

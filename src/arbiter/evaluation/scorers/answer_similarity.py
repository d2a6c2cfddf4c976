"""Answer similarity -- cosine similarity of answer and reference embeddings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger

from arbiter.evaluation.aggregation import cosine_similarity
from arbiter.evaluation.scorers.base import (
    Scorer,
    create_scorer,
    require_expected,
    require_single_turn,
)

if TYPE_CHECKING:
    from arbiter.adapters.base import BaseEmbedder

NAME = "Answer Similarity"
DESCRIPTION = "Evaluates the similarity of the model's response to the expected answer"


def answer_similarity(embedder: BaseEmbedder) -> Scorer:
    """Build an answer similarity scorer reading ``expected["reference_answer"]``."""

    async def fn(
        *, input: Any, output: Any, expected: Mapping[str, Any] | None
    ) -> float | tuple[float, str]:
        reference = require_expected(expected, "reference_answer", NAME)
        answer = require_single_turn(output, NAME)

        result = await embedder.embed_many([reference, answer])
        embeddings = list(result.embeddings) + [None, None]
        if not embeddings[0] or not embeddings[1]:
            logger.warning("embedding missing for answer similarity; score is 0")
            return 0.0

        score = cosine_similarity(embeddings[0], embeddings[1])
        return score, f"Answer similarity score: {score:.2f}"

    return create_scorer(NAME, DESCRIPTION, fn)

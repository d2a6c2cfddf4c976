"""Answer relevancy -- reverse-question generation plus embedding similarity.

The judge generates ``strictness`` questions the answer could be
responding to, flagging noncommittal answers. The score is the mean
cosine similarity between the original question and each generated
question, or 0 when every generation flags the answer as noncommittal.

Individual generations may fail without failing the scorer: failed
calls are logged and skipped.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger
from pydantic import BaseModel, Field

from arbiter.evaluation.aggregation import cosine_similarity
from arbiter.evaluation.errors import ScorerInputError
from arbiter.evaluation.outcome import JudgeOutcome, attempt
from arbiter.evaluation.prompt import PromptExample, PromptTemplate, render
from arbiter.evaluation.scorers.base import (
    Scorer,
    create_scorer,
    question_from_input,
    require_single_turn,
)

if TYPE_CHECKING:
    from arbiter.adapters.base import BaseEmbedder, BaseJudge

NAME = "Answer Relevancy"
DESCRIPTION = (
    "Evaluates how relevant the response is to the original question by "
    "generating hypothetical questions and computing semantic similarity"
)

DEFAULT_STRICTNESS = 3


class GeneratedQuestion(BaseModel):
    """Judge output for one reverse-question generation."""

    question: str = Field(
        description="A question that the given answer could be responding to"
    )
    noncommittal: Literal[0, 1] = Field(
        description="1 if the answer is noncommittal (evasive, vague, ambiguous), "
        "0 if committal"
    )


ANSWER_RELEVANCY_PROMPT = PromptTemplate(
    instructions=(
        "Generate a question for the given answer and identify if the answer is "
        "noncommittal. Give noncommittal as 1 if the answer is noncommittal and 0 "
        "if the answer is committal. A noncommittal answer is one that is evasive, "
        'vague, or ambiguous. For example, "I don\'t know" or "I\'m not sure" are '
        "noncommittal answers."
    ),
    examples=(
        PromptExample(
            input={"response": "Albert Einstein was born in Germany."},
            output={"question": "Where was Albert Einstein born?", "noncommittal": 0},
        ),
        PromptExample(
            input={
                "response": (
                    "I don't know about the groundbreaking feature of the smartphone "
                    "invented in 2023 as am unaware of information beyond 2022."
                )
            },
            output={
                "question": (
                    "What was the groundbreaking feature of the smartphone invented "
                    "in 2023?"
                ),
                "noncommittal": 1,
            },
        ),
    ),
    task=("response",),
)


def _empty_metadata(generated: list[str], all_noncommittal: bool) -> dict[str, Any]:
    return {
        "generated_questions": generated,
        "similarities": [],
        "all_noncommittal": all_noncommittal,
    }


async def _generate_question(answer: str, judge: BaseJudge) -> GeneratedQuestion:
    raw = await judge.generate_structured(
        GeneratedQuestion.model_json_schema(),
        render(ANSWER_RELEVANCY_PROMPT, response=answer),
    )
    return GeneratedQuestion.model_validate(raw)


def answer_relevancy(
    judge: BaseJudge,
    embedder: BaseEmbedder,
    strictness: int = DEFAULT_STRICTNESS,
) -> Scorer:
    """Build an answer relevancy scorer.

    The question is read from ``input``; ``output`` is the answer text.
    """
    if isinstance(strictness, bool) or not isinstance(strictness, int) or strictness < 1:
        raise ScorerInputError("strictness must be a positive integer")

    async def fn(
        *, input: Any, output: Any, expected: Mapping[str, Any] | None
    ) -> tuple[float, dict[str, Any]]:
        question = question_from_input(input)
        if not question.strip():
            raise ScorerInputError("Question must be a non-empty string")
        answer = require_single_turn(output, NAME)
        if not answer.strip():
            return 0.0, _empty_metadata([], False)

        outcomes: list[JudgeOutcome[GeneratedQuestion]] = await asyncio.gather(
            *(attempt(_generate_question(answer, judge)) for _ in range(strictness))
        )

        generated: list[str] = []
        noncommittal: list[bool] = []
        for i, outcome in enumerate(outcomes, start=1):
            if not outcome.ok:
                logger.warning(
                    "question generation {}/{} failed: {}", i, strictness, outcome.error
                )
                continue
            item = outcome.unwrap()
            if item.question.strip():
                generated.append(item.question.strip())
                noncommittal.append(item.noncommittal == 1)

        if not generated:
            return 0.0, _empty_metadata([], False)

        all_noncommittal = all(noncommittal)

        result = await embedder.embed_many([question, *generated])
        embeddings = list(result.embeddings)
        if len(embeddings) != len(generated) + 1 or not all(embeddings):
            logger.warning("embedding missing for answer relevancy; score is 0")
            return 0.0, _empty_metadata(generated, all_noncommittal)

        original, *others = embeddings
        similarities = [cosine_similarity(original, other) for other in others]
        mean = sum(similarities) / len(similarities)

        return (0.0 if all_noncommittal else mean), {
            "generated_questions": generated,
            "similarities": similarities,
            "all_noncommittal": all_noncommittal,
        }

    return create_scorer(NAME, DESCRIPTION, fn)

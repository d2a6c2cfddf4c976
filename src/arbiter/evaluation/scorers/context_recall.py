"""Context recall -- how much of the answer can be attributed to the contexts."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from arbiter.evaluation.aggregation import safe_ratio
from arbiter.evaluation.errors import JudgeOutputError, ScorerInputError
from arbiter.evaluation.prompt import PromptExample, PromptTemplate, render
from arbiter.evaluation.scorers.base import (
    Scorer,
    create_scorer,
    question_from_input,
    require_single_turn,
    require_string_list,
)

if TYPE_CHECKING:
    from arbiter.adapters.base import BaseJudge

NAME = "Context Recall"
DESCRIPTION = (
    "Estimates context recall by analyzing how much of the reference answer "
    "can be attributed to retrieved contexts"
)


class AttributedStatement(BaseModel):
    statement: str = Field(description="The statement from the answer")
    reason: str = Field(description="The reason for the attribution decision")
    attributed: int = Field(
        ge=0,
        le=1,
        description="Whether the statement can be attributed to the context (0 or 1)",
    )


class ContextRecallClassifications(BaseModel):
    """Judge output for context recall."""

    classifications: list[AttributedStatement]


_EINSTEIN_CONTEXT = (
    "Albert Einstein (14 March 1879 - 18 April 1955) was a German-born theoretical "
    "physicist, widely held to be one of the greatest and most influential "
    "scientists of all time. Best known for developing the theory of relativity, "
    "he also made important contributions to quantum mechanics. He received the "
    "1921 Nobel Prize in Physics 'for his services to theoretical physics, and "
    "especially for his discovery of the law of the photoelectric effect', a "
    "pivotal step in the development of quantum theory."
)

CONTEXT_RECALL_PROMPT = PromptTemplate(
    instructions=(
        "Given a context and an answer, analyze each sentence in the answer and "
        "classify if the sentence can be attributed to the given context or not. "
        "Use only 'Yes' (1) or 'No' (0) as a binary classification. Provide a "
        "reason for each classification. Output JSON following the required schema."
    ),
    examples=(
        PromptExample(
            input={
                "question": "What can you tell me about Albert Einstein?",
                "context": _EINSTEIN_CONTEXT,
                "answer": (
                    "Albert Einstein, born on 14 March 1879, was a German-born "
                    "theoretical physicist. He received the 1921 Nobel Prize in "
                    "Physics for his services to theoretical physics. He published "
                    "4 papers in 1905."
                ),
            },
            output={
                "classifications": [
                    {
                        "statement": "Albert Einstein, born on 14 March 1879, was a "
                        "German-born theoretical physicist.",
                        "reason": "The date of birth of Einstein is mentioned "
                        "clearly in the context.",
                        "attributed": 1,
                    },
                    {
                        "statement": "He received the 1921 Nobel Prize in Physics "
                        "for his services to theoretical physics.",
                        "reason": "The exact sentence is present in the given context.",
                        "attributed": 1,
                    },
                    {
                        "statement": "He published 4 papers in 1905.",
                        "reason": "There is no mention about papers he wrote in the "
                        "given context.",
                        "attributed": 0,
                    },
                ]
            },
        ),
    ),
    task=("question", "context", "answer"),
)


def context_recall(judge: BaseJudge) -> Scorer:
    """Build a context recall scorer reading ``expected["ground_truth"]``."""

    async def fn(
        *, input: Any, output: Any, expected: Mapping[str, Any] | None
    ) -> tuple[float, dict[str, Any]]:
        contexts = (expected or {}).get("ground_truth")
        if not contexts:
            raise ScorerInputError(
                "No ground truth provided or the ground truth is empty"
            )
        contexts = require_string_list(contexts, "ground_truth", NAME)
        answer = require_single_turn(output, NAME)

        raw = await judge.generate_structured(
            ContextRecallClassifications.model_json_schema(),
            render(
                CONTEXT_RECALL_PROMPT,
                question=question_from_input(input),
                context="\n".join(contexts),
                answer=answer,
            ),
        )
        classifications = ContextRecallClassifications.model_validate(raw).classifications
        if not classifications:
            raise JudgeOutputError("No classifications were found from the answer")

        attributed = sum(1 for c in classifications if c.attributed == 1)
        return safe_ratio(attributed, len(classifications)), {
            "classifications": [c.model_dump() for c in classifications],
            "reason": (
                f"{attributed} out of {len(classifications)} statements from the "
                "response were attributed to the retrieved contexts"
            ),
        }

    return create_scorer(NAME, DESCRIPTION, fn)

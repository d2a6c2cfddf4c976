"""TP/FP/FN classification of answer statements against a reference."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from pydantic import BaseModel

from arbiter.evaluation.prompt import PromptExample, PromptTemplate, render
from arbiter.models.result import Classification

if TYPE_CHECKING:
    from arbiter.adapters.base import BaseJudge


class ClassificationOutput(BaseModel):
    """Judge output wrapping a TP/FP/FN classification."""

    classification: Classification


CORRECTNESS_CLASSIFIER_PROMPT = PromptTemplate(
    instructions=(
        "Given a question, a set of statements from an answer, and a set of "
        "statements from the reference answer, classify each statement:\n\n"
        "- **TP (True Positive)**: Statements in the answer that are supported by "
        "or match the reference statements\n"
        "- **FP (False Positive)**: Statements in the answer that are NOT supported "
        "by the reference (hallucinations or incorrect information)\n"
        "- **FN (False Negative)**: Statements in the reference that are missing "
        "from the answer\n\n"
        "For each statement, provide the statement itself and a reason for the "
        "classification."
    ),
    examples=(
        PromptExample(
            input={
                "question": "What is the capital of France?",
                "answerStatements": [
                    "Paris is the capital of France.",
                    "Paris has many museums.",
                    "The Eiffel Tower is in London.",
                ],
                "referenceStatements": [
                    "Paris is the capital of France.",
                    "Paris is located in the north of France.",
                ],
            },
            output={
                "classification": {
                    "TP": [
                        {
                            "statement": "Paris is the capital of France.",
                            "reason": "This statement exactly matches a reference "
                            "statement and is factually correct.",
                        }
                    ],
                    "FP": [
                        {
                            "statement": "Paris has many museums.",
                            "reason": "While potentially true, this statement is not "
                            "mentioned in the reference answer.",
                        },
                        {
                            "statement": "The Eiffel Tower is in London.",
                            "reason": "This statement is factually incorrect. The "
                            "Eiffel Tower is in Paris, not London.",
                        },
                    ],
                    "FN": [
                        {
                            "statement": "Paris is located in the north of France.",
                            "reason": "This statement is in the reference but missing "
                            "from the answer.",
                        }
                    ],
                }
            },
        ),
        PromptExample(
            input={
                "question": "Who invented the telephone?",
                "answerStatements": [
                    "Alexander Graham Bell invented the telephone.",
                    "Alexander Graham Bell was a Scottish-born inventor.",
                ],
                "referenceStatements": [
                    "Alexander Graham Bell invented the telephone.",
                    "The telephone was patented in 1876.",
                ],
            },
            output={
                "classification": {
                    "TP": [
                        {
                            "statement": "Alexander Graham Bell invented the telephone.",
                            "reason": "This statement matches the reference statement "
                            "exactly.",
                        }
                    ],
                    "FP": [
                        {
                            "statement": "Alexander Graham Bell was a Scottish-born "
                            "inventor.",
                            "reason": "While factually correct, this information is "
                            "not present in the reference answer.",
                        }
                    ],
                    "FN": [
                        {
                            "statement": "The telephone was patented in 1876.",
                            "reason": "This statement is in the reference but not "
                            "mentioned in the answer.",
                        }
                    ],
                }
            },
        ),
    ),
    task=("question", "answerStatements", "referenceStatements"),
)


async def classify_statements(
    question: str,
    answer_statements: list[str],
    reference_statements: list[str],
    judge: BaseJudge,
) -> Classification:
    """Classify answer and reference statements into TP/FP/FN buckets.

    Callers only invoke this when both statement lists are non-empty.
    """
    raw = await judge.generate_structured(
        ClassificationOutput.model_json_schema(),
        render(
            CORRECTNESS_CLASSIFIER_PROMPT,
            question=question,
            answerStatements=answer_statements,
            referenceStatements=reference_statements,
        ),
    )
    classification = ClassificationOutput.model_validate(raw).classification
    logger.debug(
        "classified statements: TP={} FP={} FN={}",
        len(classification.true_positives),
        len(classification.false_positives),
        len(classification.false_negatives),
    )
    return classification

"""Statement decomposition and verdict evaluation.

These are the judge-facing primitives shared by the statement-level
scorers. Each call renders a fixed few-shot prompt, passes the JSON
schema of a pydantic output model to the judge, and validates the reply
back through the same model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from pydantic import BaseModel, Field

from arbiter.evaluation.errors import JudgeOutputError
from arbiter.evaluation.prompt import PromptExample, PromptTemplate, render
from arbiter.models.result import StatementVerdict

if TYPE_CHECKING:
    from arbiter.adapters.base import BaseJudge


class StatementList(BaseModel):
    """Judge output for statement decomposition."""

    statements: list[str] = Field(description="The generated statements")


class StatementVerdictList(BaseModel):
    """Judge output for detailed verdicts."""

    statements: list[StatementVerdict]


class SimpleVerdictList(BaseModel):
    """Judge output for verdicts without reasons."""

    verdicts: list[int] = Field(
        description="1 if the statement is supported by context, 0 otherwise, "
        "one entry per statement in order"
    )


GENERATE_STATEMENTS_PROMPT = PromptTemplate(
    instructions=(
        "Given a question and an answer, analyze the complexity of each sentence "
        "in the answer. Break down each sentence into one or more fully "
        "understandable statements. Ensure that no pronouns are used in any "
        "statement. Format the outputs in JSON."
    ),
    examples=(
        PromptExample(
            input={
                "question": "Who was Albert Einstein and what is he best known for?",
                "answer": (
                    "He was a German-born theoretical physicist, widely acknowledged "
                    "to be one of the greatest and most influential physicists of all "
                    "time. He was best known for developing the theory of relativity, "
                    "he also made important contributions to the development of the "
                    "theory of quantum mechanics."
                ),
            },
            output={
                "statements": [
                    "Albert Einstein was a German-born theoretical physicist.",
                    "Albert Einstein is recognized as one of the greatest and most "
                    "influential physicists of all time.",
                    "Albert Einstein was best known for developing the theory of "
                    "relativity.",
                    "Albert Einstein also made important contributions to the "
                    "development of the theory of quantum mechanics.",
                ]
            },
        ),
    ),
    task=("question", "answer"),
)

EVALUATE_STATEMENTS_PROMPT = PromptTemplate(
    instructions=(
        "Your task is to judge the faithfulness of a series of statements based on "
        "a given context. For each statement you must return verdict as 1 if the "
        "statement can be directly inferred based on the context or 0 if the "
        "statement can not be directly inferred based on the context."
    ),
    examples=(
        PromptExample(
            input={
                "context": (
                    "John is a student at XYZ University. He is pursuing a degree in "
                    "Computer Science. He is enrolled in several courses this "
                    "semester, including Data Structures, Algorithms, and Database "
                    "Management. John is a diligent student and spends a significant "
                    "amount of time studying and completing assignments. He often "
                    "stays late in the library to work on his projects."
                ),
                "statements": [
                    "John is majoring in Biology.",
                    "John is taking a course on Artificial Intelligence.",
                    "John is a dedicated student.",
                    "John has a part-time job.",
                ],
            },
            output={
                "statements": [
                    {
                        "statement": "John is majoring in Biology.",
                        "reason": "John's major is explicitly mentioned as Computer "
                        "Science. There is no information suggesting he is majoring "
                        "in Biology.",
                        "verdict": 0,
                    },
                    {
                        "statement": "John is taking a course on Artificial Intelligence.",
                        "reason": "The context mentions the courses John is currently "
                        "enrolled in, and Artificial Intelligence is not mentioned.",
                        "verdict": 0,
                    },
                    {
                        "statement": "John is a dedicated student.",
                        "reason": "The context states that he spends a significant "
                        "amount of time studying and often stays late in the library, "
                        "which implies dedication.",
                        "verdict": 1,
                    },
                    {
                        "statement": "John has a part-time job.",
                        "reason": "There is no information given in the context about "
                        "John having a part-time job.",
                        "verdict": 0,
                    },
                ]
            },
        ),
        PromptExample(
            input={
                "context": (
                    "Photosynthesis is a process used by plants, algae, and certain "
                    "bacteria to convert light energy into chemical energy."
                ),
                "statements": ["Albert Einstein was a genius."],
            },
            output={
                "statements": [
                    {
                        "statement": "Albert Einstein was a genius.",
                        "reason": "The context and statement are unrelated",
                        "verdict": 0,
                    }
                ]
            },
        ),
    ),
    task=("context", "statements"),
)

SIMPLE_NLI_PROMPT = PromptTemplate(
    instructions=(
        "Your task is to judge whether each statement can be directly inferred from "
        "the given context. Return 1 if the statement is supported by the context, "
        "or 0 if it is not. Return exactly one verdict per statement, in the same "
        "order. Only return the array of verdicts."
    ),
    examples=(
        PromptExample(
            input={
                "context": (
                    "John is a student at XYZ University pursuing a degree in "
                    "Computer Science."
                ),
                "statements": [
                    "John is majoring in Biology.",
                    "John is a student.",
                    "John studies at XYZ University.",
                ],
            },
            output={"verdicts": [0, 1, 1]},
        ),
    ),
    task=("context", "statements"),
)


def _check_length(kind: str, got: int, expected: int) -> None:
    if got != expected:
        raise JudgeOutputError(
            f"Judge returned {got} {kind} for {expected} statements"
        )


async def decompose_into_statements(
    question: str,
    text: str,
    judge: BaseJudge,
) -> list[str]:
    """Split *text* into atomic, pronoun-free statements.

    Returns the judge's list verbatim. An empty list is a valid result.
    """
    raw = await judge.generate_structured(
        StatementList.model_json_schema(),
        render(GENERATE_STATEMENTS_PROMPT, question=question, answer=text),
    )
    statements = StatementList.model_validate(raw).statements
    logger.debug("decomposed text into {} statements", len(statements))
    return statements


async def evaluate_statements_detailed(
    context: str,
    statements: list[str],
    judge: BaseJudge,
) -> list[StatementVerdict]:
    """Judge each statement against *context*, with a reason per verdict.

    Raises:
        JudgeOutputError: If the judge returns a different number of
            verdicts than statements.
    """
    if not statements:
        return []

    raw = await judge.generate_structured(
        StatementVerdictList.model_json_schema(),
        render(EVALUATE_STATEMENTS_PROMPT, context=context, statements=statements),
    )
    verdicts = StatementVerdictList.model_validate(raw).statements
    _check_length("verdicts", len(verdicts), len(statements))
    return verdicts


async def evaluate_statements_simple(
    context: str,
    statements: list[str],
    judge: BaseJudge,
) -> list[int]:
    """Judge each statement against *context*, returning 0/1 verdicts only.

    Raises:
        JudgeOutputError: If the judge returns a different number of
            verdicts than statements.
    """
    if not statements:
        return []

    raw = await judge.generate_structured(
        SimpleVerdictList.model_json_schema(),
        render(SIMPLE_NLI_PROMPT, context=context, statements=statements),
    )
    verdicts = SimpleVerdictList.model_validate(raw).verdicts
    _check_length("verdicts", len(verdicts), len(statements))
    return verdicts

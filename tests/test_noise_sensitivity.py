"""Tests for the noise sensitivity scorer and its pure score function."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from arbiter.evaluation.errors import JudgeOutputError, ScorerInputError
from arbiter.evaluation.scorers.noise_sensitivity import (
    compute_noise_sensitivity,
    noise_sensitivity,
)

QUESTION = "What is the Life Insurance Corporation of India known for?"
REFERENCE = "LIC is the largest insurance company in India."
ANSWER = "LIC is the largest insurer in India. LIC is based in Delhi."
RELEVANT_CONTEXT = "LIC is India's largest insurance company, founded in 1956."
NOISY_CONTEXT = "Some say LIC moved its headquarters to Delhi."

REFERENCE_STATEMENTS = ["LIC is the largest insurance company in India."]
ANSWER_STATEMENTS = ["LIC is the largest insurer in India.", "LIC is based in Delhi."]


def _make_judge(
    decompositions: dict[str, list[str]],
    verdicts: dict[tuple[str, tuple[str, ...]], list[int]],
) -> MagicMock:
    """Create a judge answering decompositions by text and NLI calls by
    (context, statements)."""

    async def route(schema: dict, prompt: str) -> dict:
        task = prompt.split("<task>", 1)[1]
        if schema["title"] == "StatementList":
            for text, statements in decompositions.items():
                if f"<answer>{text}</answer>" in task:
                    return {"statements": statements}
        if schema["title"] == "SimpleVerdictList":
            for (context, statements), result in verdicts.items():
                if (
                    f"<context>{context}</context>" in task
                    and f"<statements>{json.dumps(list(statements))}</statements>" in task
                ):
                    return {"verdicts": result}
        raise AssertionError(f"unexpected judge call: {schema['title']} {task}")

    judge = MagicMock()
    judge.generate_structured = AsyncMock(side_effect=route)
    return judge


def _make_scenario(reference_to_answer: list[int]) -> MagicMock:
    """One relevant and one noisy context; the noisy one backs statement 2."""
    ref = tuple(REFERENCE_STATEMENTS)
    ans = tuple(ANSWER_STATEMENTS)
    return _make_judge(
        {REFERENCE: REFERENCE_STATEMENTS, ANSWER: ANSWER_STATEMENTS},
        {
            (RELEVANT_CONTEXT, ref): [1],
            (RELEVANT_CONTEXT, ans): [1, 0],
            (NOISY_CONTEXT, ref): [0],
            (NOISY_CONTEXT, ans): [0, 1],
            (REFERENCE, ans): reference_to_answer,
        },
    )


def _expected() -> dict:
    return {
        "reference_answer": REFERENCE,
        "ground_truth": [RELEVANT_CONTEXT, NOISY_CONTEXT],
    }


class TestNoiseSensitivityScorer:
    @pytest.mark.asyncio
    async def test_all_statements_correct_scores_zero(self):
        scorer = noise_sensitivity(_make_scenario([1, 1]))
        result = await scorer(input=QUESTION, output=ANSWER, expected=_expected())
        assert result.score == 0.0
        assert result.metadata["incorrect_statements"] == []

    @pytest.mark.asyncio
    async def test_relevant_mode_counts_incorrect_relevant_support(self):
        scorer = noise_sensitivity(_make_scenario([0, 1]), mode="relevant")
        result = await scorer(input=QUESTION, output=ANSWER, expected=_expected())
        assert result.score == pytest.approx(0.5)
        assert result.metadata["relevant_context_indices"] == [0]
        assert result.metadata["irrelevant_context_indices"] == [1]
        assert result.metadata["incorrect_statements"] == [ANSWER_STATEMENTS[0]]
        assert result.metadata["mode"] == "relevant"

    @pytest.mark.asyncio
    async def test_irrelevant_mode_counts_noise_only_support(self):
        scorer = noise_sensitivity(_make_scenario([1, 0]), mode="irrelevant")
        result = await scorer(input=QUESTION, output=ANSWER, expected=_expected())
        assert result.score == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_irrelevant_mode_ignores_relevant_support(self):
        scorer = noise_sensitivity(_make_scenario([0, 1]), mode="irrelevant")
        result = await scorer(input=QUESTION, output=ANSWER, expected=_expected())
        assert result.score == 0.0

    @pytest.mark.asyncio
    async def test_metadata_matrices_are_context_major(self):
        scorer = noise_sensitivity(_make_scenario([0, 0]))
        result = await scorer(input=QUESTION, output=ANSWER, expected=_expected())
        assert result.metadata["retrieved_to_ground_truth"] == [[True], [False]]
        assert result.metadata["retrieved_to_answer"] == [[True, False], [False, True]]
        assert result.metadata["ground_truth_to_answer"] == [False, False]

    @pytest.mark.asyncio
    async def test_empty_reference_decomposition_raises(self):
        judge = _make_judge({REFERENCE: [], ANSWER: ANSWER_STATEMENTS}, {})
        with pytest.raises(JudgeOutputError, match="reference"):
            await noise_sensitivity(judge)(
                input=QUESTION, output=ANSWER, expected=_expected()
            )

    @pytest.mark.asyncio
    async def test_empty_contexts_raise_before_judge(self):
        judge = _make_judge({}, {})
        scorer = noise_sensitivity(judge)
        with pytest.raises(ScorerInputError, match="ground_truth"):
            await scorer(
                input=QUESTION,
                output=ANSWER,
                expected={"reference_answer": REFERENCE, "ground_truth": []},
            )
        judge.generate_structured.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("contexts", ["a single passage", ["ok", 3]])
    async def test_contexts_must_be_a_list_of_strings(self, contexts):
        judge = _make_judge({}, {})
        with pytest.raises(ScorerInputError, match="list of strings"):
            await noise_sensitivity(judge)(
                input=QUESTION,
                output=ANSWER,
                expected={"reference_answer": REFERENCE, "ground_truth": contexts},
            )
        judge.generate_structured.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_reference_raises(self):
        scorer = noise_sensitivity(_make_judge({}, {}))
        with pytest.raises(ScorerInputError, match="reference_answer"):
            await scorer(input=QUESTION, output=ANSWER, expected={"ground_truth": ["c"]})

    def test_invalid_mode_rejected_at_build(self):
        with pytest.raises(ScorerInputError, match="Invalid mode"):
            noise_sensitivity(_make_judge({}, {}), mode="noisy")


class TestComputeNoiseSensitivity:
    def test_score_one_when_every_statement_wrong_and_relevant(self):
        breakdown = compute_noise_sensitivity(
            [[True, True]], [[True, True, True]], [False, False, False], "relevant"
        )
        assert breakdown.score == 1.0

    def test_context_supporting_nothing_is_irrelevant(self):
        breakdown = compute_noise_sensitivity(
            [[False], [True]], [[True], [False]], [False], "irrelevant"
        )
        assert breakdown.relevant_context_indices == [1]
        assert breakdown.irrelevant_context_indices == [0]
        assert breakdown.score == 1.0

    def test_statement_backed_by_both_kinds_is_not_irrelevant(self):
        breakdown = compute_noise_sensitivity(
            [[True], [False]], [[True], [True]], [False], "irrelevant"
        )
        assert breakdown.score == 0.0

    def test_no_answer_statements_scores_zero(self):
        assert compute_noise_sensitivity([[True]], [[]], [], "relevant").score == 0.0

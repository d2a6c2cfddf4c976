"""Tests for the answer correctness scorer."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from arbiter.adapters.base import EmbeddingResult
from arbiter.evaluation.errors import ScorerInputError
from arbiter.evaluation.scorers.answer_correctness import (
    answer_correctness,
    score_answer_correctness,
)

QUESTION = "What is the capital of France?"
ANSWER = "Paris is the capital of France and has 50 million people."
REFERENCE = "Paris is the capital of France."


def _task_section(prompt: str) -> str:
    return prompt.split("<task>", 1)[1]


def _make_judge(
    decompositions: dict[str, list[str]],
    classification: dict | None = None,
) -> MagicMock:
    """Create a judge routing on the output schema and the task text."""

    async def route(schema: dict, prompt: str) -> dict:
        if schema["title"] == "StatementList":
            task = _task_section(prompt)
            for text, statements in decompositions.items():
                if f"<answer>{text}</answer>" in task:
                    return {"statements": statements}
            raise AssertionError(f"unexpected decomposition prompt: {task}")
        if schema["title"] == "ClassificationOutput":
            return {"classification": classification or {"TP": [], "FP": [], "FN": []}}
        raise AssertionError(f"unexpected schema {schema['title']}")

    judge = MagicMock()
    judge.generate_structured = AsyncMock(side_effect=route)
    return judge


def _make_embedder(*vectors: list[float] | None) -> MagicMock:
    embedder = MagicMock()
    embedder.embed_many = AsyncMock(return_value=EmbeddingResult(embeddings=list(vectors)))
    return embedder


def _stmt(text: str) -> dict:
    return {"statement": text, "reason": "r"}


class TestAnswerCorrectnessScorer:
    @pytest.mark.asyncio
    async def test_identical_answer_scores_one(self):
        judge = _make_judge(
            {REFERENCE: ["Paris is the capital of France."]},
            {"TP": [_stmt("Paris is the capital of France.")], "FP": [], "FN": []},
        )
        scorer = answer_correctness(judge, _make_embedder([0.3, 0.4], [0.3, 0.4]))
        result = await scorer(
            input=QUESTION, output=REFERENCE, expected={"reference_answer": REFERENCE}
        )
        assert result.name == "Answer Correctness"
        assert result.score == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_blends_factuality_and_similarity(self):
        judge = _make_judge(
            {
                ANSWER: ["Paris is the capital of France.", "Paris has 50 million people."],
                REFERENCE: ["Paris is the capital of France."],
            },
            {
                "TP": [_stmt("Paris is the capital of France.")],
                "FP": [_stmt("Paris has 50 million people.")],
                "FN": [],
            },
        )
        scorer = answer_correctness(judge, _make_embedder([1.0, 0.0], [1.0, 0.0]))
        result = await scorer(
            input=QUESTION, output=ANSWER, expected={"reference_answer": REFERENCE}
        )
        # factuality = F1(p=0.5, r=1.0) = 2/3, similarity = 1.0
        assert result.metadata["factuality_score"] == pytest.approx(2 / 3)
        assert result.metadata["similarity_score"] == pytest.approx(1.0)
        assert result.score == pytest.approx(0.75 * (2 / 3) + 0.25)
        assert set(result.metadata["classification"]) == {"TP", "FP", "FN"}

    @pytest.mark.asyncio
    async def test_zero_similarity_weight_skips_embedder(self):
        judge = _make_judge(
            {ANSWER: ["a"], REFERENCE: ["a"]},
            {"TP": [_stmt("a")], "FP": [], "FN": []},
        )
        embedder = _make_embedder([1.0], [1.0])
        scorer = answer_correctness(judge, embedder, weights=[1.0, 0.0])
        result = await scorer(
            input=QUESTION, output=ANSWER, expected={"reference_answer": REFERENCE}
        )
        assert result.score == pytest.approx(1.0)
        embedder.embed_many.assert_not_called()

    @pytest.mark.asyncio
    async def test_zero_similarity_weight_needs_no_embedder(self):
        judge = _make_judge({ANSWER: ["a"], REFERENCE: ["a"]}, {"TP": [_stmt("a")]})
        scorer = answer_correctness(judge, None, weights=[1.0, 0.0])
        result = await scorer(
            input=QUESTION, output=ANSWER, expected={"reference_answer": REFERENCE}
        )
        assert result.score == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_both_decompositions_empty_is_full_factuality(self):
        judge = _make_judge({ANSWER: [], REFERENCE: []})
        scorer = answer_correctness(judge, None, weights=[1.0, 0.0])
        result = await scorer(
            input=QUESTION, output=ANSWER, expected={"reference_answer": REFERENCE}
        )
        assert result.score == 1.0
        titles = [c.args[0]["title"] for c in judge.generate_structured.call_args_list]
        assert "ClassificationOutput" not in titles

    @pytest.mark.asyncio
    async def test_one_decomposition_empty_is_zero_factuality(self):
        judge = _make_judge({ANSWER: [], REFERENCE: ["Paris is the capital."]})
        scorer = answer_correctness(judge, None, weights=[1.0, 0.0])
        result = await scorer(
            input=QUESTION, output=ANSWER, expected={"reference_answer": REFERENCE}
        )
        assert result.score == 0.0

    @pytest.mark.asyncio
    async def test_missing_embedding_counts_as_zero_similarity(self):
        judge = _make_judge({ANSWER: ["a"], REFERENCE: ["a"]}, {"TP": [_stmt("a")]})
        scorer = answer_correctness(judge, _make_embedder(None, [1.0]))
        result = await scorer(
            input=QUESTION, output=ANSWER, expected={"reference_answer": REFERENCE}
        )
        assert result.metadata["similarity_score"] == 0.0
        assert result.score == pytest.approx(0.75)

    @pytest.mark.asyncio
    async def test_missing_reference_raises(self):
        scorer = answer_correctness(_make_judge({}), None, weights=[1.0, 0.0])
        with pytest.raises(ScorerInputError, match="reference_answer"):
            await scorer(input=QUESTION, output=ANSWER, expected={})

    @pytest.mark.asyncio
    async def test_multi_turn_output_raises(self):
        judge = _make_judge({})
        scorer = answer_correctness(judge, None, weights=[1.0, 0.0])
        with pytest.raises(ScorerInputError, match="multi-turn"):
            await scorer(
                input=QUESTION,
                output=[{"role": "assistant", "content": "Paris"}],
                expected={"reference_answer": REFERENCE},
            )
        judge.generate_structured.assert_not_called()


class TestAnswerCorrectnessOptions:
    @pytest.mark.parametrize(
        "weights",
        [[0.5], [0.2, 0.3, 0.5], [-0.1, 1.0], [0.0, 0.0]],
    )
    def test_invalid_weights_rejected_at_build(self, weights):
        with pytest.raises(ScorerInputError):
            answer_correctness(_make_judge({}), _make_embedder(), weights=weights)

    @pytest.mark.parametrize("beta", [0, -2.0, "1"])
    def test_invalid_beta_rejected_at_build(self, beta):
        with pytest.raises(ScorerInputError, match="Beta"):
            answer_correctness(_make_judge({}), _make_embedder(), beta=beta)

    def test_similarity_weight_requires_embedder(self):
        with pytest.raises(ScorerInputError, match="embedder"):
            answer_correctness(_make_judge({}), None)

    @pytest.mark.asyncio
    async def test_direct_call_validates_before_judge(self):
        judge = _make_judge({})
        with pytest.raises(ScorerInputError):
            await score_answer_correctness(
                QUESTION, ANSWER, REFERENCE, judge, None, weights=[0.0, 0.0]
            )
        judge.generate_structured.assert_not_called()

    @pytest.mark.asyncio
    async def test_direct_call_returns_score_result(self):
        judge = _make_judge({ANSWER: ["a"], REFERENCE: ["a"]}, {"TP": [_stmt("a")]})
        result = await score_answer_correctness(
            QUESTION, ANSWER, REFERENCE, judge, None, weights=[1.0, 0.0], beta=2.0
        )
        assert result.score == pytest.approx(1.0)
        assert result.metadata["beta"] == 2.0

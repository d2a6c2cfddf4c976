"""Tests for the faithfulness scorer."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from arbiter.evaluation.errors import JudgeOutputError, ScorerInputError
from arbiter.evaluation.scorers.faithfulness import faithfulness
from arbiter.models.sample import SingleTurnSample


def _make_judge(statements: list[str], verdicts: list[int]) -> MagicMock:
    """Judge that decomposes into *statements* and judges them with *verdicts*."""
    judge = MagicMock()
    judge.generate_structured = AsyncMock(
        side_effect=[
            {"statements": statements},
            {
                "statements": [
                    {"statement": s, "reason": "because", "verdict": v}
                    for s, v in zip(statements, verdicts)
                ]
            },
        ]
    )
    return judge


def _make_sample(contexts: list[str] | None = None) -> dict:
    return {
        "query": "Where and when was Einstein born?",
        "retrieved_contexts": (
            ["Albert Einstein was born in Ulm, Germany.", "He was born on 14 March 1879."]
            if contexts is None
            else contexts
        ),
    }


class TestFaithfulnessScorer:
    @pytest.mark.asyncio
    async def test_fraction_of_supported_statements(self):
        judge = _make_judge(["s1", "s2", "s3", "s4"], [1, 1, 0, 1])
        result = await faithfulness(judge)(
            input=_make_sample(), output="Einstein was born in Germany on 20 March 1879."
        )
        assert result.name == "Faithfulness"
        assert result.score == pytest.approx(0.75)
        assert [v["verdict"] for v in result.metadata] == [1, 1, 0, 1]
        assert result.metadata[0]["reason"] == "because"

    @pytest.mark.asyncio
    async def test_contexts_joined_with_newlines(self):
        judge = _make_judge(["s1"], [1])
        await faithfulness(judge)(input=_make_sample(), output="answer")
        prompt = judge.generate_structured.call_args_list[1].args[1]
        assert (
            "<context>Albert Einstein was born in Ulm, Germany.\n"
            "He was born on 14 March 1879.</context>"
        ) in prompt

    @pytest.mark.asyncio
    async def test_accepts_sample_model_and_camel_case(self):
        judge = _make_judge(["s1"], [0])
        sample = SingleTurnSample.model_validate(
            {"query": "q", "retrievedContexts": ["ctx"]}
        )
        result = await faithfulness(judge)(input=sample, output="answer")
        assert result.score == 0.0

    @pytest.mark.asyncio
    async def test_zero_statements_raises(self):
        judge = MagicMock()
        judge.generate_structured = AsyncMock(return_value={"statements": []})
        with pytest.raises(JudgeOutputError, match="No statements"):
            await faithfulness(judge)(input=_make_sample(), output="answer")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("contexts", [[], None])
    async def test_missing_contexts_raise_before_judge(self, contexts):
        judge = _make_judge([], [])
        sample = {"query": "q", "retrieved_contexts": contexts}
        with pytest.raises(ScorerInputError, match="retrieved contexts"):
            await faithfulness(judge)(input=sample, output="answer")
        judge.generate_structured.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_sample_input_raises(self):
        with pytest.raises(ScorerInputError, match="single-turn sample"):
            await faithfulness(_make_judge([], []))(input="just a question", output="a")

    @pytest.mark.asyncio
    async def test_unknown_sample_field_raises(self):
        sample = {**_make_sample(), "contexts": ["typo"]}
        with pytest.raises(ScorerInputError, match="invalid sample"):
            await faithfulness(_make_judge([], []))(input=sample, output="a")

    @pytest.mark.asyncio
    async def test_multi_turn_output_raises(self):
        with pytest.raises(ScorerInputError, match="multi-turn"):
            await faithfulness(_make_judge([], []))(
                input=_make_sample(), output=[{"role": "assistant", "content": "hi"}]
            )

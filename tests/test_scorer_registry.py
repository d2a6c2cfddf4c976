"""Tests for building scorers from case-file configs."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from pydantic import TypeAdapter

from arbiter.evaluation.errors import ScorerInputError
from arbiter.evaluation.scorers import SCORER_REGISTRY, build_scorer
from arbiter.models.scorer_config import ScorerConfig

_scorer_config = TypeAdapter(ScorerConfig)

EXPECTED_NAMES = {
    "answer_correctness": "Answer Correctness",
    "faithfulness": "Faithfulness",
    "noise_sensitivity": "Noise Sensitivity",
    "tool_call_accuracy": "Tool Call Accuracy",
    "answer_similarity": "Answer Similarity",
    "answer_relevancy": "Answer Relevancy",
    "context_recall": "Context Recall",
    "exact_match": "Exact Match",
    "contains": "Contains",
}


def _config(**values):
    return _scorer_config.validate_python(values)


class TestBuildScorer:
    def test_registry_covers_every_kind(self):
        assert set(SCORER_REGISTRY) == set(EXPECTED_NAMES)

    @pytest.mark.parametrize("kind", sorted(EXPECTED_NAMES))
    def test_builds_each_kind(self, kind):
        scorer = build_scorer(_config(kind=kind), judge=MagicMock(), embedder=MagicMock())
        assert scorer.display_name == EXPECTED_NAMES[kind]

    @pytest.mark.parametrize(
        "kind", ["faithfulness", "noise_sensitivity", "context_recall", "answer_relevancy"]
    )
    def test_missing_judge(self, kind):
        with pytest.raises(ValueError, match="requires a judge"):
            build_scorer(_config(kind=kind), embedder=MagicMock())

    @pytest.mark.parametrize("kind", ["answer_similarity", "answer_relevancy"])
    def test_missing_embedder(self, kind):
        with pytest.raises(ValueError, match="requires an embedder"):
            build_scorer(_config(kind=kind), judge=MagicMock())

    def test_answer_correctness_embedder_depends_on_weights(self):
        with pytest.raises(ValueError, match="embedder"):
            build_scorer(_config(kind="answer_correctness"), judge=MagicMock())
        scorer = build_scorer(
            _config(kind="answer_correctness", weights=[1.0, 0.0]), judge=MagicMock()
        )
        assert scorer.display_name == "Answer Correctness"

    def test_string_scorers_need_no_capabilities(self):
        assert build_scorer(_config(kind="exact_match")).display_name == "Exact Match"

    def test_invalid_options_fail_at_build_time(self):
        with pytest.raises(ScorerInputError, match="Invalid mode"):
            build_scorer(_config(kind="tool_call_accuracy", mode="fuzzy"))
        with pytest.raises(ScorerInputError, match="Unknown tool call accuracy weight"):
            build_scorer(_config(kind="tool_call_accuracy", weights={"bonus": 1.0}))
        with pytest.raises(ScorerInputError):
            build_scorer(_config(kind="noise_sensitivity", mode="noisy"), judge=MagicMock())

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown scorer kind 'bleu'"):
            build_scorer(SimpleNamespace(kind="bleu"))

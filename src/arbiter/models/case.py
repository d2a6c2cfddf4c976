"""Case file models for scoring outputs from the command line.

A case file lists the scorers to apply and the cases to score. Each case
supplies the ``input``, ``output`` and ``expected`` values passed to every
scorer.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from arbiter.models.scorer_config import ScorerConfig


class ScoreCase(BaseModel):
    """One input/output/expected triple to score."""

    model_config = {"extra": "forbid"}

    name: str | None = None
    input: Any = None
    output: Any
    expected: dict[str, Any] | None = None


class CaseFile(BaseModel):
    """A complete case file loaded from YAML."""

    model_config = {"extra": "forbid"}

    description: str = ""
    scorers: list[ScorerConfig] = Field(min_length=1)
    cases: list[ScoreCase] = Field(min_length=1)

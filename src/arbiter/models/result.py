"""Result data models for scorer outputs.

These models encode the scoring output contract: the universal
ScoreResult plus the statement-level structures judges return.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ClassifiedStatement(BaseModel):
    """A statement placed in a TP/FP/FN bucket, with the judge's reason."""

    statement: str
    reason: str = ""


class Classification(BaseModel):
    """True positive / false positive / false negative statement buckets.

    The judge is responsible for partitioning statements; nothing here
    enforces that every statement lands in exactly one bucket.
    """

    model_config = ConfigDict(populate_by_name=True)

    true_positives: list[ClassifiedStatement] = Field(default_factory=list, alias="TP")
    false_positives: list[ClassifiedStatement] = Field(default_factory=list, alias="FP")
    false_negatives: list[ClassifiedStatement] = Field(default_factory=list, alias="FN")


class StatementVerdict(BaseModel):
    """Whether a statement can be inferred from a context (1) or not (0)."""

    statement: str
    reason: str = ""
    verdict: int = Field(ge=0, le=1)


class ScoreResult(BaseModel):
    """Output of a single scorer invocation."""

    name: str
    description: str = ""
    score: float
    metadata: Any = None

"""Arbiter data models -- samples, transcripts, results, configs, and case files."""

from arbiter.models.case import CaseFile, ScoreCase
from arbiter.models.config import ProjectConfig
from arbiter.models.result import (
    Classification,
    ClassifiedStatement,
    ScoreResult,
    StatementVerdict,
)
from arbiter.models.sample import ModelMessage, SingleTurnSample, ToolCall

__all__ = [
    "CaseFile",
    "Classification",
    "ClassifiedStatement",
    "ModelMessage",
    "ProjectConfig",
    "ScoreCase",
    "ScoreResult",
    "SingleTurnSample",
    "StatementVerdict",
    "ToolCall",
]

"""Case file loading: YAML parsing followed by CaseFile validation.

Every problem found is returned as a ValidationErrorDetail carrying the
source position of the offending key, so a file's errors can be
reported together.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from arbiter.loader.yaml_parser import YAMLParseError, parse_yaml_with_positions
from arbiter.models.case import CaseFile, ScoreCase
from arbiter.models.scorer_config import (
    AnswerCorrectnessConfig,
    AnswerRelevancyConfig,
    NoiseSensitivityConfig,
    ToolCallAccuracyConfig,
)

# Field names offered as "did you mean" suggestions for unknown keys
KNOWN_FIELDS: list[str] = sorted(
    set(CaseFile.model_fields)
    | set(ScoreCase.model_fields)
    | set(AnswerCorrectnessConfig.model_fields)
    | set(AnswerRelevancyConfig.model_fields)
    | set(NoiseSensitivityConfig.model_fields)
    | set(ToolCallAccuracyConfig.model_fields)
)


@dataclass
class ValidationErrorDetail:
    """A single case-file problem.

    Attributes:
        field: Dotted path of the offending value, or ``<yaml>``.
        message: Human-readable description.
        type: Pydantic error type, or a loader type such as
            ``yaml_syntax_error``.
        line: 1-indexed source line, when known.
        col: 1-indexed source column, when known.
        suggestion: A "Did you mean ...?" hint for unknown keys.
    """

    field: str
    message: str
    type: str
    line: int | None = None
    col: int | None = None
    suggestion: str | None = None
    input_value: Any = field(default=None)


def _position(path: str, positions: dict[str, tuple[int, int]]) -> tuple[int | None, int | None]:
    parts = path.split(".")
    while parts:
        found = positions.get(".".join(parts))
        if found is not None:
            return found
        parts.pop()
    return None, None


def _suggest(name: str) -> str | None:
    matches = difflib.get_close_matches(name, KNOWN_FIELDS, n=1, cutoff=0.6)
    return f"Did you mean '{matches[0]}'?" if matches else None


def validate_case_data(
    raw: dict[str, Any], positions: dict[str, tuple[int, int]]
) -> tuple[CaseFile | None, list[ValidationErrorDetail]]:
    """Validate parsed YAML against CaseFile.

    Returns:
        ``(case_file, [])`` on success, ``(None, errors)`` otherwise.
    """
    try:
        return CaseFile.model_validate(raw), []
    except ValidationError as exc:
        errors: list[ValidationErrorDetail] = []
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ())]
            # scorers.<i>.<kind>.<field>: the union tag is not a YAML key
            if len(loc) > 3 and loc[0] == "scorers":
                del loc[2]
            path = ".".join(loc)
            error_type = err.get("type", "unknown")
            lookup = f"{path}.kind" if error_type.startswith("union_tag") else path
            line, col = _position(lookup, positions)
            suggestion = _suggest(loc[-1]) if error_type == "extra_forbidden" and loc else None
            errors.append(
                ValidationErrorDetail(
                    field=path,
                    message=err.get("msg", "Validation error"),
                    type=error_type,
                    line=line,
                    col=col,
                    suggestion=suggestion,
                    input_value=err.get("input"),
                )
            )
        return None, errors


def load_case_string(
    source: str, filename: str = "<string>"
) -> tuple[CaseFile | None, list[ValidationErrorDetail]]:
    """Parse and validate a case file held in a string."""
    try:
        raw, positions = parse_yaml_with_positions(source, filename=filename)
    except YAMLParseError as exc:
        return None, [
            ValidationErrorDetail(
                field="<yaml>",
                message=exc.message,
                type="yaml_syntax_error",
                line=exc.line,
                col=exc.column,
            )
        ]

    if raw is None:
        return None, [
            ValidationErrorDetail(
                field="<yaml>",
                message="Input is empty or is not a mapping",
                type="empty_input",
            )
        ]
    return validate_case_data(raw, positions)


def load_case_file(path: Path) -> tuple[CaseFile | None, list[ValidationErrorDetail]]:
    """Parse and validate the case file at *path*.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    return load_case_string(path.read_text(encoding="utf-8"), filename=str(path))

"""Formatting of case-file validation errors for humans or CI logs.

Human mode prints an annotated snippet of the offending source line;
CI mode prints one ``file:line:col -- field: message`` line per error.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arbiter.loader.case_file import ValidationErrorDetail


ERROR_CODES: dict[str, str] = {
    "extra_forbidden": "E001",
    "missing": "E002",
    "value_error": "E003",
    "too_short": "E003",
    "greater_than_equal": "E003",
    "less_than_equal": "E003",
    "union_tag_invalid": "E005",
    "literal_error": "E005",
    "yaml_syntax_error": "E006",
    "empty_input": "E007",
}

ERROR_DESCRIPTIONS: dict[str, str] = {
    "E001": "unknown field",
    "E002": "required field missing",
    "E003": "invalid value",
    "E004": "type mismatch",
    "E005": "unknown scorer kind",
    "E006": "YAML syntax error",
    "E007": "empty input",
}


def error_code(error_type: str) -> str:
    """Map a pydantic or loader error type to a stable code."""
    if error_type in ERROR_CODES:
        return ERROR_CODES[error_type]
    if error_type.endswith(("_type", "_parsing")):
        return "E004"
    return "E999"


class ErrorFormatter:
    """Render ValidationErrorDetail lists.

    Args:
        ci_mode: Concise single-line output. ``None`` reads the ``CI``
            environment variable.
    """

    def __init__(self, ci_mode: bool | None = None) -> None:
        if ci_mode is None:
            ci_mode = os.environ.get("CI", "").lower() in ("true", "1", "yes")
        self.ci_mode = ci_mode

    def format_error(
        self, error: ValidationErrorDetail, source_lines: list[str], filename: str
    ) -> str:
        if self.ci_mode:
            hint = f" ({error.suggestion})" if error.suggestion else ""
            return (
                f"{filename}:{error.line or 0}:{error.col or 0} -- "
                f"{error.field}: {error.message}{hint}"
            )

        code = error_code(error.type)
        lines = [f"error[{code}]: {ERROR_DESCRIPTIONS.get(code, 'validation error')}"]
        if error.line is not None and 0 < error.line <= len(source_lines):
            number = str(error.line)
            gutter = " " * len(number)
            lines.append(f"  --> {filename}:{error.line}:{error.col or 1}")
            lines.append(f" {gutter} |")
            lines.append(f" {number} | {source_lines[error.line - 1].rstrip()}")
            lines.append(f" {gutter} | {error.field}: {error.message}")
        else:
            lines.append(f"  --> {filename}")
            lines.append(f"   | {error.field}: {error.message}")
        if error.suggestion:
            lines.append(f"   = help: {error.suggestion}")
        return "\n".join(lines)

    def format_all(
        self, errors: list[ValidationErrorDetail], source: str, filename: str
    ) -> str:
        source_lines = source.splitlines()
        return "\n\n".join(
            self.format_error(error, source_lines, filename) for error in errors
        )

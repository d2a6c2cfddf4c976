"""Arbiter case-file loader - parsing, validation, and error reporting."""

from arbiter.loader.case_file import (
    ValidationErrorDetail,
    load_case_file,
    load_case_string,
)
from arbiter.loader.errors import ErrorFormatter
from arbiter.loader.yaml_parser import YAMLParseError, parse_yaml_with_positions

__all__ = [
    "ErrorFormatter",
    "ValidationErrorDetail",
    "YAMLParseError",
    "load_case_file",
    "load_case_string",
    "parse_yaml_with_positions",
]

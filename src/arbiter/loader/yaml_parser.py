"""YAML parsing with key positions for case-file error reporting.

A SafeLoader subclass records the 1-indexed ``(line, column)`` of every
mapping key under its dotted path, with sequence items contributing
their index (``cases.0.expected``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


class YAMLParseError(Exception):
    """YAML syntax error with an optional source position."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        filename: str = "<string>",
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        super().__init__(message)


class PositionLoader(yaml.SafeLoader):
    """SafeLoader that fills ``positions`` while constructing the document."""

    def __init__(self, stream: str) -> None:
        super().__init__(stream)
        self.positions: dict[str, tuple[int, int]] = {}
        self._path: list[str] = []

    def _nested(self, segment: str, node: yaml.Node, deep: bool) -> Any:
        self._path.append(segment)
        try:
            return self.construct_object(node, deep=deep)
        finally:
            self._path.pop()

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        self.flatten_mapping(node)
        result: dict[Any, Any] = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=deep)
            if isinstance(key, str):
                mark = key_node.start_mark
                self.positions[".".join([*self._path, key])] = (
                    mark.line + 1,
                    mark.column + 1,
                )
                result[key] = self._nested(key, value_node, deep)
            else:
                result[key] = self.construct_object(value_node, deep=deep)
        return result

    def construct_sequence(self, node: yaml.SequenceNode, deep: bool = False) -> list[Any]:
        return [
            self._nested(str(index), child, deep)
            for index, child in enumerate(node.value)
        ]

    def construct_yaml_map(self, node: yaml.MappingNode) -> Any:
        yield self.construct_mapping(node, deep=True)

    def construct_yaml_seq(self, node: yaml.SequenceNode) -> Any:
        yield self.construct_sequence(node, deep=True)


PositionLoader.add_constructor("tag:yaml.org,2002:map", PositionLoader.construct_yaml_map)
PositionLoader.add_constructor("tag:yaml.org,2002:seq", PositionLoader.construct_yaml_seq)


def parse_yaml_with_positions(
    source: str, filename: str = "<string>"
) -> tuple[dict[str, Any] | None, dict[str, tuple[int, int]]]:
    """Parse *source*, returning ``(data, positions)``.

    Returns ``(None, {})`` when the document is empty or is not a mapping.

    Raises:
        YAMLParseError: On a syntax error.
    """
    loader = PositionLoader(source)
    try:
        data = loader.get_single_data()
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        raise YAMLParseError(
            message=str(exc),
            line=mark.line + 1 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
            filename=filename,
        ) from exc
    finally:
        loader.dispose()

    if not isinstance(data, dict):
        return None, {}
    return data, loader.positions


def parse_yaml_file(path: Path) -> tuple[dict[str, Any] | None, dict[str, tuple[int, int]]]:
    """Read and parse a YAML file with key positions."""
    return parse_yaml_with_positions(path.read_text(encoding="utf-8"), filename=str(path))

"""Prompt templates for judge calls.

A PromptTemplate is a value: instructions, few-shot examples, and the
list of task fields the caller must supply. ``render`` turns a template
plus task values into the prompt string, using XML-style sections:

    <instructions>...</instructions>
    <examples><example index="0"><input>...</input><output>{json}</output></example></examples>
    <task><field>...</field></task>

Strings are inserted verbatim; every other value is serialized as JSON.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PromptExample:
    """A single few-shot example: task-shaped input and the expected JSON."""

    input: dict[str, Any]
    output: dict[str, Any]


@dataclass(frozen=True)
class PromptTemplate:
    """Instructions, few-shot examples, and required task fields."""

    instructions: str
    examples: tuple[PromptExample, ...] = ()
    task: tuple[str, ...] = ()

    def required_fields(self) -> set[str]:
        """Return every key render() needs."""
        return set(self.task)


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False)


def _fields_to_xml(values: dict[str, Any]) -> str:
    return "".join(f"<{key}>{_format_value(value)}</{key}>" for key, value in values.items())


def render(template: PromptTemplate, **values: Any) -> str:
    """Render *template* with the given task values.

    Raises:
        KeyError: If a task field has no value.
    """
    missing = template.required_fields() - values.keys()
    if missing:
        raise KeyError(f"Missing prompt values: {sorted(missing)}")

    sections = [f"<instructions>{template.instructions}</instructions>"]

    if template.examples:
        rendered = "".join(
            f'\n<example index="{index}">'
            f"<input>{_fields_to_xml(example.input)}</input>"
            f"<output>{json.dumps(example.output, ensure_ascii=False)}</output>"
            f"</example>"
            for index, example in enumerate(template.examples)
        )
        sections.append(f"<examples>{rendered}\n</examples>")

    if template.task:
        task_values = {key: values[key] for key in template.task}
        sections.append(f"<task>{_fields_to_xml(task_values)}</task>")

    return "\n\n".join(sections)

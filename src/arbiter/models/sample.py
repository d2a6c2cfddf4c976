"""Sample and transcript models for scorer inputs.

A single-turn output is a plain string. A multi-turn output is a list of
role-tagged messages whose content is either a string or a list of parts
(text, tool calls, tool results). Camel-case keys (``toolName``,
``retrievedContexts``) are accepted so transcripts exported by other
tooling validate unchanged.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Discriminator, Field, Tag


class ToolCall(BaseModel):
    """Normalized view of a single function invocation."""

    model_config = ConfigDict(populate_by_name=True)

    tool_name: str = Field(validation_alias=AliasChoices("tool_name", "toolName"))
    input: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("input", "args", "arguments")
    )


class TextPart(BaseModel):
    """Plain text content inside a message."""

    type: Literal["text"] = "text"
    text: str


class ToolCallPart(BaseModel):
    """A tool invocation emitted by the assistant."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str | None = Field(
        default=None, validation_alias=AliasChoices("tool_call_id", "toolCallId")
    )
    tool_name: str = Field(validation_alias=AliasChoices("tool_name", "toolName"))
    input: Any = Field(
        default=None, validation_alias=AliasChoices("input", "args", "arguments")
    )


class ToolResultPart(BaseModel):
    """The result of a tool invocation, fed back to the model."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["tool-result"] = "tool-result"
    tool_call_id: str | None = Field(
        default=None, validation_alias=AliasChoices("tool_call_id", "toolCallId")
    )
    tool_name: str | None = Field(
        default=None, validation_alias=AliasChoices("tool_name", "toolName")
    )
    output: Any = Field(
        default=None, validation_alias=AliasChoices("output", "result")
    )


class OtherPart(BaseModel):
    """Any other part type (reasoning, file, image, ...), kept but not scored."""

    model_config = ConfigDict(extra="allow")

    type: str


_KNOWN_PART_TYPES = frozenset({"text", "tool-call", "tool-result"})


def _part_tag(value: Any) -> str:
    if isinstance(value, dict):
        part_type = value.get("type")
    else:
        part_type = getattr(value, "type", None)
    return part_type if part_type in _KNOWN_PART_TYPES else "other"


MessagePart = Annotated[
    Union[
        Annotated[TextPart, Tag("text")],
        Annotated[ToolCallPart, Tag("tool-call")],
        Annotated[ToolResultPart, Tag("tool-result")],
        Annotated[OtherPart, Tag("other")],
    ],
    Discriminator(_part_tag),
]


class ModelMessage(BaseModel):
    """A single role-tagged message in a multi-turn transcript."""

    role: Literal["system", "user", "assistant", "tool"]
    content: str | list[MessagePart] = ""


class SingleTurnSample(BaseModel):
    """A question with the contexts retrieved to answer it."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    query: str
    retrieved_contexts: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("retrieved_contexts", "retrievedContexts"),
    )
    reference: str | None = None


def is_single_turn_output(output: Any) -> bool:
    """Return True if *output* is a plain string answer."""
    return isinstance(output, str)


def is_multi_turn_output(output: Any) -> bool:
    """Return True if *output* is a list of conversation messages."""
    return isinstance(output, list)


def to_messages(output: list[Any]) -> list[ModelMessage]:
    """Validate a multi-turn output into ModelMessage instances.

    Accepts already-built ModelMessage objects or plain dicts.
    """
    return [ModelMessage.model_validate(m) for m in output]


def extract_tool_calls(output: list[Any]) -> list[ToolCall]:
    """Flatten every tool-call part of every assistant message, in order."""
    calls: list[ToolCall] = []
    for message in to_messages(output):
        if message.role != "assistant" or isinstance(message.content, str):
            continue
        for part in message.content:
            if isinstance(part, ToolCallPart):
                calls.append(
                    ToolCall(
                        tool_name=part.tool_name,
                        input=part.input if isinstance(part.input, dict) else None,
                    )
                )
    return calls

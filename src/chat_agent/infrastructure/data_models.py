"""
Shared data models.

Conversation entries are a tagged union on ``role``. Every entry renders to the
chat-completions wire format with ``message_to_dict`` and is parsed back with
``message_from_dict``.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Literal, Union


@dataclass(frozen=True)
class FunctionCall:
    name: str
    arguments: str  # JSON-encoded, exactly as emitted by the model


@dataclass(frozen=True)
class ToolCall:
    id: str
    function: FunctionCall
    type: str = "function"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "function": {"name": self.function.name, "arguments": self.function.arguments},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolCall:
        function = data.get("function") or {}
        return cls(
            id=data["id"],
            function=FunctionCall(
                name=function.get("name", ""),
                arguments=function.get("arguments") or "{}",
            ),
            type=data.get("type", "function"),
        )


@dataclass(frozen=True)
class SystemMessage:
    content: str
    name: str | None = None
    role: Literal["system"] = field(default="system", init=False)


@dataclass(frozen=True)
class UserMessage:
    content: str
    name: str | None = None
    role: Literal["user"] = field(default="user", init=False)


@dataclass(frozen=True)
class AssistantMessage:
    content: str | None = None
    name: str | None = None
    tool_calls: tuple[ToolCall, ...] | None = None
    role: Literal["assistant"] = field(default="assistant", init=False)


@dataclass(frozen=True)
class ToolMessage:
    content: str
    tool_call_id: str
    role: Literal["tool"] = field(default="tool", init=False)


Message = Union[SystemMessage, UserMessage, AssistantMessage, ToolMessage]

# Handlers receive the parsed tool arguments as keyword arguments
ToolHandler = Callable[..., Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str = ""
    parameters: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []}
    )

    def to_dict(self) -> dict[str, Any]:
        """Render the chat-completions ``tools`` entry for this definition."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolDefinition:
        """Accept either the wire form (``{"type", "function": {...}}``) or the flat form."""
        function = data.get("function", data)
        if not function.get("name"):
            raise ValueError("Tool definition has no name")
        return cls(
            name=function["name"],
            description=function.get("description", ""),
            parameters=function.get("parameters") or {"type": "object", "properties": {}},
        )


def message_to_dict(message: Message) -> dict[str, Any]:
    """Convert a message to its chat-completions wire dict."""
    data: dict[str, Any] = {"role": message.role, "content": message.content}
    if isinstance(message, ToolMessage):
        data["tool_call_id"] = message.tool_call_id
        return data
    if message.name:
        data["name"] = message.name
    if isinstance(message, AssistantMessage) and message.tool_calls:
        data["tool_calls"] = [tool_call.to_dict() for tool_call in message.tool_calls]
    return data


def message_from_dict(data: dict[str, Any]) -> Message:
    """
    Parse a wire dict into a message.

    Raises:
        ValueError: If the role is missing or unknown, or a tool message has no
            tool_call_id.
    """
    role = data.get("role")
    if role == "system":
        return SystemMessage(content=data.get("content") or "", name=data.get("name"))
    if role == "user":
        return UserMessage(content=data.get("content") or "", name=data.get("name"))
    if role == "assistant":
        raw_calls = data.get("tool_calls") or []
        tool_calls = tuple(ToolCall.from_dict(tc) for tc in raw_calls) or None
        return AssistantMessage(
            content=data.get("content"), name=data.get("name"), tool_calls=tool_calls
        )
    if role == "tool":
        if not data.get("tool_call_id"):
            raise ValueError("Tool message requires a tool_call_id")
        return ToolMessage(content=data.get("content") or "", tool_call_id=data["tool_call_id"])
    raise ValueError(f"Unknown message role: {role!r}")


def to_tool_message(result: Any, tool_call_id: str) -> ToolMessage:
    """Convert a tool handler's return value into a tool message answering `tool_call_id`."""
    if isinstance(result, ToolMessage):
        if result.tool_call_id == tool_call_id:
            return result
        return ToolMessage(content=result.content, tool_call_id=tool_call_id)
    if isinstance(result, str):
        return ToolMessage(content=result, tool_call_id=tool_call_id)
    if result is None:
        return ToolMessage(content="", tool_call_id=tool_call_id)
    return ToolMessage(content=json.dumps(result, default=str), tool_call_id=tool_call_id)


# -----------------------------
# Chat completion response helpers
# -----------------------------
def _first_choice(response: dict[str, Any]) -> dict[str, Any]:
    choices = response.get("choices") or []
    if not choices:
        raise ValueError("Chat completion response has no choices")
    return choices[0]


def completion_finish_reason(response: dict[str, Any]) -> str | None:
    return _first_choice(response).get("finish_reason")


def completion_message(response: dict[str, Any]) -> AssistantMessage:
    """Return the assistant message of ``choices[0]``."""
    message = dict(_first_choice(response).get("message") or {})
    message.setdefault("role", "assistant")
    parsed = message_from_dict(message)
    if not isinstance(parsed, AssistantMessage):
        raise ValueError(f"Expected an assistant message, got role {parsed.role!r}")
    return parsed


def completion_text(response: dict[str, Any]) -> str:
    """Return the displayable text of ``choices[0]`` (empty string when absent)."""
    return completion_message(response).content or ""

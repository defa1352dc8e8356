"""Tests for the message model and wire conversions."""

import pytest

from chat_agent.infrastructure.data_models import (
    AssistantMessage,
    FunctionCall,
    SystemMessage,
    ToolCall,
    ToolDefinition,
    ToolMessage,
    UserMessage,
    completion_finish_reason,
    completion_message,
    completion_text,
    message_from_dict,
    message_to_dict,
    to_tool_message,
)
from conftest import text_completion, tool_call_completion


def test_roles_are_fixed():
    assert SystemMessage("s").role == "system"
    assert UserMessage("u").role == "user"
    assert AssistantMessage("a").role == "assistant"
    assert ToolMessage("t", tool_call_id="c1").role == "tool"


def test_user_message_to_dict_includes_name_only_when_set():
    assert message_to_dict(UserMessage("hi")) == {"role": "user", "content": "hi"}
    assert message_to_dict(UserMessage("hi", name="U123")) == {
        "role": "user",
        "content": "hi",
        "name": "U123",
    }


def test_assistant_tool_calls_round_trip():
    message = AssistantMessage(
        tool_calls=(ToolCall(id="c1", function=FunctionCall("get_time", "{}")),)
    )
    data = message_to_dict(message)

    assert data["tool_calls"] == [
        {"id": "c1", "type": "function", "function": {"name": "get_time", "arguments": "{}"}}
    ]
    assert message_from_dict(data) == message


def test_tool_message_to_dict():
    assert message_to_dict(ToolMessage("12:00", tool_call_id="c1")) == {
        "role": "tool",
        "content": "12:00",
        "tool_call_id": "c1",
    }


def test_message_from_dict_rejects_unknown_role():
    with pytest.raises(ValueError):
        message_from_dict({"role": "narrator", "content": "x"})


def test_message_from_dict_requires_tool_call_id():
    with pytest.raises(ValueError):
        message_from_dict({"role": "tool", "content": "x"})


def test_tool_definition_wire_form():
    definition = ToolDefinition(name="get_time", description="Current time")
    wire = definition.to_dict()

    assert wire["type"] == "function"
    assert wire["function"]["name"] == "get_time"
    assert wire["function"]["parameters"]["type"] == "object"
    assert ToolDefinition.from_dict(wire) == definition


def test_tool_definition_from_flat_form():
    definition = ToolDefinition.from_dict({"name": "search", "description": "Search"})
    assert definition.name == "search"
    assert definition.parameters == {"type": "object", "properties": {}}


def test_tool_definition_requires_name():
    with pytest.raises(ValueError):
        ToolDefinition.from_dict({"type": "function", "function": {"description": "x"}})


@pytest.mark.parametrize(
    "result, expected",
    [
        ("plain", "plain"),
        (None, ""),
        ({"temp": 21}, '{"temp": 21}'),
        ([1, 2], "[1, 2]"),
    ],
)
def test_to_tool_message_converts_results(result, expected):
    message = to_tool_message(result, "c9")
    assert message.content == expected
    assert message.tool_call_id == "c9"


def test_to_tool_message_forces_call_id():
    message = to_tool_message(ToolMessage("x", tool_call_id="wrong"), "right")
    assert message == ToolMessage("x", tool_call_id="right")


def test_completion_helpers():
    response = text_completion("Hello")
    assert completion_finish_reason(response) == "stop"
    assert completion_text(response) == "Hello"

    tools_response = tool_call_completion(("c1", "get_time", {}))
    assert completion_finish_reason(tools_response) == "tool_calls"
    message = completion_message(tools_response)
    assert message.tool_calls is not None
    assert message.tool_calls[0].function.name == "get_time"
    assert completion_text(tools_response) == ""


def test_completion_message_requires_choices():
    with pytest.raises(ValueError):
        completion_message({"choices": []})

"""Tests for the tool registry."""

from chat_agent.infrastructure.data_models import ToolDefinition
from chat_agent.services.errors import (
    AlreadyLockedError,
    DuplicateToolError,
    LockedError,
    NotFoundError,
)
from chat_agent.services.tool_registry import ToolRegistry


def handler() -> str:
    return "ok"


def test_register_and_lookup():
    registry = ToolRegistry()
    definition = ToolDefinition(name="get_time")

    assert registry.register(definition, handler).ok
    assert registry.has("get_time")
    assert registry.get_by_name("get_time") == definition
    assert registry.get_handler("get_time") is handler
    assert registry.get_by_name("missing") is None
    assert registry.get_handler("missing") is None


def test_registration_order_is_preserved():
    registry = ToolRegistry()
    for name in ("c", "a", "b"):
        registry.register(ToolDefinition(name=name), handler)

    assert registry.names() == ["c", "a", "b"]
    assert [d.name for d in registry.get_all()] == ["c", "a", "b"]
    assert registry.count() == 3


def test_duplicates_are_rejected_not_overwritten():
    registry = ToolRegistry()
    registry.register(ToolDefinition(name="t", description="first"), handler)

    result = registry.register(ToolDefinition(name="t", description="second"), lambda: "x")
    assert not result.ok
    assert isinstance(result.error, DuplicateToolError)
    assert registry.get_by_name("t").description == "first"
    assert registry.get_handler("t") is handler


def test_unregister():
    registry = ToolRegistry()
    registry.register(ToolDefinition(name="t"), handler)
    assert registry.unregister("t").ok
    assert registry.is_empty()

    result = registry.unregister("t")
    assert isinstance(result.error, NotFoundError)


def test_locked_registry():
    registry = ToolRegistry()
    registry.register(ToolDefinition(name="t"), handler)
    registry.lock()

    assert isinstance(registry.register(ToolDefinition(name="u"), handler).error, LockedError)
    assert isinstance(registry.unregister("t").error, LockedError)
    assert isinstance(registry.clear().error, LockedError)
    assert isinstance(registry.lock().error, AlreadyLockedError)
    assert registry.names() == ["t"]


def test_change_callback():
    registry = ToolRegistry()
    seen = []
    unsubscribe = registry.on_change(lambda definitions: seen.append(len(definitions)))
    registry.register(ToolDefinition(name="a"), handler)
    registry.register(ToolDefinition(name="b"), handler)
    unsubscribe()
    registry.clear()
    assert seen == [1, 2]

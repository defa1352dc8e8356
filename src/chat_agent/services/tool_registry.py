from __future__ import annotations

import logging
from collections.abc import Callable

from chat_agent.infrastructure.data_models import ToolDefinition, ToolHandler
from chat_agent.services.errors import (
    AlreadyLockedError,
    DuplicateToolError,
    LockedError,
    NotFoundError,
    OperationResult,
)

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[list[ToolDefinition]], None]


class ToolRegistry:
    """
    Name-keyed registry of tool definitions and their handlers.

    Registration order is preserved. Duplicate names are rejected rather than
    overwritten. The registry only stores handlers; invoking them is the agent's job.
    """

    def __init__(self) -> None:
        self._tools: dict[str, tuple[ToolDefinition, ToolHandler]] = {}
        self._locked = False
        self._callbacks: list[ChangeCallback] = []

    def register(self, definition: ToolDefinition, handler: ToolHandler) -> OperationResult:
        """
        Register a tool.

        Args:
            definition (ToolDefinition): Definition advertised to the model.
            handler (ToolHandler): Callable invoked with the parsed arguments.

        Returns:
            OperationResult: Failure with LockedError or DuplicateToolError, else success.
        """
        if self._locked:
            return OperationResult.failure(LockedError("Tool registry is locked"))
        if definition.name in self._tools:
            return OperationResult.failure(
                DuplicateToolError(f"Tool already registered: {definition.name}")
            )
        self._tools[definition.name] = (definition, handler)
        logger.debug("Registered tool %s", definition.name)
        self._notify()
        return OperationResult.success()

    def unregister(self, name: str) -> OperationResult:
        if self._locked:
            return OperationResult.failure(LockedError("Tool registry is locked"))
        if name not in self._tools:
            return OperationResult.failure(NotFoundError(f"Tool not registered: {name}"))
        del self._tools[name]
        self._notify()
        return OperationResult.success()

    def clear(self) -> OperationResult:
        if self._locked:
            return OperationResult.failure(LockedError("Tool registry is locked"))
        self._tools.clear()
        self._notify()
        return OperationResult.success()

    def get_by_name(self, name: str) -> ToolDefinition | None:
        entry = self._tools.get(name)
        return entry[0] if entry else None

    def get_handler(self, name: str) -> ToolHandler | None:
        entry = self._tools.get(name)
        return entry[1] if entry else None

    def get_all(self) -> list[ToolDefinition]:
        return [definition for definition, _ in self._tools.values()]

    def names(self) -> list[str]:
        return list(self._tools)

    def has(self, name: str) -> bool:
        return name in self._tools

    def count(self) -> int:
        return len(self._tools)

    def is_empty(self) -> bool:
        return not self._tools

    def lock(self) -> OperationResult:
        if self._locked:
            return OperationResult.failure(AlreadyLockedError("Tool registry is already locked"))
        self._locked = True
        return OperationResult.success()

    def is_locked(self) -> bool:
        return self._locked

    def on_change(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register `callback`; returns a function that unregisters it."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        definitions = self.get_all()
        for callback in list(self._callbacks):
            callback(definitions)

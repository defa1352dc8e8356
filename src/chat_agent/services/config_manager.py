from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from chat_agent.infrastructure.data_models import message_to_dict
from chat_agent.services.errors import (
    AlreadyLockedError,
    LockedError,
    NotFoundError,
    OperationResult,
)

if TYPE_CHECKING:
    from chat_agent.services.conversation_store import ConversationStore
    from chat_agent.services.tool_registry import ToolRegistry

# Default request parameters; anything passed to the constructor wins
DEFAULT_CONFIG: dict[str, Any] = {
    "temperature": 0.7,
    "max_tokens": 500,
}

# Keys the agent rebuilds from the store and registry on every send
RESERVED_KEYS = ("messages", "tools")


class ConfigManager:
    """
    Request parameter map for one agent.

    Args:
        config (dict[str, Any] | None): Initial parameters, merged over DEFAULT_CONFIG.
        store (ConversationStore | None): If given, its messages are copied into the
            ``messages`` key once, at construction.
        registry (ToolRegistry | None): If given, its definitions are copied into the
            ``tools`` key once, at construction.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        store: ConversationStore | None = None,
        registry: ToolRegistry | None = None,
    ) -> None:
        self._config: dict[str, Any] = {**DEFAULT_CONFIG, **copy.deepcopy(config or {})}
        self._locked = False
        if store is not None:
            self._config["messages"] = [message_to_dict(m) for m in store.get()]
        if registry is not None:
            self._config["tools"] = [d.to_dict() for d in registry.get_all()]

    def get(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self._config.get(key, default))

    def has(self, key: str) -> bool:
        return key in self._config

    def get_all(self) -> dict[str, Any]:
        """Return a deep copy of every parameter."""
        return copy.deepcopy(self._config)

    def set(self, key: str, value: Any) -> OperationResult:
        if self._locked:
            return OperationResult.failure(LockedError("Configuration is locked"))
        self._config[key] = copy.deepcopy(value)
        return OperationResult.success()

    def set_all(self, config: dict[str, Any]) -> OperationResult:
        """Replace every parameter with `config`."""
        if self._locked:
            return OperationResult.failure(LockedError("Configuration is locked"))
        self._config = copy.deepcopy(config)
        return OperationResult.success()

    def delete(self, key: str) -> OperationResult:
        if self._locked:
            return OperationResult.failure(LockedError("Configuration is locked"))
        if key not in self._config:
            return OperationResult.failure(NotFoundError(f"Configuration key not set: {key}"))
        del self._config[key]
        return OperationResult.success()

    def lock(self) -> OperationResult:
        if self._locked:
            return OperationResult.failure(AlreadyLockedError("Configuration is already locked"))
        self._locked = True
        return OperationResult.success()

    def is_locked(self) -> bool:
        return self._locked

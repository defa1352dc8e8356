from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from chat_agent.infrastructure.data_models import Message, SystemMessage
from chat_agent.services.errors import (
    AlreadyLockedError,
    LockedError,
    NotFoundError,
    OperationResult,
)

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[list[Message]], None]


class ConversationStore:
    """
    Ordered, lockable, in-memory sequence of non-system messages.

    The system message is pinned on the agent and never lives here; passing one to
    a mutator raises ValueError. Mutators return an OperationResult instead of raising
    when the store is locked, and every successful mutation notifies the change
    callbacks synchronously, in registration order, before returning.

    Args:
        messages (Iterable[Message] | None): Initial contents.
    """

    def __init__(self, messages: Iterable[Message] | None = None) -> None:
        self._messages: list[Message] = []
        self._locked: bool = False
        self._callbacks: list[ChangeCallback] = []
        if messages:
            self._messages = [self._check(m) for m in messages]

    # -----------------------------
    # Reads
    # -----------------------------
    def get(self) -> list[Message]:
        return list(self._messages)

    def get_first(self) -> Message | None:
        return self._messages[0] if self._messages else None

    def get_last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def count(self) -> int:
        return len(self._messages)

    def is_empty(self) -> bool:
        return not self._messages

    def is_locked(self) -> bool:
        return self._locked

    # -----------------------------
    # Mutations
    # -----------------------------
    def append(self, message: Message) -> OperationResult:
        return self._mutate(lambda: self._messages.append(self._check(message)))

    def prepend(self, message: Message) -> OperationResult:
        return self._mutate(lambda: self._messages.insert(0, self._check(message)))

    def insert(self, index: int, message: Message) -> OperationResult:
        """Insert `message` before position `index` (list.insert semantics)."""
        return self._mutate(lambda: self._messages.insert(index, self._check(message)))

    def delete(self, index: int) -> OperationResult:
        """Remove the message at position `index`."""
        if self._locked:
            return OperationResult.failure(LockedError("Conversation store is locked"))
        if not -len(self._messages) <= index < len(self._messages):
            return OperationResult.failure(NotFoundError(f"No message at index {index}"))
        return self._mutate(lambda: self._messages.pop(index))

    def set(self, messages: Iterable[Message]) -> OperationResult:
        def replace() -> None:
            self._messages = [self._check(m) for m in messages]

        return self._mutate(replace)

    def clear(self) -> OperationResult:
        return self._mutate(self._messages.clear)

    def lock(self) -> OperationResult:
        """Lock the store for good. Locking twice reports AlreadyLockedError."""
        if self._locked:
            return OperationResult.failure(AlreadyLockedError("Conversation store is already locked"))
        self._locked = True
        return OperationResult.success()

    # -----------------------------
    # Change notification
    # -----------------------------
    def on_change(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register `callback`; returns a function that unregisters it."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def _mutate(self, operation: Callable[[], object]) -> OperationResult:
        if self._locked:
            return OperationResult.failure(LockedError("Conversation store is locked"))
        operation()
        snapshot = self.get()
        for callback in list(self._callbacks):
            callback(snapshot)
        logger.debug("Conversation store changed: %d messages", len(snapshot))
        return OperationResult.success()

    @staticmethod
    def _check(message: Message) -> Message:
        if isinstance(message, SystemMessage):
            raise ValueError("System messages are pinned on the agent, not stored")
        return message

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from chat_agent.infrastructure.data_models import Message, SystemMessage, ToolMessage
from chat_agent.services.agent_decorator import AgentDecorator
from chat_agent.services.agent_service import ChatAgent, MessageInput, coerce_message


def _newest(history: list[Message], count: int) -> list[Message]:
    """Return at most `count` of the newest messages, never opening on an orphaned tool result."""
    kept = history[-count:] if count > 0 else []
    while kept and isinstance(kept[0], ToolMessage):
        kept = kept[1:]
    return kept


class SlidingWindowDecorator(AgentDecorator):
    """
    Bounds the history to the system message plus the `window_size` newest messages.

    Trimming counts messages, not tokens. Tool results whose requesting assistant
    message fell out of the window are dropped with it, so the window can hold fewer
    than `window_size` messages.

    Args:
        agent (ChatAgent): Agent to wrap.
        window_size (int): Maximum number of non-system messages kept (>= 1).
    """

    def __init__(self, agent: ChatAgent, window_size: int) -> None:
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        super().__init__(agent)
        self.window_size = window_size

    def _window(self, messages: list[Message]) -> list[Message]:
        system = [m for m in messages if isinstance(m, SystemMessage)][-1:]
        rest = [m for m in messages if not isinstance(m, SystemMessage)]
        return [*system, *_newest(rest, self.window_size)]

    async def send(
        self, override: dict[str, Any] | None = None, *, resolve_tools: bool = True
    ) -> dict[str, Any]:
        self._trim()
        response = await self.agent.send(override, resolve_tools=resolve_tools)
        # The reply (and any tool round) was appended below us
        self._trim()
        return response

    def _trim(self) -> None:
        messages = self.agent.get_messages()
        trimmed = self._window(messages)
        if len(trimmed) != len(messages):
            self.agent.set_messages(trimmed)

    def add_message(self, message: MessageInput) -> None:
        message = coerce_message(message)
        if isinstance(message, SystemMessage):
            self.agent.add_message(message)
            return
        messages = self.agent.get_messages()
        history = [m for m in messages if not isinstance(m, SystemMessage)]
        if len(history) >= self.window_size:
            system = [m for m in messages if isinstance(m, SystemMessage)][-1:]
            keep = _newest(history, self.window_size - 1)
            self.agent.set_messages([*system, *keep])
        self.agent.add_message(message)

    def set_messages(self, messages: Iterable[MessageInput]) -> None:
        """Replace and trim the history; an existing system message survives if none is given."""
        new_messages = [coerce_message(m) for m in messages]
        if not any(isinstance(m, SystemMessage) for m in new_messages):
            current = [m for m in self.agent.get_messages() if isinstance(m, SystemMessage)]
            new_messages = [*current[-1:], *new_messages]
        self.agent.set_messages(self._window(new_messages))

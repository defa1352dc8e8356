"""
Error taxonomy for the agent core.

Store, registry and configuration mutators do not raise on expected failures
(locked, duplicate, missing); they return an ``OperationResult`` carrying the
error instead. ``raise_for_error`` turns such a result into an exception.
"""

from __future__ import annotations

from dataclasses import dataclass


class ChatAgentError(Exception):
    """Base class for every error raised by the agent core."""


class InvalidRequestError(ChatAgentError, ValueError):
    """The request could not be built (no messages, no model, bad settings)."""


class TransportError(ChatAgentError, RuntimeError):
    """The chat-completion call failed (non-2xx status or network failure)."""

    def __init__(
        self, message: str, *, status_code: int | None = None, detail: str | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ToolNotFoundError(ChatAgentError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(f"No handler registered for tool: {tool_name}")
        self.tool_name = tool_name


class ToolArgumentError(ChatAgentError):
    """The arguments of a tool call could not be parsed or bound."""


class ToolExecutionError(ChatAgentError):
    """A tool handler raised."""


class ToolLoopExceededError(ChatAgentError):
    """The model kept requesting tools beyond the configured resolution depth."""


class LockedError(ChatAgentError):
    pass


class AlreadyLockedError(LockedError):
    pass


class DuplicateToolError(ChatAgentError):
    pass


class NotFoundError(ChatAgentError):
    pass


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a store, registry or configuration mutation."""

    ok: bool
    error: ChatAgentError | None = None

    @classmethod
    def success(cls) -> OperationResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, error: ChatAgentError) -> OperationResult:
        return cls(ok=False, error=error)

    def raise_for_error(self) -> None:
        if not self.ok and self.error is not None:
            raise self.error

    def __bool__(self) -> bool:
        return self.ok

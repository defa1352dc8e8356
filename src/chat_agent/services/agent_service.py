"""
Agent orchestrator.

``Agent.send`` drives one exchange to completion: build the request from the
configuration, the pinned system message, the stored conversation and the registered
tools; call the chat client; and, while the model answers with ``tool_calls``, run the
matching handlers, append their results and ask again. The final response body is
returned to the caller.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol, Union, runtime_checkable

from chat_agent.infrastructure.data_models import (
    Message,
    SystemMessage,
    ToolCall,
    ToolDefinition,
    ToolHandler,
    ToolMessage,
    UserMessage,
    completion_finish_reason,
    completion_message,
    message_from_dict,
    message_to_dict,
    to_tool_message,
)
from chat_agent.services.config_manager import RESERVED_KEYS, ConfigManager
from chat_agent.services.conversation_store import ConversationStore
from chat_agent.services.errors import (
    ChatAgentError,
    InvalidRequestError,
    ToolArgumentError,
    ToolExecutionError,
    ToolLoopExceededError,
    ToolNotFoundError,
    TransportError,
)
from chat_agent.services.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOOL_DEPTH = 8

# Request keys that only make sense when tools are advertised
TOOL_ONLY_KEYS = ("tools", "tool_choice", "parallel_tool_calls")

MessageInput = Union[Message, dict[str, Any], str]
RequestCallback = Callable[[dict[str, Any], dict[str, Any]], None]


class ChatClient(Protocol):
    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]: ...


@runtime_checkable
class ChatAgent(Protocol):
    """Operations shared by the agent and every decorator wrapped around it."""

    def add_message(self, message: MessageInput) -> None: ...

    def get_messages(self) -> list[Message]: ...

    def set_messages(self, messages: Iterable[MessageInput]) -> None: ...

    def get_config(self) -> dict[str, Any]: ...

    def set_config(self, key: str, value: Any) -> None: ...

    def register_tool(self, definition: ToolDefinition, handler: ToolHandler) -> None: ...

    def get_tools(self) -> list[ToolDefinition]: ...

    async def send(
        self, override: dict[str, Any] | None = None, *, resolve_tools: bool = True
    ) -> dict[str, Any]: ...

    async def resolve_tool_call(self, call: ToolCall) -> ToolMessage: ...

    def on_request(self, callback: RequestCallback) -> Callable[[], None]: ...


def coerce_message(message: MessageInput) -> Message:
    """Accept a Message, a wire dict, or plain text (a user message)."""
    if isinstance(message, str):
        return UserMessage(content=message)
    if isinstance(message, dict):
        return message_from_dict(message)
    return message


class Agent:
    """
    Tool-resolving chat agent.

    Args:
        config_manager (ConfigManager): Request parameters (must provide ``model``).
        store (ConversationStore): Non-system conversation history.
        registry (ToolRegistry): Tools advertised to the model.
        chat_client (ChatClient): Performs the chat-completion call.
        system_prompt (str | SystemMessage | None): Pinned system message.
        max_tool_depth (int): Maximum number of tool-resolution rounds per send.
    """

    def __init__(
        self,
        *,
        config_manager: ConfigManager,
        store: ConversationStore,
        registry: ToolRegistry,
        chat_client: ChatClient,
        system_prompt: str | SystemMessage | None = None,
        max_tool_depth: int = DEFAULT_MAX_TOOL_DEPTH,
    ) -> None:
        if max_tool_depth < 0:
            raise ValueError("max_tool_depth must not be negative")
        self.config_manager = config_manager
        self.store = store
        self.registry = registry
        self.chat_client = chat_client
        self.max_tool_depth = max_tool_depth
        self._system_message: SystemMessage | None = None
        self._request_callbacks: list[RequestCallback] = []
        self.set_system_prompt(system_prompt)

    # -----------------------------
    # Conversation
    # -----------------------------
    def set_system_prompt(self, prompt: str | SystemMessage | None) -> None:
        if isinstance(prompt, str):
            prompt = SystemMessage(content=prompt)
        self._system_message = prompt

    def get_system_message(self) -> SystemMessage | None:
        return self._system_message

    def add_message(self, message: MessageInput) -> None:
        message = coerce_message(message)
        if isinstance(message, SystemMessage):
            self._system_message = message
            return
        self.store.append(message).raise_for_error()

    def get_messages(self) -> list[Message]:
        messages: list[Message] = self.store.get()
        if self._system_message is not None:
            return [self._system_message, *messages]
        return messages

    def set_messages(self, messages: Iterable[MessageInput]) -> None:
        """Replace the conversation. A SystemMessage in the list replaces the pinned one."""
        rest: list[Message] = []
        for message in map(coerce_message, messages):
            if isinstance(message, SystemMessage):
                self._system_message = message
            else:
                rest.append(message)
        self.store.set(rest).raise_for_error()

    # -----------------------------
    # Configuration and tools
    # -----------------------------
    def get_config(self) -> dict[str, Any]:
        return self.config_manager.get_all()

    def set_config(self, key: str, value: Any) -> None:
        self.config_manager.set(key, value).raise_for_error()

    def register_tool(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        self.registry.register(definition, handler).raise_for_error()

    def get_tools(self) -> list[ToolDefinition]:
        return self.registry.get_all()

    def on_request(self, callback: RequestCallback) -> Callable[[], None]:
        """
        Observe every completed request/response pair, tool rounds included.

        Returns:
            A function that unregisters `callback`. Calling it twice is harmless.
        """
        self._request_callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._request_callbacks:
                self._request_callbacks.remove(callback)

        return unsubscribe

    # -----------------------------
    # Request building
    # -----------------------------
    def build_request(self, override: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Build the chat-completion request body.

        Raises:
            InvalidRequestError: If there are no messages, no model, or streaming is asked for.
        """
        config = self.config_manager.get_all()
        for key in RESERVED_KEYS:
            config.pop(key, None)
        payload: dict[str, Any] = {**config, **(override or {})}

        payload["messages"] = [message_to_dict(m) for m in self.get_messages()]
        if self.registry.is_empty():
            for key in TOOL_ONLY_KEYS:
                payload.pop(key, None)
        else:
            payload["tools"] = [d.to_dict() for d in self.registry.get_all()]

        if not payload["messages"]:
            raise InvalidRequestError("Cannot send a request without messages")
        if not payload.get("model"):
            raise InvalidRequestError("Configuration value 'model' is not set")
        if payload.get("stream"):
            raise InvalidRequestError("Streaming responses are not supported")
        return payload

    # -----------------------------
    # Send loop
    # -----------------------------
    async def send(
        self, override: dict[str, Any] | None = None, *, resolve_tools: bool = True
    ) -> dict[str, Any]:
        """
        Send the conversation and resolve any tool calls the model makes.

        Args:
            override: Request parameters merged over the configuration for this send only.
            resolve_tools: If False, a ``tool_calls`` response is appended and returned
                without running any handler.

        Returns:
            The body of the final chat-completion response.
        """
        depth = 0
        while True:
            payload = self.build_request(override)
            response = await self.chat_client.complete(payload)
            self._notify(payload, response)

            try:
                finish_reason = completion_finish_reason(response)
                message = completion_message(response)
            except ValueError as e:
                raise TransportError(f"Malformed chat completion response: {e}") from e

            if finish_reason != "tool_calls" or not message.tool_calls or not resolve_tools:
                self.store.append(message).raise_for_error()
                return response

            if depth >= self.max_tool_depth:
                raise ToolLoopExceededError(
                    f"Model requested tools after {depth} resolution rounds"
                )

            self.store.append(message).raise_for_error()
            for call in message.tool_calls:
                await self.resolve_tool_call(call)
            depth += 1
            logger.debug("Resolved tool round %d, sending again", depth)

    async def resolve_tool_call(self, call: ToolCall) -> ToolMessage:
        """
        Run the handler for one tool call and append its result to the conversation.

        Raises:
            ToolNotFoundError: If no handler is registered under the call's name.
            ToolArgumentError: If the arguments are not a JSON object matching the handler.
            ToolExecutionError: If the handler raises.
        """
        name = call.function.name
        handler = self.registry.get_handler(name)
        if handler is None:
            raise ToolNotFoundError(name)

        arguments = self._parse_arguments(call)
        try:
            inspect.signature(handler).bind(**arguments)
        except TypeError as e:
            raise ToolArgumentError(f"Arguments do not match tool '{name}': {e}") from e
        except ValueError:
            # No introspectable signature (some builtins); let the call decide
            pass

        logger.debug("Calling tool %s with %s", name, arguments)
        try:
            result = handler(**arguments)
            if inspect.isawaitable(result):
                result = await result
        except ChatAgentError:
            raise
        except Exception as e:
            raise ToolExecutionError(f"Tool '{name}' failed: {e}") from e

        tool_message = to_tool_message(result, call.id)
        self.store.append(tool_message).raise_for_error()
        return tool_message

    @staticmethod
    def _parse_arguments(call: ToolCall) -> dict[str, Any]:
        raw = call.function.arguments
        if not raw or not raw.strip():
            return {}
        try:
            arguments = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ToolArgumentError(
                f"Invalid JSON arguments for tool '{call.function.name}': {e}"
            ) from e
        if not isinstance(arguments, dict):
            raise ToolArgumentError(
                f"Arguments for tool '{call.function.name}' must be a JSON object"
            )
        return arguments

    def _notify(self, payload: dict[str, Any], response: dict[str, Any]) -> None:
        for callback in list(self._request_callbacks):
            callback(payload, response)


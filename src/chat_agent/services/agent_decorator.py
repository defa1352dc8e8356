from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from chat_agent.infrastructure.data_models import Message, ToolCall, ToolDefinition, ToolHandler, ToolMessage
from chat_agent.services.agent_service import ChatAgent, MessageInput, RequestCallback


class AgentDecorator:
    """
    Wraps one ChatAgent and forwards every operation to it unchanged.

    Subclasses override only the operations whose behaviour they alter. Because a
    decorator is itself a ChatAgent, decorators compose by wrapping each other.
    """

    def __init__(self, agent: ChatAgent) -> None:
        self.agent = agent

    def add_message(self, message: MessageInput) -> None:
        self.agent.add_message(message)

    def get_messages(self) -> list[Message]:
        return self.agent.get_messages()

    def set_messages(self, messages: Iterable[MessageInput]) -> None:
        self.agent.set_messages(messages)

    def get_config(self) -> dict[str, Any]:
        return self.agent.get_config()

    def set_config(self, key: str, value: Any) -> None:
        self.agent.set_config(key, value)

    def register_tool(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        self.agent.register_tool(definition, handler)

    def get_tools(self) -> list[ToolDefinition]:
        return self.agent.get_tools()

    async def send(
        self, override: dict[str, Any] | None = None, *, resolve_tools: bool = True
    ) -> dict[str, Any]:
        return await self.agent.send(override, resolve_tools=resolve_tools)

    async def resolve_tool_call(self, call: ToolCall) -> ToolMessage:
        return await self.agent.resolve_tool_call(call)

    def on_request(self, callback: RequestCallback) -> Callable[[], None]:
        return self.agent.on_request(callback)

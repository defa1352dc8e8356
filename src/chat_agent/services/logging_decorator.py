from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from chat_agent.infrastructure.data_models import (
    Message,
    ToolCall,
    ToolDefinition,
    ToolHandler,
    ToolMessage,
)
from chat_agent.infrastructure.platform_manager import create_logger
from chat_agent.services.agent_decorator import AgentDecorator
from chat_agent.services.agent_service import ChatAgent, MessageInput, RequestCallback


class LoggingDecorator(AgentDecorator):
    """
    Logs the arguments and results of the agent operations.

    Errors are logged with their traceback and re-raised unchanged. Nothing about the
    inner agent's behaviour is altered.
    """

    def __init__(self, agent: ChatAgent, logger: logging.Logger | None = None) -> None:
        super().__init__(agent)
        self.logger = logger or create_logger(logger_name="chat-agent")

    def add_message(self, message: MessageInput) -> None:
        self.logger.info(f"add_message: {message}")
        try:
            super().add_message(message)
        except Exception:
            self.logger.exception("add_message failed")
            raise

    def get_messages(self) -> list[Message]:
        messages = super().get_messages()
        self.logger.debug(f"get_messages: {len(messages)} messages")
        return messages

    def get_config(self) -> dict[str, Any]:
        config = super().get_config()
        self.logger.debug(f"get_config: {config}")
        return config

    def get_tools(self) -> list[ToolDefinition]:
        tools = super().get_tools()
        self.logger.debug(f"get_tools: {[t.name for t in tools]}")
        return tools

    def on_request(self, callback: RequestCallback) -> Callable[[], None]:
        name = getattr(callback, "__name__", repr(callback))
        self.logger.debug(f"on_request: {name}")
        return super().on_request(callback)

    def set_messages(self, messages: Iterable[MessageInput]) -> None:
        messages = list(messages)
        self.logger.info(f"set_messages: {len(messages)} messages")
        try:
            super().set_messages(messages)
        except Exception:
            self.logger.exception("set_messages failed")
            raise

    def set_config(self, key: str, value: Any) -> None:
        self.logger.info(f"set_config: {key}={value!r}")
        try:
            super().set_config(key, value)
        except Exception:
            self.logger.exception("set_config failed")
            raise

    def register_tool(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        self.logger.info(f"register_tool: {definition.name}")
        try:
            super().register_tool(definition, handler)
        except Exception:
            self.logger.exception("register_tool failed")
            raise

    async def send(
        self, override: dict[str, Any] | None = None, *, resolve_tools: bool = True
    ) -> dict[str, Any]:
        self.logger.info(f"send: override={override} resolve_tools={resolve_tools}")
        try:
            response = await super().send(override, resolve_tools=resolve_tools)
        except Exception:
            self.logger.exception("send failed")
            raise
        self.logger.info(f"send result: {response}")
        return response

    async def resolve_tool_call(self, call: ToolCall) -> ToolMessage:
        self.logger.info(f"resolve_tool_call: {call.function.name}({call.function.arguments})")
        try:
            result = await super().resolve_tool_call(call)
        except Exception:
            self.logger.exception("resolve_tool_call failed")
            raise
        self.logger.info(f"resolve_tool_call result: {result.content}")
        return result

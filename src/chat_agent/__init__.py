from chat_agent.infrastructure.data_models import (
    AssistantMessage,
    FunctionCall,
    Message,
    SystemMessage,
    ToolCall,
    ToolDefinition,
    ToolMessage,
    UserMessage,
)
from chat_agent.services.agent_service import Agent, ChatAgent
from chat_agent.services.config_manager import ConfigManager
from chat_agent.services.conversation_store import ConversationStore
from chat_agent.services.errors import ChatAgentError, OperationResult
from chat_agent.services.logging_decorator import LoggingDecorator
from chat_agent.services.sliding_window_decorator import SlidingWindowDecorator
from chat_agent.services.tool_registry import ToolRegistry
from chat_agent.services.user_profile_decorator import UserProfileDecorator

__all__ = [
    "Agent",
    "AssistantMessage",
    "ChatAgent",
    "ChatAgentError",
    "ConfigManager",
    "ConversationStore",
    "FunctionCall",
    "LoggingDecorator",
    "Message",
    "OperationResult",
    "SlidingWindowDecorator",
    "SystemMessage",
    "ToolCall",
    "ToolDefinition",
    "ToolMessage",
    "ToolRegistry",
    "UserMessage",
    "UserProfileDecorator",
]

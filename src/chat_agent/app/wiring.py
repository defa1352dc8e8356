import logging

from chat_agent.app.config import AgentSettings
from chat_agent.app.logging import log_completion
from chat_agent.infrastructure.openai_chat_manager import OpenAIChat
from chat_agent.services.agent_service import Agent, ChatAgent, ChatClient
from chat_agent.services.builtin_tools import register_builtin_tools
from chat_agent.services.config_manager import ConfigManager
from chat_agent.services.conversation_store import ConversationStore
from chat_agent.services.logging_decorator import LoggingDecorator
from chat_agent.services.profile_service import ProfileService
from chat_agent.services.renderer_service import render_prompt
from chat_agent.services.sliding_window_decorator import SlidingWindowDecorator
from chat_agent.services.tool_registry import ToolRegistry
from chat_agent.services.user_profile_decorator import UserProfileDecorator
from chat_shared.redis_manager import RedisManager, build_redis_manager

# The merger rewrites whole profiles, so it gets more room and less creativity
MERGER_TEMPERATURE = 0.1
MERGER_MAX_TOKENS = 3000


def build_chat_client(settings: AgentSettings) -> OpenAIChat:
    return OpenAIChat(
        settings.llm_api_key, settings.llm_api_base_url, timeout=settings.llm_timeout
    )


def build_profile_merger(settings: AgentSettings, chat_client: ChatClient) -> Agent:
    """Build the agent that merges new profile text into the stored profile."""
    return Agent(
        config_manager=ConfigManager({
            "model": settings.llm_default_model,
            "temperature": MERGER_TEMPERATURE,
            "max_tokens": MERGER_MAX_TOKENS,
        }),
        store=ConversationStore(),
        registry=ToolRegistry(),
        chat_client=chat_client,
        system_prompt=render_prompt("profile_merger"),
        max_tool_depth=0,
    )


def build_agent(
    settings: AgentSettings,
    *,
    logger: logging.Logger | None = None,
    redis_manager: RedisManager | None = None,
    chat_client: ChatClient | None = None,
) -> ChatAgent:
    """
    Assemble the agent and its decorator chain from settings.

    The chain is Logging(UserProfile(SlidingWindow(Agent))); the profile layer and the
    profile tools are only added when Redis is configured or a manager is passed in.

    Args:
        settings (AgentSettings): Loaded settings.
        logger (logging.Logger | None): Logger for the logging decorator and completion logs.
        redis_manager (RedisManager | None): Profile storage; built from settings.redis_url
            when omitted.
        chat_client (ChatClient | None): Chat-completion client; an OpenAIChat when omitted.

    Returns:
        ChatAgent: The outermost decorator.
    """
    logger = logger or logging.getLogger("chat-agent")
    chat_client = chat_client or build_chat_client(settings)

    if redis_manager is None and settings.redis_url:
        redis_manager = build_redis_manager(settings.redis_url)
    profile_service = ProfileService(redis_manager) if redis_manager is not None else None

    registry = ToolRegistry()
    registered = register_builtin_tools(
        registry,
        profile_service=profile_service,
        user_key=settings.profile_user_key,
        weather_api_key=settings.open_weather_map_api_key or None,
        timezone=settings.timezone,
    )
    logger.info(f"Registered tools: {registered}")

    agent = Agent(
        config_manager=ConfigManager({"model": settings.llm_default_model}),
        store=ConversationStore(),
        registry=registry,
        chat_client=chat_client,
        system_prompt=render_prompt("system_prompt"),
        max_tool_depth=settings.max_tool_depth,
    )
    agent.on_request(lambda payload, response: log_completion(response, logger))

    chain: ChatAgent = SlidingWindowDecorator(agent, settings.history_window_size)
    if profile_service is not None:
        chain = UserProfileDecorator(
            chain,
            profile_service,
            user_key=settings.profile_user_key,
            merger=build_profile_merger(settings, chat_client),
        )
    return LoggingDecorator(chain, logger)

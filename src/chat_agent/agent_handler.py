import asyncio
import traceback
from collections.abc import Callable
from typing import Any

from chat_agent.app.config import AgentSettings, load_settings
from chat_agent.app.main import process
from chat_agent.app.wiring import build_agent
from chat_agent.infrastructure.platform_manager import create_logger
from chat_agent.services.agent_service import ChatAgent

EventHandler = Callable[[dict[str, Any], Any], dict[str, Any]]


def create_event_handler(
    settings: AgentSettings | None = None, agent: ChatAgent | None = None
) -> EventHandler:
    """
    Build the entry point that processes one inbound event.

    The agent and the event loop are built once and shared by every event, so the
    conversation carries over between messages for the lifetime of the process.
    """
    settings = settings or load_settings()
    logger = create_logger(log_level=settings.log_level, logger_name="chat-agent")
    logger.info("Starting Chat Agent")
    agent = agent or build_agent(settings, logger=logger)
    # One loop for the process lifetime; the chat client's connection pool is bound to it
    loop = asyncio.new_event_loop()

    def event_handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
        try:
            return loop.run_until_complete(
                process(event, agent=agent, settings=settings, logger=logger)
            )
        except Exception as e:
            traceback.print_exc()
            raise Exception(f"Error in processing Chat Agent event: {e}") from e

    return event_handler

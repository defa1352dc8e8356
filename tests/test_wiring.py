"""Tests for agent assembly and the event handler entry point."""

import logging

from chat_agent.agent_handler import create_event_handler
from chat_agent.app.config import AgentSettings
from chat_agent.app.wiring import build_agent, build_profile_merger
from chat_agent.infrastructure.data_models import SystemMessage
from chat_agent.services.logging_decorator import LoggingDecorator
from chat_agent.services.sliding_window_decorator import SlidingWindowDecorator
from chat_agent.services.user_profile_decorator import UserProfileDecorator
from conftest import FakeChatClient, text_completion

LOGGER = logging.getLogger("test-wiring")


def test_build_agent_without_redis():
    agent = build_agent(AgentSettings(), logger=LOGGER, chat_client=FakeChatClient())

    assert isinstance(agent, LoggingDecorator)
    assert isinstance(agent.agent, SlidingWindowDecorator)
    assert [d.name for d in agent.get_tools()] == ["get_current_time_and_date"]
    assert isinstance(agent.get_messages()[0], SystemMessage)
    assert agent.get_config()["model"] == AgentSettings().llm_default_model


def test_build_agent_with_profiles(redis_manager):
    agent = build_agent(
        AgentSettings(history_window_size=5),
        logger=LOGGER,
        redis_manager=redis_manager,
        chat_client=FakeChatClient(),
    )

    assert isinstance(agent.agent, UserProfileDecorator)
    names = [d.name for d in agent.get_tools()]
    assert "get_profile" in names
    assert "append_to_user_profile" in names


def test_profile_merger_settings():
    merger = build_profile_merger(AgentSettings(), FakeChatClient())
    config = merger.get_config()
    assert config["temperature"] == 0.1
    assert config["max_tokens"] == 3000
    assert merger.get_system_message() is not None
    assert merger.get_tools() == []


def test_event_handler_answers_events():
    client = FakeChatClient(text_completion("Hi there"))
    settings = AgentSettings()
    agent = build_agent(settings, logger=LOGGER, chat_client=client)
    handler = create_event_handler(settings, agent)

    event = {
        "payload": {
            "type": "event_callback",
            "event": {"type": "message", "channel": "C1", "user": "U1", "text": "Hello"},
        }
    }
    response = handler(event, None)

    assert response["statusCode"] == 200
    assert response["body"] == "Hi there"
    assert len(client.payloads) == 1


def test_event_handler_keeps_conversation_across_events():
    client = FakeChatClient(text_completion("Hi there"), text_completion("Still here"))
    settings = AgentSettings()
    agent = build_agent(settings, logger=LOGGER, chat_client=client)
    handler = create_event_handler(settings, agent)

    def event(text):
        return {
            "payload": {
                "type": "event_callback",
                "event": {"type": "message", "channel": "C1", "user": "U1", "text": text},
            }
        }

    handler(event("Hello"), None)
    response = handler(event("Are you there?"), None)

    assert response["body"] == "Still here"
    contents = [m["content"] for m in client.payloads[1]["messages"][1:]]
    assert contents == ["Hello", "Hi there", "Are you there?"]

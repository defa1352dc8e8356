"""Shared fixtures and fakes for the test suite."""

import json
from typing import Any

import pytest

from chat_agent.services.agent_service import Agent
from chat_agent.services.config_manager import ConfigManager
from chat_agent.services.conversation_store import ConversationStore
from chat_agent.services.tool_registry import ToolRegistry
from chat_shared.redis_manager import RedisManager


def text_completion(content: str, model: str = "test-model") -> dict[str, Any]:
    return {
        "id": "chatcmpl-text",
        "object": "chat.completion",
        "created": 1700000000,
        "model": model,
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


def tool_call_completion(*calls: tuple[str, str, Any]) -> dict[str, Any]:
    """Build a ``tool_calls`` response from (id, name, arguments) triples."""
    tool_calls = []
    for call_id, name, arguments in calls:
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments)
        tool_calls.append({
            "id": call_id,
            "type": "function",
            "function": {"name": name, "arguments": arguments},
        })
    return {
        "id": "chatcmpl-tools",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "test-model",
        "choices": [
            {
                "index": 0,
                "finish_reason": "tool_calls",
                "message": {"role": "assistant", "content": None, "tool_calls": tool_calls},
            }
        ],
    }


class FakeChatClient:
    """Returns scripted responses in order and records every payload it receives."""

    def __init__(self, *responses: dict[str, Any]) -> None:
        self.responses = list(responses)
        self.payloads: list[dict[str, Any]] = []

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.payloads.append(payload)
        if not self.responses:
            raise AssertionError("FakeChatClient ran out of scripted responses")
        return self.responses.pop(0)


class FakeRedis:
    """In-memory stand-in for the subset of the redis client used by RedisManager."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    def setex(self, key: str, ttl: int, value: str) -> bool:
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    def delete(self, key: str) -> int:
        return 1 if self.data.pop(key, None) is not None else 0

    def exists(self, key: str) -> int:
        return 1 if key in self.data else 0


def make_agent(
    *responses: dict[str, Any], system_prompt: str | None = "You are helpful.", **kwargs: Any
) -> tuple[Agent, FakeChatClient]:
    client = FakeChatClient(*responses)
    agent = Agent(
        config_manager=ConfigManager({"model": "test-model"}),
        store=ConversationStore(),
        registry=ToolRegistry(),
        chat_client=client,
        system_prompt=system_prompt,
        **kwargs,
    )
    return agent, client


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_manager(fake_redis: FakeRedis) -> RedisManager:
    return RedisManager(fake_redis, namespace="test")  # type: ignore[arg-type]

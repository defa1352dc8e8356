from __future__ import annotations

import logging
from typing import Any

from chat_agent.infrastructure.data_models import (
    AssistantMessage,
    ToolDefinition,
    UserMessage,
    completion_finish_reason,
    completion_message,
    completion_text,
)
from chat_agent.services.agent_decorator import AgentDecorator
from chat_agent.services.agent_service import ChatAgent
from chat_agent.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

PROFILE_MESSAGE_NAME = "userprofileinformation"

GET_PROFILE_TOOL = ToolDefinition(
    name="get_profile",
    description="Retrieves the user profile as a markdown string.",
)

SET_PROFILE_TOOL = ToolDefinition(
    name="set_profile",
    description="Append to or update the user profile as a markdown string.",
    parameters={
        "type": "object",
        "properties": {
            "profile": {
                "type": "string",
                "description": "The profile to set. Markdown is supported.",
            },
        },
        "required": ["profile"],
    },
)


class UserProfileDecorator(AgentDecorator):
    """
    Keeps a persistent user profile in the conversation.

    On construction the profile tools are registered on the wrapped agent and the stored
    profile is added as an assistant message named ``userprofileinformation``. Every send
    first runs with a forced ``tool_choice`` so the model can read or update the profile,
    resolves whatever it asked for, and then sends again with ``tool_choice="auto"``.

    Args:
        agent (ChatAgent): Agent to wrap.
        profile_service (ProfileService): Profile persistence.
        user_key (str): Whose profile is used.
        merger (ChatAgent | None): Optional agent that merges a new profile into the
            stored one; without it the new profile replaces the old one.
        tool_choice (str | dict[str, Any]): Tool choice forced on the first pass.
    """

    def __init__(
        self,
        agent: ChatAgent,
        profile_service: ProfileService,
        *,
        user_key: str = "default",
        merger: ChatAgent | None = None,
        tool_choice: str | dict[str, Any] = "required",
    ) -> None:
        super().__init__(agent)
        self.profile_service = profile_service
        self.user_key = user_key
        self.merger = merger
        self.tool_choice = tool_choice

        self.agent.register_tool(GET_PROFILE_TOOL, self.get_profile)
        self.agent.register_tool(SET_PROFILE_TOOL, self.set_profile)
        self.agent.add_message(
            AssistantMessage(content=self.get_profile(), name=PROFILE_MESSAGE_NAME)
        )

    async def send(
        self, override: dict[str, Any] | None = None, *, resolve_tools: bool = True
    ) -> dict[str, Any]:
        override = override or {}
        response = await self.agent.send(
            {**override, "tool_choice": self.tool_choice}, resolve_tools=False
        )
        message = completion_message(response)
        if completion_finish_reason(response) != "tool_calls" or not message.tool_calls:
            return response

        # Profile handlers are registered on the inner agent, so every call resolves there
        for call in message.tool_calls:
            await self.agent.resolve_tool_call(call)

        return await self.agent.send(
            {**override, "tool_choice": "auto"}, resolve_tools=resolve_tools
        )

    # -----------------------------
    # Tool handlers
    # -----------------------------
    def get_profile(self) -> str:
        return self.profile_service.get_profile(self.user_key)

    async def set_profile(self, profile: str) -> str:
        if self.merger is not None:
            profile = await self._merge(self.merger, profile)
        self.profile_service.set_profile(self.user_key, profile)
        logger.debug("Profile updated for %s", self.user_key)
        return "Profile updated."

    async def _merge(self, merger: ChatAgent, profile: str) -> str:
        merger.set_messages([])
        try:
            merger.add_message(
                AssistantMessage(content=self.get_profile(), name=PROFILE_MESSAGE_NAME)
            )
            merger.add_message(UserMessage(content=profile))
            response = await merger.send()
        finally:
            merger.set_messages([])
        return completion_text(response) or profile

"""
Built-in tools.

Each tool is a ToolDefinition plus a handler factory; ``register_builtin_tools`` puts
the ones that can work with the given settings into a registry. Profile tools report
bad input back to the model as tool text instead of raising, so the model can correct
itself in the next round.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import requests

from chat_agent.infrastructure.data_models import ToolDefinition, ToolHandler
from chat_agent.services.profile_service import PROFILE_CATEGORIES, ProfileService
from chat_agent.services.tool_registry import ToolRegistry

DEFAULT_TIMEZONE = "Europe/London"
NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
OPEN_WEATHER_MAP_URL = "https://api.openweathermap.org/data/3.0/onecall"
HTTP_TIMEOUT = 10
USER_AGENT = "chat-agent/0.1"

TIME_AND_DATE_TOOL = ToolDefinition(
    name="get_current_time_and_date",
    description="Returns the current time and date in a human-readable format.",
)

WEATHER_TOOL = ToolDefinition(
    name="get_current_weather",
    description=(
        "Returns the current weather information for a given location "
        "using the OpenWeatherMap API."
    ),
    parameters={
        "type": "object",
        "properties": {
            "location": {
                "type": "string",
                "description": "The location to get the weather for.",
            },
        },
        "required": ["location"],
    },
)

GET_USER_PROFILE_TOOL = ToolDefinition(
    name="get_user_profile",
    description="Returns the current user profile entries.",
)

APPEND_TO_USER_PROFILE_TOOL = ToolDefinition(
    name="append_to_user_profile",
    description="Appends a memorable piece of information to the user profile.",
    parameters={
        "type": "object",
        "properties": {
            "category": {
                "type": "string",
                "enum": list(PROFILE_CATEGORIES),
                "description": "The category of the content.",
            },
            "content": {"type": "string", "description": "The content to append."},
        },
        "required": ["category", "content"],
    },
)

UPDATE_USER_PROFILE_ENTRY_TOOL = ToolDefinition(
    name="update_user_profile_entry",
    description="Updates a specific entry in the user profile.",
    parameters={
        "type": "object",
        "properties": {
            "id": {"type": "string", "description": "The ID of the entry to update."},
            "category": {
                "type": "string",
                "enum": list(PROFILE_CATEGORIES),
                "description": "The category of the content.",
            },
            "content": {"type": "string", "description": "The content to update."},
        },
        "required": ["id", "category", "content"],
    },
)


# -----------------------------
# Time and date
# -----------------------------
def make_time_and_date_handler(
    timezone: str = DEFAULT_TIMEZONE, clock: Callable[[ZoneInfo], datetime] | None = None
) -> ToolHandler:
    """
    Build the handler of the time-and-date tool.

    Args:
        timezone: IANA timezone the time is reported in.
        clock: Returns the current time for a timezone; defaults to datetime.now.
    """
    zone = ZoneInfo(timezone)
    now = clock or datetime.now

    def get_current_time_and_date() -> str:
        current = now(zone)
        time = current.strftime("%H:%M:%S")
        day = current.strftime("%A %d %B %Y")
        return f"Current time and date: {time} on {day} ({timezone})"

    return get_current_time_and_date


# -----------------------------
# Weather
# -----------------------------
def _geocode(session: requests.Session, location: str) -> tuple[str, str] | None:
    response = session.get(
        NOMINATIM_URL,
        params={"format": "jsonv2", "q": location, "limit": 1},
        headers={"User-Agent": USER_AGENT},
        timeout=HTTP_TIMEOUT,
    )
    response.raise_for_status()
    results = response.json()
    if not results:
        return None
    return results[0]["lat"], results[0]["lon"]


def fetch_current_weather(
    location: str, api_key: str, session: requests.Session | None = None
) -> dict[str, Any] | None:
    """
    Look up the current weather for `location`.

    Returns:
        The ``current`` block of the OpenWeatherMap response, or None if the location
        could not be geocoded.

    Raises:
        requests.HTTPError: If either service answers with an error status.
    """
    session = session or requests.Session()
    coordinates = _geocode(session, location)
    if coordinates is None:
        return None
    lat, lon = coordinates
    response = session.get(
        OPEN_WEATHER_MAP_URL,
        params={
            "lat": lat,
            "lon": lon,
            "appid": api_key,
            "units": "metric",
            "exclude": "minutely,hourly,daily,alerts",
        },
        timeout=HTTP_TIMEOUT,
    )
    response.raise_for_status()
    return response.json().get("current", {})


def make_weather_handler(api_key: str, session: requests.Session | None = None) -> ToolHandler:
    if not api_key:
        raise ValueError("OPEN_WEATHER_MAP_API_KEY is not set")

    async def get_current_weather(location: str) -> str:
        # requests is blocking; keep it off the event loop
        current = await asyncio.to_thread(fetch_current_weather, location, api_key, session)
        if current is None:
            return f"Location not found: {location}"
        return f"Current weather in {location}: {json.dumps(current)}"

    return get_current_weather


# -----------------------------
# Profile entries
# -----------------------------
def make_profile_handlers(
    profile_service: ProfileService, user_key: str = "default"
) -> dict[str, ToolHandler]:
    """Build the handlers of the three profile-entry tools, keyed by tool name."""

    def _dump() -> str:
        return json.dumps({"profile": profile_service.get_entries(user_key)}, indent=2)

    def get_user_profile() -> str:
        return "Tool call successful! Here is the user profile:\n" + _dump()

    def append_to_user_profile(category: str = "", content: str = "") -> str:
        if not category or not content:
            return "Tool call failed: Missing category or content in arguments"
        try:
            profile_service.append_entry(user_key, category, content)
        except ValueError as e:
            return f"Tool call failed: {e}"
        return "Tool call successful! Here is the updated user profile:\n" + _dump()

    def update_user_profile_entry(id: str = "", category: str = "", content: str = "") -> str:
        if not id or not category or not content:
            return "Tool call failed: Missing category, content, or id in arguments"
        try:
            entry = profile_service.update_entry(user_key, id, content, category)
        except ValueError as e:
            return f"Tool call failed: {e}"
        if entry is None:
            return "Tool call failed: Entry not found in user profile"
        return "Tool call successful! Here is the updated user profile:\n" + _dump()

    return {
        GET_USER_PROFILE_TOOL.name: get_user_profile,
        APPEND_TO_USER_PROFILE_TOOL.name: append_to_user_profile,
        UPDATE_USER_PROFILE_ENTRY_TOOL.name: update_user_profile_entry,
    }


def register_builtin_tools(
    registry: ToolRegistry,
    *,
    profile_service: ProfileService | None = None,
    user_key: str = "default",
    weather_api_key: str | None = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> list[str]:
    """
    Register the built-in tools that the given settings allow.

    The time tool is always registered; the weather tool only with an API key; the
    profile-entry tools only with a profile service.

    Returns:
        list[str]: Names of the tools registered.

    Raises:
        ChatAgentError: If a registration fails (locked registry, duplicate name).
    """
    tools: list[tuple[ToolDefinition, ToolHandler]] = [
        (TIME_AND_DATE_TOOL, make_time_and_date_handler(timezone)),
    ]
    if weather_api_key:
        tools.append((WEATHER_TOOL, make_weather_handler(weather_api_key)))
    if profile_service is not None:
        handlers = make_profile_handlers(profile_service, user_key)
        for definition in (
            GET_USER_PROFILE_TOOL,
            APPEND_TO_USER_PROFILE_TOOL,
            UPDATE_USER_PROFILE_ENTRY_TOOL,
        ):
            tools.append((definition, handlers[definition.name]))

    for definition, handler in tools:
        registry.register(definition, handler).raise_for_error()
    return [definition.name for definition, _ in tools]

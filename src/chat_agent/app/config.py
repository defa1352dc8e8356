from dataclasses import dataclass

from chat_agent.infrastructure.platform_manager import get_parameters

# Constants that don't change
DEFAULT_LLM_API_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_LLM_MODEL = "llama-3.1-70b-specdec"
DEFAULT_LLM_TIMEOUT = 60.0
DEFAULT_MAX_TOOL_DEPTH = 8
DEFAULT_HISTORY_WINDOW_SIZE = 20
DEFAULT_TIMEZONE = "Europe/London"

PARAMETER_NAMES = [
    "llm_api_key",
    "llm_api_base_url",
    "llm_default_model",
    "llm_timeout",
    "max_tool_depth",
    "history_window_size",
    "log_level",
    "redis_url",
    "slack_integration",
    "slack_bot_token",
    "slack_bot_user_id",
    "profile_user_key",
    "open_weather_map_api_key",
    "timezone",
]


@dataclass
class AgentSettings:
    """Agent configuration settings loaded from environment parameters."""

    # LLM settings
    llm_api_key: str = ""
    llm_api_base_url: str = DEFAULT_LLM_API_BASE_URL
    llm_default_model: str = DEFAULT_LLM_MODEL
    llm_timeout: float = DEFAULT_LLM_TIMEOUT
    max_tool_depth: int = DEFAULT_MAX_TOOL_DEPTH
    history_window_size: int = DEFAULT_HISTORY_WINDOW_SIZE
    log_level: str = "INFO"

    # Redis settings (profile persistence is disabled without a URL)
    redis_url: str = ""

    # Slack settings
    slack_integration: str = "false"
    slack_bot_token: str = ""
    slack_bot_user_id: str = ""

    # Tool settings
    profile_user_key: str = "default"
    open_weather_map_api_key: str = ""
    timezone: str = DEFAULT_TIMEZONE


def _as_int(parameters: dict[str, str | None], name: str, default: int) -> int:
    value = parameters.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"Configuration value is invalid: {name.upper()}") from e


def _as_float(parameters: dict[str, str | None], name: str, default: float) -> float:
    value = parameters.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"Configuration value is invalid: {name.upper()}") from e


def load_settings() -> AgentSettings:
    """
    Load settings from environment parameters.

    A missing LLM API key is accepted here; the chat client reports it on first use.

    Raises:
        ValueError: If a value is malformed or a required Slack value is missing.
    """
    parameters = get_parameters(PARAMETER_NAMES)

    settings = AgentSettings(
        llm_api_key=parameters["llm_api_key"] or "",
        llm_api_base_url=parameters["llm_api_base_url"] or DEFAULT_LLM_API_BASE_URL,
        llm_default_model=parameters["llm_default_model"] or DEFAULT_LLM_MODEL,
        llm_timeout=_as_float(parameters, "llm_timeout", DEFAULT_LLM_TIMEOUT),
        max_tool_depth=_as_int(parameters, "max_tool_depth", DEFAULT_MAX_TOOL_DEPTH),
        history_window_size=_as_int(
            parameters, "history_window_size", DEFAULT_HISTORY_WINDOW_SIZE
        ),
        log_level=parameters["log_level"] or "INFO",
        redis_url=parameters["redis_url"] or "",
        slack_integration=(parameters["slack_integration"] or "false").lower(),
        slack_bot_token=parameters["slack_bot_token"] or "",
        slack_bot_user_id=parameters["slack_bot_user_id"] or "",
        profile_user_key=parameters["profile_user_key"] or "default",
        open_weather_map_api_key=parameters["open_weather_map_api_key"] or "",
        timezone=parameters["timezone"] or DEFAULT_TIMEZONE,
    )

    _validate_settings(settings)
    return settings


def _validate_settings(settings: AgentSettings) -> None:
    """Validate that all required settings have valid values."""
    required_fields = ["llm_api_base_url", "llm_default_model"]

    # Add Slack fields if integration is enabled
    if settings.slack_integration == "true":
        required_fields.extend(["slack_bot_token", "slack_bot_user_id"])

    for field in required_fields:
        if not getattr(settings, field):
            raise ValueError(f"Configuration value is invalid: {field.upper()}")

    if settings.llm_timeout <= 0:
        raise ValueError("Configuration value is invalid: LLM_TIMEOUT")
    if settings.max_tool_depth < 0:
        raise ValueError("Configuration value is invalid: MAX_TOOL_DEPTH")
    if settings.history_window_size < 1:
        raise ValueError("Configuration value is invalid: HISTORY_WINDOW_SIZE")

"""Tests for settings loading."""

import pytest

from chat_agent.app.config import (
    DEFAULT_LLM_API_BASE_URL,
    DEFAULT_LLM_MODEL,
    PARAMETER_NAMES,
    load_settings,
)
from chat_agent.infrastructure.platform_manager import get_parameters


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in PARAMETER_NAMES:
        monkeypatch.delenv(name.upper(), raising=False)


def test_get_parameters_reads_upper_case_environment(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "k")
    assert get_parameters(["llm_api_key", "redis_url"]) == {"llm_api_key": "k", "redis_url": None}
    assert get_parameters("llm_api_key") == {"llm_api_key": "k"}


def test_defaults_without_environment():
    settings = load_settings()
    assert settings.llm_api_key == ""
    assert settings.llm_api_base_url == DEFAULT_LLM_API_BASE_URL
    assert settings.llm_default_model == DEFAULT_LLM_MODEL
    assert settings.max_tool_depth == 8
    assert settings.history_window_size == 20
    assert settings.slack_integration == "false"


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "key")
    monkeypatch.setenv("LLM_API_BASE_URL", "https://llm.test/v1")
    monkeypatch.setenv("MAX_TOOL_DEPTH", "3")
    monkeypatch.setenv("LLM_TIMEOUT", "12.5")
    monkeypatch.setenv("SLACK_INTEGRATION", "TRUE")
    monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb")
    monkeypatch.setenv("SLACK_BOT_USER_ID", "UBOT")

    settings = load_settings()

    assert settings.llm_api_key == "key"
    assert settings.llm_api_base_url == "https://llm.test/v1"
    assert settings.max_tool_depth == 3
    assert settings.llm_timeout == 12.5
    assert settings.slack_integration == "true"


def test_invalid_number(monkeypatch):
    monkeypatch.setenv("MAX_TOOL_DEPTH", "lots")
    with pytest.raises(ValueError, match="Configuration value is invalid: MAX_TOOL_DEPTH"):
        load_settings()


def test_window_size_must_be_positive(monkeypatch):
    monkeypatch.setenv("HISTORY_WINDOW_SIZE", "0")
    with pytest.raises(ValueError, match="HISTORY_WINDOW_SIZE"):
        load_settings()


def test_slack_values_required_when_integration_enabled(monkeypatch):
    monkeypatch.setenv("SLACK_INTEGRATION", "true")
    with pytest.raises(ValueError, match="SLACK_BOT_TOKEN"):
        load_settings()

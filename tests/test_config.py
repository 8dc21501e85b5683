"""Tests for settings loading and validation."""

import pytest
from pydantic import ValidationError

from config import Settings, load_settings, validate_config


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-env")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("SERIALIZE_CHANNEL_TOGGLES", "false")

    settings = load_settings()

    assert settings.SLACK_BOT_TOKEN == "xoxb-env"
    assert settings.PORT == 8080
    assert settings.SERIALIZE_CHANNEL_TOGGLES is False


def test_settings_are_immutable(settings):
    with pytest.raises(ValidationError):
        settings.SLACK_BOT_TOKEN = "changed"


def test_validate_lists_missing_variables(monkeypatch):
    for var in ("SLACK_SIGNING_SECRET", "SLACK_BROWSER_TOKEN", "SLACK_SESSION_COOKIE"):
        monkeypatch.delenv(var, raising=False)

    with pytest.raises(ValueError) as exc_info:
        validate_config(Settings(_env_file=None, SLACK_BOT_TOKEN="xoxb"))

    message = str(exc_info.value)
    assert "SLACK_SIGNING_SECRET" in message
    assert "SLACK_SESSION_COOKIE" in message
    assert "SLACK_BOT_TOKEN" not in message


def test_validate_accepts_complete_config(settings):
    validate_config(settings)
    assert settings.legacy_credentials_configured is True

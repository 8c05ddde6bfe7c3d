"""Tests for environment configuration."""

import pytest

from lead_agent.config import OPENAI_BASE_URL, REDPILL_BASE_URL, Config, ConfigurationError

ENV_VARS = [
    "TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_PHONE_NUMBER", "WHATSAPP_FROM",
    "DEMO_TO", "MY_PHONE_NUMBER", "REDPILL_API_KEY", "OPENAI_API_KEY", "AI_BASE_URL",
    "AI_MODEL", "VOICE_AI_MODEL", "AI_TEMPERATURE", "AI_MAX_TOKENS", "VOICE_AI_MAX_TOKENS",
    "AI_TIMEOUT_SECONDS", "PORT", "VOICE_PORT", "NGROK_URL", "ELEVENLABS_VOICE_ID",
    "WELCOME_GREETING", "FOLLOWUP_MINUTES", "FOLLOWUP_CHECK_SECONDS", "FOLLOWUP_ENABLED",
    "FOLLOWUP_LIMIT_HOT", "FOLLOWUP_LIMIT_WARM", "FOLLOWUP_LIMIT_COLD",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config.from_env()
    assert config.port == 3000
    assert config.voice_port == 8080
    assert config.whatsapp_from == "whatsapp:+14155238886"
    assert config.ai_base_url == OPENAI_BASE_URL
    assert config.followup_minutes == 3
    assert config.followup_enabled is True
    assert config.followup_limits == {"hot": 8, "warm": 5, "cold": 3}
    assert config.ws_url == ""
    assert config.twiml_url == ""


def test_redpill_key_selects_redpill(monkeypatch):
    monkeypatch.setenv("REDPILL_API_KEY", "rp-key")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-other")
    config = Config.from_env()
    assert config.ai_api_key == "rp-key"
    assert config.ai_base_url == REDPILL_BASE_URL


def test_openai_key_fallback(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-key")
    config = Config.from_env()
    assert config.ai_api_key == "sk-key"
    assert config.ai_base_url == OPENAI_BASE_URL


def test_overrides(monkeypatch):
    monkeypatch.setenv("NGROK_URL", "abc.ngrok.app")
    monkeypatch.setenv("FOLLOWUP_ENABLED", "false")
    monkeypatch.setenv("FOLLOWUP_LIMIT_COLD", "1")
    monkeypatch.setenv("AI_BASE_URL", "http://localhost:8000/v1")
    config = Config.from_env()
    assert config.ws_url == "wss://abc.ngrok.app/ws"
    assert config.twiml_url == "https://abc.ngrok.app/twiml"
    assert config.followup_enabled is False
    assert config.followup_limits["cold"] == 1
    assert config.ai_base_url == "http://localhost:8000/v1"


def test_malformed_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("FOLLOWUP_MINUTES", "three")
    monkeypatch.setenv("PORT", "")
    monkeypatch.setenv("AI_TEMPERATURE", "hot")
    monkeypatch.setenv("FOLLOWUP_LIMIT_WARM", " 7 ")
    config = Config.from_env()
    assert config.followup_minutes == 3
    assert config.port == 3000
    assert config.ai_temperature == 0.8
    assert config.followup_limit_warm == 7


def test_validate_lists_missing():
    assert Config.from_env().validate() == [
        "TWILIO_ACCOUNT_SID",
        "TWILIO_AUTH_TOKEN",
        "REDPILL_API_KEY or OPENAI_API_KEY",
    ]


def test_validate_ok(config):
    assert config.validate() == []


def test_configuration_error_hint():
    error = ConfigurationError("Missing NGROK_URL in .env", hint="Start ngrok")
    assert str(error) == "Missing NGROK_URL in .env"
    assert error.hint == "Start ngrok"
    assert isinstance(error, ValueError)

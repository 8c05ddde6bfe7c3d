"""
Lead Agent Configuration

Load configuration from environment variables and .env file.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Load .env file
load_dotenv()

REDPILL_BASE_URL = "https://api.redpill.ai/v1"
OPENAI_BASE_URL = "https://api.openai.com/v1"

DEFAULT_WELCOME_GREETING = (
    "Hey! This is Sarah calling from SecureLife Insurance. I'm just following up - "
    "are you still looking for an insurance plan? We currently have some great options "
    "like our Family Shield, Health Plus, Life Secure, Investment Link, and Critical Care "
    "plans. Any of these sound interesting to you?"
)


class ConfigurationError(ValueError):
    """A required setting for an outbound action is missing."""

    def __init__(self, message: str, hint: str = ""):
        super().__init__(message)
        self.hint = hint


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    try:
        return int(value)
    except ValueError:
        if value:
            print(f"[Config] Invalid {name}={value!r}, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    try:
        return float(value)
    except ValueError:
        if value:
            print(f"[Config] Invalid {name}={value!r}, using {default}")
        return default


@dataclass
class Config:
    """Application configuration."""

    # Twilio
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_phone_number: str = ""  # Caller ID for voice calls
    whatsapp_from: str = "whatsapp:+14155238886"  # Twilio sandbox sender

    # Demo destinations
    demo_to: str = ""
    my_phone_number: str = ""

    # Chat completion API (OpenAI-compatible)
    ai_api_key: str = ""
    ai_base_url: str = OPENAI_BASE_URL
    ai_model: str = "openai/gpt-oss-20b"
    voice_ai_model: str = "gpt-4o-mini"
    ai_temperature: float = 0.8
    ai_max_tokens: int = 300
    voice_ai_max_tokens: int = 150
    ai_timeout_seconds: float = 30.0

    # Servers
    port: int = 3000
    voice_port: int = 8080
    ngrok_url: str = ""

    # Voice
    elevenlabs_voice_id: str = "EXAVITQu4vr4xnSDxMaL"
    welcome_greeting: str = DEFAULT_WELCOME_GREETING

    # Follow-ups
    followup_minutes: int = 3
    followup_check_seconds: float = 60.0
    followup_enabled: bool = True
    followup_limit_hot: int = 8
    followup_limit_warm: int = 5
    followup_limit_cold: int = 3

    @property
    def ws_url(self) -> str:
        """ConversationRelay WebSocket URL."""
        return f"wss://{self.ngrok_url}/ws" if self.ngrok_url else ""

    @property
    def twiml_url(self) -> str:
        """Public URL Twilio fetches call instructions from."""
        return f"https://{self.ngrok_url}/twiml" if self.ngrok_url else ""

    @property
    def followup_limits(self) -> dict[str, int]:
        """Follow-up limits keyed by category value."""
        return {
            "hot": self.followup_limit_hot,
            "warm": self.followup_limit_warm,
            "cold": self.followup_limit_cold,
        }

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        redpill_key = os.getenv("REDPILL_API_KEY", "")
        default_base_url = REDPILL_BASE_URL if redpill_key else OPENAI_BASE_URL

        return cls(
            twilio_account_sid=os.getenv("TWILIO_ACCOUNT_SID", ""),
            twilio_auth_token=os.getenv("TWILIO_AUTH_TOKEN", ""),
            twilio_phone_number=os.getenv("TWILIO_PHONE_NUMBER", ""),
            whatsapp_from=os.getenv("WHATSAPP_FROM", "whatsapp:+14155238886"),
            demo_to=os.getenv("DEMO_TO", ""),
            my_phone_number=os.getenv("MY_PHONE_NUMBER", ""),
            ai_api_key=redpill_key or os.getenv("OPENAI_API_KEY", ""),
            ai_base_url=os.getenv("AI_BASE_URL", default_base_url),
            ai_model=os.getenv("AI_MODEL", "openai/gpt-oss-20b"),
            voice_ai_model=os.getenv("VOICE_AI_MODEL", "gpt-4o-mini"),
            ai_temperature=_env_float("AI_TEMPERATURE", 0.8),
            ai_max_tokens=_env_int("AI_MAX_TOKENS", 300),
            voice_ai_max_tokens=_env_int("VOICE_AI_MAX_TOKENS", 150),
            ai_timeout_seconds=_env_float("AI_TIMEOUT_SECONDS", 30.0),
            port=_env_int("PORT", 3000),
            voice_port=_env_int("VOICE_PORT", 8080),
            ngrok_url=os.getenv("NGROK_URL", ""),
            elevenlabs_voice_id=os.getenv("ELEVENLABS_VOICE_ID", "EXAVITQu4vr4xnSDxMaL"),
            welcome_greeting=os.getenv("WELCOME_GREETING", DEFAULT_WELCOME_GREETING),
            followup_minutes=_env_int("FOLLOWUP_MINUTES", 3),
            followup_check_seconds=_env_float("FOLLOWUP_CHECK_SECONDS", 60.0),
            followup_enabled=_env_bool("FOLLOWUP_ENABLED", True),
            followup_limit_hot=_env_int("FOLLOWUP_LIMIT_HOT", 8),
            followup_limit_warm=_env_int("FOLLOWUP_LIMIT_WARM", 5),
            followup_limit_cold=_env_int("FOLLOWUP_LIMIT_COLD", 3),
        )

    def validate(self) -> list[str]:
        """Validate required configuration. Returns list of missing fields."""
        missing = []
        if not self.twilio_account_sid:
            missing.append("TWILIO_ACCOUNT_SID")
        if not self.twilio_auth_token:
            missing.append("TWILIO_AUTH_TOKEN")
        if not self.ai_api_key:
            missing.append("REDPILL_API_KEY or OPENAI_API_KEY")
        return missing


def load_config() -> Config:
    """Load and return the application configuration."""
    return Config.from_env()

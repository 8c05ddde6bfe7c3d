"""Shared fixtures: test config, a scripted chat model and a mocked Twilio client."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from langchain_core.messages import AIMessage

from lead_agent.config import Config
from lead_agent.telephony.twilio_client import TwilioClient

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FakeChatModel:
    """Stands in for the LangChain chat model; records every call."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies) if replies is not None else ["Wah okay lah, you got family?"]
        self.error = error
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        if len(self.replies) > 1:
            return AIMessage(content=self.replies.pop(0))
        return AIMessage(content=self.replies[0])


@pytest.fixture
def config():
    return Config(
        twilio_account_sid="AC_test",
        twilio_auth_token="token",
        twilio_phone_number="+15550001111",
        whatsapp_from="whatsapp:+14155238886",
        ai_api_key="sk-test",
        ngrok_url="bot.ngrok.app",
        ai_timeout_seconds=5,
        followup_enabled=False,
    )


@pytest.fixture
def chat_model():
    return FakeChatModel()


@pytest.fixture
def twilio_rest():
    client = MagicMock()
    client.messages.create.return_value.sid = "SM_test"
    client.calls.create.return_value.sid = "CA_test"
    return client


@pytest.fixture
def twilio(config, twilio_rest):
    return TwilioClient(config, client=twilio_rest)

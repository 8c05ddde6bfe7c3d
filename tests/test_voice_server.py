"""Tests for the ConversationRelay voice server."""

import json

import pytest
from fastapi.testclient import TestClient

from lead_agent.voice_server import create_voice_app

from conftest import FakeChatModel


@pytest.fixture
def model():
    return FakeChatModel(["Okay, Health Plus is about eighty ringgit a month."])


@pytest.fixture
def app(config, model, twilio):
    return create_voice_app(config, chat_model=model, twilio=twilio)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


class TestHttp:

    def test_health(self, client):
        body = client.get("/").json()
        assert body == {
            "status": "running",
            "service": "voice-bot",
            "wsUrl": "wss://bot.ngrok.app/ws",
            "sessions": 0,
        }

    def test_twiml(self, client):
        response = client.get("/twiml")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/xml")
        assert "<Connect><ConversationRelay" in response.text
        assert 'url="wss://bot.ngrok.app/ws"' in response.text
        assert 'ttsProvider="ElevenLabs"' in response.text
        assert 'interruptible="true"' in response.text
        assert "SecureLife" in response.text


class TestOutboundCall:

    def test_call(self, client, twilio_rest):
        body = client.get("/call", params={"to": "+60123456789"}).json()

        assert body["success"] is True
        assert body["callSid"] == "CA_test"
        assert "+60123456789" in body["message"]
        twilio_rest.calls.create.assert_called_once_with(
            to="+60123456789",
            from_="+15550001111",
            url="https://bot.ngrok.app/twiml",
            method="GET",
        )

    def test_unencoded_plus_in_query(self, client, twilio_rest):
        body = client.get("/call?to=+60123456789").json()
        assert body["message"] == "Calling +60123456789... Answer your phone!"
        assert twilio_rest.calls.create.call_args.kwargs["to"] == "+60123456789"

    def test_missing_number(self, client, twilio_rest):
        response = client.get("/call")
        assert response.status_code == 400
        assert response.json()["error"] == "Missing phone number"
        assert "MY_PHONE_NUMBER" in response.json()["hint"]
        twilio_rest.calls.create.assert_not_called()

    def test_twilio_failure(self, client, twilio_rest):
        twilio_rest.calls.create.side_effect = RuntimeError("Authenticate")
        response = client.get("/call", params={"to": "+60123456789"})
        assert response.status_code == 500
        assert response.json() == {
            "error": "Authenticate",
            "hint": "Check your Twilio credentials and phone numbers",
        }


class TestConversationRelay:

    def test_setup_and_prompt(self, client, app, model):
        with client.websocket_connect("/ws") as ws:
            ws.send_text(json.dumps({"type": "setup", "callSid": "CA123"}))
            ws.send_text(json.dumps({"type": "prompt", "voicePrompt": "how much is health plus"}))
            reply = ws.receive_json()

            assert reply == {
                "type": "text",
                "token": "Okay, Health Plus is about eighty ringgit a month.",
                "last": True,
            }
            state = app.state.registry.get("CA123").get()
            assert state.category.value == "hot"
            assert len(state.conversation_history) == 2

        assert len(model.calls) == 1

    def test_ignores_noise(self, client, app, model):
        with client.websocket_connect("/ws") as ws:
            ws.send_text("not json")
            ws.send_text(json.dumps(["a", "list"]))
            ws.send_text(json.dumps({"type": "setup", "callSid": "CA456"}))
            ws.send_text(json.dumps({"type": "interrupt"}))
            ws.send_text(json.dumps({"type": "dtmf", "digit": "1"}))
            ws.send_text(json.dumps({"type": "mystery"}))
            ws.send_text(json.dumps({"type": "prompt", "voicePrompt": "hello"}))
            reply = ws.receive_json()

            assert reply["type"] == "text"
            assert len(app.state.registry.get("CA456").get().conversation_history) == 2

    def test_session_discarded_on_close(self, client, app):
        with client.websocket_connect("/ws") as ws:
            ws.send_text(json.dumps({"type": "setup", "callSid": "CA123"}))
            ws.send_text(json.dumps({"type": "prompt", "voicePrompt": "hello"}))
            ws.receive_json()
            assert "CA123" in app.state.registry

        assert len(app.state.registry) == 0
        assert client.get("/").json()["sessions"] == 0

    def test_setup_without_call_sid_is_isolated(self, client, app):
        for _ in range(2):
            with client.websocket_connect("/ws") as ws:
                ws.send_text(json.dumps({"type": "setup"}))
                ws.send_text(json.dumps({"type": "prompt", "voicePrompt": "hello"}))
                ws.receive_json()
                (call_id,) = app.state.registry.ids()
                assert call_id.startswith("anonymous-")
                assert len(app.state.registry.get(call_id).get().conversation_history) == 2

        assert len(app.state.registry) == 0
        assert "" not in app.state.registry

    def test_prompt_before_setup(self, client, app):
        with client.websocket_connect("/ws") as ws:
            ws.send_text(json.dumps({"type": "prompt", "voicePrompt": "hello?"}))
            assert ws.receive_json()["last"] is True
            assert len(app.state.registry) == 1

    def test_model_failure_speaks_fallback(self, config, twilio):
        app = create_voice_app(config, chat_model=FakeChatModel(error=RuntimeError("down")), twilio=twilio)
        with TestClient(app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_text(json.dumps({"type": "setup", "callSid": "CA789"}))
                ws.send_text(json.dumps({"type": "prompt", "voicePrompt": "hello"}))
                reply = ws.receive_json()
        assert reply["token"] == "Eh sorry, got connection issue. Can you repeat that?"

"""
Voice Server

FastAPI server for Twilio voice calls using ConversationRelay: TwiML for
inbound/outbound calls, an endpoint that dials out, and the WebSocket the
relay talks to.
"""

from typing import Optional

from fastapi import FastAPI, Response, WebSocket
from fastapi.responses import JSONResponse

from .config import Config, ConfigurationError, load_config
from .agent.prompts import VOICE_PERSONA
from .agent.reply_generator import ReplyGenerator
from .conversation import VoiceConversationHandler
from .data.store import ConversationRegistry
from .telephony.conversation_relay import ConversationRelayHandler
from .telephony.twilio_client import TwilioClient, generate_conversation_relay_twiml, normalize_number


def create_voice_app(
    config: Optional[Config] = None,
    chat_model=None,
    twilio: Optional[TwilioClient] = None,
) -> FastAPI:
    """Create the voice FastAPI application."""
    app = FastAPI(title="Lead Agent Voice", description="ConversationRelay voice bot")

    config = config or load_config()
    twilio = twilio or TwilioClient(config)

    # Calls never share state with WhatsApp threads
    registry = ConversationRegistry("voice")
    generator = ReplyGenerator(
        config,
        VOICE_PERSONA,
        model=config.voice_ai_model,
        max_tokens=config.voice_ai_max_tokens,
        chat_model=chat_model,
    )
    conversations = VoiceConversationHandler(registry, generator)
    relay = ConversationRelayHandler(conversations)

    app.state.config = config
    app.state.registry = registry

    @app.on_event("startup")
    async def startup():
        print(f"[Server] Voice bot ready on port {config.voice_port}")
        print(f"[Server] TwiML: GET /twiml | WebSocket: {config.ws_url or 'Set NGROK_URL in .env'}")

    @app.get("/")
    async def health():
        """Health check endpoint."""
        return {
            "status": "running",
            "service": "voice-bot",
            "wsUrl": config.ws_url,
            "sessions": len(registry),
        }

    @app.get("/twiml")
    async def twiml():
        """Instructions Twilio runs when a call connects."""
        print("[Voice] Incoming call - sending TwiML")
        content = generate_conversation_relay_twiml(
            websocket_url=config.ws_url,
            voice=config.elevenlabs_voice_id,
            welcome_greeting=config.welcome_greeting,
        )
        return Response(content=content, media_type="text/xml")

    @app.get("/call")
    async def call(to: Optional[str] = None):
        """Trigger an outbound call to `to` or MY_PHONE_NUMBER."""
        try:
            call_sid = twilio.make_call(to)
        except ConfigurationError as e:
            body = {"error": str(e)}
            if e.hint:
                body["hint"] = e.hint
            return JSONResponse(body, status_code=400)
        except Exception as e:
            print(f"[Voice] Failed to make call: {e}")
            return JSONResponse(
                {"error": str(e), "hint": "Check your Twilio credentials and phone numbers"},
                status_code=500,
            )

        to_number = normalize_number(to or config.my_phone_number)
        return {
            "success": True,
            "message": f"Calling {to_number}... Answer your phone!",
            "callSid": call_sid,
        }

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """ConversationRelay WebSocket."""
        await relay.handle_connection(websocket)

    return app


# Create app at module level for uvicorn import
app = create_voice_app()

# For running directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=app.state.config.voice_port)

"""
WhatsApp Server

FastAPI server for the Twilio WhatsApp webhook, health introspection and
the automated follow-up scheduler.
"""

from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from .config import Config, ConfigurationError, load_config
from .agent.prompts import WHATSAPP_PERSONA
from .agent.reply_generator import ReplyGenerator
from .campaign.followup_policy import limits_from_config
from .campaign.scheduler import FollowUpScheduler
from .conversation import TextConversationHandler
from .data.store import ConversationRegistry
from .telephony.twilio_client import TwilioClient, generate_message_twiml


def create_app(
    config: Optional[Config] = None,
    chat_model=None,
    twilio: Optional[TwilioClient] = None,
) -> FastAPI:
    """Create the WhatsApp FastAPI application."""
    app = FastAPI(title="Lead Agent", description="WhatsApp insurance sales bot")

    config = config or load_config()
    twilio = twilio or TwilioClient(config)

    registry = ConversationRegistry("whatsapp")
    generator = ReplyGenerator(
        config,
        WHATSAPP_PERSONA,
        model=config.ai_model,
        max_tokens=config.ai_max_tokens,
        chat_model=chat_model,
    )
    conversations = TextConversationHandler(registry, generator)
    scheduler = FollowUpScheduler(
        registry,
        generator,
        twilio,
        min_interval_minutes=config.followup_minutes,
        check_interval_seconds=config.followup_check_seconds,
        limits=limits_from_config(config.followup_limits),
    )

    app.state.config = config
    app.state.registry = registry
    app.state.conversations = conversations
    app.state.scheduler = scheduler

    @app.on_event("startup")
    async def startup():
        missing = config.validate()
        if missing:
            print(f"[Server] Warning: missing configuration: {', '.join(missing)}")
        if config.followup_enabled:
            scheduler.start()
        print(f"[Server] WhatsApp bot ready - webhook: POST /whatsapp (port {config.port})")
        print('[Server] WhatsApp commands: "reset" (start fresh) | "stop" (opt out)')

    @app.on_event("shutdown")
    async def shutdown():
        await scheduler.stop()

    @app.get("/")
    async def health():
        """Health check with a snapshot of every conversation."""
        return {
            "status": "running",
            "conversations": registry.snapshots(),
        }

    @app.get("/conversations/{sender_id}")
    async def conversation_state(sender_id: str):
        """Snapshot of one conversation."""
        store = registry.get(sender_id)
        if store is None:
            return JSONResponse({"error": f"Unknown conversation: {sender_id}"}, status_code=404)
        return {"id": sender_id, "state": store.get().snapshot()}

    @app.post("/whatsapp")
    async def whatsapp_webhook(request: Request):
        """
        Handle an inbound WhatsApp message from Twilio.

        Replies inline with TwiML so Twilio delivers the answer immediately.
        """
        form = await request.form()
        incoming = str(form.get("Body") or "").strip()
        sender = str(form.get("From") or "").strip()
        if not sender:
            print("[WhatsApp] Rejecting webhook without a From address")
            return JSONResponse({"error": "Missing From field"}, status_code=400)

        print(f"[WhatsApp] Incoming from {sender}: \"{incoming}\"")

        reply = await conversations.handle_inbound(sender, incoming)

        print(f"[WhatsApp] Reply: \"{reply}\"")
        return Response(content=generate_message_twiml(reply), media_type="text/xml")

    @app.post("/followup")
    async def trigger_followup(to: Optional[str] = None):
        """Send a follow-up now (if the policy allows) to `to` or DEMO_TO."""
        try:
            sent, detail = await scheduler.follow_up(to or config.demo_to)
        except ConfigurationError as e:
            body = {"error": str(e)}
            if e.hint:
                body["hint"] = e.hint
            return JSONResponse(body, status_code=400)

        if sent:
            return {"sent": True, "text": detail}
        return {"sent": False, "reason": detail}

    return app


# Create app at module level for uvicorn import
app = create_app()

# For running directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=app.state.config.port)

"""
Conversation Handlers

Per-channel handlers that apply commands and drive a conversation through
record inbound -> classify -> generate reply, holding the conversation's
lock for the whole sequence.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from .agent.prompts import RESET_COMMAND, STOP_COMMAND, RESET_GREETING, STOP_ACKNOWLEDGEMENT
from .agent.reply_generator import ReplyGenerator
from .data.store import ConversationRegistry, LeadStateStore


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ConversationHandler:
    """Shared inbound flow for both channels."""

    channel = "conversation"

    def __init__(
        self,
        registry: ConversationRegistry,
        generator: ReplyGenerator,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.registry = registry
        self.generator = generator
        self.clock = clock or utc_now

    async def _converse(self, store: LeadStateStore, text: str, now: datetime) -> str:
        store.record_inbound(text, now)
        store.update_category(text)
        return await self.generator.generate_reply(store, text, is_follow_up=False, now=now)


class TextConversationHandler(ConversationHandler):
    """
    WhatsApp conversations keyed by sender address.

    "reset" and "stop" are reserved commands matched on the whole
    trimmed message, case-insensitively.
    """

    channel = "whatsapp"

    async def handle_inbound(self, sender_id: str, text: Optional[str]) -> str:
        """
        Process one inbound message and return the reply text.

        Args:
            sender_id: WhatsApp address of the lead ("whatsapp:+60...")
            text: Message body; None is treated as ""
        """
        text = (text or "").strip()
        command = text.lower()
        now = self.clock()

        async with self.registry.session(sender_id) as store:
            if command == RESET_COMMAND:
                store.reset(now)
                return RESET_GREETING

            if command == STOP_COMMAND:
                store.set_dnc()
                print(f"[WhatsApp] DNC flag set for {sender_id} - stopping all follow-ups")
                return STOP_ACKNOWLEDGEMENT

            reply = await self._converse(store, text, now)
            state = store.get()
            print(f"[WhatsApp] State: {state.category.value.upper()} | Stage: {state.stage.value}")
            return reply


class VoiceConversationHandler(ConversationHandler):
    """Phone conversations keyed by call SID, discarded when the call ends."""

    channel = "voice"

    def open(self, call_sid: str) -> LeadStateStore:
        return self.registry.get_or_create(call_sid)

    async def handle_prompt(self, call_sid: str, text: Optional[str]) -> str:
        """Process one caller utterance and return what the agent should say."""
        text = (text or "").strip()
        now = self.clock()
        async with self.registry.session(call_sid) as store:
            return await self._converse(store, text, now)

    def close(self, call_sid: Optional[str]):
        if call_sid is not None:
            self.registry.discard(call_sid)

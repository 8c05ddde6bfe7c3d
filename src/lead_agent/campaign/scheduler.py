"""
Follow-up Scheduler

Periodically walks the WhatsApp conversations and sends a proactive
follow-up to every lead the policy says is eligible.
"""

import asyncio
import traceback
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional

from ..agent.reply_generator import ReplyGenerator
from ..config import ConfigurationError
from ..data.models import Category
from ..data.store import ConversationRegistry
from ..telephony.twilio_client import TwilioClient, whatsapp_address
from .followup_policy import check_follow_up


class FollowUpScheduler:
    """
    Sends automated follow-ups.

    Each conversation is handled under its own lock, so a follow-up never
    interleaves with an inbound message for the same lead.
    """

    def __init__(
        self,
        registry: ConversationRegistry,
        generator: ReplyGenerator,
        twilio: TwilioClient,
        min_interval_minutes: float = 3,
        check_interval_seconds: float = 60,
        limits: Optional[Mapping[Category, int]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.registry = registry
        self.generator = generator
        self.twilio = twilio
        self.min_interval_minutes = min_interval_minutes
        self.check_interval_seconds = check_interval_seconds
        self.limits = limits
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        self._running = False
        self._task: Optional[asyncio.Task] = None

    async def follow_up(self, conversation_id: str, now: Optional[datetime] = None) -> tuple[bool, str]:
        """
        Try to send one follow-up to a conversation.

        Returns:
            (sent, text or reason)

        Raises:
            ConfigurationError: no usable destination/sender
        """
        if not conversation_id:
            raise ConfigurationError(
                "Missing WhatsApp destination",
                hint="Set DEMO_TO in .env or pass ?to=whatsapp:%2B60123456789",
            )
        conversation_id = whatsapp_address(conversation_id)
        if conversation_id not in self.registry:
            return False, f"No conversation with {conversation_id}"

        async with self.registry.session(conversation_id) as store:
            now = now or self.clock()
            eligible, reason = check_follow_up(
                store.get(), now, self.min_interval_minutes, self.limits
            )
            if not eligible:
                return False, reason

            text = await self.generator.generate_follow_up(store)
            if not text:
                return False, "Follow-up generation failed"

            try:
                await asyncio.to_thread(self.twilio.send_whatsapp, conversation_id, text)
            except ConfigurationError:
                raise
            except Exception as e:
                print(f"[FollowUp] Send failed for {conversation_id}: {e}")
                return False, f"Send failed: {e}"

            store.record_outbound(text, now, is_follow_up=True)
            state = store.get()
            print(
                f"[FollowUp] Sent #{state.follow_up_count} to {conversation_id} "
                f"({state.category.value.upper()}): \"{text}\""
            )
            return True, text

    async def run_once(self, now: Optional[datetime] = None) -> int:
        """Check every conversation once. Returns the number of follow-ups sent."""
        sent = 0
        for conversation_id in self.registry.ids():
            try:
                ok, _ = await self.follow_up(conversation_id, now)
            except ConfigurationError as e:
                print(f"[FollowUp] Skipping {conversation_id}: {e}")
                continue
            if ok:
                sent += 1
        return sent

    async def run(self):
        """Loop until stopped."""
        self._running = True
        print(
            f"[FollowUp] Scheduler started (interval {self.min_interval_minutes} min, "
            f"check every {self.check_interval_seconds}s)"
        )
        try:
            while self._running:
                try:
                    await self.run_once()
                except Exception as e:
                    print(f"[FollowUp] Tick error: {e}")
                    traceback.print_exc()
                await asyncio.sleep(self.check_interval_seconds)
        except asyncio.CancelledError:
            print("[FollowUp] Scheduler cancelled")
        finally:
            self._running = False

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self):
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        print("[FollowUp] Scheduler stopped")

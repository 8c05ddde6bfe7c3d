"""
Lead State Store

Owns the mutable LeadState of one conversation and funnels every change
through a handful of methods. ConversationRegistry maps conversation
identities (WhatsApp sender, call SID) to their own store and lock.
"""

import asyncio
import copy
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional

from .models import LeadState, Role, Stage, Turn
from ..agent.classifier import classify

NOTES_MAX_CHARS = 50
NOTES_ELLIPSIS = "..."


def truncate_notes(text: str, limit: int = NOTES_MAX_CHARS) -> str:
    """First `limit` characters of text, with an ellipsis if anything was cut."""
    if len(text) > limit:
        return text[:limit] + NOTES_ELLIPSIS
    return text


class LeadStateStore:
    """State record for a single conversation. No I/O."""

    def __init__(self, conversation_id: str = ""):
        self.conversation_id = conversation_id
        self._state = LeadState()

    def get(self) -> LeadState:
        """Return a copy of the current state."""
        return copy.deepcopy(self._state)

    def reset(self, now: Optional[datetime] = None):
        """
        Restore defaults and clear history.

        When `now` is given, both timestamps are set to it (the reset
        greeting counts as an exchange).
        """
        self._state = LeadState(last_inbound_at=now, last_outbound_at=now)
        print(f"[State] Reset {self.conversation_id or 'conversation'}")

    def record_inbound(self, text: str, now: datetime):
        """Record a message from the lead."""
        state = self._state
        state.last_inbound_at = now
        state.dnc_flag = False
        state.conversation_history.append(Turn(Role.USER, text))
        if state.stage == Stage.GREETING:
            state.stage = Stage.DISCOVERY
        state.notes = truncate_notes(text)

    def record_outbound(self, text: str, now: datetime, is_follow_up: bool = False):
        """Record a generated message sent to the lead."""
        state = self._state
        state.last_outbound_at = now
        state.conversation_history.append(Turn(Role.ASSISTANT, text))
        if is_follow_up:
            state.follow_up_count += 1
            if state.stage.rank < Stage.FOLLOWUP.rank:
                state.stage = Stage.FOLLOWUP

    def set_dnc(self):
        """Suppress automated outreach until the lead writes again."""
        self._state.dnc_flag = True

    def update_category(self, text: str):
        """Run the classifier over an inbound message and store the result."""
        previous = self._state.category
        new = classify(previous, text)
        if new != previous:
            print(f"[State] {self.conversation_id or 'Lead'}: {previous.value.upper()} -> {new.value.upper()}")
        self._state.category = new
        return new


class ConversationRegistry:
    """
    In-memory mapping of conversation identity to LeadStateStore.

    Each identity has its own asyncio.Lock; hold it (via `session`) for the
    whole inbound -> classify -> generate -> outbound sequence.
    """

    def __init__(self, name: str = "conversations"):
        self.name = name
        self._stores: dict[str, LeadStateStore] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._stores)

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._stores

    def ids(self) -> list[str]:
        return list(self._stores)

    def get_or_create(self, conversation_id: str) -> LeadStateStore:
        """Get the store for an identity, creating a default one if new."""
        store = self._stores.get(conversation_id)
        if store is None:
            store = LeadStateStore(conversation_id)
            self._stores[conversation_id] = store
            self._locks[conversation_id] = asyncio.Lock()
            print(f"[State] New conversation in {self.name}: {conversation_id}")
        return store

    def get(self, conversation_id: str) -> Optional[LeadStateStore]:
        return self._stores.get(conversation_id)

    @asynccontextmanager
    async def session(self, conversation_id: str) -> AsyncIterator[LeadStateStore]:
        """Serialize access to one conversation."""
        store = self.get_or_create(conversation_id)
        async with self._locks[conversation_id]:
            yield store

    def discard(self, conversation_id: str):
        """Forget a conversation (e.g. when a call hangs up)."""
        self._stores.pop(conversation_id, None)
        self._locks.pop(conversation_id, None)

    def snapshots(self) -> dict[str, dict]:
        return {cid: store.get().snapshot() for cid, store in self._stores.items()}

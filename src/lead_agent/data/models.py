"""
Data Models

Conversation state for a single lead.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Category(Enum):
    """Purchase-intent temperature of a lead."""
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"


class Stage(Enum):
    """Coarse conversation phase. Declaration order is progression order."""
    GREETING = "greeting"
    DISCOVERY = "discovery"
    FOLLOWUP = "followup"

    @property
    def rank(self) -> int:
        return list(Stage).index(self)


class Role(Enum):
    """Speaker of a history turn."""
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Turn:
    """One entry of the conversation history."""
    role: Role
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role.value, "content": self.content}


@dataclass
class LeadState:
    """Mutable record for one conversation."""
    last_inbound_at: Optional[datetime] = None
    last_outbound_at: Optional[datetime] = None
    category: Category = Category.WARM
    stage: Stage = Stage.GREETING
    notes: str = ""
    dnc_flag: bool = False
    follow_up_count: int = 0
    conversation_history: list[Turn] = field(default_factory=list)

    @property
    def last_contact_at(self) -> Optional[datetime]:
        """Most recent inbound or outbound timestamp."""
        stamps = [t for t in (self.last_inbound_at, self.last_outbound_at) if t is not None]
        return max(stamps) if stamps else None

    def recent_history(self, limit: int = 10) -> list[Turn]:
        """The last `limit` turns, oldest first."""
        return list(self.conversation_history[-limit:])

    def snapshot(self) -> dict:
        """Read-only view for health/introspection endpoints."""
        return {
            "category": self.category.value,
            "stage": self.stage.value,
            "dncFlag": self.dnc_flag,
            "followUpCount": self.follow_up_count,
            "lastInboundAt": self.last_inbound_at.isoformat() if self.last_inbound_at else None,
        }

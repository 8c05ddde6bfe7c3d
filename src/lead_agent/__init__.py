"""
Lead Agent Package

WhatsApp and voice sales agent for insurance leads.

Components:
- data: Lead state model and per-conversation store
- agent: Category classifier, personas and LLM reply generation
- campaign: Follow-up policy and scheduler
- telephony: Twilio WhatsApp, voice calls and ConversationRelay
- server / voice_server: FastAPI apps for the two channels
"""

from .config import Config, load_config
from .cli import cli

__version__ = "0.1.0"

__all__ = [
    "Config",
    "load_config",
    "cli",
]

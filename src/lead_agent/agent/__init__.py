"""
Agent Package

Category classification, personas and LLM reply generation.
"""

from .classifier import classify, HOT_KEYWORDS, COLD_KEYWORDS, WARM_KEYWORDS
from .prompts import Persona, WHATSAPP_PERSONA, VOICE_PERSONA
from .reply_generator import ReplyGenerator, build_messages, create_chat_model

__all__ = [
    "classify",
    "HOT_KEYWORDS",
    "COLD_KEYWORDS",
    "WARM_KEYWORDS",
    "Persona",
    "WHATSAPP_PERSONA",
    "VOICE_PERSONA",
    "ReplyGenerator",
    "build_messages",
    "create_chat_model",
]

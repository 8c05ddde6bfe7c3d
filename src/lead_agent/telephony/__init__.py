"""
Telephony Package

Twilio integration for WhatsApp messaging and ConversationRelay voice calls.
"""

from .twilio_client import (
    TwilioClient,
    normalize_number,
    whatsapp_address,
    generate_message_twiml,
    generate_conversation_relay_twiml,
)
from .conversation_relay import ConversationRelayHandler

__all__ = [
    "TwilioClient",
    "normalize_number",
    "whatsapp_address",
    "generate_message_twiml",
    "generate_conversation_relay_twiml",
    "ConversationRelayHandler",
]

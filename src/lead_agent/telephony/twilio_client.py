"""
Twilio Client for Lead Agent

Sends WhatsApp messages, starts outbound voice calls and renders the TwiML
envelopes both channels reply with.
"""

from typing import Optional
from twilio.rest import Client
from twilio.twiml.messaging_response import MessagingResponse
from twilio.twiml.voice_response import VoiceResponse, Connect

from ..config import Config, ConfigurationError


def normalize_number(number: str) -> str:
    """
    Normalize a phone number to E.164.

    A "+" in an unencoded query string arrives as a space, so internal
    whitespace is dropped and a bare digit string gets its "+" back.
    """
    number = "".join(number.split())
    if number.isdigit():
        return f"+{number}"
    return number


def whatsapp_address(number: str) -> str:
    """Normalize a number to Twilio's "whatsapp:+..." address form."""
    number = number.strip()
    if number.startswith("whatsapp:"):
        number = number[len("whatsapp:"):]
    return f"whatsapp:{normalize_number(number)}"


class TwilioClient:
    """Client for outbound WhatsApp messages and calls via Twilio."""

    def __init__(self, config: Config, client: Optional[Client] = None):
        self.config = config
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = Client(self.config.twilio_account_sid, self.config.twilio_auth_token)
        return self._client

    def send_whatsapp(self, to: Optional[str], body: str) -> str:
        """
        Send a WhatsApp message.

        Args:
            to: Recipient, e.g. "whatsapp:+60123456789" (prefix added if missing)
            body: Message text

        Returns:
            Message SID
        """
        if not to:
            raise ConfigurationError(
                "Missing WhatsApp destination",
                hint="Set DEMO_TO in .env or pass ?to=whatsapp:%2B60123456789",
            )
        if not self.config.whatsapp_from:
            raise ConfigurationError("Missing WHATSAPP_FROM in .env")

        to = whatsapp_address(to)

        msg = self.client.messages.create(
            from_=self.config.whatsapp_from,
            to=to,
            body=body,
        )
        print(f"[Twilio] WhatsApp sent to {to}: {msg.sid}")
        return msg.sid

    def make_call(self, to_number: Optional[str] = None) -> str:
        """
        Start an outbound call that fetches its TwiML from our /twiml endpoint.

        Args:
            to_number: Number to call (E.164); defaults to MY_PHONE_NUMBER

        Returns:
            Call SID
        """
        to_number = to_number or self.config.my_phone_number
        if not to_number:
            raise ConfigurationError(
                "Missing phone number",
                hint="Add MY_PHONE_NUMBER to .env or use ?to=%2B60123456789",
            )
        to_number = normalize_number(to_number)
        if not self.config.twilio_phone_number:
            raise ConfigurationError("Missing TWILIO_PHONE_NUMBER in .env")
        if not self.config.twiml_url:
            raise ConfigurationError(
                "Missing NGROK_URL in .env",
                hint="Start ngrok and set NGROK_URL=your-subdomain.ngrok.app",
            )

        print(f"[Twilio] Initiating outbound call to {to_number}...")
        call = self.client.calls.create(
            to=to_number,
            from_=self.config.twilio_phone_number,
            url=self.config.twiml_url,
            method="GET",
        )
        print(f"[Twilio] Call initiated! SID: {call.sid}")
        return call.sid


def generate_message_twiml(text: str) -> str:
    """TwiML <Response><Message> reply for the WhatsApp webhook."""
    response = MessagingResponse()
    response.message(text)
    return str(response)


def generate_conversation_relay_twiml(
    websocket_url: str,
    voice: str,
    welcome_greeting: str,
    tts_provider: str = "ElevenLabs",
) -> str:
    """
    TwiML that hands the call to ConversationRelay.

    Twilio does speech-to-text and TTS; our WebSocket only exchanges text.
    """
    response = VoiceResponse()
    connect = Connect()
    connect.conversation_relay(
        url=websocket_url,
        tts_provider=tts_provider,
        voice=voice,
        welcome_greeting=welcome_greeting,
        interruptible="true",
    )
    response.append(connect)
    return str(response)

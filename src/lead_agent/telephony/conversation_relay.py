"""
Twilio ConversationRelay Handler

WebSocket handler for Twilio ConversationRelay. Twilio transcribes the
caller and speaks our replies (ElevenLabs TTS), so this socket only carries
JSON text messages: setup, prompt, interrupt, dtmf and error in; text out.
"""

import json
import traceback
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect

from ..conversation import VoiceConversationHandler


class ConversationRelayHandler:
    """Handles one ConversationRelay WebSocket per call."""

    def __init__(self, conversations: VoiceConversationHandler):
        self.conversations = conversations

    async def handle_connection(self, websocket: WebSocket):
        """
        Handle a ConversationRelay WebSocket connection until it closes.

        Args:
            websocket: The WebSocket connection from Twilio
        """
        await websocket.accept()
        print("[Voice] WebSocket connection established")

        call_sid: Optional[str] = None

        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    message = json.loads(raw)
                except json.JSONDecodeError as e:
                    print(f"[Voice] Ignoring malformed message: {e}")
                    continue

                if not isinstance(message, dict):
                    print(f"[Voice] Ignoring non-object message: {message!r}")
                    continue

                msg_type = message.get("type")

                if msg_type == "setup":
                    # New call connected
                    call_sid = message.get("callSid") or f"anonymous-{id(websocket)}"
                    print(f"[Voice] Call setup: {call_sid}")
                    self.conversations.open(call_sid)

                elif msg_type == "prompt":
                    # Caller spoke
                    user_text = message.get("voicePrompt") or ""
                    print(f"[Voice] User said: \"{user_text}\"")
                    if call_sid is None:
                        # Prompt before setup; track it under an anonymous id
                        call_sid = f"anonymous-{id(websocket)}"
                        self.conversations.open(call_sid)

                    response = await self.conversations.handle_prompt(call_sid, user_text)
                    print(f"[Voice] AI says: \"{response}\"")
                    await self.send_text(websocket, response)

                elif msg_type == "interrupt":
                    print("[Voice] User interrupted")

                elif msg_type == "dtmf":
                    print(f"[Voice] DTMF received: {message.get('digit')}")

                elif msg_type == "error":
                    print(f"[Voice] ConversationRelay error: {message}")

                else:
                    print(f"[Voice] Unknown message type: {msg_type} {message}")

        except WebSocketDisconnect:
            print(f"[Voice] WebSocket closed for call: {call_sid}")
        except Exception as e:
            print(f"[Voice] Error: {e}")
            traceback.print_exc()
        finally:
            self.conversations.close(call_sid)

    async def send_text(self, websocket: WebSocket, text: str):
        """Send a complete reply for Twilio to speak."""
        await websocket.send_text(json.dumps({
            "type": "text",
            "token": text,
            "last": True,
        }))

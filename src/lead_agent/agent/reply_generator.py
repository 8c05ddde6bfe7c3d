"""
Reply Generator

Builds the model context from a conversation's state and delegates text
generation to an OpenAI-compatible chat model through LangChain.
Failures never propagate: the caller always gets something to send.
"""

import asyncio
import traceback
from datetime import datetime, timezone
from typing import Any, Optional

from langchain.chat_models import init_chat_model
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from ..config import Config
from ..data.models import LeadState, Role
from .prompts import FOLLOW_UP_INSTRUCTION, Persona, build_context_message

HISTORY_WINDOW = 10


def create_chat_model(config: Config, model: str, max_tokens: int):
    """Chat model for the configured OpenAI-compatible endpoint."""
    return init_chat_model(
        model=model,
        model_provider="openai",
        api_key=config.ai_api_key,
        base_url=config.ai_base_url,
        temperature=config.ai_temperature,
        max_tokens=max_tokens,
        timeout=config.ai_timeout_seconds,
        max_retries=0,
    )


def build_messages(
    state: LeadState,
    persona: Persona,
    incoming_text: str = "",
    is_follow_up: bool = False,
) -> list[BaseMessage]:
    """
    Ordered turn list for the model.

    Persona, internal status line, the last ten history turns, then the
    follow-up instruction if this is a proactive nudge. If `incoming_text`
    was not recorded in history yet it is appended as the final user turn.
    """
    messages: list[BaseMessage] = [
        SystemMessage(content=persona.system_prompt),
        SystemMessage(content=build_context_message(
            state.category.value,
            state.stage.value,
            state.notes,
            is_follow_up,
        )),
    ]

    recent = state.recent_history(HISTORY_WINDOW)
    for turn in recent:
        if turn.role == Role.USER:
            messages.append(HumanMessage(content=turn.content))
        else:
            messages.append(AIMessage(content=turn.content))

    if is_follow_up:
        messages.append(HumanMessage(content=FOLLOW_UP_INSTRUCTION))
    elif incoming_text:
        last = recent[-1] if recent else None
        if last is None or last.role != Role.USER or last.content != incoming_text:
            messages.append(HumanMessage(content=incoming_text))

    return messages


def extract_text(response: Any) -> str:
    """Pull plain text out of a chat model response."""
    if response is None:
        return ""
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts).strip()
    return ""


class ReplyGenerator:
    """
    Generates replies for one channel persona.

    Only one attempt is made per message; the next inbound message (or the
    next scheduler tick) is the retry.
    """

    def __init__(
        self,
        config: Config,
        persona: Persona,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        chat_model=None,
    ):
        self.config = config
        self.persona = persona
        self.model_name = model or config.ai_model
        self.max_tokens = max_tokens or config.ai_max_tokens
        self.timeout_seconds = config.ai_timeout_seconds
        self._chat_model = chat_model

    @property
    def chat_model(self):
        # Built on first use so apps can start without API credentials
        if self._chat_model is None:
            self._chat_model = create_chat_model(self.config, self.model_name, self.max_tokens)
        return self._chat_model

    async def _complete(self, state: LeadState, incoming_text: str, is_follow_up: bool) -> str:
        messages = build_messages(state, self.persona, incoming_text, is_follow_up)
        response = await asyncio.wait_for(
            self.chat_model.ainvoke(messages),
            timeout=self.timeout_seconds,
        )
        return extract_text(response)

    async def generate_reply(
        self,
        store,
        incoming_text: str,
        is_follow_up: bool = False,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Generate a reply and record it on the conversation.

        Args:
            store: LeadStateStore of the conversation
            incoming_text: Message being answered ("" for follow-ups)
            is_follow_up: True for a proactive nudge
            now: Timestamp for the outbound record

        Returns:
            The generated text, or the persona's fallback text. History is
            only touched when real text came back.
        """
        try:
            reply = await self._complete(store.get(), incoming_text, is_follow_up)
        except asyncio.TimeoutError:
            print(f"[ReplyGenerator] {self.persona.name}: model timeout after {self.timeout_seconds}s")
            return self.persona.error_fallback
        except Exception as e:
            print(f"[ReplyGenerator] {self.persona.name}: model error: {e}")
            traceback.print_exc()
            return self.persona.error_fallback

        if not reply:
            print(f"[ReplyGenerator] {self.persona.name}: model returned an empty response")
            return self.persona.empty_reply_fallback

        store.record_outbound(reply, now or datetime.now(timezone.utc), is_follow_up)
        return reply

    async def generate_follow_up(self, store) -> Optional[str]:
        """
        Generate a proactive nudge without recording it.

        The caller records it with `record_outbound(..., is_follow_up=True)`
        once it has actually been delivered. Returns None instead of a
        fallback when nothing usable came back.
        """
        try:
            reply = await self._complete(store.get(), "", True)
        except asyncio.TimeoutError:
            print(f"[ReplyGenerator] {self.persona.name}: follow-up timeout after {self.timeout_seconds}s")
            return None
        except Exception as e:
            print(f"[ReplyGenerator] {self.persona.name}: follow-up error: {e}")
            return None

        if not reply:
            print(f"[ReplyGenerator] {self.persona.name}: empty follow-up, skipping")
            return None

        return reply

"""Health assistant chat.

The assistant is a placeholder: every message gets the same general reply
after a short delay.
"""

import asyncio

import structlog

from hernest.config import settings
from hernest.core.clock import utcnow
from hernest.schemas.chat import ChatMessage, ChatResponse

logger = structlog.get_logger(__name__)

ASSISTANT_REPLY = (
    "I'm your AI health assistant. I can help you with general menstrual health "
    "questions, but please consult a doctor for specific medical advice."
)


class ChatService:
    """Canned health assistant."""

    def __init__(self, reply_delay_seconds: float | None = None):
        self.reply_delay_seconds = (
            settings.chat_reply_delay_seconds
            if reply_delay_seconds is None
            else reply_delay_seconds
        )

    async def reply(self, text: str) -> ChatResponse:
        """Echo the user message together with the assistant reply."""
        message = ChatMessage(text=text, sender="user", timestamp=utcnow())

        await asyncio.sleep(self.reply_delay_seconds)

        logger.debug("chat_reply_sent", message_length=len(text))
        return ChatResponse(
            message=message,
            reply=ChatMessage(text=ASSISTANT_REPLY, sender="ai", timestamp=utcnow()),
        )

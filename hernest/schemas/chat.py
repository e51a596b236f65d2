"""Assistant chat schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Message sent to the assistant."""

    message: str = Field(..., min_length=1, max_length=2000)


class ChatMessage(BaseModel):
    """One message of the conversation."""

    text: str
    sender: Literal["user", "ai"]
    timestamp: datetime


class ChatResponse(BaseModel):
    """User message echoed with the assistant reply."""

    message: ChatMessage
    reply: ChatMessage

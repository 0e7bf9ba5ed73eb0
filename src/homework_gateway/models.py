# src/homework_gateway/models.py
from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from homework_gateway.core.config import MAX_CONTENT_CHARS, MAX_MESSAGES

Role = Literal["system", "user", "assistant"]
Quality = Literal["low", "medium", "high", "ultra"]

class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_CHARS)

class ChatRequest(BaseModel):
    """The request envelope once it has passed validation."""
    model_config = ConfigDict(frozen=True)

    messages: List[ChatMessage] = Field(..., min_length=1, max_length=MAX_MESSAGES)

class ChatReply(BaseModel):
    agent: str
    reply: str

class ImageRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, max_length=MAX_CONTENT_CHARS)
    quality: Quality = "high"

class ImageReply(BaseModel):
    imageUrl: str

class ErrorBody(BaseModel):
    error: str
    code: Optional[str] = None

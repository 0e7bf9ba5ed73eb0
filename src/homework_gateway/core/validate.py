# src/homework_gateway/core/validate.py
"""
Structural and size checks on a decoded request body.

Rules run in a fixed order and the first violation wins; nothing that
fails here ever reaches the upstream call.
"""
from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from homework_gateway.core.config import (
    IMAGE_QUALITIES,
    MAX_CONTENT_CHARS,
    MAX_MESSAGES,
    ROLES,
)
from homework_gateway.errors import ValidationFailed
from homework_gateway.models import ChatMessage, ChatRequest, ImageRequest


def _fail(code: str, message: str, detail: str | None = None) -> ValidationFailed:
    return ValidationFailed(message, code=code, detail=detail)


def _present(value: Any) -> bool:
    return value is not None and value != ""


def validate_chat(body: Any) -> ChatRequest:
    messages = body.get("messages") if isinstance(body, dict) else None

    if not isinstance(messages, list):
        raise _fail("INVALID_SHAPE", "Messages must be an array", f"type={type(messages).__name__}")
    if not messages:
        raise _fail("EMPTY_MESSAGES", "Messages array cannot be empty")
    if len(messages) > MAX_MESSAGES:
        raise _fail(
            "TOO_MANY_MESSAGES",
            f"Too many messages (maximum {MAX_MESSAGES})",
            f"count={len(messages)}",
        )

    for i, m in enumerate(messages):
        if not isinstance(m, dict) or not (_present(m.get("role")) and _present(m.get("content"))):
            raise _fail("MISSING_FIELD", "Each message must have a role and content", f"index={i}")
        if m["role"] not in ROLES:
            raise _fail("INVALID_ROLE", "Invalid message role", f"index={i}")
        if not isinstance(m["content"], str):
            raise _fail(
                "INVALID_CONTENT_TYPE",
                "Message content must be a string",
                f"index={i} type={type(m['content']).__name__}",
            )
        if len(m["content"]) > MAX_CONTENT_CHARS:
            raise _fail(
                "MESSAGE_TOO_LONG",
                f"Message content exceeds {MAX_CONTENT_CHARS} characters",
                f"index={i} length={len(m['content'])}",
            )

    try:
        return ChatRequest(
            messages=[ChatMessage(role=m["role"], content=m["content"]) for m in messages]
        )
    except ValidationError as e:
        # e.g. lone surrogates: valid JSON escapes, not encodable text
        raise _fail("INVALID_CONTENT_TYPE", "Message content must be valid text", str(e.errors()[0]["type"])) from None


def validate_image(body: Any) -> ImageRequest:
    """Same discipline for the image path: a single `prompt` plus optional `quality`."""
    data = body if isinstance(body, dict) else {}
    prompt = data.get("prompt")

    if not isinstance(prompt, str) or not prompt.strip():
        raise _fail("MISSING_FIELD", "Prompt is required")
    prompt = prompt.strip()
    if len(prompt) > MAX_CONTENT_CHARS:
        raise _fail(
            "MESSAGE_TOO_LONG",
            f"Prompt exceeds {MAX_CONTENT_CHARS} characters",
            f"length={len(prompt)}",
        )

    quality = data.get("quality", "high")
    if quality not in IMAGE_QUALITIES:
        raise _fail("INVALID_QUALITY", "Invalid image quality")

    try:
        return ImageRequest(prompt=prompt, quality=quality)
    except ValidationError as e:
        raise _fail("INVALID_CONTENT_TYPE", "Prompt must be valid text", str(e.errors()[0]["type"])) from None

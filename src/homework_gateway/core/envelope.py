# src/homework_gateway/core/envelope.py
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import Request

from homework_gateway.core.config import MAX_PAYLOAD_BYTES
from homework_gateway.core.trace import RequestContext, log_event
from homework_gateway.errors import MalformedRequest, PayloadTooLarge, UnsupportedMediaType

JSON_MEDIA_TYPE = "application/json"


def check_headers(content_type: Optional[str], content_length: Optional[str]) -> None:
    """
    Reject on headers alone, before any body bytes are read.

    `content_type` may carry parameters ("application/json; charset=utf-8").
    """
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type != JSON_MEDIA_TYPE:
        raise UnsupportedMediaType(detail=f"content_type={media_type or '<none>'}")

    if content_length is None:
        return
    try:
        declared = int(content_length)
    except ValueError:
        raise MalformedRequest(detail=f"bad content-length {content_length!r}") from None
    if declared < 0:
        raise MalformedRequest(detail=f"bad content-length {content_length!r}")
    if declared > MAX_PAYLOAD_BYTES:
        raise PayloadTooLarge(detail=f"declared={declared}")


def decode_body(raw: bytes) -> Any:
    if len(raw) > MAX_PAYLOAD_BYTES:
        raise PayloadTooLarge(detail=f"actual={len(raw)}")
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedRequest(detail=str(e)) from None


async def read_envelope(request: Request, ctx: RequestContext) -> Any:
    """Headers first, then the body; returns the decoded (unvalidated) JSON value."""
    content_length = request.headers.get("content-length")
    log_event(
        ctx, logging.INFO, "request.received",
        method=request.method, path=request.url.path, content_length=content_length,
    )
    check_headers(request.headers.get("content-type"), content_length)

    # chunked uploads carry no length; stop reading once the limit is crossed
    buf = bytearray()
    async for chunk in request.stream():
        buf.extend(chunk)
        if len(buf) > MAX_PAYLOAD_BYTES:
            raise PayloadTooLarge(detail=f"streamed>{MAX_PAYLOAD_BYTES}")
    return decode_body(bytes(buf))

# src/homework_gateway/adapters/upstream.py
"""
OpenAI-compatible upstream adapter.

Exactly one outbound POST per call, no retries. The whole exchange runs
under a wall-clock deadline; when it fires the request task is cancelled,
which closes the httpx client and its connection.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from homework_gateway.core.config import (
    FALLBACK_REPLY,
    MAX_OUTPUT_TOKENS,
    TEMPERATURE,
    UPSTREAM_TIMEOUT_S,
    Settings,
)
from homework_gateway.core.detect import AgentProfile
from homework_gateway.core.trace import RequestContext, log_event
from homework_gateway.errors import (
    InternalError,
    UpstreamError,
    UpstreamTimeout,
    for_upstream_status,
)
from homework_gateway.models import ChatRequest, ImageRequest

_QUALITY_HINTS = {
    "low": "Simple sketch, low detail.",
    "medium": "Moderate detail.",
    "high": "High detail, sharp focus.",
    "ultra": "Ultra high resolution, highly detailed, professional quality.",
}


def _extract_text(data: Any) -> Optional[str]:
    """choices[0].message.content, as a plain string or a list of text parts."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    msg = choices[0].get("message")
    if not isinstance(msg, dict):
        return None

    raw = msg.get("content")
    if isinstance(raw, str):
        return raw or None
    if isinstance(raw, list):
        parts = [p["text"] for p in raw if isinstance(p, dict) and isinstance(p.get("text"), str)]
        return "".join(parts) or None
    return None


def _extract_image_url(data: Any) -> Optional[str]:
    """choices[0].message.images[0].image_url.url"""
    try:
        url = data["choices"][0]["message"]["images"][0]["image_url"]["url"]
    except (KeyError, IndexError, TypeError):
        return None
    return url if isinstance(url, str) and url else None


class UpstreamClient:
    def __init__(
        self,
        settings: Settings,
        *,
        timeout_s: float = UPSTREAM_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.timeout_s = timeout_s
        self._transport = transport

    async def _post(self, ctx: RequestContext, payload: Dict[str, Any]) -> httpx.Response:
        if not self.settings.api_key:
            raise InternalError(detail=f"{self.settings.api_key_env} is not configured")

        url = f"{self.settings.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }

        async def _send() -> httpx.Response:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_s) as client:
                return await client.post(url, json=payload, headers=headers)

        log_event(ctx, logging.INFO, "upstream.call", model=payload["model"], messages=len(payload["messages"]))
        try:
            resp = await asyncio.wait_for(_send(), timeout=self.timeout_s)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            log_event(ctx, logging.WARNING, "upstream.timeout", timeout_s=self.timeout_s)
            raise UpstreamTimeout(detail=repr(e)) from None
        except httpx.HTTPError as e:
            log_event(ctx, logging.ERROR, "upstream.error", status="transport", error=repr(e))
            raise UpstreamError(detail=repr(e)) from None

        if not resp.is_success:
            detail = resp.text[:400]
            log_event(ctx, logging.ERROR, "upstream.error", status=resp.status_code, body=repr(detail))
            raise for_upstream_status(resp.status_code, detail)
        return resp

    async def chat(self, ctx: RequestContext, profile: AgentProfile, req: ChatRequest) -> str:
        payload = {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": profile.system_prompt},
                *(m.model_dump() for m in req.messages),
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_OUTPUT_TOKENS,
        }
        resp = await self._post(ctx, payload)

        try:
            data = resp.json()
        except ValueError:
            data = None
        content = _extract_text(data)
        if content is None:
            # soft-degrade: a shape surprise is not a service failure
            log_event(ctx, logging.WARNING, "reply.fallback", body_length=len(resp.content))
            return FALLBACK_REPLY
        return content

    async def generate_image(self, ctx: RequestContext, req: ImageRequest) -> str:
        payload = {
            "model": self.settings.image_model,
            "messages": [
                {"role": "user", "content": f"{req.prompt}\n\n{_QUALITY_HINTS[req.quality]}"},
            ],
            "modalities": ["image", "text"],
        }
        resp = await self._post(ctx, payload)

        try:
            data = resp.json()
        except ValueError:
            data = None
        url = _extract_image_url(data)
        if url is None:
            log_event(ctx, logging.ERROR, "upstream.error", status=resp.status_code, error="no image in response")
            raise UpstreamError(detail="no image in response")
        return url

# src/homework_gateway/core/trace.py
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping

from homework_gateway.core.logging import gateway_logger

_log = gateway_logger()


@dataclass(frozen=True)
class RequestContext:
    """
    Per-request correlation state. Created at pipeline entry and passed
    explicitly to every stage; never stored in module globals.
    """
    request_id: str
    received_at: float = field(default_factory=time.time)
    started: float = field(default_factory=time.perf_counter)

    @classmethod
    def new(cls) -> "RequestContext":
        return cls(request_id=uuid.uuid4().hex)

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started) * 1000)


def _fmt_kv(d: Mapping[str, Any]) -> str:
    return " ".join(f"{k}={d[k]}" for k in d)


def log_event(ctx: RequestContext, level: int, event: str, exc_info: bool = False, **kv: Any) -> None:
    """
    Emit a single-line structured log for one pipeline stage.

    Example:
      [gateway] agent.selected request_id=9f0c... agent=Math Agent
    Callers pass counts, lengths and codes only; never message content.
    """
    kv2 = {"request_id": ctx.request_id, **kv}
    _log.log(level, "[gateway] %s %s", event, _fmt_kv(kv2), exc_info=exc_info)

# src/homework_gateway/core/logging.py
from __future__ import annotations
import logging
import os

# Every pipeline event goes to this one logger (see core/trace.py).
GATEWAY_LOGGER = "homework_gateway.gateway"

# The outbound client logs each request URL at INFO; upstream.* events replace that.
_TRANSPORT_LOGGERS = ("httpx", "httpcore")

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR":    logging.ERROR,
    "WARNING":  logging.WARNING,
    "INFO":     logging.INFO,
    "DEBUG":    logging.DEBUG,
}

def level_from_env(var: str = "LOG_LEVEL", default: str = "INFO") -> int:
    val = (os.getenv(var, default) or "").strip().upper()
    return _LEVELS.get(val, _LEVELS[default])

def gateway_logger() -> logging.Logger:
    return logging.getLogger(GATEWAY_LOGGER)

def _quiet_transport(level: int) -> None:
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

def setup_logging() -> None:
    """
    Configure logging for the gateway process. Safe to call repeatedly.

    LOG_LEVEL sets the root and gateway level (default INFO); transport
    loggers never go below WARNING.
    """
    level = level_from_env()
    _quiet_transport(level)
    gateway_logger().setLevel(level)

    root = logging.getLogger()
    if root.handlers:
        # pytest / uvicorn already installed handlers
        root.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    ))
    root.setLevel(level)
    root.addHandler(handler)

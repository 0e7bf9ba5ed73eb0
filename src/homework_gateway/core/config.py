# src/homework_gateway/core/config.py
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel


# --- Fixed request/upstream limits ------------------------------------------
# Not configurable: clients and tests rely on these exact numbers.

UPSTREAM_TIMEOUT_S = 30.0
MAX_PAYLOAD_BYTES = 100 * 1024
MAX_MESSAGES = 50
MAX_CONTENT_CHARS = 10_000
TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 1000

ROLES = ("system", "user", "assistant")
IMAGE_QUALITIES = ("low", "medium", "high", "ultra")

FALLBACK_REPLY = "I'm sorry, I couldn't generate a response."


# --- Load .env + gateway.yml -------------------------------------------------

# This file lives at: src/homework_gateway/core/config.py
PACKAGE_DIR = Path(__file__).resolve().parents[1]
CFG_PATH = PACKAGE_DIR / "gateway.yml"

# Repo-root .env for local runs; real environment wins.
load_dotenv(PACKAGE_DIR.parents[1] / ".env")


def load_cfg(path: Path = CFG_PATH) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class Settings(BaseModel):
    base_url: str
    model: str
    image_model: str
    api_key_env: str
    api_key: str = ""


def load_settings(cfg: Dict[str, Any] | None = None) -> Settings:
    """
    Build Settings from gateway.yml and the environment.

    The upstream credential is read here, once; an empty value is kept
    as-is so the invoker can fail closed per request.
    """
    if cfg is None:
        cfg = load_cfg()

    up = cfg.get("upstream", {})
    api_key_env = up.get("api_key_env", "LOVABLE_API_KEY")
    return Settings(
        base_url=up["base_url"].rstrip("/"),
        model=up["model"],
        image_model=up.get("image_model", up["model"]),
        api_key_env=api_key_env,
        api_key=(os.getenv(api_key_env) or "").strip(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

# src/homework_gateway/core/detect.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern, Sequence, Tuple

from homework_gateway.models import ChatMessage


@dataclass(frozen=True)
class AgentProfile:
    name: str
    system_prompt: str


MATH = AgentProfile(
    name="Math Agent",
    system_prompt=(
        "You are a Math Agent. Help students understand mathematical concepts step-by-step. "
        "Show your work clearly and explain the reasoning behind each step."
    ),
)
WRITING = AgentProfile(
    name="Writing Agent",
    system_prompt=(
        "You are a Writing Agent. Help students improve their writing with constructive feedback, "
        "grammar tips, and structure suggestions. Be encouraging and specific."
    ),
)
CODING = AgentProfile(
    name="Coding Agent",
    system_prompt=(
        "You are a Coding Agent. Help students understand programming concepts, debug code, "
        "and write better solutions. Explain code clearly and suggest best practices."
    ),
)
GENERAL_RESEARCH = AgentProfile(
    name="General Research Agent",
    system_prompt=(
        "You are a Research Agent. Help students explore topics, find reliable information, "
        "and understand complex subjects. Provide well-structured, educational responses."
    ),
)

# Evaluated top to bottom; first match wins.
RULES: Tuple[Tuple[Pattern[str], AgentProfile], ...] = (
    (re.compile(r"math|solve|equation|calculate|algebra|geometry|calculus", re.I), MATH),
    (re.compile(r"essay|grammar|write|writing|paragraph|sentence", re.I), WRITING),
    (
        re.compile(r"code|coding|bug|python|javascript|typescript|java|program|function|algorithm", re.I),
        CODING,
    ),
)
DEFAULT = GENERAL_RESEARCH

PROFILES = (MATH, WRITING, CODING, GENERAL_RESEARCH)


def classify_text(text: str) -> AgentProfile:
    for pattern, profile in RULES:
        if pattern.search(text):
            return profile
    return DEFAULT


def classify(messages: Sequence[ChatMessage]) -> AgentProfile:
    """Pick the agent from the last message's content (empty list → default)."""
    text = messages[-1].content if messages else ""
    return classify_text(text)

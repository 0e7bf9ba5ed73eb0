# tests/conftest.py
from __future__ import annotations

import asyncio
from typing import Any, List

import httpx
import pytest
from fastapi.testclient import TestClient

# With src/ layout and `pip install -e .`, we can import the app package directly:
from homework_gateway.app import app, get_upstream  # noqa: E402
from homework_gateway.adapters.upstream import UpstreamClient
from homework_gateway.core.config import Settings


def make_settings(api_key: str = "test-key") -> Settings:
    return Settings(
        base_url="https://upstream.test/v1",
        model="test/chat-model",
        image_model="test/image-model",
        api_key_env="LOVABLE_API_KEY",
        api_key=api_key,
    )


def completion(content: Any) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class RecordingUpstream:
    """
    MockTransport handler: records every outbound request and answers with
    whatever status/body the test set.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.status = 200
        self.body: Any = completion("Here is an explanation...")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status, json=self.body)
        return httpx.Response(self.status, text=str(self.body))


class StalledUpstream:
    """Never answers; remembers whether the in-flight request was cancelled."""

    def __init__(self) -> None:
        self.started = False
        self.cancelled = False

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.started = True
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return httpx.Response(200, json=completion("too late"))


# ---------- Fixtures ----------
@pytest.fixture
def upstream() -> RecordingUpstream:
    return RecordingUpstream()


@pytest.fixture
def override_upstream():
    """Install a custom UpstreamClient factory for the duration of a test."""
    def _install(factory) -> TestClient:
        app.dependency_overrides[get_upstream] = lambda: factory
        return TestClient(app)

    yield _install
    app.dependency_overrides.pop(get_upstream, None)


@pytest.fixture
def client(upstream: RecordingUpstream, override_upstream) -> TestClient:
    return override_upstream(
        lambda: UpstreamClient(make_settings(), transport=httpx.MockTransport(upstream))
    )


@pytest.fixture
def stalled() -> StalledUpstream:
    return StalledUpstream()


@pytest.fixture
def stalled_client(stalled: StalledUpstream, override_upstream) -> TestClient:
    # 30 s in production; shortened so the suite does not wait on it
    return override_upstream(
        lambda: UpstreamClient(make_settings(), timeout_s=0.05, transport=httpx.MockTransport(stalled))
    )


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def keyless_client(upstream: RecordingUpstream, override_upstream) -> TestClient:
    return override_upstream(
        lambda: UpstreamClient(make_settings(api_key=""), transport=httpx.MockTransport(upstream))
    )

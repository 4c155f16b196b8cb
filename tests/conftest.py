from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from openai_relay.config import Settings, get_settings
from openai_relay.main import app
from openai_relay.upstream import get_upstream_transport

TEST_API_KEY = "sk-test-secret-key"


class FakeUpstream:
    """Records outbound provider calls and answers with a canned response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"ok": True}
        )

    def respond_with(self, status_code: int, **kwargs) -> None:
        self.responder = lambda request: httpx.Response(status_code, **kwargs)

    def fail_with(self, exc_factory: Callable[[httpx.Request], Exception]) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_factory(request)

        self.responder = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, openai_api_key=TEST_API_KEY)


@pytest.fixture
def client(settings: Settings, upstream: FakeUpstream):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_upstream_transport] = lambda: httpx.MockTransport(upstream)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client(upstream: FakeUpstream, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, openai_api_key=None)
    app.dependency_overrides[get_upstream_transport] = lambda: httpx.MockTransport(upstream)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

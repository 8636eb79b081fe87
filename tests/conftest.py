"""
Shared pytest fixtures.

HTTP is never real: every Options built here carries an httpx.MockTransport
driven by a Recorder, which answers from registered routes and keeps every
request it saw.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from nylas_ops.client import Client
from nylas_ops.config import Options
from nylas_ops.session import NylasSession


@dataclass
class Route:
    status: int = 200
    json: Any = None
    content: Optional[bytes] = None
    headers: dict[str, str] = field(default_factory=dict)
    error: Optional[type] = None      # httpx.TransportError subclass to raise


class Recorder:
    """Callable handler for httpx.MockTransport."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Union[Route, Callable]] = {}

    def add(self, method: str, path: str, **kwargs: Any) -> None:
        self.routes[(method, path)] = Route(**kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(
                404, json={"message": "Route not mocked", "type": "invalid_request_error"}
            )
        if route.error is not None:
            raise route.error("connection refused", request=request)
        if route.content is not None:
            return httpx.Response(route.status, content=route.content, headers=route.headers)
        if route.json is None:
            return httpx.Response(route.status, headers=route.headers)
        return httpx.Response(route.status, json=route.json, headers=route.headers)

    # ── Inspection helpers ────────────────────────────────────────────────────

    @property
    def last(self) -> httpx.Request:
        return self.calls[-1]

    def find(self, method: str, path: str) -> list[httpx.Request]:
        return [c for c in self.calls if c.method == method and c.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """No real NYLAS_* settings or saved token leak into tests."""
    for name in (
        "NYLAS_CLIENT_ID", "NYLAS_CLIENT_SECRET", "NYLAS_ACCESS_TOKEN",
        "NYLAS_ACCOUNT_ID", "NYLAS_REGION", "NYLAS_HTTP_TIMEOUT_SECONDS",
        "NYLAS_POOL_CONCURRENCY", "NYLAS_DEBUG", "NYLAS_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NYLAS_TOKEN_FILE", str(tmp_path / "cred" / "nylas_token.json"))
    # from_env() calls load_dotenv(); keep it away from any developer .env
    monkeypatch.chdir(tmp_path)

    # configure_logging() and BaseScript change the library logger
    library_logger = logging.getLogger("nylas_ops")
    level, handlers = library_logger.level, list(library_logger.handlers)
    yield
    for handler in list(library_logger.handlers):
        if handler not in handlers:
            library_logger.removeHandler(handler)
            handler.close()
    library_logger.setLevel(level)


@pytest.fixture
def raw_mime() -> bytes:
    """RFC 822 source of a small multipart/alternative message."""
    return (
        b"From: Alice <alice@example.com>\r\n"
        b"To: bob@example.com\r\n"
        b"Subject: Quarterly numbers\r\n"
        b"MIME-Version: 1.0\r\n"
        b'Content-Type: multipart/alternative; boundary="XYZ"\r\n'
        b"\r\n"
        b"--XYZ\r\n"
        b"Content-Type: text/plain; charset=utf-8\r\n"
        b"\r\n"
        b"See attached.\r\n"
        b"--XYZ\r\n"
        b"Content-Type: text/html; charset=utf-8\r\n"
        b"\r\n"
        b"<p>See attached.</p>\r\n"
        b"--XYZ--\r\n"
    )


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def options(recorder) -> Options:
    return Options(
        client_id="client-abc",
        client_secret="secret-xyz",
        access_token="token-123",
        account_id="account-1",
        transport=httpx.MockTransport(recorder),
    )


@pytest.fixture
def session(options):
    s = NylasSession(options)
    yield s
    s.close()


@pytest.fixture
def client(options):
    c = Client(options)
    yield c
    c.close()

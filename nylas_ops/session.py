"""
NylasSession: one set of Options shared by every endpoint client.

The sync httpx.Client is built lazily and cached, so constructing several
endpoint clients from the same session reuses one connection pool. Pooled
fan-out opens a short-lived httpx.AsyncClient per batch, capped at
Options.concurrency connections.

Usage:
    session = NylasSession(Options.from_env())

    from nylas_ops.events_client import EventsClient
    events = EventsClient(session)
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .config import Options
from .request import AsyncRequest, QueueItem, Request

logger = logging.getLogger(__name__)

USER_AGENT = "nylas-ops/1.0"


# ── Debug hooks ───────────────────────────────────────────────────────────────

def _log_request(request: httpx.Request) -> None:
    logger.debug("%s %s", request.method, request.url)


def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug("%s %s -> %d", request.method, request.url, response.status_code)


async def _alog_request(request: httpx.Request) -> None:
    _log_request(request)


async def _alog_response(response: httpx.Response) -> None:
    _log_response(response)


class NylasSession:
    """
    Owns the HTTP clients for one Options instance.

    Use as a context manager (or call close()) to release the pooled
    connections of the sync client.
    """

    def __init__(self, options: Options) -> None:
        self.options = options
        self._http: Optional[httpx.Client] = None

    # ── HTTP clients ──────────────────────────────────────────────────────────

    def _client_kwargs(self) -> dict[str, Any]:
        return dict(
            base_url=self.options.server,
            timeout=httpx.Timeout(self.options.timeout),
            headers={"User-Agent": USER_AGENT},
        )

    @property
    def http(self) -> httpx.Client:
        """Shared sync client (built on first access, cached after)."""
        if self._http is None:
            hooks = (
                {"request": [_log_request], "response": [_log_response]}
                if self.options.debug else {}
            )
            self._http = httpx.Client(
                transport=self.options.transport,
                event_hooks=hooks,
                **self._client_kwargs(),
            )
        return self._http

    def _async_transport(self) -> Optional[httpx.AsyncBaseTransport]:
        if self.options.async_transport is not None:
            return self.options.async_transport
        if isinstance(self.options.transport, httpx.AsyncBaseTransport):
            return self.options.transport
        # A sync-only transport cannot serve the pool; use httpx's default
        return None

    def open_async_client(self) -> httpx.AsyncClient:
        """Fresh AsyncClient for one pooled batch; caller closes it."""
        hooks = (
            {"request": [_alog_request], "response": [_alog_response]}
            if self.options.debug else {}
        )
        return httpx.AsyncClient(
            transport=self._async_transport(),
            limits=httpx.Limits(max_connections=self.options.concurrency),
            event_hooks=hooks,
            **self._client_kwargs(),
        )

    # ── Builders ──────────────────────────────────────────────────────────────

    def request(self) -> Request:
        """New sync request builder on the shared client."""
        return Request(self.http)

    def async_request(self) -> AsyncRequest:
        """New deferred request builder for pooled fan-out."""
        return AsyncRequest(self.open_async_client, concurrency=self.options.concurrency)

    def pool(self, queues: list[QueueItem]) -> list[Any]:
        """Run deferred requests concurrently (blocking)."""
        logger.debug("Pooling %d request(s)", len(queues))
        return self.async_request().pool(queues)

    async def apool(self, queues: list[QueueItem]) -> list[Any]:
        """Run deferred requests concurrently from inside an event loop."""
        return await self.async_request().apool(queues)

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "NylasSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

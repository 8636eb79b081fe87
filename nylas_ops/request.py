"""
Request builders: set path/query/body/header params, then dispatch.

Two flavours share the same fluent setters:

    Request       - dispatches immediately on the session's pooled httpx.Client
    AsyncRequest  - get/post/put/delete return a deferred call; nothing is sent
                    until a list of them is handed to AsyncRequest.pool()

Usage:
    data = (
        session.request()
        .set_path(event_id)
        .set_query({"notify_participants": True})
        .set_header_params(options.bearer_header())
        .delete(ENDPOINTS["one_event"])
    )

    queues = [
        session.async_request().set_path(i).set_header_params(h).get(ENDPOINTS["one_event"])
        for i in ids
    ]
    results = session.async_request().pool(queues)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar, Union
from urllib.parse import quote

import httpx

from .errors import NylasError
from .models import PoolFailure

logger = logging.getLogger(__name__)

# A deferred request: given the pool's AsyncClient, performs the call.
QueueItem = Callable[[httpx.AsyncClient], Awaitable[Any]]

B = TypeVar("B", bound="_RequestBuilder")


def decode_response(response: httpx.Response) -> Any:
    """Decoded JSON body; {} for an empty body, text for non-JSON bodies."""
    if not response.content:
        return {}
    if "json" in response.headers.get("content-type", ""):
        return response.json()
    return response.text


def _render(api: str, path: tuple[str, ...]) -> str:
    expected = api.count("{}")
    if expected != len(path):
        raise NylasError(
            f"Endpoint {api!r} takes {expected} path segment(s), got {len(path)}"
        )
    return api.format(*(quote(segment, safe="") for segment in path))


# ── Builder ───────────────────────────────────────────────────────────────────

class _RequestBuilder:
    """Accumulates everything about a request except the method and endpoint."""

    def __init__(self) -> None:
        self._path: tuple[str, ...] = ()
        self._query: dict[str, Any] = {}
        self._json: Optional[Any] = None
        self._content: Optional[Union[bytes, str]] = None
        self._headers: dict[str, str] = {}

    def set_path(self: B, *segments: Any) -> B:
        """Positional values for the endpoint's "{}" placeholders (URL-quoted)."""
        self._path = tuple(str(s) for s in segments)
        return self

    def set_query(self: B, query: Optional[Mapping[str, Any]]) -> B:
        self._query = dict(query or {})
        return self

    def set_form_params(self: B, params: Optional[Mapping[str, Any]]) -> B:
        """JSON request body."""
        self._json = dict(params) if params else None
        return self

    def set_body(self: B, content: Union[bytes, str, None]) -> B:
        """Raw request body; replaces any JSON body."""
        self._content = content
        self._json = None
        return self

    def set_header_params(self: B, headers: Optional[Mapping[str, str]]) -> B:
        self._headers.update(headers or {})
        return self

    def build(self, method: str, api: str) -> dict[str, Any]:
        """Keyword arguments for httpx's client.request()."""
        kwargs: dict[str, Any] = {
            "method": method,
            "url": _render(api, self._path),
            "headers": {"Accept": "application/json", **self._headers},
        }
        if self._query:
            kwargs["params"] = self._query
        if self._content is not None:
            kwargs["content"] = self._content
        elif self._json is not None:
            kwargs["json"] = self._json
        return kwargs


# ── Sync ──────────────────────────────────────────────────────────────────────

class Request(_RequestBuilder):
    """
    Immediate request on a shared httpx.Client.

    Raises:
        httpx.HTTPStatusError: on a non-2xx response.
        httpx.RequestError:    on transport failure.
    """

    def __init__(self, client: httpx.Client) -> None:
        super().__init__()
        self._client = client

    def _send(self, method: str, api: str) -> httpx.Response:
        response = self._client.request(**self.build(method, api))
        response.raise_for_status()
        return response

    def get(self, api: str) -> Any:
        return decode_response(self._send("GET", api))

    def post(self, api: str) -> Any:
        return decode_response(self._send("POST", api))

    def put(self, api: str) -> Any:
        return decode_response(self._send("PUT", api))

    def delete(self, api: str) -> Any:
        return decode_response(self._send("DELETE", api))

    def get_raw(self, api: str) -> bytes:
        """Undecoded response body (MIME sources, pictures)."""
        return self._send("GET", api).content


# ── Async / pool ──────────────────────────────────────────────────────────────

class AsyncRequest(_RequestBuilder):
    """
    Deferred request for pooled fan-out.

    `client_factory` opens the AsyncClient used by pool(); NylasSession
    supplies one bound to its options (base URL, limits, transport).
    At most `concurrency` queue items are in flight at once, whatever the
    transport.
    """

    def __init__(
        self,
        client_factory: Callable[[], httpx.AsyncClient],
        concurrency: Optional[int] = None,
    ) -> None:
        super().__init__()
        self._client_factory = client_factory
        self._concurrency = concurrency

    def _defer(self, method: str, api: str) -> QueueItem:
        # Snapshot now: the builder may be reused for the next queue item.
        kwargs = self.build(method, api)

        async def send(client: httpx.AsyncClient) -> Any:
            response = await client.request(**kwargs)
            response.raise_for_status()
            return decode_response(response)

        return send

    def get(self, api: str) -> QueueItem:
        return self._defer("GET", api)

    def post(self, api: str) -> QueueItem:
        return self._defer("POST", api)

    def put(self, api: str) -> QueueItem:
        return self._defer("PUT", api)

    def delete(self, api: str) -> QueueItem:
        return self._defer("DELETE", api)

    async def apool(self, queues: list[QueueItem]) -> list[Any]:
        """
        Run every queued call concurrently; results come back in input order.

        An item whose request fails with an httpx error yields a PoolFailure
        in its slot; any other exception propagates.
        """
        if not queues:
            return []

        slots = asyncio.Semaphore(self._concurrency or len(queues))

        async def run_one(index: int, item: QueueItem, client: httpx.AsyncClient) -> Any:
            try:
                async with slots:
                    return await item(client)
            except httpx.HTTPError as exc:
                failure = PoolFailure.from_exception(exc)
                logger.warning(
                    "Pooled request %d failed (%s): %s", index, failure.code, failure.message
                )
                return failure

        async with self._client_factory() as client:
            return list(
                await asyncio.gather(
                    *(run_one(i, item, client) for i, item in enumerate(queues))
                )
            )

    def pool(self, queues: list[QueueItem]) -> list[Any]:
        """Blocking wrapper around apool(); inside a running event loop use apool()."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.apool(queues))
        raise NylasError("pool() cannot run inside an event loop; await apool() instead")

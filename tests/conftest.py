"""Shared fixtures and helpers for the AuditFlow test suite."""

import asyncio
import json
from typing import Any, Callable

import httpx
import pytest

from auditflow.api import AuditFlowClient
from auditflow.config import TokenStore

API_URL = "http://api.test"
GSTIN_KA = "29ABCDE1234F1Z5"
GSTIN_KA_2 = "29PQRSX5678K1Z2"
GSTIN_MH = "27ABCDE1234F1Z5"


@pytest.fixture
def token_store(tmp_path):
    """Token store backed by a temp file, pre-loaded with a token."""
    store = TokenStore(tmp_path / "token")
    store.save("tok-123")
    return store


def envelope(data: Any = None, success: bool = True, error: str | None = None, **extra) -> dict:
    """Build a ``{success, data, error}`` response body."""
    body: dict[str, Any] = {"success": success}
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    body.update(extra)
    return body


def sse_body(*chunks: dict) -> str:
    """Encode chunks the way the chat stream endpoint writes them."""
    return "".join(f"data: {json.dumps(c)}\n\n" for c in chunks)


class Router:
    """httpx.MockTransport handler keyed by (method, path).

    Values are a response body (dict/list, sent as JSON with status 200),
    a ``(status, body)`` tuple, an ``httpx.Response``, or a callable taking
    the request. Every request is recorded in ``requests``.
    """

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None):
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json=envelope(success=False, error="Not found"))
        value = self.routes[key]
        if callable(value):
            value = value(request)
        if isinstance(value, httpx.Response):
            return value
        if isinstance(value, tuple):
            status, body = value
            return httpx.Response(status, json=body)
        return httpx.Response(200, json=value)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def last(self, method: str, path: str) -> httpx.Request:
        for request in reversed(self.requests):
            if request.method == method and request.url.path == path:
                return request
        raise AssertionError(f"no {method} {path} request recorded")


def run_with_client(
    router: Router,
    fn: Callable[[AuditFlowClient], Any],
    token_store: TokenStore | None = None,
    **client_kwargs,
):
    """Open an AuditFlowClient on ``router`` and run ``await fn(client)``."""

    async def _go():
        async with AuditFlowClient(
            API_URL, token_store, transport=router.transport, **client_kwargs
        ) as client:
            return await fn(client)

    return asyncio.run(_go())


def json_body(request: httpx.Request) -> Any:
    return json.loads(request.content)

"""
Wallet proxy: pytest fixtures and configuration.

Provides:
- Signing credentials in the environment before the app is imported
- A fake transaction service behind httpx.MockTransport
- An in-process HTTP client bound to the FastAPI app
"""
import json
import os
from typing import Any, Callable, Optional

import httpx
import pytest
import pytest_asyncio

# =============================================================================
# Environment (must be set before wallet_proxy.config is imported)
# =============================================================================
os.environ["YAYA_API_KEY"] = "test-api-key"
os.environ["YAYA_API_SECRET"] = "test-api-secret"
os.environ["YAYA_BASE_URL"] = "https://upstream.test"
os.environ["CLIENT_URL"] = "http://localhost:5173"
os.environ["ENV"] = "test"

TEST_API_KEY = os.environ["YAYA_API_KEY"]
TEST_API_SECRET = os.environ["YAYA_API_SECRET"]
TEST_BASE_URL = os.environ["YAYA_BASE_URL"]


def _records(count: int) -> list[dict[str, Any]]:
    return [
        {
            "id": f"tx-{i:03d}",
            "sender": f"sender{i}",
            "receiver": f"receiver{i}",
            "amount": 100 + i,
            "currency": "ETB",
            "cause": f"payment {i}",
            "created_at": 1700000000 + i,
            "sender_account_name": None,
        }
        for i in range(count)
    ]


# =============================================================================
# Fake transaction service
# =============================================================================
class FakeUpstream:
    """Stand-in for the wallet provider API.

    Records every request it receives so tests can assert on call counts,
    headers and bodies.
    """

    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []
        self.search_results: Optional[list[dict[str, Any]]] = None
        self.requests: list[httpx.Request] = []
        self.responder: Optional[Callable[[httpx.Request], httpx.Response]] = None

    @property
    def calls(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responder is not None:
            return self.responder(request)

        if request.url.path == "/api/en/transaction/find-by-user":
            return httpx.Response(200, json={"data": self.records})
        if request.url.path == "/api/en/transaction/search":
            query = json.loads(request.content)["query"]
            if self.search_results is not None:
                found = self.search_results
            else:
                found = [r for r in self.records if query in (r["sender"], r["receiver"], r["id"])]
            return httpx.Response(200, json={"data": found})
        return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def make_records() -> Callable[[int], list[dict[str, Any]]]:
    """Deterministic upstream transaction records, in upstream order."""
    return _records


@pytest_asyncio.fixture
async def gateway(upstream: FakeUpstream):
    from wallet_proxy.core.gateway import UpstreamGateway

    http = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    try:
        yield UpstreamGateway(
            http,
            base_url=TEST_BASE_URL,
            api_key=TEST_API_KEY,
            api_secret=TEST_API_SECRET,
        )
    finally:
        await http.aclose()


# =============================================================================
# In-process API client
# =============================================================================
@pytest_asyncio.fixture
async def client(gateway, monkeypatch: pytest.MonkeyPatch):
    """HTTP client bound to the app, with the fake upstream wired in."""
    from wallet_proxy.api import deps
    from wallet_proxy.core.rate_limit import FixedWindowRateLimiter
    from wallet_proxy.main import app

    monkeypatch.setattr(deps, "ingress_limiter", FixedWindowRateLimiter())
    app.dependency_overrides[deps.get_gateway] = lambda: gateway
    try:
        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://testserver",
        ) as http:
            yield http
    finally:
        app.dependency_overrides.clear()

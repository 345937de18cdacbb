import json

import httpx
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_second_page_of_twelve(client: AsyncClient, upstream, make_records):
    upstream.records = make_records(12)

    resp = await client.get("/api/transactions", params={"p": 2, "limit": 5})

    assert resp.status_code == 200, resp.text
    payload = resp.json()
    assert payload["total"] == 12
    assert payload["page"] == 2
    assert payload["limit"] == 5
    assert payload["totalPages"] == 3
    assert payload["success"] is True
    assert "searchQuery" not in payload
    assert payload["data"] == upstream.records[5:10]


@pytest.mark.asyncio
async def test_list_page_past_the_end_is_empty_not_an_error(client: AsyncClient, upstream, make_records):
    upstream.records = make_records(3)

    resp = await client.get("/api/transactions", params={"p": 5, "limit": 10})

    assert resp.status_code == 200, resp.text
    payload = resp.json()
    assert payload["data"] == []
    assert payload["page"] == 5
    assert payload["limit"] == 10
    assert payload["totalPages"] == 1


@pytest.mark.asyncio
async def test_list_out_of_policy_limit_uses_default(client: AsyncClient, upstream, make_records):
    upstream.records = make_records(3)

    resp = await client.get("/api/transactions", params={"p": 5, "limit": 11})

    assert resp.status_code == 200, resp.text
    payload = resp.json()
    assert payload["limit"] == 5
    assert payload["data"] == []
    assert payload["page"] == 5
    assert payload["totalPages"] == 1


@pytest.mark.asyncio
async def test_list_garbage_params_fall_back_to_defaults(client: AsyncClient, upstream, make_records):
    upstream.records = make_records(8)

    resp = await client.get("/api/transactions", params={"p": "abc", "limit": "lots"})

    assert resp.status_code == 200, resp.text
    payload = resp.json()
    assert payload["page"] == 1
    assert payload["limit"] == 5
    assert payload["data"] == upstream.records[:5]


@pytest.mark.asyncio
async def test_list_is_idempotent(client: AsyncClient, upstream, make_records):
    upstream.records = make_records(9)

    first = await client.get("/api/transactions?p=1&limit=5")
    second = await client.get("/api/transactions?p=1&limit=5")

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    # No caching: every page request is a fresh upstream call.
    assert upstream.calls == 2


@pytest.mark.asyncio
async def test_list_empty_upstream(client: AsyncClient, upstream):
    resp = await client.get("/api/transactions")

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["data"] == []
    assert payload["total"] == 0
    assert payload["totalPages"] == 0


@pytest.mark.asyncio
async def test_list_signs_upstream_call(client: AsyncClient, upstream):
    await client.get("/api/transactions")

    sent = upstream.requests[0]
    assert sent.url.path == "/api/en/transaction/find-by-user"
    assert sent.headers["YAYA-API-KEY"] == "test-api-key"
    assert sent.headers["YAYA-API-TIMESTAMP"].isdigit()
    assert sent.headers["YAYA-API-SIGN"]


@pytest.mark.asyncio
async def test_search_returns_page_and_echoes_query(client: AsyncClient, upstream, make_records):
    upstream.search_results = make_records(7)

    resp = await client.post("/api/transactions/search", json={"query": "payment", "p": 2, "limit": 3})

    assert resp.status_code == 200, resp.text
    payload = resp.json()
    assert payload["searchQuery"] == "payment"
    assert payload["data"] == upstream.search_results[3:6]
    assert payload["total"] == 7
    assert payload["totalPages"] == 3
    assert json.loads(upstream.requests[0].content) == {"query": "payment"}


@pytest.mark.asyncio
async def test_search_defaults_page_and_limit(client: AsyncClient, upstream, make_records):
    upstream.search_results = make_records(6)

    resp = await client.post("/api/transactions/search", json={"query": "x"})

    assert resp.status_code == 200, resp.text
    payload = resp.json()
    assert payload["page"] == 1
    assert payload["limit"] == 5
    assert len(payload["data"]) == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"query": ""}, {}, {"query": "   "}])
async def test_search_empty_query_is_rejected_before_upstream(client: AsyncClient, upstream, body):
    resp = await client.post("/api/transactions/search", json=body)

    assert resp.status_code == 400, resp.text
    payload = resp.json()
    assert payload["success"] is False
    assert payload["data"] == []
    assert payload["total"] == 0
    assert payload["page"] == 1
    assert payload["limit"] == 5
    assert payload["totalPages"] == 0
    assert "query" in payload["error"]
    assert upstream.calls == 0


@pytest.mark.asyncio
async def test_search_out_of_policy_limit_is_rejected(client: AsyncClient, upstream):
    resp = await client.post("/api/transactions/search", json={"query": "abc", "limit": 11})

    assert resp.status_code == 400
    assert "limit" in resp.json()["error"]
    assert upstream.calls == 0


@pytest.mark.asyncio
async def test_search_invalid_page_is_rejected(client: AsyncClient, upstream):
    resp = await client.post("/api/transactions/search", json={"query": "abc", "p": 0})

    assert resp.status_code == 400
    assert upstream.calls == 0


@pytest.mark.asyncio
async def test_search_malformed_json_is_rejected(client: AsyncClient, upstream):
    resp = await client.post(
        "/api/transactions/search",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert upstream.calls == 0


@pytest.mark.asyncio
async def test_upstream_error_status_and_payload_pass_through(client: AsyncClient, upstream):
    upstream.responder = lambda request: httpx.Response(401, json={"message": "Invalid signature"})

    resp = await client.get("/api/transactions")

    assert resp.status_code == 401
    payload = resp.json()
    assert payload["error"] == {"message": "Invalid signature"}
    assert payload["success"] is False
    assert payload["totalPages"] == 0


@pytest.mark.asyncio
async def test_network_failure_is_generic_500(client: AsyncClient, upstream):
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    upstream.responder = _refuse

    resp = await client.post("/api/transactions/search", json={"query": "abc"})

    assert resp.status_code == 500
    payload = resp.json()
    assert payload["success"] is False
    assert payload["error"] == "Unable to reach transaction service"
    assert "upstream.test" not in resp.text
    assert "test-api-secret" not in resp.text


@pytest.mark.asyncio
async def test_responses_carry_request_id_and_rate_limit_headers(client: AsyncClient, upstream):
    resp = await client.get("/api/transactions", headers={"X-Request-ID": "dash-1"})

    assert resp.headers["X-Request-ID"] == "dash-1"
    assert resp.headers["RateLimit-Limit"]
    assert resp.headers["RateLimit-Remaining"]


@pytest.mark.asyncio
async def test_list_oversized_numeric_params_fall_back_to_defaults(client: AsyncClient, upstream, make_records):
    upstream.records = make_records(6)

    resp = await client.get("/api/transactions", params={"p": "1" * 5000, "limit": "1" * 5000})

    assert resp.status_code == 200, resp.text
    payload = resp.json()
    assert payload["page"] == 1
    assert payload["limit"] == 5


@pytest.mark.asyncio
async def test_search_oversized_limit_is_a_validation_error(client: AsyncClient, upstream):
    resp = await client.post("/api/transactions/search", json={"query": "abc", "limit": "1" * 5000})

    assert resp.status_code == 400
    assert "limit" in resp.json()["error"]
    assert upstream.calls == 0


class _BrokenGateway:
    async def list_all(self):
        raise RuntimeError("boom")

    async def search_all(self, query):
        raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_unexpected_error_is_500_envelope_with_cors_and_request_id(client: AsyncClient):
    from wallet_proxy.api import deps
    from wallet_proxy.main import app

    app.dependency_overrides[deps.get_gateway] = lambda: _BrokenGateway()
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://testserver",
    ) as http:
        resp = await http.get(
            "/api/transactions",
            headers={"Origin": "http://localhost:5173", "X-Request-ID": "dash-500"},
        )

    assert resp.status_code == 500
    payload = resp.json()
    assert payload["error"] == "Internal server error"
    assert payload["success"] is False
    assert payload["data"] == []
    assert "boom" not in resp.text
    assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert resp.headers["X-Request-ID"] == "dash-500"

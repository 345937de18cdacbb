from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import httpx

from wallet_proxy.core.signing import serialize_body, sign
from wallet_proxy.utils.exceptions import NetworkError, UpstreamError
from wallet_proxy.utils.metrics import UPSTREAM_CALL_DURATION_SECONDS, UPSTREAM_CALLS_TOTAL
from wallet_proxy.utils.observability import log_duration

logger = logging.getLogger(__name__)


FIND_BY_USER_PATH = "/api/en/transaction/find-by-user"
SEARCH_PATH = "/api/en/transaction/search"

_MALFORMED_MESSAGE = "Unexpected response from transaction service"


def _emit(endpoint: str, result: str, elapsed_s: float) -> None:
    try:
        UPSTREAM_CALLS_TOTAL.labels(endpoint=endpoint, result=result).inc()
        UPSTREAM_CALL_DURATION_SECONDS.labels(endpoint=endpoint).observe(elapsed_s)
    except Exception:
        logger.debug("metrics.emit_failed endpoint=%s", endpoint, exc_info=True)


def _error_payload(response: httpx.Response) -> Any:
    """Upstream error body as-is: parsed JSON when possible, else raw text."""
    try:
        return response.json()
    except ValueError:
        text = response.text.strip()
        return text or response.reason_phrase or f"HTTP {response.status_code}"


class UpstreamGateway:
    """Signed calls to the wallet provider's transaction API.

    Every method returns the full, unpaginated list found under the response's
    `data` field. Failures are raised, never retried here.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str,
        api_key: str,
        api_secret: str,
        timeout_seconds: float = 10.0,
    ):
        self._client = client
        self._base_url = (base_url or "").rstrip("/")
        self._api_key = api_key
        self._api_secret = api_secret
        self._timeout = httpx.Timeout(timeout_seconds)

    async def list_all(self) -> list[Any]:
        return await self._call("GET", FIND_BY_USER_PATH)

    async def search_all(self, query: str) -> list[Any]:
        return await self._call("POST", SEARCH_PATH, {"query": query})

    async def _call(self, method: str, path: str, body: Mapping[str, Any] | None = None) -> list[Any]:
        headers = sign(self._api_secret, method, path, body, api_key=self._api_key).as_headers()
        content = serialize_body(body) or None

        url = f"{self._base_url}{path}"
        start = time.perf_counter()
        with log_duration(logger, "upstream.call", method=method, path=path):
            try:
                response = await self._client.request(
                    method,
                    url,
                    headers=headers,
                    content=content,
                    timeout=self._timeout,
                )
            except httpx.RequestError as exc:
                _emit(path, "network_error", time.perf_counter() - start)
                # The URL stays in server logs; clients only get the generic message.
                logger.warning(
                    "upstream.network_error method=%s url=%s error=%s", method, url, type(exc).__name__
                )
                raise NetworkError() from exc
        elapsed = time.perf_counter() - start

        if not response.is_success:
            _emit(path, f"http_{response.status_code}", elapsed)
            logger.warning(
                "upstream.error method=%s path=%s status=%s", method, path, response.status_code
            )
            raise UpstreamError(response.status_code, _error_payload(response))

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            _emit(path, "malformed", elapsed)
            logger.error("upstream.malformed_body method=%s path=%s", method, path)
            raise UpstreamError(500, message=_MALFORMED_MESSAGE)

        data = payload.get("data")
        if data is None:
            data = []
        if not isinstance(data, list):
            _emit(path, "malformed", elapsed)
            logger.error("upstream.malformed_data method=%s path=%s type=%s", method, path, type(data).__name__)
            raise UpstreamError(500, message=_MALFORMED_MESSAGE)

        _emit(path, "ok", elapsed)
        logger.info("upstream.ok method=%s path=%s status=%s count=%d", method, path, response.status_code, len(data))
        return data

"""
Dashboard API client.

Async client for the proxy's transaction routes, as used by the browsing
dashboard. Every failure is normalized into a DashboardClientError whose
message can be shown to the user as-is.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

TRANSACTIONS_PATH = "/api/transactions"
SEARCH_PATH = "/api/transactions/search"


class DashboardClientError(Exception):
    def __init__(self, message: str, *, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _is_html(response: httpx.Response) -> bool:
    ctype = response.headers.get("Content-Type", "")
    return "text/html" in ctype or "<!DOCTYPE html>" in response.text


def _describe_error(response: httpx.Response) -> DashboardClientError:
    status = response.status_code
    if _is_html(response):
        return DashboardClientError(
            f"API Endpoint Not Found ({status}): The requested endpoint does not exist",
            status_code=status,
        )

    message: Any = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
    if isinstance(message, dict):
        message = message.get("message") or message.get("error") or message
    if not message:
        message = f"HTTP {status} Error"
    return DashboardClientError(f"API Error: {status} - {message}", status_code=status)


class DashboardClient:
    """
    HTTP client for the transactions proxy
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def fetch_transactions(self, page: int = 1, limit: int = 5) -> Dict[str, Any]:
        """
        Get one page of the account's transactions
        """
        return await self._send("GET", TRANSACTIONS_PATH, params={"p": page, "limit": limit})

    async def search_transactions(self, query: str, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        """
        Search transactions and get one page of the matches
        """
        return await self._send("POST", SEARCH_PATH, json={"query": query, "p": page, "limit": limit})

    async def _send(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        logger.debug("Making %s request to %s", method, path)
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            logger.error("Network error: %s", type(exc).__name__)
            raise DashboardClientError("Network error: Unable to connect to the server") from exc

        if response.is_error:
            error = _describe_error(response)
            logger.error("Response error: %s %s", response.status_code, error.message)
            raise error

        try:
            return response.json()
        except ValueError as exc:
            raise DashboardClientError(
                f"Request failed: invalid JSON from {path}", status_code=response.status_code
            ) from exc

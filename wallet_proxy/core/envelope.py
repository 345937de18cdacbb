from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from wallet_proxy.core.pagination import Page
from wallet_proxy.schemas.common import ErrorEnvelope
from wallet_proxy.schemas.transaction import TransactionPage, TransactionSearchPage
from wallet_proxy.utils.exceptions import ProxyException


def success_envelope(page: Page, *, search_query: str | None = None) -> TransactionPage:
    fields = {
        "data": page.items,
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
        "total_pages": page.total_pages,
        "success": True,
    }
    if search_query is not None:
        return TransactionSearchPage(**fields, search_query=search_query)
    return TransactionPage(**fields)


def error_envelope(error: Any, *, default_limit: int) -> ErrorEnvelope:
    return ErrorEnvelope(error=error, limit=default_limit)


def error_response(exc: ProxyException, *, default_limit: int) -> JSONResponse:
    envelope = error_envelope(exc.client_error, default_limit=default_limit)
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope.model_dump(mode="json", by_alias=True),
        headers=exc.headers or None,
    )

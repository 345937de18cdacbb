from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request

from wallet_proxy.api import deps
from wallet_proxy.config import settings
from wallet_proxy.core.envelope import success_envelope
from wallet_proxy.core.gateway import UpstreamGateway
from wallet_proxy.core.pagination import paginate
from wallet_proxy.core.validation import parse_list_params, parse_search_params
from wallet_proxy.schemas.common import ErrorEnvelope
from wallet_proxy.schemas.transaction import SearchRequest, TransactionPage, TransactionSearchPage
from wallet_proxy.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorEnvelope, "description": "Invalid search parameters"},
    429: {"model": ErrorEnvelope, "description": "Rate limit exceeded"},
    500: {"model": ErrorEnvelope, "description": "Transaction service unreachable"},
}


async def _read_json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationError("Request body must be valid JSON")


@router.get("", response_model=TransactionPage, responses=_ERROR_RESPONSES)
async def list_transactions(
    p: Optional[str] = None,
    limit: Optional[str] = None,
    gateway: UpstreamGateway = Depends(deps.get_gateway),
):
    """List the account's transactions, one page at a time.

    Out-of-policy `p`/`limit` values fall back to defaults instead of failing.
    """
    params = parse_list_params(
        p,
        limit,
        default_limit=settings.DEFAULT_LIMIT,
        allowed_limits=settings.ALLOWED_LIMITS,
    )
    records = await gateway.list_all()
    page = paginate(records, params.page, params.limit)
    logger.info(
        "transactions.list page=%d limit=%d total=%d returned=%d",
        page.page,
        page.limit,
        page.total,
        len(page.items),
    )
    return success_envelope(page)


@router.post(
    "/search",
    response_model=TransactionSearchPage,
    responses=_ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SearchRequest.model_json_schema()}},
        }
    },
)
async def search_transactions(
    request: Request,
    gateway: UpstreamGateway = Depends(deps.get_gateway),
):
    """Search by sender, receiver, transaction id or cause and paginate the matches.

    Unlike the list route, invalid parameters are rejected with a 400.
    """
    params = parse_search_params(
        await _read_json_body(request),
        default_limit=settings.DEFAULT_LIMIT,
        allowed_limits=settings.ALLOWED_LIMITS,
        max_query_length=settings.SEARCH_QUERY_MAX_LENGTH,
    )
    records = await gateway.search_all(params.query)
    page = paginate(records, params.page, params.limit)
    logger.info(
        "transactions.search page=%d limit=%d total=%d returned=%d",
        page.page,
        page.limit,
        page.total,
        len(page.items),
    )
    return success_envelope(page, search_query=params.query)

"""Pagination and search parameter policy.

List and search requests are validated by two separate functions on purpose:
the list route silently falls back to defaults, while the search route rejects
anything outside the policy with a 400.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from wallet_proxy.utils.exceptions import ValidationError


# At most 18 digits; longer strings are treated as non-integers.
_INT_RE = re.compile(r"^[+-]?\d{1,18}$", flags=re.ASCII)


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int
    query: Optional[str] = None


def _coerce_int(value: Any) -> int | None:
    """Return `value` as an int when it is an integer or an integer string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        s = value.strip()
        if _INT_RE.fullmatch(s):
            return int(s)
    return None


def parse_list_params(
    p: Any,
    limit: Any,
    *,
    default_limit: int,
    allowed_limits: Iterable[int],
) -> PageRequest:
    page = _coerce_int(p)
    if page is None or page < 1:
        page = 1

    size = _coerce_int(limit)
    if size is None or size not in set(allowed_limits):
        size = default_limit

    return PageRequest(page=page, limit=size)


def parse_search_params(
    payload: Any,
    *,
    default_limit: int,
    allowed_limits: Iterable[int],
    max_query_length: int,
) -> PageRequest:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    query = payload.get("query")
    if query is None:
        raise ValidationError("query is required")
    if not isinstance(query, str):
        raise ValidationError("query must be a string")
    query = query.strip()
    if not query:
        raise ValidationError("query must not be empty")
    if len(query) > max_query_length:
        raise ValidationError(f"query must be at most {max_query_length} characters")

    page = 1
    if payload.get("p") is not None:
        page = _coerce_int(payload["p"])
        if page is None or page < 1:
            raise ValidationError("p must be an integer greater than or equal to 1")

    allowed = sorted(set(allowed_limits))
    size = default_limit
    if payload.get("limit") is not None:
        size = _coerce_int(payload["limit"])
        if size is None or size not in allowed:
            raise ValidationError(f"limit must be one of {allowed}")

    return PageRequest(page=page, limit=size, query=query)

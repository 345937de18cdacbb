from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True)
class Page:
    items: list[Any]
    total: int
    page: int
    limit: int
    total_pages: int


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        raise ValueError("limit must be positive")
    return math.ceil(total / limit) if total else 0


def paginate(items: Sequence[Any], page: int, limit: int) -> Page:
    """Slice one page out of the full upstream list.

    A page past the end yields an empty `items`, never an error; `page` is
    echoed back unchanged.
    """
    start = (page - 1) * limit
    end = start + limit
    return Page(
        items=list(items[max(start, 0):max(end, 0)]),
        total=len(items),
        page=page,
        limit=limit,
        total_pages=total_pages(len(items), limit),
    )

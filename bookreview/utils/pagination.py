"""
Page arithmetic shared by every paged listing.

Both helpers are pure: they never touch the database and never raise.
Range checks belong to the request layer; anything that slips past it is
coerced here rather than trusted.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from bookreview.schemas.common_schema import PaginationInfo

# Largest value a 64-bit signed integer column or OFFSET accepts
MAX_DB_INT = 2**63 - 1


@dataclass(frozen=True)
class PageWindow:
    page: int
    limit: int
    skip: int


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def page_window(
    page: Any = None,
    limit: Any = None,
    *,
    default_limit: int,
    max_limit: Optional[int] = None,
) -> PageWindow:
    """Turn a requested (page, limit) into a skip/limit window."""
    page = _positive_int(page) or 1
    limit = _positive_int(limit) or default_limit
    if max_limit is not None:
        limit = min(limit, max_limit)
    skip = min((page - 1) * limit, MAX_DB_INT)
    return PageWindow(page=page, limit=limit, skip=skip)


def describe_page(page: int, limit: int, total: int) -> PaginationInfo:
    """Build the pagination descriptor for ``total`` items split into pages of ``limit``."""
    page = max(page, 1)
    total = max(total, 0)
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return PaginationInfo(
        current_page=page,
        total_pages=total_pages,
        total_items=total,
        has_next=page < total_pages,
        has_prev=page > 1,
    )

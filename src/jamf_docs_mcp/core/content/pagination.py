"""Page-number pagination and token-bounded item lists."""

import math
from typing import Callable, List, Optional, Sequence, TypeVar

from jamf_docs_mcp.core.content.estimation import estimate_tokens
from jamf_docs_mcp.core.content.models import (
    FittedItems,
    PaginationInfo,
    TokenInfo,
    TokenRatios,
)

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE = 100


def calculate_pagination(total_items: int, page: int, page_size: int) -> PaginationInfo:
    """Compute the window for ``page`` over ``total_items``.

    Out-of-range pages are clamped into ``[1, max(total_pages, 1)]`` rather
    than rejected, so an empty list still reports page 1.

    Args:
        total_items: Length of the full list (>= 0)
        page: Requested 1-based page
        page_size: Items per page (> 0)

    Returns:
        PaginationInfo with slice bounds into the full list

    Example:
        >>> info = calculate_pagination(100, 999, 10)
        >>> (info.page, info.start_index, info.end_index, info.has_next)
        (10, 90, 100, False)
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")

    total_pages = math.ceil(total_items / page_size)
    normalized = min(max(1, page), max(total_pages, 1))

    return PaginationInfo(
        page=normalized,
        page_size=page_size,
        total_pages=total_pages,
        total_items=total_items,
        has_next=normalized < total_pages,
        has_prev=normalized > 1,
        start_index=(normalized - 1) * page_size,
        end_index=min(normalized * page_size, total_items),
    )


def truncate_items_to_token_limit(
    items: Sequence[T],
    max_tokens: int,
    item_to_string: Callable[[T], str],
    page: int = DEFAULT_PAGE,
    page_size: int = DEFAULT_PAGE_SIZE,
    ratios: Optional[TokenRatios] = None,
) -> FittedItems[T]:
    """Select a page of items and trim it to ``max_tokens``.

    Items are priced via ``item_to_string`` and included greedily; the first
    item that would push the running total over budget stops the page. When
    that happens ``pagination.has_next`` is forced on, even on the last page,
    so callers know there is more to fetch.

    Args:
        items: The full ordered list
        max_tokens: Token budget for the page
        item_to_string: Rendering used to price an item
        page: Requested 1-based page
        page_size: Items per page
        ratios: Token ratios forwarded to the estimator

    Returns:
        FittedItems with the included items, the running token total, and
        the page window
    """
    window = calculate_pagination(len(items), page, page_size)

    included: List[T] = []
    running = 0
    truncated = False
    for item in items[window.start_index : window.end_index]:
        cost = estimate_tokens(item_to_string(item), ratios)
        if running + cost > max_tokens:
            truncated = True
            break
        included.append(item)
        running += cost

    if truncated:
        window.has_next = True

    return FittedItems(
        items=included,
        token_info=TokenInfo(token_count=running, truncated=truncated, max_tokens=max_tokens),
        pagination=window,
    )

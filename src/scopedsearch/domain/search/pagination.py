"""Pagination normalization and page arithmetic."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from scopedsearch.domain.search.types import OverLimitPolicy, PageWindow
from scopedsearch.shared.exceptions import ValidationError

# Largest OFFSET a 64-bit integer parameter can carry
MAX_STORE_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class LimitPolicy:
    """Page-size rules of one resource."""

    default_limit: int = 20
    max_limit: int = 100
    over_limit: OverLimitPolicy = OverLimitPolicy.CLAMP

    def __post_init__(self) -> None:
        if not 1 <= self.default_limit <= self.max_limit:
            raise ValueError("default_limit must be between 1 and max_limit")


def _as_int(raw: Any, field: str) -> int | None:
    """Read an optional integer from wire input.

    Raises:
        ValidationError: If ``raw`` is present but not a whole number.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"'{field}' must be an integer", field=field)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, (float, Decimal)):
        if raw != raw or raw in (float("inf"), float("-inf")) or int(raw) != raw:
            raise ValidationError(f"'{field}' must be an integer", field=field)
        return int(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            raise ValidationError(f"'{field}' must be an integer", field=field) from None
    raise ValidationError(f"'{field}' must be an integer", field=field)


def normalize_page(requested_page: Any, requested_limit: Any, policy: LimitPolicy) -> PageWindow:
    """Convert caller page/limit into a bounded window.

    Pages below 1 become 1. Limits below 1 fall back to the default; limits
    above the maximum are clamped or rejected according to the policy.

    Raises:
        ValidationError: For non-numeric values, or an over-limit request when
            the resource rejects rather than clamps.
    """
    page = _as_int(requested_page, "page")
    limit = _as_int(requested_limit, "limit")

    if page is None or page < 1:
        page = 1

    if limit is None or limit < 1:
        limit = policy.default_limit
    elif limit > policy.max_limit:
        if policy.over_limit is OverLimitPolicy.REJECT:
            raise ValidationError(
                f"'limit' must not exceed {policy.max_limit}", field="limit"
            )
        limit = policy.max_limit

    return PageWindow(page=page, limit=limit, skip=(page - 1) * limit)


def page_count(records: int, limit: int) -> int:
    """Number of pages needed for ``records`` rows, 0 when there are none."""
    if records <= 0:
        return 0
    return -(-records // max(limit, 1))


def beyond_store_range(window: PageWindow) -> bool:
    """True when the window starts past any row offset a store can address.

    Such a page is necessarily empty; only the total is worth fetching.
    """
    return window.skip > MAX_STORE_OFFSET - window.limit

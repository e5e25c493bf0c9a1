"""Sort allowlist resolution."""

from dataclasses import dataclass
from typing import Any

from scopedsearch.domain.search.types import SortDirection, SortSpec


@dataclass(frozen=True)
class SortAllowlist:
    """Closed set of sortable fields with a default ordering."""

    fields: frozenset[str]
    default_field: str
    default_direction: SortDirection = SortDirection.DESC

    def __post_init__(self) -> None:
        if self.default_field not in self.fields:
            raise ValueError(
                f"Default sort field '{self.default_field}' is not in the allowlist"
            )


def _parse_direction(raw: Any) -> SortDirection | None:
    if isinstance(raw, SortDirection):
        return raw
    if isinstance(raw, str):
        try:
            return SortDirection(raw.strip().lower())
        except ValueError:
            return None
    return None


def resolve_sort(
    allowlist: SortAllowlist,
    requested_field: Any,
    requested_direction: Any,
) -> SortSpec:
    """Resolve a requested ordering against the allowlist.

    Never raises: unknown fields fall back to the default field and anything
    other than asc/desc (case-insensitive) falls back to the default direction.
    """
    field = allowlist.default_field
    if isinstance(requested_field, str):
        candidate = requested_field.strip()
        if candidate in allowlist.fields:
            field = candidate

    direction = _parse_direction(requested_direction) or allowlist.default_direction
    return SortSpec(field=field, direction=direction)

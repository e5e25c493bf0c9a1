"""Projection of storage rows into response summaries."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from scopedsearch.domain.search.pagination import page_count
from scopedsearch.domain.search.types import Page, PageWindow, SearchPage
from scopedsearch.shared.timestamps import format_date, format_timestamp


class FieldFormat(str, Enum):
    """How a projected value is normalized."""

    VALUE = "value"
    TIMESTAMP = "timestamp"
    DATE = "date"


@dataclass(frozen=True)
class ProjectedField:
    """One response field and the row attribute it reads."""

    name: str
    source: str | None = None
    format: FieldFormat = FieldFormat.VALUE

    @property
    def attribute(self) -> str:
        return self.source or self.name


def value(name: str, source: str | None = None) -> ProjectedField:
    return ProjectedField(name, source)


def timestamp(name: str, source: str | None = None) -> ProjectedField:
    return ProjectedField(name, source, FieldFormat.TIMESTAMP)


def calendar_date(name: str, source: str | None = None) -> ProjectedField:
    return ProjectedField(name, source, FieldFormat.DATE)


def _read(row: Any, attribute: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(attribute)
    return getattr(row, attribute, None)


def _normalize(raw: Any) -> Any:
    if isinstance(raw, Enum):
        return raw.value
    if isinstance(raw, UUID):
        return str(raw)
    if isinstance(raw, Decimal):
        # Exact digits, as JSON numbers would round through float
        return str(raw)
    return raw


@dataclass(frozen=True)
class SummaryProjection:
    """Explicit allowlist of response fields.

    Columns not listed here never appear in search output, so adding a
    sensitive column to storage cannot leak it through search.
    """

    fields: tuple[ProjectedField, ...]

    def apply(self, row: Any) -> dict[str, Any]:
        summary: dict[str, Any] = {}
        for f in self.fields:
            raw = _read(row, f.attribute)
            if f.format is FieldFormat.TIMESTAMP:
                formatted = format_timestamp(raw)
            elif f.format is FieldFormat.DATE:
                formatted = format_date(raw)
            else:
                summary[f.name] = _normalize(raw)
                continue
            # Missing temporal values are omitted rather than serialized as null
            if formatted is not None:
                summary[f.name] = formatted
        return summary


def project(
    projection: SummaryProjection,
    rows: Iterable[Any],
    window: PageWindow,
    total: int,
) -> SearchPage:
    """Build the paginated response for one fetched page."""
    return SearchPage(
        pagination=Page(
            current=window.page,
            limit=window.limit,
            records=total,
            pages=page_count(total, window.limit),
        ),
        data=tuple(projection.apply(row) for row in rows),
    )

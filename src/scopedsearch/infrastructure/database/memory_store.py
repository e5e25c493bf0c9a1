"""In-process search store for development and testing."""

from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from scopedsearch.domain.search.query import QueryDescriptor
from scopedsearch.domain.search.types import AnyOf, Clause, Condition, Operator, SortDirection


def _read(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _comparable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def matches_condition(row: Any, condition: Condition) -> bool:
    """Evaluate one condition the way the relational store would."""
    actual = _comparable(_read(row, condition.field))
    if condition.op is Operator.IS_NULL:
        return actual is None
    if actual is None:
        # NULL never satisfies a comparison
        return False

    expected = condition.value
    match condition.op:
        case Operator.EQ:
            return actual == _comparable(expected)
        case Operator.IN:
            return actual in {_comparable(v) for v in expected}
        case Operator.CONTAINS:
            return str(expected) in str(actual)
        case Operator.GTE:
            return actual >= _comparable(expected)
        case Operator.LTE:
            return actual <= _comparable(expected)
    raise ValueError(f"Unsupported operator: {condition.op}")


def matches(row: Any, clause: Clause) -> bool:
    if isinstance(clause, AnyOf):
        return any(matches_condition(row, c) for c in clause.conditions)
    return matches_condition(row, clause)


class InMemorySearchStore:
    """Search store over rows held in memory.

    Rows may be mappings or objects with attributes. Ordering follows
    PostgreSQL defaults: NULLs sort last ascending and first descending.
    """

    def __init__(self, rows_by_resource: Mapping[str, Iterable[Any]] | None = None) -> None:
        self.rows: dict[str, list[Any]] = {
            name: list(rows) for name, rows in (rows_by_resource or {}).items()
        }
        self.calls: list[QueryDescriptor] = []

    def add(self, resource: str, *rows: Any) -> None:
        self.rows.setdefault(resource, []).extend(rows)

    async def fetch(self, descriptor: QueryDescriptor) -> tuple[Sequence[Any], int]:
        self.calls.append(descriptor)
        matched = [
            row
            for row in self.rows.get(descriptor.resource, [])
            if all(matches(row, clause) for clause in descriptor.predicates)
        ]

        # Stable sorts applied from the least significant key
        for spec in reversed(descriptor.order_by):
            present = [r for r in matched if _read(r, spec.field) is not None]
            missing = [r for r in matched if _read(r, spec.field) is None]
            present.sort(
                key=lambda r, name=spec.field: _comparable(_read(r, name)),
                reverse=spec.direction is SortDirection.DESC,
            )
            if spec.direction is SortDirection.ASC:
                matched = present + missing
            else:
                matched = missing + present

        window = matched[descriptor.skip : descriptor.skip + descriptor.take]
        return window, len(matched)

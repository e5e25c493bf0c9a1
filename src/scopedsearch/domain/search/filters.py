"""Declarative filter allowlists.

A resource declares a finite table of request keys and the predicate each one
produces. Request keys that are not declared never reach the store.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import UUID

from scopedsearch.domain.search.types import AnyOf, Clause, Condition, Operator, PredicateSet
from scopedsearch.shared.exceptions import ValidationError
from scopedsearch.shared.timestamps import parse_date, parse_timestamp


class FilterKind(str, Enum):
    """Comparison kind of a declared filter."""

    EQUALS = "equals"
    CONTAINS = "contains"
    RANGE = "range"
    ENUM_MATCH = "enum_match"
    KEYWORD = "keyword"


_LOWER_KEYS = ("from", "min", "gte")
_UPPER_KEYS = ("to", "max", "lte")


@dataclass(frozen=True)
class FilterField:
    """One declared filter.

    Attributes:
        key: Request key (for ranges, the nested-mapping key).
        kind: Predicate kind.
        column: Storage column; defaults to ``key``.
        value_type: Python type values are coerced to, or an Enum class.
        columns: Columns searched by a ``keyword`` filter.
        lower_key: Request key of a range's lower bound.
        upper_key: Request key of a range's upper bound.
        null_matches_missing: Explicit null means "column IS NULL" instead of absent.
    """

    key: str
    kind: FilterKind
    column: str | None = None
    value_type: Any = str
    columns: tuple[str, ...] = ()
    lower_key: str | None = None
    upper_key: str | None = None
    null_matches_missing: bool = False

    @property
    def target(self) -> str:
        return self.column or self.key

    @property
    def bound_keys(self) -> tuple[str, str]:
        return (self.lower_key or f"{self.key}_from", self.upper_key or f"{self.key}_to")

    @property
    def request_keys(self) -> tuple[str, ...]:
        if self.kind is FilterKind.RANGE:
            return (self.key, *self.bound_keys)
        return (self.key,)


def equals(
    key: str,
    value_type: Any = str,
    *,
    column: str | None = None,
    null_matches_missing: bool = False,
) -> FilterField:
    return FilterField(
        key, FilterKind.EQUALS, column, value_type, null_matches_missing=null_matches_missing
    )


def contains(key: str, *, column: str | None = None) -> FilterField:
    return FilterField(key, FilterKind.CONTAINS, column)


def value_range(
    key: str,
    value_type: Any,
    *,
    column: str | None = None,
    lower_key: str | None = None,
    upper_key: str | None = None,
) -> FilterField:
    return FilterField(
        key, FilterKind.RANGE, column, value_type, lower_key=lower_key, upper_key=upper_key
    )


def enum_match(key: str, enum_type: type[Enum], *, column: str | None = None) -> FilterField:
    return FilterField(key, FilterKind.ENUM_MATCH, column, enum_type)


def keyword(key: str, *columns: str) -> FilterField:
    return FilterField(key, FilterKind.KEYWORD, columns=tuple(columns))


@dataclass(frozen=True)
class FilterSpec:
    """Allowlist of filterable request keys for one resource."""

    fields: tuple[FilterField, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for f in self.fields:
            for key in f.request_keys:
                if key in seen:
                    raise ValueError(f"Filter key '{key}' declared twice")
                seen.add(key)

    @property
    def request_keys(self) -> frozenset[str]:
        return frozenset(key for f in self.fields for key in f.request_keys)


def is_absent(value: Any) -> bool:
    """Empty string and null both mean "not provided"."""
    return value is None or (isinstance(value, str) and value.strip() == "")


def coerce_value(value_type: Any, raw: Any, key: str) -> Any:
    """Coerce one request value to the declared type.

    Raises:
        ValidationError: If ``raw`` cannot be represented as ``value_type``.
    """
    try:
        if isinstance(value_type, type) and issubclass(value_type, Enum):
            return value_type(raw.value if isinstance(raw, Enum) else raw)
        if value_type is bool:
            if isinstance(raw, bool):
                return raw
            if isinstance(raw, str) and raw.lower() in ("true", "false"):
                return raw.lower() == "true"
            raise ValueError(raw)
        if value_type is int:
            if isinstance(raw, bool):
                raise ValueError(raw)
            if isinstance(raw, float):
                if not raw.is_integer():
                    raise ValueError(raw)
                return int(raw)
            return int(raw)
        if value_type is float:
            if isinstance(raw, bool):
                raise ValueError(raw)
            return float(raw)
        if value_type is Decimal:
            if isinstance(raw, bool):
                raise ValueError(raw)
            return Decimal(str(raw))
        if value_type is UUID:
            return raw if isinstance(raw, UUID) else UUID(str(raw))
        if value_type is datetime:
            return parse_timestamp(raw, key)
        if value_type is date:
            return parse_date(raw, key)
        if value_type is str:
            if not isinstance(raw, (str, int, float, Decimal, UUID)) or isinstance(raw, bool):
                raise ValueError(raw)
            return str(raw)
    except (TypeError, ValueError, InvalidOperation) as exc:
        raise ValidationError(f"Invalid value for '{key}': {raw!r}", field=key) from exc
    raise ValidationError(f"Unsupported filter type for '{key}'", field=key)


def _range_bounds(f: FilterField, filters: Mapping[str, Any]) -> tuple[Any, Any]:
    lower_key, upper_key = f.bound_keys
    lower = filters.get(lower_key)
    upper = filters.get(upper_key)

    nested = filters.get(f.key)
    if isinstance(nested, Mapping):
        for name in _LOWER_KEYS:
            if is_absent(lower) and not is_absent(nested.get(name)):
                lower = nested.get(name)
        for name in _UPPER_KEYS:
            if is_absent(upper) and not is_absent(nested.get(name)):
                upper = nested.get(name)
    elif not is_absent(nested):
        raise ValidationError(f"Range filter '{f.key}' expects an object with bounds", field=f.key)

    low = None if is_absent(lower) else coerce_value(f.value_type, lower, lower_key)
    high = None if is_absent(upper) else coerce_value(f.value_type, upper, upper_key)
    return low, high


def _clauses_for(f: FilterField, filters: Mapping[str, Any]) -> list[Clause]:
    if f.kind is FilterKind.RANGE:
        low, high = _range_bounds(f, filters)
        # min > max is passed through and simply matches nothing
        clauses: list[Clause] = []
        if low is not None:
            clauses.append(Condition(f.target, Operator.GTE, low))
        if high is not None:
            clauses.append(Condition(f.target, Operator.LTE, high))
        return clauses

    if f.key not in filters:
        return []
    raw = filters[f.key]

    if raw is None and f.null_matches_missing:
        return [Condition(f.target, Operator.IS_NULL)]
    if is_absent(raw):
        return []

    if f.kind is FilterKind.EQUALS:
        return [Condition(f.target, Operator.EQ, coerce_value(f.value_type, raw, f.key))]

    if f.kind is FilterKind.CONTAINS:
        return [Condition(f.target, Operator.CONTAINS, coerce_value(str, raw, f.key))]

    if f.kind is FilterKind.ENUM_MATCH:
        if isinstance(raw, Sequence) and not isinstance(raw, str):
            members = tuple(
                dict.fromkeys(coerce_value(f.value_type, item, f.key) for item in raw)
            )
            if not members:
                return []
            if len(members) == 1:
                return [Condition(f.target, Operator.EQ, members[0])]
            return [Condition(f.target, Operator.IN, members)]
        return [Condition(f.target, Operator.EQ, coerce_value(f.value_type, raw, f.key))]

    if f.kind is FilterKind.KEYWORD:
        text = coerce_value(str, raw, f.key).strip()
        return [AnyOf(tuple(Condition(column, Operator.CONTAINS, text) for column in f.columns))]

    raise ValueError(f"Unknown filter kind: {f.kind}")


def build_filter_predicate(spec: FilterSpec, filters: Mapping[str, Any]) -> PredicateSet:
    """Translate request filters into predicates using only declared fields.

    Undeclared keys are ignored. Absent, null and empty-string values impose
    no predicate unless the field opts in to ``null_matches_missing``.

    Raises:
        ValidationError: For values that cannot be coerced to the declared type.
    """
    clauses: list[Clause] = []
    for f in spec.fields:
        clauses.extend(_clauses_for(f, filters))
    return PredicateSet(tuple(clauses))

"""Unit tests for the in-memory search store."""

from datetime import UTC, datetime
from uuid import UUID

from scopedsearch.domain.search.query import QueryDescriptor
from scopedsearch.domain.search.types import (
    AnyOf,
    Condition,
    Operator,
    PredicateSet,
    ScopePredicate,
    SortDirection,
    SortSpec,
)
from scopedsearch.infrastructure.database.memory_store import InMemorySearchStore

ROWS = [
    {"id": UUID(int=1), "name": "alpha", "rank": 2, "seen": None},
    {"id": UUID(int=2), "name": "beta", "rank": 1, "seen": datetime(2024, 1, 1)},
    {"id": UUID(int=3), "name": "gamma", "rank": 2, "seen": datetime(2024, 1, 2, tzinfo=UTC)},
    {"id": UUID(int=4), "name": "100%", "rank": None, "seen": None},
]


def descriptor(*clauses, order_by=None, skip=0, take=10):
    return QueryDescriptor(
        resource="things",
        predicates=PredicateSet(tuple(clauses)),
        scope=ScopePredicate(),
        order_by=order_by or (SortSpec("id", SortDirection.ASC),),
        skip=skip,
        take=take,
    )


def ids(rows):
    return [row["id"].int for row in rows]


class TestInMemorySearchStore:
    """Test predicate evaluation, ordering and windowing."""

    async def test_count_uses_same_predicates_as_page(self):
        store = InMemorySearchStore({"things": ROWS})

        rows, total = await store.fetch(
            descriptor(Condition("rank", Operator.EQ, 2), take=1)
        )

        assert ids(rows) == [1]
        assert total == 2

    async def test_contains_is_literal_and_case_sensitive(self):
        store = InMemorySearchStore({"things": ROWS})

        rows, _ = await store.fetch(descriptor(Condition("name", Operator.CONTAINS, "%")))
        upper, _ = await store.fetch(descriptor(Condition("name", Operator.CONTAINS, "ALPHA")))

        assert ids(rows) == [4]
        assert upper == []

    async def test_any_of_is_or(self):
        store = InMemorySearchStore({"things": ROWS})

        rows, _ = await store.fetch(
            descriptor(
                AnyOf(
                    (
                        Condition("name", Operator.CONTAINS, "alp"),
                        Condition("name", Operator.CONTAINS, "gam"),
                    )
                )
            )
        )

        assert ids(rows) == [1, 3]

    async def test_null_never_matches_a_comparison(self):
        store = InMemorySearchStore({"things": ROWS})

        rows, _ = await store.fetch(descriptor(Condition("rank", Operator.LTE, 5)))
        missing, _ = await store.fetch(descriptor(Condition("seen", Operator.IS_NULL)))

        assert 4 not in ids(rows)
        assert ids(missing) == [1, 4]

    async def test_naive_and_aware_datetimes_compare(self):
        store = InMemorySearchStore({"things": ROWS})

        rows, _ = await store.fetch(
            descriptor(Condition("seen", Operator.GTE, datetime(2024, 1, 1, 12, tzinfo=UTC)))
        )

        assert ids(rows) == [3]

    async def test_multi_key_order_with_nulls(self):
        store = InMemorySearchStore({"things": ROWS})
        order = (SortSpec("rank", SortDirection.DESC), SortSpec("id", SortDirection.ASC))

        rows, _ = await store.fetch(descriptor(order_by=order))

        # NULLs first when descending
        assert ids(rows) == [4, 1, 3, 2]

    async def test_ascending_puts_nulls_last(self):
        store = InMemorySearchStore({"things": ROWS})
        order = (SortSpec("rank", SortDirection.ASC), SortSpec("id", SortDirection.ASC))

        rows, _ = await store.fetch(descriptor(order_by=order))

        assert ids(rows) == [2, 1, 3, 4]

    async def test_window_past_the_end_is_empty(self):
        store = InMemorySearchStore({"things": ROWS})

        rows, total = await store.fetch(descriptor(skip=40, take=10))

        assert rows == []
        assert total == 4

    async def test_unknown_resource_is_empty(self):
        rows, total = await InMemorySearchStore().fetch(descriptor())

        assert (rows, total) == ([], 0)

"""SQLAlchemy execution of search query descriptors."""

import asyncio
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from sqlalchemy import ColumnElement, Select, func, inspect as sa_inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scopedsearch.domain.search.query import QueryDescriptor
from scopedsearch.domain.search.types import AnyOf, Clause, Condition, Operator, SortDirection
from scopedsearch.infrastructure.database.models.base import Base
from scopedsearch.shared.exceptions import StorageError
from scopedsearch.shared.logging import get_logger

logger = get_logger(__name__)


def _column(model: type[Base], name: str) -> Any:
    columns = sa_inspect(model).columns
    if name not in columns:
        raise ValueError(f"{model.__name__} has no column '{name}'")
    return getattr(model, name)


def _bind(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_bind(v) for v in value]
    return value


def compile_condition(model: type[Base], condition: Condition) -> ColumnElement[bool]:
    """Translate one condition into a SQLAlchemy boolean expression."""
    column = _column(model, condition.field)
    value = _bind(condition.value)
    match condition.op:
        case Operator.EQ:
            return column == value
        case Operator.IN:
            return column.in_(value)
        case Operator.CONTAINS:
            # LIKE with % and _ escaped so the substring is literal
            return column.contains(value, autoescape=True)
        case Operator.GTE:
            return column >= value
        case Operator.LTE:
            return column <= value
        case Operator.IS_NULL:
            return column.is_(None)
    raise ValueError(f"Unsupported operator: {condition.op}")


def compile_clause(model: type[Base], clause: Clause) -> ColumnElement[bool]:
    if isinstance(clause, AnyOf):
        return or_(*(compile_condition(model, c) for c in clause.conditions))
    return compile_condition(model, clause)


def build_statements(model: type[Base], descriptor: QueryDescriptor) -> tuple[Select, Select]:
    """Build the page and count statements from one predicate snapshot."""
    where = tuple(compile_clause(model, clause) for clause in descriptor.predicates)
    order_by = [
        _column(model, spec.field).asc()
        if spec.direction is SortDirection.ASC
        else _column(model, spec.field).desc()
        for spec in descriptor.order_by
    ]
    page_stmt = (
        select(model)
        .where(*where)
        .order_by(*order_by)
        .offset(descriptor.skip)
        .limit(descriptor.take)
    )
    count_stmt = select(func.count()).select_from(model).where(*where)
    return page_stmt, count_stmt


class SqlAlchemySearchStore:
    """Search store backed by the relational database.

    The page and count queries run concurrently, each in its own read-only
    session, and share the same compiled WHERE expression.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        models: Mapping[str, type[Base]],
    ) -> None:
        self.session_factory = session_factory
        self.models = dict(models)

    def model_for(self, resource: str) -> type[Base]:
        try:
            return self.models[resource]
        except KeyError:
            raise ValueError(f"No model mapped for resource '{resource}'") from None

    async def _rows(self, stmt: Select) -> Sequence[Any]:
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalars().all()

    async def _count(self, stmt: Select) -> int:
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def fetch(self, descriptor: QueryDescriptor) -> tuple[Sequence[Any], int]:
        page_stmt, count_stmt = build_statements(self.model_for(descriptor.resource), descriptor)
        try:
            rows, total = await asyncio.gather(self._rows(page_stmt), self._count(count_stmt))
        except SQLAlchemyError as exc:
            logger.error("search_store_failed", resource=descriptor.resource, error=str(exc))
            raise StorageError(
                f"Search on {descriptor.resource} failed",
                details={"resource": descriptor.resource},
            ) from exc
        except TimeoutError as exc:
            logger.error("search_store_timeout", resource=descriptor.resource)
            raise StorageError(
                f"Search on {descriptor.resource} timed out",
                details={"resource": descriptor.resource},
            ) from exc
        return rows, total

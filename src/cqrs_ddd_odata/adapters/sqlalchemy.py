"""
SQLAlchemyQueryCapability — drive an ``AsyncSession`` select for one model.

The queried model is aliased as the root alias (``entity`` by default), so
predicate templates such as ``entity.name = :val0`` compile verbatim through
``text()`` with their parameters bound. Expanded relations are joined under
an alias equal to the relation name, which lets qualified predicates like
``profile.bio LIKE :val1`` reference them.

Expansions use ``outerjoin`` + ``contains_eager``. When a collection
relationship is expanded, ``LIMIT``/``OFFSET`` are applied to a subquery of
root primary keys so that pages hold whole entities with full collections.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, literal_column, select, text, tuple_
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import aliased, contains_eager

from ..operators import SortDirection

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select, TextClause
    from sqlalchemy.ext.asyncio import AsyncSession

    from ..translator import PredicateDescriptor

logger = logging.getLogger("cqrs_ddd.odata.sqlalchemy")


class SQLAlchemyQueryCapability:
    """``IQueryCapability`` over a mapped model and an ``AsyncSession``."""

    def __init__(
        self,
        session: AsyncSession,
        model: type[Any],
        *,
        root_alias: str = "entity",
    ) -> None:
        self._session = session
        self._model = model
        self._mapper = sa_inspect(model)
        self._alias: Any = aliased(model, name=root_alias)
        self._where: list[TextClause] = []
        self._order_by: list[ColumnElement[Any]] = []
        self._joins: dict[str, Any] = {}
        self._collections: set[str] = set()
        self._limit: int | None = None
        self._offset: int | None = None

    def add_predicate(self, descriptor: PredicateDescriptor) -> None:
        clause = text(descriptor.template)
        if descriptor.bindings:
            clause = clause.bindparams(**descriptor.parameters)
        self._where.append(clause)

    def add_ordering(self, field: str, direction: SortDirection) -> None:
        column = literal_column(field)
        self._order_by.append(
            column.desc() if direction is SortDirection.DESC else column.asc()
        )

    def add_expansion(self, relation: str) -> None:
        if relation in self._joins:
            return
        relationships = self._mapper.relationships
        if relation not in relationships:
            logger.warning(
                "Ignoring expansion of unknown relation %r on %s",
                relation,
                self._model.__name__,
            )
            return
        relationship = relationships[relation]
        if relationship.uselist:
            self._collections.add(relation)
        target = aliased(relationship.mapper.class_, name=relation)
        self._joins[relation] = getattr(self._alias, relation).of_type(target)

    def set_limit(self, limit: int) -> None:
        self._limit = limit

    def set_offset(self, offset: int) -> None:
        self._offset = offset

    # -- statements -----------------------------------------------------------

    def _filtered(self, stmt: Select[Any]) -> Select[Any]:
        for path in self._joins.values():
            stmt = stmt.outerjoin(path)
        if self._where:
            stmt = stmt.where(*self._where)
        return stmt

    def _pk_columns(self) -> list[Any]:
        return [
            getattr(self._alias, self._mapper.get_property_by_column(col).key)
            for col in self._mapper.primary_key
        ]

    def _paginate(self, stmt: Select[Any]) -> Select[Any]:
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        if self._offset is not None:
            stmt = stmt.offset(self._offset)
        return stmt

    def _paged_ids(self) -> ColumnElement[bool]:
        """``pk IN (...)`` restricting the rows to one page of root entities."""
        pk_columns = self._pk_columns()
        ids = self._filtered(select(*pk_columns).select_from(self._alias)).group_by(
            *pk_columns
        )
        if self._order_by:
            ids = ids.order_by(*self._order_by)
        ids = self._paginate(ids).correlate(None)
        if len(pk_columns) == 1:
            return pk_columns[0].in_(ids)
        return tuple_(*pk_columns).in_(ids)

    def rows_statement(self) -> Select[Any]:
        """The paginated, ordered select of root entities."""
        stmt = self._filtered(select(self._alias))
        for path in self._joins.values():
            stmt = stmt.options(contains_eager(path))
        if self._order_by:
            stmt = stmt.order_by(*self._order_by)
        paged = self._limit is not None or self._offset is not None
        if paged and self._collections:
            # Joined collection rows repeat the root; page the keys instead
            return stmt.where(self._paged_ids())
        return self._paginate(stmt)

    def count_statement(self) -> Select[Any]:
        """Count of distinct root entities matching the predicates."""
        ids = self._filtered(
            select(*self._pk_columns()).select_from(self._alias)
        ).distinct()
        return select(func.count()).select_from(ids.subquery())

    async def execute_and_count(self) -> tuple[list[Any], int]:
        result = await self._session.execute(self.rows_statement())
        rows = list(result.unique().scalars().all())
        total = (await self._session.execute(self.count_statement())).scalar_one()
        return rows, int(total)

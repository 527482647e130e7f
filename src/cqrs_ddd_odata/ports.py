"""IQueryCapability — protocol for the backend that runs the query."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .operators import SortDirection
    from .translator import PredicateDescriptor


@runtime_checkable
class IQueryCapability(Protocol):
    """Query-building surface driven by :class:`ODataQueryBuilder`.

    Implementations wrap an ORM query builder, a SQL statement or an
    in-memory collection. Only ``execute_and_count`` may suspend.
    """

    def add_predicate(self, descriptor: PredicateDescriptor) -> None:
        """AND-combine a predicate with those already added."""
        ...

    def add_ordering(self, field: str, direction: SortDirection) -> None:
        """Append a sort key."""
        ...

    def add_expansion(self, relation: str) -> None:
        """Eager-load a relation; repeated calls for one relation are no-ops."""
        ...

    def set_limit(self, limit: int) -> None: ...

    def set_offset(self, offset: int) -> None: ...

    async def execute_and_count(self) -> tuple[list[Any], int]:
        """Return the page of rows and the filtered, unpaginated total."""
        ...

"""InMemoryQueryCapability — list-backed fake for unit tests and fixtures."""

from __future__ import annotations

import operator
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..operators import OperatorKind, SortDirection

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ..translator import PredicateDescriptor


def _sql_pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """Convert a SQL LIKE pattern (``%``, ``_``) to an anchored regex."""
    parts: list[str] = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def evaluate(field_value: Any, condition_value: Any) -> bool:
        if field_value is None or condition_value is None:
            return False
        try:
            return bool(op(field_value, condition_value))
        except TypeError:
            return False

    return evaluate


def _like(field_value: Any, condition_value: Any) -> bool:
    if field_value is None or condition_value is None:
        return False
    regex = _sql_pattern_to_regex(str(condition_value))
    return regex.fullmatch(str(field_value)) is not None


EVALUATORS: dict[OperatorKind, Callable[[Any, Any], bool]] = {
    OperatorKind.EQ: _compare(operator.eq),
    OperatorKind.NE: _compare(operator.ne),
    OperatorKind.GT: _compare(operator.gt),
    OperatorKind.GE: _compare(operator.ge),
    OperatorKind.LT: _compare(operator.lt),
    OperatorKind.LE: _compare(operator.le),
    OperatorKind.CONTAINS: _like,
    OperatorKind.STARTSWITH: _like,
    OperatorKind.ENDSWITH: _like,
    OperatorKind.IS_NULL: lambda value, _: value is None,
    OperatorKind.IS_NOT_NULL: lambda value, _: value is not None,
}


def resolve_path(row: Any, path: str) -> Any:
    """Follow a dotted path through mappings and attributes.

    Missing segments resolve to ``None``.
    """
    current = row
    for segment in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(segment)
        else:
            current = getattr(current, segment, None)
    return current


class InMemoryQueryCapability:
    """In-memory implementation of ``IQueryCapability``.

    Evaluates predicates with SQL-like null semantics (comparisons against
    null are false). Rows are expected to carry related data already, so
    expansions are only recorded.
    """

    def __init__(self, rows: Iterable[Any], *, root_alias: str = "entity") -> None:
        self._rows = list(rows)
        self._root_alias = root_alias
        self.predicates: list[PredicateDescriptor] = []
        self.orderings: list[tuple[str, SortDirection]] = []
        self.expansions: list[str] = []
        self.limit: int | None = None
        self.offset: int | None = None

    def add_predicate(self, descriptor: PredicateDescriptor) -> None:
        self.predicates.append(descriptor)

    def add_ordering(self, field: str, direction: SortDirection) -> None:
        self.orderings.append((field, direction))

    def add_expansion(self, relation: str) -> None:
        if relation not in self.expansions:
            self.expansions.append(relation)

    def set_limit(self, limit: int) -> None:
        self.limit = limit

    def set_offset(self, offset: int) -> None:
        self.offset = offset

    async def execute_and_count(self) -> tuple[list[Any], int]:
        matched = [row for row in self._rows if self._matches(row)]
        total = len(matched)
        for field, direction in reversed(self.orderings):
            matched = _sorted(
                matched,
                self._local_path(field),
                descending=direction is SortDirection.DESC,
            )
        start = self.offset or 0
        end = start + self.limit if self.limit else None
        return matched[start:end], total

    def _matches(self, row: Any) -> bool:
        return all(self._evaluate(row, p) for p in self.predicates)

    def _evaluate(self, row: Any, predicate: PredicateDescriptor) -> bool:
        evaluate = EVALUATORS[predicate.operator]
        field_value = resolve_path(row, self._local_path(predicate.field))
        condition = next(iter(predicate.parameters.values()), None)
        return evaluate(field_value, condition)

    def _local_path(self, field: str) -> str:
        prefix = f"{self._root_alias}."
        return field[len(prefix) :] if field.startswith(prefix) else field


def _sort_key(value: Any) -> tuple[bool, Any]:
    # Nulls first in ascending order
    return (value is not None, value if value is not None else 0)


def _mixed_sort_key(value: Any) -> tuple[bool, str, Any]:
    if value is None:
        return (False, "", 0)
    return (True, type(value).__name__, value)


def _sorted(rows: list[Any], path: str, *, descending: bool) -> list[Any]:
    """Stable sort on one path; columns of mixed types group by type name."""
    try:
        return sorted(
            rows,
            key=lambda row: _sort_key(resolve_path(row, path)),
            reverse=descending,
        )
    except TypeError:
        return sorted(
            rows,
            key=lambda row: _mixed_sort_key(resolve_path(row, path)),
            reverse=descending,
        )

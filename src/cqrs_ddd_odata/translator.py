"""
Translate clause descriptors into backend-neutral predicate descriptors.

A predicate is a condition template plus named parameter bindings::

    ClauseDescriptor("name", OperatorKind.EQ, "'John'", position=0)
    -> PredicateDescriptor("entity.name = :val0", {"val0": String("John")})

Literal values only ever travel through ``bindings``; the template holds
the qualified field name, the SQL operator and the placeholder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .exceptions import FilterParseError
from .operators import NULL_OPERATORS, PATTERN_OPERATORS, OperatorKind
from .syntax import is_identifier
from .values import TypedValue, coerce
from .whitelist import UNRESTRICTED

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .syntax import ClauseDescriptor
    from .whitelist import FieldWhitelist

logger = logging.getLogger("cqrs_ddd.odata.translator")

PATH_SEPARATOR = "."
PLACEHOLDER_PREFIX = "val"

_SQL_OPERATORS: dict[OperatorKind, str] = {
    OperatorKind.EQ: "=",
    OperatorKind.NE: "!=",
    OperatorKind.GT: ">",
    OperatorKind.GE: ">=",
    OperatorKind.LT: "<",
    OperatorKind.LE: "<=",
    OperatorKind.CONTAINS: "LIKE",
    OperatorKind.STARTSWITH: "LIKE",
    OperatorKind.ENDSWITH: "LIKE",
    OperatorKind.IS_NULL: "IS NULL",
    OperatorKind.IS_NOT_NULL: "IS NOT NULL",
}

_PATTERNS: dict[OperatorKind, str] = {
    OperatorKind.CONTAINS: "%{}%",
    OperatorKind.STARTSWITH: "{}%",
    OperatorKind.ENDSWITH: "%{}",
}


@dataclass(frozen=True)
class PredicateDescriptor:
    """Condition template plus its bound parameters.

    ``field`` and ``operator`` repeat what ``template`` encodes so that
    non-SQL backends can evaluate the predicate without parsing it.
    """

    template: str
    bindings: Mapping[str, TypedValue]
    field: str = ""
    operator: OperatorKind = OperatorKind.EQ

    @property
    def parameters(self) -> dict[str, object]:
        """Bindings unwrapped to plain Python values."""
        return {name: value.value for name, value in self.bindings.items()}


def qualify_field(name: str, root_alias: str) -> str:
    """Prefix a bare field with the root alias; dotted paths pass through."""
    if PATH_SEPARATOR in name:
        return name
    return f"{root_alias}{PATH_SEPARATOR}{name}"


def placeholder(index: int) -> str:
    return f"{PLACEHOLDER_PREFIX}{index}"


class PredicateTranslator:
    """Turns authorized clauses into :class:`PredicateDescriptor` objects."""

    def __init__(
        self,
        whitelist: FieldWhitelist | None = None,
        *,
        root_alias: str = "entity",
        strict: bool = False,
    ) -> None:
        self._whitelist = whitelist or UNRESTRICTED
        self._root_alias = root_alias
        self._strict = strict

    def translate(
        self, clause: ClauseDescriptor, index: int | None = None
    ) -> PredicateDescriptor | None:
        """
        Translate one clause.

        Args:
            clause: Parsed clause.
            index: Placeholder index; defaults to ``clause.position``.

        Returns:
            The predicate, or ``None`` when the field is rejected.

        Raises:
            FilterParseError: In strict mode, for an invalid field name.
            FieldNotAllowedError: In strict mode, for a non-filterable field.
        """
        if not is_identifier(clause.field):
            if self._strict:
                raise FilterParseError(
                    {"$filter": [f"Invalid field name: {clause.field!r}"]}
                )
            logger.debug("Rejecting filter on invalid field name %r", clause.field)
            return None
        if not self._whitelist.allow_filter(clause.field):
            if self._strict:
                self._whitelist.require_filter(clause.field)
            logger.debug("Rejecting filter on non-filterable field %r", clause.field)
            return None

        column = qualify_field(clause.field, self._root_alias)
        sql_op = _SQL_OPERATORS[clause.operator]

        if clause.operator in NULL_OPERATORS:
            return PredicateDescriptor(
                template=f"{column} {sql_op}",
                bindings={},
                field=column,
                operator=clause.operator,
            )

        name = placeholder(clause.position if index is None else index)
        value = coerce(clause.raw_value or "")
        if clause.operator in PATTERN_OPERATORS:
            value = TypedValue.string(
                _PATTERNS[clause.operator].format(value.as_text())
            )
        return PredicateDescriptor(
            template=f"{column} {sql_op} :{name}",
            bindings={name: value},
            field=column,
            operator=clause.operator,
        )

    def translate_all(
        self, clauses: Iterable[ClauseDescriptor]
    ) -> list[PredicateDescriptor]:
        """Translate every clause, dropping rejected ones."""
        out: list[PredicateDescriptor] = []
        for clause in clauses:
            predicate = self.translate(clause)
            if predicate is not None:
                out.append(predicate)
        return out


def translate(
    clause: ClauseDescriptor,
    index: int,
    whitelist: FieldWhitelist | None = None,
    *,
    root_alias: str = "entity",
) -> PredicateDescriptor | None:
    """Translate a single clause with a throwaway translator."""
    return PredicateTranslator(whitelist, root_alias=root_alias).translate(
        clause, index
    )

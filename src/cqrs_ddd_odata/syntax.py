"""
FilterSyntax — ``$filter`` expression -> ordered clause descriptors.

``null`` on the right of ``eq``/``ne`` is a null check whether quoted or
bare, in any case: ``email eq null`` and ``email eq 'NULL'`` both become
:attr:`OperatorKind.IS_NULL`, never an equality bound to a null value.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .exceptions import FilterParseError
from .operators import OperatorKind

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("cqrs_ddd.odata.syntax")

CLAUSE_SEPARATOR = " and "

IDENTIFIER = r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*"
_IDENTIFIER_RE = re.compile(IDENTIFIER)

# Map comparison keywords to OperatorKind, in grammar priority order
_COMPARISONS: dict[str, OperatorKind] = {
    "eq": OperatorKind.EQ,
    "ne": OperatorKind.NE,
    "gt": OperatorKind.GT,
    "ge": OperatorKind.GE,
    "lt": OperatorKind.LT,
    "le": OperatorKind.LE,
}

_FUNCTIONS: dict[str, OperatorKind] = {
    "contains": OperatorKind.CONTAINS,
    "startswith": OperatorKind.STARTSWITH,
    "endswith": OperatorKind.ENDSWITH,
}


def is_identifier(name: str) -> bool:
    """Return True if ``name`` is a plain or dotted identifier path."""
    return _IDENTIFIER_RE.fullmatch(name) is not None


@dataclass(frozen=True)
class ClauseDescriptor:
    """One conjunctive unit of a filter expression."""

    field: str
    operator: OperatorKind
    raw_value: str | None
    position: int = 0


@dataclass(frozen=True)
class GrammarRule:
    """A clause pattern and the builder that turns its match into a descriptor."""

    pattern: re.Pattern[str]
    build: Callable[[re.Match[str], int], ClauseDescriptor]


def _null_check(kind: OperatorKind) -> Callable[[re.Match[str], int], ClauseDescriptor]:
    def build(match: re.Match[str], position: int) -> ClauseDescriptor:
        return ClauseDescriptor(match["field"], kind, None, position)

    return build


def _with_value(
    kind: OperatorKind,
) -> Callable[[re.Match[str], int], ClauseDescriptor]:
    def build(match: re.Match[str], position: int) -> ClauseDescriptor:
        return ClauseDescriptor(match["field"], kind, match["value"].strip(), position)

    return build


def _build_grammar() -> tuple[GrammarRule, ...]:
    rules: list[GrammarRule] = [
        # Null checks must win over the generic eq/ne rules
        GrammarRule(
            re.compile(
                rf"(?P<field>{IDENTIFIER})\s+eq\s+(?P<q>['\"]?)null(?P=q)",
                re.IGNORECASE,
            ),
            _null_check(OperatorKind.IS_NULL),
        ),
        GrammarRule(
            re.compile(
                rf"(?P<field>{IDENTIFIER})\s+ne\s+(?P<q>['\"]?)null(?P=q)",
                re.IGNORECASE,
            ),
            _null_check(OperatorKind.IS_NOT_NULL),
        ),
    ]
    rules.extend(
        GrammarRule(
            re.compile(rf"(?P<field>{IDENTIFIER})\s+{keyword}\s+(?P<value>.+)"),
            _with_value(kind),
        )
        for keyword, kind in _COMPARISONS.items()
    )
    rules.extend(
        GrammarRule(
            re.compile(
                rf"{name}\(\s*(?P<field>{IDENTIFIER})\s*,\s*(?P<value>.+?)\s*\)"
            ),
            _with_value(kind),
        )
        for name, kind in _FUNCTIONS.items()
    )
    return tuple(rules)


DEFAULT_GRAMMAR: tuple[GrammarRule, ...] = _build_grammar()


class FilterSyntax:
    """Base for filter syntax parsers."""

    def parse_filter(self, raw: str | None) -> list[ClauseDescriptor]:
        """Parse raw input to an ordered list of clause descriptors."""
        raise NotImplementedError


class ODataFilterSyntax(FilterSyntax):
    """
    Parse ``field op value and fn(field,value) and ...``.

    Only conjunction is supported. Each fragment is matched against the
    grammar rules top to bottom; the first match wins. Fragments matching
    no rule are dropped, or raise :class:`FilterParseError` when ``strict``.
    """

    def __init__(
        self,
        *,
        grammar: tuple[GrammarRule, ...] = DEFAULT_GRAMMAR,
        strict: bool = False,
    ) -> None:
        self._grammar = grammar
        self._strict = strict

    def parse_filter(self, raw: str | None) -> list[ClauseDescriptor]:
        if not raw or not isinstance(raw, str):
            return []
        clauses: list[ClauseDescriptor] = []
        for position, fragment in enumerate(raw.split(CLAUSE_SEPARATOR)):
            clause = self.parse_clause(fragment, position)
            if clause is not None:
                clauses.append(clause)
        return clauses

    def parse_clause(self, fragment: str, position: int = 0) -> ClauseDescriptor | None:
        """Match one fragment against the grammar; ``None`` if unrecognised."""
        text = fragment.strip()
        for rule in self._grammar:
            match = rule.pattern.fullmatch(text)
            if match is not None:
                return rule.build(match, position)
        if self._strict:
            raise FilterParseError(
                {"$filter": [f"Unrecognised filter clause: {text!r}"]}
            )
        logger.debug("Dropping unrecognised filter clause %r", text)
        return None


def parse_filter(expr: str | None) -> list[ClauseDescriptor]:
    """Parse a ``$filter`` expression with the default, permissive grammar."""
    return ODataFilterSyntax().parse_filter(expr)

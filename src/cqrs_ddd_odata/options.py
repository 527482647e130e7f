"""Parsers for ``$orderby``, ``$expand``, ``$top`` and ``$skip``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NamedTuple

from .exceptions import FilterParseError
from .operators import SortDirection
from .syntax import is_identifier
from .whitelist import UNRESTRICTED

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .settings import ODataSettings
    from .whitelist import FieldWhitelist

logger = logging.getLogger("cqrs_ddd.odata.options")


class SortSpec(NamedTuple):
    field: str
    direction: SortDirection


class PageParams(NamedTuple):
    """Normalised pagination bounds; ``limit == 0`` means unbounded."""

    skip: int = 0
    limit: int = 0


def parse_orderby(
    raw: str | None,
    whitelist: FieldWhitelist | None = None,
    *,
    strict: bool = False,
) -> list[SortSpec]:
    """
    Parse ``"name ASC, age DESC"`` into ordered :class:`SortSpec` entries.

    Every entry needs an explicit direction. Entries without one, with an
    unknown direction, with extra tokens or with an invalid field name are
    dropped. Non-sortable fields are dropped too.
    """
    if not raw or not isinstance(raw, str):
        return []
    whitelist = whitelist or UNRESTRICTED
    out: list[SortSpec] = []
    for part in raw.split(","):
        tokens = part.split()
        if not tokens:
            continue
        parsed = _parse_sort_item(tokens)
        if parsed is None:
            if strict:
                message = f"Expected '<field> ASC|DESC', got: {part.strip()!r}"
                raise FilterParseError({"$orderby": [message]})
            logger.debug("Dropping malformed sort entry %r", part.strip())
            continue
        if not whitelist.allow_sort(parsed.field):
            if strict:
                whitelist.require_sort(parsed.field)
            logger.debug("Dropping sort on non-sortable field %r", parsed.field)
            continue
        out.append(parsed)
    return out


def _parse_sort_item(tokens: list[str]) -> SortSpec | None:
    if len(tokens) != 2:
        return None
    field, direction = tokens
    if not is_identifier(field):
        return None
    try:
        return SortSpec(field, SortDirection(direction.upper()))
    except ValueError:
        return None


def parse_expand(
    raw: str | None,
    whitelist: FieldWhitelist | None = None,
    *,
    strict: bool = False,
) -> list[str]:
    """
    Parse ``"profile, posts"`` into relation names.

    Order of first appearance is kept; duplicates collapse to one entry.
    """
    if not raw or not isinstance(raw, str):
        return []
    whitelist = whitelist or UNRESTRICTED
    out: list[str] = []
    for part in raw.split(","):
        relation = part.strip()
        if not relation or relation in out:
            continue
        if not is_identifier(relation) or "." in relation:
            if strict:
                raise FilterParseError(
                    {"$expand": [f"Invalid relation name: {relation!r}"]}
                )
            logger.debug("Dropping invalid expansion %r", relation)
            continue
        if not whitelist.allow_expand(relation):
            if strict:
                whitelist.require_expand(relation)
            logger.debug("Dropping expansion of non-expandable relation %r", relation)
            continue
        out.append(relation)
    return out


def safe_int(value: Any) -> int:
    """Parse a non-negative integer; anything else becomes 0.

    The whole string must be an integer: ``"10abc"`` and ``"1.5"`` are
    rejected rather than truncated to a numeric prefix.
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return 0
    return max(0, number)


class PaginationParser:
    """Parse ``$skip`` / ``$top`` from query options."""

    def parse(
        self,
        options: Mapping[str, Any],
        *,
        skip_key: str = "$skip",
        top_key: str = "$top",
        max_top: int | None = None,
    ) -> PageParams:
        skip = safe_int(options.get(skip_key))
        limit = safe_int(options.get(top_key))
        if max_top is not None and max_top > 0 and (limit == 0 or limit > max_top):
            limit = max_top
        return PageParams(skip=skip, limit=limit)

    def from_settings(
        self, options: Mapping[str, Any], settings: ODataSettings
    ) -> PageParams:
        return self.parse(
            options,
            skip_key=settings.skip_key,
            top_key=settings.top_key,
            max_top=settings.max_top,
        )

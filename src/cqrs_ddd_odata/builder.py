"""
ODataQueryBuilder — raw ``$`` options -> capability calls -> rows/envelope.

Usage::

    builder = (
        ODataQueryBuilder.for_(capability, {"$filter": "age gt 18", "$top": "10"})
        .allowed_filters(["age", "name"])
        .allowed_sorts(["name"])
    )
    envelope = await builder.to_response()

Stages run in a fixed order, once per builder: filters, sorts, expansions,
pagination, execution.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .options import PageParams, PaginationParser, parse_expand, parse_orderby
from .response import build_envelope
from .settings import DEFAULT_SETTINGS
from .syntax import ODataFilterSyntax
from .translator import PredicateTranslator, qualify_field
from .whitelist import FieldWhitelist

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .options import SortSpec
    from .ports import IQueryCapability
    from .response import ResultEnvelope
    from .settings import ODataSettings
    from .translator import PredicateDescriptor

logger = logging.getLogger("cqrs_ddd.odata.builder")


class ODataQueryBuilder:
    """Applies parsed query options to an :class:`IQueryCapability`."""

    def __init__(
        self,
        capability: IQueryCapability,
        options: Mapping[str, Any] | None = None,
        *,
        whitelist: FieldWhitelist | None = None,
        settings: ODataSettings | None = None,
    ) -> None:
        self._capability = capability
        self._options: Mapping[str, Any] = options or {}
        self._whitelist = whitelist or FieldWhitelist()
        self._settings = settings or DEFAULT_SETTINGS
        self._predicates: list[PredicateDescriptor] = []
        self._sorts: list[SortSpec] = []
        self._expansions: list[str] = []
        self._page: PageParams | None = None

    @classmethod
    def for_(
        cls,
        capability: IQueryCapability,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> ODataQueryBuilder:
        return cls(capability, options, **kwargs)

    # -- allow-lists ----------------------------------------------------------

    def allowed_filters(self, fields: Iterable[str]) -> ODataQueryBuilder:
        self._whitelist = self._whitelist.replace(filterable_fields=fields)
        return self

    def allowed_sorts(self, fields: Iterable[str]) -> ODataQueryBuilder:
        self._whitelist = self._whitelist.replace(sortable_fields=fields)
        return self

    def allowed_expands(self, fields: Iterable[str]) -> ODataQueryBuilder:
        self._whitelist = self._whitelist.replace(expandable_fields=fields)
        return self

    # -- introspection --------------------------------------------------------

    @property
    def predicates(self) -> list[PredicateDescriptor]:
        return list(self._predicates)

    @property
    def sorts(self) -> list[SortSpec]:
        return list(self._sorts)

    @property
    def expansions(self) -> list[str]:
        return list(self._expansions)

    @property
    def capability(self) -> IQueryCapability:
        return self._capability

    # -- stages ---------------------------------------------------------------

    def apply(self) -> PageParams:
        """Push filters, sorts, expansions and bounds into the capability.

        Idempotent: a second call returns the page computed by the first.
        """
        if self._page is not None:
            return self._page
        self._apply_filters()
        self._apply_sorts()
        self._apply_expansions()
        self._page = self._apply_pagination()
        return self._page

    def _apply_filters(self) -> None:
        settings = self._settings
        syntax = ODataFilterSyntax(strict=settings.strict)
        translator = PredicateTranslator(
            self._whitelist, root_alias=settings.root_alias, strict=settings.strict
        )
        clauses = syntax.parse_filter(self._options.get(settings.filter_key))
        for predicate in translator.translate_all(clauses):
            self._capability.add_predicate(predicate)
            self._predicates.append(predicate)

    def _apply_sorts(self) -> None:
        settings = self._settings
        self._sorts = parse_orderby(
            self._options.get(settings.orderby_key),
            self._whitelist,
            strict=settings.strict,
        )
        for sort in self._sorts:
            self._capability.add_ordering(
                qualify_field(sort.field, settings.root_alias), sort.direction
            )

    def _apply_expansions(self) -> None:
        settings = self._settings
        self._expansions = parse_expand(
            self._options.get(settings.expand_key),
            self._whitelist,
            strict=settings.strict,
        )
        for relation in self._expansions:
            self._capability.add_expansion(relation)

    def _apply_pagination(self) -> PageParams:
        page = PaginationParser().from_settings(self._options, self._settings)
        if page.limit > 0:
            self._capability.set_limit(page.limit)
        if page.skip > 0:
            self._capability.set_offset(page.skip)
        return page

    # -- execution ------------------------------------------------------------

    async def execute(self) -> tuple[list[Any], int]:
        """Apply all stages and return ``(rows, total)``.

        ``total`` counts the filtered set before pagination. Failures from
        the capability propagate unchanged.
        """
        page = self.apply()
        logger.debug(
            "Executing query: %d predicate(s), %d sort(s), %d expansion(s), "
            "skip=%d limit=%d",
            len(self._predicates),
            len(self._sorts),
            len(self._expansions),
            page.skip,
            page.limit,
        )
        try:
            rows, total = await self._capability.execute_and_count()
        except Exception:
            logger.exception("Query execution failed")
            raise
        return list(rows), total

    async def to_response(self) -> ResultEnvelope[Any]:
        """Execute and wrap the rows in a :class:`ResultEnvelope`."""
        rows, total = await self.execute()
        page = self.apply()
        return build_envelope(rows, total, page.skip, page.limit)


async def execute(
    options: Mapping[str, Any],
    whitelist: FieldWhitelist | None,
    capability: IQueryCapability,
    *,
    settings: ODataSettings | None = None,
) -> tuple[list[Any], int]:
    """Run ``options`` against ``capability`` and return ``(rows, total)``."""
    builder = ODataQueryBuilder(
        capability, options, whitelist=whitelist, settings=settings
    )
    return await builder.execute()

"""QueryStringBuilder — raw options + page bounds -> query string (page links)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from .options import safe_int
from .settings import DEFAULT_SETTINGS

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .response import ResultEnvelope
    from .settings import ODataSettings


class QueryStringBuilder:
    """Build ``$``-option query strings, e.g. for first/prev/next/last links."""

    def __init__(self, settings: ODataSettings | None = None) -> None:
        self._settings = settings or DEFAULT_SETTINGS

    def build(
        self,
        options: Mapping[str, Any],
        *,
        skip: int | None = None,
        top: int | None = None,
    ) -> str:
        """Produce a query string keeping filter/sort/expand from ``options``."""
        s = self._settings
        params: dict[str, str | int] = {}
        for key in (s.filter_key, s.orderby_key, s.expand_key):
            value = options.get(key)
            if value:
                params[key] = value
        if top is None:
            top = safe_int(options.get(s.top_key))
        if skip is None:
            skip = safe_int(options.get(s.skip_key))
        if top:
            params[s.top_key] = top
        if skip:
            params[s.skip_key] = skip
        return urlencode(params, safe="$") if params else ""

    def page_links(
        self,
        options: Mapping[str, Any],
        envelope: ResultEnvelope[Any],
        base_url: str = "",
    ) -> dict[str, str | None]:
        """
        Return ``first``, ``prev``, ``next`` and ``last`` links.

        Links are ``None`` when there is no such page, and all of them are
        ``None`` for an empty unbounded result (``per_page == 0``).
        """
        per_page = envelope.per_page
        links: dict[str, str | None] = {
            "first": None,
            "prev": None,
            "next": None,
            "last": None,
        }
        if per_page <= 0:
            return links

        def link(page: int) -> str:
            query = self.build(options, skip=(page - 1) * per_page, top=per_page)
            return f"{base_url}?{query}" if query else base_url

        last_page = max(envelope.last_page, 1)
        links["first"] = link(1)
        links["last"] = link(last_page)
        if envelope.current_page > 1:
            links["prev"] = link(min(envelope.current_page - 1, last_page))
        if envelope.current_page < last_page:
            links["next"] = link(envelope.current_page + 1)
        return links

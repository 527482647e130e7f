"""
Settings for parsing OData-style query options.

``ODataSettings`` is an immutable bag of keyword options handed to the
builder. It controls the option key names read from the raw mapping, the
root alias used to qualify bare field names, the ``$top`` ceiling and
whether rejected input is dropped silently or raised.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class ODataSettings:
    """
    Immutable configuration for :class:`~cqrs_ddd_odata.builder.ODataQueryBuilder`.

    Attributes:
        filter_key: Option name holding the filter expression.
        orderby_key: Option name holding the sort list.
        expand_key: Option name holding the relation list.
        top_key: Option name holding the page size.
        skip_key: Option name holding the offset.
        root_alias: Alias of the queried entity; bare field names are
            qualified as ``<root_alias>.<field>``.
        max_top: Upper bound for ``$top`` (``None`` = no bound).
        strict: Raise on malformed or unauthorized input instead of
            dropping it.
    """

    filter_key: str = "$filter"
    orderby_key: str = "$orderby"
    expand_key: str = "$expand"
    top_key: str = "$top"
    skip_key: str = "$skip"
    root_alias: str = "entity"
    max_top: int | None = None
    strict: bool = False

    def with_overrides(self, **changes: Any) -> ODataSettings:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


DEFAULT_SETTINGS = ODataSettings()

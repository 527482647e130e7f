"""OData-style query options — filter, sort, expand, pagination; result envelope."""

from __future__ import annotations

from .builder import ODataQueryBuilder, execute
from .exceptions import (
    FieldNotAllowedError,
    FilterParseError,
    ODataError,
    ValidationError,
)
from .operators import OperatorKind, SortDirection
from .options import (
    PageParams,
    PaginationParser,
    SortSpec,
    parse_expand,
    parse_orderby,
)
from .ports import IQueryCapability
from .query_string import QueryStringBuilder
from .response import ResultEnvelope, build_envelope
from .settings import ODataSettings
from .syntax import ClauseDescriptor, FilterSyntax, ODataFilterSyntax, parse_filter
from .translator import PredicateDescriptor, PredicateTranslator, qualify_field
from .values import TypedValue, ValueKind, coerce
from .whitelist import FieldWhitelist, is_allowed

__all__ = [
    "ClauseDescriptor",
    "FieldNotAllowedError",
    "FieldWhitelist",
    "FilterParseError",
    "FilterSyntax",
    "IQueryCapability",
    "ODataError",
    "ODataFilterSyntax",
    "ODataQueryBuilder",
    "ODataSettings",
    "OperatorKind",
    "PageParams",
    "PaginationParser",
    "PredicateDescriptor",
    "PredicateTranslator",
    "QueryStringBuilder",
    "ResultEnvelope",
    "SortDirection",
    "SortSpec",
    "TypedValue",
    "ValidationError",
    "ValueKind",
    "build_envelope",
    "coerce",
    "execute",
    "is_allowed",
    "parse_expand",
    "parse_filter",
    "parse_orderby",
    "qualify_field",
]

"""Exceptions raised by the OData query layer."""

from __future__ import annotations


class ODataError(Exception):
    """Root exception for the cqrs-ddd-odata package."""


class ValidationError(ODataError):
    """Raised when query options are rejected.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


class FilterParseError(ValidationError):
    """Raised in strict mode when a filter or sort fragment is malformed."""


class FieldNotAllowedError(ValidationError):
    """Raised in strict mode when a field is outside its allow-list."""

"""FieldWhitelist — per-resource filterable/sortable/expandable fields."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .exceptions import FieldNotAllowedError

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable


def is_allowed(field: str, allow_list: Collection[str] | None) -> bool:
    """Empty or missing allow-list means unrestricted."""
    if not allow_list:
        return True
    return field in allow_list


class FieldWhitelist:
    """Per-resource allowed fields, one independent list per operation."""

    def __init__(
        self,
        *,
        filterable_fields: Iterable[str] | None = None,
        sortable_fields: Iterable[str] | None = None,
        expandable_fields: Iterable[str] | None = None,
    ) -> None:
        self.filterable_fields: frozenset[str] = frozenset(filterable_fields or ())
        self.sortable_fields: frozenset[str] = frozenset(sortable_fields or ())
        self.expandable_fields: frozenset[str] = frozenset(expandable_fields or ())

    def allow_filter(self, field: str) -> bool:
        return is_allowed(field, self.filterable_fields)

    def allow_sort(self, field: str) -> bool:
        return is_allowed(field, self.sortable_fields)

    def allow_expand(self, field: str) -> bool:
        return is_allowed(field, self.expandable_fields)

    def replace(
        self,
        *,
        filterable_fields: Iterable[str] | None = None,
        sortable_fields: Iterable[str] | None = None,
        expandable_fields: Iterable[str] | None = None,
    ) -> FieldWhitelist:
        """Return a copy with the given lists replaced."""
        return FieldWhitelist(
            filterable_fields=(
                self.filterable_fields if filterable_fields is None else filterable_fields
            ),
            sortable_fields=(
                self.sortable_fields if sortable_fields is None else sortable_fields
            ),
            expandable_fields=(
                self.expandable_fields if expandable_fields is None else expandable_fields
            ),
        )

    def require_filter(self, field: str) -> None:
        """Raise FieldNotAllowedError if field is not filterable."""
        if not self.allow_filter(field):
            raise FieldNotAllowedError({field: [f"Field {field!r} is not filterable"]})

    def require_sort(self, field: str) -> None:
        if not self.allow_sort(field):
            raise FieldNotAllowedError({field: [f"Field {field!r} is not sortable"]})

    def require_expand(self, field: str) -> None:
        if not self.allow_expand(field):
            raise FieldNotAllowedError({field: [f"Field {field!r} is not expandable"]})


UNRESTRICTED = FieldWhitelist()

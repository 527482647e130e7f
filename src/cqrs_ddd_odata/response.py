"""ResultEnvelope — paginated response shape."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import TypeVar

TRow = TypeVar("TRow", default=Any)


class ResultEnvelope(BaseModel, Generic[TRow]):
    """Page of rows plus pagination metadata.

    Serialised keys are ``data, total, per_page, current_page, last_page,
    from, to``. ``from`` is a keyword in Python, so the attribute is
    ``from_`` and the alias carries the wire name.
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, arbitrary_types_allowed=True
    )

    data: list[TRow] = Field(default_factory=list)
    total: int = 0
    per_page: int = 0
    current_page: int = 1
    last_page: int = 1
    from_: int = Field(default=0, alias="from")
    to: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the wire key names."""
        return self.model_dump(by_alias=True)


def build_envelope(
    rows: Sequence[TRow], total: int, skip: int, limit: int
) -> ResultEnvelope[TRow]:
    """
    Compute pagination metadata for one page of results.

    ``skip`` and ``limit`` are non-negative; ``limit == 0`` means the page
    is unbounded and therefore the only page.
    """
    if limit > 0:
        per_page = limit
        current_page = skip // limit + 1
        last_page = -(-total // limit)
    else:
        per_page = total
        current_page = 1
        last_page = 1
    empty = total == 0
    return ResultEnvelope(
        data=list(rows),
        total=total,
        per_page=per_page,
        current_page=current_page,
        last_page=last_page,
        from_=0 if empty else skip + 1,
        to=0 if empty else skip + len(rows),
    )

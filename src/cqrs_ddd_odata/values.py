"""Value coercion — raw filter literal -> typed scalar."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

_NUMBER_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
_INTEGER_RE = re.compile(r"-?\d+")


class ValueKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass(frozen=True)
class TypedValue:
    """A coerced literal tagged with its kind."""

    kind: ValueKind
    value: Any = None

    @classmethod
    def string(cls, value: str) -> TypedValue:
        return cls(ValueKind.STRING, value)

    @classmethod
    def number(cls, value: int | float) -> TypedValue:
        return cls(ValueKind.NUMBER, value)

    @classmethod
    def boolean(cls, value: bool) -> TypedValue:
        return cls(ValueKind.BOOLEAN, value)

    @classmethod
    def null(cls) -> TypedValue:
        return cls(ValueKind.NULL, None)

    def as_text(self) -> str:
        """Render the value for embedding in a LIKE pattern."""
        if self.kind is ValueKind.NULL:
            return "null"
        if self.kind is ValueKind.BOOLEAN:
            return "true" if self.value else "false"
        return str(self.value)


def coerce(raw: str) -> TypedValue:
    """
    Convert a raw literal into a :class:`TypedValue`.

    Rules, first match wins:

    1. wrapped in matching ``"`` or ``'`` -> string, one level stripped
    2. ``true`` / ``false`` -> boolean
    3. ``null`` -> null
    4. full numeric literal -> number (``int`` if integral text)
    5. anything else -> string, verbatim

    Never raises.
    """
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ("'", '"'):
        return TypedValue.string(raw[1:-1])
    if raw == "true":
        return TypedValue.boolean(True)
    if raw == "false":
        return TypedValue.boolean(False)
    if raw == "null":
        return TypedValue.null()
    if _NUMBER_RE.fullmatch(raw):
        if _INTEGER_RE.fullmatch(raw):
            return TypedValue.number(int(raw))
        return TypedValue.number(float(raw))
    return TypedValue.string(raw)

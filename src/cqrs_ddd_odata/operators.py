from enum import Enum


class OperatorKind(str, Enum):
    """Operators recognised in a ``$filter`` clause."""

    # Comparison
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"

    # String patterns
    CONTAINS = "contains"
    STARTSWITH = "startswith"
    ENDSWITH = "endswith"

    # Null checks
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


COMPARISON_OPERATORS: frozenset[OperatorKind] = frozenset(
    {
        OperatorKind.EQ,
        OperatorKind.NE,
        OperatorKind.GT,
        OperatorKind.GE,
        OperatorKind.LT,
        OperatorKind.LE,
    }
)

PATTERN_OPERATORS: frozenset[OperatorKind] = frozenset(
    {OperatorKind.CONTAINS, OperatorKind.STARTSWITH, OperatorKind.ENDSWITH}
)

NULL_OPERATORS: frozenset[OperatorKind] = frozenset(
    {OperatorKind.IS_NULL, OperatorKind.IS_NOT_NULL}
)

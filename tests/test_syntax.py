"""Tests for the $filter grammar."""

from __future__ import annotations

import pytest

from cqrs_ddd_odata.exceptions import FilterParseError
from cqrs_ddd_odata.operators import OperatorKind
from cqrs_ddd_odata.syntax import (
    ClauseDescriptor,
    ODataFilterSyntax,
    is_identifier,
    parse_filter,
)


class TestComparisons:
    @pytest.mark.parametrize(
        ("keyword", "kind"),
        [
            ("eq", OperatorKind.EQ),
            ("ne", OperatorKind.NE),
            ("gt", OperatorKind.GT),
            ("ge", OperatorKind.GE),
            ("lt", OperatorKind.LT),
            ("le", OperatorKind.LE),
        ],
    )
    def test_each_operator(self, keyword: str, kind: OperatorKind) -> None:
        result = parse_filter(f"age {keyword} 18")
        assert result == [ClauseDescriptor("age", kind, "18", 0)]

    def test_value_keeps_quotes_and_spaces(self) -> None:
        (clause,) = parse_filter("name eq 'John Doe'")
        assert clause.field == "name"
        assert clause.raw_value == "'John Doe'"

    def test_operator_word_inside_value_is_not_split(self) -> None:
        (clause,) = parse_filter("title ne 'x eq y'")
        assert clause.operator is OperatorKind.NE
        assert clause.field == "title"
        assert clause.raw_value == "'x eq y'"

    def test_qualified_field(self) -> None:
        (clause,) = parse_filter("profile.bio eq 'x'")
        assert clause.field == "profile.bio"

    def test_surrounding_whitespace_trimmed(self) -> None:
        (clause,) = parse_filter("   age   gt   5   ")
        assert clause.field == "age"
        assert clause.raw_value == "5"


class TestNullChecks:
    @pytest.mark.parametrize("literal", ["'null'", '"null"', "null", "'NULL'"])
    def test_eq_null_is_null_check(self, literal: str) -> None:
        (clause,) = parse_filter(f"deleted_at eq {literal}")
        assert clause.operator is OperatorKind.IS_NULL
        assert clause.raw_value is None

    @pytest.mark.parametrize("literal", ["'null'", "null", "Null"])
    def test_ne_null_is_not_null_check(self, literal: str) -> None:
        (clause,) = parse_filter(f"email ne {literal}")
        assert clause.operator is OperatorKind.IS_NOT_NULL
        assert clause.raw_value is None

    def test_null_prefix_is_an_ordinary_value(self) -> None:
        (clause,) = parse_filter("status eq 'nullable'")
        assert clause.operator is OperatorKind.EQ
        assert clause.raw_value == "'nullable'"


class TestFunctions:
    @pytest.mark.parametrize(
        ("name", "kind"),
        [
            ("contains", OperatorKind.CONTAINS),
            ("startswith", OperatorKind.STARTSWITH),
            ("endswith", OperatorKind.ENDSWITH),
        ],
    )
    def test_each_function(self, name: str, kind: OperatorKind) -> None:
        (clause,) = parse_filter(f"{name}(name,'John')")
        assert clause == ClauseDescriptor("name", kind, "'John'", 0)

    def test_spaces_inside_call(self) -> None:
        (clause,) = parse_filter("contains( name , 'Jo' )")
        assert clause.field == "name"
        assert clause.raw_value == "'Jo'"

    def test_parenthesis_inside_value(self) -> None:
        (clause,) = parse_filter("contains(name,'a)b')")
        assert clause.raw_value == "'a)b'"


class TestConjunction:
    def test_positions_follow_split_order(self) -> None:
        result = parse_filter("a eq 1 and b gt 2 and contains(c,'x')")
        assert [c.field for c in result] == ["a", "b", "c"]
        assert [c.position for c in result] == [0, 1, 2]

    def test_dropped_fragment_still_consumes_a_position(self) -> None:
        result = parse_filter("a eq 1 and garbage and b eq 2")
        assert [(c.field, c.position) for c in result] == [("a", 0), ("b", 2)]

    def test_empty_input(self) -> None:
        assert parse_filter("") == []
        assert parse_filter(None) == []


class TestMalformed:
    @pytest.mark.parametrize(
        "fragment",
        [
            "name",
            "name eq",
            "name like 'x'",
            "1name eq 2",
            "na;me eq 1",
            "name) eq 1 or (1",
            "contains(name)",
        ],
    )
    def test_dropped_silently(self, fragment: str) -> None:
        assert parse_filter(fragment) == []

    def test_strict_mode_raises(self) -> None:
        syntax = ODataFilterSyntax(strict=True)
        with pytest.raises(FilterParseError) as exc_info:
            syntax.parse_filter("name eq 1 and bogus")
        assert "$filter" in exc_info.value.errors


class TestIdentifier:
    @pytest.mark.parametrize("name", ["name", "_x", "a1", "profile.bio", "a.b.c"])
    def test_valid(self, name: str) -> None:
        assert is_identifier(name)

    @pytest.mark.parametrize("name", ["", "1a", "a.", ".a", "a b", "a;--", "a/b"])
    def test_invalid(self, name: str) -> None:
        assert not is_identifier(name)

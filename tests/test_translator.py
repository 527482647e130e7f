"""Tests for PredicateTranslator."""

from __future__ import annotations

import re

import pytest

from cqrs_ddd_odata.exceptions import FieldNotAllowedError, FilterParseError
from cqrs_ddd_odata.operators import OperatorKind
from cqrs_ddd_odata.syntax import ClauseDescriptor, parse_filter
from cqrs_ddd_odata.translator import (
    PredicateTranslator,
    qualify_field,
    translate,
)
from cqrs_ddd_odata.values import TypedValue
from cqrs_ddd_odata.whitelist import FieldWhitelist

_PLACEHOLDER_RE = re.compile(r":(\w+)")


class TestTemplates:
    def test_eq(self) -> None:
        clause = ClauseDescriptor("name", OperatorKind.EQ, "'John'", 0)
        predicate = translate(clause, 0)
        assert predicate is not None
        assert predicate.template == "entity.name = :val0"
        assert predicate.bindings == {"val0": TypedValue.string("John")}
        assert predicate.parameters == {"val0": "John"}

    @pytest.mark.parametrize(
        ("kind", "sql"),
        [
            (OperatorKind.NE, "!="),
            (OperatorKind.GT, ">"),
            (OperatorKind.GE, ">="),
            (OperatorKind.LT, "<"),
            (OperatorKind.LE, "<="),
        ],
    )
    def test_comparisons(self, kind: OperatorKind, sql: str) -> None:
        predicate = translate(ClauseDescriptor("age", kind, "18", 3), 3)
        assert predicate is not None
        assert predicate.template == f"entity.age {sql} :val3"
        assert predicate.bindings == {"val3": TypedValue.number(18)}

    @pytest.mark.parametrize(
        ("kind", "pattern"),
        [
            (OperatorKind.CONTAINS, "%John%"),
            (OperatorKind.STARTSWITH, "John%"),
            (OperatorKind.ENDSWITH, "%John"),
        ],
    )
    def test_patterns(self, kind: OperatorKind, pattern: str) -> None:
        predicate = translate(ClauseDescriptor("name", kind, "'John'", 0), 0)
        assert predicate is not None
        assert predicate.template == "entity.name LIKE :val0"
        assert predicate.bindings == {"val0": TypedValue.string(pattern)}

    def test_pattern_of_non_string_literal(self) -> None:
        clause = ClauseDescriptor("code", OperatorKind.CONTAINS, "42", 0)
        predicate = translate(clause, 0)
        assert predicate is not None
        assert predicate.parameters == {"val0": "%42%"}

    def test_null_checks_have_no_bindings(self) -> None:
        is_null = translate(ClauseDescriptor("deleted_at", OperatorKind.IS_NULL, None), 0)
        not_null = translate(
            ClauseDescriptor("deleted_at", OperatorKind.IS_NOT_NULL, None), 1
        )
        assert is_null is not None and not_null is not None
        assert is_null.template == "entity.deleted_at IS NULL"
        assert is_null.bindings == {}
        assert not_null.template == "entity.deleted_at IS NOT NULL"
        assert not_null.bindings == {}

    def test_eq_quoted_null_never_binds_string_null(self) -> None:
        (clause,) = parse_filter("name eq 'null'")
        predicate = translate(clause, 0)
        assert predicate is not None
        assert predicate.operator is OperatorKind.IS_NULL
        assert predicate.template == "entity.name IS NULL"
        assert "null" not in [v.value for v in predicate.bindings.values()]


class TestQualification:
    def test_bare_field_gets_root_alias(self) -> None:
        assert qualify_field("name", "entity") == "entity.name"

    def test_qualified_field_passes_through(self) -> None:
        assert qualify_field("profile.bio", "entity") == "profile.bio"

    def test_custom_root_alias(self) -> None:
        translator = PredicateTranslator(root_alias="u")
        predicate = translator.translate(ClauseDescriptor("name", OperatorKind.EQ, "1"))
        assert predicate is not None
        assert predicate.template == "u.name = :val0"
        assert predicate.field == "u.name"


class TestAuthorization:
    def test_unauthorized_field_is_rejected(self) -> None:
        translator = PredicateTranslator(FieldWhitelist(filterable_fields=["name"]))
        clause = ClauseDescriptor("password", OperatorKind.EQ, "'x'")
        assert translator.translate(clause) is None

    def test_empty_whitelist_behaves_like_none(self) -> None:
        clause = ClauseDescriptor("anything", OperatorKind.EQ, "1")
        with_empty = PredicateTranslator(FieldWhitelist()).translate(clause)
        without = PredicateTranslator().translate(clause)
        assert with_empty == without

    def test_invalid_field_name_is_rejected(self) -> None:
        clause = ClauseDescriptor("name; DROP TABLE users", OperatorKind.EQ, "1")
        assert PredicateTranslator().translate(clause) is None

    def test_strict_mode_raises(self) -> None:
        translator = PredicateTranslator(
            FieldWhitelist(filterable_fields=["name"]), strict=True
        )
        with pytest.raises(FieldNotAllowedError):
            translator.translate(ClauseDescriptor("age", OperatorKind.EQ, "1"))
        with pytest.raises(FilterParseError):
            translator.translate(ClauseDescriptor("a b", OperatorKind.EQ, "1"))


class TestInjectionSafety:
    @pytest.mark.parametrize(
        "literal",
        [
            "'x'' OR 1=1 --'",
            "'; DROP TABLE users; --'",
            "\"Robert'); DROP TABLE students;--\"",
            "1;DELETE FROM users",
        ],
    )
    def test_value_only_travels_as_binding(self, literal: str) -> None:
        for kind in (OperatorKind.EQ, OperatorKind.CONTAINS):
            predicate = translate(ClauseDescriptor("name", kind, literal), 0)
            assert predicate is not None
            assert predicate.template == (
                "entity.name = :val0"
                if kind is OperatorKind.EQ
                else "entity.name LIKE :val0"
            )
            bound = predicate.parameters["val0"]
            assert isinstance(bound, str)
            assert bound.strip("%") in literal


class TestPlaceholders:
    def test_unique_per_clause(self) -> None:
        clauses = parse_filter(
            "a eq 1 and b eq 2 and c eq 3 and contains(d,'x') and e eq 'null'"
        )
        predicates = PredicateTranslator().translate_all(clauses)
        names: list[str] = []
        for predicate in predicates:
            in_template = _PLACEHOLDER_RE.findall(predicate.template)
            assert sorted(in_template) == sorted(predicate.bindings)
            names.extend(in_template)
        assert names == ["val0", "val1", "val2", "val3"]
        assert len(set(names)) == len(names)

    def test_index_comes_from_clause_position(self) -> None:
        clauses = parse_filter("junk and a eq 1 and junk and b eq 2")
        predicates = PredicateTranslator().translate_all(clauses)
        assert [p.template for p in predicates] == [
            "entity.a = :val1",
            "entity.b = :val3",
        ]

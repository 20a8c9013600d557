"""Tests for the value model and variable sets."""

import pytest

from infixeval import UNDEFINED, ChainedVariableSet, StaticVariableSet, ValueTypeError, VariableSet
from infixeval.values import (
    ValueKind,
    classify_literal,
    kind_of,
    to_boolean,
    to_number,
    to_text,
    values_equal,
)
from infixeval.variables import as_variable_set


# =============================================================================
# Values
# =============================================================================


class TestClassifyLiteral:
    """Tests for literal conversion."""

    def test_numbers(self):
        assert classify_literal("42") == 42.0
        assert classify_literal("3.5e2") == 350.0
        assert classify_literal(".5") == 0.5

    def test_quoted_text(self):
        assert classify_literal("'abc'") == "abc"
        assert classify_literal('"a\\"b"') == 'a"b'
        assert classify_literal("'line\\nbreak'") == "line\nbreak"

    def test_other_text_unchanged(self):
        assert classify_literal("abc") == "abc"


class TestCoercions:
    """Tests for explicit value coercions."""

    def test_kind_of(self):
        assert kind_of(None) == ValueKind.NULL
        assert kind_of(True) == ValueKind.BOOLEAN
        assert kind_of(1) == ValueKind.NUMBER
        assert kind_of("1") == ValueKind.TEXT

    def test_unsupported_value(self):
        with pytest.raises(ValueTypeError):
            kind_of([1, 2])

    def test_to_number(self):
        assert to_number(3) == 3.0
        assert to_number(" 2.5 ") == 2.5

    def test_to_number_rejects_booleans_and_words(self):
        with pytest.raises(ValueTypeError):
            to_number(True)
        with pytest.raises(ValueTypeError):
            to_number("ten")
        with pytest.raises(ValueTypeError):
            to_number(None)

    def test_to_boolean(self):
        assert to_boolean(False) is False
        assert to_boolean("TRUE") is True
        with pytest.raises(ValueTypeError):
            to_boolean(1)

    def test_to_text(self):
        assert to_text(None) == ""
        assert to_text(True) == "true"
        assert to_text(10.0) == "10"
        assert to_text(2.5) == "2.5"
        assert to_text("x") == "x"

    def test_values_equal(self):
        assert values_equal(10, 10.0)
        assert values_equal("a", "a")
        assert values_equal(None, None)
        assert not values_equal(1, "1")
        assert not values_equal(1, True)


# =============================================================================
# Variable Sets
# =============================================================================


class TestVariableSets:
    """Tests for variable resolution."""

    def test_undefined_is_falsy_singleton(self):
        assert not UNDEFINED
        assert type(UNDEFINED)() is UNDEFINED
        assert repr(UNDEFINED) == "UNDEFINED"

    def test_static_variable_set(self):
        variables = StaticVariableSet({"a": 1})
        variables.set("b", None)
        assert variables.resolve("a") == 1
        assert variables.resolve("b") is None
        assert variables.resolve("c") is UNDEFINED
        assert "b" in variables
        assert len(variables) == 2

    def test_setting_undefined_removes(self):
        variables = StaticVariableSet({"a": 1})
        variables.set("a", UNDEFINED)
        assert "a" not in variables
        variables.set("missing", UNDEFINED)
        assert len(variables) == 0

    def test_get_with_default(self):
        assert StaticVariableSet().get("x", 5) == 5

    def test_chained_first_wins(self):
        chained = ChainedVariableSet(
            StaticVariableSet({"a": 1}),
            StaticVariableSet({"a": 2, "b": 3}),
        )
        assert chained.resolve("a") == 1
        assert chained.resolve("b") == 3
        assert chained.resolve("c") is UNDEFINED

    def test_protocol(self):
        assert isinstance(StaticVariableSet(), VariableSet)
        assert isinstance(ChainedVariableSet(), VariableSet)
        assert not isinstance({}, VariableSet)

    def test_as_variable_set(self):
        variables = StaticVariableSet()
        assert as_variable_set(None) is None
        assert as_variable_set(variables) is variables
        assert as_variable_set({"a": 1}).resolve("a") == 1
        with pytest.raises(TypeError):
            as_variable_set("a=1")

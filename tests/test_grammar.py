"""Tests for grammar elements and the Parameters registry.

Tests cover:
- Operator, Function, Constant and BracketPair validation
- Registration and duplicate detection
- Freezing, copying and translations
- Export to a plain dictionary
"""

import pytest

from infixeval import (
    BRACKETS,
    PARENTHESES,
    Associativity,
    BracketPair,
    Constant,
    DuplicateDefinitionError,
    FrozenRegistryError,
    Function,
    GrammarError,
    Operator,
    Parameters,
)

PLUS = Operator("+", 2, Associativity.LEFT, 1)
MINUS = Operator("-", 2, Associativity.LEFT, 1)
NEGATE = Operator("-", 1, Associativity.RIGHT, 3)


# =============================================================================
# Grammar Elements
# =============================================================================


class TestOperator:
    """Tests for operator definitions."""

    def test_key_includes_arity(self):
        assert MINUS.key == ("-", 2)
        assert NEGATE.key == ("-", 1)
        assert MINUS != NEGATE

    def test_is_unary(self):
        assert NEGATE.is_unary
        assert not PLUS.is_unary

    def test_str(self):
        assert str(NEGATE) == "unary '-'"
        assert str(PLUS) == "binary '+'"

    def test_invalid_arity(self):
        with pytest.raises(ValueError):
            Operator("?", 3, Associativity.LEFT, 1)

    def test_empty_symbol(self):
        with pytest.raises(ValueError):
            Operator("", 2, Associativity.LEFT, 1)

    def test_whitespace_in_symbol(self):
        with pytest.raises(ValueError):
            Operator("< >", 2, Associativity.LEFT, 1)

    def test_to_dict(self):
        assert NEGATE.to_dict() == {
            "symbol": "-",
            "arity": 1,
            "associativity": "right",
            "precedence": 3,
        }


class TestFunction:
    """Tests for function definitions."""

    def test_fixed(self):
        sin = Function.fixed("sin", 1)
        assert sin.min_arguments == 1
        assert sin.max_arguments == 1
        assert not sin.is_variadic

    def test_variadic(self):
        total = Function.variadic("sum")
        assert total.is_variadic
        assert total.accepts(1)
        assert total.accepts(50)
        assert not total.accepts(0)

    def test_accepts_range(self):
        f = Function("f", 1, 3)
        assert [f.accepts(n) for n in range(5)] == [False, True, True, True, False]

    def test_describe_arity(self):
        assert Function.fixed("f", 2).describe_arity() == "2"
        assert Function("f", 1, 3).describe_arity() == "1 to 3"
        assert Function.variadic("f", 2).describe_arity() == "at least 2"

    def test_max_below_min(self):
        with pytest.raises(ValueError):
            Function("f", 3, 1)

    def test_negative_min(self):
        with pytest.raises(ValueError):
            Function("f", -1)

    def test_empty_name(self):
        with pytest.raises(ValueError):
            Function("", 0)


class TestBracketPair:
    """Tests for bracket pairs."""

    def test_same_open_and_close(self):
        with pytest.raises(ValueError):
            BracketPair("|", "|")

    def test_empty_symbol(self):
        with pytest.raises(ValueError):
            BracketPair("(", "")

    def test_str(self):
        assert str(PARENTHESES) == "()"

    def test_empty_constant_name(self):
        with pytest.raises(ValueError):
            Constant("")


# =============================================================================
# Parameters
# =============================================================================


@pytest.fixture
def params():
    result = Parameters()
    result.add_operators([PLUS, MINUS, NEGATE])
    result.add_function(Function.fixed("sin", 1))
    result.add_constant(Constant("pi"))
    result.add_function_bracket(PARENTHESES)
    result.add_expression_bracket(PARENTHESES)
    return result


class TestRegistration:
    """Tests for adding elements to Parameters."""

    def test_unary_and_binary_share_symbol(self, params):
        assert params.get_operator("-", 1) is NEGATE
        assert params.get_operator("-", 2) is MINUS
        assert params.has_operator_symbol("-")
        assert not params.has_operator_symbol("*")

    def test_duplicate_operator(self, params):
        with pytest.raises(DuplicateDefinitionError):
            params.add_operator(Operator("+", 2, Associativity.RIGHT, 5))

    def test_operator_clashing_with_separator(self, params):
        with pytest.raises(DuplicateDefinitionError):
            params.add_operator(Operator(",", 2, Associativity.LEFT, 1))

    def test_operator_clashing_with_bracket(self, params):
        with pytest.raises(DuplicateDefinitionError):
            params.add_operator(Operator("(", 1, Associativity.RIGHT, 1))

    def test_duplicate_function(self, params):
        with pytest.raises(DuplicateDefinitionError):
            params.add_function(Function.fixed("sin", 2))

    def test_function_and_constant_share_namespace(self, params):
        with pytest.raises(DuplicateDefinitionError):
            params.add_constant(Constant("sin"))
        with pytest.raises(DuplicateDefinitionError):
            params.add_function(Function.fixed("pi", 0))

    def test_same_bracket_twice_is_ignored(self, params):
        params.add_expression_bracket(PARENTHESES)
        assert params.expression_brackets == [PARENTHESES]

    def test_bracket_reusing_open_symbol(self, params):
        with pytest.raises(DuplicateDefinitionError):
            params.add_expression_bracket(BracketPair("(", "]"))

    def test_bracket_clashing_with_operator(self, params):
        with pytest.raises(DuplicateDefinitionError):
            params.add_expression_bracket(BracketPair("+", "#"))

    def test_brackets_lists_each_pair_once(self, params):
        params.add_expression_bracket(BRACKETS)
        assert params.brackets == [PARENTHESES, BRACKETS]
        assert params.function_bracket_opened_by("[") is None
        assert params.expression_bracket_opened_by("[") == BRACKETS
        assert params.is_open_bracket("[")
        assert params.is_close_bracket(")")

    def test_blank_separator(self):
        with pytest.raises(GrammarError):
            Parameters(" ")

    def test_grammar_errors_are_value_errors(self):
        assert issubclass(DuplicateDefinitionError, ValueError)
        assert issubclass(FrozenRegistryError, ValueError)

    def test_symbols_longest_first(self):
        params = Parameters()
        params.add_operator(Operator(">", 2, Associativity.LEFT, 1))
        params.add_operator(Operator(">=", 2, Associativity.LEFT, 1))
        symbols = params.symbols()
        assert symbols.index(">=") < symbols.index(">")
        assert "," in symbols

    def test_registration_order_is_kept(self, params):
        assert params.operators == [PLUS, MINUS, NEGATE]


class TestFreezeAndCopy:
    """Tests for read-only registries."""

    def test_frozen_rejects_changes(self, params):
        params.freeze()
        assert params.frozen
        with pytest.raises(FrozenRegistryError):
            params.add_constant(Constant("e"))
        with pytest.raises(FrozenRegistryError):
            params.add_expression_bracket(BRACKETS)

    def test_freeze_is_idempotent(self, params):
        params.freeze()
        params.freeze()
        assert params.frozen

    def test_copy_is_unfrozen_and_independent(self, params):
        params.freeze()
        clone = params.copy()
        assert not clone.frozen
        clone.add_constant(Constant("e"))
        assert clone.get_constant("e") is not None
        assert params.get_constant("e") is None


class TestTranslation:
    """Tests for localized function and constant names."""

    def test_translated_function(self, params):
        sin = params.get_function("sin")
        params.set_translation(sin, "sinus")
        assert params.get_function("sinus") is sin
        assert params.get_function("sin") is None

    def test_translation_keeps_order(self, params):
        params.add_constant(Constant("e"))
        params.set_translation(params.get_constant("pi"), "PI")
        assert params.to_dict()["constants"] == ["PI", "e"]

    def test_translation_to_taken_name(self, params):
        with pytest.raises(DuplicateDefinitionError):
            params.set_translation(params.get_function("sin"), "pi")

    def test_translation_of_unregistered_element(self, params):
        with pytest.raises(GrammarError):
            params.set_translation(Function.fixed("cos", 1), "cosinus")


class TestExport:
    """Tests for Parameters.to_dict."""

    def test_to_dict(self, params):
        params.set_translation(params.get_function("sin"), "sinus")
        data = params.to_dict()
        assert data["separator"] == ","
        assert data["functions"] == [{"name": "sinus", "min": 1, "max": 1}]
        assert data["constants"] == ["pi"]
        assert data["function_brackets"] == [["(", ")"]]
        assert data["expression_brackets"] == [["(", ")"]]
        assert len(data["operators"]) == 3

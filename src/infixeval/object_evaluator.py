"""Evaluator for rule expressions over a record of named fields.

Values may be numbers, text, booleans or null, so a single expression can
mix arithmetic, comparisons and conditionals:

    if(isempty(Testdate), 0,
       if(datecompare(today, Testdate, 'MM-dd-yyyy', 'MM/dd/yyyy') == before, 50, 100))

Operators (highest precedence first):
- - (unary, Style.EXCEL)
- ^
- - (unary, Style.STANDARD), ! (not)
- * / %
- + (addition or text concatenation) -
- < <= > >=
- == !=
- &&
- ||

&& binds tighter than ||, so `a || b && c` reads as `a || (b && c)`.
Both operands of && and || are always evaluated; the engine reduces
operators only after all their operands are known.
"""

import re
from collections.abc import Callable, Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

from infixeval.double_evaluator import (
    ARITHMETIC,
    CONSTANT_VALUES,
    CONSTANTS as NUMERIC_CONSTANTS,
    DIVIDE,
    EXPONENT,
    FUNCTION_IMPLEMENTATIONS,
    FUNCTIONS as NUMERIC_FUNCTIONS,
    MINUS,
    MODULO,
    MULTIPLY,
    NEGATE,
    NEGATE_HIGH,
    PLUS,
    Style,
    call_numeric_function,
)
from infixeval.evaluator import Evaluator
from infixeval.grammar import PARENTHESES, Associativity, Constant, Function, Operator
from infixeval.parameters import Parameters
from infixeval.values import (
    ValueKind,
    is_number_literal,
    kind_of,
    to_boolean,
    to_number,
    to_text,
    values_equal,
)

NOT = Operator("!", 1, Associativity.RIGHT, 7)
LESSTHAN = Operator("<", 2, Associativity.LEFT, 4)
GREATERTHAN = Operator(">", 2, Associativity.LEFT, 4)
LESSTHANEQUAL = Operator("<=", 2, Associativity.LEFT, 4)
GREATERTHANEQUAL = Operator(">=", 2, Associativity.LEFT, 4)
EQUALTO = Operator("==", 2, Associativity.LEFT, 3)
NOTEQUALTO = Operator("!=", 2, Associativity.LEFT, 3)
AND = Operator("&&", 2, Associativity.LEFT, 2)
OR = Operator("||", 2, Associativity.LEFT, 1)

_LOGIC_OPERATORS = (
    NOT, EQUALTO, NOTEQUALTO, AND, OR, LESSTHAN, GREATERTHAN, LESSTHANEQUAL, GREATERTHANEQUAL,
)
OPERATORS = (NEGATE, MINUS, PLUS, MULTIPLY, DIVIDE, EXPONENT, MODULO) + _LOGIC_OPERATORS
OPERATORS_EXCEL = (NEGATE_HIGH, MINUS, PLUS, MULTIPLY, DIVIDE, EXPONENT, MODULO) + _LOGIC_OPERATORS


class OperatorCategory(Enum):
    """How an operator treats its operands."""

    ARITHMETIC = "arithmetic"  # numbers in, number out (+ also concatenates)
    COMPARISON = "comparison"  # numbers in, boolean out
    EQUALITY = "equality"      # any values in, boolean out
    LOGICAL = "logical"        # booleans in, boolean out


COMPARISONS: dict[tuple[str, int], Callable[[float, float], bool]] = {
    LESSTHAN.key: lambda x, y: x < y,
    LESSTHANEQUAL.key: lambda x, y: x <= y,
    GREATERTHAN.key: lambda x, y: x > y,
    GREATERTHANEQUAL.key: lambda x, y: x >= y,
}

LOGICAL: dict[tuple[str, int], Callable[..., bool]] = {
    AND.key: lambda x, y: x and y,
    OR.key: lambda x, y: x or y,
    NOT.key: lambda x: not x,
}

CATEGORIES: dict[tuple[str, int], OperatorCategory] = {
    **{key: OperatorCategory.ARITHMETIC for key in ARITHMETIC},
    **{key: OperatorCategory.COMPARISON for key in COMPARISONS},
    **{key: OperatorCategory.LOGICAL for key in LOGICAL},
    EQUALTO.key: OperatorCategory.EQUALITY,
    NOTEQUALTO.key: OperatorCategory.EQUALITY,
}

IF = Function.fixed("if", 3)
ISEMPTY = Function.fixed("isempty", 1)
DATECOMPARE = Function.fixed("datecompare", 4)
CONCAT = Function.variadic("concat")
LEN = Function.fixed("len", 1)
UPPER = Function.fixed("upper", 1)
LOWER = Function.fixed("lower", 1)

FUNCTIONS = NUMERIC_FUNCTIONS + (IF, ISEMPTY, DATECOMPARE, CONCAT, LEN, UPPER, LOWER)

TRUE = Constant("true")
FALSE = Constant("false")
NULL = Constant("null")
TODAY = Constant("today")

CONSTANTS = NUMERIC_CONSTANTS + (TRUE, FALSE, NULL, TODAY)

_default_parameters: dict[Style, Parameters] = {}

# Results of datecompare()
BEFORE = "before"
AFTER = "after"
SAME = "same"

_DATE_PATTERN_TOKENS = re.compile(r"yyyy|yy|MM|M|dd|d|HH|H|mm|m|ss|s|%")
_DATE_DIRECTIVES = {
    "yyyy": "%Y",
    "yy": "%y",
    "MM": "%m",
    "M": "%m",
    "dd": "%d",
    "d": "%d",
    "HH": "%H",
    "H": "%H",
    "mm": "%M",
    "m": "%M",
    "ss": "%S",
    "s": "%S",
    "%": "%%",
}


def date_pattern_to_strftime(pattern: str) -> str:
    """Translate a date pattern such as 'MM/dd/yyyy' to strftime syntax."""
    return _DATE_PATTERN_TOKENS.sub(lambda m: _DATE_DIRECTIVES[m.group()], pattern)


def parse_date(value: Any, pattern: str) -> datetime:
    text = to_text(value).strip()
    try:
        return datetime.strptime(text, date_pattern_to_strftime(pattern))
    except ValueError:
        raise ValueError(f"'{text}' does not match date pattern '{pattern}'") from None


def _is_text(value: Any) -> bool:
    return kind_of(value) == ValueKind.TEXT and not is_number_literal(value.strip())


def _add(left: Any, right: Any) -> Any:
    """Numeric addition, or concatenation when either side is non-numeric text."""
    if _is_text(left) or _is_text(right):
        return to_text(left) + to_text(right)
    return to_number(left) + to_number(right)


def _is_empty(value: Any) -> bool:
    return value is None or to_text(value).strip() == ""


def _date_compare(first: Any, second: Any, first_pattern: Any, second_pattern: Any) -> str:
    left = parse_date(first, to_text(first_pattern))
    right = parse_date(second, to_text(second_pattern))
    if left < right:
        return BEFORE
    if left > right:
        return AFTER
    return SAME


class ObjectEvaluator(Evaluator):
    """Evaluator whose values are numbers, text, booleans or null.

    Args:
        parameters: Grammar to use, defaults to default_parameters()
        bare_words_as_text: Evaluate unresolved identifiers to their own name,
            so that `status == active` compares against the text "active".
            When False, unresolved identifiers raise UnknownVariableError.
        today_format: Date pattern used to render the `today` constant
        style: Unary minus precedence of the default grammar; ignored when
            parameters are given

    Usage:
        evaluator = ObjectEvaluator()
        evaluator.evaluate("Temperature<15 && Pressure > 10",
                           {"Temperature": 10, "Pressure": 15})  # True
    """

    def __init__(
        self,
        parameters: Parameters | None = None,
        bare_words_as_text: bool = True,
        today_format: str = "MM-dd-yyyy",
        style: Style = Style.STANDARD,
    ):
        if parameters is None:
            if style not in _default_parameters:
                _default_parameters[style] = self.default_parameters(style)
            parameters = _default_parameters[style]
        super().__init__(parameters)
        self.bare_words_as_text = bare_words_as_text
        self.today_format = today_format

    @staticmethod
    def default_parameters(style: Style = Style.STANDARD) -> Parameters:
        """Build a new, unfrozen Parameters with every predefined element."""
        result = Parameters()
        result.add_operators(OPERATORS if style == Style.STANDARD else OPERATORS_EXCEL)
        result.add_functions(FUNCTIONS)
        result.add_constants(CONSTANTS)
        result.add_function_bracket(PARENTHESES)
        result.add_expression_bracket(PARENTHESES)
        return result

    # -------------------------------------------------------------------------
    # Callbacks
    # -------------------------------------------------------------------------

    def evaluate_constant(self, constant: Constant, context: Any) -> Any:
        name = constant.name
        if name in CONSTANT_VALUES:
            return CONSTANT_VALUES[name]
        if name == TRUE.name:
            return True
        if name == FALSE.name:
            return False
        if name == NULL.name:
            return None
        if name == TODAY.name:
            return date.today().strftime(date_pattern_to_strftime(self.today_format))
        return super().evaluate_constant(constant, context)

    def evaluate_operator(self, operator: Operator, operands: list[Any], context: Any) -> Any:
        key = operator.key
        category = CATEGORIES.get(key)
        if category is None:
            return super().evaluate_operator(operator, operands, context)

        if category == OperatorCategory.ARITHMETIC:
            if key == PLUS.key:
                return _add(*operands)
            return ARITHMETIC[key](*(to_number(o) for o in operands))
        if category == OperatorCategory.COMPARISON:
            return COMPARISONS[key](*(to_number(o) for o in operands))
        if category == OperatorCategory.EQUALITY:
            equal = values_equal(*operands)
            return equal if key == EQUALTO.key else not equal
        return LOGICAL[key](*(to_boolean(o) for o in operands))

    def evaluate_function(self, function: Function, arguments: list[Any], context: Any) -> Any:
        name = function.name
        if name in FUNCTION_IMPLEMENTATIONS:
            return call_numeric_function(function, arguments)
        if name == IF.name:
            condition, when_true, when_false = arguments
            return when_true if to_boolean(condition) else when_false
        if name == ISEMPTY.name:
            return _is_empty(arguments[0])
        if name == DATECOMPARE.name:
            return _date_compare(*arguments)
        if name == CONCAT.name:
            return "".join(to_text(a) for a in arguments)
        if name == LEN.name:
            return float(len(to_text(arguments[0])))
        if name == UPPER.name:
            return to_text(arguments[0]).upper()
        if name == LOWER.name:
            return to_text(arguments[0]).lower()
        return super().evaluate_function(function, arguments, context)

    def resolve_unknown(self, name: str, context: Any) -> Any:
        if self.bare_words_as_text:
            return name
        return super().resolve_unknown(name, context)


_default_evaluator: ObjectEvaluator | None = None


# -----------------------------------------------------------------------------
# Convenience functions
# -----------------------------------------------------------------------------


def evaluate_record(expression: str, record: Mapping[str, Any]) -> Any:
    """Evaluate an expression against a record with the default ObjectEvaluator.

    Example:
        evaluate_record('Error == "E001" && Temperature < 15',
                        {"Error": "E001", "Temperature": 10})
        # True
    """
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = ObjectEvaluator()
    return _default_evaluator.evaluate(expression, record)


def evaluate_bool(expression: str, record: Mapping[str, Any]) -> bool:
    """Evaluate an expression and return a boolean result.

    Null, zero, empty text are false; anything else is true.
    """
    result = evaluate_record(expression, record)

    if result is None:
        return False
    if isinstance(result, bool):
        return result
    if isinstance(result, (int, float)):
        return result != 0
    if isinstance(result, str):
        return len(result) > 0
    return True

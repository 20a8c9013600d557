"""Evaluator for arithmetic expressions on real numbers.

Operators:
- +, - (binary), *, /, % (modulo), ^ (exponentiation)
- - (unary minus)

Functions:
- abs, ceil, floor, round
- sin, cos, tan, asin, acos, atan, sinh, cosh, tanh (radians)
- ln (natural logarithm), log (base 10)
- min, max, sum, avg (one or more arguments)
- random (no argument, between 0 and 1)

Constants: pi, e
"""

import math
import random
from collections.abc import Callable
from enum import Enum
from typing import Any

from infixeval.evaluator import Evaluator
from infixeval.grammar import PARENTHESES, Associativity, Constant, Function, Operator
from infixeval.parameters import Parameters
from infixeval.values import ValueTypeError, classify_literal, to_number


class Style(Enum):
    """Precedence of unary minus relative to exponentiation.

    STANDARD: unary minus binds looser than ^, so -2^2 == -4
    EXCEL: unary minus binds tighter than ^, so -2^2 == 4
    """

    STANDARD = "standard"
    EXCEL = "excel"


PI = Constant("pi")
E = Constant("e")

CEIL = Function.fixed("ceil", 1)
FLOOR = Function.fixed("floor", 1)
ROUND = Function.fixed("round", 1)
ABS = Function.fixed("abs", 1)
SINE = Function.fixed("sin", 1)
COSINE = Function.fixed("cos", 1)
TANGENT = Function.fixed("tan", 1)
ACOSINE = Function.fixed("acos", 1)
ASINE = Function.fixed("asin", 1)
ATAN = Function.fixed("atan", 1)
SINEH = Function.fixed("sinh", 1)
COSINEH = Function.fixed("cosh", 1)
TANGENTH = Function.fixed("tanh", 1)
MIN = Function.variadic("min")
MAX = Function.variadic("max")
SUM = Function.variadic("sum")
AVERAGE = Function.variadic("avg")
LN = Function.fixed("ln", 1)
LOG = Function.fixed("log", 1)
RANDOM = Function.fixed("random", 0)

NEGATE_HIGH = Operator("-", 1, Associativity.RIGHT, 9)
EXPONENT = Operator("^", 2, Associativity.RIGHT, 8)
NEGATE = Operator("-", 1, Associativity.RIGHT, 7)
MULTIPLY = Operator("*", 2, Associativity.LEFT, 6)
DIVIDE = Operator("/", 2, Associativity.LEFT, 6)
MODULO = Operator("%", 2, Associativity.LEFT, 6)
MINUS = Operator("-", 2, Associativity.LEFT, 5)
PLUS = Operator("+", 2, Associativity.LEFT, 5)

OPERATORS = (NEGATE, MINUS, PLUS, MULTIPLY, DIVIDE, EXPONENT, MODULO)
OPERATORS_EXCEL = (NEGATE_HIGH, MINUS, PLUS, MULTIPLY, DIVIDE, EXPONENT, MODULO)
FUNCTIONS = (
    SINE, COSINE, TANGENT, ASINE, ACOSINE, ATAN, SINEH, COSINEH, TANGENTH,
    MIN, MAX, SUM, AVERAGE, LN, LOG, ROUND, CEIL, FLOOR, ABS, RANDOM,
)
CONSTANTS = (PI, E)


def _divide(left: float, right: float) -> float:
    if right == 0:
        raise ZeroDivisionError("Division by zero")
    return left / right


def _modulo(left: float, right: float) -> float:
    if right == 0:
        raise ZeroDivisionError("Modulo by zero")
    return math.fmod(left, right)


def _integral(rounding: Callable[[float], int]) -> Callable[[list[float]], float]:
    """Wrap math.ceil or math.floor so that infinities are kept."""
    def apply(args: list[float]) -> float:
        value = args[0]
        if math.isinf(value):
            return value
        return float(rounding(value))
    return apply


def _round(value: float) -> float:
    """Round half up; infinities are kept."""
    if math.isinf(value):
        return value
    return float(math.floor(value + 0.5))


# Keyed by (symbol, arity); precedence and associativity belong to the grammar.
ARITHMETIC: dict[tuple[str, int], Callable[..., float]] = {
    NEGATE.key: lambda x: -x,
    PLUS.key: lambda x, y: x + y,
    MINUS.key: lambda x, y: x - y,
    MULTIPLY.key: lambda x, y: x * y,
    DIVIDE.key: _divide,
    MODULO.key: _modulo,
    EXPONENT.key: math.pow,
}

# Keyed by the untranslated function name.
FUNCTION_IMPLEMENTATIONS: dict[str, Callable[[list[float]], float]] = {
    ABS.name: lambda args: abs(args[0]),
    CEIL.name: _integral(math.ceil),
    FLOOR.name: _integral(math.floor),
    ROUND.name: lambda args: _round(args[0]),
    SINE.name: lambda args: math.sin(args[0]),
    COSINE.name: lambda args: math.cos(args[0]),
    TANGENT.name: lambda args: math.tan(args[0]),
    ASINE.name: lambda args: math.asin(args[0]),
    ACOSINE.name: lambda args: math.acos(args[0]),
    ATAN.name: lambda args: math.atan(args[0]),
    SINEH.name: lambda args: math.sinh(args[0]),
    COSINEH.name: lambda args: math.cosh(args[0]),
    TANGENTH.name: lambda args: math.tanh(args[0]),
    MIN.name: min,
    MAX.name: max,
    SUM.name: math.fsum,
    AVERAGE.name: lambda args: math.fsum(args) / len(args),
    LN.name: lambda args: math.log(args[0]),
    LOG.name: lambda args: math.log10(args[0]),
    RANDOM.name: lambda args: random.random(),
}

CONSTANT_VALUES: dict[str, float] = {PI.name: math.pi, E.name: math.e}


def call_numeric_function(function: Function, arguments: list[Any]) -> float:
    """Apply a built-in numeric function, rejecting NaN results."""
    result = FUNCTION_IMPLEMENTATIONS[function.name]([to_number(a) for a in arguments])
    if math.isnan(result):
        raise ValueError(f"Invalid argument passed to {function.name}")
    return result


_default_parameters: dict[Style, Parameters] = {}


class DoubleEvaluator(Evaluator):
    """Evaluator whose values are floats.

    Usage:
        evaluator = DoubleEvaluator()
        evaluator.evaluate("(2^3-1)*sin(pi/4)/ln(pi^2)")

        excel = DoubleEvaluator(style=Style.EXCEL)
        excel.evaluate("-2^2")  # 4.0
    """

    def __init__(self, parameters: Parameters | None = None, style: Style = Style.STANDARD):
        if parameters is None:
            if style not in _default_parameters:
                _default_parameters[style] = self.default_parameters(style)
            parameters = _default_parameters[style]
        super().__init__(parameters)

    @staticmethod
    def default_parameters(style: Style = Style.STANDARD) -> Parameters:
        """Build a new Parameters with every predefined element.

        The result is not frozen, so it can be reduced, extended or
        translated before being handed to an evaluator.
        """
        result = Parameters()
        result.add_operators(OPERATORS if style == Style.STANDARD else OPERATORS_EXCEL)
        result.add_functions(FUNCTIONS)
        result.add_constants(CONSTANTS)
        result.add_function_bracket(PARENTHESES)
        result.add_expression_bracket(PARENTHESES)
        return result

    def to_value(self, literal: str, context: Any) -> float:
        value = classify_literal(literal)
        if not isinstance(value, float):
            raise ValueTypeError(f"{literal} is not a number")
        return value

    def evaluate_constant(self, constant: Constant, context: Any) -> float:
        if constant.name in CONSTANT_VALUES:
            return CONSTANT_VALUES[constant.name]
        return super().evaluate_constant(constant, context)

    def evaluate_operator(self, operator: Operator, operands: list[Any], context: Any) -> float:
        implementation = ARITHMETIC.get(operator.key)
        if implementation is None:
            return super().evaluate_operator(operator, operands, context)
        return implementation(*(to_number(o) for o in operands))

    def evaluate_function(self, function: Function, arguments: list[Any], context: Any) -> float:
        if function.name not in FUNCTION_IMPLEMENTATIONS:
            return super().evaluate_function(function, arguments, context)
        return call_numeric_function(function, arguments)

"""Value model shared by the bundled evaluators.

Expression values are plain Python objects:
- Number: float (int accepted from records)
- Text: str
- Boolean: bool
- Null: None

Coercions are explicit and total; each either returns a value of the
requested kind or raises ValueTypeError.
"""

import re
from decimal import Decimal
from enum import Enum
from typing import Any

Value = float | str | bool | None

NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class ValueKind(Enum):
    NUMBER = "number"
    TEXT = "text"
    BOOLEAN = "boolean"
    NULL = "null"


class ValueTypeError(TypeError):
    """A value cannot be used where another kind is required."""
    pass


def kind_of(value: Any) -> ValueKind:
    """Classify a value."""
    if value is None:
        return ValueKind.NULL
    # bool before numbers: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    raise ValueTypeError(f"Unsupported value type: {type(value).__name__}")


def is_number_literal(text: str) -> bool:
    return NUMBER_PATTERN.fullmatch(text) is not None


def classify_literal(text: str) -> float | str:
    """Turn literal source text into a Number or a Text.

    "3.5" -> 3.5, "'abc'" -> "abc", "abc" -> "abc". The numeric grammar
    does not depend on the locale: "." is the only decimal separator.
    """
    if is_number_literal(text):
        return float(text)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return unquote(text)
    return text


def unquote(text: str) -> str:
    """Strip the surrounding quotes of a string literal and process escapes."""
    body = text[1:-1]
    result = []
    i = 0
    while i < len(body):
        if body[i] == "\\" and i + 1 < len(body):
            next_char = body[i + 1]
            result.append({"n": "\n", "t": "\t", "r": "\r"}.get(next_char, next_char))
            i += 2
        else:
            result.append(body[i])
            i += 1
    return "".join(result)


def to_number(value: Any) -> float:
    """Coerce to a Number. Text is accepted when it reads as a number."""
    kind = kind_of(value)
    if kind == ValueKind.NUMBER:
        return float(value)
    if kind == ValueKind.TEXT and is_number_literal(value.strip()):
        return float(value.strip())
    raise ValueTypeError(f"Expected a number, got {describe(value)}")


def to_boolean(value: Any) -> bool:
    """Coerce to a Boolean. Only booleans and the text true/false qualify."""
    kind = kind_of(value)
    if kind == ValueKind.BOOLEAN:
        return value
    if kind == ValueKind.TEXT and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueTypeError(f"Expected a boolean, got {describe(value)}")


def to_text(value: Any) -> str:
    """Render a value as Text. Whole numbers lose their ".0"."""
    kind = kind_of(value)
    if kind == ValueKind.NULL:
        return ""
    if kind == ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind == ValueKind.NUMBER:
        number = float(value)
        if number.is_integer():
            return str(int(number))
        return repr(number)
    return value


def values_equal(left: Any, right: Any) -> bool:
    """Structural equality across kinds.

    Numbers compare numerically (10 == 10.0); values of different kinds
    are never equal.
    """
    left_kind = kind_of(left)
    if left_kind != kind_of(right):
        return False
    if left_kind == ValueKind.NUMBER:
        return float(left) == float(right)
    return left == right


def describe(value: Any) -> str:
    if value is None:
        return "null"
    return f"{type(value).__name__} {value!r}"

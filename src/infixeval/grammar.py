"""Grammar elements: operators, functions, constants and bracket pairs.

These are immutable value objects. They carry no behavior: what an operator
or function computes is decided by the evaluator that registers it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Associativity(Enum):
    """Grouping of consecutive operators with the same precedence."""

    LEFT = "left"    # a - b - c == (a - b) - c
    RIGHT = "right"  # a ^ b ^ c == a ^ (b ^ c)


@dataclass(frozen=True)
class Operator:
    """An operator definition.

    Two operators may share a symbol when their arities differ; unary and
    binary minus are distinct values even though both render as "-".

    Attributes:
        symbol: The operator as written in expressions (e.g. "+", ">=", "and")
        arity: 1 for a prefix unary operator, 2 for a binary operator
        associativity: Grouping of operators with equal precedence
        precedence: Higher binds tighter
    """

    symbol: str
    arity: int
    associativity: Associativity
    precedence: int

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValueError("Operator symbol cannot be empty")
        if any(ch.isspace() for ch in self.symbol):
            raise ValueError(f"Operator symbol {self.symbol!r} cannot contain whitespace")
        if self.arity not in (1, 2):
            raise ValueError(f"Operator '{self.symbol}' arity must be 1 or 2, got {self.arity}")

    @property
    def key(self) -> tuple[str, int]:
        """Registry key: (symbol, arity)."""
        return (self.symbol, self.arity)

    @property
    def is_unary(self) -> bool:
        return self.arity == 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "arity": self.arity,
            "associativity": self.associativity.value,
            "precedence": self.precedence,
        }

    def __str__(self) -> str:
        kind = "unary" if self.is_unary else "binary"
        return f"{kind} '{self.symbol}'"


@dataclass(frozen=True)
class Function:
    """A function definition.

    Attributes:
        name: Case-sensitive name used in expressions
        min_arguments: Minimum argument count (>= 0)
        max_arguments: Maximum argument count, or None for variadic functions
    """

    name: str
    min_arguments: int
    max_arguments: int | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Function name cannot be empty")
        if self.min_arguments < 0:
            raise ValueError(f"Function '{self.name}' minimum arity cannot be negative")
        if self.max_arguments is not None and self.max_arguments < self.min_arguments:
            raise ValueError(
                f"Function '{self.name}' maximum arity {self.max_arguments} "
                f"is lower than its minimum {self.min_arguments}"
            )

    @classmethod
    def fixed(cls, name: str, arity: int) -> "Function":
        """Function taking exactly ``arity`` arguments."""
        return cls(name, arity, arity)

    @classmethod
    def variadic(cls, name: str, min_arguments: int = 1) -> "Function":
        """Function taking ``min_arguments`` or more arguments."""
        return cls(name, min_arguments, None)

    @property
    def is_variadic(self) -> bool:
        return self.max_arguments is None

    def accepts(self, count: int) -> bool:
        """Check an argument count against the declared range."""
        if count < self.min_arguments:
            return False
        return self.max_arguments is None or count <= self.max_arguments

    def describe_arity(self) -> str:
        if self.max_arguments is None:
            return f"at least {self.min_arguments}"
        if self.max_arguments == self.min_arguments:
            return str(self.min_arguments)
        return f"{self.min_arguments} to {self.max_arguments}"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "min": self.min_arguments, "max": self.max_arguments}


@dataclass(frozen=True)
class Constant:
    """A named constant. Its value is supplied by the evaluator."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Constant name cannot be empty")


@dataclass(frozen=True)
class BracketPair:
    """A matched open/close symbol pair."""

    open: str
    close: str

    def __post_init__(self) -> None:
        if not self.open or not self.close:
            raise ValueError("Bracket symbols cannot be empty")
        if self.open == self.close:
            raise ValueError(f"Bracket pair cannot open and close with {self.open!r}")

    def to_list(self) -> list[str]:
        return [self.open, self.close]

    def __str__(self) -> str:
        return f"{self.open}{self.close}"


PARENTHESES = BracketPair("(", ")")
BRACKETS = BracketPair("[", "]")
BRACES = BracketPair("{", "}")
ANGLES = BracketPair("<", ">")

"""Parameters registry: the grammar accepted by one evaluator.

A Parameters instance is built once, then handed to an evaluator which
freezes it. From then on it is shared read-only by every evaluation.

Example:
    params = Parameters()
    params.add_operators([
        Operator("+", 2, Associativity.LEFT, 1),
        Operator("-", 1, Associativity.RIGHT, 3),
    ])
    params.add_function(Function.variadic("max"))
    params.add_expression_bracket(PARENTHESES)
    params.add_function_bracket(PARENTHESES)
"""

import copy
from collections.abc import Iterable
from typing import Any

from infixeval.errors import DuplicateDefinitionError, FrozenRegistryError, GrammarError
from infixeval.grammar import BracketPair, Constant, Function, Operator


class Parameters:
    """Registry of operators, functions, constants and bracket pairs."""

    def __init__(self, function_argument_separator: str = ","):
        if not function_argument_separator or function_argument_separator.isspace():
            raise GrammarError("Function argument separator cannot be blank")
        self._separator = function_argument_separator
        self._operators: dict[tuple[str, int], Operator] = {}
        self._functions: dict[str, Function] = {}
        self._constants: dict[str, Constant] = {}
        self._function_brackets: list[BracketPair] = []
        self._expression_brackets: list[BracketPair] = []
        self._frozen = False

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def add_operator(self, operator: Operator) -> None:
        """Register an operator.

        Raises:
            DuplicateDefinitionError: If (symbol, arity) is already registered,
                or the symbol is already used by a bracket or the separator
        """
        self._check_mutable()
        if operator.key in self._operators:
            raise DuplicateDefinitionError(
                f"Operator {operator} is already registered"
            )
        if operator.symbol == self._separator or operator.symbol in self._bracket_symbols():
            raise DuplicateDefinitionError(
                f"Operator symbol '{operator.symbol}' is already used as a delimiter"
            )
        self._operators[operator.key] = operator

    def add_operators(self, operators: Iterable[Operator]) -> None:
        for operator in operators:
            self.add_operator(operator)

    def add_function(self, function: Function) -> None:
        """Register a function under its name.

        Raises:
            DuplicateDefinitionError: If the name is used by a function or constant
        """
        self._check_mutable()
        self._check_name_free(function.name)
        self._functions[function.name] = function

    def add_functions(self, functions: Iterable[Function]) -> None:
        for function in functions:
            self.add_function(function)

    def add_constant(self, constant: Constant) -> None:
        """Register a constant under its name.

        Raises:
            DuplicateDefinitionError: If the name is used by a function or constant
        """
        self._check_mutable()
        self._check_name_free(constant.name)
        self._constants[constant.name] = constant

    def add_constants(self, constants: Iterable[Constant]) -> None:
        for constant in constants:
            self.add_constant(constant)

    def add_function_bracket(self, pair: BracketPair) -> None:
        """Register a pair delimiting function argument lists."""
        self._add_bracket(pair, self._function_brackets, "function")

    def add_expression_bracket(self, pair: BracketPair) -> None:
        """Register a pair grouping sub-expressions."""
        self._add_bracket(pair, self._expression_brackets, "expression")

    def set_translation(self, element: Function | Constant, name: str) -> None:
        """Make a registered function or constant available under another name.

        The element is no longer reachable under its default name. Evaluators
        still receive the original element, so their dispatch is unaffected.

        Raises:
            GrammarError: If the element is not registered
            DuplicateDefinitionError: If the new name is already taken
        """
        self._check_mutable()
        table: dict[str, Any] = (
            self._functions if isinstance(element, Function) else self._constants
        )
        current = next((key for key, value in table.items() if value == element), None)
        if current is None:
            raise GrammarError(f"'{element.name}' is not registered")
        if name == current:
            return
        self._check_name_free(name)
        # Rebuild to keep registration order stable.
        rebuilt = {(name if key == current else key): value for key, value in table.items()}
        table.clear()
        table.update(rebuilt)

    def freeze(self) -> None:
        """Make the registry read-only. Idempotent."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def copy(self) -> "Parameters":
        """Return an unfrozen copy that can be extended independently."""
        clone = copy.copy(self)
        clone._operators = dict(self._operators)
        clone._functions = dict(self._functions)
        clone._constants = dict(self._constants)
        clone._function_brackets = list(self._function_brackets)
        clone._expression_brackets = list(self._expression_brackets)
        clone._frozen = False
        return clone

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @property
    def function_argument_separator(self) -> str:
        return self._separator

    @property
    def operators(self) -> list[Operator]:
        return list(self._operators.values())

    @property
    def functions(self) -> list[Function]:
        return list(self._functions.values())

    @property
    def constants(self) -> list[Constant]:
        return list(self._constants.values())

    @property
    def function_brackets(self) -> list[BracketPair]:
        return list(self._function_brackets)

    @property
    def expression_brackets(self) -> list[BracketPair]:
        return list(self._expression_brackets)

    @property
    def brackets(self) -> list[BracketPair]:
        """All distinct bracket pairs, function brackets first."""
        result = list(self._function_brackets)
        result.extend(p for p in self._expression_brackets if p not in result)
        return result

    def get_operator(self, symbol: str, arity: int) -> Operator | None:
        return self._operators.get((symbol, arity))

    def has_operator_symbol(self, symbol: str) -> bool:
        return any(key[0] == symbol for key in self._operators)

    def get_function(self, name: str) -> Function | None:
        return self._functions.get(name)

    def get_constant(self, name: str) -> Constant | None:
        return self._constants.get(name)

    def function_bracket_opened_by(self, symbol: str) -> BracketPair | None:
        return next((p for p in self._function_brackets if p.open == symbol), None)

    def expression_bracket_opened_by(self, symbol: str) -> BracketPair | None:
        return next((p for p in self._expression_brackets if p.open == symbol), None)

    def is_open_bracket(self, symbol: str) -> bool:
        return any(p.open == symbol for p in self.brackets)

    def is_close_bracket(self, symbol: str) -> bool:
        return any(p.close == symbol for p in self.brackets)

    def symbols(self) -> list[str]:
        """Every operator, bracket and separator symbol, longest first.

        The tokenizer tries them in this order so that ">=" wins over ">".
        """
        found = {key[0] for key in self._operators}
        found.update(self._bracket_symbols())
        found.add(self._separator)
        return sorted(found, key=lambda s: (-len(s), s))

    def to_dict(self) -> dict[str, Any]:
        """Export the grammar for documentation or a grammar file."""
        return {
            "separator": self._separator,
            "operators": [op.to_dict() for op in self._operators.values()],
            # Keys, not element names, so translated names are exported.
            "functions": [
                {**f.to_dict(), "name": name} for name, f in self._functions.items()
            ],
            "constants": list(self._constants),
            "function_brackets": [p.to_list() for p in self._function_brackets],
            "expression_brackets": [p.to_list() for p in self._expression_brackets],
        }

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenRegistryError(
                "Parameters cannot be modified once an evaluator uses them; "
                "call copy() to derive a new grammar"
            )

    def _check_name_free(self, name: str) -> None:
        if name in self._functions:
            raise DuplicateDefinitionError(f"Function '{name}' is already registered")
        if name in self._constants:
            raise DuplicateDefinitionError(f"Constant '{name}' is already registered")

    def _bracket_symbols(self) -> set[str]:
        symbols: set[str] = set()
        for pair in self._function_brackets + self._expression_brackets:
            symbols.add(pair.open)
            symbols.add(pair.close)
        return symbols

    def _add_bracket(self, pair: BracketPair, target: list[BracketPair], role: str) -> None:
        self._check_mutable()
        if pair in target:
            return
        if any(p.open == pair.open for p in target):
            raise DuplicateDefinitionError(
                f"Another {role} bracket already opens with '{pair.open}'"
            )
        for symbol in (pair.open, pair.close):
            if symbol == self._separator or self.has_operator_symbol(symbol):
                raise DuplicateDefinitionError(
                    f"Bracket symbol '{symbol}' is already used by an operator or separator"
                )
        target.append(pair)

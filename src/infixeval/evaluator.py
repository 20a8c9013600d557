"""Evaluation engine for infix expressions.

Evaluates an expression in a single left-to-right pass over its tokens
(shunting-yard), without building a syntax tree. Two stacks are used:

- the operator stack holds pending operators and open bracket frames
- the operand stack holds values computed so far

Whenever the grammar says an operator or function call is complete, the
evaluator subclass is asked to compute it. Subclasses decide what a value
is; this module only decides the order of computation and checks the
structure of the expression.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from infixeval.errors import (
    ArityMismatchError,
    EvaluationError,
    HostCallbackError,
    MalformedExpressionError,
    UnexpectedSeparatorError,
    UnknownConstantError,
    UnknownFunctionError,
    UnknownOperatorError,
    UnknownVariableError,
    UnmatchedBracketError,
)
from infixeval.grammar import Associativity, BracketPair, Constant, Function, Operator
from infixeval.lexer import Token, Tokenizer, TokenType
from infixeval.parameters import Parameters
from infixeval.values import classify_literal
from infixeval.variables import UNDEFINED, VariableSet, as_variable_set

logger = logging.getLogger(__name__)


class Evaluator:
    """Base class for evaluators.

    Subclasses supply the semantics by overriding the callbacks:
    to_value, evaluate_constant, evaluate_operator, evaluate_function and,
    optionally, resolve_unknown.

    Usage:
        evaluator = DoubleEvaluator()
        evaluator.evaluate("(2^3-1)*sin(pi/4)/ln(pi^2)")
        evaluator.evaluate("x + 1", {"x": 2.0})

    The Parameters instance is frozen on construction. An evaluator keeps no
    per-evaluation state, so one instance may serve concurrent evaluations.
    """

    def __init__(self, parameters: Parameters):
        parameters.freeze()
        self.parameters = parameters

    def evaluate(self, expression: str, context: Any = None) -> Any:
        """Evaluate an expression.

        Args:
            expression: The expression text
            context: None, a VariableSet, or a mapping of variable names to
                values. It is also passed through to every callback.

        Returns:
            The value of the expression

        Raises:
            EvaluationError: If the expression is malformed or a callback fails
        """
        logger.debug("Evaluating %r", expression)
        result = _ShuntingYard(self, expression, context).run()
        logger.debug("%r evaluated to %r", expression, result)
        return result

    # -------------------------------------------------------------------------
    # Callbacks
    # -------------------------------------------------------------------------

    def to_value(self, literal: str, context: Any) -> Any:
        """Convert a literal (number or quoted string) to a value."""
        return classify_literal(literal)

    def evaluate_constant(self, constant: Constant, context: Any) -> Any:
        raise UnknownConstantError(
            f"Constant '{constant.name}' is not supported by {type(self).__name__}"
        )

    def evaluate_operator(self, operator: Operator, operands: list[Any], context: Any) -> Any:
        """Compute an operator. Operands are in source order."""
        raise UnknownOperatorError(
            f"Operator {operator} is not supported by {type(self).__name__}"
        )

    def evaluate_function(self, function: Function, arguments: list[Any], context: Any) -> Any:
        """Compute a function call. Arguments are in source order."""
        raise UnknownFunctionError(
            f"Function '{function.name}' is not supported by {type(self).__name__}"
        )

    def resolve_unknown(self, name: str, context: Any) -> Any:
        """Value of an identifier that is neither a constant nor a variable."""
        raise UnknownVariableError(name)


# -----------------------------------------------------------------------------
# Engine
# -----------------------------------------------------------------------------


@dataclass
class _PendingOperator:
    operator: Operator
    token: Token


@dataclass
class _BracketFrame:
    """An open bracket waiting for its close.

    Attributes:
        bracket: The bracket pair that was opened
        token: The open bracket token
        base: Height of the operand stack when the bracket was opened
        function: The function whose arguments the bracket delimits, if any
        function_token: The function name token
        separators: Argument separators seen so far
    """

    bracket: BracketPair
    token: Token
    base: int
    function: Function | None = None
    function_token: Token | None = None
    separators: int = 0


class _ShuntingYard:
    """State of a single evaluation. Never shared between calls."""

    def __init__(self, evaluator: Evaluator, expression: str, context: Any):
        self.evaluator = evaluator
        self.parameters = evaluator.parameters
        self.expression = expression
        self.context = context
        self.variables: VariableSet | None = as_variable_set(context)
        self.stack: list[_PendingOperator | _BracketFrame] = []
        self.values: list[Any] = []
        self.previous: Token | None = None
        self.pending_function: tuple[Function, Token] | None = None

    def run(self) -> Any:
        for token in Tokenizer(self.expression, self.parameters):
            if self.previous is not None and self.previous.type == TokenType.FUNCTION:
                if token.type != TokenType.OPEN_BRACKET:
                    self._malformed(f"Expected '(' after function '{self.previous.text}'", token)
            method = getattr(self, f"_on_{token.type.name.lower()}")
            method(token)
            self.previous = token
        return self._finish()

    # -------------------------------------------------------------------------
    # Token handlers
    # -------------------------------------------------------------------------

    def _on_literal(self, token: Token) -> None:
        self._expect_operand(token)
        self._push_value(self._call(token, self.evaluator.to_value, token.text, self.context))

    def _on_identifier(self, token: Token) -> None:
        self._expect_operand(token)
        name = token.text
        constant = self.parameters.get_constant(name)
        if constant is not None:
            value = self._call(token, self.evaluator.evaluate_constant, constant, self.context)
        else:
            value = UNDEFINED
            if self.variables is not None:
                value = self._call(token, self.variables.resolve, name)
            if value is UNDEFINED:
                value = self._call(token, self.evaluator.resolve_unknown, name, self.context)
        self._push_value(value)

    def _on_function(self, token: Token) -> None:
        self._expect_operand(token)
        function = self.parameters.get_function(token.text)
        if function is None:
            if self._names_value(token):
                # "x (1)" with x bound: a value followed by a bracket
                end = token.position + len(token.text)
                rest = self.expression[end:]
                raise MalformedExpressionError(
                    f"Missing operator between '{token.text}' and its bracket",
                    end + len(rest) - len(rest.lstrip()),
                    self.expression,
                )
            raise UnknownFunctionError(
                f"Unknown function '{token.text}'", token.position, self.expression
            )
        self.pending_function = (function, token)

    def _on_open_bracket(self, token: Token) -> None:
        if self.pending_function is not None:
            function, function_token = self.pending_function
            self.pending_function = None
            bracket = self.parameters.function_bracket_opened_by(token.text)
            if bracket is None:
                self._malformed(
                    f"'{token.text}' cannot open the arguments of '{function.name}'", token
                )
            self.stack.append(
                _BracketFrame(bracket, token, len(self.values), function, function_token)
            )
            return

        self._expect_operand(token)
        bracket = self.parameters.expression_bracket_opened_by(token.text)
        if bracket is None:
            self._malformed(f"'{token.text}' can only open a function argument list", token)
        self.stack.append(_BracketFrame(bracket, token, len(self.values)))

    def _on_close_bracket(self, token: Token) -> None:
        frame = self._innermost_frame()
        if frame is None:
            raise UnmatchedBracketError(
                f"'{token.text}' has no matching open bracket", token.position, self.expression
            )
        if frame.bracket.close != token.text:
            raise UnmatchedBracketError(
                f"'{token.text}' cannot close '{frame.bracket.open}' opened at position "
                f"{frame.token.position}",
                token.position,
                self.expression,
            )

        if self.previous is frame.token:
            if frame.function is None:
                self._malformed("Empty brackets", token)
            count = 0
        elif self.previous.type == TokenType.SEPARATOR:
            self._malformed("Empty function argument", token)
        elif not self.previous.ends_operand:
            self._malformed(f"Missing operand before '{token.text}'", token)
        else:
            count = frame.separators + 1

        self._reduce_to_frame()
        self.stack.pop()

        if frame.function is None:
            return

        function = frame.function
        if len(self.values) - frame.base != count:
            self._malformed(f"Malformed arguments to function '{function.name}'", token)
        if not function.accepts(count):
            raise ArityMismatchError(
                f"Function '{function.name}' expects {function.describe_arity()} "
                f"argument(s), got {count}",
                frame.function_token.position,
                self.expression,
            )
        arguments = self.values[frame.base:]
        del self.values[frame.base:]
        self._push_value(
            self._call(
                frame.function_token,
                self.evaluator.evaluate_function,
                function,
                arguments,
                self.context,
            )
        )

    def _on_separator(self, token: Token) -> None:
        frame = self._innermost_frame()
        if frame is None or frame.function is None:
            raise UnexpectedSeparatorError(
                f"'{token.text}' outside of a function argument list",
                token.position,
                self.expression,
            )
        if self.previous is frame.token or self.previous.type == TokenType.SEPARATOR:
            self._malformed("Empty function argument", token)
        if not self.previous.ends_operand:
            self._malformed(f"Missing operand before '{token.text}'", token)

        self._reduce_to_frame()
        frame.separators += 1
        if len(self.values) - frame.base != frame.separators:
            self._malformed(f"Malformed arguments to function '{frame.function.name}'", token)

    def _on_operator(self, token: Token) -> None:
        if self.previous is None or not self.previous.ends_operand:
            operator = self.parameters.get_operator(token.text, 1)
            if operator is None:
                raise UnknownOperatorError(
                    f"'{token.text}' is not a unary operator", token.position, self.expression
                )
            # A prefix operator has no left operand, so nothing can be reduced yet.
            self.stack.append(_PendingOperator(operator, token))
            return

        operator = self.parameters.get_operator(token.text, 2)
        if operator is None:
            raise UnknownOperatorError(
                f"'{token.text}' is not a binary operator", token.position, self.expression
            )
        while self.stack and isinstance(self.stack[-1], _PendingOperator):
            top = self.stack[-1].operator
            if operator.associativity == Associativity.LEFT:
                reduce = top.precedence >= operator.precedence
            else:
                reduce = top.precedence > operator.precedence
            if not reduce:
                break
            self._reduce()
        self.stack.append(_PendingOperator(operator, token))

    def _finish(self) -> Any:
        if self.previous is None:
            raise MalformedExpressionError("Empty expression", 0, self.expression)

        for entry in reversed(self.stack):
            if isinstance(entry, _BracketFrame):
                raise UnmatchedBracketError(
                    f"'{entry.bracket.open}' is never closed",
                    entry.token.position,
                    self.expression,
                )
        if not self.previous.ends_operand:
            self._malformed("Unexpected end of expression", self.previous)

        while self.stack:
            self._reduce()
        if len(self.values) != 1:
            raise MalformedExpressionError(
                f"Expression leaves {len(self.values)} values instead of one",
                None,
                self.expression,
            )
        return self.values[0]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _innermost_frame(self) -> _BracketFrame | None:
        for entry in reversed(self.stack):
            if isinstance(entry, _BracketFrame):
                return entry
        return None

    def _reduce_to_frame(self) -> None:
        while not isinstance(self.stack[-1], _BracketFrame):
            self._reduce()

    def _reduce(self) -> None:
        """Pop the top operator and replace its operands by its result."""
        pending = self.stack.pop()
        operator = pending.operator
        frame = self._innermost_frame()
        floor = frame.base if frame is not None else 0
        if len(self.values) - floor < operator.arity:
            self._malformed(f"Missing operand for {operator}", pending.token)
        operands = self.values[-operator.arity:]
        del self.values[-operator.arity:]
        self._push_value(
            self._call(
                pending.token, self.evaluator.evaluate_operator, operator, operands, self.context
            )
        )

    def _push_value(self, value: Any) -> None:
        self.values.append(value)

    def _names_value(self, token: Token) -> bool:
        """Whether a name resolves as a constant or a variable."""
        if self.parameters.get_constant(token.text) is not None:
            return True
        if self.variables is None:
            return False
        return self._call(token, self.variables.resolve, token.text) is not UNDEFINED

    def _expect_operand(self, token: Token) -> None:
        if self.previous is not None and self.previous.ends_operand:
            self._malformed(f"Missing operator before '{token.text}'", token)

    def _malformed(self, message: str, token: Token) -> None:
        raise MalformedExpressionError(message, token.position, self.expression)

    def _call(self, token: Token, callback: Callable[..., Any], *args: Any) -> Any:
        """Invoke an evaluator callback, attaching the token position to failures."""
        try:
            return callback(*args)
        except EvaluationError as e:
            if e.position is None:
                e.position = token.position
            if e.expression is None:
                e.expression = self.expression
            raise
        except Exception as e:
            raise HostCallbackError(
                f"Error evaluating '{token.text}': {e}", token.position, self.expression
            ) from e

"""Error types raised by infixeval.

Two families:
- GrammarError: raised while a Parameters registry is being built
- EvaluationError: raised while an expression is tokenized or evaluated
"""


class GrammarError(ValueError):
    """Invalid grammar definition."""
    pass


class DuplicateDefinitionError(GrammarError):
    """An operator, function or constant would be ambiguous."""
    pass


class FrozenRegistryError(GrammarError):
    """A Parameters registry was modified after it was put in use."""
    pass


class EvaluationError(Exception):
    """Error during expression evaluation.

    Attributes:
        message: Human-readable description, without position information
        position: Character offset in the expression, or None if unknown
        expression: The expression being evaluated, when known
    """

    def __init__(
        self,
        message: str,
        position: int | None = None,
        expression: str | None = None,
    ):
        self.message = message
        self.position = position
        self.expression = expression
        super().__init__(message)

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} at position {self.position}"


class LexicalError(EvaluationError):
    """Unrecognized character or symbol."""
    pass


class UnknownOperatorError(EvaluationError):
    """Operator symbol not registered for the required arity."""
    pass


class UnknownFunctionError(EvaluationError):
    """Function name not registered."""
    pass


class UnknownConstantError(EvaluationError):
    """Constant registered but not handled by the evaluator."""
    pass


class ArityMismatchError(EvaluationError):
    """Function called with an argument count outside its declared range."""
    pass


class UnmatchedBracketError(EvaluationError):
    """Open bracket never closed, close bracket never opened, or wrong kind."""
    pass


class UnexpectedSeparatorError(EvaluationError):
    """Argument separator outside of function brackets."""
    pass


class UnknownVariableError(EvaluationError):
    """Identifier that is neither a constant nor a resolvable variable."""

    def __init__(
        self,
        name: str,
        position: int | None = None,
        expression: str | None = None,
    ):
        self.name = name
        super().__init__(f"Unknown variable '{name}'", position, expression)


class MalformedExpressionError(EvaluationError):
    """Empty input, dangling operator, missing operand or operator."""
    pass


class HostCallbackError(EvaluationError):
    """A failure raised by an evaluator callback.

    The original exception is available as ``__cause__``.
    """
    pass

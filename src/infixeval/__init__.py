"""Configurable infix expression evaluation.

This package provides:
- Grammar elements: Operator, Function, Constant, BracketPair
- Parameters: the registry defining the grammar of one evaluator
- Tokenizer: splits expression strings into tokens
- Evaluator: single-pass shunting-yard evaluation, extended by hosts
- DoubleEvaluator, ObjectEvaluator: bundled hosts
- Variable sets: how identifiers resolve to values
"""

from infixeval.config import grammar_from_dict, load_grammar
from infixeval.double_evaluator import DoubleEvaluator, Style
from infixeval.errors import (
    ArityMismatchError,
    DuplicateDefinitionError,
    EvaluationError,
    FrozenRegistryError,
    GrammarError,
    HostCallbackError,
    LexicalError,
    MalformedExpressionError,
    UnexpectedSeparatorError,
    UnknownConstantError,
    UnknownFunctionError,
    UnknownOperatorError,
    UnknownVariableError,
    UnmatchedBracketError,
)
from infixeval.evaluator import Evaluator
from infixeval.grammar import (
    ANGLES,
    BRACES,
    BRACKETS,
    PARENTHESES,
    Associativity,
    BracketPair,
    Constant,
    Function,
    Operator,
)
from infixeval.lexer import Token, Tokenizer, TokenType
from infixeval.object_evaluator import ObjectEvaluator, evaluate_bool, evaluate_record
from infixeval.parameters import Parameters
from infixeval.values import ValueTypeError, classify_literal
from infixeval.variables import (
    UNDEFINED,
    ChainedVariableSet,
    StaticVariableSet,
    VariableSet,
)

__all__ = [
    # Grammar
    "ANGLES",
    "BRACES",
    "BRACKETS",
    "PARENTHESES",
    "Associativity",
    "BracketPair",
    "Constant",
    "Function",
    "Operator",
    "Parameters",
    "grammar_from_dict",
    "load_grammar",
    # Tokenizer
    "Token",
    "Tokenizer",
    "TokenType",
    # Evaluators
    "DoubleEvaluator",
    "Evaluator",
    "ObjectEvaluator",
    "Style",
    "evaluate_bool",
    "evaluate_record",
    # Values and variables
    "UNDEFINED",
    "ChainedVariableSet",
    "StaticVariableSet",
    "ValueTypeError",
    "VariableSet",
    "classify_literal",
    # Errors
    "ArityMismatchError",
    "DuplicateDefinitionError",
    "EvaluationError",
    "FrozenRegistryError",
    "GrammarError",
    "HostCallbackError",
    "LexicalError",
    "MalformedExpressionError",
    "UnexpectedSeparatorError",
    "UnknownConstantError",
    "UnknownFunctionError",
    "UnknownOperatorError",
    "UnknownVariableError",
    "UnmatchedBracketError",
]

"""Tokenizer for infix expressions.

Splits an expression into tokens using the symbols registered in a
Parameters instance. Tokens are produced lazily, one per step.

Token types:
- Values: LITERAL (numbers, quoted strings), IDENTIFIER (constants, variables)
- FUNCTION: a name followed by an open function bracket
- OPERATOR: a registered operator symbol, arity still undecided
- Delimiters: OPEN_BRACKET, CLOSE_BRACKET, SEPARATOR
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto

from infixeval.errors import LexicalError
from infixeval.parameters import Parameters
from infixeval.values import NUMBER_PATTERN


class TokenType(Enum):
    """Types of tokens in an expression."""

    LITERAL = auto()
    IDENTIFIER = auto()
    FUNCTION = auto()
    OPERATOR = auto()
    OPEN_BRACKET = auto()
    CLOSE_BRACKET = auto()
    SEPARATOR = auto()


@dataclass(frozen=True)
class Token:
    """A single token.

    Attributes:
        type: The token type
        text: The source substring (string literals keep their quotes)
        position: Character offset in the source string
    """

    type: TokenType
    text: str
    position: int

    @property
    def ends_operand(self) -> bool:
        """Whether a complete operand ends with this token."""
        return self.type in (TokenType.LITERAL, TokenType.IDENTIFIER, TokenType.CLOSE_BRACKET)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.text!r}, pos={self.position})"


WHITESPACE = re.compile(r"\s+")
STRING = re.compile(r""""(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'""", re.DOTALL)
IDENTIFIER = re.compile(r"[^\W\d]\w*")


class Tokenizer:
    """Tokenizer driven by a Parameters registry.

    Usage:
        for token in Tokenizer("max(a, 2) >= 3", params):
            print(token)

    Iterating again restarts from the beginning of the source.
    """

    def __init__(self, source: str, parameters: Parameters):
        self.source = source
        self.parameters = parameters
        self._symbols = parameters.symbols()
        self._function_opens = [p.open for p in parameters.function_brackets]

    def __iter__(self) -> Iterator[Token]:
        position = 0
        length = len(self.source)
        while True:
            match = WHITESPACE.match(self.source, position)
            if match:
                position = match.end()
            if position >= length:
                return
            token = self._next_token(position)
            position += len(token.text)
            yield token

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return the list of tokens."""
        return list(self)

    def _next_token(self, position: int) -> Token:
        symbol = self._match_symbol(position)
        if symbol is not None:
            return Token(self._symbol_type(symbol), symbol, position)

        match = NUMBER_PATTERN.match(self.source, position)
        # Signs belong to unary operators, never to the literal itself.
        if match and self.source[position] not in "+-":
            return Token(TokenType.LITERAL, match.group(), position)

        if self.source[position] in "\"'":
            match = STRING.match(self.source, position)
            if not match:
                raise LexicalError("Unterminated string literal", position, self.source)
            return Token(TokenType.LITERAL, match.group(), position)

        match = IDENTIFIER.match(self.source, position)
        if match:
            name = match.group()
            token_type = (
                TokenType.FUNCTION if self._opens_function(match.end()) else TokenType.IDENTIFIER
            )
            return Token(token_type, name, position)

        raise LexicalError(
            f"Unexpected character '{self.source[position]}'", position, self.source
        )

    def _match_symbol(self, position: int) -> str | None:
        """Longest registered symbol starting at ``position``."""
        for symbol in self._symbols:
            if not self.source.startswith(symbol, position):
                continue
            end = position + len(symbol)
            # "or" must not match the start of "order"
            if symbol[-1].isalnum() or symbol[-1] == "_":
                if end < len(self.source) and (
                    self.source[end].isalnum() or self.source[end] == "_"
                ):
                    continue
            return symbol
        return None

    def _symbol_type(self, symbol: str) -> TokenType:
        if symbol == self.parameters.function_argument_separator:
            return TokenType.SEPARATOR
        if self.parameters.is_open_bracket(symbol):
            return TokenType.OPEN_BRACKET
        if self.parameters.is_close_bracket(symbol):
            return TokenType.CLOSE_BRACKET
        return TokenType.OPERATOR

    def _opens_function(self, position: int) -> bool:
        match = WHITESPACE.match(self.source, position)
        if match:
            position = match.end()
        return any(self.source.startswith(s, position) for s in self._function_opens)

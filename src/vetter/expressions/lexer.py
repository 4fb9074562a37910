"""Lexer for the vetter expression language.

Turns a validation expression such as ``is_int(.) && . > 0`` into tokens.

Token types:
- Literals: NUMBER, STRING, BOOLEAN, NULL
- Names: IDENTIFIER (variables, tokens, function names)
- Operators: comparison, logical, arithmetic, membership
- Punctuation: parentheses, brackets, braces, COMMA, DOT, COLON

A lone ``.`` is lexed as DOT; the parser decides whether it is the
placeholder for the value under validation or a member access.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


class TokenType(Enum):
    """Types of tokens in the expression language."""

    # Literals
    NUMBER = auto()
    STRING = auto()
    BOOLEAN = auto()
    NULL = auto()

    IDENTIFIER = auto()

    # Comparison
    EQ = auto()          # ==
    NEQ = auto()         # !=
    LT = auto()          # <
    LTE = auto()         # <=
    GT = auto()          # >
    GTE = auto()         # >=

    # Logical
    AND = auto()         # && or and
    OR = auto()          # || or or
    NOT = auto()         # ! or not

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    MODULO = auto()

    # Membership
    IN = auto()          # in
    NOT_IN = auto()      # not in

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    DOT = auto()
    COLON = auto()

    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A single lexed token.

    Attributes:
        type: The token type
        value: Literal value, identifier name or operator text
        position: Offset of the first character in the source
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    type: TokenType
    value: str | int | float | bool | None
    position: int
    line: int = 1
    column: int = 1

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"


class LexerError(Exception):
    """Raised when the source contains a character no token can start with."""

    def __init__(self, message: str, position: int, line: int = 1, column: int = 1):
        self.position = position
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, column {column}")


# Longest operators first; `not in` must precede the identifier rule.
TOKEN_PATTERNS = [
    (r"\s+", None),
    (r"(?i:not)\s+(?i:in)\b", TokenType.NOT_IN),
    (r"==", TokenType.EQ),
    (r"!=", TokenType.NEQ),
    (r"<=", TokenType.LTE),
    (r">=", TokenType.GTE),
    (r"&&", TokenType.AND),
    (r"\|\|", TokenType.OR),
    (r"<", TokenType.LT),
    (r">", TokenType.GT),
    (r"!", TokenType.NOT),
    (r"\+", TokenType.PLUS),
    (r"-", TokenType.MINUS),
    (r"\*", TokenType.MULTIPLY),
    (r"/", TokenType.DIVIDE),
    (r"%", TokenType.MODULO),
    (r"\(", TokenType.LPAREN),
    (r"\)", TokenType.RPAREN),
    (r"\[", TokenType.LBRACKET),
    (r"\]", TokenType.RBRACKET),
    (r"\{", TokenType.LBRACE),
    (r"\}", TokenType.RBRACE),
    (r",", TokenType.COMMA),
    (r":", TokenType.COLON),
    (r"\d+\.\d+([eE][+-]?\d+)?", TokenType.NUMBER),
    (r"\d+([eE][+-]?\d+)?", TokenType.NUMBER),
    (r"\.", TokenType.DOT),
    (r'"([^"\\]|\\.)*"', TokenType.STRING),
    (r"'([^'\\]|\\.)*'", TokenType.STRING),
    (r"[a-zA-Z_][a-zA-Z0-9_]*", TokenType.IDENTIFIER),
]

KEYWORDS = {
    "true": (TokenType.BOOLEAN, True),
    "false": (TokenType.BOOLEAN, False),
    "null": (TokenType.NULL, None),
    "and": (TokenType.AND, "and"),
    "or": (TokenType.OR, "or"),
    "not": (TokenType.NOT, "not"),
    "in": (TokenType.IN, "in"),
}

ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}

_COMPILED = [(re.compile(pattern), token_type) for pattern, token_type in TOKEN_PATTERNS]


class Lexer:
    """Tokenizer for the expression language.

    Usage:
        tokens = Lexer("is_int(.) && . > 0").tokenize()
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.line = 1
        self.column = 1

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break

    def next_token(self) -> Token:
        """Return the next token, skipping whitespace."""
        while self.position < len(self.source):
            for pattern, token_type in _COMPILED:
                match = pattern.match(self.source, self.position)
                if match:
                    break
            else:
                raise LexerError(
                    f"Unexpected character '{self.source[self.position]}'",
                    self.position,
                    self.line,
                    self.column,
                )

            text = match.group()
            start = (self.position, self.line, self.column)
            self._advance(len(text))

            if token_type is None:
                continue
            kind, value = self._token_value(token_type, text)
            return Token(kind, value, *start)

        return Token(TokenType.EOF, None, self.position, self.line, self.column)

    def _token_value(
        self, token_type: TokenType, text: str
    ) -> tuple[TokenType, str | int | float | bool | None]:
        # Returns (type, value): keywords can change the token type.
        if token_type == TokenType.NUMBER:
            if "." in text or "e" in text.lower():
                return token_type, float(text)
            return token_type, int(text)
        if token_type == TokenType.STRING:
            return token_type, self._unescape(text[1:-1])
        if token_type == TokenType.NOT_IN:
            return token_type, "not in"
        if token_type == TokenType.IDENTIFIER and text.lower() in KEYWORDS:
            return KEYWORDS[text.lower()]
        return token_type, text

    def _advance(self, count: int) -> None:
        for char in self.source[self.position:self.position + count]:
            if char == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.position += count

    @staticmethod
    def _unescape(text: str) -> str:
        return re.sub(r"\\(.)", lambda m: ESCAPES.get(m.group(1), m.group(1)), text)

    def tokenize(self) -> list[Token]:
        """Tokenize the whole source, EOF token included."""
        return list(self)

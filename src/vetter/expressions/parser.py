"""Parser for the vetter expression language.

Recursive descent over the token stream, one method per precedence tier
for the unary/postfix/primary levels and a single table-driven loop for
the binary operators.

Binary operator precedence (lowest to highest):
1. || (or)
2. && (and)
3. == != < <= > >= in not in
4. + -
5. * / %

Unary ``!``/``-`` bind tighter than any binary operator, postfix member
access, indexing and calls tighter still. All binary operators are left
associative, so ``a && b && c`` parses as ``(a && b) && c``.
"""

from dataclasses import dataclass
from typing import Any

from vetter.expressions.lexer import Lexer, Token, TokenType


# -----------------------------------------------------------------------------
# AST Node Types
# -----------------------------------------------------------------------------


@dataclass
class ASTNode:
    """Base class for AST nodes."""
    pass


@dataclass
class Literal(ASTNode):
    """A literal value (number, string, boolean, null)."""
    value: Any


@dataclass
class Identifier(ASTNode):
    """A reference to a name in the binding context."""
    name: str


@dataclass
class Placeholder(ASTNode):
    """The ``.`` standing for the value under validation."""
    pass


@dataclass
class MemberAccess(ASTNode):
    """Dot notation member access (e.g., config.port, ..name)."""
    object: ASTNode
    member: str


@dataclass
class IndexAccess(ASTNode):
    """Bracket notation index access (e.g., items[0], data["key"])."""
    object: ASTNode
    index: ASTNode


@dataclass
class BinaryOp(ASTNode):
    """Binary operation (e.g., a + b, x == y)."""
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass
class UnaryOp(ASTNode):
    """Unary operation (e.g., !x, -y)."""
    operator: str
    operand: ASTNode


@dataclass
class FunctionCall(ASTNode):
    """Function call (e.g., len(.), is_int(x))."""
    name: str
    arguments: list[ASTNode]


@dataclass
class ArrayLiteral(ASTNode):
    """Array literal (e.g., [1, 2, 3])."""
    elements: list[ASTNode]


@dataclass
class ObjectLiteral(ASTNode):
    """Object literal (e.g., {"key": value})."""
    pairs: dict[str, ASTNode]


# Binary operator tiers, lowest precedence first.
BINARY_TIERS: list[dict[TokenType, str]] = [
    {TokenType.OR: "||"},
    {TokenType.AND: "&&"},
    {
        TokenType.EQ: "==",
        TokenType.NEQ: "!=",
        TokenType.LT: "<",
        TokenType.LTE: "<=",
        TokenType.GT: ">",
        TokenType.GTE: ">=",
        TokenType.IN: "in",
        TokenType.NOT_IN: "not in",
    },
    {TokenType.PLUS: "+", TokenType.MINUS: "-"},
    {TokenType.MULTIPLY: "*", TokenType.DIVIDE: "/", TokenType.MODULO: "%"},
]

# Operator text -> precedence (1 = loosest). Unary is one above the last tier.
PRECEDENCE: dict[str, int] = {
    op: level
    for level, tier in enumerate(BINARY_TIERS, start=1)
    for op in tier.values()
}
UNARY_PRECEDENCE = len(BINARY_TIERS) + 1


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------


class ParseError(Exception):
    """Error during parsing."""

    def __init__(self, message: str, token: Token):
        self.token = token
        super().__init__(f"{message} at position {token.position}")


class Parser:
    """Recursive descent parser for the expression language.

    Usage:
        ast = Parser("is_int(.) && . > 0").parse()
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens = Lexer(source).tokenize()
        self.position = 0

    def parse(self) -> ASTNode:
        """Parse the expression and return the AST root."""
        if self._current().type == TokenType.EOF:
            raise ParseError("Empty expression", self._current())

        ast = self._parse_binary(0)

        if self._current().type != TokenType.EOF:
            raise ParseError(
                f"Unexpected token '{self._current().value}'", self._current()
            )
        return ast

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        if self.position >= len(self.tokens):
            return Token(TokenType.EOF, None, len(self.source))
        return self.tokens[self.position]

    def _advance(self) -> Token:
        token = self._current()
        self.position += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._current().type == token_type:
            return self._advance()
        raise ParseError(message, self._current())

    # -------------------------------------------------------------------------
    # Parsing methods
    # -------------------------------------------------------------------------

    def _parse_expression(self) -> ASTNode:
        return self._parse_binary(0)

    def _parse_binary(self, tier: int) -> ASTNode:
        """Parse a left-associative chain of the operators in ``tier``."""
        if tier == len(BINARY_TIERS):
            return self._parse_unary()

        operators = BINARY_TIERS[tier]
        left = self._parse_binary(tier + 1)
        while self._current().type in operators:
            op = operators[self._advance().type]
            right = self._parse_binary(tier + 1)
            left = BinaryOp(op, left, right)
        return left

    def _parse_unary(self) -> ASTNode:
        if self._match(TokenType.NOT):
            self._advance()
            return UnaryOp("!", self._parse_unary())
        if self._match(TokenType.MINUS):
            self._advance()
            return UnaryOp("-", self._parse_unary())
        return self._parse_postfix()

    def _parse_postfix(self) -> ASTNode:
        expr = self._parse_primary()

        while True:
            if self._match(TokenType.DOT):
                self._advance()
                member = self._consume(
                    TokenType.IDENTIFIER, "Expected identifier after '.'"
                )
                expr = MemberAccess(expr, str(member.value))
            elif self._match(TokenType.LBRACKET):
                self._advance()
                index = self._parse_expression()
                self._consume(TokenType.RBRACKET, "Expected ']' after index")
                expr = IndexAccess(expr, index)
            else:
                return expr

    def _parse_primary(self) -> ASTNode:
        token = self._current()

        if token.type in (
            TokenType.NUMBER, TokenType.STRING, TokenType.BOOLEAN, TokenType.NULL
        ):
            self._advance()
            return Literal(token.value)

        if token.type == TokenType.DOT:
            self._advance()
            return Placeholder()

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            if self._match(TokenType.LPAREN):
                return FunctionCall(str(token.value), self._parse_sequence(
                    TokenType.LPAREN, TokenType.RPAREN, "arguments"
                ))
            return Identifier(str(token.value))

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._consume(TokenType.RPAREN, "Expected ')' after expression")
            return expr

        if token.type == TokenType.LBRACKET:
            return ArrayLiteral(self._parse_sequence(
                TokenType.LBRACKET, TokenType.RBRACKET, "array elements"
            ))

        if token.type == TokenType.LBRACE:
            return self._parse_object_literal()

        raise ParseError(f"Unexpected token '{token.value}'", token)

    def _parse_sequence(
        self, opener: TokenType, closer: TokenType, what: str
    ) -> list[ASTNode]:
        """Parse a comma separated list between ``opener`` and ``closer``."""
        self._consume(opener, f"Expected '{opener.name.lower()}'")
        items: list[ASTNode] = []
        if not self._match(closer):
            items.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                self._advance()
                items.append(self._parse_expression())
        self._consume(closer, f"Expected closing bracket after {what}")
        return items

    def _parse_object_literal(self) -> ObjectLiteral:
        self._consume(TokenType.LBRACE, "Expected '{'")
        pairs: dict[str, ASTNode] = {}

        while not self._match(TokenType.RBRACE):
            if pairs:
                self._consume(TokenType.COMMA, "Expected ',' between object entries")
            if not self._match(TokenType.STRING, TokenType.IDENTIFIER):
                raise ParseError(
                    "Expected string or identifier as object key", self._current()
                )
            key = str(self._advance().value)
            self._consume(TokenType.COLON, "Expected ':' after object key")
            pairs[key] = self._parse_expression()

        self._consume(TokenType.RBRACE, "Expected '}' after object")
        return ObjectLiteral(pairs)


def parse(source: str) -> ASTNode:
    """Parse an expression string into its AST root."""
    return Parser(source).parse()

"""Turn a validation target into the tree the engine evaluates.

The target is an ordinary expression. Its top-level ``&&``/``||`` chain
becomes Combinator nodes; everything below that is a Leaf. A leaf that
mentions ``.`` is a predicate, any other leaf is a template:

    "is_int(.) || 0.0"
    -> Combinator(OR, (Leaf(PREDICATE, is_int(.)), Leaf(TEMPLATE, 0.0)))

Names bound to ValidationTokens (in the context, or predefined) are
expanded before classification.
"""

from typing import Any, Mapping

from vetter.config import Settings
from vetter.errors import ContractError, TokenError
from vetter.expressions import (
    ASTNode,
    BinaryOp,
    Identifier,
    contains_placeholder,
    parse,
    transform,
)
from vetter.tokens import PREDEFINED_TOKENS, ValidationToken
from vetter.types import Combinator, Leaf, Mode, Node

COMBINATORS = {"&&": Mode.AND, "||": Mode.OR}


def parse_target(
    target: str | ASTNode | ValidationToken,
    context: Mapping[str, Any] | None = None,
    settings: Settings | None = None,
) -> Node:
    """Parse a validation target into a Node tree.

    Args:
        target: Expression source, a parsed expression, or a token
        context: Names visible to the target (tokens are looked up here
            before the predefined ones)
        settings: Limits for token substitution

    Raises:
        ContractError: If target is none of the accepted types
        ParseError, LexerError: If the target source is malformed
        TokenError: If token substitution loops or nests too deeply
    """
    message = None
    if isinstance(target, ValidationToken):
        message = target.message
        ast = parse(target.expression)
    elif isinstance(target, str):
        ast = parse(target)
    elif isinstance(target, ASTNode):
        ast = target
    else:
        raise ContractError(
            "Validation target must be an expression string, an ASTNode or a "
            f"ValidationToken, got {type(target).__name__}"
        )
    return TargetParser(context or {}, settings or Settings()).build(ast, message)


class TargetParser:
    """Builds Node trees, expanding tokens as it goes."""

    def __init__(self, context: Mapping[str, Any], settings: Settings):
        self.context = context
        self.settings = settings

    def build(
        self,
        ast: ASTNode,
        message: str | None = None,
        depth: int = 0,
        seen: frozenset[str] = frozenset(),
    ) -> Node:
        if isinstance(ast, BinaryOp) and ast.operator in COMBINATORS:
            return Combinator(
                COMBINATORS[ast.operator],
                (
                    self.build(ast.left, message, depth, seen),
                    self.build(ast.right, message, depth, seen),
                ),
            )

        token = self.lookup_token(ast)
        if token is not None:
            name = ast.name
            self._check_expansion(name, depth, seen)
            return self.build(
                parse(token.expression),
                token.message or message,
                depth + 1,
                seen | {name},
            )

        expression = self._inline_tokens(ast, depth, seen)
        mode = Mode.PREDICATE if contains_placeholder(expression) else Mode.TEMPLATE
        return Leaf(mode, expression, message)

    def lookup_token(self, ast: ASTNode) -> ValidationToken | None:
        """The token ``ast`` names, if it is a bare name bound to one."""
        if not isinstance(ast, Identifier):
            return None
        if ast.name in self.context:
            value = self.context[ast.name]
        else:
            value = PREDEFINED_TOKENS.get(ast.name)
        return value if isinstance(value, ValidationToken) else None

    def _inline_tokens(
        self, ast: ASTNode, depth: int, seen: frozenset[str]
    ) -> ASTNode:
        # Tokens used inside a leaf become part of that leaf's expression;
        # their messages do not apply.
        def expand(node: ASTNode) -> ASTNode | None:
            token = self.lookup_token(node)
            if token is None:
                return None
            self._check_expansion(node.name, depth, seen)
            return self._inline_tokens(
                parse(token.expression), depth + 1, seen | {node.name}
            )

        return transform(ast, expand)

    def _check_expansion(self, name: str, depth: int, seen: frozenset[str]) -> None:
        if name in seen:
            raise TokenError(f"Token `{name}` refers to itself")
        if depth >= self.settings.max_sub_depth:
            raise TokenError(
                f"Token substitution deeper than {self.settings.max_sub_depth} "
                f"levels while expanding `{name}`"
            )

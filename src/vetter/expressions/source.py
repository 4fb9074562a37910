"""Render expression ASTs back to source text, and walk them.

Rendering is canonical rather than a copy of the original text: spacing is
normalised and parentheses are emitted only where precedence needs them.
Diagnostics use this to quote the failing expression with the ``.``
placeholder replaced by the expression being validated.
"""

import json
from dataclasses import fields, is_dataclass, replace
from typing import Callable, Iterator

from vetter.expressions.parser import (
    ASTNode,
    ArrayLiteral,
    BinaryOp,
    FunctionCall,
    Identifier,
    IndexAccess,
    Literal,
    MemberAccess,
    ObjectLiteral,
    Placeholder,
    PRECEDENCE,
    UNARY_PRECEDENCE,
    UnaryOp,
)

# Anything that is not a binary or unary operation renders atomically.
ATOM_PRECEDENCE = UNARY_PRECEDENCE + 1


def to_source(node: ASTNode, placeholder: ASTNode | None = None) -> str:
    """Render ``node`` as expression text.

    Args:
        node: The AST to render
        placeholder: If given, rendered in place of every ``.``

    Example:
        to_source(parse("(. > 0) && ok"), Identifier("x"))  # 'x > 0 && ok'
    """
    return _render(node, placeholder)[0]


def _render(node: ASTNode, placeholder: ASTNode | None) -> tuple[str, int]:
    # Returns (text, precedence of the outermost operator).
    if isinstance(node, Placeholder):
        if placeholder is None:
            return ".", ATOM_PRECEDENCE
        return _render(placeholder, None)

    if isinstance(node, BinaryOp):
        level = PRECEDENCE[node.operator]
        left = _wrap(node.left, placeholder, level)
        # Left associative: an equal-precedence right operand needs parens.
        right = _wrap(node.right, placeholder, level + 1)
        return f"{left} {node.operator} {right}", level

    if isinstance(node, UnaryOp):
        operand = _wrap(node.operand, placeholder, UNARY_PRECEDENCE)
        return f"{node.operator}{operand}", UNARY_PRECEDENCE

    if isinstance(node, Literal):
        return _literal(node.value), ATOM_PRECEDENCE
    if isinstance(node, Identifier):
        return node.name, ATOM_PRECEDENCE
    if isinstance(node, MemberAccess):
        obj = _wrap(node.object, placeholder, ATOM_PRECEDENCE)
        return f"{obj}.{node.member}", ATOM_PRECEDENCE
    if isinstance(node, IndexAccess):
        obj = _wrap(node.object, placeholder, ATOM_PRECEDENCE)
        return f"{obj}[{to_source(node.index, placeholder)}]", ATOM_PRECEDENCE
    if isinstance(node, FunctionCall):
        args = ", ".join(to_source(a, placeholder) for a in node.arguments)
        return f"{node.name}({args})", ATOM_PRECEDENCE
    if isinstance(node, ArrayLiteral):
        items = ", ".join(to_source(e, placeholder) for e in node.elements)
        return f"[{items}]", ATOM_PRECEDENCE
    if isinstance(node, ObjectLiteral):
        pairs = ", ".join(
            f"{json.dumps(k)}: {to_source(v, placeholder)}"
            for k, v in node.pairs.items()
        )
        return "{" + pairs + "}", ATOM_PRECEDENCE

    raise TypeError(f"Cannot render node type: {type(node).__name__}")


def _wrap(node: ASTNode, placeholder: ASTNode | None, minimum: int) -> str:
    text, level = _render(node, placeholder)
    if level < minimum:
        return f"({text})"
    return text


def _literal(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    return repr(value)


def children(node: ASTNode) -> Iterator[ASTNode]:
    """Yield the direct sub-nodes of ``node``."""
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, ASTNode):
            yield value
        elif isinstance(value, list):
            yield from (v for v in value if isinstance(v, ASTNode))
        elif isinstance(value, dict):
            yield from (v for v in value.values() if isinstance(v, ASTNode))


def walk(node: ASTNode) -> Iterator[ASTNode]:
    """Yield ``node`` and every node below it, depth first."""
    yield node
    for child in children(node):
        yield from walk(child)


def contains_placeholder(node: ASTNode) -> bool:
    """True if ``.`` appears anywhere in the expression."""
    return any(isinstance(n, Placeholder) for n in walk(node))


def transform(node: ASTNode, fn: Callable[[ASTNode], ASTNode | None]) -> ASTNode:
    """Return a copy of ``node`` in which ``fn`` may replace any sub-tree.

    ``fn`` is called on each node before its children; a non-None return
    value replaces that node (and is not descended into). The input tree is
    never mutated.
    """
    replacement = fn(node)
    if replacement is not None:
        return replacement

    changes = {}
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, ASTNode):
            changes[f.name] = transform(value, fn)
        elif isinstance(value, list):
            changes[f.name] = [
                transform(v, fn) if isinstance(v, ASTNode) else v for v in value
            ]
        elif isinstance(value, dict):
            changes[f.name] = {
                k: transform(v, fn) if isinstance(v, ASTNode) else v
                for k, v in value.items()
            }
    if not changes or not is_dataclass(node):
        return node
    return replace(node, **changes)

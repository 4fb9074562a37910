"""Core types for the vetter validation engine.

A parsed validation target is a single tree. Every node carries its own
evaluation mode, so there is no separate mode tree to keep in step:

    Combinator(AND, (Leaf(PREDICATE, is_int(.)), Leaf(PREDICATE, . > 0)))

Evaluating a leaf yields a Result; the engine collects Results in a
ResultList (see ``vetter.results``) and the renderer turns the failing
ones into messages.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Union

from vetter.expressions.parser import ASTNode


class Mode(IntEnum):
    """How a node is evaluated."""

    AND = 1
    OR = 2
    PREDICATE = 10   # expression must evaluate to TRUE
    TEMPLATE = 999   # value must be "alike" the expression's value

    @property
    def is_combinator(self) -> bool:
        return self in (Mode.AND, Mode.OR)


class Outcome(IntEnum):
    """Classification of the value a predicate evaluated to."""

    ALL_TRUE = 1
    CONTAINS_NON_TRUE = 0
    FALSE = -1
    WRONG_TYPE = -2
    NA = -3
    CONTAINS_NA = -4
    ZERO_LENGTH = -5


@dataclass
class Leaf:
    """A predicate or template with no children.

    Attributes:
        mode: Mode.PREDICATE or Mode.TEMPLATE
        expression: The expression to run
        message: Optional message template used when a predicate fails;
            ``{name}`` and ``{expr}`` are substituted
    """

    mode: Mode
    expression: ASTNode
    message: str | None = None


@dataclass
class Combinator:
    """An ``&&`` or ``||`` junction of exactly two nodes."""

    mode: Mode
    children: tuple["Node", ...]


Node = Union[Leaf, Combinator]


@dataclass
class StandardPayload:
    """What a predicate leaf produced, kept for rendering on failure."""

    leaf: Leaf
    value: Any
    outcome: Outcome


@dataclass
class StructuralPayload:
    """What a template leaf produced.

    ``diff`` is the comparator's report; None when the value matched.
    """

    leaf: Leaf
    template: Any
    diff: Any = None


@dataclass
class Result:
    """Outcome of evaluating one leaf."""

    success: bool
    payload: StandardPayload | StructuralPayload

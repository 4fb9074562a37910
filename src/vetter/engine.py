"""Evaluation of a parsed validation target.

The Engine walks the Node tree depth first and left to right. ``&&`` and
``||`` short-circuit: once the newest Result settles the junction, the
right operand is never run, so expressions with side effects run at most
once and only when needed. Each leaf appends exactly one Result.
"""

import logging
from typing import Any

from vetter import alike
from vetter.config import Settings
from vetter.errors import InternalError, ValidationExpressionError
from vetter.expressions import EvaluationContext, Evaluator, to_source
from vetter.results import ResultList
from vetter.types import (
    Combinator,
    Leaf,
    Mode,
    Node,
    Outcome,
    Result,
    StandardPayload,
    StructuralPayload,
)

logger = logging.getLogger(__name__)


def classify(value: Any) -> Outcome:
    """Classify what a predicate evaluated to.

    Booleans and ``None`` are scalars; a list or tuple of booleans and
    ``None`` is a logical vector (length one behaves like a scalar).
    Anything else is the wrong type.
    """
    if value is None:
        return Outcome.NA
    if isinstance(value, bool):
        return Outcome.ALL_TRUE if value else Outcome.FALSE
    if not isinstance(value, (list, tuple)):
        return Outcome.WRONG_TYPE
    if not value:
        return Outcome.ZERO_LENGTH
    if any(v is not None and not isinstance(v, bool) for v in value):
        return Outcome.WRONG_TYPE

    scalar = len(value) == 1
    for v in value:
        if v is None:
            return Outcome.NA if scalar else Outcome.CONTAINS_NA
        if not v:
            return Outcome.FALSE if scalar else Outcome.CONTAINS_NON_TRUE
    return Outcome.ALL_TRUE


class Engine:
    """Evaluates one Node tree against one value.

    Usage:
        engine = Engine(current=5, name="x", variables={})
        engine.evaluate(parse_target(". > 0"))
        engine.results.passed  # True

    Attributes:
        results: Every leaf Result, in evaluation order
    """

    def __init__(
        self,
        current: Any,
        name: str,
        variables: dict[str, Any],
        settings: Settings | None = None,
    ):
        self.current = current
        self.name = name
        self.settings = settings or Settings()
        self.results = ResultList()
        self._evaluator = Evaluator(
            EvaluationContext(variables=variables, current=current)
        )

    def evaluate(self, node: Node, depth: int = 0) -> None:
        """Evaluate ``node`` and its descendants, recording leaf Results."""
        if depth > self.settings.max_depth:
            raise InternalError(
                f"validation target nested deeper than {self.settings.max_depth} levels"
            )

        if isinstance(node, Combinator):
            self._evaluate_combinator(node, depth)
        elif isinstance(node, Leaf):
            if len(self.results) >= self.settings.max_results:
                raise InternalError(
                    f"more than {self.settings.max_results} leaves evaluated"
                )
            self.results.append(self.evaluate_leaf(node))
        else:
            raise InternalError(f"unexpected node type {type(node).__name__}")

    def _evaluate_combinator(self, node: Combinator, depth: int) -> None:
        if node.mode not in (Mode.AND, Mode.OR):
            raise InternalError(f"combinator node has mode {node.mode!r}")
        if len(node.children) != 2:
            raise InternalError(
                f"{node.mode.name} node has {len(node.children)} children, expected 2"
            )

        left, right = node.children
        start = len(self.results)
        self.evaluate(left, depth + 1)

        last = self.results.last()
        if last is None:
            raise InternalError("operand produced no result")
        if node.mode == Mode.AND and not last.success:
            logger.debug("AND short-circuited on failed left operand")
            return
        if node.mode == Mode.OR and last.success:
            logger.debug("OR short-circuited on successful left operand")
            return

        self.evaluate(right, depth + 1)
        if node.mode == Mode.OR and self.results.passed:
            # The right operand rescued the OR: earlier failures no longer count.
            self.results.supersede(start, len(self.results))

    def evaluate_leaf(self, leaf: Leaf) -> Result:
        """Run one predicate or template and wrap the outcome."""
        if leaf.mode not in (Mode.PREDICATE, Mode.TEMPLATE):
            raise InternalError(f"leaf node has mode {leaf.mode!r}")

        value = self._execute(leaf)

        if leaf.mode == Mode.PREDICATE:
            outcome = classify(value)
            logger.debug("Predicate %s -> %s", to_source(leaf.expression), outcome.name)
            return Result(
                outcome == Outcome.ALL_TRUE, StandardPayload(leaf, value, outcome)
            )

        success, diff = alike.compare(value, self.current, self.settings)
        logger.debug("Template %s -> %s", to_source(leaf.expression), success)
        return Result(success, StructuralPayload(leaf, value, diff))

    def _execute(self, leaf: Leaf) -> Any:
        try:
            return self._evaluator.evaluate(leaf.expression)
        except Exception as e:
            raise ValidationExpressionError(
                self.name, to_source(leaf.expression), e
            ) from e

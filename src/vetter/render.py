"""Turn failed Results into diagnostic messages.

Predicate failures read like

    `x > 0` is not TRUE (FALSE)
    `x > 0` is not all TRUE (contains non-TRUE values)

or use the leaf's own message template. Template failures are described
by the structural comparator (``alike.format_diff``).
"""

import re
from typing import Iterable

from vetter import alike
from vetter.errors import InternalError
from vetter.expressions import ASTNode, to_source
from vetter.results import ResultList
from vetter.types import Outcome, Result, StandardPayload, StructuralPayload

REASONS = {
    Outcome.FALSE: "FALSE",
    Outcome.NA: "NA",
    Outcome.CONTAINS_NA: "contains NAs",
    Outcome.ZERO_LENGTH: "zero length",
    Outcome.CONTAINS_NON_TRUE: "contains non-TRUE values",
}


class DiagnosticRenderer:
    """Renders the live failures of a ResultList.

    Message templates may use:
    - {name} - the quoted expression being validated
    - {expr} - the quoted failing expression, ``.`` replaced by {name}
    """

    PATTERN = re.compile(r"\{(?P<key>name|expr)\}")

    def __init__(self, current_expr: ASTNode):
        self.current_expr = current_expr
        self.name = to_source(current_expr)

    def render(self, results: ResultList) -> list[str]:
        """Messages for ``results``; empty if the run passed."""
        if results.passed:
            return []
        return collapse_adjacent(
            self.render_result(r) for r in results.iter_live_failures()
        )

    def render_result(self, result: Result) -> str:
        payload = result.payload
        if isinstance(payload, StandardPayload):
            return self._render_standard(payload)
        if isinstance(payload, StructuralPayload):
            if payload.diff is None:
                raise InternalError("failed template result carries no diff")
            return " ".join(alike.format_diff(payload.diff, self.name))
        raise InternalError(f"unexpected payload type {type(payload).__name__}")

    def _render_standard(self, payload: StandardPayload) -> str:
        expr = f"`{to_source(payload.leaf.expression, self.current_expr)}`"

        if payload.leaf.message is not None:
            values = {"name": f"`{self.name}`", "expr": expr}
            return self.PATTERN.sub(
                lambda m: values[m.group("key")], payload.leaf.message
            )

        if payload.outcome == Outcome.WRONG_TYPE:
            reason = f'is "{alike.type_name(payload.value)}" instead of a "logical"'
        elif payload.outcome in REASONS:
            reason = REASONS[payload.outcome]
        else:
            raise InternalError(f"unexpected predicate outcome {payload.outcome!r}")

        if payload.outcome == Outcome.CONTAINS_NON_TRUE:
            verdict = "is not all TRUE"
        else:
            verdict = "is not TRUE"
        return f"{expr} {verdict} ({reason})"


def collapse_adjacent(messages: Iterable[str]) -> list[str]:
    """Drop each message equal to the one right before it."""
    collapsed: list[str] = []
    for message in messages:
        if not collapsed or collapsed[-1] != message:
            collapsed.append(message)
    return collapsed


def render(results: ResultList, current_expr: ASTNode) -> list[str]:
    """Render ``results`` for the value written as ``current_expr``."""
    return DiagnosticRenderer(current_expr).render(results)

"""Evaluator for the vetter expression language.

Walks an AST and computes its value against an evaluation context that
holds the named bindings and the value currently under validation (what
``.`` refers to).
"""

import operator
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from vetter.expressions.functions import FunctionRegistry
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
    UnaryOp,
    parse,
)

NUMERIC = (int, float, Decimal)

ORDERINGS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

ARITHMETIC = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "%": operator.mod,
}


class EvaluationError(Exception):
    """Error during expression evaluation."""
    pass


@dataclass
class EvaluationContext:
    """Context for expression evaluation.

    Attributes:
        variables: Names available to expressions
        current: The value under validation, bound to ``.``
    """

    variables: dict[str, Any] = field(default_factory=dict)
    current: Any = None


def is_number(value: Any) -> bool:
    """True for int, float and Decimal values, but not bool."""
    return isinstance(value, NUMERIC) and not isinstance(value, bool)


class Evaluator:
    """Evaluates expression ASTs against a context.

    Usage:
        ctx = EvaluationContext(variables={"limit": 10}, current=4)
        Evaluator(ctx).evaluate(parse(". < limit"))  # True
    """

    def __init__(self, context: EvaluationContext):
        self.context = context

    def evaluate(self, node: ASTNode) -> Any:
        """Evaluate an AST node and return the result."""
        method = getattr(self, f"_eval_{type(node).__name__.lower()}", None)
        if method is None:
            raise EvaluationError(f"Unknown node type: {type(node).__name__}")
        return method(node)

    # -------------------------------------------------------------------------
    # Node type evaluators
    # -------------------------------------------------------------------------

    def _eval_literal(self, node: Literal) -> Any:
        return node.value

    def _eval_placeholder(self, node: Placeholder) -> Any:
        return self.context.current

    def _eval_identifier(self, node: Identifier) -> Any:
        try:
            return self.context.variables[node.name]
        except KeyError:
            raise EvaluationError(f"Undefined name: {node.name}") from None

    def _eval_memberaccess(self, node: MemberAccess) -> Any:
        obj = self.evaluate(node.object)
        if obj is None:
            return None
        if isinstance(obj, dict):
            return obj.get(node.member)
        return getattr(obj, node.member, None)

    def _eval_indexaccess(self, node: IndexAccess) -> Any:
        obj = self.evaluate(node.object)
        index = self.evaluate(node.index)

        if obj is None:
            return None
        if isinstance(obj, dict):
            return obj.get(index)
        if isinstance(obj, (list, tuple, str)):
            if isinstance(index, int) and not isinstance(index, bool):
                return obj[index] if 0 <= index < len(obj) else None
            raise EvaluationError(
                f"Index must be an integer, got {type(index).__name__}"
            )
        raise EvaluationError(f"Cannot index into {type(obj).__name__}")

    def _eval_binaryop(self, node: BinaryOp) -> Any:
        op = node.operator

        # Short-circuit
        if op == "&&":
            if not self._to_bool(self.evaluate(node.left)):
                return False
            return self._to_bool(self.evaluate(node.right))
        if op == "||":
            if self._to_bool(self.evaluate(node.left)):
                return True
            return self._to_bool(self.evaluate(node.right))

        left = self.evaluate(node.left)
        right = self.evaluate(node.right)

        if op in ("==", "!=") or op in ORDERINGS:
            return self._comparison(op, left, right)
        if op == "in":
            return self._in(left, right)
        if op == "not in":
            return not self._in(left, right)
        if op in ARITHMETIC:
            return self._arithmetic(op, left, right)

        raise EvaluationError(f"Unknown operator: {op}")

    def _eval_unaryop(self, node: UnaryOp) -> Any:
        operand = self.evaluate(node.operand)

        if node.operator == "!":
            return not self._to_bool(operand)
        if node.operator == "-":
            if operand is None:
                return None
            if is_number(operand):
                return -operand
            raise EvaluationError(f"Cannot negate non-numeric value: {operand!r}")

        raise EvaluationError(f"Unknown unary operator: {node.operator}")

    def _eval_functioncall(self, node: FunctionCall) -> Any:
        if not FunctionRegistry.is_registered(node.name):
            raise EvaluationError(f"Unknown function: {node.name}")

        func_def = FunctionRegistry.get(node.name)
        args = [self.evaluate(arg) for arg in node.arguments]

        try:
            return func_def.implementation(*args)
        except Exception as e:
            raise EvaluationError(f"Error calling {node.name}: {e}") from e

    def _eval_arrayliteral(self, node: ArrayLiteral) -> list[Any]:
        return [self.evaluate(elem) for elem in node.elements]

    def _eval_objectliteral(self, node: ObjectLiteral) -> dict[str, Any]:
        return {key: self.evaluate(value) for key, value in node.pairs.items()}

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _to_bool(self, value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if is_number(value):
            return value != 0
        if isinstance(value, (str, list, tuple, dict)):
            return len(value) > 0
        return True

    def _comparison(self, op: str, left: Any, right: Any) -> Any:
        """Compare two values; a sequence on the left compares element-wise."""
        if isinstance(left, (list, tuple)) and not isinstance(right, (list, tuple, dict)):
            return [
                None if item is None else self._comparison(op, item, right)
                for item in left
            ]

        if op == "==":
            return self._equals(left, right)
        if op == "!=":
            return not self._equals(left, right)

        # Ordering against null is unknown rather than false.
        if left is None or right is None:
            return None
        left, right = self._coerce_dates(left, right)
        if (is_number(left) and is_number(right)) or (
            type(left) is type(right) and isinstance(left, (str, date))
        ):
            return ORDERINGS[op](left, right)

        raise EvaluationError(
            f"Cannot compare {type(left).__name__} and {type(right).__name__}"
        )

    def _equals(self, left: Any, right: Any) -> bool:
        if left is None or right is None:
            return left is None and right is None
        if is_number(left) and is_number(right):
            return float(left) == float(right)
        left, right = self._coerce_dates(left, right)
        return left == right

    @staticmethod
    def _coerce_dates(left: Any, right: Any) -> tuple[Any, Any]:
        # A datetime compared with a plain date compares by calendar day.
        if isinstance(left, datetime) and type(right) is date:
            return left.date(), right
        if isinstance(right, datetime) and type(left) is date:
            return left, right.date()
        return left, right

    def _in(self, item: Any, collection: Any) -> bool:
        if collection is None:
            return False
        if isinstance(collection, str):
            return item is not None and str(item) in collection
        if isinstance(collection, (list, tuple, dict, set, frozenset)):
            try:
                return item in collection
            except TypeError as e:
                raise EvaluationError(f"Invalid membership test: {e}") from e
        raise EvaluationError(
            f"'in' operator requires collection, got {type(collection).__name__}"
        )

    def _arithmetic(self, op: str, left: Any, right: Any) -> Any:
        if left is None or right is None:
            return None

        if op == "+" and (isinstance(left, str) or isinstance(right, str)):
            return str(left) + str(right)

        if not (is_number(left) and is_number(right)):
            raise EvaluationError(
                f"Cannot apply '{op}' to {type(left).__name__} and {type(right).__name__}"
            )
        if op in ("/", "%") and right == 0:
            raise EvaluationError("Division by zero" if op == "/" else "Modulo by zero")
        return ARITHMETIC[op](left, right)


def evaluate(
    expression: str,
    variables: dict[str, Any] | None = None,
    current: Any = None,
) -> Any:
    """Evaluate an expression string.

    Args:
        expression: The expression source
        variables: Names available to the expression
        current: Value bound to ``.``

    Returns:
        The value of the expression

    Example:
        evaluate(". > min", {"min": 0}, current=5)  # True
    """
    ctx = EvaluationContext(variables=dict(variables or {}), current=current)
    return Evaluator(ctx).evaluate(parse(expression))

"""Entry points for validating values.

- ``evaluate`` runs a target and returns the diagnostics (empty on pass).
- ``vet`` wraps that in a VetResult, or raises VetError with ``stop=True``.
- ``vetted`` validates function arguments on every call.

Example:
    vet("INT_1 && . > 0", 3).valid                     # True
    vet("INT_1 && . > 0", -3, name="n").text
    # 'For argument `n`, `n > 0` is not TRUE (FALSE)'
"""

import functools
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, TypeVar

from vetter.config import Settings
from vetter.engine import Engine
from vetter.errors import ContractError, VetError
from vetter.expressions import (
    ASTNode,
    ArrayLiteral,
    Identifier,
    LexerError,
    Literal,
    ObjectLiteral,
    ParseError,
    parse,
    to_source,
)
from vetter.parse import parse_target
from vetter.render import render
from vetter.tokens import ValidationToken

logger = logging.getLogger(__name__)

Target = str | ASTNode | ValidationToken
F = TypeVar("F", bound=Callable[..., Any])


def evaluate(
    target: Target,
    current: Any,
    current_expr: str | ASTNode,
    context: Mapping[str, Any] | None = None,
    settings: Settings | None = None,
) -> list[str]:
    """Validate ``current`` against ``target``.

    Args:
        target: The validation target
        current: The value to validate (what ``.`` refers to)
        current_expr: How the value is written, used in messages
            (e.g. ``"x"`` or ``"config.port"``)
        context: Names visible to the target
        settings: Engine limits; defaults to ``Settings()``

    Returns:
        Diagnostic messages in encounter order; empty if the value passed

    Raises:
        ContractError: If ``current_expr`` is not an expression or
            ``context`` is not a mapping
        ValidationExpressionError: If a predicate or template raised
    """
    expr = _as_expression(current_expr)
    variables = _as_variables(context)
    settings = settings or Settings()

    root = parse_target(target, variables, settings)
    engine = Engine(current, to_source(expr), variables, settings)
    engine.evaluate(root)
    return render(engine.results, expr)


def _as_expression(current_expr: Any) -> ASTNode:
    if isinstance(current_expr, str):
        try:
            node = parse(current_expr)
        except (LexerError, ParseError) as e:
            raise ContractError(
                f"current_expr must be a valid expression, got {current_expr!r}"
            ) from e
    elif isinstance(current_expr, ASTNode):
        node = current_expr
    else:
        raise ContractError(
            f"current_expr must be an expression string or ASTNode, "
            f"got {type(current_expr).__name__}"
        )
    if _is_plain_value(node):
        raise ContractError(
            f"current_expr must be an expression, not a plain value: "
            f"`{to_source(node)}`"
        )
    return node


def _is_plain_value(node: ASTNode) -> bool:
    """True for literals and for array/object literals made only of them."""
    if isinstance(node, Literal):
        return True
    if isinstance(node, ArrayLiteral):
        return all(_is_plain_value(e) for e in node.elements)
    if isinstance(node, ObjectLiteral):
        return all(_is_plain_value(v) for v in node.pairs.values())
    return False


def _as_variables(context: Any) -> dict[str, Any]:
    if context is None:
        return {}
    if not isinstance(context, Mapping):
        raise ContractError(
            f"context must be a mapping of names, got {type(context).__name__}"
        )
    return dict(context)


def format_failure(name: str, messages: list[str], bullet: str = "  - ") -> str:
    """Combine diagnostics into one message naming the failed value."""
    if not messages:
        return ""
    if len(messages) == 1:
        return f"For argument `{name}`, {messages[0]}"
    lines = [f"For argument `{name}`, at least one of these should pass:"]
    lines.extend(f"{bullet}{m}" for m in messages)
    return "\n".join(lines)


@dataclass
class VetResult:
    """Outcome of ``vet``.

    Attributes:
        valid: True if the value passed
        name: How the value was referred to in messages
        messages: Diagnostics, empty when valid
        text: The combined failure message, empty when valid
    """

    valid: bool
    name: str
    messages: list[str] = field(default_factory=list)
    text: str = ""

    def __bool__(self) -> bool:
        return self.valid


def vet(
    target: Target,
    current: Any,
    name: str | ASTNode = "current",
    context: Mapping[str, Any] | None = None,
    settings: Settings | None = None,
    stop: bool = False,
) -> VetResult:
    """Validate a value and report the outcome.

    Args:
        target: The validation target
        current: The value to validate
        name: How to refer to the value in messages
        context: Names visible to the target
        settings: Engine limits and bullet style
        stop: Raise VetError instead of returning a failed result

    Raises:
        VetError: If ``stop`` is set and the value failed
    """
    settings = settings or Settings()
    expr = _as_expression(name)
    messages = evaluate(target, current, expr, context, settings)
    name_text = to_source(expr)

    if not messages:
        return VetResult(valid=True, name=name_text)

    text = format_failure(name_text, messages, settings.bullet)
    logger.debug("Validation of `%s` failed: %s", name_text, messages)
    if stop:
        raise VetError(name_text, messages, text)
    return VetResult(valid=False, name=name_text, messages=messages, text=text)


def vetted(
    targets: Mapping[str, Target] | None = None,
    *,
    context: Mapping[str, Any] | None = None,
    settings: Settings | None = None,
    **more_targets: Target,
) -> Callable[[F], F]:
    """Decorator that validates arguments before each call.

    Defaults are applied before validation. Arguments are checked in the
    order the targets are given; the first failure raises VetError.

    Example:
        @vetted(n="INT_1_POS", label="STR_1 || is_none(.)")
        def repeat(label, n=1): ...
    """
    all_targets = {**(targets or {}), **more_targets}

    def decorator(func: F) -> F:
        signature = inspect.signature(func)
        unknown = sorted(set(all_targets) - set(signature.parameters))
        if unknown:
            raise ContractError(
                f"{func.__qualname__} has no parameter(s) named {', '.join(unknown)}"
            )

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            for arg_name, target in all_targets.items():
                vet(
                    target,
                    bound.arguments[arg_name],
                    name=Identifier(arg_name),
                    context=context,
                    settings=settings,
                    stop=True,
                )
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator

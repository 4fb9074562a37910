"""vetter: declarative validation expressions.

A validation target combines predicates (expressions using ``.`` for the
value under validation) and templates (values the input should be
structurally "alike") with ``&&`` and ``||``:

    from vetter import vet

    vet("is_int(.) && . > 0", 5).valid          # True
    vet("shape", {"id": 7, "tags": ["a"]},
        context={"shape": {"id": 0, "tags": []}}).valid  # True

Importing the package registers the built-in expression functions.

Usage:
    from vetter import vet, vetted, evaluate, ValidationToken, Settings
"""

from vetter.config import Settings
from vetter.engine import Engine, classify
from vetter.errors import (
    ContractError,
    InternalError,
    TokenError,
    ValidationExpressionError,
    VetError,
    VetterError,
)
from vetter.expressions import FunctionRegistry
from vetter.expressions.builtins import register_all_builtins
from vetter.parse import parse_target
from vetter.render import DiagnosticRenderer, collapse_adjacent, render
from vetter.results import ResultList
from vetter.tokens import PREDEFINED_TOKENS, ValidationToken
from vetter.types import (
    Combinator,
    Leaf,
    Mode,
    Outcome,
    Result,
    StandardPayload,
    StructuralPayload,
)
from vetter.vet import VetResult, evaluate, format_failure, vet, vetted

register_all_builtins()

__all__ = [
    # Entry points
    "evaluate",
    "format_failure",
    "vet",
    "vetted",
    "VetResult",
    # Parsing and evaluation
    "parse_target",
    "Engine",
    "classify",
    "ResultList",
    "DiagnosticRenderer",
    "collapse_adjacent",
    "render",
    # Types
    "Combinator",
    "Leaf",
    "Mode",
    "Outcome",
    "Result",
    "StandardPayload",
    "StructuralPayload",
    # Tokens
    "PREDEFINED_TOKENS",
    "ValidationToken",
    # Configuration
    "Settings",
    "FunctionRegistry",
    "register_all_builtins",
    # Errors
    "ContractError",
    "InternalError",
    "TokenError",
    "ValidationExpressionError",
    "VetError",
    "VetterError",
]

"""Built-in functions for the vetter expression language.

This module registers the built-in functions with the FunctionRegistry.
Call ``register_all_builtins()`` once before evaluating expressions;
importing ``vetter`` does this for you.

Categories:
- Type: is_bool, is_int, is_number, is_str, is_list, is_dict, is_none,
  each_is, type_of
- String: is_empty, trim, upper, lower, matches, starts_with, ends_with
- Math: abs, round, floor, ceil, min, max, is_finite
- Collection: len, contains, first, last, all, any, any_none, is_unique
- Logic: coalesce, if

Functions that inspect a collection treat ``null`` entries as missing
values, the way the validation engine classifies them.
"""

import math
import re
from decimal import Decimal
from typing import Any, Callable

from vetter.expressions.evaluator import is_number
from vetter.expressions.functions import (
    FunctionCategory,
    FunctionDefinition,
    FunctionParameter,
    FunctionRegistry,
)


def register_all_builtins() -> None:
    """Register all built-in functions with the FunctionRegistry."""
    _register_type_functions()
    _register_string_functions()
    _register_math_functions()
    _register_collection_functions()
    _register_logic_functions()


def _register(
    implementation: Callable[..., Any],
    name: str,
    category: FunctionCategory,
    description: str,
    parameters: list[FunctionParameter],
    return_type: str,
    examples: list[str],
) -> None:
    FunctionRegistry.register(
        FunctionDefinition(
            name=name,
            description=description,
            category=category,
            parameters=parameters,
            return_type=return_type,
            implementation=implementation,
            examples=examples,
        )
    )


def _value(description: str = "The value to check") -> FunctionParameter:
    return FunctionParameter("value", "any", description)


# -----------------------------------------------------------------------------
# Type Functions
# -----------------------------------------------------------------------------

TYPE_CHECKS: dict[str, Callable[[Any], bool]] = {
    "bool": lambda v: isinstance(v, bool),
    "int": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "float": lambda v: isinstance(v, float),
    "number": is_number,
    "str": lambda v: isinstance(v, str),
    "list": lambda v: isinstance(v, (list, tuple)),
    "dict": lambda v: isinstance(v, dict),
    "none": lambda v: v is None,
}


def _each_is(value: Any, type_name: str) -> bool:
    """True if value is a list/tuple whose entries are all of ``type_name``.

    ``null`` entries are allowed so that missing values can be reported
    separately (see ``any_none``).
    """
    if type_name not in TYPE_CHECKS:
        raise ValueError(
            f"Unknown type name '{type_name}'; expected one of {sorted(TYPE_CHECKS)}"
        )
    if not isinstance(value, (list, tuple)):
        return False
    check = TYPE_CHECKS[type_name]
    return all(v is None or check(v) for v in value)


def _type_of(value: Any) -> str:
    return "none" if value is None else type(value).__name__


def _register_type_functions() -> None:
    for type_name in ("bool", "int", "number", "str", "list", "dict", "none"):
        _register(
            TYPE_CHECKS[type_name],
            f"is_{type_name}",
            FunctionCategory.TYPE,
            f"Returns true if the value is a {type_name}",
            [_value()],
            "boolean",
            [f"is_{type_name}(.)"],
        )

    _register(
        _each_is,
        "each_is",
        FunctionCategory.TYPE,
        "Returns true if the value is a list whose non-null entries all have the given type",
        [
            _value("The list to check"),
            FunctionParameter(
                "type_name", "string", "One of bool, int, float, number, str, list, dict, none"
            ),
        ],
        "boolean",
        ['each_is(., "int")', 'each_is(tags, "str")'],
    )
    _register(
        _type_of,
        "type_of",
        FunctionCategory.TYPE,
        "Returns the Python type name of the value (\"none\" for null)",
        [_value()],
        "string",
        ['type_of(.) in ["int", "float"]'],
    )


# -----------------------------------------------------------------------------
# String Functions
# -----------------------------------------------------------------------------


def _is_empty(value: Any) -> bool:
    """Return True if value is None, blank string, or empty collection."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _trim(value: str | None) -> str:
    return "" if value is None else str(value).strip()


def _upper(value: str | None) -> str:
    return "" if value is None else str(value).upper()


def _lower(value: str | None) -> str:
    return "" if value is None else str(value).lower()


def _matches(value: str | None, pattern: str) -> bool:
    """Test if the whole string matches a regular expression."""
    if value is None:
        return False
    try:
        return re.fullmatch(pattern, str(value)) is not None
    except re.error as e:
        raise ValueError(f"invalid pattern {pattern!r}: {e}") from e


def _starts_with(value: str | None, prefix: str) -> bool:
    return value is not None and str(value).startswith(prefix)


def _ends_with(value: str | None, suffix: str) -> bool:
    return value is not None and str(value).endswith(suffix)


def _register_string_functions() -> None:
    text = FunctionParameter("value", "string", "The string")

    _register(
        _is_empty, "is_empty", FunctionCategory.STRING,
        "Returns true if value is null, a blank string, or an empty collection",
        [_value()], "boolean", ["!is_empty(.)"],
    )
    _register(
        _trim, "trim", FunctionCategory.STRING,
        "Removes whitespace from both ends of a string",
        [text], "string", ["trim(.) == ."],
    )
    _register(
        _upper, "upper", FunctionCategory.STRING,
        "Converts a string to upper case",
        [text], "string", ["upper(.) == ."],
    )
    _register(
        _lower, "lower", FunctionCategory.STRING,
        "Converts a string to lower case",
        [text], "string", ["lower(.) == ."],
    )
    _register(
        _matches, "matches", FunctionCategory.STRING,
        "Returns true if the whole string matches the regular expression",
        [text, FunctionParameter("pattern", "string", "Regular expression")],
        "boolean", ['matches(., "[a-z]+")', r'matches(., "\\d{4}-\\d{2}-\\d{2}")'],
    )
    _register(
        _starts_with, "starts_with", FunctionCategory.STRING,
        "Returns true if the string starts with the prefix",
        [text, FunctionParameter("prefix", "string", "Expected prefix")],
        "boolean", ['starts_with(., "v")'],
    )
    _register(
        _ends_with, "ends_with", FunctionCategory.STRING,
        "Returns true if the string ends with the suffix",
        [text, FunctionParameter("suffix", "string", "Expected suffix")],
        "boolean", ['ends_with(., ".csv")'],
    )


# -----------------------------------------------------------------------------
# Math Functions
# -----------------------------------------------------------------------------


def _abs(value: int | float | Decimal | None) -> int | float | Decimal | None:
    return None if value is None else abs(value)


def _round_num(value: float | Decimal | None, decimals: int = 0) -> float | Decimal | None:
    if value is None:
        return None
    return round(value, decimals)


def _floor(value: float | None) -> int | None:
    return None if value is None else math.floor(value)


def _ceil(value: float | None) -> int | None:
    return None if value is None else math.ceil(value)


def _min_val(*args: Any) -> Any:
    values = [a for a in args if a is not None]
    return min(values) if values else None


def _max_val(*args: Any) -> Any:
    values = [a for a in args if a is not None]
    return max(values) if values else None


def _is_finite(value: Any) -> Any:
    """Finite check; element-wise on lists, null for missing entries."""
    if isinstance(value, (list, tuple)):
        return [_is_finite(v) for v in value]
    if value is None:
        return None
    if not is_number(value):
        return False
    return math.isfinite(value)


def _register_math_functions() -> None:
    number = FunctionParameter("value", "number", "The number")

    _register(
        _abs, "abs", FunctionCategory.MATH,
        "Returns the absolute value", [number], "number", ["abs(.) < 1"],
    )
    _register(
        _round_num, "round", FunctionCategory.MATH,
        "Rounds to the given number of decimal places",
        [number, FunctionParameter("decimals", "number", "Decimal places", required=False)],
        "number", ["round(., 2) == ."],
    )
    _register(
        _floor, "floor", FunctionCategory.MATH,
        "Rounds down to the nearest integer", [number], "number", ["floor(.) == ."],
    )
    _register(
        _ceil, "ceil", FunctionCategory.MATH,
        "Rounds up to the nearest integer", [number], "number", ["ceil(.) == ."],
    )
    _register(
        _min_val, "min", FunctionCategory.MATH,
        "Returns the smallest non-null argument",
        [FunctionParameter("values", "number", "Values to compare", variadic=True)],
        "number", ["min(., limit) == ."],
    )
    _register(
        _max_val, "max", FunctionCategory.MATH,
        "Returns the largest non-null argument",
        [FunctionParameter("values", "number", "Values to compare", variadic=True)],
        "number", ["max(., 0) == ."],
    )
    _register(
        _is_finite, "is_finite", FunctionCategory.MATH,
        "Returns true for finite numbers; applied element-wise to lists",
        [number], "boolean", ["is_finite(.)"],
    )


# -----------------------------------------------------------------------------
# Collection Functions
# -----------------------------------------------------------------------------


def _len(value: Any) -> int:
    """Length of a string or collection, 0 for null."""
    if value is None:
        return 0
    if isinstance(value, (str, list, tuple, dict)):
        return len(value)
    raise ValueError(f"{type(value).__name__} has no length")


def _contains(collection: list | str | None, item: Any) -> bool:
    if collection is None:
        return False
    if isinstance(collection, str):
        return item is not None and str(item) in collection
    return item in collection


def _first(collection: list | tuple | None) -> Any:
    return collection[0] if collection else None


def _last(collection: list | tuple | None) -> Any:
    return collection[-1] if collection else None


def _all(collection: list | tuple | None) -> bool:
    return collection is not None and all(v is True for v in collection)


def _any(collection: list | tuple | None) -> bool:
    return collection is not None and any(v is True for v in collection)


def _any_none(value: Any) -> bool:
    """True if value is null or a collection holding a null."""
    if value is None:
        return True
    if isinstance(value, dict):
        return any(v is None for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(v is None for v in value)
    return False


def _is_unique(collection: list | tuple | None) -> bool:
    if collection is None:
        return True
    seen: list[Any] = []
    for item in collection:
        if item in seen:
            return False
        seen.append(item)
    return True


def _register_collection_functions() -> None:
    items = FunctionParameter("collection", "array", "The collection")

    _register(
        _len, "len", FunctionCategory.COLLECTION,
        "Returns the length of a string or collection (0 for null)",
        [FunctionParameter("value", "string|array", "The value to measure")],
        "number", ["len(.) == 3", "len(.) > 0"],
    )
    _register(
        _contains, "contains", FunctionCategory.COLLECTION,
        "Returns true if the collection or string contains the item",
        [items, FunctionParameter("item", "any", "Item to look for")],
        "boolean", ['contains(., "id")'],
    )
    _register(
        _first, "first", FunctionCategory.COLLECTION,
        "Returns the first element (null if empty)", [items], "any", ["first(.) == 0"],
    )
    _register(
        _last, "last", FunctionCategory.COLLECTION,
        "Returns the last element (null if empty)", [items], "any", ["last(.) > first(.)"],
    )
    _register(
        _all, "all", FunctionCategory.COLLECTION,
        "Returns true if every element is true", [items], "boolean", ["all(. > 0)"],
    )
    _register(
        _any, "any", FunctionCategory.COLLECTION,
        "Returns true if at least one element is true", [items], "boolean", ["any(. == 0)"],
    )
    _register(
        _any_none, "any_none", FunctionCategory.COLLECTION,
        "Returns true if the value is null or contains a null",
        [_value()], "boolean", ["!any_none(.)"],
    )
    _register(
        _is_unique, "is_unique", FunctionCategory.COLLECTION,
        "Returns true if no element appears twice", [items], "boolean", ["is_unique(.)"],
    )


# -----------------------------------------------------------------------------
# Logic Functions
# -----------------------------------------------------------------------------


def _coalesce(*args: Any) -> Any:
    for arg in args:
        if arg is not None:
            return arg
    return None


def _if_then(condition: bool, true_value: Any, false_value: Any = None) -> Any:
    return true_value if condition else false_value


def _register_logic_functions() -> None:
    _register(
        _coalesce, "coalesce", FunctionCategory.LOGIC,
        "Returns the first non-null argument",
        [FunctionParameter("values", "any", "Candidate values", variadic=True)],
        "any", ["coalesce(., 0) >= 0"],
    )
    _register(
        _if_then, "if", FunctionCategory.LOGIC,
        "Returns one of two values depending on a condition",
        [
            FunctionParameter("condition", "boolean", "The condition"),
            FunctionParameter("then", "any", "Value if true"),
            FunctionParameter("else", "any", "Value if false", required=False),
        ],
        "any", ['if(strict, . > 0, . >= 0)'],
    )

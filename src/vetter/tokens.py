"""Reusable validation tokens.

A token is a named validation expression with an optional message. Bind
one to a name in the validation context (or use a predefined one) and
refer to it by that name in a target:

    POSITIVE = ValidationToken(". > 0", "{name} should be positive")
    vet("INT_1 && POSITIVE", 3, context={"POSITIVE": POSITIVE})

In messages, ``{name}`` becomes the quoted expression being validated and
``{expr}`` the quoted failing expression.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from vetter.errors import TokenError
from vetter.expressions import LexerError, ParseError, parse


@dataclass(frozen=True)
class ValidationToken:
    """A named, reusable piece of a validation target.

    Attributes:
        expression: Expression source; may contain ``&&``/``||`` and
            references to other tokens
        message: Message used when a predicate from this token fails
    """

    expression: str
    message: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.expression, str):
            raise TokenError(
                f"Token expression must be a string, got {type(self.expression).__name__}"
            )
        if self.message is not None and not isinstance(self.message, str):
            raise TokenError(
                f"Message for token `{self.expression}` must be a single string, "
                f"got {type(self.message).__name__}"
            )
        try:
            parse(self.expression)
        except (LexerError, ParseError) as e:
            raise TokenError(f"Invalid token expression `{self.expression}`: {e}") from e


def _token(expression: str, message: str) -> ValidationToken:
    return ValidationToken(expression, message)


PREDEFINED_TOKENS: Mapping[str, ValidationToken] = MappingProxyType({
    "NO_NONE": _token("!any_none(.)", "{name} should not contain null values"),
    "FINITE": _token("is_finite(.)", "{name} should be finite"),
    "GT_0": _token(". > 0", "{name} should be greater than zero"),
    "GTE_0": _token(". >= 0", "{name} should be greater than or equal to zero"),
    "LT_0": _token(". < 0", "{name} should be less than zero"),
    "LTE_0": _token(". <= 0", "{name} should be less than or equal to zero"),
    "INT": _token('each_is(., "int")', "{name} should be a list of integers"),
    "INT_1": _token("is_int(.)", "{name} should be an integer"),
    "INT_1_POS": _token("is_int(.) && . > 0", "{name} should be a positive integer"),
    "INT_1_NEG": _token("is_int(.) && . < 0", "{name} should be a negative integer"),
    "INT_1_POS_STR": _token(
        "is_int(.) && . >= 0", "{name} should be a non-negative integer"
    ),
    "INT_1_NEG_STR": _token(
        "is_int(.) && . <= 0", "{name} should be a non-positive integer"
    ),
    "INT_POS": _token(
        'each_is(., "int") && . > 0', "{name} should be a list of positive integers"
    ),
    "NUM": _token('each_is(., "number")', "{name} should be a list of numbers"),
    "NUM_1": _token("is_number(.)", "{name} should be a number"),
    "NUM_1_POS": _token("is_number(.) && . > 0", "{name} should be a positive number"),
    "NUM_1_NEG": _token("is_number(.) && . < 0", "{name} should be a negative number"),
    "NUM_POS": _token(
        'each_is(., "number") && . > 0', "{name} should be a list of positive numbers"
    ),
    "STR": _token('each_is(., "str")', "{name} should be a list of strings"),
    "STR_1": _token("is_str(.)", "{name} should be a string"),
    "BOOL": _token('each_is(., "bool")', "{name} should be a list of booleans"),
    "BOOL_1": _token("is_bool(.)", "{name} should be a boolean"),
})

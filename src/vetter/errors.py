"""Exception hierarchy for vetter.

Two families never mix:
- faults (InternalError, ContractError, TokenError,
  ValidationExpressionError) mean the check itself could not be carried out;
- VetError means the check ran and the value failed it.
"""


class VetterError(Exception):
    """Base class for every error raised by vetter."""


class InternalError(VetterError):
    """The parser/engine contract was broken (malformed tree, unknown mode...).

    Indicates a defect, not an invalid value.
    """

    def __init__(self, message: str):
        super().__init__(f"Internal error: {message}")


class ContractError(VetterError, TypeError):
    """A caller passed arguments that cannot be used for validation."""


class TokenError(VetterError):
    """A validation token is malformed or its substitution runs away."""


class ValidationExpressionError(VetterError):
    """Running a validation expression raised instead of producing a value.

    Attributes:
        name: Identity of the value being validated
        expression: Source of the expression that failed
        cause: The underlying exception
    """

    def __init__(self, name: str, expression: str, cause: BaseException):
        self.name = name
        self.expression = expression
        self.cause = cause
        super().__init__(
            f"Validation expression for `{name}` produced an error: "
            f"`{expression}`: {cause}"
        )


class VetError(VetterError, ValueError):
    """A value failed validation.

    Attributes:
        name: Identity of the value (argument name or expression)
        messages: Rendered diagnostics, in order
    """

    def __init__(self, name: str, messages: list[str], text: str):
        self.name = name
        self.messages = list(messages)
        super().__init__(text)

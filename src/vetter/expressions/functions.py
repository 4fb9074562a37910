"""Function registry for the vetter expression language.

Every function callable from a validation target (``is_int(.)``,
``len(.) == 3``) is registered here together with its signature and
examples, which ``vetter functions`` prints.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class FunctionCategory(Enum):
    """Groups shown in the function listing."""

    TYPE = "type"
    STRING = "string"
    MATH = "math"
    COLLECTION = "collection"
    LOGIC = "logic"


@dataclass
class FunctionParameter:
    """One parameter of an expression function.

    Attributes:
        name: Parameter name shown in the signature
        type: Informal type ("any", "number", "string|array", ...)
        description: One-line description
        required: False if the argument may be omitted
        variadic: True if the parameter absorbs all remaining arguments
    """

    name: str
    type: str
    description: str
    required: bool = True
    variadic: bool = False

    def render(self) -> str:
        text = f"...{self.name}" if self.variadic else self.name
        return text if self.required else f"[{text}]"


@dataclass
class FunctionDefinition:
    """An expression function and its documentation.

    Attributes:
        name: Name used in expressions
        description: One-line description
        category: Group in the function listing
        parameters: Parameters, in call order
        return_type: Informal type of the result
        implementation: The Python callable invoked by the evaluator
        examples: Targets that use the function
    """

    name: str
    description: str
    category: FunctionCategory
    parameters: list[FunctionParameter]
    return_type: str
    implementation: Callable[..., Any]
    examples: list[str] = field(default_factory=list)

    @property
    def signature(self) -> str:
        return f"{self.name}({', '.join(p.render() for p in self.parameters)})"

    def describe(self) -> dict[str, Any]:
        """Plain-data description (no callable), for listings."""
        return {
            "name": self.name,
            "signature": self.signature,
            "description": self.description,
            "category": self.category.value,
            "parameters": [vars(p).copy() for p in self.parameters],
            "return_type": self.return_type,
            "examples": list(self.examples),
        }


class FunctionRegistry:
    """Process-wide table of expression functions, keyed by name.

    Registering a name that already exists replaces the earlier entry, so
    callers can override a built-in.

    Example:
        FunctionRegistry.register(FunctionDefinition(
            name="is_even",
            description="True for even integers",
            category=FunctionCategory.MATH,
            parameters=[FunctionParameter("value", "number", "The number")],
            return_type="boolean",
            implementation=lambda v: v % 2 == 0,
        ))
    """

    _functions: dict[str, FunctionDefinition] = {}

    @classmethod
    def register(cls, func_def: FunctionDefinition) -> None:
        cls._functions[func_def.name] = func_def

    @classmethod
    def get(cls, name: str) -> FunctionDefinition:
        """Look up a function.

        Raises:
            ValueError: If no function of that name is registered
        """
        try:
            return cls._functions[name]
        except KeyError:
            raise ValueError(f"Unknown function: {name}") from None

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._functions

    @classmethod
    def list_all(cls) -> list[FunctionDefinition]:
        """All functions, sorted by name."""
        return sorted(cls._functions.values(), key=lambda f: f.name)

    @classmethod
    def list_by_category(cls, category: FunctionCategory) -> list[FunctionDefinition]:
        return [f for f in cls.list_all() if f.category == category]

    @classmethod
    def export_documentation(cls) -> dict[str, Any]:
        """Describe every function, flat by name and grouped by category."""
        described = [f.describe() for f in cls.list_all()]
        by_category: dict[str, list[dict[str, Any]]] = {}
        for entry in described:
            by_category.setdefault(entry["category"], []).append(entry)
        return {
            "functions": {entry["name"]: entry for entry in described},
            "by_category": by_category,
        }

    @classmethod
    def clear(cls) -> None:
        """Remove every registration (tests re-register the built-ins)."""
        cls._functions.clear()

"""Shared fixtures for the vetter test suite."""

import pytest

from vetter.expressions import (
    FunctionCategory,
    FunctionDefinition,
    FunctionParameter,
    FunctionRegistry,
)
from vetter.expressions.builtins import register_all_builtins


@pytest.fixture(autouse=True)
def setup_functions():
    """Start every test with exactly the built-in functions registered."""
    FunctionRegistry.clear()
    register_all_builtins()
    yield
    FunctionRegistry.clear()
    register_all_builtins()


class CallLog:
    """Records every call made to the ``tick`` expression function."""

    def __init__(self) -> None:
        self.calls: list[object] = []

    def __call__(self, value: object) -> object:
        self.calls.append(value)
        return value

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def tick():
    """Register ``tick(value)``: returns its argument and logs the call."""
    log = CallLog()
    FunctionRegistry.register(
        FunctionDefinition(
            name="tick",
            description="Returns its argument; counts calls",
            category=FunctionCategory.LOGIC,
            parameters=[FunctionParameter("value", "any", "Value to return")],
            return_type="any",
            implementation=log,
        )
    )
    return log

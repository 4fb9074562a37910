"""Structural comparison of a value against a template ("alike").

A template describes the shape a value should have rather than the exact
value: ``0`` stands for "an integer", ``[]`` for "a list of any length",
``{"id": 0, "name": ""}`` for "a dict with an integer id and a string
name". ``None`` matches anything.

``compare`` returns a flag and, on mismatch, an ``AlikeDiff`` describing
the first difference found. ``format_diff`` turns that diff into message
fragments for the diagnostic renderer.
"""

from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Mapping

from vetter.config import Settings
from vetter.errors import InternalError


@dataclass(frozen=True)
class AlikeDiff:
    """The first structural difference between template and value.

    Attributes:
        path: Accessors from the root to the mismatch; ints are indices,
            ``str`` entries are mapping keys, ``("attr", name)`` tuples are
            attribute names
        kind: "type", "length" or "key"
        expected: What the template asked for
        actual: What the value had
    """

    path: tuple[Any, ...]
    kind: str
    expected: str
    actual: str


def type_name(value: Any) -> str:
    """Name used in diagnostics for the type of ``value``."""
    if value is None:
        return "None"
    return type(value).__name__


def compare(
    template: Any, current: Any, settings: Settings | None = None
) -> tuple[bool, AlikeDiff | None]:
    """Check that ``current`` has the structure of ``template``.

    Returns:
        (True, None) on a match, otherwise (False, diff)
    """
    settings = settings or Settings()
    diff = _compare(
        template, current, (), settings, fuzzy=settings.fuzzy_int_max_len >= 1
    )
    return diff is None, diff


def _compare(
    template: Any, current: Any, path: tuple[Any, ...], settings: Settings, fuzzy: bool
) -> AlikeDiff | None:
    if template is None:
        return None

    if isinstance(template, bool):
        if isinstance(current, bool):
            return None
        return _type_diff(path, template, current)

    if isinstance(template, int):
        if isinstance(current, int) and not isinstance(current, bool):
            return None
        if fuzzy and isinstance(current, float) and current.is_integer():
            return None
        return _type_diff(path, template, current)

    if isinstance(template, float):
        if isinstance(current, (int, float)) and not isinstance(current, bool):
            return None
        return _type_diff(path, template, current)

    if isinstance(template, str):
        if isinstance(current, str):
            return None
        return _type_diff(path, template, current)

    if isinstance(template, (list, tuple)):
        if not isinstance(current, type(template)):
            return _type_diff(path, template, current)
        if not template:
            return None
        if len(template) != len(current):
            return AlikeDiff(path, "length", str(len(template)), str(len(current)))
        # Integral floats only pass for int templates in short lists.
        element_fuzzy = len(current) <= settings.fuzzy_int_max_len
        for i, (t, c) in enumerate(zip(template, current)):
            diff = _compare(t, c, path + (i,), settings, element_fuzzy)
            if diff is not None:
                return diff
        return None

    if isinstance(template, Mapping):
        if not isinstance(current, Mapping):
            return _type_diff(path, template, current)
        if not template:
            return None
        if len(template) != len(current):
            return AlikeDiff(path, "length", str(len(template)), str(len(current)))
        for key, t in template.items():
            if key not in current:
                return AlikeDiff(path, "key", repr(key), "missing")
            diff = _compare(t, current[key], path + (key,), settings, fuzzy)
            if diff is not None:
                return diff
        return None

    if is_dataclass(template) and not isinstance(template, type):
        if not isinstance(current, type(template)):
            return _type_diff(path, template, current)
        for f in fields(template):
            diff = _compare(
                getattr(template, f.name),
                getattr(current, f.name),
                path + (("attr", f.name),),
                settings,
                fuzzy,
            )
            if diff is not None:
                return diff
        return None

    if isinstance(current, type(template)):
        return None
    return _type_diff(path, template, current)


def _type_diff(path: tuple[Any, ...], template: Any, current: Any) -> AlikeDiff:
    return AlikeDiff(path, "type", type_name(template), type_name(current))


def target_text(name: str, path: tuple[Any, ...]) -> str:
    """Render the accessor path applied to ``name`` (e.g. ``x["a"][0]``)."""
    text = name
    for step in path:
        if isinstance(step, tuple):
            text += f".{step[1]}"
        elif isinstance(step, str):
            text += f'["{step}"]'
        else:
            text += f"[{step!r}]"
    return text


def format_diff(diff: AlikeDiff, name: str) -> list[str]:
    """Describe ``diff`` as message fragments, subject first.

    Example:
        format_diff(AlikeDiff((0,), "type", "int", "str"), "x")
        # ['`x[0]`', 'should be type "int"', '(is "str")']
    """
    subject = f"`{target_text(name, diff.path)}`"
    if diff.kind == "type":
        return [subject, f'should be type "{diff.expected}"', f'(is "{diff.actual}")']
    if diff.kind == "length":
        return [subject, f"should be length {diff.expected}", f"(is {diff.actual})"]
    if diff.kind == "key":
        return [subject, f"should have key {diff.expected}", f"(is {diff.actual})"]
    raise InternalError(f"unknown diff kind {diff.kind!r}")

"""Engine settings and how they are loaded."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

ENV_PREFIX = "VETTER_"


@dataclass(frozen=True)
class Settings:
    """Limits and presentation options for a validation run.

    Attributes:
        max_depth: Deepest allowed nesting of ``&&``/``||``. Chains nest
            to the left (``a || b || c`` is ``(a || b) || c``), so this
            also limits one flat chain to ``max_depth + 1`` operands
        max_results: Most leaves a single run may evaluate
        max_sub_depth: Deepest allowed chain of token substitutions
        fuzzy_int_max_len: Longest list of integral floats that an ``int``
            template accepts (0 disables fuzzy integer matching)
        bullet: Prefix for each message when several are reported
    """

    max_depth: int = 200
    max_results: int = 10000
    max_sub_depth: int = 65
    fuzzy_int_max_len: int = 100
    bullet: str = "  - "

    def __post_init__(self) -> None:
        for name in ("max_depth", "max_results", "max_sub_depth"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if (
            not isinstance(self.fuzzy_int_max_len, int)
            or isinstance(self.fuzzy_int_max_len, bool)
            or self.fuzzy_int_max_len < 0
        ):
            raise ValueError(
                "fuzzy_int_max_len must be a non-negative integer, "
                f"got {self.fuzzy_int_max_len!r}"
            )
        if not isinstance(self.bullet, str):
            raise ValueError(f"bullet must be a string, got {self.bullet!r}")

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> Settings:
        """Build settings from a dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Create settings from environment variables.

        Each field maps to ``VETTER_<FIELD>`` (e.g. ``VETTER_MAX_DEPTH``).
        Unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            if f.name == "bullet":
                data[f.name] = raw
                continue
            try:
                data[f.name] = int(raw)
            except ValueError:
                raise ValueError(
                    f"{ENV_PREFIX}{f.name.upper()} must be an integer, got {raw!r}"
                ) from None
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Settings:
        """Load settings from a YAML file.

        The file holds a mapping of field names, optionally nested under a
        top-level ``vetter`` key. An empty file yields the defaults.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if isinstance(data, dict) and isinstance(data.get("vetter"), dict):
            data = data["vetter"]
        if not isinstance(data, dict):
            raise ValueError(f"{path}: settings must be a mapping")
        return cls.from_mapping(data)

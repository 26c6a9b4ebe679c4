"""Dot-path lookups over objects and mappings."""

from collections.abc import Mapping
from typing import Any, Final


class _Unresolved:
    """Value of a path that could not be walked to the end."""

    _instance: "_Unresolved | None" = None

    def __new__(cls) -> "_Unresolved":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNRESOLVED"

    def __bool__(self) -> bool:
        return False


UNRESOLVED: Final = _Unresolved()


def lookup(obj: Any, key: str) -> Any:
    """Read one hop: mapping key for mappings, attribute for everything else."""
    if isinstance(obj, Mapping):
        return obj.get(key, UNRESOLVED)
    return getattr(obj, key, UNRESOLVED)


def walk_path(obj: Any, path: str) -> Any:
    """Walk a dot-separated path. Missing or None hops yield UNRESOLVED."""
    current = obj
    for part in path.split("."):
        if current is None or current is UNRESOLVED:
            return UNRESOLVED
        current = lookup(current, part)
    return UNRESOLVED if current is None else current

"""Small helpers shared across the package."""

from __future__ import annotations

import copy
import dataclasses
import random
from typing import Any, TypeVar

T = TypeVar("T")

_RANDOM_BASE = 100_000_000
_RANDOM_SPAN = 900_000_000


def clone(value: T) -> T:
    """Return a deep, independent copy of ``value``."""
    return copy.deepcopy(value)


def generate_random_number() -> int:
    """Return a random nine-digit number."""
    return random.randrange(_RANDOM_SPAN) + _RANDOM_BASE


def _is_empty(value: Any) -> bool:
    """Whether ``value`` counts as unset and must not override anything.

    ``False`` counts as unset, like any other zero value.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return value is False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _mergeable(current: Any, value: Any) -> bool:
    if type(current) is not type(value):
        return False
    return isinstance(current, dict) or _is_dataclass_instance(current)


def override(dst: T, src: T) -> T:
    """Overwrite ``dst`` in place with every non-empty value of ``src``.

    Both must be dicts or both instances of the same dataclass; nested
    dicts and dataclasses of matching type are merged recursively.
    Returns ``dst``.
    """
    if type(dst) is not type(src):
        raise TypeError(
            f"cannot override {type(dst).__name__} with {type(src).__name__}"
        )

    if isinstance(dst, dict):
        for key, value in src.items():
            if _is_empty(value):
                continue
            current = dst.get(key)
            if _mergeable(current, value):
                override(current, value)
            else:
                dst[key] = copy.deepcopy(value)
    elif _is_dataclass_instance(dst):
        for field in dataclasses.fields(dst):
            value = getattr(src, field.name)
            if _is_empty(value):
                continue
            current = getattr(dst, field.name)
            if _mergeable(current, value):
                override(current, value)
            else:
                setattr(dst, field.name, copy.deepcopy(value))
    else:
        raise TypeError(f"cannot override values of type {type(dst).__name__}")

    return dst
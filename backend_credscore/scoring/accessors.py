"""
Typed accessors over untyped upstream payloads.

Every read from a social profile, wallet summary or vault item goes through
these helpers so a missing or wrong-typed field degrades to its default in one
place. None of them raise for malformed input.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

_MISSING = object()

# Largest counter value kept; sums of a few counters stay finite floats
MAX_COUNTER = 2**53


def read_path(data: Any, path: str | Sequence[str], default: Any = None) -> Any:
    """
    Walk nested mappings by key path ("a.b.c" or ["a", "b", "c"]).

    Returns default as soon as a step is not a mapping or the key is absent.
    Keys that contain dots (e.g. "Native Balance Result") must be passed as a list.
    """
    keys = path.split(".") if isinstance(path, str) else list(path)
    current = data
    for key in keys:
        if not isinstance(current, Mapping):
            return default
        current = current.get(key, _MISSING)
        if current is _MISSING:
            return default
    return default if current is None else current


def as_number(value: Any, default: float = 0.0) -> float:
    """Coerce int/float/numeric string to a finite float; bools and others give default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return default
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def read_number(data: Any, path: str | Sequence[str], default: float = 0.0) -> float:
    return as_number(read_path(data, path), default)


def read_int(data: Any, path: str | Sequence[str], default: int = 0) -> int:
    """Counter read: numeric value truncated to int, clamped to [0, MAX_COUNTER]."""
    number = as_number(read_path(data, path), float(default))
    return min(MAX_COUNTER, max(0, int(number)))


def read_amount(data: Any, path: str | Sequence[str]) -> float:
    """Balance-like read: non-negative float, clamped to MAX_COUNTER so weighted sums stay finite."""
    return min(float(MAX_COUNTER), max(0.0, read_number(data, path)))


def read_array(data: Any, path: str | Sequence[str]) -> list[Any]:
    """List read: tuples/lists are copied to a list, anything else is empty."""
    value = read_path(data, path)
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def read_bool(data: Any, path: str | Sequence[str]) -> bool:
    """Flag read with JS-like truthiness on the stored value (0, "", None, [] are False)."""
    return bool(read_path(data, path))


def read_mapping(data: Any, path: str | Sequence[str]) -> Mapping[str, Any]:
    value = read_path(data, path)
    return value if isinstance(value, Mapping) else {}


def read_str(data: Any, path: str | Sequence[str], default: str = "") -> str:
    value = read_path(data, path)
    return value if isinstance(value, str) else default


def as_items(collection: Any) -> list[Any]:
    """
    Vault collections arrive as a list or wrapped as {"items": [...]} / {"results": [...]}.
    Anything else is an empty collection.
    """
    if isinstance(collection, (list, tuple)):
        return list(collection)
    if isinstance(collection, Mapping):
        for key in ("items", "results"):
            inner = collection.get(key)
            if isinstance(inner, (list, tuple)):
                return list(inner)
    return []

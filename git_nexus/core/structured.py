"""Typed accessors for untyped TOML data.

Each getter distinguishes "missing" (returns None) from "present but the
wrong type" (raises TypeError), so config loading can report a precise
error instead of silently falling back to defaults.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table, or None when the key is absent."""
    value = table.get(key)
    if value is None:
        return None
    result = as_str_dict(value)
    if result is None:
        raise TypeError(f"'{key}' must be a table")
    return result


def get_int(table: Mapping[str, object], key: str) -> int | None:
    value = table.get(key)
    if value is None:
        return None
    # bool is an int subclass; `scan_depth = true` is a mistake, not 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"'{key}' must be an integer")
    return value


def get_bool(table: Mapping[str, object], key: str) -> bool | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise TypeError(f"'{key}' must be true or false")
    return value


def get_str_list(table: Mapping[str, object], key: str) -> list[str] | None:
    """Get a list of non-empty, stripped strings."""
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise TypeError(f"'{key}' must be a list of strings")
    items: list[str] = []
    for item in cast(list[object], value):
        if not isinstance(item, str):
            raise TypeError(f"'{key}' must be a list of strings")
        stripped = item.strip()
        if stripped:
            items.append(stripped)
    return items

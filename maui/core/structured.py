"""Helpers for reading untyped JSON/TOML structures.

Manifest documents are matched case-insensitively (`minimumVersion`,
`MinimumVersion` and `minimumversion` are the same key), so every lookup here
goes through `lookup()`, which tries an exact match first and then a
case-folded one. Values of the wrong type are reported as absent.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


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


def as_obj_list(obj: object) -> ObjList | None:
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def lookup(table: Mapping[str, object], key: str) -> object | None:
    """Look up `key`, ignoring case when there is no exact match."""
    if key in table:
        return table[key]
    folded = key.casefold()
    for k, v in table.items():
        if k.casefold() == folded:
            return v
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, stripped; None when missing, not a str, or blank.

    Integers and floats are accepted and rendered with `str()`, since manifests
    in the wild write versions both as `"15"` and `15`.
    """
    value = lookup(table, key)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_int(table: Mapping[str, object], key: str) -> int | None:
    value = lookup(table, key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def get_bool(table: Mapping[str, object], key: str, default: bool = False) -> bool:
    value = lookup(table, key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return default


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested object (dict with string keys)."""
    return as_str_dict(lookup(table, key))


def get_list(table: Mapping[str, object], key: str) -> ObjList | None:
    return as_obj_list(lookup(table, key))


def get_str_list(table: Mapping[str, object], key: str) -> tuple[str, ...]:
    """Get a list of non-blank strings; other entries are dropped."""
    items = get_list(table, key)
    if items is None:
        return ()
    return tuple(s.strip() for s in items if isinstance(s, str) and s.strip())


def get_str_map(table: Mapping[str, object], key: str) -> dict[str, str]:
    """Get an object of string values (e.g. `variables`, `urls`)."""
    raw = get_table(table, key)
    if raw is None:
        return {}
    out: dict[str, str] = {}
    for k, v in raw.items():
        if isinstance(v, bool):
            continue
        if isinstance(v, (str, int, float)):
            out[k] = str(v)
    return out

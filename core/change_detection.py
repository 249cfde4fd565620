# core/change_detection.py

"""
Field-level change detection between two snapshots of a record.

Snapshots are plain mappings (rows from Supabase) or pydantic models.
Fields are addressed with dotted paths, e.g. ``open_graph.title``; a
digit segment indexes into a list (``tags.0``).

A path that cannot be resolved yields ``MISSING`` (the equivalent of an
undefined value). ``MISSING`` and an absent key are the same thing, but
both are distinct from an explicit ``None``.
"""

from collections.abc import Mapping
from typing import Any, Iterable, List

from pydantic import BaseModel

from models.audit_log import FieldChange


class _Missing:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False


MISSING = _Missing()


def _snapshot(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    return obj


def get_nested_value(obj: Any, path: str) -> Any:
    """Resolve a dotted path, returning MISSING instead of raising."""
    obj = _snapshot(obj)
    if not isinstance(obj, (Mapping, list, tuple)):
        return MISSING

    current = obj
    for key in path.split("."):
        if isinstance(current, Mapping):
            if key not in current:
                return MISSING
            current = current[key]
        elif isinstance(current, (list, tuple)) and key.isdigit():
            index = int(key)
            if index >= len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING

    return current


def values_equal(a: Any, b: Any) -> bool:
    """Deep structural equality; MISSING != None, True != 1."""
    if a is b:
        return True
    if a is MISSING or b is MISSING or a is None or b is None:
        return False

    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b

    a_seq = isinstance(a, (list, tuple))
    b_seq = isinstance(b, (list, tuple))
    if a_seq or b_seq:
        if not (a_seq and b_seq) or len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a, b))

    a_map = isinstance(a, Mapping)
    b_map = isinstance(b, Mapping)
    if a_map or b_map:
        if not (a_map and b_map):
            return False
        keys = set(a.keys()) | set(b.keys())
        return all(values_equal(a.get(k, MISSING), b.get(k, MISSING)) for k in keys)

    return bool(a == b)


def _present(value: Any) -> bool:
    return value is not MISSING and value is not None


def _out(value: Any) -> Any:
    return None if value is MISSING else value


def detect_changes(old: Any, new: Any, fields_to_track: Iterable[str]) -> List[FieldChange]:
    """
    Diff ``old`` and ``new`` over ``fields_to_track``.

    Returns one FieldChange per tracked field whose value differs, in the
    order the fields were given. With no ``old`` snapshot (create) only
    fields that now hold a value are reported; with no ``new`` snapshot
    (delete/reset) only fields that held a value are reported.
    """
    old = _snapshot(old)
    new = _snapshot(new)
    changes = []

    for field in fields_to_track:
        old_value = get_nested_value(old, field) if old is not None else MISSING
        new_value = get_nested_value(new, field) if new is not None else MISSING

        if old is None and not _present(new_value):
            continue
        if new is None and not _present(old_value):
            continue

        if not values_equal(old_value, new_value):
            changes.append(
                FieldChange(field=field, old_value=_out(old_value), new_value=_out(new_value))
            )

    return changes

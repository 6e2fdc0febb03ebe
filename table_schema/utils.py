"""
utils.py – shared, low-level helpers for the table-schema package.

This module consolidates the small type helpers every validator needs:
- Type naming (host value → schema kind name used in messages)
- Table-likeness checks
- Equality keys for ``unique_values``
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Hashable, Iterator, Tuple

# --------------------------------------------------------------------------- #
# Type naming                                                                 #
# --------------------------------------------------------------------------- #

_SEQUENCE_TYPES: Tuple[type, ...] = (list, tuple)


def _type_name(value: Any) -> str:
    """Return the schema kind name for *value* (``string``, ``number``, …)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if _is_table(value):
        return "table"
    if callable(value):
        return "function"
    return type(value).__name__


def _is_kind(value: Any, kind: str) -> bool:
    """True iff *value* is of the scalar *kind*."""
    if kind == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if kind == "string":
        return isinstance(value, str)
    if kind == "boolean":
        return isinstance(value, bool)
    if kind == "function":
        return callable(value) and not _is_table(value)
    return False


# --------------------------------------------------------------------------- #
# Table helpers                                                               #
# --------------------------------------------------------------------------- #

def _is_table(value: Any) -> bool:
    """Mappings, lists and tuples are tables; strings never are."""
    return isinstance(value, Mapping) or isinstance(value, _SEQUENCE_TYPES)


def _entries(value: Any) -> Iterator[Tuple[Any, Any]]:
    """Yield ``(key, item)`` pairs of a table, indices for sequences."""
    if isinstance(value, Mapping):
        yield from value.items()
    else:
        yield from enumerate(value)


def _equality_key(value: Any) -> Hashable:
    """Key under which two entries count as duplicates.

    Tables compare by identity, booleans never equal numbers, other scalars
    compare by value. Unhashable leftovers fall back to identity.
    """
    if _is_table(value):
        return ("ref", id(value))
    if isinstance(value, bool):
        return ("bool", value)
    try:
        hash(value)
    except TypeError:
        return ("ref", id(value))
    return ("val", value)


def _fold(value: Any, case_insensitive: bool) -> Any:
    """Casefold strings when matching case-insensitively."""
    if case_insensitive and isinstance(value, str):
        return value.casefold()
    return value


def _same(a: Any, b: Any, case_insensitive: bool = False) -> bool:
    """Scalar equality used by allow-lists and enums (``True != 1``)."""
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return _fold(a, case_insensitive) == _fold(b, case_insensitive)

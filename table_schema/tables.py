"""
tables.py - structural validation of mappings and sequences
===========================================================

``validate_table(value, schema, name, check)`` validates one table-shaped
value against a :class:`~table_schema.nodes.Table` node and returns a
:class:`TableResult`.  *check* is the engine's per-value dispatcher
``check(value, node, name) -> (issues, normalized)``; it is used for every
present field / element, which is how nested tables and unions recurse.

Evaluated independently, all failures reported together:

* type         - mapping (``fields``/rules) or mapping/list/tuple
* ``count``    - ``(min, max)`` with ``"*"`` for no upper bound
* ``unique_values`` - scalars by value, tables by identity
* ``fields``   - required / default / dispatch, plus ``on_extra_keys``
* ``each``     - every element against one schema
* cross-field rules on the post-default presence set
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field as _field
from typing import Any, Callable, Dict, List, Set, Tuple

from . import rules, utils
from .codes import ErrorCode, Issue, issue
from .nodes import MISSING, Node, Table, Union

__all__ = ["TableResult", "validate_table"]

log = logging.getLogger(__name__)

Check = Callable[[Any, Node, Any], Tuple[List[Issue], Any]]


@dataclass
class TableResult:
    """Outcome of one table validation.

    ``own``     issues about the table itself (type, count, uniqueness)
    ``entries`` issues per key / index, in data order
    ``rules``   cross-field failures (one_of, depends_on, exclusive)
    """

    value: Any
    own: List[Issue] = _field(default_factory=list)
    entries: Dict[Any, List[Issue]] = _field(default_factory=dict)
    rules: List[Issue] = _field(default_factory=list)
    each: bool = False

    @property
    def ok(self) -> bool:
        return not (self.own or self.entries or self.rules)

    def flatten(self, name: Any) -> List[Issue]:
        """All issues as one list, namespaced under the field *name*."""
        out = list(self.own)
        for key, found in self.entries.items():
            for item in found:
                if self.each:
                    out.append(item)
                elif item.path:
                    out.append(item.nested(name))
                else:
                    out.append(item.nested(name, key))
        out.extend(item.nested(name) for item in self.rules)
        return out


# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def _absent_default(node: Node) -> Any:
    if isinstance(node, Union):
        return node.absent_default()
    return node.default


def _check_count(value: Any, schema: Table, name: Any) -> List[Issue]:
    lo, hi = schema.count
    n = len(value)
    if n < lo or (hi != "*" and n > hi):
        return [issue(ErrorCode.INVALID_COUNT, field=name, min=lo, max=hi, count=n)]
    return []


def _check_unique(value: Any, name: Any) -> List[Issue]:
    seen: Dict[Any, List[Any]] = {}
    first: Dict[Any, Any] = {}
    for key, item in utils._entries(value):
        k = utils._equality_key(item)
        seen.setdefault(k, []).append(key)
        first.setdefault(k, item)
    return [
        issue(ErrorCode.DUPLICATE_VALUE, field=name, value=first[k], locations=tuple(keys))
        for k, keys in seen.items()
        if len(keys) > 1
    ]


def _entry_name(name: Any, key: Any, value: Any) -> Any:
    if name is not None:
        return f"{name}[{key}]"
    return key if isinstance(value, Mapping) else f"[{key}]"


# --------------------------------------------------------------------------- #
# Fields / each                                                               #
# --------------------------------------------------------------------------- #

def _validate_fields(value: Mapping, schema: Table, check: Check,
                     result: TableResult) -> Tuple[Dict[str, Any], Set[Any]]:
    normalized: Dict[str, Any] = {}
    defaulted: Dict[str, Any] = {}

    for fname, node in schema.fields.items():
        raw = value.get(fname)
        if raw is None:
            if node.required:
                result.entries[fname] = [issue(ErrorCode.REQUIRED_FIELD, field=fname)]
                continue
            default = _absent_default(node)
            if default is not MISSING:
                defaulted[fname] = copy.deepcopy(default)
            continue

        found, normalized[fname] = check(raw, node, fname)
        if found:
            result.entries[fname] = found

    out: Dict[Any, Any] = {}
    for key, raw in value.items():
        if key in schema.fields:
            if key in normalized:
                out[key] = normalized[key]
        elif schema.on_extra_keys == "ignore":
            out[key] = copy.deepcopy(raw)
        elif schema.on_extra_keys == "remove":
            log.debug("Removing unknown key %r", key)
        else:
            result.entries.setdefault(key, []).append(issue(ErrorCode.UNKNOWN_KEY, field=key))
    out.update(defaulted)

    present = {k for k, v in value.items() if v is not None} | set(defaulted)
    return out, present


def _validate_each(value: Any, schema: Table, name: Any, check: Check,
                   result: TableResult) -> Any:
    result.each = True
    items = []
    for key, item in utils._entries(value):
        found, norm = check(item, schema.each, _entry_name(name, key, value))
        if found:
            result.entries[key] = found
        items.append((key, norm))

    if isinstance(value, Mapping):
        return dict(items)
    # plain containers: subclasses (namedtuples) have their own constructors
    if isinstance(value, list):
        return [norm for _, norm in items]
    return tuple(norm for _, norm in items)


# --------------------------------------------------------------------------- #
# Public entry                                                                #
# --------------------------------------------------------------------------- #

def validate_table(value: Any, schema: Table, name: Any, check: Check) -> TableResult:
    needs_mapping = schema.fields is not None or bool(
        schema.one_of or schema.exclusive or schema.depends_on
    )
    shaped = isinstance(value, Mapping) if needs_mapping else utils._is_table(value)
    if not shaped:
        if needs_mapping and utils._is_table(value):
            expected, actual = "mapping", type(value).__name__
        else:
            expected, actual = "table", utils._type_name(value)
        return TableResult(value, own=[issue(
            ErrorCode.INVALID_TYPE, field=name, expected=expected, actual=actual,
        )])

    result = TableResult(value)
    if schema.count is not None:
        result.own.extend(_check_count(value, schema, name))
    if schema.unique_values:
        result.own.extend(_check_unique(value, name))

    if schema.fields is not None:
        result.value, present = _validate_fields(value, schema, check, result)
    else:
        if schema.each is not None:
            result.value = _validate_each(value, schema, name, check, result)
        else:
            result.value = copy.deepcopy(value)
        present = {k for k, v in value.items() if v is not None} if isinstance(value, Mapping) else set()

    result.rules = rules.evaluate_rules(present, schema)
    return result

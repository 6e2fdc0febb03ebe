"""
loader.py - compile dict / JSON schema documents into schema nodes
==================================================================

Schemas can be authored as plain data, in the compact dialect below, and
compiled once (e.g. at configuration bootstrap) into immutable nodes.

    {"type": "string", "min_len": 3, "pattern": "^[a-z]+$"}
    {"type": "number", "values": {"enum": {"DEBUG": 10}, "reverse": true}}
    {"type": "table", "count": [1, "*"], "each": {"type": "string"}}
    {"union": [{"type": "number"}, {"type": "string"}], "default": 5}
    {"fields": {...}, "on_extra_keys": "ignore",
     "one_of": ["a", "b"], "depends_on": {"field": "a", "requires": "b"}}

A document without ``type`` / ``union`` is a table.  ``description`` keys are
accepted and ignored.

Public API
----------
from_dict(spec) -> Node
read_document(path) -> dict
load_schema(path) -> Table
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any

from .nodes import (
    MISSING,
    SCALAR_KINDS,
    DependsOn,
    Enum,
    Node,
    Scalar,
    SchemaDefinitionError,
    Table,
    Union,
)

__all__ = ["from_dict", "read_document", "load_schema"]

_COMMON_KEYS = {"type", "required", "default", "description"}
_SCALAR_KEYS = _COMMON_KEYS | {
    "min", "max", "integer", "min_len", "max_len", "pattern", "values",
    "not_allowed_values", "case_insensitive", "custom_validator", "error_message",
}
_TABLE_KEYS = _COMMON_KEYS | {
    "fields", "each", "count", "unique_values", "on_extra_keys",
    "one_of", "depends_on", "exclusive",
}
_UNION_KEYS = _COMMON_KEYS | {"union"}

# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def _reject_unknown(spec: Mapping[str, Any], allowed: set, path: str) -> None:
    extras = set(spec) - allowed
    if extras:
        raise SchemaDefinitionError(f"{path}: unexpected schema keys {sorted(extras)}")


def _values(raw: Any, path: str) -> Any:
    if isinstance(raw, Mapping):
        _reject_unknown(raw, {"enum", "reverse", "case_insensitive"}, f"{path}.values")
        if "enum" not in raw:
            raise SchemaDefinitionError(f"{path}.values: an enum needs an 'enum' mapping")
        return Enum(raw["enum"], reverse=raw.get("reverse", False),
                    case_insensitive=raw.get("case_insensitive"))
    return raw


def _depends_on(raw: Any, path: str) -> Any:
    if raw is None:
        return None
    items = [raw] if isinstance(raw, Mapping) else list(raw)
    deps = []
    for item in items:
        if not isinstance(item, Mapping):
            raise SchemaDefinitionError(f"{path}.depends_on: expected {{field, requires}}, got {item!r}")
        _reject_unknown(item, {"field", "requires"}, f"{path}.depends_on")
        deps.append(DependsOn(item.get("field"), item.get("requires")))
    return deps[0] if isinstance(raw, Mapping) else tuple(deps)


def _kind(spec: Mapping[str, Any], root: bool) -> str:
    if "union" in spec:
        return "union"
    stype = spec.get("type")
    if stype == "table" or (stype is None and (root or set(spec) & (_TABLE_KEYS - _COMMON_KEYS))):
        return "table"
    if stype == "integer" or stype in SCALAR_KINDS:
        return "scalar"
    return "unknown"


# --------------------------------------------------------------------------- #
# Compiler                                                                    #
# --------------------------------------------------------------------------- #

def from_dict(spec: Mapping[str, Any], *, path: str = "root", _root: bool = True) -> Node:
    """Compile one schema document (and its children) into nodes."""
    if isinstance(spec, (Scalar, Table, Union)):
        return spec
    if not isinstance(spec, Mapping):
        raise SchemaDefinitionError(f"{path}: schema must be a mapping, got {type(spec).__name__}")

    kind = _kind(spec, _root)
    common = {
        "required": bool(spec.get("required", False)),
        "default": copy.deepcopy(spec["default"]) if "default" in spec else MISSING,
    }

    if kind == "union":
        _reject_unknown(spec, _UNION_KEYS, path)
        alternatives = spec["union"]
        if isinstance(alternatives, (str, Mapping)) or not isinstance(alternatives, (list, tuple)):
            raise SchemaDefinitionError(f"{path}.union: expected a list of schemas")
        return Union(
            tuple(from_dict(a, path=f"{path}.union[{i}]", _root=False)
                  for i, a in enumerate(alternatives)),
            **common,
        )

    if kind == "table":
        _reject_unknown(spec, _TABLE_KEYS, path)
        fields = spec.get("fields")
        if fields is not None:
            if not isinstance(fields, Mapping):
                raise SchemaDefinitionError(f"{path}.fields: expected a mapping")
            fields = {
                name: from_dict(sub, path=f"{path}.{name}", _root=False)
                for name, sub in fields.items()
            }
        each = spec.get("each")
        if each is not None:
            each = from_dict(each, path=f"{path}[]", _root=False)
        return Table(
            fields=fields,
            each=each,
            count=spec.get("count"),
            unique_values=bool(spec.get("unique_values", False)),
            on_extra_keys=spec.get("on_extra_keys", "error"),
            one_of=spec.get("one_of"),
            depends_on=_depends_on(spec.get("depends_on"), path),
            exclusive=spec.get("exclusive"),
            **common,
        )

    if kind == "scalar":
        _reject_unknown(spec, _SCALAR_KEYS, path)
        options = {
            k: v for k, v in spec.items()
            if k not in _COMMON_KEYS and k not in ("values", "custom_validator")
        }
        if "values" in spec:
            options["values"] = _values(spec["values"], path)
        if "custom_validator" in spec:
            options["check"] = spec["custom_validator"]
        if spec["type"] == "integer":
            options["integer"] = True
            return Scalar("number", **options, **common)
        return Scalar(spec["type"], **options, **common)

    raise SchemaDefinitionError(f"{path}: cannot tell the schema kind of {dict(spec)!r}")


# --------------------------------------------------------------------------- #
# Documents on disk / in package data                                         #
# --------------------------------------------------------------------------- #

def _read(path: Path) -> dict:
    """Read & parse a JSON schema, raising crisp errors on failure."""
    try:
        with path.open(encoding="utf-8") as fd:
            return json.load(fd)
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Schema not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def read_document(path: str | Path) -> dict:
    """Return a fresh copy of the JSON schema document at *path*.

    *path* is either a file on disk or the name of a document bundled under
    ``table_schema/schemas``.
    """
    p = Path(path)

    # 1) direct file on disk ------------------------------------------------
    if p.is_file():
        return _read(p)

    # 2) bundled resource (basename first, original second) ----------------
    pkg = resources.files("table_schema.schemas")
    for name in (p.name, str(path)):
        try:
            text = pkg.joinpath(name).read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError):
            continue
        try:
            return copy.deepcopy(json.loads(text))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in bundled schema {name}: {exc}") from exc

    # 3) give up -----------------------------------------------------------
    raise FileNotFoundError(f"Schema '{path}' not found on disk or in package data")


def load_schema(path: str | Path) -> Table:
    """Read a JSON schema document and compile it to a :class:`Table`."""
    node = from_dict(read_document(path), path=Path(path).stem)
    if not isinstance(node, Table):
        raise SchemaDefinitionError(f"{path}: top-level schema must be a table")
    return node

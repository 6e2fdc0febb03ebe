"""
nodes.py - immutable schema nodes and the builder API
=====================================================

A schema is a tree of three node kinds:

* :class:`Scalar` - one primitive value (``string``, ``number``, ``boolean``
  or ``function``) and its constraints.
* :class:`Table`  - a mapping or sequence: declared ``fields`` *or* a
  homogeneous ``each`` schema, plus ``count`` / ``unique_values`` and the
  cross-field rules ``one_of`` / ``depends_on`` / ``exclusive``.
* :class:`Union`  - an ordered list of alternative schemas.

Nodes are frozen dataclasses; they check their own shape on construction and
raise :class:`SchemaDefinitionError` for malformed definitions.  They are
never mutated by validation, so one schema can be shared freely.  Field and
enum mappings are read-only views; nodes hash and compare by identity.

Public API
----------
Scalar, Table, Union, Enum, DependsOn, MISSING, SchemaDefinitionError
string(), number(), integer(), boolean(), function(), table(), union(), enum()
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Optional, Tuple, Union as _TypingUnion

from . import utils

__all__ = [
    "MISSING",
    "SchemaDefinitionError",
    "Enum",
    "DependsOn",
    "Scalar",
    "Table",
    "Union",
    "Node",
    "string",
    "number",
    "integer",
    "boolean",
    "function",
    "table",
    "union",
    "enum",
]

# --------------------------------------------------------------------------- #
# Sentinel & exceptions                                                       #
# --------------------------------------------------------------------------- #

class _Missing:
    """Marks "no default" so that ``None`` and other falsy defaults work."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING: Any = _Missing()


class SchemaDefinitionError(TypeError):
    """Raised when a schema node itself is malformed (a programming error)."""


SCALAR_KINDS = ("string", "number", "boolean", "function")
EXTRA_KEY_POLICIES = ("error", "ignore", "remove")


# --------------------------------------------------------------------------- #
# Enum & rules                                                                #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True, eq=False)
class Enum:
    """Bidirectional label → value table attached to a scalar's ``values``.

    With ``reverse=True`` a label is accepted and replaced by its value;
    the underlying values are accepted as they are either way.
    ``case_insensitive=None`` defers to the owning scalar's flag.
    """

    mapping: Mapping[Any, Any]
    reverse: bool = False
    case_insensitive: Optional[bool] = None

    def __post_init__(self):
        if not isinstance(self.mapping, Mapping) or not self.mapping:
            raise SchemaDefinitionError("Enum mapping must be a non-empty mapping")
        object.__setattr__(self, "mapping", MappingProxyType(dict(self.mapping)))

    def value_for(self, label: Any, case_insensitive: bool = False) -> Any:
        """Return the value behind *label*, or ``MISSING``."""
        for k, v in self.mapping.items():
            if utils._same(k, label, case_insensitive):
                return v
        return MISSING

    def label_for(self, value: Any) -> Any:
        """Return the first label mapping to *value*, or ``MISSING``."""
        for k, v in self.mapping.items():
            if utils._same(v, value):
                return k
        return MISSING

    def canonical(self, value: Any, case_insensitive: bool = False) -> Any:
        """Return the enum value equal to *value*, or ``MISSING``."""
        for v in self.mapping.values():
            if utils._same(v, value, case_insensitive):
                return v
        return MISSING


@dataclass(frozen=True)
class DependsOn:
    """If ``field`` is present, ``requires`` must be present too."""

    field: str
    requires: str

    def __post_init__(self):
        if not isinstance(self.field, str) or not isinstance(self.requires, str):
            raise SchemaDefinitionError("depends_on needs string 'field' and 'requires'")


# --------------------------------------------------------------------------- #
# Nodes                                                                       #
# --------------------------------------------------------------------------- #

def _names(value, rule: str) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise SchemaDefinitionError(f"{rule} must be a list of field names")
    names = tuple(value)
    if not all(isinstance(n, str) for n in names):
        raise SchemaDefinitionError(f"{rule} must only contain field names")
    return names


@dataclass(frozen=True, eq=False)
class Scalar:
    kind: str
    required: bool = False
    default: Any = MISSING
    min: Optional[float] = None
    max: Optional[float] = None
    integer: bool = False
    min_len: Optional[int] = None
    max_len: Optional[int] = None
    pattern: Optional[str] = None
    values: _TypingUnion[Enum, Tuple[Any, ...], None] = None
    not_allowed_values: Optional[Tuple[Any, ...]] = None
    case_insensitive: bool = False
    check: Optional[Callable[[Any], Any]] = None
    error_message: Optional[str] = None

    def __post_init__(self):
        if self.kind not in SCALAR_KINDS:
            raise SchemaDefinitionError(
                f"Unknown scalar kind {self.kind!r}; expected one of {list(SCALAR_KINDS)}"
            )
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as exc:
                raise SchemaDefinitionError(f"Invalid pattern {self.pattern!r}: {exc}") from exc
        if self.values is not None and not isinstance(self.values, Enum):
            if isinstance(self.values, (str, bytes)) or not isinstance(self.values, Sequence):
                raise SchemaDefinitionError("values must be a list or an Enum")
            object.__setattr__(self, "values", tuple(self.values))
        if self.not_allowed_values is not None:
            if isinstance(self.not_allowed_values, str) or not isinstance(self.not_allowed_values, Sequence):
                raise SchemaDefinitionError("not_allowed_values must be a list")
            object.__setattr__(self, "not_allowed_values", tuple(self.not_allowed_values))
        if self.check is not None and not callable(self.check):
            raise SchemaDefinitionError("check must be callable")

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


@dataclass(frozen=True, eq=False)
class Table:
    fields: Optional[Mapping[str, "Node"]] = None
    each: Optional["Node"] = None
    count: Optional[Tuple[int, Any]] = None
    unique_values: bool = False
    on_extra_keys: str = "error"
    required: bool = False
    default: Any = MISSING
    one_of: Optional[Tuple[str, ...]] = None
    depends_on: _TypingUnion[DependsOn, Tuple[DependsOn, ...], None] = None
    exclusive: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.fields is not None and self.each is not None:
            raise SchemaDefinitionError("A table declares either 'fields' or 'each', not both")
        if self.fields is not None:
            if not isinstance(self.fields, Mapping):
                raise SchemaDefinitionError("fields must be a mapping of name -> schema")
            for name, node in self.fields.items():
                if not isinstance(node, NODE_TYPES):
                    raise SchemaDefinitionError(f"Field '{name}' is not a schema node: {node!r}")
            object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        if self.each is not None and not isinstance(self.each, NODE_TYPES):
            raise SchemaDefinitionError(f"each is not a schema node: {self.each!r}")
        if self.count is not None:
            object.__setattr__(self, "count", _check_count(self.count))
        if self.on_extra_keys not in EXTRA_KEY_POLICIES:
            raise SchemaDefinitionError(
                f"on_extra_keys must be one of {list(EXTRA_KEY_POLICIES)}, got {self.on_extra_keys!r}"
            )
        object.__setattr__(self, "one_of", _names(self.one_of, "one_of"))
        object.__setattr__(self, "exclusive", _names(self.exclusive, "exclusive"))
        if isinstance(self.depends_on, Mapping):
            object.__setattr__(self, "depends_on", DependsOn(**self.depends_on))
        elif self.depends_on is not None and not isinstance(self.depends_on, DependsOn):
            deps = tuple(DependsOn(**d) if isinstance(d, Mapping) else d for d in self.depends_on)
            if not all(isinstance(d, DependsOn) for d in deps):
                raise SchemaDefinitionError("depends_on must be a DependsOn or a list of them")
            object.__setattr__(self, "depends_on", deps)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def dependencies(self) -> Tuple[DependsOn, ...]:
        if self.depends_on is None:
            return ()
        if isinstance(self.depends_on, DependsOn):
            return (self.depends_on,)
        return self.depends_on


def _check_count(count) -> Tuple[int, Any]:
    if isinstance(count, (str, bytes)) or not isinstance(count, Sequence) or len(count) != 2:
        raise SchemaDefinitionError("count must be a (min, max) pair")
    lo, hi = count
    if isinstance(lo, bool) or not isinstance(lo, int) or lo < 0:
        raise SchemaDefinitionError(f"count minimum must be a non-negative integer, got {lo!r}")
    if hi != "*" and (isinstance(hi, bool) or not isinstance(hi, int) or hi < lo):
        raise SchemaDefinitionError(f"count maximum must be '*' or an integer >= {lo}, got {hi!r}")
    return (lo, hi)


@dataclass(frozen=True, eq=False)
class Union:
    alternatives: Tuple["Node", ...]
    required: bool = False
    default: Any = MISSING

    def __post_init__(self):
        alts = tuple(self.alternatives)
        if not alts:
            raise SchemaDefinitionError("A union needs at least one alternative")
        for i, alt in enumerate(alts, start=1):
            if not isinstance(alt, NODE_TYPES):
                raise SchemaDefinitionError(f"Union option {i} is not a schema node: {alt!r}")
        object.__setattr__(self, "alternatives", alts)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def absent_default(self) -> Any:
        """Default used when the field is absent: own, else the first option's."""
        if self.has_default:
            return self.default
        first = self.alternatives[0]
        return first.default if first.has_default else MISSING


NODE_TYPES = (Scalar, Table, Union)
Node = _TypingUnion[Scalar, Table, Union]


# --------------------------------------------------------------------------- #
# Builders                                                                    #
# --------------------------------------------------------------------------- #

def string(**constraints: Any) -> Scalar:
    return Scalar("string", **constraints)


def number(**constraints: Any) -> Scalar:
    return Scalar("number", **constraints)


def integer(**constraints: Any) -> Scalar:
    return Scalar("number", integer=True, **constraints)


def boolean(**constraints: Any) -> Scalar:
    return Scalar("boolean", **constraints)


def function(**constraints: Any) -> Scalar:
    return Scalar("function", **constraints)


def table(fields: Optional[Mapping[str, Node]] = None, **options: Any) -> Table:
    return Table(fields=fields, **options)


def union(*alternatives: Node, **options: Any) -> Union:
    return Union(alternatives, **options)


def enum(mapping: Mapping[Any, Any], *, reverse: bool = False,
         case_insensitive: Optional[bool] = None) -> Enum:
    return Enum(mapping, reverse=reverse, case_insensitive=case_insensitive)

"""
codes.py - error codes and the central message catalogue
=========================================================

Every validation failure is recorded as an :class:`Issue`: an
:class:`ErrorCode` plus a small context mapping.  Human-readable messages are
rendered here, from one template per code, so that callers can assert on codes
and never have to parse prose.

Public API
----------
ErrorCode
    Closed set of failure codes (a ``str`` enum, so ``code == "INVALID_TYPE"``).

Issue
    One failure.  Unpacks and indexes like the pair ``(code, message)``.

issue(code, **context) -> Issue
    Convenience constructor.
"""

from __future__ import annotations

from dataclasses import dataclass, field as _field
from enum import Enum
from typing import Any, Callable, Iterator, Mapping

__all__ = ["ErrorCode", "Issue", "issue"]


class ErrorCode(str, Enum):
    INVALID_TYPE = "INVALID_TYPE"
    REQUIRED_FIELD = "REQUIRED_FIELD"
    UNKNOWN_KEY = "UNKNOWN_KEY"
    INVALID_COUNT = "INVALID_COUNT"
    DUPLICATE_VALUE = "DUPLICATE_VALUE"
    UNION_MISMATCH = "UNION_MISMATCH"
    ONE_OF_MISSING = "ONE_OF_MISSING"
    DEPENDENCY_MISSING = "DEPENDENCY_MISSING"
    EXCLUSIVE_CONFLICT = "EXCLUSIVE_CONFLICT"
    NUMBER_TOO_SMALL = "NUMBER_TOO_SMALL"
    NUMBER_TOO_LARGE = "NUMBER_TOO_LARGE"
    PATTERN_MISMATCH = "PATTERN_MISMATCH"
    INVALID_VALUE = "INVALID_VALUE"
    STRING_TOO_SHORT = "STRING_TOO_SHORT"
    STRING_TOO_LONG = "STRING_TOO_LONG"
    FORBIDDEN_VALUE = "FORBIDDEN_VALUE"
    CUSTOM_VALIDATION_FAILED = "CUSTOM_VALIDATION_FAILED"

    def __str__(self) -> str:
        return self.value


# --------------------------------------------------------------------------- #
# Message catalogue                                                           #
# --------------------------------------------------------------------------- #

def _quoted(values) -> str:
    return ", ".join(f"'{v}'" for v in values)


def _reason(failure: "Issue") -> str:
    # an inner union is collapsed so only the outer options are enumerated
    if failure.code is ErrorCode.UNION_MISMATCH:
        n = len(failure.context["attempts"])
        return failure._prefixed(f"{failure.subject} doesn't match any of {n} nested union types")
    return failure.message


def _attempts(ctx: Mapping[str, Any]) -> str:
    parts = []
    for i, failures in enumerate(ctx["attempts"], start=1):
        reason = "; ".join(_reason(f) for f in failures) or "no match"
        parts.append(f"option {i} failed: {reason}")
    return " | ".join(parts)


def _count(ctx: Mapping[str, Any]) -> str:
    if ctx["max"] == "*":
        return f"Expected at least {ctx['min']} items, got {ctx['count']}"
    return f"Expected between {ctx['min']} and {ctx['max']} items, got {ctx['count']}"


_TEMPLATES: dict[ErrorCode, Callable[[str, Mapping[str, Any]], str]] = {
    ErrorCode.INVALID_TYPE: lambda s, c: (
        f"{s} must be an integer, got {c['value']!r}" if c.get("integer")
        else f"Data must be a {c['expected']}, got {c['actual']}" if c["field"] is None
        else f"{s} must be of type {c['expected']}, got {c['actual']}"
    ),
    ErrorCode.REQUIRED_FIELD: lambda s, c: f"{s} is required",
    ErrorCode.UNKNOWN_KEY: lambda s, c: f"Unknown field '{c['field']}'",
    ErrorCode.INVALID_COUNT: lambda s, c: f"{s}: {_count(c)}",
    ErrorCode.DUPLICATE_VALUE: lambda s, c: (
        f"{s} has duplicate value '{c['value']}' at locations {_quoted(c['locations'])}"
    ),
    ErrorCode.UNION_MISMATCH: lambda s, c: f"{s} doesn't match any union type: {_attempts(c)}",
    ErrorCode.ONE_OF_MISSING: lambda s, c: (
        f"At least one of these fields must be present: {', '.join(c['names'])}"
    ),
    ErrorCode.DEPENDENCY_MISSING: lambda s, c: (
        f"Field '{c['field']}' requires field '{c['requires']}' to be present"
    ),
    ErrorCode.EXCLUSIVE_CONFLICT: lambda s, c: (
        f"These fields cannot be present together: {', '.join(c['names'])}"
    ),
    ErrorCode.NUMBER_TOO_SMALL: lambda s, c: f"{s} must be at least {c['limit']}",
    ErrorCode.NUMBER_TOO_LARGE: lambda s, c: f"{s} must be at most {c['limit']}",
    ErrorCode.PATTERN_MISMATCH: lambda s, c: f"{s} does not match required pattern '{c['pattern']}'",
    ErrorCode.INVALID_VALUE: lambda s, c: f"{s} has invalid value '{c['value']}'",
    ErrorCode.STRING_TOO_SHORT: lambda s, c: f"{s} must be at least {c['limit']} characters long",
    ErrorCode.STRING_TOO_LONG: lambda s, c: f"{s} must be at most {c['limit']} characters long",
    ErrorCode.FORBIDDEN_VALUE: lambda s, c: f"{s} has forbidden value '{c['value']}'",
    ErrorCode.CUSTOM_VALIDATION_FAILED: lambda s, c: f"{s}: {c['reason']}",
}


# --------------------------------------------------------------------------- #
# Issue                                                                       #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True, eq=False)
class Issue:
    """A single validation failure.

    ``context`` always carries ``field`` (``None`` for the data as a whole)
    plus whatever the code's template needs.  ``path`` lists the enclosing
    field names when the issue was raised inside a nested table.

    Issues compare equal to other issues with the same code, context and
    path, and to the plain pair ``(code, message)``.
    """

    code: ErrorCode
    context: Mapping[str, Any] = _field(default_factory=dict)
    path: tuple = ()

    @property
    def field(self) -> str | None:
        return self.context.get("field")

    @property
    def subject(self) -> str:
        return f"Field '{self.field}'" if self.field is not None else "Data"

    @property
    def message(self) -> str:
        return self._prefixed(_TEMPLATES[self.code](self.subject, self.context))

    def _prefixed(self, text: str) -> str:
        if self.path:
            return f"{'.'.join(map(str, self.path))}: {text}"
        return text

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Issue):
            return (self.code, self.context, self.path) == (other.code, other.context, other.path)
        if isinstance(other, tuple) and len(other) == 2:
            return (self.code, self.message) == other
        return NotImplemented

    __hash__ = None  # context is a plain dict

    def nested(self, *prefix: Any) -> "Issue":
        """Return a copy namespaced under *prefix* (outermost name first)."""
        return Issue(self.code, self.context, tuple(prefix) + self.path)

    # (code, message) pair protocol ------------------------------------------
    def __iter__(self) -> Iterator[Any]:
        return iter((self.code, self.message))

    def __getitem__(self, index: int) -> Any:
        return (self.code, self.message)[index]

    def __len__(self) -> int:
        return 2

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


def issue(code: ErrorCode, **context: Any) -> Issue:
    """Build an :class:`Issue`; ``field`` defaults to ``None``."""
    context.setdefault("field", None)
    return Issue(code, context)

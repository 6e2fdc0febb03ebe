"""
scalars.py - constraint checking and coercion for primitive values
==================================================================

``validate_scalar(value, schema, name)`` returns ``(issues, coerced)``.
An empty issue list means the value is valid; *coerced* is then the
normalized value (enum transforms and canonical casing applied).

Order of checks
---------------
1. reverse-enum label lookup (``"DEBUG"`` → ``10``)
2. type (stops here on mismatch, nothing else is checkable)
3. integer-only numbers
4. ``values`` allow-list / enum
5. ``not_allowed_values``
6. string length & ``pattern``; number ``min`` / ``max``
7. custom ``check`` callable

Steps 4-7 are independent: every failing constraint is reported.
"""

from __future__ import annotations

import re
from typing import Any, List, Tuple

from . import utils
from .codes import ErrorCode, Issue, issue
from .nodes import MISSING, Enum, Scalar

__all__ = ["validate_scalar"]


def _enum_case(values: Enum, schema: Scalar) -> bool:
    if values.case_insensitive is not None:
        return values.case_insensitive
    return schema.case_insensitive


def _allowed(value: Any, schema: Scalar, transformed: bool) -> Any:
    """Return the canonical form of *value* if allowed, else ``MISSING``."""
    values = schema.values
    if isinstance(values, Enum):
        if transformed:
            return value
        return values.canonical(value, _enum_case(values, schema))
    for candidate in values:
        if utils._same(candidate, value, schema.case_insensitive):
            return candidate
    return MISSING


def validate_scalar(value: Any, schema: Scalar, name: Any) -> Tuple[List[Issue], Any]:
    issues: List[Issue] = []
    values = schema.values
    reverse = isinstance(values, Enum) and values.reverse

    # 1) reverse enum -------------------------------------------------------
    transformed = False
    if reverse:
        mapped = values.value_for(value, _enum_case(values, schema))
        if mapped is not MISSING:
            value, transformed = mapped, True

    # 2) type ---------------------------------------------------------------
    well_typed = utils._is_kind(value, schema.kind)
    if not well_typed and not (reverse and not transformed):
        issues.append(issue(
            ErrorCode.INVALID_TYPE, field=name,
            expected=schema.kind, actual=utils._type_name(value),
        ))
        return issues, value

    # 3) integer-only -------------------------------------------------------
    if well_typed and schema.integer and isinstance(value, float) and not value.is_integer():
        issues.append(issue(ErrorCode.INVALID_TYPE, field=name, integer=True, value=value))
        return issues, value

    # 4) allow-list ---------------------------------------------------------
    if values is not None:
        canonical = _allowed(value, schema, transformed)
        if canonical is MISSING:
            issues.append(issue(ErrorCode.INVALID_VALUE, field=name, value=value))
        else:
            value = canonical
        if not well_typed:
            return issues, value

    # 5) forbidden values ---------------------------------------------------
    if schema.not_allowed_values and any(
        utils._same(v, value, schema.case_insensitive) for v in schema.not_allowed_values
    ):
        issues.append(issue(ErrorCode.FORBIDDEN_VALUE, field=name, value=value))

    # 6) kind-specific bounds -----------------------------------------------
    if schema.kind == "string":
        if schema.min_len is not None and len(value) < schema.min_len:
            issues.append(issue(ErrorCode.STRING_TOO_SHORT, field=name, limit=schema.min_len))
        if schema.max_len is not None and len(value) > schema.max_len:
            issues.append(issue(ErrorCode.STRING_TOO_LONG, field=name, limit=schema.max_len))
        if schema.pattern is not None and re.search(schema.pattern, value) is None:
            issues.append(issue(ErrorCode.PATTERN_MISMATCH, field=name, pattern=schema.pattern))

    elif schema.kind == "number":
        if schema.min is not None and value < schema.min:
            issues.append(issue(ErrorCode.NUMBER_TOO_SMALL, field=name, limit=schema.min))
        if schema.max is not None and value > schema.max:
            issues.append(issue(ErrorCode.NUMBER_TOO_LARGE, field=name, limit=schema.max))

    # 7) custom check -------------------------------------------------------
    if schema.check is not None:
        result = schema.check(value)
        ok, reason = result if isinstance(result, tuple) else (result, None)
        if not ok:
            issues.append(issue(
                ErrorCode.CUSTOM_VALIDATION_FAILED, field=name,
                reason=schema.error_message or reason or "Custom validation failed",
            ))

    return issues, value

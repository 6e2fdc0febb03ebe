"""
validator.py - the recursive validation engine
==============================================

Public API
----------
validate(data, schema) -> (ErrorReport | None, normalized | None)
    Validate *data* against a top-level :class:`~table_schema.nodes.Table`.
    Success is ``(None, normalized)``; failure is ``(report, None)`` where the
    report holds every field and cross-field failure at once.

validate_or_raise(data, schema) -> normalized
    Same, but raises :class:`~table_schema.report.SchemaError` on failure.

The engine is a pure function of ``(data, schema)``: neither argument is
mutated and every call builds fresh output containers, so a schema can be
shared between threads.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from . import scalars, tables, unions
from .codes import ErrorCode, Issue
from .nodes import Node, Scalar, SchemaDefinitionError, Table, Union
from .report import ErrorReport, SchemaError, summarize

__all__ = ["validate", "validate_or_raise"]

log = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Per-value dispatch                                                          #
# --------------------------------------------------------------------------- #

def _check(value: Any, node: Node, name: Any) -> Tuple[List[Issue], Any]:
    """Validate a *present* value against any node kind."""
    if isinstance(node, Scalar):
        return scalars.validate_scalar(value, node, name)
    if isinstance(node, Table):
        result = tables.validate_table(value, node, name, _check)
        return result.flatten(name), result.value
    if isinstance(node, Union):
        return unions.validate_union(value, node, name, _check)
    raise SchemaDefinitionError(f"Not a schema node: {node!r}")


# --------------------------------------------------------------------------- #
# Entry points                                                                #
# --------------------------------------------------------------------------- #

def validate(data: Any, schema: Table) -> Tuple[Optional[ErrorReport], Any]:
    if not isinstance(schema, Table):
        raise TypeError(
            f"validate() expects a Table schema, got {type(schema).__name__}; "
            "use table_schema.loader.from_dict() for dict schemas"
        )

    result = tables.validate_table(data, schema, None, _check)
    if result.ok:
        return None, result.value

    general = result.own + result.rules
    if result.own and result.own[0].code is ErrorCode.INVALID_TYPE and result.own[0].field is None:
        summary = result.own[0].message
    else:
        summary = summarize(result.entries)

    report = ErrorReport(
        summary=summary,
        fields=result.entries,
        all=general,
        data=data,
        schema=schema,
    )
    log.debug("%s (%d issue(s))", summary, sum(1 for _ in report.issues()))
    return report, None


def validate_or_raise(data: Any, schema: Table) -> Any:
    report, normalized = validate(data, schema)
    if report is not None:
        raise SchemaError(report)
    return normalized

"""
unions.py - resolve a value against an ordered list of alternatives
===================================================================

Every alternative is tried in declared order, each in isolation.  The first
one that validates cleanly supplies the normalized value (with its own
defaults and enum transforms).  When none does, a single ``UNION_MISMATCH``
issue records every attempt's failures, so its message reads
``option 1 failed: ... | option 2 failed: ...``.

Absence is not handled here: the engine substitutes the union's default, or
the first alternative's default, without evaluating any alternative.
"""

from __future__ import annotations

import logging
from typing import Any, List, Tuple

from .codes import ErrorCode, Issue, issue
from .nodes import Union
from .tables import Check

__all__ = ["validate_union"]

log = logging.getLogger(__name__)


def validate_union(value: Any, schema: Union, name: Any, check: Check) -> Tuple[List[Issue], Any]:
    attempts = []
    for i, alternative in enumerate(schema.alternatives, start=1):
        found, normalized = check(value, alternative, name)
        if not found:
            log.debug("Field %r matched union option %d", name, i)
            return [], normalized
        attempts.append(tuple(found))

    log.debug("Field %r matched none of %d union options", name, len(attempts))
    return [issue(ErrorCode.UNION_MISMATCH, field=name, attempts=tuple(attempts))], value

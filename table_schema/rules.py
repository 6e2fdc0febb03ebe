"""
rules.py - cross-field rules over one table level
==================================================

Rules only look at *presence*: the set of keys that are present after
defaults have been applied (a defaulted field counts as present, a key whose
value is ``None`` does not).  They run after field validation, in a fixed
order: ``one_of`` → ``depends_on`` → ``exclusive``.
"""

from __future__ import annotations

from typing import AbstractSet, List

from .codes import ErrorCode, Issue, issue
from .nodes import Table

__all__ = ["evaluate_rules"]


def evaluate_rules(present: AbstractSet[str], schema: Table) -> List[Issue]:
    """Return the cross-field failures of *schema* for the *present* keys."""
    issues: List[Issue] = []

    if schema.one_of and not any(name in present for name in schema.one_of):
        issues.append(issue(ErrorCode.ONE_OF_MISSING, names=schema.one_of))

    for dep in schema.dependencies:
        if dep.field in present and dep.requires not in present:
            issues.append(issue(ErrorCode.DEPENDENCY_MISSING, field=dep.field, requires=dep.requires))

    if schema.exclusive:
        found = [name for name in schema.exclusive if name in present]
        if len(found) > 1:
            issues.append(issue(ErrorCode.EXCLUSIVE_CONFLICT, names=tuple(found)))

    return issues

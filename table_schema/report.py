"""
report.py - the structured error report and its renderings
==========================================================

Public API
----------
ErrorReport
    ``summary`` one-line string, ``fields`` per-field issue lists,
    ``all`` table-level and cross-field issues, plus the ``data`` and
    ``schema`` that produced it.

SchemaError
    ``ValueError`` carrying a report; raised by
    :func:`table_schema.validator.validate_or_raise` only.
"""

from __future__ import annotations

from dataclasses import dataclass, field as _field
from typing import Any, Dict, Iterator, List, Optional

from .codes import ErrorCode, Issue

__all__ = ["ErrorReport", "SchemaError", "summarize"]


def summarize(fields: Dict[Any, List[Issue]]) -> str:
    """``"Validation failed for fields: a, b"`` (names sorted)."""
    if not fields:
        return "Validation failed"
    names = sorted(str(name) for name in fields)
    return f"Validation failed for fields: {', '.join(names)}"


@dataclass
class ErrorReport:
    summary: str
    fields: Dict[Any, List[Issue]] = _field(default_factory=dict)
    all: List[Issue] = _field(default_factory=list)
    data: Any = _field(default=None, repr=False)
    schema: Any = _field(default=None, repr=False)

    def issues(self) -> Iterator[Issue]:
        """Every issue: per-field lists first, then ``all``."""
        for found in self.fields.values():
            yield from found
        yield from self.all

    def codes(self, field: Optional[Any] = None) -> List[ErrorCode]:
        """Codes for one field, or for the whole report when *field* is None."""
        if field is None:
            return [i.code for i in self.issues()]
        return [i.code for i in self.fields.get(field, [])]

    def messages(self, field: Optional[Any] = None) -> List[str]:
        if field is None:
            return [i.message for i in self.issues()]
        return [i.message for i in self.fields.get(field, [])]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view (codes as strings, field names as strings)."""
        def pairs(found):
            return [{"code": str(i.code), "message": i.message} for i in found]

        return {
            "summary": self.summary,
            "fields": {str(k): pairs(v) for k, v in self.fields.items()},
            "all": pairs(self.all),
        }

    def format(self) -> str:
        lines = [self.summary]
        for name, found in self.fields.items():
            for i in found:
                lines.append(f"  - {name}: [{i.code}] {i.message}")
        for i in self.all:
            lines.append(f"  - [{i.code}] {i.message}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format()

    def to_markdown(self, *, heading_level: int = 2) -> str:
        """Markdown card: a heading per failing field, a bullet per issue."""
        h = "#" * heading_level
        parts: List[str] = [f"{h} {self.summary}", ""]
        sections = list(self.fields.items())
        if self.all:
            sections.append(("General", self.all))
        for name, found in sections:
            parts.append(f"{h}# {name}")
            parts.extend(f"- **{i.code}**: {i.message}" for i in found)
            parts.append("")             # blank line after each section
        return "\n".join(parts).rstrip()


class SchemaError(ValueError):
    """Raised when data violates a schema and the caller asked for an exception."""

    def __init__(self, report: ErrorReport):
        super().__init__(report.format())
        self.report = report

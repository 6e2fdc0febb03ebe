"""
parser.py - turn user-supplied input into raw data for validation
=================================================================

Public API
----------
`build_arg_parser(schema: Table) -> argparse.ArgumentParser`
    Construct an `argparse` instance with one ``--flag`` per top-level field.

`parse_input(source=None, *, schema) -> dict`
    Convert *source* (Mapping / Path / JSON literal / JSON file / CLI tokens)
    into a plain `dict` keyed by the schema's field names.

Neither function validates anything: pass the result to
:func:`table_schema.validate`, which applies defaults and reports errors.
"""

from __future__ import annotations

import argparse
import json
import shlex
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence

from .nodes import Enum, Node, Scalar, Table

__all__ = ["build_arg_parser", "parse_input"]

# --------------------------------------------------------------------------- #
# Value converters                                                            #
# --------------------------------------------------------------------------- #

def _json_value(text: str) -> Any:
    """JSON literal if it parses, the raw string otherwise."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _number(text: str) -> Any:
    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            pass
    return text  # enum labels ("DEBUG") are resolved by the validator


def _flag_kwargs(name: str, node: Node) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"dest": name, "default": argparse.SUPPRESS}

    if not isinstance(node, Scalar):
        kwargs["type"] = _json_value
        kwargs["metavar"] = "JSON"
        return kwargs

    if node.kind == "boolean":
        kwargs["action"] = "store_true"
        return kwargs

    kwargs["type"] = _number if node.kind == "number" else str
    if node.values is not None and not isinstance(node.values, Enum) and not node.case_insensitive:
        kwargs["choices"] = list(node.values)
    return kwargs


# --------------------------------------------------------------------------- #
# Parser builder                                                              #
# --------------------------------------------------------------------------- #

def build_arg_parser(schema: Table, *, description: str = "") -> argparse.ArgumentParser:
    """Return an :pyclass:`argparse.ArgumentParser` for *schema*'s fields.

    Scalars map to typed flags (``store_true`` for booleans, ``choices`` for
    plain allow-lists); tables and unions take a JSON literal.
    """
    p = argparse.ArgumentParser(
        description=description,
        fromfile_prefix_chars="@",
        add_help=False,
    )
    p.add_argument("-h", "--help", action="help", help="Show this help message and exit.")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="JSON file containing the full input object; overrides all other flags.",
    )

    for name, node in (schema.fields or {}).items():
        if name == "config":
            continue
        p.add_argument(f"--{name.replace('_', '-')}", **_flag_kwargs(name, node))

    return p


# --------------------------------------------------------------------------- #
# Input sources                                                               #
# --------------------------------------------------------------------------- #

def _json_object(text: str, origin: str) -> dict[str, Any]:
    """Parse *text* as a JSON object; any other JSON value is rejected."""
    try:
        loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {origin}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ValueError(f"{origin}: expected a JSON object, got {type(loaded).__name__}")
    return loaded


def _read_object(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise FileNotFoundError(f"Input file not found: {path}")
    return _json_object(path.read_text(encoding="utf-8"), str(path))


def _from_argv(argv: Sequence[str], schema: Table) -> dict[str, Any]:
    namespace, unknown = build_arg_parser(schema).parse_known_args(list(argv))
    if unknown:
        raise ValueError(f"Unknown argument(s): {unknown}. Use --help.")
    raw = vars(namespace)

    # --config replaces every other flag
    config = raw.pop("config", None)
    if config is not None:
        return _read_object(Path(config))
    return raw


def parse_input(
    source: None | str | Path | Sequence[str] | Mapping[str, Any] = None,
    *,
    schema: Table,
) -> dict[str, Any]:
    """Convert *source* to a *raw* ``dict`` (no validation).

    Parameters
    ----------
    source
        Supported variants:
        * ``Mapping`` - shallow copy.
        * ``Path`` - JSON object file on disk.
        * ``str`` - JSON literal when it starts with ``{`` or ``[``, else an
          existing JSON file, else a command line split with :mod:`shlex`.
        * ``Sequence[str]`` - command-line tokens.
        * ``None`` - ``sys.argv[1:]``.
    schema
        The table schema that drives CLI flag generation.

    Every JSON source must hold an object; anything else is a ``ValueError``.
    Keys are passed through as given so that the validator can apply the
    schema's ``on_extra_keys`` policy.
    """
    if isinstance(source, Mapping):
        return dict(source)
    if isinstance(source, Path):
        return _read_object(source)
    if isinstance(source, str):
        if source.lstrip()[:1] in ("{", "["):
            return _json_object(source, "JSON literal")
        if Path(source).is_file():
            return _read_object(Path(source))
        return _from_argv(shlex.split(source), schema)
    if source is None:
        return _from_argv(sys.argv[1:], schema)
    if isinstance(source, Sequence) and not isinstance(source, bytes):
        return _from_argv(source, schema)
    raise TypeError(f"Unsupported type for parse_input: {type(source).__name__}")

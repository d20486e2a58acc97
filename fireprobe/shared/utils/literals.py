"""Constrained parsing of user-typed JSON literals.

Testers paste values the way they appear in client code: object keys
may be unquoted, strings single-quoted, trailing commas left in. JSON5
covers that superset and only ever builds plain data (dict, list, str,
numbers, bool, None); nothing typed here is evaluated as code.
"""

import re
from typing import Any

import json5

_JSON_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")


class LiteralSyntaxError(ValueError):
    """Raised when text is not a single well-formed literal."""


def parse_literal(text: str) -> Any:
    """Parse one JSON-like value (object literal with or without quoted keys).

    Raises:
        LiteralSyntaxError: If the text is empty or not a single literal.
    """
    if not text or not text.strip():
        raise LiteralSyntaxError("empty literal")
    try:
        return json5.loads(text)
    except ValueError as exc:
        raise LiteralSyntaxError(str(exc)) from exc


def parse_argument_list(text: str) -> list[Any]:
    """Parse comma-separated literals as they appear between call parentheses.

    ``'1, {a: 2}'`` -> ``[1, {"a": 2}]``; blank text yields an empty list.
    """
    if not text.strip():
        return []
    parsed = parse_literal(f"[{text}]")
    if not isinstance(parsed, list):
        raise LiteralSyntaxError("argument list did not parse as a list")
    return parsed


def coerce_filter_value(raw: str) -> Any:
    """Coerce a query filter value typed as text.

    Values that look like a JSON number, boolean, array or object literal
    are decoded; anything else (or anything that fails to decode) is kept
    as the literal string, so ``NaN`` or ``1_000`` stay text.
    """
    looks_structured = raw.startswith(("[", "{")) or raw in ("true", "false")
    if not looks_structured and not _JSON_NUMBER.fullmatch(raw):
        return raw
    try:
        return json5.loads(raw)
    except ValueError:
        return raw

"""Syntax checks for user-typed identifiers (field paths, function calls)."""

import re
from typing import ClassVar


class InputValidator:
    """Pattern checks applied before any input reaches a backend call."""

    FIELD_PATH_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"[A-Za-z][A-Za-z0-9_.]*")
    CALL_HEAD_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[A-Za-z][A-Za-z0-9]*\(")
    FUNCTION_NAME_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")

    @classmethod
    def is_field_path(cls, value: str) -> bool:
        """Return True if value is a dotted field path starting with a letter."""
        return bool(cls.FIELD_PATH_PATTERN.fullmatch(value))

    @classmethod
    def has_call_head(cls, value: str) -> bool:
        """Return True if value starts with ``name(`` where name is alphanumeric."""
        return bool(cls.CALL_HEAD_PATTERN.match(value))

    @classmethod
    def is_function_name(cls, value: str) -> bool:
        """Return True if value is a deployable function name."""
        return bool(cls.FUNCTION_NAME_PATTERN.fullmatch(value))

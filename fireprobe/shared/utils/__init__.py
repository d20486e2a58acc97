"""Shared utilities: datetime, generators, literal parsing, validation."""

from fireprobe.shared.utils.datetime import from_rfc3339, utc_now, wall_clock
from fireprobe.shared.utils.generators import generate_cuid, generate_entry_id
from fireprobe.shared.utils.json_parts import BodyPart, split_json_parts
from fireprobe.shared.utils.literals import (
    LiteralSyntaxError,
    coerce_filter_value,
    parse_argument_list,
    parse_literal,
)
from fireprobe.shared.utils.validation import InputValidator

__all__ = [
    "generate_cuid",
    "generate_entry_id",
    "utc_now",
    "wall_clock",
    "from_rfc3339",
    "BodyPart",
    "split_json_parts",
    "LiteralSyntaxError",
    "coerce_filter_value",
    "parse_argument_list",
    "parse_literal",
    "InputValidator",
]

"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from fireprobe.shared.utils import (
    generate_cuid,
    generate_entry_id,
    utc_now,
    wall_clock,
)

__all__ = [
    "generate_cuid",
    "generate_entry_id",
    "utc_now",
    "wall_clock",
]

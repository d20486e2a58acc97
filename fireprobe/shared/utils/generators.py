"""ID and value generators (e.g. CUID)."""

import time

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_entry_id() -> str:
    """Return a sortable log entry id: epoch milliseconds plus a random tiebreaker.

    Example: ``1760889600123-k3j9x2a``.
    """
    return f"{time.time_ns() // 1_000_000}-{generate_cuid()[:7]}"

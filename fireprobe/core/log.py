"""Operation log: the single ordered, typed record of every outcome.

Append-only apart from a bulk clear. Entries are immutable and appear in
settlement order. Each append is mirrored to the process logger.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from fireprobe.domain.enums import LogClass
from fireprobe.shared.utils.datetime import wall_clock
from fireprobe.shared.utils.generators import generate_entry_id
from fireprobe.shared.utils.json_parts import BodyPart, split_json_parts

logger = logging.getLogger(__name__)

_LEVELS = {
    LogClass.INFO: logging.INFO,
    LogClass.SUCCESS: logging.INFO,
    LogClass.ERROR: logging.WARNING,
}


@dataclass(frozen=True)
class LogEntry:
    """One log line. ``body`` may interleave prose with complete JSON fragments."""

    body: str
    classification: LogClass = LogClass.INFO
    id: str = field(default_factory=generate_entry_id)
    timestamp: str = field(default_factory=wall_clock)

    def parts(self) -> list[BodyPart]:
        """Return the body split into prose and JSON display segments."""
        return split_json_parts(self.body)

    def as_text(self) -> str:
        """Return a copy-friendly single-entry rendering."""
        return f"[{self.timestamp}] {self.classification.value.upper()} {self.body}"


class OperationLog:
    """Ordered in-memory sequence of LogEntry."""

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []

    def append(self, body: str, classification: LogClass = LogClass.INFO) -> LogEntry:
        """Create, store and return a new entry."""
        entry = LogEntry(body=body, classification=LogClass(classification))
        self._entries.append(entry)
        logger.log(_LEVELS[entry.classification], "[%s] %s", entry.classification.value, body)
        return entry

    def info(self, body: str) -> LogEntry:
        return self.append(body, LogClass.INFO)

    def success(self, body: str) -> LogEntry:
        return self.append(body, LogClass.SUCCESS)

    def error(self, body: str) -> LogEntry:
        return self.append(body, LogClass.ERROR)

    def entries(self) -> list[LogEntry]:
        """Return a snapshot of the entries in order."""
        return list(self._entries)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries())

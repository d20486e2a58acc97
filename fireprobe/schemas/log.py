"""Operation log API schemas."""

from pydantic import BaseModel

from fireprobe.core.log import LogEntry
from fireprobe.domain.enums import LogClass


class LogPartResponse(BaseModel):
    """A display segment: prose, or a pretty-printed JSON fragment."""

    text: str
    is_json: bool


class LogEntryResponse(BaseModel):
    id: str
    timestamp: str
    classification: LogClass
    body: str
    parts: list[LogPartResponse]

    @classmethod
    def from_entry(cls, entry: LogEntry) -> "LogEntryResponse":
        return cls(
            id=entry.id,
            timestamp=entry.timestamp,
            classification=entry.classification,
            body=entry.body,
            parts=[LogPartResponse(text=p.text, is_json=p.is_json) for p in entry.parts()],
        )


class LogResponse(BaseModel):
    """All entries in settlement order."""

    entries: list[LogEntryResponse]
    count: int

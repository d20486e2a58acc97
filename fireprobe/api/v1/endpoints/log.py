"""Operation log endpoints."""

from typing import Literal

from fastapi import APIRouter, Query, Response, status
from fastapi.responses import PlainTextResponse

from fireprobe.api.v1.dependencies import ConsoleDep
from fireprobe.schemas.log import LogEntryResponse, LogResponse

router = APIRouter()


@router.get("", response_model=LogResponse)
def read_log(
    console: ConsoleDep,
    output: Literal["json", "text"] = Query(default="json", alias="format"),
) -> LogResponse | PlainTextResponse:
    """Return every entry in settlement order; ``format=text`` gives copyable lines."""
    entries = console.log.entries()
    if output == "text":
        return PlainTextResponse("\n".join(entry.as_text() for entry in entries))
    return LogResponse(
        entries=[LogEntryResponse.from_entry(entry) for entry in entries],
        count=len(entries),
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_log(console: ConsoleDep) -> Response:
    """Drop every entry."""
    console.log.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Operator parameter records.

Plain, short-lived records the presentation layer hands to an operator.
Shape is validated by the API schemas; semantic validation (field-name
syntax, action/field combinations) belongs to the operators.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass

from fireprobe.domain.enums import BlobAction, HttpMethod, SortDirection, StoreAction


@dataclass(frozen=True)
class StoreRequest:
    """One structured-store operation."""

    collection_path: str
    action: StoreAction
    document_id: str = ""
    json_body: str = ""
    limit: int = 100
    sort_field: str = ""
    sort_direction: SortDirection = SortDirection.ASC
    filter_field: str = ""
    filter_operator: str = ""
    filter_value: str = ""
    merge_on_set: bool = False

    @property
    def has_sort(self) -> bool:
        return bool(self.sort_field)

    @property
    def has_filter(self) -> bool:
        return bool(self.filter_field or self.filter_operator or self.filter_value)


@dataclass(frozen=True)
class UploadSource:
    """A file selected for upload."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    async def chunks(self, chunk_size: int) -> AsyncIterator[bytes]:
        """Yield the content in fixed-size chunks (one progress tick each)."""
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start : start + chunk_size]


@dataclass(frozen=True)
class BlobRequest:
    """One blob storage operation."""

    path: str
    action: BlobAction
    limit: int = 100
    file: UploadSource | None = None


@dataclass(frozen=True)
class HttpFunctionRequest:
    """One HTTP (on_request) function call."""

    name: str
    method: HttpMethod = HttpMethod.GET
    arguments: str = ""

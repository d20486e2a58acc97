"""Cloud Storage for Firebase REST client (the v0 API the web SDK speaks).

Listing uses prefix + delimiter paging, uploads use the resumable
protocol so progress can be reported per chunk, and download URLs are
built from the object's download token.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import quote

import httpx

from fireprobe.application.dtos.backend import BlobListing, UploadedBlob
from fireprobe.application.dtos.requests import UploadSource
from fireprobe.application.interfaces import ProgressCallback
from fireprobe.domain.exceptions import BackendError
from fireprobe.infrastructure.firebase._http import error_payload, json_body, send

logger = logging.getLogger(__name__)

TokenSource = Callable[[], Awaitable[str | None]]

# Fields the web SDK exposes from an object resource, in its naming
_METADATA_FIELDS = (
    "bucket",
    "generation",
    "metageneration",
    "timeCreated",
    "updated",
    "md5Hash",
    "cacheControl",
    "contentDisposition",
    "contentEncoding",
    "contentLanguage",
    "contentType",
    "customMetadata",
)


def storage_error(path: str) -> Callable[[httpx.Response], BackendError]:
    """Build an error mapper naming the object path, like the web SDK does."""

    def mapper(response: httpx.Response) -> BackendError:
        status = response.status_code
        if status == 404:
            code = "storage/object-not-found"
            message = f"Object '{path}' does not exist."
        elif status in (401, 403):
            code = "storage/unauthorized"
            message = f"User does not have permission to access '{path}'."
        elif status == 429:
            code = "storage/quota-exceeded"
            message = "Quota exceeded."
        else:
            _, server_message = error_payload(response)
            code = "storage/unknown"
            message = server_message or f"An unknown error occurred (HTTP {status})."
        return BackendError(code, f"Firebase Storage: {message} ({code})")

    return mapper


def to_metadata(resource: dict[str, Any]) -> dict[str, Any]:
    """Convert an object resource to the web SDK FullMetadata shape."""
    full_path = resource.get("name", "")
    metadata: dict[str, Any] = {
        "type": "file",
        "fullPath": full_path,
        "name": full_path.rsplit("/", 1)[-1],
        "size": int(resource.get("size") or 0),
    }
    for key in _METADATA_FIELDS:
        if key in resource:
            metadata[key] = resource[key]
    return metadata


class StorageRESTClient:
    """Blob storage handle bound to one bucket."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        bucket: str,
        base_url: str = "https://firebasestorage.googleapis.com",
        token_source: TokenSource,
        chunk_size: int = 256 * 1024,
    ) -> None:
        self._http = http
        self.bucket = bucket
        self._bucket_url = f"{base_url.rstrip('/')}/v0/b/{quote(bucket, safe='')}/o"
        self._token_source = token_source
        self._chunk_size = chunk_size

    def _object_url(self, path: str) -> str:
        return f"{self._bucket_url}/{quote(path.strip('/'), safe='')}"

    async def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = dict(extra or {})
        id_token = await self._token_source()
        if id_token:
            headers["Authorization"] = f"Firebase {id_token}"
        return headers

    async def list_all(self, path: str) -> BlobListing:
        """List every file and folder directly under path, following page tokens."""
        prefix = f"{path.strip('/')}/" if path.strip("/") else ""
        items: list[str] = []
        prefixes: list[str] = []
        params: dict[str, str] = {"prefix": prefix, "delimiter": "/"}
        while True:
            response = await send(
                self._http,
                "GET",
                self._bucket_url,
                params=params,
                headers=await self._headers(),
                on_error=storage_error(path or "/"),
            )
            page = json_body(response)
            items.extend(item["name"] for item in page.get("items", []))
            prefixes.extend(p.rstrip("/") for p in page.get("prefixes", []))
            token = page.get("nextPageToken")
            if not token:
                return BlobListing(items=items, prefixes=prefixes)
            params = {**params, "pageToken": token}

    async def upload(
        self,
        path: str,
        source: UploadSource,
        on_progress: ProgressCallback,
    ) -> UploadedBlob:
        """Resumable upload; on_progress fires after every chunk."""
        name = path.strip("/")
        on_error = storage_error(name)
        start = await send(
            self._http,
            "POST",
            self._bucket_url,
            params={"name": name},
            json={"name": name, "contentType": source.content_type},
            headers=await self._headers(
                {
                    "X-Goog-Upload-Protocol": "resumable",
                    "X-Goog-Upload-Command": "start",
                    "X-Goog-Upload-Header-Content-Length": str(source.size),
                    "X-Goog-Upload-Header-Content-Type": source.content_type,
                }
            ),
            on_error=on_error,
        )
        upload_url = start.headers.get("X-Goog-Upload-URL")
        if not upload_url:
            raise BackendError("storage/unknown", "Firebase Storage: Upload session was not created. (storage/unknown)")

        total = source.size
        offset = 0
        resource: dict[str, Any] = {}
        chunks = [chunk async for chunk in source.chunks(self._chunk_size)] or [b""]
        for index, chunk in enumerate(chunks):
            last = index == len(chunks) - 1
            response = await send(
                self._http,
                "POST",
                upload_url,
                content=chunk,
                headers=await self._headers(
                    {
                        "X-Goog-Upload-Command": "upload, finalize" if last else "upload",
                        "X-Goog-Upload-Offset": str(offset),
                    }
                ),
                on_error=on_error,
            )
            offset += len(chunk)
            on_progress(offset, total)
            if last:
                resource = json_body(response)

        logger.debug("Upload of %s finalized (%d bytes)", name, offset)
        return UploadedBlob(
            full_path=resource.get("name", name),
            size=int(resource.get("size") or total),
            download_url=self._download_url(name, resource),
        )

    def _download_url(self, path: str, resource: dict[str, Any]) -> str:
        tokens = resource.get("downloadTokens") or ""
        token = tokens.split(",")[0] if tokens else ""
        if not token:
            raise BackendError(
                "storage/no-download-url",
                f"Firebase Storage: The given file '{path}' does not have any download URLs. (storage/no-download-url)",
            )
        return f"{self._object_url(path)}?alt=media&token={token}"

    async def _resource(self, path: str) -> dict[str, Any]:
        response = await send(
            self._http,
            "GET",
            self._object_url(path),
            headers=await self._headers(),
            on_error=storage_error(path),
        )
        return json_body(response)

    async def get_download_url(self, path: str) -> str:
        return self._download_url(path, await self._resource(path))

    async def delete(self, path: str) -> None:
        await send(
            self._http,
            "DELETE",
            self._object_url(path),
            headers=await self._headers(),
            on_error=storage_error(path),
        )

    async def get_metadata(self, path: str) -> dict[str, Any]:
        return to_metadata(await self._resource(path))

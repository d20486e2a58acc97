"""Blob storage operator: list, upload, download URL, delete and metadata."""

import json
import logging

from fireprobe.application.dtos.requests import BlobRequest, UploadSource
from fireprobe.application.interfaces import IBlobStore
from fireprobe.core.log import OperationLog
from fireprobe.core.session import Session
from fireprobe.domain.enums import BlobAction
from fireprobe.domain.exceptions import BackendError, FireprobeException

logger = logging.getLogger(__name__)

# action -> (missing path message, failure prefix)
_PATH_MESSAGES = {
    BlobAction.DOWNLOAD: ("Please specify a storage path to download", "Download error"),
    BlobAction.DELETE: ("Please specify a storage path to delete", "Delete error"),
    BlobAction.GET_METADATA: ("Please specify a storage path to get metadata", "Metadata error"),
}


def format_listing(path: str, items: list[str], prefixes: list[str], limit: int) -> str:
    """Render one listing level, capping files and folders independently."""
    shown_items = items[:limit]
    shown_prefixes = prefixes[:limit]
    text = f"Listing storage contents\nPath: {path or '(root)'}\n"
    text += f"Files ({len(shown_items)}/{len(items)}):\n"
    text += "".join(f"  {item}\n" for item in shown_items)
    text += f"Folders ({len(shown_prefixes)}/{len(prefixes)}):\n"
    text += "".join(f"  {prefix}\n" for prefix in shown_prefixes)
    return text


class BlobOperator:
    """Executes one blob storage request; requires a configured bucket."""

    def __init__(self, session: Session, log: OperationLog) -> None:
        self._session = session
        self._log = log

    async def execute(self, request: BlobRequest) -> None:
        try:
            blob = self._session.blob
        except FireprobeException as exc:
            self._log.error(exc.message)
            return

        action = request.action
        try:
            action = BlobAction(action)
        except ValueError:
            self._log.error("Invalid storage operation")
            return

        path = request.path.strip()
        if action is BlobAction.LIST:
            await self._list(blob, path, request.limit)
        elif action is BlobAction.UPLOAD:
            await self._upload(blob, path, request.file)
        else:
            await self._by_path(blob, action, path)

    async def _list(self, blob: IBlobStore, path: str, limit: int) -> None:
        try:
            listing = await blob.list_all(path)
        except BackendError as exc:
            self._log.error(f"Error listing storage: {exc.message}")
            return
        self._log.success(format_listing(path, listing.items, listing.prefixes, limit))

    async def _upload(self, blob: IBlobStore, path: str, source: UploadSource | None) -> None:
        if source is None:
            self._log.error("Please select a file to upload")
            return
        if not path:
            self._log.error("Please specify a storage path for the upload")
            return

        self._log.info(f"Uploading file: {source.filename} to {path}...")

        def on_progress(transferred: int, total: int) -> None:
            if total > 0:
                self._log.info(f"Upload progress: {transferred / total * 100:.1f}%")

        try:
            uploaded = await blob.upload(path, source, on_progress)
        except BackendError as exc:
            self._log.error(f"Upload error: {exc.message}")
            return
        logger.info("Uploaded %d bytes to %s", uploaded.size, uploaded.full_path)
        self._log.success(
            f"Upload successful!\nFile: {path}\nSize: {uploaded.size} bytes\n"
            f"Download URL: {uploaded.download_url}"
        )

    async def _by_path(self, blob: IBlobStore, action: BlobAction, path: str) -> None:
        missing, failure = _PATH_MESSAGES[action]
        if not path:
            self._log.error(missing)
            return
        try:
            if action is BlobAction.DOWNLOAD:
                url = await blob.get_download_url(path)
                self._log.success(f"Download URL for: {path}\nURL: {url}")
            elif action is BlobAction.DELETE:
                await blob.delete(path)
                self._log.success(f"Deleted: {path}")
            else:
                metadata = await blob.get_metadata(path)
                self._log.success(
                    f"Metadata for: {path}\n{json.dumps(metadata, indent=2, ensure_ascii=False, default=str)}"
                )
        except BackendError as exc:
            self._log.error(f"{failure}: {exc.message}")

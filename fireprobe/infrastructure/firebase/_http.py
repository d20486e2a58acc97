"""Shared request helper and error translation for the Firebase REST adapters.

Every adapter funnels its HTTP calls through ``send()`` so transport
failures and Google API error payloads surface as BackendError with a
client-SDK style ``code``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from fireprobe.domain.exceptions import BackendError

logger = logging.getLogger(__name__)

ErrorMapper = Callable[[httpx.Response], BackendError]

# HTTP status -> canonical code (google.rpc.Code, kebab-cased)
_STATUS_CODES = {
    400: "invalid-argument",
    401: "unauthenticated",
    403: "permission-denied",
    404: "not-found",
    409: "aborted",
    412: "failed-precondition",
    429: "resource-exhausted",
    499: "cancelled",
    500: "internal",
    501: "unimplemented",
    503: "unavailable",
    504: "deadline-exceeded",
}


def error_payload(response: httpx.Response) -> tuple[str | None, str | None]:
    """Return (status, message) from a Google API error body, if it has one."""
    try:
        body = response.json()
    except ValueError:
        return None, None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("status"), error.get("message")
    if isinstance(error, str):
        return None, error
    return None, None


def canonical_code(status: str | None, http_status: int) -> str:
    """Kebab-case a google.rpc status name, falling back to the HTTP status."""
    if status:
        return status.lower().replace("_", "-")
    return _STATUS_CODES.get(http_status, "unknown")


def default_error(response: httpx.Response) -> BackendError:
    status, message = error_payload(response)
    code = canonical_code(status, response.status_code)
    return BackendError(code, message or f"HTTP {response.status_code}")


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    on_error: ErrorMapper = default_error,
    **kwargs: Any,
) -> httpx.Response:
    """Perform a request; raise BackendError on transport failure or status >= 400."""
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.HTTPError as exc:
        logger.warning("Request to %s failed: %s", url.split("?")[0], exc)
        raise BackendError("unavailable", f"Network request failed: {exc}") from exc
    if response.status_code >= 400:
        raise on_error(response)
    return response


def json_body(response: httpx.Response) -> Any:
    """Decode a JSON response; empty bodies decode to an empty dict."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as exc:
        raise BackendError("internal", "Response is not valid JSON") from exc

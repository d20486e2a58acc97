"""Cloud Functions client: callable (onCall protocol) and plain HTTP (onRequest)."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from fireprobe.application.dtos.backend import HttpFunctionResponse
from fireprobe.domain.exceptions import BackendError
from fireprobe.infrastructure.firebase._http import canonical_code, error_payload, json_body, send

logger = logging.getLogger(__name__)

TokenSource = Callable[[], Awaitable[str | None]]


def callable_error(response: httpx.Response) -> BackendError:
    """Map a callable error response; the code alone is the message when none is given."""
    status, message = error_payload(response)
    code = canonical_code(status, response.status_code)
    return BackendError(code, message or code)


class FunctionsRESTClient:
    """Invokes the functions deployed in one project and region."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        project_id: str,
        region: str = "us-central1",
        url_template: str = "https://{region}-{project_id}.cloudfunctions.net",
        token_source: TokenSource,
    ) -> None:
        self._http = http
        self._base = url_template.format(region=region, project_id=project_id).rstrip("/")
        self._token_source = token_source

    def function_url(self, name: str) -> str:
        return f"{self._base}/{name}"

    async def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        id_token = await self._token_source()
        if id_token:
            headers["Authorization"] = f"Bearer {id_token}"
        return headers

    async def call(self, name: str, data: Any) -> Any:
        """Invoke a callable function; returns its ``result``."""
        response = await send(
            self._http,
            "POST",
            self.function_url(name),
            json={"data": data},
            headers=await self._headers(),
            on_error=callable_error,
        )
        body = json_body(response)
        if not isinstance(body, dict):
            raise BackendError("internal", "Response is not valid JSON object.")
        if "error" in body:
            raise callable_error(response)
        if "result" in body:
            return body["result"]
        if "data" in body:
            return body["data"]
        raise BackendError("internal", "Response is missing data field.")

    async def request(
        self, name: str, method: str, params: dict[str, Any] | None = None
    ) -> HttpFunctionResponse:
        """Invoke an HTTP function; any HTTP status is returned, not raised."""
        url = self.function_url(name)
        headers = await self._headers()
        try:
            if method == "GET":
                response = await self._http.get(url, params=params or None, headers=headers)
            else:
                response = await self._http.post(url, json=params or {}, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("HTTP function %s unreachable: %s", name, exc)
            raise BackendError("unavailable", f"Network request failed: {exc}") from exc
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text
        return HttpFunctionResponse(status_code=response.status_code, body=body)

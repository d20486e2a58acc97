"""Thin Firestore REST API client acting as the signed-in end user.

Requests carry the project API key and, when someone is signed in, the
user's ID token, so the target project's security rules decide exactly
as they would for its own web client. All HTTP calls use
httpx.AsyncClient so they do not block the event loop.
"""

from __future__ import annotations

import copy
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from fireprobe.domain.exceptions import BackendError
from fireprobe.infrastructure.firebase._http import json_body, send
from fireprobe.infrastructure.firebase._rest_encoding import (
    decode_document,
    encode_document,
    encode_value,
    expand_dotted_keys,
    field_paths,
)

TokenSource = Callable[[], Awaitable[str | None]]

_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array-contains": "ARRAY_CONTAINS",
    "array_contains": "ARRAY_CONTAINS",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
    "array_contains_any": "ARRAY_CONTAINS_ANY",
}

_DIRECTIONS = {"asc": "ASCENDING", "desc": "DESCENDING"}


class DocumentSnapshot:
    """Snapshot of a document (id + data, data None when missing)."""

    def __init__(self, id_: str, data: dict | None):
        self.id = id_
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> dict | None:
        return self._data


def _doc_id(document: dict) -> str:
    name = document.get("name", "")
    return name.split("/")[-1] if name else ""


class DocumentReference:
    """Reference to a single document; matches the web SDK call style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path
        self.id = path.split("/")[-1]

    async def get(self) -> DocumentSnapshot:
        """Fetch the document; a 404 yields a snapshot that does not exist."""
        response = await self._client.request("GET", self._path, allow_missing=True)
        if response is None:
            return DocumentSnapshot(self.id, None)
        return DocumentSnapshot(self.id, decode_document(json_body(response)))

    async def set(self, data: dict[str, Any], *, merge: bool = False) -> None:
        """Create or overwrite; with merge only the given leaf fields are written."""
        if merge:
            await self._commit(data, field_paths(data))
            return
        await self._client.request("PATCH", self._path, body=encode_document(data))

    async def update(self, data: dict[str, Any]) -> None:
        """Patch the given fields (dotted keys are nested paths); not-found when missing."""
        await self._commit(
            expand_dotted_keys(data), field_paths(data, nested=False), must_exist=True
        )

    async def _commit(self, data: dict[str, Any], paths: list[str], *, must_exist: bool = False) -> None:
        # A commit carries the mask in the body, so an empty mask stays a no-op write
        write: dict[str, Any] = {
            "update": {"name": self._client.resource_name(self._path), **encode_document(data)},
            "updateMask": {"fieldPaths": paths},
        }
        if must_exist:
            write["currentDocument"] = {"exists": True}
        await self._client.request("POST", ":commit", body={"writes": [write]})

    async def delete(self) -> None:
        await self._client.request("DELETE", self._path)


class Query:
    """Fluent query on one collection; runs via runQuery (filter/order/limit on server)."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path.rstrip("/")
        self._filters: list[dict[str, Any]] = []
        self._order_by: list[dict[str, Any]] = []
        self._limit: int | None = None

    def _copy(self) -> Query:
        clone = copy.copy(self)
        clone._filters = list(self._filters)
        clone._order_by = list(self._order_by)
        return clone

    def where(self, field: str, op: str, value: Any) -> Query:
        clone = self._copy()
        clone._filters.append(
            {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": _OP_MAP.get(op, op),
                    "value": encode_value(value),
                }
            }
        )
        return clone

    def order_by(self, field: str, direction: str = "asc") -> Query:
        clone = self._copy()
        clone._order_by.append(
            {"field": {"fieldPath": field}, "direction": _DIRECTIONS.get(direction, direction)}
        )
        return clone

    def limit(self, count: int) -> Query:
        clone = self._copy()
        clone._limit = count
        return clone

    def structured_query(self) -> dict[str, Any]:
        """Return the runQuery body for this query."""
        structured: dict[str, Any] = {"from": [{"collectionId": self._path.split("/")[-1]}]}
        if len(self._filters) == 1:
            structured["where"] = self._filters[0]
        elif self._filters:
            structured["where"] = {"compositeFilter": {"op": "AND", "filters": self._filters}}
        if self._order_by:
            structured["orderBy"] = self._order_by
        if self._limit:
            structured["limit"] = self._limit
        return {"structuredQuery": structured}

    async def get(self) -> list[DocumentSnapshot]:
        """Execute the query and return the matching document snapshots."""
        parent = self._path.rsplit("/", 1)[0] if "/" in self._path else ""
        response = await self._client.request(
            "POST", f"{parent}:runQuery", body=self.structured_query()
        )
        items = json_body(response)
        items = items if isinstance(items, list) else [items]
        return [
            DocumentSnapshot(_doc_id(item["document"]), decode_document(item["document"]))
            for item in items
            if "document" in item
        ]


class CollectionReference(Query):
    """Reference to a collection; also the root of a query."""

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def add(self, data: dict[str, Any]) -> DocumentReference:
        """Create a document with a server-generated ID."""
        response = await self._client.request("POST", self._path, body=encode_document(data))
        return DocumentReference(self._client, f"{self._path}/{_doc_id(json_body(response))}")


class FirestoreRESTClient:
    """Firestore REST v1 client for one project's default database."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        project_id: str,
        api_key: str,
        token_source: TokenSource,
        base_url: str = "https://firestore.googleapis.com",
    ) -> None:
        self._http = http
        self._api_key = api_key
        self._token_source = token_source
        self._documents = f"projects/{project_id}/databases/(default)/documents"
        self._root = f"{base_url.rstrip('/')}/v1/{self._documents}"

    def resource_name(self, path: str) -> str:
        """Full document resource name, as write requests address documents."""
        return f"{self._documents}/{path.strip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: dict | None = None,
        params: dict[str, Any] | None = None,
        allow_missing: bool = False,
    ) -> httpx.Response | None:
        """Send one request relative to the documents root. 404 returns None if allowed."""
        url = f"{self._root}/{path}" if path and not path.startswith(":") else f"{self._root}{path}"
        headers = {"Content-Type": "application/json"}
        id_token = await self._token_source()
        if id_token:
            headers["Authorization"] = f"Bearer {id_token}"
        query = {"key": self._api_key, **(params or {})}
        try:
            return await send(self._http, method, url, params=query, json=body, headers=headers)
        except BackendError as exc:
            if allow_missing and exc.code == "not-found":
                return None
            raise

    def collection(self, path: str) -> CollectionReference:
        """Return a collection reference; path may be nested ('users/u1/posts')."""
        return CollectionReference(self, path.strip("/"))

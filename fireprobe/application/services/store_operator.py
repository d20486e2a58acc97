"""Structured-store operator: validated get/set/update/delete and composed queries."""

import json
import logging
from typing import Any

from fireprobe.application.dtos.requests import StoreRequest
from fireprobe.application.interfaces import ICollectionReference, IDocumentStore, IQuery
from fireprobe.core.log import OperationLog
from fireprobe.core.session import Session
from fireprobe.domain.enums import StoreAction
from fireprobe.domain.exceptions import BackendError, FireprobeException, ValidationException
from fireprobe.shared.utils.literals import LiteralSyntaxError, coerce_filter_value, parse_literal
from fireprobe.shared.utils.validation import InputValidator

logger = logging.getLogger(__name__)

_WRITE_ACTIONS = (StoreAction.SET, StoreAction.UPDATE, StoreAction.DELETE)
_INCOMPLETE_FILTER = "When using filters, you must specify field, operator, and value"


def format_json(value: Any) -> str:
    """Pretty-print a document or patch for the log."""
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def validate_store_request(request: StoreRequest) -> None:
    """Reject malformed requests before any backend call.

    Checks run in a fixed order and the first failure wins: GET-only
    options on writes, options combined with a document id, field name
    syntax, then the all-or-nothing filter triple.
    """
    if request.action in _WRITE_ACTIONS:
        if request.has_sort:
            raise ValidationException("Sorting is only available for GET operations", field="sort_field")
        if request.has_filter:
            raise ValidationException("Filtering is only available for GET operations", field="filter_field")

    if request.document_id:
        if request.has_sort:
            raise ValidationException(
                "Sorting cannot be used when querying a specific document ID", field="sort_field"
            )
        if request.has_filter:
            raise ValidationException(
                "Filtering cannot be used when querying a specific document ID", field="filter_field"
            )

    if request.has_sort and not InputValidator.is_field_path(request.sort_field):
        raise ValidationException("Invalid sort field name", field="sort_field")
    if request.filter_field and not InputValidator.is_field_path(request.filter_field):
        raise ValidationException("Invalid filter field name", field="filter_field")

    if request.has_filter and not (
        request.filter_field and request.filter_operator and request.filter_value
    ):
        raise ValidationException(_INCOMPLETE_FILTER, field="filter_field")


def parse_body(json_body: str) -> dict[str, Any]:
    """Parse a set/update body; only an object literal is a document."""
    try:
        data = parse_literal(json_body)
    except LiteralSyntaxError as exc:
        raise ValidationException("Please enter a valid JSON object", field="json_body") from exc
    if not isinstance(data, dict):
        raise ValidationException("Please enter a valid JSON object", field="json_body")
    return data


class StoreOperator:
    """Executes one structured-store request and logs its outcome."""

    def __init__(self, session: Session, log: OperationLog) -> None:
        self._session = session
        self._log = log

    async def execute(self, request: StoreRequest) -> None:
        """Validate, run, and record exactly one outcome entry."""
        try:
            store = self._session.store
            validate_store_request(request)
            if request.action is StoreAction.GET:
                await self._get(store, request)
            elif request.action is StoreAction.SET:
                await self._set(store, request)
            elif request.action is StoreAction.UPDATE:
                await self._update(store, request)
            elif request.action is StoreAction.DELETE:
                await self._delete(store, request)
        except ValidationException as exc:
            self._log.error(exc.message)
        except BackendError as exc:
            self._log.error(f"Error: {self._rewrite(exc, request)}")
        except FireprobeException as exc:
            self._log.error(exc.message)

    @staticmethod
    def _rewrite(exc: BackendError, request: StoreRequest) -> str:
        if exc.code == "failed-precondition":
            if request.sort_field:
                return f"Cannot sort by '{request.sort_field}': This field may not be indexed."
            if request.filter_field:
                return f"Cannot filter by '{request.filter_field}': This field may not be indexed."
        return exc.message

    async def _set(self, store: IDocumentStore, request: StoreRequest) -> None:
        data = parse_body(request.json_body)
        collection = store.collection(request.collection_path)
        if not request.document_id:
            ref = await collection.add(data)
            self._log.success(f"Document added (ID: {ref.id})")
            return

        merge = request.merge_on_set
        await collection.document(request.document_id).set(data, merge=merge)
        mode = "merged" if merge else "overwritten/created"
        suffix = "(with merge: true)" if merge else ""
        self._log.success(
            f"Document {mode} (ID: {request.document_id}) {suffix}\nResult: {format_json(data)}"
        )

    async def _update(self, store: IDocumentStore, request: StoreRequest) -> None:
        if not request.document_id:
            raise ValidationException(
                "Document ID field is mandatory when trying to update a record", field="document_id"
            )
        data = parse_body(request.json_body)
        await store.collection(request.collection_path).document(request.document_id).update(data)
        self._log.success(f"Updated fields (Doc ID: {request.document_id})\n{format_json(data)}")

    async def _delete(self, store: IDocumentStore, request: StoreRequest) -> None:
        if not request.document_id:
            raise ValidationException(
                "Document ID field is mandatory when trying to delete a record", field="document_id"
            )
        await store.collection(request.collection_path).document(request.document_id).delete()
        self._log.success(f"Deleted (Doc ID: {request.document_id})")

    async def _get(self, store: IDocumentStore, request: StoreRequest) -> None:
        collection = store.collection(request.collection_path)
        if request.document_id:
            await self._get_one(collection, request)
        else:
            await self._query(collection, request)

    async def _get_one(self, collection: ICollectionReference, request: StoreRequest) -> None:
        snapshot = await collection.document(request.document_id).get()
        data = snapshot.to_dict() if snapshot.exists else None
        if not data:
            self._log.error(f"Document {request.document_id} not found")
            return
        self._log.success(
            f"Getting {request.document_id} from {request.collection_path}\n"
            f"Response:\n{format_json(data)}"
        )

    async def _query(self, collection: ICollectionReference, request: StoreRequest) -> None:
        query: IQuery = collection
        if request.has_filter:
            query = query.where(
                request.filter_field,
                request.filter_operator,
                coerce_filter_value(request.filter_value),
            )
        if request.has_sort:
            query = query.order_by(request.sort_field, request.sort_direction.value)
        if request.limit:
            query = query.limit(request.limit)

        logger.debug("Running query on %s", request.collection_path)
        documents = await query.get()

        limit_info = f" (limit: {request.limit})" if request.limit else " (no limit)"
        filter_info = (
            f" (filtered by {request.filter_field} {request.filter_operator} {request.filter_value})"
            if request.has_filter
            else ""
        )
        sort_info = (
            f" (sorted by {request.sort_field} {request.sort_direction.value})"
            if request.has_sort
            else ""
        )
        result = (
            f"Getting documents from {request.collection_path}{limit_info}{filter_info}{sort_info}\n"
            f"Response ({len(documents)} documents):\n"
        )
        if not documents:
            self._log.info(f"{result}Empty response")
            return
        for document in documents:
            result += f"Document ID: {document.id}\n{format_json(document.to_dict())}\n"
        self._log.success(result)

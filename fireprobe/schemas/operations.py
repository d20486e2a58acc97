"""Operator request schemas and the accepted/preview responses."""

from typing import Literal

from pydantic import BaseModel, Field

from fireprobe.application.dtos.requests import HttpFunctionRequest, StoreRequest
from fireprobe.domain.enums import HttpMethod, SortDirection, StoreAction


class AcceptedResponse(BaseModel):
    """The operation was scheduled; its outcome will appear in the log."""

    accepted: bool = True


class StoreOperationRequest(BaseModel):
    """Structured-store operation."""

    collection_path: str = Field(..., min_length=1)
    action: StoreAction
    document_id: str = ""
    json_body: str = ""
    limit: int = Field(default=100, ge=0)
    sort_field: str = ""
    sort_direction: SortDirection = SortDirection.ASC
    filter_field: str = ""
    filter_operator: str = ""
    filter_value: str = ""
    merge_on_set: bool = False

    def to_request(self) -> StoreRequest:
        return StoreRequest(
            collection_path=self.collection_path.strip(),
            action=self.action,
            document_id=self.document_id.strip(),
            json_body=self.json_body,
            limit=self.limit,
            sort_field=self.sort_field.strip(),
            sort_direction=self.sort_direction,
            filter_field=self.filter_field.strip(),
            filter_operator=self.filter_operator.strip(),
            filter_value=self.filter_value,
            merge_on_set=self.merge_on_set,
        )


class CallableInvokeRequest(BaseModel):
    """A ``name(args)`` call expression."""

    expression: str


class HttpFunctionCallRequest(BaseModel):
    """HTTP function call: GET query (object literal or query string) or POST JSON body."""

    name: str = Field(..., min_length=1)
    method: HttpMethod = HttpMethod.GET
    arguments: str = ""

    def to_request(self) -> HttpFunctionRequest:
        return HttpFunctionRequest(
            name=self.name.strip(),
            method=self.method,
            arguments=self.arguments,
        )


class PreviewRequest(BaseModel):
    """Render the client-side call for a callable expression or an HTTP request."""

    kind: Literal["callable", "http"] = "callable"
    expression: str = ""
    name: str = ""
    method: HttpMethod = HttpMethod.GET
    arguments: str = ""


class PreviewResponse(BaseModel):
    preview: str

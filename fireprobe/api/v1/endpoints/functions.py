"""Function invocation endpoints (callable, HTTP, call preview)."""

from fastapi import APIRouter, status

from fireprobe.api.v1.dependencies import ConsoleDep
from fireprobe.application.dtos.requests import HttpFunctionRequest
from fireprobe.schemas.operations import (
    AcceptedResponse,
    CallableInvokeRequest,
    HttpFunctionCallRequest,
    PreviewRequest,
    PreviewResponse,
)

router = APIRouter()


@router.post("/callable", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def invoke_callable(body: CallableInvokeRequest, console: ConsoleDep) -> AcceptedResponse:
    """Schedule ``name(args)`` against the callable function ``name``."""
    console.dispatcher.spawn(console.functions.invoke(body.expression), name="functions.callable")
    return AcceptedResponse()


@router.post("/http", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def invoke_http(body: HttpFunctionCallRequest, console: ConsoleDep) -> AcceptedResponse:
    console.dispatcher.spawn(console.functions.invoke_http(body.to_request()), name="functions.http")
    return AcceptedResponse()


@router.post("/preview", response_model=PreviewResponse)
def preview_call(body: PreviewRequest, console: ConsoleDep) -> PreviewResponse:
    """Render the client-side code for a call without sending it."""
    if body.kind == "callable":
        return PreviewResponse(preview=console.functions.preview_callable(body.expression))
    request = HttpFunctionRequest(name=body.name.strip(), method=body.method, arguments=body.arguments)
    return PreviewResponse(preview=console.functions.preview_http(request))

"""Structured-store endpoint."""

from fastapi import APIRouter, status

from fireprobe.api.v1.dependencies import ConsoleDep
from fireprobe.schemas.operations import AcceptedResponse, StoreOperationRequest

router = APIRouter()


@router.post("", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def store_operation(body: StoreOperationRequest, console: ConsoleDep) -> AcceptedResponse:
    """Schedule a get/set/update/delete against the data store."""
    console.dispatcher.spawn(console.store.execute(body.to_request()), name=f"store.{body.action.value}")
    return AcceptedResponse()

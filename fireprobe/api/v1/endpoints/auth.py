"""Auth endpoints. Every call is scheduled; outcomes appear in the log."""

from fastapi import APIRouter, status

from fireprobe.api.v1.dependencies import ConsoleDep
from fireprobe.schemas.auth import CredentialsRequest, FederatedSignInRequest, MfaVerifyRequest
from fireprobe.schemas.operations import AcceptedResponse

router = APIRouter()


@router.post("/sign-in", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def sign_in(body: CredentialsRequest, console: ConsoleDep) -> AcceptedResponse:
    """Password sign-in (may open an MFA challenge)."""
    console.dispatcher.spawn(console.auth.sign_in(body.email, body.password), name="auth.sign_in")
    return AcceptedResponse()


@router.post("/sign-up", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def sign_up(body: CredentialsRequest, console: ConsoleDep) -> AcceptedResponse:
    console.dispatcher.spawn(console.auth.sign_up(body.email, body.password), name="auth.sign_up")
    return AcceptedResponse()


@router.post("/sign-out", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def sign_out(console: ConsoleDep) -> AcceptedResponse:
    console.dispatcher.spawn(console.auth.sign_out(), name="auth.sign_out")
    return AcceptedResponse()


@router.post("/federated", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def federated_sign_in(body: FederatedSignInRequest, console: ConsoleDep) -> AcceptedResponse:
    """Google OAuth sign-in with an ID token."""
    console.dispatcher.spawn(console.auth.federated_sign_in(body.id_token), name="auth.federated")
    return AcceptedResponse()


@router.post("/mfa/verify", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def verify_mfa(body: MfaVerifyRequest, console: ConsoleDep) -> AcceptedResponse:
    """First call sends the SMS code; the next one resolves the challenge with it."""
    console.dispatcher.spawn(console.auth.verify_mfa_code(body.code.strip()), name="auth.mfa_verify")
    return AcceptedResponse()


@router.post("/mfa/cancel", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def cancel_mfa(console: ConsoleDep) -> AcceptedResponse:
    console.auth.cancel_mfa()
    return AcceptedResponse()

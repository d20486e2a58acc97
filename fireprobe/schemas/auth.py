"""Auth API schemas."""

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """Email/password for sign-in and sign-up."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class FederatedSignInRequest(BaseModel):
    """Google OAuth ID token obtained by the tester."""

    id_token: str = Field(..., min_length=1)


class MfaVerifyRequest(BaseModel):
    """One-time code; ignored on the first call, which dispatches the SMS."""

    code: str = ""

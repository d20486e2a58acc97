"""Session API schemas (connection descriptor in, session state out)."""

from pydantic import BaseModel, ConfigDict, Field

from fireprobe.domain.enums import AuthState


class ConnectionRequest(BaseModel):
    """Field-form connection descriptor. Accepts snake_case or firebaseConfig keys."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    api_key: str = Field(..., min_length=1, alias="apiKey")
    auth_domain: str = Field(..., min_length=1, alias="authDomain")
    database_url: str = Field(..., min_length=1, alias="databaseURL")
    project_id: str = Field(..., min_length=1, alias="projectId")
    storage_bucket: str = Field(default="", alias="storageBucket")


class ConfigLiteralRequest(BaseModel):
    """A pasted ``firebaseConfig`` object literal."""

    config: str = Field(..., description="Object literal, keys may be unquoted")


class InitializeResponse(BaseModel):
    """Outcome of an initialization request (details are in the log)."""

    initialized: bool


class PrincipalResponse(BaseModel):
    uid: str
    email: str | None = None


class SessionResponse(BaseModel):
    """Read-only view of the session for the console page."""

    initialized: bool
    project_id: str | None = None
    auth_domain: str | None = None
    storage_bucket: str | None = None
    has_blob_storage: bool = False
    principal: PrincipalResponse | None = None
    auth_state: AuthState
    mfa_pending: bool = False
    pending_operations: int = 0

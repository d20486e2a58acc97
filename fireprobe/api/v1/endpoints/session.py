"""Session endpoints: open the backend session and read its state."""

from fastapi import APIRouter

from fireprobe.api.v1.dependencies import ConsoleDep
from fireprobe.core.console import Console
from fireprobe.domain.entities import ConnectionDescriptor
from fireprobe.schemas.session import (
    ConfigLiteralRequest,
    ConnectionRequest,
    InitializeResponse,
    PrincipalResponse,
    SessionResponse,
)

router = APIRouter()


def _session_view(console: Console) -> SessionResponse:
    session = console.session
    descriptor = session.descriptor
    principal = session.current_principal
    return SessionResponse(
        initialized=session.initialized,
        project_id=descriptor.project_id if descriptor else None,
        auth_domain=descriptor.auth_domain if descriptor else None,
        storage_bucket=descriptor.bucket if descriptor else None,
        has_blob_storage=session.has_blob,
        principal=PrincipalResponse(uid=principal.uid, email=principal.email) if principal else None,
        auth_state=console.auth.state,
        mfa_pending=console.auth.challenge is not None,
        pending_operations=console.dispatcher.pending,
    )


@router.get("", response_model=SessionResponse)
def get_session(console: ConsoleDep) -> SessionResponse:
    """Return the current session state."""
    return _session_view(console)


@router.post("", response_model=InitializeResponse)
def initialize_session(body: ConnectionRequest, console: ConsoleDep) -> InitializeResponse:
    """Open the backend session from the field form. The outcome is also logged."""
    descriptor = ConnectionDescriptor(
        api_key=body.api_key.strip(),
        project_id=body.project_id.strip(),
        auth_domain=body.auth_domain.strip(),
        database_url=body.database_url.strip(),
        storage_bucket=body.storage_bucket,
    )
    return InitializeResponse(initialized=console.initialize(descriptor))


@router.post("/literal", response_model=InitializeResponse)
def initialize_from_literal(body: ConfigLiteralRequest, console: ConsoleDep) -> InitializeResponse:
    """Open the backend session from a pasted firebaseConfig object."""
    descriptor = ConnectionDescriptor.from_literal(body.config)
    return InitializeResponse(initialized=console.initialize(descriptor))

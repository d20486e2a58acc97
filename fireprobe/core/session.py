"""Session store: the single backend session and its derived service handles.

Created empty, populated exactly once by initialize(). ``initialized``
never goes back to False; the blob handle exists iff a bucket was given.
Only the auth-state observer mutates ``current_principal``.
"""

import logging
from collections.abc import Callable

from fireprobe.application.interfaces import (
    IAuthService,
    IBackendApp,
    IBackendSDK,
    IBlobStore,
    IDocumentStore,
    IFunctionsService,
)
from fireprobe.core.log import OperationLog
from fireprobe.domain.entities import AuthStateEvent, ConnectionDescriptor, Principal
from fireprobe.domain.enums import SignInMethod
from fireprobe.domain.exceptions import FireprobeException, PreconditionException

logger = logging.getLogger(__name__)

SDK_UNAVAILABLE_MESSAGE = "Firebase SDK not loaded. Please check your connection."
STORAGE_MISSING_MESSAGE = (
    "Storage service not initialized. Please provide a storageBucket in configuration."
)


def sign_in_message(event: AuthStateEvent) -> str:
    """Word the success entry for an auth-state event carrying a principal."""
    email = (event.principal.email if event.principal else None) or "unknown"
    if event.method is SignInMethod.FEDERATED:
        return "Logged in via Google OAuth"
    if event.method is SignInMethod.MULTI_FACTOR:
        return f"MFA Success: Logged in as {email}"
    return f"Logged in ({email})"


class Session:
    """Owns the backend session; passed explicitly to every operator."""

    def __init__(self, log: OperationLog) -> None:
        self._log = log
        self.initialized = False
        self.descriptor: ConnectionDescriptor | None = None
        self.current_principal: Principal | None = None
        self._app: IBackendApp | None = None
        self._store: IDocumentStore | None = None
        self._auth: IAuthService | None = None
        self._functions: IFunctionsService | None = None
        self._blob: IBlobStore | None = None
        self._unsubscribe: Callable[[], None] | None = None

    def initialize(self, descriptor: ConnectionDescriptor, sdk: IBackendSDK | None) -> bool:
        """Open the backend session and derive the service handles.

        Logs and returns False (session untouched) when the SDK entry point
        is missing, the session is already initialized, or opening fails.

        Returns:
            True when the session was initialized by this call.
        """
        if sdk is None:
            self._log.error(SDK_UNAVAILABLE_MESSAGE)
            return False
        if self.initialized:
            self._log.error("Firebase is already initialized for this session")
            return False

        try:
            app = sdk.initialize_app(descriptor)
        except FireprobeException as exc:
            self._log.error(f"Error: {exc.message}")
            return False
        except Exception as exc:
            logger.exception("Backend session failed to open")
            self._log.error(f"Error: {exc}")
            return False

        self._app = app
        self._store = app.firestore()
        self._auth = app.auth()
        self._functions = app.functions()

        bucket = descriptor.bucket
        if bucket:
            self._blob = app.storage()
            self._log.success(f"Storage service initialized with bucket: {bucket}")
        else:
            self._log.info("Storage service not initialized (no storageBucket provided)")

        self.descriptor = descriptor
        self._unsubscribe = self._auth.on_auth_state_changed(self._on_auth_state)
        self.initialized = True
        logger.info("Backend session opened for project %s", descriptor.project_id)
        self._log.success("Firebase initialized")
        return True

    def _on_auth_state(self, event: AuthStateEvent) -> None:
        if event.principal is None:
            self.current_principal = None
            return
        self.current_principal = event.principal
        self._log.success(sign_in_message(event))

    # ---- Handle access (precondition errors when missing) ----

    @property
    def store(self) -> IDocumentStore:
        if self._store is None:
            raise PreconditionException("Firestore not initialized", component="store")
        return self._store

    @property
    def auth(self) -> IAuthService:
        if self._auth is None:
            raise PreconditionException("Auth service not initialized", component="auth")
        return self._auth

    @property
    def functions(self) -> IFunctionsService:
        if self._functions is None:
            raise PreconditionException("Functions service not initialized", component="functions")
        return self._functions

    @property
    def blob(self) -> IBlobStore:
        if self._blob is None:
            raise PreconditionException(STORAGE_MISSING_MESSAGE, component="blob")
        return self._blob

    @property
    def has_blob(self) -> bool:
        return self._blob is not None

    async def close(self) -> None:
        """Release transport resources at process shutdown. State is left as is."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._app is not None:
            await self._app.delete()
            logger.info("Backend session transport closed")

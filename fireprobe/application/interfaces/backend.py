"""Backend SDK interfaces (ports) for the operators.

The operators only depend on these call contracts: method name,
arguments, and an awaitable that either returns or raises BackendError.
The shipped implementation speaks the Firebase REST APIs
(fireprobe.infrastructure.firebase); tests substitute AsyncMock doubles.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from fireprobe.application.dtos.backend import (
        BlobListing,
        HttpFunctionResponse,
        OAuthCredential,
        UploadedBlob,
    )
    from fireprobe.application.dtos.requests import UploadSource
    from fireprobe.domain.entities import (
        AuthStateEvent,
        ConnectionDescriptor,
        MultiFactorHint,
        MultiFactorResolver,
        Principal,
    )

AuthObserver = Callable[["AuthStateEvent"], None]
ProgressCallback = Callable[[int, int], None]


# ---- Structured store ----


class IDocumentSnapshot(Protocol):
    """Point-in-time view of one document."""

    id: str

    @property
    def exists(self) -> bool:
        """Return True if the document existed when read."""
        ...

    def to_dict(self) -> dict[str, Any] | None:
        """Return the document fields, or None when it does not exist."""
        ...


class IQuery(Protocol):
    """Chainable query over one collection."""

    def where(self, field: str, op: str, value: Any) -> IQuery:
        """Return a query narrowed by a field filter."""
        ...

    def order_by(self, field: str, direction: str = "asc") -> IQuery:
        """Return a query ordered by field ('asc' or 'desc')."""
        ...

    def limit(self, count: int) -> IQuery:
        """Return a query capped at count documents."""
        ...

    async def get(self) -> list[IDocumentSnapshot]:
        """Run the query and return matching documents."""
        ...


class IDocumentReference(Protocol):
    """Reference to one document."""

    id: str

    async def get(self) -> IDocumentSnapshot:
        """Fetch the document (snapshot.exists is False when missing)."""
        ...

    async def set(self, data: dict[str, Any], *, merge: bool = False) -> None:
        """Replace the document, or merge fields into it when merge is True."""
        ...

    async def update(self, data: dict[str, Any]) -> None:
        """Merge fields into an existing document (fails if missing)."""
        ...

    async def delete(self) -> None:
        """Delete the document."""
        ...


class ICollectionReference(IQuery, Protocol):
    """Reference to a collection; also the root of a query."""

    def document(self, document_id: str) -> IDocumentReference:
        """Return a reference to a document in this collection."""
        ...

    async def add(self, data: dict[str, Any]) -> IDocumentReference:
        """Create a document with a generated id."""
        ...


class IDocumentStore(Protocol):
    """Structured-store handle."""

    def collection(self, path: str) -> ICollectionReference:
        """Return a collection reference (path may be nested: 'a/b/c')."""
        ...


# ---- Auth ----


class IChallengeWidget(Protocol):
    """Invisible challenge issued before a one-time code is dispatched."""

    anchor_id: str

    async def verify(self) -> str:
        """Return the challenge token to attach to the dispatch request."""
        ...

    def clear(self) -> None:
        """Release the widget."""
        ...


class IAuthService(Protocol):
    """Auth handle: password, federated and multi-factor sign-in."""

    @property
    def current_user(self) -> Principal | None:
        """Return the signed-in principal, if any."""
        ...

    def on_auth_state_changed(self, observer: AuthObserver) -> Callable[[], None]:
        """Register observer, fire it once with the current state, return an unsubscribe."""
        ...

    async def sign_in_with_email_and_password(self, email: str, password: str) -> Principal:
        """Password sign-in. Raises MultiFactorRequired when a second factor is enrolled."""
        ...

    async def create_user_with_email_and_password(self, email: str, password: str) -> Principal:
        """Create an account and sign it in."""
        ...

    async def sign_in_with_credential(self, credential: OAuthCredential) -> Principal:
        """Federated sign-in with an identity provider credential."""
        ...

    async def sign_out(self) -> None:
        """Drop the current principal."""
        ...

    def create_challenge_widget(self, anchor_id: str) -> IChallengeWidget:
        """Create the invisible challenge widget bound to a page anchor."""
        ...

    async def verify_phone_number(
        self,
        hint: MultiFactorHint,
        resolver: MultiFactorResolver,
        widget: IChallengeWidget,
    ) -> str:
        """Send a one-time code to the hint's phone; return the verification id."""
        ...

    async def resolve_sign_in(
        self,
        resolver: MultiFactorResolver,
        verification_id: str,
        code: str,
    ) -> Principal:
        """Complete a challenged sign-in with the one-time code."""
        ...

    async def get_id_token(self) -> str | None:
        """Return a valid ID token for the current principal (refreshing if needed)."""
        ...


# ---- Functions ----


class IFunctionsService(Protocol):
    """Remote function invocation handle."""

    async def call(self, name: str, data: Any) -> Any:
        """Invoke a callable function and return its result."""
        ...

    async def request(
        self, name: str, method: str, params: dict[str, Any] | None = None
    ) -> HttpFunctionResponse:
        """Invoke an HTTP function (GET query parameters or POST JSON body)."""
        ...

    def function_url(self, name: str) -> str:
        """Return the public URL of a function."""
        ...


# ---- Blob storage ----


class IBlobStore(Protocol):
    """Blob storage handle bound to one bucket."""

    bucket: str

    async def list_all(self, path: str) -> BlobListing:
        """List files and folders directly under path ('' for the root)."""
        ...

    async def upload(
        self,
        path: str,
        source: UploadSource,
        on_progress: ProgressCallback,
    ) -> UploadedBlob:
        """Upload source to path, calling on_progress(transferred, total) per chunk."""
        ...

    async def get_download_url(self, path: str) -> str:
        """Return a retrievable download URL."""
        ...

    async def delete(self, path: str) -> None:
        """Delete the object at path."""
        ...

    async def get_metadata(self, path: str) -> dict[str, Any]:
        """Return the object's metadata record."""
        ...


# ---- SDK entry point ----


class IBackendApp(Protocol):
    """One opened backend session."""

    def firestore(self) -> IDocumentStore:
        ...

    def auth(self) -> IAuthService:
        ...

    def functions(self) -> IFunctionsService:
        ...

    def storage(self) -> IBlobStore:
        ...

    async def delete(self) -> None:
        """Release transport resources."""
        ...


class IBackendSDK(Protocol):
    """Global SDK entry point."""

    def initialize_app(self, descriptor: ConnectionDescriptor) -> IBackendApp:
        """Open a session for the descriptor. Raises BackendError on bad config."""
        ...

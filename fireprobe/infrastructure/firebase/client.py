"""Firebase REST SDK entry point.

``FirebaseRESTSDK.initialize_app()`` opens one backend session: a single
httpx.AsyncClient shared by the auth, Firestore, functions and storage
clients, which all act as the end user signed in through that session.
"""

import logging

import httpx

from fireprobe.core.config import Settings
from fireprobe.domain.entities import ConnectionDescriptor
from fireprobe.domain.exceptions import BackendError
from fireprobe.infrastructure.firebase.auth_client import FirebaseAuthClient
from fireprobe.infrastructure.firebase.firestore_client import FirestoreRESTClient
from fireprobe.infrastructure.firebase.functions_client import FunctionsRESTClient
from fireprobe.infrastructure.firebase.storage_client import StorageRESTClient

logger = logging.getLogger(__name__)


class FirebaseRESTApp:
    """One opened session; service clients are created lazily and cached."""

    def __init__(
        self,
        descriptor: ConnectionDescriptor,
        settings: Settings,
        http: httpx.AsyncClient,
    ) -> None:
        self.descriptor = descriptor
        self._settings = settings
        self._http = http
        recaptcha = settings.recaptcha_token.get_secret_value() if settings.recaptcha_token else None
        self._auth = FirebaseAuthClient(
            http,
            api_key=descriptor.api_key,
            identity_toolkit_url=settings.identity_toolkit_url,
            secure_token_url=settings.secure_token_url,
            recaptcha_token=recaptcha,
        )
        self._firestore: FirestoreRESTClient | None = None
        self._functions: FunctionsRESTClient | None = None
        self._storage: StorageRESTClient | None = None

    def auth(self) -> FirebaseAuthClient:
        return self._auth

    def firestore(self) -> FirestoreRESTClient:
        if self._firestore is None:
            self._firestore = FirestoreRESTClient(
                self._http,
                project_id=self.descriptor.project_id,
                api_key=self.descriptor.api_key,
                token_source=self._auth.get_id_token,
                base_url=self._settings.firestore_url,
            )
        return self._firestore

    def functions(self) -> FunctionsRESTClient:
        if self._functions is None:
            self._functions = FunctionsRESTClient(
                self._http,
                project_id=self.descriptor.project_id,
                region=self._settings.functions_region,
                url_template=self._settings.functions_url_template,
                token_source=self._auth.get_id_token,
            )
        return self._functions

    def storage(self) -> StorageRESTClient:
        bucket = self.descriptor.bucket
        if not bucket:
            raise BackendError("storage/no-default-bucket", "No default bucket found.")
        if self._storage is None:
            self._storage = StorageRESTClient(
                self._http,
                bucket=bucket,
                base_url=self._settings.storage_url,
                token_source=self._auth.get_id_token,
                chunk_size=self._settings.upload_chunk_size,
            )
        return self._storage

    async def delete(self) -> None:
        """Close the HTTP connection pool."""
        await self._http.aclose()
        logger.info("Firebase HTTP client closed")


class FirebaseRESTSDK:
    """Creates backend sessions from connection descriptors."""

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport

    def initialize_app(self, descriptor: ConnectionDescriptor) -> FirebaseRESTApp:
        descriptor.validate()
        http = httpx.AsyncClient(
            timeout=self._settings.http_timeout_seconds,
            transport=self._transport,
        )
        logger.info("Opening Firebase session for project %s", descriptor.project_id)
        return FirebaseRESTApp(descriptor, self._settings, http)

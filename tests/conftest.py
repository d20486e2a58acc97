"""Pytest configuration and fixtures for fireprobe.

Backend protocol doubles are MagicMock/AsyncMock objects wired into a
fake SDK; HTTP tests run against create_app() through ASGITransport.
"""

from dataclasses import dataclass
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from fireprobe.core.config import Settings
from fireprobe.core.log import OperationLog
from fireprobe.core.session import Session
from fireprobe.domain.entities import AuthStateEvent, ConnectionDescriptor, Principal
from fireprobe.domain.enums import SignInMethod
from fireprobe.main import create_app


class FakeAuth:
    """Auth handle double that captures the registered observer."""

    def __init__(self) -> None:
        self.observer = None
        self.current_user: Principal | None = None
        self.sign_in_with_email_and_password = AsyncMock()
        self.create_user_with_email_and_password = AsyncMock()
        self.sign_in_with_credential = AsyncMock()
        self.sign_out = AsyncMock()
        self.verify_phone_number = AsyncMock(return_value="verification-1")
        self.resolve_sign_in = AsyncMock()
        self.get_id_token = AsyncMock(return_value=None)
        self.create_challenge_widget = MagicMock(
            side_effect=lambda anchor_id: MagicMock(name="widget", anchor_id=anchor_id)
        )
        self.unsubscribe = MagicMock()

    def on_auth_state_changed(self, observer):
        self.observer = observer
        observer(AuthStateEvent(principal=None))
        return self.unsubscribe

    def emit(self, principal: Principal | None, method: SignInMethod | None = None) -> None:
        """Deliver an auth-state change the way the backend would."""
        self.current_user = principal
        self.observer(AuthStateEvent(principal=principal, method=method))


def make_collection() -> MagicMock:
    """Collection/query double: where/order_by/limit chain back to itself."""
    document = MagicMock(name="document")
    document.get = AsyncMock()
    document.set = AsyncMock()
    document.update = AsyncMock()
    document.delete = AsyncMock()

    collection = MagicMock(name="collection")
    collection.document.return_value = document
    collection.where.return_value = collection
    collection.order_by.return_value = collection
    collection.limit.return_value = collection
    collection.get = AsyncMock(return_value=[])
    collection.add = AsyncMock(return_value=MagicMock(id="generated-id"))
    return collection


@dataclass
class FakeBackend:
    sdk: MagicMock
    app: MagicMock
    store: MagicMock
    auth: FakeAuth
    functions: MagicMock
    blob: MagicMock

    @property
    def collection(self) -> MagicMock:
        return self.store.collection.return_value

    @property
    def document(self) -> MagicMock:
        return self.collection.document.return_value


def make_backend() -> FakeBackend:
    store = MagicMock(name="store")
    store.collection.return_value = make_collection()

    functions = MagicMock(name="functions")
    functions.call = AsyncMock()
    functions.request = AsyncMock()
    functions.function_url = MagicMock(
        side_effect=lambda name: f"https://us-central1-demo-project.cloudfunctions.net/{name}"
    )

    blob = MagicMock(name="blob")
    blob.bucket = "demo-project.appspot.com"
    blob.list_all = AsyncMock()
    blob.upload = AsyncMock()
    blob.get_download_url = AsyncMock()
    blob.delete = AsyncMock()
    blob.get_metadata = AsyncMock()

    auth = FakeAuth()
    app = MagicMock(name="app")
    app.firestore.return_value = store
    app.auth.return_value = auth
    app.functions.return_value = functions
    app.storage.return_value = blob
    app.delete = AsyncMock()

    sdk = MagicMock(name="sdk")
    sdk.initialize_app.return_value = app
    return FakeBackend(sdk=sdk, app=app, store=store, auth=auth, functions=functions, blob=blob)


@pytest.fixture
def backend() -> FakeBackend:
    return make_backend()


@pytest.fixture
def descriptor() -> ConnectionDescriptor:
    return ConnectionDescriptor(
        api_key="AIzaSyTest",
        project_id="demo-project",
        auth_domain="demo-project.firebaseapp.com",
        database_url="https://demo-project.firebaseio.com",
        storage_bucket="demo-project.appspot.com",
    )


@pytest.fixture
def log() -> OperationLog:
    return OperationLog()


@pytest.fixture
def session(log: OperationLog, backend: FakeBackend, descriptor: ConnectionDescriptor) -> Session:
    """An initialized session with the initialization entries cleared."""
    session = Session(log)
    assert session.initialize(descriptor, backend.sdk)
    log.clear()
    return session


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def app(backend: FakeBackend) -> FastAPI:
    """Application wired to the fake backend SDK."""
    return create_app(sdk=backend.sdk)


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

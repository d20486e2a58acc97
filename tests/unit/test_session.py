"""Session.initialize, handle preconditions and the auth-state observer."""

import pytest

from fireprobe.core.log import OperationLog
from fireprobe.core.session import SDK_UNAVAILABLE_MESSAGE, STORAGE_MISSING_MESSAGE, Session
from fireprobe.domain.entities import ConnectionDescriptor, Principal
from fireprobe.domain.enums import LogClass, SignInMethod
from fireprobe.domain.exceptions import BackendError, PreconditionException


def test_initialize_with_bucket(log: OperationLog, backend, descriptor: ConnectionDescriptor) -> None:
    session = Session(log)
    assert session.initialize(descriptor, backend.sdk) is True
    assert session.initialized
    assert session.has_blob
    assert session.blob is backend.blob
    assert session.descriptor == descriptor
    backend.sdk.initialize_app.assert_called_once_with(descriptor)
    assert [(e.body, e.classification) for e in log.entries()] == [
        ("Storage service initialized with bucket: demo-project.appspot.com", LogClass.SUCCESS),
        ("Firebase initialized", LogClass.SUCCESS),
    ]


def test_initialize_with_blank_bucket_has_no_blob(log: OperationLog, backend) -> None:
    session = Session(log)
    descriptor = ConnectionDescriptor(api_key="k", project_id="p", storage_bucket="   ")
    assert session.initialize(descriptor, backend.sdk)
    assert not session.has_blob
    backend.app.storage.assert_not_called()
    entries = log.entries()
    assert entries[0].body == "Storage service not initialized (no storageBucket provided)"
    assert entries[0].classification is LogClass.INFO
    with pytest.raises(PreconditionException) as exc_info:
        session.blob
    assert exc_info.value.message == STORAGE_MISSING_MESSAGE


def test_missing_sdk_leaves_session_untouched(log: OperationLog, descriptor: ConnectionDescriptor) -> None:
    session = Session(log)
    assert session.initialize(descriptor, None) is False
    assert not session.initialized
    assert session.descriptor is None
    assert [e.body for e in log.entries()] == [SDK_UNAVAILABLE_MESSAGE]
    assert log.entries()[0].classification is LogClass.ERROR


def test_second_initialize_is_rejected(session: Session, log: OperationLog, backend, descriptor) -> None:
    assert session.initialize(descriptor, backend.sdk) is False
    assert backend.sdk.initialize_app.call_count == 1
    assert log.entries()[-1].classification is LogClass.ERROR


def test_initialize_failure_is_logged(log: OperationLog, backend, descriptor) -> None:
    backend.sdk.initialize_app.side_effect = BackendError("app/invalid-api-key", "Invalid API key")
    session = Session(log)
    assert session.initialize(descriptor, backend.sdk) is False
    assert not session.initialized
    assert [e.body for e in log.entries()] == ["Error: Invalid API key"]


def test_handles_before_initialize_raise() -> None:
    session = Session(OperationLog())
    with pytest.raises(PreconditionException, match="Firestore not initialized"):
        session.store
    with pytest.raises(PreconditionException, match="Auth service not initialized"):
        session.auth
    with pytest.raises(PreconditionException, match="Functions service not initialized"):
        session.functions


def test_registration_callback_logs_nothing(session: Session, log: OperationLog) -> None:
    assert session.current_principal is None
    assert log.entries() == []


@pytest.mark.parametrize(
    ("method", "expected"),
    [
        (SignInMethod.PASSWORD, "Logged in (alice@example.com)"),
        (SignInMethod.FEDERATED, "Logged in via Google OAuth"),
        (SignInMethod.MULTI_FACTOR, "MFA Success: Logged in as alice@example.com"),
    ],
)
def test_observer_words_sign_in_by_method(
    session: Session, log: OperationLog, backend, method: SignInMethod, expected: str
) -> None:
    principal = Principal(uid="u1", email="alice@example.com")
    backend.auth.emit(principal, method)
    assert session.current_principal == principal
    assert [e.body for e in log.entries()] == [expected]
    assert log.entries()[0].classification is LogClass.SUCCESS


def test_observer_clears_principal_on_sign_out(session: Session, log: OperationLog, backend) -> None:
    backend.auth.emit(Principal(uid="u1"), SignInMethod.PASSWORD)
    backend.auth.emit(None)
    assert session.current_principal is None
    assert [e.body for e in log.entries()] == ["Logged in (unknown)"]


async def test_close_unsubscribes_and_releases_transport(session: Session, backend) -> None:
    await session.close()
    backend.auth.unsubscribe.assert_called_once()
    backend.app.delete.assert_awaited_once()
    assert session.initialized

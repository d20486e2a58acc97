"""Firebase REST adapters against mocked HTTP (respx).

Each test drives one adapter through httpx and checks both the request
it sends and how responses and error payloads are translated.
"""

import json

import httpx
import pytest
import respx
from httpx import Response

from fireprobe.application.dtos.backend import OAuthCredential
from fireprobe.application.dtos.requests import UploadSource
from fireprobe.core.config import Settings
from fireprobe.domain.entities import ConnectionDescriptor, MultiFactorHint, MultiFactorResolver
from fireprobe.domain.enums import SignInMethod
from fireprobe.domain.exceptions import BackendError, MultiFactorRequired
from fireprobe.infrastructure.firebase import FirebaseRESTSDK
from fireprobe.infrastructure.firebase.auth_client import FirebaseAuthClient
from fireprobe.infrastructure.firebase.firestore_client import FirestoreRESTClient
from fireprobe.infrastructure.firebase.functions_client import FunctionsRESTClient
from fireprobe.infrastructure.firebase.storage_client import StorageRESTClient

API_KEY = "AIzaSyTest"
DOCS = "https://firestore.googleapis.com/v1/projects/demo/databases/(default)/documents"
TOOLKIT = "https://identitytoolkit.googleapis.com"
FUNCTIONS = "https://us-central1-demo.cloudfunctions.net"
BUCKET_URL = "https://firebasestorage.googleapis.com/v0/b/demo.appspot.com/o"


async def _token() -> str:
    return "id-token-1"


async def _anonymous() -> None:
    return None


@pytest.fixture
async def http():
    async with httpx.AsyncClient() as client:
        yield client


# ---- Firestore ----


@pytest.fixture
def firestore(http: httpx.AsyncClient) -> FirestoreRESTClient:
    return FirestoreRESTClient(http, project_id="demo", api_key=API_KEY, token_source=_token)


@respx.mock
async def test_firestore_get_document(firestore: FirestoreRESTClient) -> None:
    route = respx.get(f"{DOCS}/users/u1").mock(
        return_value=Response(200, json={"name": f"{DOCS}/users/u1", "fields": {"n": {"integerValue": "1"}}})
    )
    snapshot = await firestore.collection("users").document("u1").get()
    assert snapshot.exists
    assert snapshot.to_dict() == {"n": 1}
    request = route.calls.last.request
    assert request.url.params["key"] == API_KEY
    assert request.headers["Authorization"] == "Bearer id-token-1"


@respx.mock
async def test_firestore_missing_document(firestore: FirestoreRESTClient) -> None:
    respx.get(f"{DOCS}/users/nope").mock(
        return_value=Response(404, json={"error": {"status": "NOT_FOUND", "message": "Document not found"}})
    )
    snapshot = await firestore.collection("users").document("nope").get()
    assert not snapshot.exists
    assert snapshot.to_dict() is None


@respx.mock
async def test_firestore_set_with_merge_sends_mask(firestore: FirestoreRESTClient) -> None:
    route = respx.post(f"{DOCS}:commit").mock(return_value=Response(200, json={}))
    await firestore.collection("users").document("u1").set({"profile": {"age": 3}}, merge=True)
    request = route.calls.last.request
    assert request.url.params["key"] == API_KEY
    assert json.loads(request.content) == {
        "writes": [
            {
                "update": {
                    "name": "projects/demo/databases/(default)/documents/users/u1",
                    "fields": {"profile": {"mapValue": {"fields": {"age": {"integerValue": "3"}}}}},
                },
                "updateMask": {"fieldPaths": ["profile.age"]},
            }
        ]
    }


@respx.mock
async def test_firestore_empty_merge_and_update_keep_an_empty_mask(firestore: FirestoreRESTClient) -> None:
    commit = respx.post(f"{DOCS}:commit").mock(return_value=Response(200, json={}))
    patch = respx.patch(f"{DOCS}/users/u1").mock(return_value=Response(200, json={}))
    ref = firestore.collection("users").document("u1")

    await ref.set({}, merge=True)
    await ref.update({})

    assert not patch.called
    merge_write, update_write = (json.loads(call.request.content)["writes"][0] for call in commit.calls)
    assert merge_write["updateMask"] == {"fieldPaths": []}
    assert merge_write["update"]["fields"] == {}
    assert "currentDocument" not in merge_write
    assert update_write["updateMask"] == {"fieldPaths": []}
    assert update_write["currentDocument"] == {"exists": True}


@respx.mock
async def test_firestore_update_dotted_key_is_nested_field(firestore: FirestoreRESTClient) -> None:
    route = respx.post(f"{DOCS}:commit").mock(return_value=Response(200, json={}))
    await firestore.collection("users").document("u1").update({"profile.age": 3, "name": "x"})
    write = json.loads(route.calls.last.request.content)["writes"][0]
    assert write["updateMask"] == {"fieldPaths": ["profile.age", "name"]}
    assert write["update"]["fields"] == {
        "profile": {"mapValue": {"fields": {"age": {"integerValue": "3"}}}},
        "name": {"stringValue": "x"},
    }


@respx.mock
async def test_firestore_update_requires_existing_document(firestore: FirestoreRESTClient) -> None:
    route = respx.post(f"{DOCS}:commit").mock(
        return_value=Response(404, json={"error": {"status": "NOT_FOUND", "message": "No document to update"}})
    )
    with pytest.raises(BackendError) as exc_info:
        await firestore.collection("users").document("u1").update({"a": 1})
    assert exc_info.value.code == "not-found"
    assert exc_info.value.message == "No document to update"
    write = json.loads(route.calls.last.request.content)["writes"][0]
    assert write["currentDocument"] == {"exists": True}


@respx.mock
async def test_firestore_add_returns_generated_id(firestore: FirestoreRESTClient) -> None:
    respx.post(f"{DOCS}/users").mock(return_value=Response(200, json={"name": f"{DOCS}/users/abc123"}))
    ref = await firestore.collection("users").add({"a": 1})
    assert ref.id == "abc123"


@respx.mock
async def test_firestore_query(firestore: FirestoreRESTClient) -> None:
    route = respx.post(f"{DOCS}:runQuery").mock(
        return_value=Response(
            200,
            json=[
                {"document": {"name": f"{DOCS}/users/a", "fields": {"age": {"integerValue": "30"}}}},
                {"readTime": "2024-05-01T10:00:00Z"},
            ],
        )
    )
    query = firestore.collection("users").where("age", ">=", 21).order_by("age", "desc").limit(10)
    documents = await query.get()
    assert [(d.id, d.to_dict()) for d in documents] == [("a", {"age": 30})]
    structured = json.loads(route.calls.last.request.content)["structuredQuery"]
    assert structured == {
        "from": [{"collectionId": "users"}],
        "where": {
            "fieldFilter": {
                "field": {"fieldPath": "age"},
                "op": "GREATER_THAN_OR_EQUAL",
                "value": {"integerValue": "21"},
            }
        },
        "orderBy": [{"field": {"fieldPath": "age"}, "direction": "DESCENDING"}],
        "limit": 10,
    }


@respx.mock
async def test_firestore_nested_query_parent(firestore: FirestoreRESTClient) -> None:
    route = respx.post(f"{DOCS}/users/u1:runQuery").mock(return_value=Response(200, json=[{}]))
    assert await firestore.collection("users/u1/posts").get() == []
    assert route.called


@respx.mock
async def test_firestore_missing_index_is_failed_precondition(firestore: FirestoreRESTClient) -> None:
    respx.post(f"{DOCS}:runQuery").mock(
        return_value=Response(
            400,
            json={"error": {"status": "FAILED_PRECONDITION", "message": "The query requires an index."}},
        )
    )
    with pytest.raises(BackendError) as exc_info:
        await firestore.collection("users").order_by("age").get()
    assert exc_info.value.code == "failed-precondition"


@respx.mock
async def test_firestore_network_failure(firestore: FirestoreRESTClient) -> None:
    respx.delete(f"{DOCS}/users/u1").mock(side_effect=httpx.ConnectError("refused"))
    with pytest.raises(BackendError) as exc_info:
        await firestore.collection("users").document("u1").delete()
    assert exc_info.value.code == "unavailable"


# ---- Auth ----


@pytest.fixture
def auth(http: httpx.AsyncClient) -> FirebaseAuthClient:
    return FirebaseAuthClient(http, api_key=API_KEY)


def _signed_in(uid: str = "u1", email: str = "alice@example.com") -> dict:
    return {"localId": uid, "email": email, "idToken": "id-1", "refreshToken": "r-1", "expiresIn": "3600"}


@respx.mock
async def test_password_sign_in_notifies_observers(auth: FirebaseAuthClient) -> None:
    respx.post(f"{TOOLKIT}/v1/accounts:signInWithPassword").mock(return_value=Response(200, json=_signed_in()))
    events = []
    auth.on_auth_state_changed(events.append)
    principal = await auth.sign_in_with_email_and_password("alice@example.com", "pw")
    assert principal.uid == "u1"
    assert auth.current_user == principal
    assert [(e.principal, e.method) for e in events] == [
        (None, None),
        (principal, SignInMethod.PASSWORD),
    ]
    assert await auth.get_id_token() == "id-1"


@respx.mock
async def test_sign_in_error_maps_to_auth_code(auth: FirebaseAuthClient) -> None:
    respx.post(f"{TOOLKIT}/v1/accounts:signInWithPassword").mock(
        return_value=Response(400, json={"error": {"code": 400, "message": "INVALID_LOGIN_CREDENTIALS"}})
    )
    with pytest.raises(BackendError) as exc_info:
        await auth.sign_in_with_email_and_password("alice@example.com", "bad")
    assert exc_info.value.code == "auth/invalid-credential"
    assert exc_info.value.message == "Firebase: Error (auth/invalid-credential)."


@respx.mock
async def test_weak_password_message_with_detail(auth: FirebaseAuthClient) -> None:
    respx.post(f"{TOOLKIT}/v1/accounts:signUp").mock(
        return_value=Response(
            400,
            json={"error": {"message": "WEAK_PASSWORD : Password should be at least 6 characters"}},
        )
    )
    with pytest.raises(BackendError) as exc_info:
        await auth.create_user_with_email_and_password("bob@example.com", "1")
    assert exc_info.value.code == "auth/weak-password"


@respx.mock
async def test_challenged_sign_in_raises_with_hints(auth: FirebaseAuthClient) -> None:
    respx.post(f"{TOOLKIT}/v1/accounts:signInWithPassword").mock(
        return_value=Response(
            200,
            json={
                "mfaPendingCredential": "pending-1",
                "mfaInfo": [{"mfaEnrollmentId": "e1", "phoneInfo": "+1******1234", "displayName": "work"}],
            },
        )
    )
    with pytest.raises(MultiFactorRequired) as exc_info:
        await auth.sign_in_with_email_and_password("alice@example.com", "pw")
    resolver = exc_info.value.resolver
    assert resolver.session == "pending-1"
    assert resolver.hints == (
        MultiFactorHint(uid="e1", factor_id="phone", display_name="work", phone_number="+1******1234"),
    )
    assert auth.current_user is None


@respx.mock
async def test_phone_second_factor_round(auth: FirebaseAuthClient) -> None:
    start = respx.post(f"{TOOLKIT}/v2/accounts/mfaSignIn:start").mock(
        return_value=Response(200, json={"phoneResponseInfo": {"sessionInfo": "session-info-1"}})
    )
    finalize = respx.post(f"{TOOLKIT}/v2/accounts/mfaSignIn:finalize").mock(
        return_value=Response(200, json={"idToken": "id-2", "refreshToken": "r-2"})
    )
    respx.post(f"{TOOLKIT}/v1/accounts:lookup").mock(
        return_value=Response(200, json={"users": [{"localId": "u1", "email": "alice@example.com"}]})
    )
    events = []
    auth.on_auth_state_changed(events.append)
    resolver = MultiFactorResolver(session="pending-1", hints=())
    hint = MultiFactorHint(uid="e1", factor_id="phone")

    widget = auth.create_challenge_widget("mfa-recaptcha")
    verification_id = await auth.verify_phone_number(hint, resolver, widget)
    assert verification_id == "session-info-1"
    assert json.loads(start.calls.last.request.content) == {
        "mfaPendingCredential": "pending-1",
        "mfaEnrollmentId": "e1",
        "phoneSignInInfo": {},
    }

    principal = await auth.resolve_sign_in(resolver, verification_id, "123456")
    assert principal.email == "alice@example.com"
    assert json.loads(finalize.calls.last.request.content)["phoneVerificationInfo"] == {
        "sessionInfo": "session-info-1",
        "code": "123456",
    }
    assert events[-1].method is SignInMethod.MULTI_FACTOR


@respx.mock
async def test_wrong_code_maps_to_invalid_verification_code(auth: FirebaseAuthClient) -> None:
    respx.post(f"{TOOLKIT}/v2/accounts/mfaSignIn:finalize").mock(
        return_value=Response(400, json={"error": {"message": "INVALID_CODE"}})
    )
    resolver = MultiFactorResolver(session="pending-1")
    with pytest.raises(BackendError) as exc_info:
        await auth.resolve_sign_in(resolver, "session-info-1", "000000")
    assert exc_info.value.code == "auth/invalid-verification-code"


async def test_cleared_widget_cannot_dispatch(auth: FirebaseAuthClient) -> None:
    widget = auth.create_challenge_widget("mfa-recaptcha")
    widget.clear()
    with pytest.raises(BackendError):
        await auth.verify_phone_number(
            MultiFactorHint(uid="e1", factor_id="phone"), MultiFactorResolver(session="p"), widget
        )


@respx.mock
async def test_sign_out_clears_tokens(auth: FirebaseAuthClient) -> None:
    respx.post(f"{TOOLKIT}/v1/accounts:signUp").mock(return_value=Response(200, json=_signed_in()))
    events = []
    await auth.create_user_with_email_and_password("alice@example.com", "pw")
    auth.on_auth_state_changed(events.append)
    await auth.sign_out()
    assert auth.current_user is None
    assert await auth.get_id_token() is None
    assert events[-1].principal is None


@respx.mock
async def test_expired_id_token_is_refreshed(auth: FirebaseAuthClient) -> None:
    respx.post(f"{TOOLKIT}/v1/accounts:signInWithIdp").mock(
        return_value=Response(200, json={**_signed_in(), "expiresIn": "30"})
    )
    refresh = respx.post("https://securetoken.googleapis.com/v1/token").mock(
        return_value=Response(200, json={"id_token": "id-fresh", "refresh_token": "r-2", "expires_in": "3600"})
    )
    await auth.sign_in_with_credential(OAuthCredential(provider_id="google.com", id_token="g-token"))
    assert await auth.get_id_token() == "id-fresh"
    assert b"grant_type=refresh_token" in refresh.calls.last.request.content
    assert await auth.get_id_token() == "id-fresh"
    assert refresh.call_count == 1


# ---- Functions ----


@pytest.fixture
def functions(http: httpx.AsyncClient) -> FunctionsRESTClient:
    return FunctionsRESTClient(http, project_id="demo", token_source=_anonymous)


@respx.mock
async def test_callable_returns_result(functions: FunctionsRESTClient) -> None:
    route = respx.post(f"{FUNCTIONS}/hello").mock(return_value=Response(200, json={"result": {"ok": True}}))
    assert await functions.call("hello", {"name": "x"}) == {"ok": True}
    request = route.calls.last.request
    assert json.loads(request.content) == {"data": {"name": "x"}}
    assert "Authorization" not in request.headers


@respx.mock
async def test_callable_error_status(functions: FunctionsRESTClient) -> None:
    respx.post(f"{FUNCTIONS}/missing").mock(
        return_value=Response(404, json={"error": {"status": "NOT_FOUND", "message": "NOT_FOUND"}})
    )
    with pytest.raises(BackendError) as exc_info:
        await functions.call("missing", None)
    assert exc_info.value.code == "not-found"


@respx.mock
async def test_callable_internal_error_without_body(functions: FunctionsRESTClient) -> None:
    respx.post(f"{FUNCTIONS}/boom").mock(return_value=Response(500, text="Internal Server Error"))
    with pytest.raises(BackendError) as exc_info:
        await functions.call("boom", None)
    assert exc_info.value.code == "internal"


@respx.mock
async def test_http_function_returns_any_status(functions: FunctionsRESTClient) -> None:
    route = respx.get(f"{FUNCTIONS}/ping").mock(return_value=Response(403, text="Forbidden"))
    response = await functions.request("ping", "GET", {"a": "1"})
    assert response.status_code == 403
    assert response.body == "Forbidden"
    assert route.calls.last.request.url.params["a"] == "1"


@respx.mock
async def test_http_function_post_body(functions: FunctionsRESTClient) -> None:
    route = respx.post(f"{FUNCTIONS}/echo").mock(return_value=Response(200, json={"echo": 1}))
    response = await functions.request("echo", "POST", {"x": 1})
    assert response.body == {"echo": 1}
    assert json.loads(route.calls.last.request.content) == {"x": 1}


# ---- Storage ----


@pytest.fixture
def storage(http: httpx.AsyncClient) -> StorageRESTClient:
    return StorageRESTClient(http, bucket="demo.appspot.com", token_source=_token, chunk_size=4)


@respx.mock
async def test_storage_list_follows_pages(storage: StorageRESTClient) -> None:
    route = respx.get(BUCKET_URL).mock(
        side_effect=[
            Response(200, json={"items": [{"name": "img/a.png"}], "prefixes": ["img/thumbs/"], "nextPageToken": "t"}),
            Response(200, json={"items": [{"name": "img/b.png"}]}),
        ]
    )
    listing = await storage.list_all("img")
    assert listing.items == ["img/a.png", "img/b.png"]
    assert listing.prefixes == ["img/thumbs"]
    first, second = (call.request.url.params for call in route.calls)
    assert first["prefix"] == "img/"
    assert first["delimiter"] == "/"
    assert second["pageToken"] == "t"
    assert route.calls.last.request.headers["Authorization"] == "Firebase id-token-1"


@respx.mock
async def test_storage_list_denied(storage: StorageRESTClient) -> None:
    respx.get(BUCKET_URL).mock(return_value=Response(403, json={"error": {"code": 403, "message": "Permission denied."}}))
    with pytest.raises(BackendError) as exc_info:
        await storage.list_all("")
    assert exc_info.value.code == "storage/unauthorized"


@respx.mock
async def test_storage_resumable_upload_reports_each_chunk(storage: StorageRESTClient) -> None:
    upload_url = "https://firebasestorage.googleapis.com/upload/session-1"
    respx.post(BUCKET_URL).mock(return_value=Response(200, headers={"X-Goog-Upload-URL": upload_url}))
    chunks = respx.post(upload_url).mock(
        side_effect=[
            Response(200),
            Response(200, json={"name": "docs/a.txt", "size": "6", "downloadTokens": "tok-1,tok-2"}),
        ]
    )
    progress = []
    uploaded = await storage.upload(
        "docs/a.txt",
        UploadSource(filename="a.txt", content=b"abcdef", content_type="text/plain"),
        lambda done, total: progress.append((done, total)),
    )
    assert progress == [(4, 6), (6, 6)]
    assert [c.request.headers["X-Goog-Upload-Command"] for c in chunks.calls] == ["upload", "upload, finalize"]
    assert uploaded.size == 6
    assert uploaded.download_url == f"{BUCKET_URL}/docs%2Fa.txt?alt=media&token=tok-1"


@respx.mock
async def test_storage_download_url_and_metadata(storage: StorageRESTClient) -> None:
    respx.get(f"{BUCKET_URL}/docs%2Fa.txt").mock(
        return_value=Response(
            200,
            json={"name": "docs/a.txt", "bucket": "demo.appspot.com", "size": "6", "contentType": "text/plain", "downloadTokens": "tok-1"},
        )
    )
    assert (await storage.get_download_url("docs/a.txt")).endswith("?alt=media&token=tok-1")
    metadata = await storage.get_metadata("docs/a.txt")
    assert metadata["name"] == "a.txt"
    assert metadata["fullPath"] == "docs/a.txt"
    assert metadata["size"] == 6
    assert metadata["contentType"] == "text/plain"


@respx.mock
async def test_storage_missing_object(storage: StorageRESTClient) -> None:
    respx.delete(f"{BUCKET_URL}/gone.txt").mock(return_value=Response(404, json={"error": {"code": 404, "message": "Not Found."}}))
    with pytest.raises(BackendError) as exc_info:
        await storage.delete("gone.txt")
    assert exc_info.value.code == "storage/object-not-found"
    assert exc_info.value.message == "Firebase Storage: Object 'gone.txt' does not exist. (storage/object-not-found)"


# ---- SDK entry point ----


async def test_sdk_opens_app_sharing_one_session(settings: Settings) -> None:
    sdk = FirebaseRESTSDK(settings)
    app = sdk.initialize_app(
        ConnectionDescriptor(api_key=API_KEY, project_id="demo", storage_bucket="demo.appspot.com")
    )
    assert app.firestore() is app.firestore()
    assert app.storage().bucket == "demo.appspot.com"
    assert app.functions().function_url("hello") == f"{FUNCTIONS}/hello"
    await app.delete()


async def test_sdk_app_without_bucket_has_no_storage(settings: Settings) -> None:
    app = FirebaseRESTSDK(settings).initialize_app(ConnectionDescriptor(api_key=API_KEY, project_id="demo"))
    with pytest.raises(BackendError):
        app.storage()
    await app.delete()


@respx.mock
async def test_firestore_set_then_get_returns_identical_fields(firestore: FirestoreRESTClient) -> None:
    stored = {}

    def write(request: httpx.Request) -> Response:
        stored.update(json.loads(request.content))
        return Response(200, json={"name": f"{DOCS}/c/d1", **stored})

    respx.patch(f"{DOCS}/c/d1").mock(side_effect=write)
    respx.get(f"{DOCS}/c/d1").mock(side_effect=lambda request: Response(200, json={"name": f"{DOCS}/c/d1", **stored}))

    data = {"a": 1, "b": 2.5, "s": "x", "ok": False, "none": None, "tags": ["t", 3], "nested": {"k": {"deep": True}}}
    ref = firestore.collection("c").document("d1")
    await ref.set(data)
    snapshot = await ref.get()
    assert snapshot.to_dict() == data

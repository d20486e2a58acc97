"""Identity Toolkit REST client: the end-user auth surface of a Firebase project.

Covers password sign-in and sign-up, federated (IdP) sign-in, phone
multi-factor sign-in (mfaSignIn:start / :finalize) and ID token refresh
through the Secure Token API. Observers are told about every principal
change with the sign-in method that produced it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import httpx

from fireprobe.application.dtos.backend import OAuthCredential
from fireprobe.application.interfaces import AuthObserver
from fireprobe.domain.entities import (
    AuthStateEvent,
    MultiFactorHint,
    MultiFactorResolver,
    Principal,
)
from fireprobe.domain.enums import PHONE_FACTOR_ID, SignInMethod
from fireprobe.domain.exceptions import BackendError, MultiFactorRequired
from fireprobe.infrastructure.firebase._http import error_payload, json_body, send
from fireprobe.infrastructure.firebase.recaptcha import RecaptchaWidget
from fireprobe.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

# Identity Toolkit error message -> web SDK auth code
_AUTH_CODES = {
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "INVALID_IDP_RESPONSE": "auth/invalid-credential",
    "USER_DISABLED": "auth/user-disabled",
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "WEAK_PASSWORD": "auth/weak-password",
    "INVALID_EMAIL": "auth/invalid-email",
    "MISSING_PASSWORD": "auth/missing-password",
    "OPERATION_NOT_ALLOWED": "auth/operation-not-allowed",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
    "INVALID_CODE": "auth/invalid-verification-code",
    "SESSION_EXPIRED": "auth/code-expired",
    "INVALID_MFA_PENDING_CREDENTIAL": "auth/invalid-multi-factor-session",
    "MISSING_MFA_PENDING_CREDENTIAL": "auth/missing-multi-factor-session",
    "INVALID_SESSION_INFO": "auth/invalid-verification-id",
    "CAPTCHA_CHECK_FAILED": "auth/captcha-check-failed",
    "INVALID_PHONE_NUMBER": "auth/invalid-phone-number",
    "QUOTA_EXCEEDED": "auth/quota-exceeded",
    "TOKEN_EXPIRED": "auth/user-token-expired",
    "INVALID_REFRESH_TOKEN": "auth/invalid-user-token",
    "USER_NOT_FOUND": "auth/user-token-expired",
    "API_KEY_INVALID": "auth/api-key-not-valid",
}

# Refresh the ID token this long before it actually expires
_EXPIRY_SKEW = timedelta(seconds=60)


def auth_error(response: httpx.Response) -> BackendError:
    """Map an Identity Toolkit error body to a web SDK style auth error."""
    _, message = error_payload(response)
    raw = (message or "").strip()
    key = raw.split(":")[0].strip().split(" ")[0]
    if raw.startswith("API key not valid"):
        key = "API_KEY_INVALID"
    code = _AUTH_CODES.get(key, "auth/internal-error")
    return BackendError(code, f"Firebase: Error ({code}).", {"server_message": raw})


def parse_hints(mfa_info: list[dict[str, Any]]) -> tuple[MultiFactorHint, ...]:
    """Convert the mfaInfo list of a challenged sign-in into hints (order kept)."""
    hints = []
    for info in mfa_info:
        if "phoneInfo" in info:
            factor_id = PHONE_FACTOR_ID
        elif "totpInfo" in info:
            factor_id = "totp"
        else:
            factor_id = "unknown"
        hints.append(
            MultiFactorHint(
                uid=info.get("mfaEnrollmentId", ""),
                factor_id=factor_id,
                display_name=info.get("displayName"),
                phone_number=info.get("phoneInfo"),
            )
        )
    return tuple(hints)


@dataclass
class _Tokens:
    id_token: str
    refresh_token: str
    expires_at: datetime


def _tokens(data: dict[str, Any]) -> _Tokens:
    lifetime = int(data.get("expiresIn") or data.get("expires_in") or 3600)
    return _Tokens(
        id_token=data.get("idToken") or data.get("id_token", ""),
        refresh_token=data.get("refreshToken") or data.get("refresh_token", ""),
        expires_at=utc_now() + timedelta(seconds=lifetime),
    )


class FirebaseAuthClient:
    """Client-side auth state for one backend session."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        api_key: str,
        identity_toolkit_url: str = "https://identitytoolkit.googleapis.com",
        secure_token_url: str = "https://securetoken.googleapis.com",
        recaptcha_token: str | None = None,
    ) -> None:
        self._http = http
        self._api_key = api_key
        self._toolkit = identity_toolkit_url.rstrip("/")
        self._secure_token = secure_token_url.rstrip("/")
        self._recaptcha_token = recaptcha_token
        self._principal: Principal | None = None
        self._tokens: _Tokens | None = None
        self._observers: list[AuthObserver] = []

    @property
    def current_user(self) -> Principal | None:
        return self._principal

    def on_auth_state_changed(self, observer: AuthObserver) -> Callable[[], None]:
        """Register observer and fire it once with the current principal."""
        self._observers.append(observer)
        observer(AuthStateEvent(principal=self._principal))

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self, method: SignInMethod | None) -> None:
        event = AuthStateEvent(principal=self._principal, method=method)
        for observer in list(self._observers):
            observer(event)

    def _establish(self, data: dict[str, Any], method: SignInMethod) -> Principal:
        self._tokens = _tokens(data)
        self._principal = Principal(uid=data.get("localId", ""), email=data.get("email") or None)
        logger.info("Signed in uid=%s via %s", self._principal.uid, method.value)
        self._notify(method)
        return self._principal

    async def _post(self, url: str, body: dict[str, Any]) -> dict[str, Any]:
        response = await send(
            self._http,
            "POST",
            url,
            params={"key": self._api_key},
            json=body,
            on_error=auth_error,
        )
        return json_body(response)

    def _v1(self, operation: str) -> str:
        return f"{self._toolkit}/v1/accounts:{operation}"

    def _v2(self, operation: str) -> str:
        return f"{self._toolkit}/v2/accounts/{operation}"

    @staticmethod
    def _check_challenge(data: dict[str, Any]) -> None:
        if data.get("mfaPendingCredential"):
            resolver = MultiFactorResolver(
                session=data["mfaPendingCredential"],
                hints=parse_hints(data.get("mfaInfo") or []),
            )
            raise MultiFactorRequired(
                resolver, "Firebase: Error (auth/multi-factor-auth-required)."
            )

    async def sign_in_with_email_and_password(self, email: str, password: str) -> Principal:
        data = await self._post(
            self._v1("signInWithPassword"),
            {"email": email, "password": password, "returnSecureToken": True},
        )
        self._check_challenge(data)
        return self._establish(data, SignInMethod.PASSWORD)

    async def create_user_with_email_and_password(self, email: str, password: str) -> Principal:
        data = await self._post(
            self._v1("signUp"),
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._establish(data, SignInMethod.PASSWORD)

    async def sign_in_with_credential(self, credential: OAuthCredential) -> Principal:
        data = await self._post(
            self._v1("signInWithIdp"),
            {
                "postBody": f"id_token={credential.id_token}&providerId={credential.provider_id}",
                "requestUri": "http://localhost",
                "returnSecureToken": True,
                "returnIdpCredential": True,
            },
        )
        self._check_challenge(data)
        return self._establish(data, SignInMethod.FEDERATED)

    async def sign_out(self) -> None:
        self._principal = None
        self._tokens = None
        self._notify(None)

    def create_challenge_widget(self, anchor_id: str) -> RecaptchaWidget:
        return RecaptchaWidget(anchor_id, token=self._recaptcha_token)

    async def verify_phone_number(
        self,
        hint: MultiFactorHint,
        resolver: MultiFactorResolver,
        widget: RecaptchaWidget,
    ) -> str:
        """Start a phone second-factor sign-in; returns the verification id (sessionInfo)."""
        phone_info: dict[str, Any] = {}
        recaptcha_token = await widget.verify()
        if recaptcha_token:
            phone_info["recaptchaToken"] = recaptcha_token
        data = await self._post(
            self._v2("mfaSignIn:start"),
            {
                "mfaPendingCredential": resolver.session,
                "mfaEnrollmentId": hint.uid,
                "phoneSignInInfo": phone_info,
            },
        )
        session_info = (data.get("phoneResponseInfo") or {}).get("sessionInfo")
        if not session_info:
            raise BackendError("auth/internal-error", "Firebase: Error (auth/internal-error).")
        return session_info

    async def resolve_sign_in(
        self,
        resolver: MultiFactorResolver,
        verification_id: str,
        code: str,
    ) -> Principal:
        """Finalize a phone second-factor sign-in with the one-time code."""
        data = await self._post(
            self._v2("mfaSignIn:finalize"),
            {
                "mfaPendingCredential": resolver.session,
                "phoneVerificationInfo": {"sessionInfo": verification_id, "code": code},
            },
        )
        lookup = await self._post(self._v1("lookup"), {"idToken": data.get("idToken", "")})
        user = (lookup.get("users") or [{}])[0]
        return self._establish(
            {**data, "localId": user.get("localId", ""), "email": user.get("email")},
            SignInMethod.MULTI_FACTOR,
        )

    async def get_id_token(self) -> str | None:
        """Return the current ID token, refreshing it when close to expiry."""
        if self._tokens is None:
            return None
        if utc_now() + _EXPIRY_SKEW < self._tokens.expires_at:
            return self._tokens.id_token

        response = await send(
            self._http,
            "POST",
            f"{self._secure_token}/v1/token",
            params={"key": self._api_key},
            data={"grant_type": "refresh_token", "refresh_token": self._tokens.refresh_token},
            on_error=auth_error,
        )
        self._tokens = _tokens(json_body(response))
        logger.debug("Refreshed ID token")
        return self._tokens.id_token

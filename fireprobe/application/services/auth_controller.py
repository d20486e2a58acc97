"""Auth controller: password, federated and multi-factor sign-in flows.

Successful sign-ins are announced by the session's auth-state observer
(the backend tags each event with how the principal was established);
this controller only logs failures, challenge transitions, sign-up and
sign-out.

The controller exclusively owns the pending MfaChallenge and the
challenge widget. The first enrolled factor is always used; the tester
is never offered a choice between several enrolled factors.
"""

import logging

from fireprobe.application.dtos.backend import OAuthCredential
from fireprobe.application.interfaces import IAuthService, IChallengeWidget
from fireprobe.core.log import OperationLog
from fireprobe.core.session import Session
from fireprobe.domain.entities import MfaChallenge, MultiFactorHint
from fireprobe.domain.enums import AuthState
from fireprobe.domain.exceptions import (
    BackendError,
    CodeExpired,
    FireprobeException,
    InvalidCode,
    MultiFactorRequired,
    NoFactorsEnrolled,
    SessionExpired,
    UnsupportedFactorKind,
    ValidationException,
)

logger = logging.getLogger(__name__)

GOOGLE_PROVIDER_ID = "google.com"

# Backend codes that end the challenge
_INVALID_CODE = "auth/invalid-verification-code"
_CODE_EXPIRED = "auth/code-expired"
_SESSION_GONE = "auth/invalid-multi-factor-session"


def google_credential(id_token: str) -> OAuthCredential:
    """Build a Google federated credential from an opaque OAuth ID token."""
    token = id_token.strip()
    if not token:
        raise ValidationException("An OAuth ID token is required", field="id_token")
    return OAuthCredential(provider_id=GOOGLE_PROVIDER_ID, id_token=token)


class ChallengeWidgetSlot:
    """Owned optional challenge widget.

    ensure() creates the widget at most once and keeps reusing it across
    challenges; destroy() releases it so the next dispatch recreates it.
    """

    def __init__(self, anchor_id: str) -> None:
        self.anchor_id = anchor_id
        self._widget: IChallengeWidget | None = None

    @property
    def widget(self) -> IChallengeWidget | None:
        return self._widget

    def ensure(self, auth: IAuthService) -> IChallengeWidget:
        if self._widget is None:
            self._widget = auth.create_challenge_widget(self.anchor_id)
        return self._widget

    def destroy(self) -> None:
        if self._widget is not None:
            self._widget.clear()
            self._widget = None


class AuthController:
    """Drives sign-in, sign-up, sign-out, federated and MFA flows."""

    def __init__(self, session: Session, log: OperationLog, *, anchor_id: str) -> None:
        self._session = session
        self._log = log
        self._challenge: MfaChallenge | None = None
        self.widget_slot = ChallengeWidgetSlot(anchor_id)
        self._pending_sign_ins = 0

    @property
    def challenge(self) -> MfaChallenge | None:
        return self._challenge

    @property
    def state(self) -> AuthState:
        """Current position in ANONYMOUS -> AUTHENTICATING -> AUTHENTICATED | CHALLENGE_PENDING."""
        if self._challenge is not None:
            return AuthState.CHALLENGE_PENDING
        if self._pending_sign_ins:
            return AuthState.AUTHENTICATING
        if self._session.current_principal is not None:
            return AuthState.AUTHENTICATED
        return AuthState.ANONYMOUS

    def _discard_challenge(self, reason: str) -> None:
        if self._challenge is not None:
            logger.debug("Discarding pending MFA challenge: %s", reason)
        self._challenge = None

    async def sign_in(self, email: str, password: str) -> None:
        """Password sign-in; a second-factor requirement opens a challenge."""
        try:
            auth = self._session.auth
        except FireprobeException as exc:
            self._log.error(exc.message)
            return

        self._discard_challenge("new sign-in attempt")
        self._pending_sign_ins += 1
        try:
            await auth.sign_in_with_email_and_password(email, password)
        except MultiFactorRequired as exc:
            self._challenge = MfaChallenge(resolver=exc.resolver)
            self._log.info("MFA Required: Please enter your verification code.")
        except BackendError as exc:
            self._log.error(f"Error: Firebase auth failed - {exc.message}")
        finally:
            self._pending_sign_ins -= 1

    async def sign_up(self, email: str, password: str) -> None:
        try:
            principal = await self._session.auth.create_user_with_email_and_password(email, password)
        except FireprobeException as exc:
            self._log.error(f"Error: {exc.message}")
            return
        self._log.success(f"Account created ({principal.email})")

    async def sign_out(self) -> None:
        try:
            await self._session.auth.sign_out()
        except FireprobeException as exc:
            self._log.error(f"Failed to sign out: {exc.message}")
            return
        self._log.info("Logged out")

    async def federated_sign_in(self, id_token: str) -> None:
        """Sign in with a Google OAuth ID token."""
        try:
            auth = self._session.auth
            credential = google_credential(id_token)
        except FireprobeException as exc:
            self._log.error(f"Error: {exc.message}")
            return

        self._discard_challenge("new sign-in attempt")
        self._pending_sign_ins += 1
        try:
            await auth.sign_in_with_credential(credential)
        except BackendError as exc:
            self._log.error(f"Error: Google OAuth sign-in failed - {exc.message}")
        finally:
            self._pending_sign_ins -= 1

    async def verify_mfa_code(self, code: str) -> None:
        """Advance the pending challenge: dispatch the code first, then resolve it."""
        challenge = self._challenge
        if challenge is None:
            self._log.error(SessionExpired().message)
            return
        try:
            hint = self._select_hint(challenge)
            self._log.info(f"MFA Verification: Attempting to verify {hint.factor_id} code...")
            if not hint.is_phone:
                raise UnsupportedFactorKind(hint.factor_id)
            auth = self._session.auth
            if challenge.verification_id:
                await self._resolve(auth, challenge, code)
            else:
                await self._dispatch(auth, challenge, hint)
        except FireprobeException as exc:
            self._log.error(exc.message)

    def cancel_mfa(self) -> None:
        """Discard any pending challenge (logged even when none was pending)."""
        self._discard_challenge("cancelled by user")
        self._log.info("MFA Cancelled: Login cancelled by user.")

    @staticmethod
    def _select_hint(challenge: MfaChallenge) -> MultiFactorHint:
        hints = challenge.resolver.hints
        if not hints:
            raise NoFactorsEnrolled()
        return hints[0]

    async def _dispatch(
        self, auth: IAuthService, challenge: MfaChallenge, hint: MultiFactorHint
    ) -> None:
        widget = self.widget_slot.ensure(auth)
        try:
            verification_id = await auth.verify_phone_number(hint, challenge.resolver, widget)
        except BackendError as exc:
            self.widget_slot.destroy()
            self._log.error(f"MFA Error: Failed to send SMS - {exc.message}")
            return

        if self._challenge is not challenge:
            logger.info("MFA challenge ended while the code was being sent; dropping verification id")
            return
        challenge.verification_id = verification_id
        self._log.info(
            f"MFA SMS: Verification code sent to {hint.phone_number or 'your phone'}. "
            "Please enter the 6-digit code."
        )

    async def _resolve(self, auth: IAuthService, challenge: MfaChallenge, code: str) -> None:
        try:
            await auth.resolve_sign_in(challenge.resolver, challenge.verification_id or "", code)
        except BackendError as exc:
            if exc.code == _INVALID_CODE:
                raise InvalidCode() from exc
            if exc.code == _CODE_EXPIRED:
                self._discard_challenge("code expired")
                raise CodeExpired() from exc
            if exc.code == _SESSION_GONE:
                self._discard_challenge("backend session expired")
                raise SessionExpired() from exc
            raise FireprobeException(f"MFA Error: MFA verification failed: {exc.message}") from exc
        self._discard_challenge("resolved")

"""Auth entities: principal, multi-factor hints and resolver, auth-state events."""

from dataclasses import dataclass

from fireprobe.domain.enums import PHONE_FACTOR_ID, SignInMethod


@dataclass(frozen=True)
class Principal:
    """The currently authenticated identity."""

    uid: str
    email: str | None = None


@dataclass(frozen=True)
class MultiFactorHint:
    """One enrolled second factor, as disclosed during a challenged sign-in."""

    uid: str
    factor_id: str
    display_name: str | None = None
    phone_number: str | None = None

    @property
    def is_phone(self) -> bool:
        return self.factor_id == PHONE_FACTOR_ID


@dataclass(frozen=True)
class MultiFactorResolver:
    """Issued when a sign-in needs a second factor.

    ``session`` is the backend's pending credential; it is opaque to the
    console and only handed back when dispatching or resolving the challenge.
    """

    session: str
    hints: tuple[MultiFactorHint, ...] = ()


@dataclass(frozen=True)
class AuthStateEvent:
    """Auth-state change delivered to observers.

    ``method`` tags how a present principal was established, so the
    observer can word its log entry without any side channel; it is None
    for the registration-time callback and for sign-out.
    """

    principal: Principal | None
    method: SignInMethod | None = None


@dataclass
class MfaChallenge:
    """Live challenge between 'second factor required' and resolution/cancel."""

    resolver: MultiFactorResolver
    verification_id: str | None = None

"""Domain exceptions for the console.

Every failure an operator can report is one of these. Operators catch
FireprobeException at their entry points and turn it into exactly one
error log entry; the presentation layer maps the ones raised outside an
operator (e.g. a malformed pasted config) to HTTP responses.
"""

from typing import Any


class FireprobeException(Exception):
    """Base exception for all console errors.

    Attributes:
        message: Human-readable error description (also the log body).
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(FireprobeException):
    """Raised when user input is rejected before any backend call."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class PreconditionException(FireprobeException):
    """Raised when a required session component is missing."""

    def __init__(self, message: str, component: str | None = None) -> None:
        details = {"component": component} if component else {}
        super().__init__(message, "PRECONDITION_FAILED", details)


class BackendError(FireprobeException):
    """Failure reported by the backend through its own error channel.

    ``code`` follows the client SDK vocabulary (``not-found``,
    ``failed-precondition``, ``auth/invalid-verification-code``...), so
    operators can classify failures without knowing the transport.
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        super().__init__(message, "BACKEND_ERROR", {"code": code, **(details or {})})


class MultiFactorRequired(BackendError):
    """Password sign-in succeeded but a second factor must be resolved."""

    def __init__(self, resolver: Any, message: str = "Multi-factor authentication required") -> None:
        self.resolver = resolver
        super().__init__("auth/multi-factor-auth-required", message)


# ---- Multi-factor challenge failures ----


class SessionExpired(PreconditionException):
    """No multi-factor challenge is pending (never started, resolved or expired)."""

    def __init__(self) -> None:
        super().__init__(
            "MFA session expired. Please try logging in again.",
            component="mfa_challenge",
        )
        self.error_code = "MFA_SESSION_EXPIRED"


class NoFactorsEnrolled(FireprobeException):
    """The challenge resolver carries an empty hint list."""

    def __init__(self) -> None:
        super().__init__("No MFA factors found.", "MFA_NO_FACTORS")


class UnsupportedFactorKind(FireprobeException):
    """The first enrolled factor is not a phone factor."""

    def __init__(self, factor_id: str) -> None:
        super().__init__(
            f"Unsupported MFA factor type: {factor_id}",
            "MFA_UNSUPPORTED_FACTOR",
            {"factor_id": factor_id},
        )


class InvalidCode(FireprobeException):
    """The one-time code was rejected; the challenge stays open for a retry."""

    def __init__(self) -> None:
        super().__init__("MFA Error: Invalid verification code.", "MFA_INVALID_CODE")


class CodeExpired(FireprobeException):
    """The one-time code expired; the challenge is discarded."""

    def __init__(self) -> None:
        super().__init__("MFA Error: Verification code has expired.", "MFA_CODE_EXPIRED")

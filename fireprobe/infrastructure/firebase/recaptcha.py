"""Invisible reCAPTCHA widget stand-in for phone second-factor dispatch.

The challenge is solved in the tester's browser; the token it yields is
handed to the console through settings and attached to mfaSignIn:start.
Projects without reCAPTCHA enforcement (and the emulator) accept an
empty token.
"""

from fireprobe.domain.exceptions import BackendError


class RecaptchaWidget:
    """One widget bound to a page anchor; unusable once cleared."""

    def __init__(self, anchor_id: str, token: str | None = None) -> None:
        self.anchor_id = anchor_id
        self._token = token
        self.cleared = False

    async def verify(self) -> str:
        if self.cleared:
            raise BackendError(
                "auth/internal-error",
                "reCAPTCHA client element has been removed",
            )
        return self._token or ""

    def clear(self) -> None:
        self.cleared = True

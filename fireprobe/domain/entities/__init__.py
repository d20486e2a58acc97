"""Domain entities."""

from fireprobe.domain.entities.auth import (
    AuthStateEvent,
    MfaChallenge,
    MultiFactorHint,
    MultiFactorResolver,
    Principal,
)
from fireprobe.domain.entities.connection import ConnectionDescriptor

__all__ = [
    "AuthStateEvent",
    "ConnectionDescriptor",
    "MfaChallenge",
    "MultiFactorHint",
    "MultiFactorResolver",
    "Principal",
]

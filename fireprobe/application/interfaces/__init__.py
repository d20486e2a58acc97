"""Application ports (Protocols) implemented by infrastructure."""

from fireprobe.application.interfaces.backend import (
    AuthObserver,
    IAuthService,
    IBackendApp,
    IBackendSDK,
    IBlobStore,
    IChallengeWidget,
    ICollectionReference,
    IDocumentReference,
    IDocumentSnapshot,
    IDocumentStore,
    IFunctionsService,
    IQuery,
    ProgressCallback,
)

__all__ = [
    "AuthObserver",
    "IAuthService",
    "IBackendApp",
    "IBackendSDK",
    "IBlobStore",
    "IChallengeWidget",
    "ICollectionReference",
    "IDocumentReference",
    "IDocumentSnapshot",
    "IDocumentStore",
    "IFunctionsService",
    "IQuery",
    "ProgressCallback",
]

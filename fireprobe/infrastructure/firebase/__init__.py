"""Firebase REST adapters implementing the backend ports."""

from fireprobe.infrastructure.firebase.client import FirebaseRESTApp, FirebaseRESTSDK

__all__ = [
    "FirebaseRESTApp",
    "FirebaseRESTSDK",
]

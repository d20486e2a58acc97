"""Application DTOs: operator requests and backend call results."""

from fireprobe.application.dtos.backend import (
    BlobListing,
    HttpFunctionResponse,
    OAuthCredential,
    UploadedBlob,
)
from fireprobe.application.dtos.requests import (
    BlobRequest,
    HttpFunctionRequest,
    StoreRequest,
    UploadSource,
)

__all__ = [
    "BlobListing",
    "BlobRequest",
    "HttpFunctionRequest",
    "HttpFunctionResponse",
    "OAuthCredential",
    "StoreRequest",
    "UploadSource",
    "UploadedBlob",
]

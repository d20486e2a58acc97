"""Values returned by backend service calls (transport-independent)."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class OAuthCredential:
    """Federated credential built from an identity provider token."""

    provider_id: str
    id_token: str


@dataclass(frozen=True)
class BlobListing:
    """Result of listing one level of a blob storage path."""

    items: list[str] = field(default_factory=list)
    prefixes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UploadedBlob:
    """Terminal state of a finished upload."""

    full_path: str
    size: int
    download_url: str


@dataclass(frozen=True)
class HttpFunctionResponse:
    """Raw answer of an HTTP (on_request) function."""

    status_code: int
    body: Any

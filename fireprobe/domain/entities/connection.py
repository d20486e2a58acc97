"""Connection descriptor: the credentials used to open a backend session.

Mirrors the web ``firebaseConfig`` object. Held in memory for the
lifetime of the session and never written anywhere.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fireprobe.domain.exceptions import ValidationException
from fireprobe.shared.utils.literals import LiteralSyntaxError, parse_literal

# firebaseConfig key -> attribute
_CONFIG_KEYS = {
    "apiKey": "api_key",
    "authDomain": "auth_domain",
    "databaseURL": "database_url",
    "projectId": "project_id",
    "storageBucket": "storage_bucket",
}


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Target project connection fields. Validation runs on construction."""

    api_key: str
    project_id: str
    auth_domain: str = ""
    database_url: str = ""
    storage_bucket: str = ""

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ValidationException when a field every backend call needs is blank."""
        if not self.api_key.strip():
            raise ValidationException("Missing required field: apiKey", field="apiKey")
        if not self.project_id.strip():
            raise ValidationException("Missing required field: projectId", field="projectId")

    @property
    def bucket(self) -> str | None:
        """Trimmed storage bucket, or None when no blob storage was configured."""
        return self.storage_bucket.strip() or None

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "ConnectionDescriptor":
        """Build from a ``firebaseConfig``-shaped mapping (camelCase keys).

        Unknown keys (appId, messagingSenderId, measurementId...) are ignored.
        """
        values = {
            attr: str(config[key]).strip()
            for key, attr in _CONFIG_KEYS.items()
            if config.get(key) is not None
        }
        if not values.get("api_key"):
            raise ValidationException("Missing required field: apiKey", field="apiKey")
        values.setdefault("project_id", "")
        return cls(**values)

    @classmethod
    def from_literal(cls, text: str) -> "ConnectionDescriptor":
        """Build from a pasted ``firebaseConfig`` object literal (keys may be unquoted)."""
        try:
            parsed = parse_literal(text)
        except LiteralSyntaxError as exc:
            raise ValidationException("Invalid JSON. Paste a firebaseConfig object.") from exc
        if not isinstance(parsed, dict):
            raise ValidationException("Input must be a JSON object")
        return cls.from_mapping(parsed)

    def to_config(self) -> dict[str, str]:
        """Return the descriptor as a ``firebaseConfig`` dict (bucket only when set)."""
        config = {
            "apiKey": self.api_key,
            "authDomain": self.auth_domain,
            "databaseURL": self.database_url,
            "projectId": self.project_id,
        }
        if self.bucket:
            config["storageBucket"] = self.bucket
        return config

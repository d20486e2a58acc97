"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Connection credentials for the target project are
NOT configuration: they are entered at runtime and held in memory by
the session only.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Console settings loaded from environment and .env.

    Every field has a default. Endpoint bases can be overridden to point
    the console at the Firebase emulator suite instead of production.
    """

    # App
    app_name: str = "fireprobe"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS
    allowed_origins: str = "http://localhost:8000,http://127.0.0.1:8000"

    # Outbound HTTP (one shared client per backend session)
    http_timeout_seconds: float = 30.0

    # Firebase REST endpoints
    identity_toolkit_url: str = "https://identitytoolkit.googleapis.com"
    secure_token_url: str = "https://securetoken.googleapis.com"
    firestore_url: str = "https://firestore.googleapis.com"
    storage_url: str = "https://firebasestorage.googleapis.com"
    # Callable/HTTP functions: {region} and {project_id} are substituted.
    functions_url_template: str = "https://{region}-{project_id}.cloudfunctions.net"
    functions_region: str = "us-central1"

    # Blob uploads: bytes per progress tick
    upload_chunk_size: int = 256 * 1024
    max_upload_size: int = 100 * 1024 * 1024  # 100MB

    # Multi-factor challenge widget
    mfa_anchor_id: str = "mfa-recaptcha"
    # Token solved in the browser for the invisible challenge; empty when the
    # target project does not enforce it (emulator, test numbers).
    recaptcha_token: SecretStr | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FIREPROBE_",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_limits(self) -> "Settings":
        """Validate numeric limits and the functions URL template."""
        if self.upload_chunk_size <= 0:
            raise ValueError("upload_chunk_size must be a positive number of bytes")
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        if "{project_id}" not in self.functions_url_template:
            raise ValueError(
                "functions_url_template must contain '{project_id}', "
                f"got: {self.functions_url_template!r}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()

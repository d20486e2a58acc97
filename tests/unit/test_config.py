"""Settings defaults, environment overrides and limit validation."""

import pytest
from pydantic import ValidationError

from fireprobe.core.config import Settings


def test_defaults_point_at_production_endpoints() -> None:
    settings = Settings()
    assert settings.firestore_url == "https://firestore.googleapis.com"
    assert settings.mfa_anchor_id == "mfa-recaptcha"
    assert settings.recaptcha_token is None


def test_env_prefix_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIREPROBE_FIRESTORE_URL", "http://127.0.0.1:8080")
    monkeypatch.setenv("FIREPROBE_RECAPTCHA_TOKEN", "solved")
    settings = Settings()
    assert settings.firestore_url == "http://127.0.0.1:8080"
    assert settings.recaptcha_token.get_secret_value() == "solved"


def test_functions_template_needs_project_id() -> None:
    with pytest.raises(ValidationError, match="project_id"):
        Settings(functions_url_template="https://{region}.example.com")


def test_chunk_size_must_be_positive() -> None:
    with pytest.raises(ValidationError, match="upload_chunk_size"):
        Settings(upload_chunk_size=0)

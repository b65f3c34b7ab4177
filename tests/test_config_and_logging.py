"""Configuration loading and structured logging helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from vesture_app.config import AppConfig
from vesture_app.logging_config import JsonFormatter, correlation_context, redact_for_log


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for key in (
        "JWT_SECRET",
        "PORT",
        "APP_ENV",
        "APP_CONFIG_PATH",
        "VESTURE_CONFIG_DIR",
        "CORS_ORIGINS",
        "DATABASE_PATH",
        "RECOGNITION_API_KEY",
        "RECOGNITION_MODEL_URL",
    ):
        monkeypatch.delenv(key, raising=False)


def test_missing_secret_fails_fast() -> None:
    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        AppConfig.from_env()


def test_environment_variables_override_yaml(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_file = tmp_path / "staging.yaml"
    config_file.write_text(
        "# staging\njwt_secret: from-yaml\nport: 9000\ncors_origins: \"https://a.example/, https://b.example\"\n"
    )
    monkeypatch.setenv("APP_CONFIG_PATH", str(config_file))
    monkeypatch.setenv("PORT", "9100")

    config = AppConfig.from_env()

    assert config.jwt_secret == "from-yaml"
    assert config.port == 9100
    assert config.cors_origins == ["https://a.example", "https://b.example"]
    assert config.token_ttl_seconds == 3600


def test_redaction_scrubs_credentials_and_pii() -> None:
    scrubbed = redact_for_log(
        {"password": "secret", "note": "mail me at a@example.com", "nested": {"token": "t"}, "url": "https://x"}
    )
    assert scrubbed["password"] == "[redacted]"
    assert scrubbed["note"] == "mail me at [redacted-email]"
    assert scrubbed["nested"] == {"token": "[redacted]"}
    assert scrubbed["url"] == "[redacted-url]"


def test_json_formatter_includes_correlation_id() -> None:
    record = logging.LogRecord("vesture", logging.INFO, __file__, 1, "hello", None, None)
    record.event = "hello"
    record.email = "a@example.com"
    with correlation_context("abc"):
        payload = json.loads(JsonFormatter().format(record))
    assert payload["correlation_id"] == "abc"
    assert payload["event"] == "hello"
    assert payload["email"] == "[redacted]"


def test_app_env_selects_environment_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_dir = tmp_path / "envs"
    config_dir.mkdir()
    (config_dir / "prod.yaml").write_text(
        "JWT_SECRET: 'prod-secret'\n"
        "database_path: /var/lib/vesture.db  # mounted volume\n"
        "recognition_api_key:\n"
        "recognition_model_url: https://vision.example/v2/outputs\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("VESTURE_CONFIG_DIR", str(config_dir))

    config = AppConfig.from_env()

    assert config.environment == "prod"
    assert config.jwt_secret == "prod-secret"
    assert config.database_path == "/var/lib/vesture.db"
    assert config.recognition_api_key is None
    assert config.recognition_model_url == "https://vision.example/v2/outputs"

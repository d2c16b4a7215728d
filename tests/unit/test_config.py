"""Unit tests for configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from gh_reviewer.config import BotSettings


def _settings(tmp_path: Path, **values: object) -> BotSettings:
    return BotSettings(_env_file=tmp_path / "missing.env", **values)


def test_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test default values when nothing is configured."""
    for name in ("GITHUB_APP_ID", "GITHUB_PRIVATE_KEY_PATH", "GITHUB_WEBHOOK_SECRET", "PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = _settings(tmp_path)

    assert settings.github_app_name == "ai-code-reviewer"
    assert settings.github_base_url == "https://api.github.com"
    assert settings.llm_provider == "anthropic"
    assert settings.review_max_supervisor_calls == 40
    assert settings.assistant_max_supervisor_calls == 25
    assert settings.port == 3000
    assert settings.allow_unsigned_webhooks is False
    assert settings.missing_github_app_settings() == [
        "GITHUB_APP_ID",
        "GITHUB_PRIVATE_KEY_PATH",
        "GITHUB_WEBHOOK_SECRET",
    ]


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test values read from the environment."""
    monkeypatch.setenv("GITHUB_APP_ID", "999")
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("REVIEW_MAX_SUPERVISOR_CALLS", "12")
    monkeypatch.setenv("ALLOW_UNSIGNED_WEBHOOKS", "true")

    settings = _settings(tmp_path)

    assert settings.github_app_id == "999"
    assert settings.llm_provider == "openai"
    assert settings.review_max_supervisor_calls == 12
    assert settings.allow_unsigned_webhooks is True


def test_env_file_is_read(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_APP_NAME", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("GITHUB_APP_NAME=review-helper\nPORT=8080\n", encoding="utf-8")

    settings = BotSettings(_env_file=env_file)

    assert settings.github_app_name == "review-helper"
    assert settings.port == 8080


def test_rejects_invalid_values(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        _settings(tmp_path, LLM_PROVIDER="llama")
    with pytest.raises(ValidationError):
        _settings(tmp_path, REVIEW_MAX_SUPERVISOR_CALLS=0)


def test_configured_settings_read_private_key(bot_settings: BotSettings) -> None:
    assert bot_settings.missing_github_app_settings() == []
    assert "BEGIN RSA PRIVATE KEY" in bot_settings.read_private_key()


def test_read_private_key_requires_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_PRIVATE_KEY_PATH", raising=False)

    with pytest.raises(ValueError, match="GITHUB_PRIVATE_KEY_PATH"):
        _settings(tmp_path).read_private_key()

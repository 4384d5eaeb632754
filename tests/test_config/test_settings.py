"""Testes das settings (env → dataclasses congeladas) e da validação de boot."""

from __future__ import annotations

import pytest

from app.bootstrap import collect_settings_errors, validate_runtime_settings
from config.settings import (
    DEFAULT_AUTO_REPLY_TEXT,
    DedupeSettings,
    InstagramSettings,
    TelegramSettings,
    get_base_settings,
    get_dedupe_settings,
    get_instagram_settings,
    get_telegram_settings,
)

RELAY_ENV_VARS = (
    "ENVIRONMENT",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "CHAT_ID",
    "TELEGRAM_ENABLE_TOPICS",
    "INSTAGRAM_VERIFY_TOKEN",
    "META_APP_SECRET",
    "INSTAGRAM_ACCESS_TOKEN",
    "INSTAGRAM_IG_USER_ID",
    "INSTAGRAM_AUTO_REPLY_TEXT",
    "DEDUPE_BACKEND",
    "REDIS_URL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _configure_all(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "1:abc")
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "-100")
    monkeypatch.setenv("INSTAGRAM_VERIFY_TOKEN", "verify")
    monkeypatch.setenv("META_APP_SECRET", "secret")
    monkeypatch.setenv("INSTAGRAM_ACCESS_TOKEN", "token")


def test_defaults_without_env() -> None:
    telegram = get_telegram_settings()
    instagram = get_instagram_settings()

    assert get_base_settings().is_development is True
    assert telegram.is_configured is False
    assert telegram.enable_topics is True
    assert instagram.auto_reply_text == DEFAULT_AUTO_REPLY_TEXT
    assert instagram.ig_user_id == ""
    assert get_dedupe_settings().backend == "memory"


def test_chat_id_legacy_alias(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHAT_ID", "-100999")
    assert get_telegram_settings().chat_id == "-100999"


def test_topics_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TELEGRAM_ENABLE_TOPICS", "false")
    assert get_telegram_settings().enable_topics is False


def test_instagram_endpoints() -> None:
    settings = InstagramSettings(api_version="v21.0")
    assert settings.facebook_endpoint == "https://graph.facebook.com/v21.0"
    assert settings.messages_endpoint == "https://graph.instagram.com/v21.0/me/messages"


def test_validation_messages() -> None:
    assert "TELEGRAM_BOT_TOKEN não configurado" in TelegramSettings().validate()
    assert "TELEGRAM_MAX_ATTEMPTS deve ser >= 1" in TelegramSettings(
        bot_token="t", chat_id="c", max_attempts=0
    ).validate()
    assert "META_APP_SECRET não configurado" in InstagramSettings().validate()


def test_redis_backend_requires_url() -> None:
    errors = DedupeSettings(backend="redis").validate(get_base_settings())
    assert "DEDUPE_BACKEND=redis requer REDIS_URL configurado" in errors


def test_development_only_warns() -> None:
    assert collect_settings_errors()
    validate_runtime_settings()


def test_production_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")

    with pytest.raises(RuntimeError, match="Configuração inválida para production"):
        validate_runtime_settings()


def test_production_with_full_config_boots(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    _configure_all(monkeypatch)

    assert collect_settings_errors() == []
    validate_runtime_settings()

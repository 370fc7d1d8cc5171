"""Testes das settings carregadas do ambiente."""

from __future__ import annotations

import pytest

from config.settings import (
    BaseSettings,
    RelaySettings,
    StoreSettings,
    TelegramSettings,
    get_base_settings,
    get_relay_settings,
    get_store_settings,
    get_telegram_settings,
    parse_allowed_origins,
    parse_routing_json,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    for getter in (
        get_base_settings,
        get_relay_settings,
        get_store_settings,
        get_telegram_settings,
    ):
        getter.cache_clear()
    yield
    for getter in (
        get_base_settings,
        get_relay_settings,
        get_store_settings,
        get_telegram_settings,
    ):
        getter.cache_clear()


class TestParseRoutingJson:
    """Testes de parse_routing_json."""

    def test_valid_table_lowercases_hosts(self) -> None:
        table = parse_routing_json(
            '{"Shop.Example.com": {"chat_id": -100123, "bot_token": "1:a"}, "b.io": {"chat_id": "-5"}}'
        )
        assert table == {
            "shop.example.com": {"chat_id": "-100123", "bot_token": "1:a"},
            "b.io": {"chat_id": "-5"},
        }

    @pytest.mark.parametrize("raw", ["", "   ", "{broken", "[]", '"text"'])
    def test_invalid_or_empty_gives_empty_table(self, raw: str) -> None:
        assert parse_routing_json(raw) == {}

    def test_non_object_rules_are_dropped(self) -> None:
        assert parse_routing_json('{"a.io": "chat", "b.io": {"chat_id": "1"}}') == {
            "b.io": {"chat_id": "1"}
        }


def test_parse_allowed_origins() -> None:
    assert parse_allowed_origins(" A.io, ,*.B.io ") == ("a.io", "*.b.io")
    assert parse_allowed_origins(None) == ()


def test_relay_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "example.com")
    monkeypatch.setenv("RATE_LIMIT_PER_MIN", "abc")
    monkeypatch.setenv("ENABLE_TURNSTILE", "true")
    monkeypatch.setenv("TURNSTILE_SECRET", "s")
    monkeypatch.setenv("ADMIN_KEY", "k")

    settings = get_relay_settings()

    assert settings.allowed_origins == ("example.com",)
    assert settings.rate_limit_per_min == 30
    assert settings.enable_turnstile is True
    assert settings.admin_key == "k"
    assert settings.validate() == []


def test_relay_settings_turnstile_requires_secret() -> None:
    errors = RelaySettings(enable_turnstile=True).validate()
    assert any("TURNSTILE_SECRET" in error for error in errors)


def test_telegram_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "1:abc")
    monkeypatch.setenv("TG_DEFAULT_CHAT_ID", "-100")
    monkeypatch.setenv("ROUTING_JSON", '{"a.io": {"chat_id": "-200"}}')

    settings = get_telegram_settings()

    assert settings.routing_table == {"a.io": {"chat_id": "-200"}}
    assert settings.validate() == []


def test_telegram_settings_missing_credentials() -> None:
    errors = TelegramSettings().validate()
    assert any("BOT_TOKEN" in error for error in errors)
    assert any("TG_DEFAULT_CHAT_ID" in error for error in errors)


def test_telegram_settings_routes_can_supply_credentials() -> None:
    settings = TelegramSettings(routing_json='{"a.io": {"chat_id": "-1", "bot_token": "1:a"}}')
    assert settings.validate() == []


def test_invalid_routing_json_reported() -> None:
    settings = TelegramSettings(bot_token="1:a", default_chat_id="-1", routing_json="{broken")
    assert any("ROUTING_JSON" in error for error in settings.validate())


def test_store_settings_memory_forbidden_outside_development() -> None:
    production = BaseSettings(environment="production", redis_url="redis://x")
    assert StoreSettings(backend="memory").validate(production)
    assert StoreSettings(backend="redis").validate(production) == []
    assert StoreSettings(backend="redis").validate(BaseSettings()) != []


def test_store_settings_backend_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KV_BACKEND", "Redis")
    assert get_store_settings().backend == "redis"


def test_base_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "prod")
    monkeypatch.setenv("LOG_LEVEL", "warning")
    monkeypatch.setenv("PORT", "9000")

    settings = get_base_settings()

    assert settings.environment == "production"
    assert settings.log_level == "WARNING"
    assert settings.port == 9000
    assert settings.validate() == []


def test_base_settings_invalid_values_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "loud")
    monkeypatch.setenv("PORT", "http")

    errors = get_base_settings().validate()

    assert any("LOG_LEVEL" in error for error in errors)
    assert any("PORT" in error for error in errors)


def test_blank_credentials_are_dropped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "   ")
    monkeypatch.setenv("TG_DEFAULT_CHAT_ID", " -100 ")
    monkeypatch.setenv("ROUTING_JSON", '{"a.io": {"bot_token": "  ", "chat_id": " -200 "}}')

    settings = get_telegram_settings()

    assert settings.bot_token == ""
    assert settings.default_chat_id == "-100"
    assert settings.routing_table == {"a.io": {"chat_id": "-200"}}
    assert any("BOT_TOKEN" in error for error in settings.validate())

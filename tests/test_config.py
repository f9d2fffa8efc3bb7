"""Tests for configuration helpers."""

from support_console.config import (
    DEVELOPMENT_SOCKET_URL,
    PRODUCTION_SOCKET_URL,
    ConsoleConfig,
    resolve_image_url,
    resolve_socket_url,
)


def test_socket_url_override_wins():
    assert resolve_socket_url("http://chat.example:9000", "production") == "http://chat.example:9000"


def test_socket_url_per_environment():
    assert resolve_socket_url(None, "production") == PRODUCTION_SOCKET_URL
    assert resolve_socket_url(None, "development") == DEVELOPMENT_SOCKET_URL
    assert resolve_socket_url(None, None) == DEVELOPMENT_SOCKET_URL


def test_resolve_image_url():
    assert resolve_image_url("https://cdn.test/a.png", "http://app.test") == "https://cdn.test/a.png"
    assert resolve_image_url("/uploads/chat/a.png", "http://app.test/") == "http://app.test/uploads/chat/a.png"
    assert resolve_image_url("data:image/png;base64,xx", "http://app.test") == "data:image/png;base64,xx"


def test_from_env(monkeypatch):
    monkeypatch.delenv("SOCKET_URL", raising=False)
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("API_BASE_URL", "http://admin.test")
    monkeypatch.setenv("CONVERSATION_REFRESH_INTERVAL", "2.5")
    monkeypatch.setenv("ADMIN_SENDER_ID", "3")

    config = ConsoleConfig.from_env()

    assert config.socket_url == PRODUCTION_SOCKET_URL
    assert config.api_base_url == "http://admin.test"
    assert config.refresh_interval == 2.5
    assert config.admin_sender_id == 3
    assert config.message_history_limit == 50

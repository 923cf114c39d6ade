"""Tests for configuration loading and validation."""

import pytest
from pydantic import ValidationError

from oneshot_rpc.adapters.driven.config.settings import Settings, load_settings

__all__ = []

_ENV = (
    "RPC_HOST",
    "RPC_API",
    "RPC_METHOD",
    "RPC_TIMEOUT_MS",
    "RPC_PARAMS",
    "RPC_HEADERS",
    "RPC_MULTIPART",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    """Start every test without RPC_* variables."""
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults() -> None:
    """Optional fields should default to a GET with a 60s timeout."""
    settings = Settings(host="http://api.test/", api="/v1/user")

    assert settings.host == "http://api.test"
    assert settings.method == "GET"
    assert settings.timeout_ms == 60_000
    assert settings.params == {}
    assert settings.headers == {}
    assert settings.multipart is False


def test_settings_normalizes_method() -> None:
    """Method should be case-insensitive."""
    assert Settings(host="http://api.test", api="/x", method="post").method == "POST"


def test_settings_rejects_unknown_method() -> None:
    """Only GET and POST are accepted."""
    with pytest.raises(ValidationError, match="Unsupported method"):
        Settings(host="http://api.test", api="/x", method="DELETE")


def test_settings_rejects_non_http_host() -> None:
    """Host must be an http(s) URL."""
    with pytest.raises(ValidationError, match="Invalid host"):
        Settings(host="ftp://api.test", api="/x")


def test_settings_rejects_non_positive_timeout() -> None:
    """Timeout must be positive."""
    with pytest.raises(ValidationError):
        Settings(host="http://api.test", api="/x", timeout_ms=0)


def test_load_settings_success(monkeypatch) -> None:
    """load_settings should read every RPC_* variable."""
    monkeypatch.setenv("RPC_HOST", "https://api.test")
    monkeypatch.setenv("RPC_API", "/v1/login")
    monkeypatch.setenv("RPC_METHOD", "post")
    monkeypatch.setenv("RPC_TIMEOUT_MS", "1500")
    monkeypatch.setenv("RPC_PARAMS", '{"user": "bob"}')
    monkeypatch.setenv("RPC_HEADERS", '{"X-Token": "t"}')
    monkeypatch.setenv("RPC_MULTIPART", "yes")

    settings = load_settings()

    assert isinstance(settings, Settings)
    assert settings.host == "https://api.test"
    assert settings.api == "/v1/login"
    assert settings.method == "POST"
    assert settings.timeout_ms == 1500
    assert settings.params == {"user": "bob"}
    assert settings.headers == {"X-Token": "t"}
    assert settings.multipart is True


def test_load_settings_missing_host(monkeypatch) -> None:
    """Missing required variables should raise RuntimeError."""
    monkeypatch.setenv("RPC_API", "/x")

    with pytest.raises(RuntimeError, match="RPC_HOST"):
        load_settings()


@pytest.mark.parametrize("raw", ["-5", "0", "soon"])
def test_load_settings_invalid_timeout(monkeypatch, raw: str) -> None:
    """Timeout must parse as a positive integer."""
    monkeypatch.setenv("RPC_HOST", "http://api.test")
    monkeypatch.setenv("RPC_API", "/x")
    monkeypatch.setenv("RPC_TIMEOUT_MS", raw)

    with pytest.raises(RuntimeError, match="RPC_TIMEOUT_MS must be a positive integer"):
        load_settings()


@pytest.mark.parametrize("raw", ["not json", '["a"]', '{"n": 1}'])
def test_load_settings_invalid_params(monkeypatch, raw: str) -> None:
    """RPC_PARAMS must be a JSON object of strings."""
    monkeypatch.setenv("RPC_HOST", "http://api.test")
    monkeypatch.setenv("RPC_API", "/x")
    monkeypatch.setenv("RPC_PARAMS", raw)

    with pytest.raises(ValueError, match="RPC_PARAMS must be a JSON object of strings"):
        load_settings()

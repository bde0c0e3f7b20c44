"""Tests for the settings layers of stackfabric and stackloom."""

import pytest

from stackfabric.config import BaseApiSettings, get_base_settings
from stackloom.config import ApiSettings, get_settings
from stackloom.constants import DEFAULT_USER_AGENT


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Fixture to make every test load settings from a fresh environment."""
    get_settings.cache_clear()
    get_base_settings.cache_clear()
    yield
    get_settings.cache_clear()
    get_base_settings.cache_clear()


def test_base_settings_defaults():
    """Test the generic client defaults."""
    settings = BaseApiSettings()
    assert settings.request_timeout == 30.0
    assert settings.max_retries == 3
    assert settings.backoff_factor == 0.5
    assert settings.enable_rate_limiting is True
    assert settings.verify_ssl is True
    assert settings.pre_request_hooks == []
    assert settings.post_request_hooks == []


def test_api_settings_defaults(monkeypatch):
    """Test the stackloom defaults when nothing is configured."""
    for name in ("AUTH_TOKEN", "AUTH_URL", "NETWORK_ENDPOINT", "DATABASE_ENDPOINT"):
        monkeypatch.delenv(f"STACKLOOM_{name}", raising=False)

    settings = ApiSettings()

    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.user_domain_name == "Default"
    assert settings.auth_token is None
    assert settings.network_endpoint is None


def test_api_settings_read_prefixed_environment(monkeypatch):
    """Test that STACKLOOM_* environment variables are picked up."""
    monkeypatch.setenv("STACKLOOM_AUTH_URL", "https://keystone.example.com/v3")
    monkeypatch.setenv("STACKLOOM_USERNAME", "alice")
    monkeypatch.setenv("STACKLOOM_NETWORK_ENDPOINT", "https://neutron.example.com/v2.0")
    monkeypatch.setenv("STACKLOOM_MAX_RETRIES", "5")

    settings = ApiSettings()

    assert settings.auth_url == "https://keystone.example.com/v3"
    assert settings.username == "alice"
    assert settings.network_endpoint == "https://neutron.example.com/v2.0"
    assert settings.max_retries == 5


def test_unprefixed_environment_is_ignored(monkeypatch):
    """Test that variables without the prefix do not leak into ApiSettings."""
    monkeypatch.delenv("STACKLOOM_USERNAME", raising=False)
    monkeypatch.setenv("USERNAME", "someone-else")

    assert ApiSettings().username is None


def test_get_settings_is_cached(monkeypatch):
    """Test that get_settings returns the same instance until the cache is cleared."""
    monkeypatch.setenv("STACKLOOM_AUTH_TOKEN", "first")
    first = get_settings()
    monkeypatch.setenv("STACKLOOM_AUTH_TOKEN", "second")

    assert get_settings() is first
    assert get_settings().auth_token == "first"

    get_settings.cache_clear()
    assert get_settings().auth_token == "second"

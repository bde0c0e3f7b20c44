"""Tests for the top-level StackloomClient."""

from unittest.mock import MagicMock

import pytest

from stackfabric.auth import KeystonePasswordAuth, NoAuth, TokenAuth
from stackfabric.exceptions import ConfigurationError
from stackloom import StackloomClient, VipListOpts, extract_vips
from stackloom.config import ApiSettings
from stackloom.resources import DatabasesClient, VipsClient

NETWORK_ENDPOINT = "https://neutron.example.com:9696/v2.0"
DATABASE_ENDPOINT = "https://trove.example.com:8779/v1.0/project-1"


def make_settings(**values) -> ApiSettings:
    defaults = {
        "auth_token": None,
        "auth_url": None,
        "username": None,
        "password": None,
        "project_id": None,
        "database_endpoint": None,
        "network_endpoint": None,
        "max_retries": 0,
        "backoff_factor": 0,
    }
    defaults.update(values)
    return ApiSettings(**defaults)


def test_no_credentials_uses_no_auth():
    """Test that a client without credentials sends unauthenticated requests."""
    with StackloomClient(make_settings()) as client:
        assert isinstance(client._auth_strategy, NoAuth)


def test_token_argument_takes_precedence_over_settings():
    """Test that the auth_token argument overrides settings.auth_token."""
    with StackloomClient(
        make_settings(auth_token="from-settings"), auth_token="from-arg"
    ) as client:
        assert isinstance(client._auth_strategy, TokenAuth)
        assert client._auth_strategy._token == "from-arg"


def test_keystone_password_credentials_are_preferred():
    """Test that a complete Keystone configuration selects password auth."""
    settings = make_settings(
        auth_token="static",
        auth_url="https://keystone.example.com/v3",
        username="alice",
        password="secret",
        project_id="p1",
    )

    with StackloomClient(settings) as client:
        assert isinstance(client._auth_strategy, KeystonePasswordAuth)
        assert client._auth_strategy._project_id == "p1"


def test_explicit_auth_strategy_is_used():
    auth = MagicMock()

    client = StackloomClient(make_settings(auth_token="ignored"), auth_strategy=auth)

    assert client._auth_strategy is auth


def test_resource_clients_require_endpoints():
    """Test that accessing a service without an endpoint raises ConfigurationError."""
    with StackloomClient(make_settings()) as client:
        with pytest.raises(ConfigurationError, match="STACKLOOM_NETWORK_ENDPOINT"):
            client.vips
        with pytest.raises(ConfigurationError, match="STACKLOOM_DATABASE_ENDPOINT"):
            client.databases


def test_endpoint_arguments_override_settings():
    """Test that endpoint arguments take precedence over settings."""
    with StackloomClient(
        make_settings(network_endpoint="https://ignored.example.com"),
        network_endpoint=NETWORK_ENDPOINT,
        database_endpoint=DATABASE_ENDPOINT,
    ) as client:
        assert isinstance(client.vips, VipsClient)
        assert isinstance(client.databases, DatabasesClient)
        assert client._network_service.endpoint == NETWORK_ENDPOINT
        assert client._database_service.endpoint == DATABASE_ENDPOINT


def test_list_vips_end_to_end(httpx_mock):
    """Test listing VIPs across two linked pages through the top-level client."""
    httpx_mock.add_response(
        url=f"{NETWORK_ENDPOINT}/lb/vips?protocol=HTTP",
        json={
            "vips": [{"id": "v1", "name": "web"}],
            "vips_links": [
                {"rel": "next", "href": f"{NETWORK_ENDPOINT}/lb/vips?protocol=HTTP&marker=v1"}
            ],
        },
    )
    httpx_mock.add_response(
        url=f"{NETWORK_ENDPOINT}/lb/vips?protocol=HTTP&marker=v1",
        json={"vips": [{"id": "v2", "name": "api"}]},
    )

    with StackloomClient(
        make_settings(auth_token="token-1", network_endpoint=NETWORK_ENDPOINT)
    ) as client:
        vips = client.vips.list(VipListOpts(protocol="HTTP")).all_records(extract_vips)

    assert [vip.id for vip in vips] == ["v1", "v2"]
    assert all(
        request.headers["X-Auth-Token"] == "token-1"
        for request in httpx_mock.get_requests()
    )

"""Tests for the request option models in stackloom.endpoints."""

import pytest

from stackfabric.exceptions import ValidationError
from stackloom.constants import DOWN
from stackloom.endpoints import (
    DatabaseCreateOpts,
    VipCreateOpts,
    VipUpdateOpts,
    build_database_batch,
)
from stackloom.models import SessionPersistence


def full_vip_opts(**overrides) -> VipCreateOpts:
    values = {
        "name": "web",
        "subnet_id": "subnet-1",
        "protocol": "HTTP",
        "protocol_port": 80,
        "pool_id": "pool-1",
    }
    values.update(overrides)
    return VipCreateOpts(**values)


# --- Databases ---


def test_database_create_minimal():
    """Test that unset optional fields are omitted from the body."""
    assert DatabaseCreateOpts(name="sales").to_request() == {"name": "sales"}


def test_database_create_full():
    assert DatabaseCreateOpts(
        name="sales", character_set="utf8", collate="utf8_general_ci"
    ).to_request() == {
        "name": "sales",
        "character_set": "utf8",
        "collate": "utf8_general_ci",
    }


def test_database_create_requires_name():
    """Test that an empty name is rejected."""
    with pytest.raises(ValidationError, match="Name is required"):
        DatabaseCreateOpts().to_request()


def test_database_name_length_limit():
    """Test that names longer than 64 characters are rejected, 64 is allowed."""
    DatabaseCreateOpts(name="a" * 64).to_request()

    with pytest.raises(ValidationError, match="must not exceed 64"):
        DatabaseCreateOpts(name="a" * 65).to_request()


def test_database_batch_wraps_every_entry():
    body = build_database_batch(
        [DatabaseCreateOpts(name="one"), DatabaseCreateOpts(name="two")]
    )

    assert body == {"databases": [{"name": "one"}, {"name": "two"}]}


def test_database_batch_requires_an_entry():
    """Test that an empty batch is rejected."""
    with pytest.raises(ValidationError, match="At least one database is required"):
        build_database_batch([])


def test_database_batch_validates_each_entry():
    """Test that one invalid entry fails the whole batch."""
    with pytest.raises(ValidationError, match="Name is required"):
        build_database_batch([DatabaseCreateOpts(name="ok"), DatabaseCreateOpts()])


# --- VIP create ---


def test_vip_create_minimal_body():
    """Test the body built from the required fields only."""
    assert full_vip_opts().to_request() == {
        "vip": {
            "name": "web",
            "subnet_id": "subnet-1",
            "protocol": "HTTP",
            "protocol_port": 80,
            "pool_id": "pool-1",
        }
    }


def test_vip_create_optional_fields():
    """Test that optional fields, including False, are sent when set."""
    body = full_vip_opts(
        description="front door",
        address="10.0.0.5",
        connection_limit=100,
        admin_state_up=DOWN,
        persistence=SessionPersistence(type="HTTP_COOKIE"),
    ).to_request()["vip"]

    assert body["description"] == "front door"
    assert body["address"] == "10.0.0.5"
    assert body["connection_limit"] == 100
    assert body["admin_state_up"] is False
    assert body["session_persistence"] == {"type": "HTTP_COOKIE"}
    assert "tenant_id" not in body


@pytest.mark.parametrize(
    ("missing", "message"),
    [
        ({"name": ""}, "Name is required"),
        ({"subnet_id": ""}, "SubnetID is required"),
        ({"protocol": ""}, "Protocol is required"),
        ({"protocol_port": 0}, "Protocol port is required"),
        ({"pool_id": ""}, "PoolID is required"),
    ],
)
def test_vip_create_required_fields(missing, message):
    """Test each required field of a VIP create request."""
    with pytest.raises(ValidationError, match=message):
        full_vip_opts(**missing).to_request()


def test_vip_create_reports_first_missing_field():
    """Test that validation stops at the first missing field, in order."""
    with pytest.raises(ValidationError, match="Name is required"):
        VipCreateOpts().to_request()

    with pytest.raises(ValidationError, match="SubnetID is required"):
        VipCreateOpts(name="web", pool_id="pool-1").to_request()


# --- VIP update ---


def test_vip_update_sends_only_set_fields():
    body = VipUpdateOpts(name="renamed", connection_limit=-1).to_request()

    assert body == {"vip": {"name": "renamed", "connection_limit": -1}}


def test_vip_update_can_clear_description_and_disable():
    """Test that an empty description and admin_state_up=False are sent."""
    body = VipUpdateOpts(description="", admin_state_up=False).to_request()

    assert body == {"vip": {"description": "", "admin_state_up": False}}


def test_vip_update_with_persistence():
    body = VipUpdateOpts(
        persistence=SessionPersistence(type="APP_COOKIE", cookie_name="sid")
    ).to_request()

    assert body == {
        "vip": {"session_persistence": {"type": "APP_COOKIE", "cookie_name": "sid"}}
    }


def test_vip_update_without_fields_is_rejected():
    with pytest.raises(ValidationError, match="sets no fields"):
        VipUpdateOpts().to_request()

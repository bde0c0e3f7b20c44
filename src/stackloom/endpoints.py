"""Request option models for the stackloom resource clients.

List option models derive from ``stackfabric.models.QueryOptions``: each
field's alias is the fixed query parameter it serialises to, and unset fields
never reach the query string. Create/update option models build the JSON
request body and perform the required-field checks that must pass before any
request is sent.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from stackfabric.exceptions import ValidationError
from stackfabric.models import QueryOptions

from .constants import MAX_DATABASE_NAME_LENGTH, SortDir
from .models import SessionPersistence


def _drop_unset(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None and v != ""}


# --- Databases --- #


class DatabaseListOpts(QueryOptions):
    """Pagination options for listing the databases of an instance."""

    limit: int | None = Field(default=None, alias="limit")
    marker: str | None = Field(default=None, alias="marker")


class DatabaseCreateOpts(BaseModel):
    """Options for one database of a batch create request.

    Attributes:
        name: Required. At most 64 characters.
        character_set: Optional character set, e.g. ``utf8``.
        collate: Optional collation, e.g. ``utf8_general_ci``.
    """

    name: str = ""
    character_set: str | None = None
    collate: str | None = None

    model_config = ConfigDict(extra="forbid")

    def to_request(self) -> dict[str, Any]:
        """Return this database's entry of the create request body.

        Raises:
            ValidationError: If the name is missing or too long.
        """
        if not self.name:
            raise ValidationError("Name is required")
        if len(self.name) > MAX_DATABASE_NAME_LENGTH:
            raise ValidationError(
                f"Name must not exceed {MAX_DATABASE_NAME_LENGTH} characters"
            )
        return _drop_unset(
            {
                "name": self.name,
                "character_set": self.character_set,
                "collate": self.collate,
            }
        )


def build_database_batch(opts: list[DatabaseCreateOpts]) -> dict[str, Any]:
    """Validate every entry and build ``{"databases": [...]}``.

    Raises:
        ValidationError: If the batch is empty or any entry is invalid.
    """
    if not opts:
        raise ValidationError("At least one database is required")
    return {"databases": [db.to_request() for db in opts]}


# --- Virtual IPs --- #


class VipListOpts(QueryOptions):
    """Filter, sort and pagination options for listing virtual IPs.

    Filtering is achieved by setting fields to the VIP attributes to match.
    ``sort_key`` sorts by a VIP attribute and ``sort_dir`` sets the direction.
    ``marker`` and ``limit`` control pagination.
    """

    id: str | None = Field(default=None, alias="id")
    name: str | None = Field(default=None, alias="name")
    admin_state_up: bool | None = Field(default=None, alias="admin_state_up")
    status: str | None = Field(default=None, alias="status")
    tenant_id: str | None = Field(default=None, alias="tenant_id")
    subnet_id: str | None = Field(default=None, alias="subnet_id")
    address: str | None = Field(default=None, alias="address")
    port_id: str | None = Field(default=None, alias="port_id")
    protocol: str | None = Field(default=None, alias="protocol")
    protocol_port: int | None = Field(default=None, alias="protocol_port")
    connection_limit: int | None = Field(default=None, alias="connection_limit")
    limit: int | None = Field(default=None, alias="limit")
    marker: str | None = Field(default=None, alias="marker")
    sort_key: str | None = Field(default=None, alias="sort_key")
    sort_dir: SortDir | None = Field(default=None, alias="sort_dir")


class VipCreateOpts(BaseModel):
    """Options for provisioning a virtual IP.

    Attributes:
        name: Required. Human-readable name; does not have to be unique.
        subnet_id: Required. Subnet on which to allocate the VIP address.
        protocol: Required. ``TCP``, ``HTTP`` or ``HTTPS``.
        protocol_port: Required. Port on which to listen for client traffic.
        pool_id: Required. Pool the VIP is associated with.
        tenant_id: Required for admins creating VIPs for other tenants.
        address: Optional fixed IP address.
        description: Optional human-readable description.
        persistence: Optional; omit to disable session persistence.
        connection_limit: Optional maximum number of connections.
        admin_state_up: Optional administrative state.
    """

    name: str = ""
    subnet_id: str = ""
    protocol: str = ""
    protocol_port: int = 0
    pool_id: str = ""
    tenant_id: str | None = None
    address: str | None = None
    description: str | None = None
    persistence: SessionPersistence | None = None
    connection_limit: int | None = None
    admin_state_up: bool | None = None

    model_config = ConfigDict(extra="forbid")

    def to_request(self) -> dict[str, Any]:
        """Return the ``{"vip": {...}}`` request body.

        Raises:
            ValidationError: If a required option is missing, checked in the
                order name, subnet_id, protocol, protocol_port, pool_id.
        """
        if not self.name:
            raise ValidationError("Name is required")
        if not self.subnet_id:
            raise ValidationError("SubnetID is required")
        if not self.protocol:
            raise ValidationError("Protocol is required")
        if not self.protocol_port:
            raise ValidationError("Protocol port is required")
        if not self.pool_id:
            raise ValidationError("PoolID is required")

        vip = {
            "name": self.name,
            "subnet_id": self.subnet_id,
            "protocol": self.protocol,
            "protocol_port": self.protocol_port,
            "pool_id": self.pool_id,
        }
        vip.update(
            _drop_unset(
                {
                    "description": self.description,
                    "tenant_id": self.tenant_id,
                    "address": self.address,
                    "connection_limit": self.connection_limit,
                    "admin_state_up": self.admin_state_up,
                }
            )
        )
        if self.persistence is not None:
            vip["session_persistence"] = self.persistence.model_dump(exclude_none=True)
        return {"vip": vip}


class VipUpdateOpts(BaseModel):
    """Options for updating a virtual IP. Only fields that are set are sent."""

    name: str | None = None
    pool_id: str | None = None
    description: str | None = None
    persistence: SessionPersistence | None = None
    connection_limit: int | None = None
    admin_state_up: bool | None = None

    model_config = ConfigDict(extra="forbid")

    def to_request(self) -> dict[str, Any]:
        """Return the ``{"vip": {...}}`` request body.

        Raises:
            ValidationError: If no field is set.
        """
        vip: dict[str, Any] = {
            k: v
            for k, v in {
                "name": self.name,
                "pool_id": self.pool_id,
                "description": self.description,
                "connection_limit": self.connection_limit,
                "admin_state_up": self.admin_state_up,
            }.items()
            if v is not None
        }
        if self.persistence is not None:
            vip["session_persistence"] = self.persistence.model_dump(exclude_none=True)
        if not vip:
            raise ValidationError("VipUpdateOpts sets no fields to update")
        return {"vip": vip}

# stackloom/models/vip.py
"""Models for load balancer virtual IPs (Neutron LBaaS v1).

A virtual IP is the address a load balancer pool listens on. VIP listings
are paginated by link: each page carries a ``vips_links`` array whose
``next`` entry addresses the following page.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict
from stackfabric.exceptions import DecodeError
from stackfabric.pagination import LinkedPageBase, Page, extract_records

from .base import BaseEntity


class SessionPersistence(BaseModel):
    """Session persistence configuration of a VIP.

    Attributes:
        type: One of ``SOURCE_IP``, ``HTTP_COOKIE`` or ``APP_COOKIE``.
        cookie_name: Cookie name; only meaningful for ``APP_COOKIE``.
    """

    type: str
    cookie_name: str | None = None

    model_config = ConfigDict(extra="allow")


class VirtualIP(BaseEntity):
    """A load balancer virtual IP.

    Attributes:
        tenant_id: Owner of the VIP.
        name: Human-readable name; not necessarily unique.
        description: Human-readable description.
        subnet_id: Subnet the VIP address is allocated on.
        address: The IP address of the VIP.
        port_id: Neutron port backing the address.
        protocol: ``TCP``, ``HTTP`` or ``HTTPS``.
        protocol_port: Port the VIP listens on.
        pool_id: Pool the VIP is associated with.
        session_persistence: Session persistence settings, if any.
        connection_limit: Maximum concurrent connections; ``-1`` is unlimited.
        admin_state_up: Administrative state (``UP``/``DOWN``).
        status: Operational status, e.g. ``ACTIVE`` or ``PENDING_CREATE``.
    """

    tenant_id: str | None = None
    name: str | None = None
    description: str | None = None
    subnet_id: str | None = None
    address: str | None = None
    port_id: str | None = None
    protocol: str | None = None
    protocol_port: int | None = None
    pool_id: str | None = None
    session_persistence: SessionPersistence | None = None
    connection_limit: int | None = None
    admin_state_up: bool | None = None
    status: str | None = None


class VipPage(LinkedPageBase):
    """A page of ``GET /lb/vips``."""

    collection_key: ClassVar[str] = "vips"


def extract_vips(page: Page) -> list[VirtualIP]:
    """Decode the virtual IPs of a VipPage, in response order."""
    if not isinstance(page, VipPage):
        raise DecodeError(f"Expected a VipPage, got {type(page).__name__}")
    return extract_records(page, VirtualIP)

# stackloom/resources/vips_client.py
"""Client for load balancer virtual IPs (Neutron LBaaS v1, ``/lb/vips``).

This module provides the `VipsClient`. Listing returns a Pager over
``VipPage`` values, which follow the ``vips_links`` embedded by the service;
the single-item operations return or accept `VirtualIP` models.
"""

from typing import TYPE_CHECKING

from stackfabric.log_config import logger
from stackfabric.pagination import Pager
from stackfabric.resources import BaseResourceClient

from ..constants import VIPS_PATH
from ..endpoints import VipCreateOpts, VipListOpts, VipUpdateOpts
from ..models import VipPage, VirtualIP

if TYPE_CHECKING:
    from stackfabric.client import ServiceClient


class VipsClient(BaseResourceClient):
    """Client for the ``/lb/vips`` collection.

    Attributes:
        _collection_path (str): Path of the collection.
        _resource_key (str): Envelope key of a single VIP.
        _entity_model (type[VirtualIP]): Model of a single VIP.
        _page_class (type[VipPage]): Link-paginated page variant.
    """

    _collection_path = VIPS_PATH
    _resource_key = "vip"
    _entity_model = VirtualIP
    _page_class = VipPage

    def __init__(self, service_client: "ServiceClient"):
        super().__init__(service_client)
        logger.debug(f"VipsClient initialized for path: {self._collection_path}")

    def list(self, opts: VipListOpts | None = None) -> Pager:
        """Return a Pager over the virtual IPs matching ``opts``.

        Default policy settings return only the VIPs owned by the tenant
        submitting the request, unless an admin user submits it.
        """
        return self._list(opts)

    def create(self, opts: VipCreateOpts) -> VirtualIP:
        """Provision a new virtual IP.

        The pool must not already be associated with another VIP; the service
        answers such a request with 409, raised as ``ConflictError``.

        Raises:
            ValidationError: If a required option is missing. No request is sent.
            StackfabricError: If the request fails.
        """
        body = opts.to_request()
        response = self._create(body, ok_codes=(201,))
        return self._decode_entity(response)

    def get(self, vip_id: str) -> VirtualIP:
        """Retrieve a virtual IP by ID."""
        response = self._get(vip_id, ok_codes=(200,))
        return self._decode_entity(response)

    def update(self, vip_id: str, opts: VipUpdateOpts) -> VirtualIP:
        """Update the attributes set in ``opts`` and return the updated VIP."""
        body = opts.to_request()
        response = self._update(vip_id, body, ok_codes=(200, 202))
        return self._decode_entity(response)

    def delete(self, vip_id: str) -> None:
        """Delete a virtual IP."""
        self._delete(vip_id, ok_codes=(204,))

# stackloom/resources/databases_client.py
"""Client for the databases of a Trove database instance.

Databases are a sub-collection of an instance, so every operation takes the
instance ID. Listing returns a Pager over ``DatabasePage`` values;
decode each page with ``extract_databases``. Every operation rejects an
empty instance ID before any request is sent.
"""

from typing import TYPE_CHECKING

from stackfabric.exceptions import ValidationError
from stackfabric.log_config import logger
from stackfabric.pagination import Pager
from stackfabric.resources import BaseResourceClient

from ..constants import DATABASES_PATH
from ..endpoints import DatabaseCreateOpts, DatabaseListOpts, build_database_batch
from ..models import Database, DatabasePage

if TYPE_CHECKING:
    from stackfabric.client import ServiceClient


def _require_instance(instance_id: str) -> None:
    if not instance_id:
        raise ValidationError("InstanceID is required")


class DatabasesClient(BaseResourceClient):
    """Client for ``/instances/{instance_id}/databases``.

    Attributes:
        _collection_path (str): Path template of the collection.
        _entity_model (type[Database]): Model of a single database.
        _page_class (type[DatabasePage]): Link-paginated page variant.
    """

    _collection_path = DATABASES_PATH
    _entity_model = Database
    _page_class = DatabasePage

    def __init__(self, service_client: "ServiceClient"):
        super().__init__(service_client)
        logger.debug(f"DatabasesClient initialized for path: {self._collection_path}")

    def create(self, instance_id: str, opts: list[DatabaseCreateOpts]) -> None:
        """Create one or more databases on an instance.

        Every entry is validated before the request is sent. Trove accepts
        the request with 202 and creates the databases asynchronously.

        Raises:
            ValidationError: If the instance ID is empty, the batch is empty or
                an entry is invalid.
            StackfabricError: If the request fails.
        """
        _require_instance(instance_id)
        body = build_database_batch(opts)
        self._create(body, ok_codes=(202,), instance_id=instance_id)

    def list(self, instance_id: str, opts: DatabaseListOpts | None = None) -> Pager:
        """Return a Pager over the databases of an instance."""
        _require_instance(instance_id)
        return self._list(opts, instance_id=instance_id)

    def delete(self, instance_id: str, name: str) -> None:
        """Delete the database ``name`` from an instance."""
        _require_instance(instance_id)
        if not name:
            raise ValidationError("Name is required")
        self._delete(name, ok_codes=(202,), instance_id=instance_id)

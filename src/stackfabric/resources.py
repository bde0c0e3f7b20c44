"""Generic resource client base for the stackfabric framework.

``BaseResourceClient`` holds the service client and the per-resource wiring a
concrete client declares as class attributes: the collection path, the JSON
envelope key of a single resource, the record model and the page variant.
Its helpers implement the generic list/create/get/update/delete request
patterns; concrete clients add validation and their public signatures.
"""

from collections.abc import Collection
from typing import TYPE_CHECKING, Any, ClassVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .exceptions import DecodeError, StackfabricError, ValidationError
from .log_config import logger
from .models import QueryOptions, build_query
from .pagination import PageFactory, Pager

if TYPE_CHECKING:
    from .client import ServiceClient


class BaseResourceClient:
    """Base class for all resource clients in the stackfabric framework.

    Attributes:
        _service_client: The ServiceClient used for making HTTP requests.
        _collection_path: Path of the collection relative to the service
            endpoint. May contain ``str.format`` placeholders for parent
            resources, e.g. ``"instances/{instance_id}/databases"``.
        _resource_key: JSON envelope key of a single resource, e.g. ``"vip"``.
        _entity_model: Pydantic model of a single resource.
        _page_class: Page variant used when listing the collection.
    """

    _collection_path: ClassVar[str] = ""
    _resource_key: ClassVar[str | None] = None
    _entity_model: ClassVar[type[BaseModel] | None] = None
    _page_class: ClassVar[PageFactory | None] = None

    def __init__(self, service_client: "ServiceClient"):
        self._service_client = service_client
        logger.debug(f"{self.__class__.__name__} initialized")

    def _path_segments(self, **path_params: Any) -> list[str]:
        """Fill the collection path template, one segment at a time.

        Each parameter lands in a single segment, so ServiceClient.service_url
        percent-encodes any slash it contains.

        Raises:
            ValidationError: If a path parameter is empty.
        """
        if not self._collection_path:
            raise StackfabricError(
                f"{self.__class__.__name__} must define _collection_path"
            )
        for name, value in path_params.items():
            if value is None or str(value) == "":
                raise ValidationError(f"Path parameter '{name}' is required")
        return [
            segment.format(**path_params)
            for segment in self._collection_path.split("/")
        ]

    def _collection_url(self, **path_params: Any) -> str:
        return self._service_client.service_url(*self._path_segments(**path_params))

    def _resource_url(self, resource_id: str, **path_params: Any) -> str:
        if not resource_id:
            raise ValidationError(
                f"{self.__class__.__name__} requires a non-empty resource ID"
            )
        return self._service_client.service_url(
            *self._path_segments(**path_params), resource_id
        )

    def _list(self, opts: QueryOptions | None = None, **path_params: Any) -> Pager:
        """Build a Pager over the collection, filtered by ``opts``."""
        if self._page_class is None:
            raise StackfabricError(f"{self.__class__.__name__} must define _page_class")
        url = self._collection_url(**path_params) + build_query(opts)
        logger.debug(f"Listing {self._collection_path} from {url}")
        return Pager(self._service_client, url, self._page_class)

    def _decode_entity(self, response: httpx.Response) -> Any:
        """Unwrap ``{resource_key: {...}}`` and validate it against the entity model."""
        try:
            body = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Response body is not valid JSON: {e}", response=response
            ) from e
        if self._resource_key:
            if not isinstance(body, dict) or self._resource_key not in body:
                raise DecodeError(
                    f"Response body has no '{self._resource_key}' object",
                    response=response,
                )
            body = body[self._resource_key]
        if self._entity_model is None:
            return body
        try:
            return self._entity_model.model_validate(body)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Failed to decode {self._entity_model.__name__}: {e}",
                response=response,
            ) from e

    def _create(
        self,
        body: Any,
        *,
        ok_codes: Collection[int] = (201, 202),
        **path_params: Any,
    ) -> httpx.Response:
        url = self._collection_url(**path_params)
        logger.info(f"Creating resource in {url}")
        return self._service_client.post(url, json_data=body, ok_codes=ok_codes)

    def _get(
        self, resource_id: str, *, ok_codes: Collection[int] = (200,), **path_params: Any
    ) -> httpx.Response:
        url = self._resource_url(resource_id, **path_params)
        logger.info(f"Fetching resource {url}")
        return self._service_client.get(url, ok_codes=ok_codes)

    def _update(
        self,
        resource_id: str,
        body: Any,
        *,
        ok_codes: Collection[int] = (200, 202),
        **path_params: Any,
    ) -> httpx.Response:
        url = self._resource_url(resource_id, **path_params)
        logger.info(f"Updating resource {url}")
        return self._service_client.put(url, json_data=body, ok_codes=ok_codes)

    def _delete(
        self,
        resource_id: str,
        *,
        ok_codes: Collection[int] = (202, 204),
        **path_params: Any,
    ) -> httpx.Response:
        url = self._resource_url(resource_id, **path_params)
        logger.info(f"Deleting resource {url}")
        return self._service_client.delete(url, ok_codes=ok_codes)

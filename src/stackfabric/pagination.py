"""Transport-agnostic pagination engine for the stackfabric framework.

A resource collection is read page by page through a ``Pager``. The Pager
fetches one page, wraps the response into a resource-specific ``Page`` and
hands it to the caller before it even looks at the next page's address, so a
caller can stop the chain of requests at any point. Three page-linking
strategies share the same ``Page`` capability set:

- ``LinkedPageBase``: the next address is embedded in the body under a
  ``<collection>_links`` array (``rel == "next"``).
- ``MarkerPageBase``: the next address is the current URL with ``marker`` set
  to the identifier of the page's last record.
- ``SinglePageBase``: the collection is not paginated at all.

Resource modules subclass one of these, set ``collection_key``, and provide
an ``extract_*`` helper built on ``extract_records``.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from json import JSONDecodeError
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, TypeVar, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import DecodeError, LinkError
from .log_config import logger

if TYPE_CHECKING:
    from .client import ServiceClient

RecordType = TypeVar("RecordType", bound=BaseModel)


class PageResult(BaseModel):
    """Immutable snapshot of one HTTP response fetched by a Pager.

    Attributes:
        url: The absolute URL that was fetched. Relative links and marker
            URLs are resolved against it.
        status_code: HTTP status of the response.
        headers: Response headers.
        body: The decoded JSON body, or None for an empty body.
    """

    url: str
    status_code: int = 200
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "PageResult":
        """Build a PageResult from an httpx response.

        Raises:
            DecodeError: If the body is present but is not valid JSON.
        """
        body: Any = None
        if response.content:
            try:
                body = response.json()
            except (JSONDecodeError, UnicodeDecodeError) as e:
                raise DecodeError(
                    f"Response body is not valid JSON: {e}", response=response
                ) from e
        return cls(
            url=str(response.request.url),
            status_code=response.status_code,
            headers=dict(response.headers),
            body=body,
        )


@runtime_checkable
class Page(Protocol):
    """Capability set shared by every page variant."""

    def is_empty(self) -> bool:
        """Return True when the page holds no records.

        A page whose collection field is malformed reports False, so the
        visitor still runs and extraction reports the decode error.
        """
        ...

    def next_page_url(self) -> str:
        """Return the absolute URL of the next page, or "" on the last page.

        Raises:
            LinkError: If the page's link metadata is malformed.
        """
        ...


PageFactory = Callable[[PageResult], Page]
"""Wraps a fetched response into the page variant of one resource type."""

Visitor = Callable[[Page], bool]
"""Called once per non-empty page; returning False stops the iteration.

Any falsy return value stops, including the None of a visitor without a
``return True``; that case is logged as a warning.
"""


class PageBase(ABC):
    """Shared state of every concrete page: the fetched response.

    Attributes:
        collection_key: Body field holding the records. None means the body
            itself is the list of records.
    """

    collection_key: ClassVar[str | None] = None

    def __init__(self, result: PageResult):
        self._result = result

    @property
    def result(self) -> PageResult:
        return self._result

    @property
    def url(self) -> str:
        return self._result.url

    @property
    def body(self) -> Any:
        return self._result.body

    def _raw_collection(self) -> Any:
        if self.collection_key is None:
            return self.body
        if not isinstance(self.body, dict):
            return self.body
        return self.body.get(self.collection_key)

    def records(self) -> list[Any]:
        """Return the raw records of this page in body order.

        Raises:
            DecodeError: If the body or its collection field is not a list.
        """
        if self.collection_key is not None and not isinstance(self.body, dict | None):
            raise DecodeError(
                f"Expected a JSON object holding '{self.collection_key}', "
                f"got {type(self.body).__name__}"
            )
        raw = self._raw_collection()
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise DecodeError(
                f"Expected '{self.collection_key or 'body'}' to be a list, "
                f"got {type(raw).__name__}"
            )
        return raw

    def is_empty(self) -> bool:
        raw = self._raw_collection()
        if raw is None:
            return True
        if isinstance(raw, list):
            return len(raw) == 0
        return False

    @abstractmethod
    def next_page_url(self) -> str: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r})"


class SinglePageBase(PageBase):
    """Page of a collection that the service returns in one response."""

    def next_page_url(self) -> str:
        return ""


class LinkedPageBase(PageBase):
    """Page whose body embeds the address of the next page.

    The links array lives under ``links_key``, which defaults to
    ``"<collection_key>_links"``, e.g. ``vips_links``.
    """

    links_key: ClassVar[str | None] = None

    def _links_field(self) -> str:
        if self.links_key:
            return self.links_key
        if self.collection_key:
            return f"{self.collection_key}_links"
        return "links"

    def next_page_url(self) -> str:
        field = self._links_field()
        if not isinstance(self.body, dict):
            return ""
        links = self.body.get(field)
        if links is None:
            return ""
        if not isinstance(links, list):
            raise LinkError(
                f"Expected '{field}' to be a list, got {type(links).__name__}"
            )
        for link in links:
            if not isinstance(link, dict):
                raise LinkError(
                    f"Expected entries of '{field}' to be objects, got {type(link).__name__}"
                )
            if link.get("rel") != "next":
                continue
            href = link.get("href")
            if not isinstance(href, str):
                raise LinkError(
                    f"Expected the 'next' link href in '{field}' to be a string, "
                    f"got {type(href).__name__}"
                )
            if not href:
                return ""
            return str(httpx.URL(self.url).join(href))
        return ""


class MarkerPageBase(PageBase):
    """Page whose successor is addressed by the identifier of its last record.

    The next URL keeps every query parameter of the current URL and sets
    ``marker_param`` to the ``marker_field`` of the last record.
    """

    marker_field: ClassVar[str] = "id"
    marker_param: ClassVar[str] = "marker"

    def last_marker(self) -> str:
        """Return the marker of the last record on this page, or "" if empty."""
        records = self.records()
        if not records:
            return ""
        last = records[-1]
        marker = last.get(self.marker_field) if isinstance(last, dict) else None
        if isinstance(marker, bool) or not isinstance(marker, str | int):
            raise LinkError(
                f"Last record has no usable '{self.marker_field}' to continue from"
            )
        return str(marker)

    def next_page_url(self) -> str:
        marker = self.last_marker()
        if not marker:
            return ""
        next_url = str(httpx.URL(self.url).copy_set_param(self.marker_param, marker))
        if next_url == self.url:
            # The service ignored the marker and served this page again
            logger.warning(f"Marker {marker!r} does not advance past {self.url}")
            return ""
        return next_url


def extract_records(page: PageBase, model: type[RecordType]) -> list[RecordType]:
    """Decode every record of a page into ``model``, preserving body order.

    An absent or null collection is a valid empty page.

    Raises:
        DecodeError: If the collection is not a list or a record does not
            validate against ``model``.
    """
    try:
        return [model.model_validate(item) for item in page.records()]
    except PydanticValidationError as e:
        raise DecodeError(
            f"Failed to decode {model.__name__} records from {page.url}: {e}"
        ) from e


class Pager:
    """Cursor over the pages of one resource collection.

    A Pager is created per list call, bound to the first page's URL and to the
    page constructor of the resource type. Pages are fetched one at a time,
    synchronously; the next page is requested only after the caller finished
    with the current one.

    Attributes:
        _client: Transport used to fetch pages (``get(url) -> httpx.Response``).
        _initial_url: URL of the first page.
        _create_page: Wraps a PageResult into the resource's Page variant.
        _current_url: Address of the page currently being fetched or visited.
    """

    def __init__(
        self, client: "ServiceClient", initial_url: str, create_page: PageFactory
    ):
        self._client = client
        self._initial_url = initial_url
        self._create_page = create_page
        self._current_url = initial_url

    @property
    def initial_url(self) -> str:
        return self._initial_url

    @property
    def current_url(self) -> str:
        return self._current_url

    def _fetch_page(self, url: str) -> Page:
        logger.debug(f"Fetching page: {url}")
        response = self._client.get(url)
        return self._create_page(PageResult.from_response(response))

    def pages(self) -> Iterator[Page]:
        """Lazily yield the non-empty pages of the collection in order.

        The next page's address is computed only when the consumer asks for
        the next page, so a link error surfaces after the current page was
        handed out.

        Raises:
            StackfabricError: Transport, decode or link failures, unchanged.
        """
        self._current_url = self._initial_url
        page_number = 0
        while self._current_url:
            page = self._fetch_page(self._current_url)
            if page.is_empty():
                logger.debug(
                    f"Empty page at {self._current_url}; iteration finished "
                    f"after {page_number} page(s)."
                )
                return
            page_number += 1
            yield page
            self._current_url = page.next_page_url()
        logger.debug(f"No next page; iteration finished after {page_number} page(s).")

    def each_page(self, visitor: Visitor) -> None:
        """Call ``visitor`` once per page until it returns False or pages run out.

        Exceptions raised by the visitor, for example a ``DecodeError`` from
        an ``extract_*`` helper, propagate unchanged and stop the iteration.
        """
        logger.info(f"Iterating pages starting at {self._initial_url}")
        for page in self.pages():
            keep_going = visitor(page)
            if keep_going is None:
                logger.warning(
                    "Visitor returned None instead of a bool; stopping after "
                    f"{self._current_url}"
                )
            if not keep_going:
                logger.debug(f"Visitor stopped iteration at {self._current_url}")
                return

    def all_records(self, extract: Callable[[Page], list[RecordType]]) -> list[RecordType]:
        """Concatenate ``extract(page)`` over every page, in page order."""
        records: list[RecordType] = []

        def collect(page: Page) -> bool:
            records.extend(extract(page))
            return True

        self.each_page(collect)
        return records

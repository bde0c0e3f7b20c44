# stackloom/models/database.py
"""Models for databases hosted on a Trove database instance.

Trove database listings are paginated by link: each page may carry a
``databases_links`` array whose ``next`` entry addresses the following page.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict
from stackfabric.exceptions import DecodeError
from stackfabric.pagination import LinkedPageBase, Page, extract_records


class Database(BaseModel):
    """A database on a database instance.

    Attributes:
        name: Name of the database; unique within its instance.
        character_set: Character set, e.g. ``utf8``.
        collate: Collation, e.g. ``utf8_general_ci``.
    """

    name: str
    character_set: str | None = None
    collate: str | None = None

    model_config = ConfigDict(extra="allow")


class DatabasePage(LinkedPageBase):
    """A page of ``GET /instances/{id}/databases``."""

    collection_key: ClassVar[str] = "databases"


def extract_databases(page: Page) -> list[Database]:
    """Decode the databases of a DatabasePage, in response order."""
    if not isinstance(page, DatabasePage):
        raise DecodeError(f"Expected a DatabasePage, got {type(page).__name__}")
    return extract_records(page, Database)

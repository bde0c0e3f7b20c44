"""Base Pydantic models for stackloom entities.

Service responses routinely carry more attributes than the client models;
every entity therefore allows extra fields so newer API versions do not break
decoding.
"""

from pydantic import BaseModel, ConfigDict


class BaseEntity(BaseModel):
    """A base model for entities addressed by a UUID ``id`` (e.g. a VIP).

    Attributes:
        id: The unique identifier for the entity.
    """

    id: str

    model_config = ConfigDict(extra="allow")

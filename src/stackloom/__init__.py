"""stackloom: A Python client for OpenStack-style database and load balancer APIs."""

__version__ = "0.1.0"

from stackfabric.exceptions import (
    APIError,
    AuthError,
    ConfigurationError,
    ConflictError,
    DecodeError,
    LinkError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    StackfabricError,
    TimeoutError,
    ValidationError,
)
from stackfabric.pagination import Page, Pager

from .client import StackloomClient
from .constants import DOWN, UP, SortDir
from .endpoints import (
    DatabaseCreateOpts,
    DatabaseListOpts,
    VipCreateOpts,
    VipListOpts,
    VipUpdateOpts,
)
from .models import (
    Database,
    DatabasePage,
    SessionPersistence,
    VipPage,
    VirtualIP,
    extract_databases,
    extract_vips,
)

__all__ = [
    # Client
    "StackloomClient",
    # Pagination
    "Page",
    "Pager",
    # Exceptions
    "StackfabricError",
    "APIError",
    "AuthError",
    "ConfigurationError",
    "ConflictError",
    "DecodeError",
    "LinkError",
    "NetworkError",
    "NotFoundError",
    "RateLimitError",
    "TimeoutError",
    "ValidationError",
    # Options
    "DatabaseCreateOpts",
    "DatabaseListOpts",
    "VipCreateOpts",
    "VipListOpts",
    "VipUpdateOpts",
    "SortDir",
    "UP",
    "DOWN",
    # Models
    "Database",
    "DatabasePage",
    "SessionPersistence",
    "VipPage",
    "VirtualIP",
    "extract_databases",
    "extract_vips",
]

"""stackfabric: Generic framework for building OpenStack-style service clients.

This package provides the core infrastructure shared by concrete service
clients: a synchronous HTTP service client with retries and status mapping,
Keystone authentication strategies, settings, a single exception hierarchy,
query-string building, and the transport-agnostic pagination engine.
"""

__version__ = "0.1.0"

from . import auth, client, config, exceptions, log_config, models, pagination, resources, types

__all__ = [
    "__version__",
    "auth",
    "client",
    "config",
    "exceptions",
    "log_config",
    "models",
    "pagination",
    "resources",
    "types",
]

"""Exposes the resource client classes."""

from .databases_client import DatabasesClient
from .vips_client import VipsClient

__all__ = [
    "DatabasesClient",
    "VipsClient",
]

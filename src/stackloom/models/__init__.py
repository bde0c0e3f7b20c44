"""Exposes the record models, page variants and extraction helpers."""

from .base import BaseEntity
from .database import Database, DatabasePage, extract_databases
from .vip import SessionPersistence, VipPage, VirtualIP, extract_vips

__all__ = [
    "BaseEntity",
    "Database",
    "DatabasePage",
    "SessionPersistence",
    "VipPage",
    "VirtualIP",
    "extract_databases",
    "extract_vips",
]

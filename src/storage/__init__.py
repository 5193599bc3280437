# src/storage/__init__.py
"""
Слой хранения геоданных.
"""

from src.storage.base import Storage
from src.storage.exceptions import StorageConnectionError, StorageError
from src.storage.memory import InMemoryStorage
from src.storage.models import GeoData
from src.storage.postgres import PostgresStorage

__all__ = [
    "Storage",
    "StorageError",
    "StorageConnectionError",
    "InMemoryStorage",
    "GeoData",
    "PostgresStorage",
]

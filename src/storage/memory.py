# src/storage/memory.py
"""
Хранилище в памяти процесса. Используется в тестах вместо PostgreSQL.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from src.storage.base import Storage
from src.storage.exceptions import StorageConnectionError
from src.storage.models import GeoData


class InMemoryStorage(Storage):
    """
    Реализация Storage на списке строк.
    id выдаются последовательно, начиная с 1.
    """

    storage_type = "memory"

    def __init__(self) -> None:
        self._rows: list[dict[str, Any]] = []
        self._next_id = 1
        self._closed = False

    @property
    def rows(self) -> list[dict[str, Any]]:
        """Копия сохранённых строк (для проверок в тестах)."""
        return [dict(row) for row in self._rows]

    def _check_open(self) -> None:
        if self._closed:
            raise StorageConnectionError("Хранилище закрыто")

    async def save(
        self,
        hostname: str,
        data: GeoData,
        *,
        timeout: float | None = None,
    ) -> GeoData:
        self._check_open()
        self._check_hostname(hostname)

        data.id = self._next_id
        data.created_at = datetime.now(timezone.utc)
        self._next_id += 1

        self._rows.append({"hostname": hostname, **data.model_dump()})
        return data

    async def ping(self, *, timeout: float | None = None) -> None:
        self._check_open()

    async def close(self) -> None:
        self._closed = True

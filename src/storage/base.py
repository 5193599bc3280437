# src/storage/base.py
"""
Абстрактный интерфейс хранилища геоданных.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.storage.exceptions import StorageError
from src.storage.models import GeoData


class Storage(ABC):
    """
    Хранилище геоданных.
    HTTP слой работает только с этим интерфейсом и не знает о конкретном бэкенде.
    """

    # Короткое имя бэкенда для health check
    storage_type: str = "unknown"

    @abstractmethod
    async def save(
        self,
        hostname: str,
        data: GeoData,
        *,
        timeout: float | None = None,
    ) -> GeoData:
        """
        Сохраняет запись, привязанную к hostname.

        При успехе записывает в data назначенные хранилищем id и created_at
        и возвращает тот же объект.

        Args:
            hostname: Имя хоста, для которого выполнена геолокация
            data: Запись геоданных
            timeout: Дедлайн операции (секунды). Только он прерывает вызов бэкенда:
                отключение HTTP клиента запрос не отменяет

        Raises:
            StorageError: пустой hostname
        """

    @abstractmethod
    async def ping(self, *, timeout: float | None = None) -> None:
        """
        Проверяет доступность хранилища.

        Raises:
            StorageConnectionError: подключение не подтверждено в пределах дедлайна
        """

    @abstractmethod
    async def close(self) -> None:
        """Освобождает ресурсы. Вызывается один раз при остановке."""

    @staticmethod
    def _check_hostname(hostname: str) -> None:
        if not hostname:
            raise StorageError("hostname не может быть пустым")

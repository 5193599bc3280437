# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class HealthState(str, Enum):
    """Состояние сервиса для health check."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class StorageState(str, Enum):
    """Состояние подключения к хранилищу."""
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


# Имя корневого логгера приложения
ROOT_LOGGER_NAME = "geo_storage"

# Таблица с геоданными
GEODATA_TABLE = "geodata"

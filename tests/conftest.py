# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.config.loader import Settings
from src.services.geo_webhook.app import create_app
from src.storage.memory import InMemoryStorage


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "PROJECT_NAME": "xray-geo-storage-test",
        "VERSION": "1.0.0-test",
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "json",
        "LOG_TO_FILE": False,
        "DB_HOST": "db.internal",
        "DB_PORT": 5433,
        "DB_USER": "geo",
        "DB_PASSWORD": "secret",
        "DB_NAME": "geodata_test",
        "DB_SSLMODE": "require",
        "DB_MIN_POOL_SIZE": 1,
        "DB_MAX_POOL_SIZE": 3,
        "DB_COMMAND_TIMEOUT": 15,
        "SERVER_ADDRESS": "127.0.0.1",
        "SERVER_PORT": 9090,
        "SERVER_REQUEST_TIMEOUT": 2.5,
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


@pytest.fixture
def clean_db_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Убирает переменные окружения, переопределяющие настройки БД."""
    for key in ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "DB_SSLMODE", "CONFIG_PATH"):
        monkeypatch.delenv(key, raising=False)


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_connection() -> AsyncMock:
    """Мок соединения asyncpg."""
    conn = AsyncMock()
    conn.execute = AsyncMock(return_value="CREATE INDEX")
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetchval = AsyncMock(return_value=1)

    @asynccontextmanager
    async def transaction():
        yield

    conn.transaction = MagicMock(side_effect=transaction)
    return conn


@pytest.fixture
def mock_pool(mock_connection: AsyncMock) -> MagicMock:
    """Мок пула asyncpg, выдающий mock_connection."""
    pool = MagicMock()

    @asynccontextmanager
    async def acquire():
        yield mock_connection

    pool.acquire = MagicMock(side_effect=acquire)
    pool.close = AsyncMock()
    return pool


# =============================================================================
# ФИКСТУРЫ ДАННЫХ
# =============================================================================

@pytest.fixture
def sample_geo_data() -> dict[str, Any]:
    """Ответ ip-api.com в формате webhook."""
    return {
        "country": "United States",
        "countryCode": "US",
        "region": "VA",
        "regionName": "Virginia",
        "city": "Ashburn",
        "zip": "20149",
        "lat": 39.03,
        "lon": -77.5,
        "timezone": "America/New_York",
        "isp": "Amazon.com, Inc.",
        "org": "AWS EC2 (us-east-1)",
        "as": "AS14618 Amazon.com, Inc.",
    }


@pytest.fixture
def sample_payload(sample_geo_data: dict[str, Any]) -> dict[str, Any]:
    """Полный webhook payload."""
    return {
        "geo_data": sample_geo_data,
        "hostname": "edge-node-1",
        "timestamp": datetime(2024, 1, 1, tzinfo=timezone.utc).isoformat(),
    }


# =============================================================================
# ФИКСТУРЫ ПРИЛОЖЕНИЯ
# =============================================================================

@pytest.fixture
def memory_storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def client(memory_storage: InMemoryStorage) -> TestClient:
    """TestClient поверх хранилища в памяти (lifespan не запускается)."""
    app = create_app(Settings(), storage=memory_storage)
    return TestClient(app)

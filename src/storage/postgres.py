# src/storage/postgres.py
"""
Хранилище геоданных в PostgreSQL.
Владеет миграцией схемы, созданием индексов и отображением GeoData в строки.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import asyncpg

from src.common.logger import log_info, log_warning
from src.common.constants import TypeMsg
from src.infra.database import DatabaseManager
from src.storage import schema
from src.storage.base import Storage
from src.storage.exceptions import StorageConnectionError, StorageError
from src.storage.models import GeoData

if TYPE_CHECKING:
    from src.config.loader import DatabaseSettings


class PostgresStorage(Storage):
    """Реализация Storage поверх пула asyncpg."""

    storage_type = "postgres"

    def __init__(self, db: DatabaseManager) -> None:
        """
        Args:
            db: Подключённый менеджер БД (Dependency Injection)
        """
        self._db = db

    @classmethod
    async def create(cls, config: DatabaseSettings) -> PostgresStorage:
        """
        Подключается к PostgreSQL и приводит схему к актуальному виду.
        Любая ошибка подключения или миграции пробрасывается сразу.

        Args:
            config: Секция настроек БД
        """
        db = DatabaseManager()
        await db.connect(
            dsn=config.dsn,
            min_size=config.DB_MIN_POOL_SIZE,
            max_size=config.DB_MAX_POOL_SIZE,
            command_timeout=config.DB_COMMAND_TIMEOUT,
        )

        storage = cls(db)
        try:
            await storage.migrate()
        except BaseException:
            await db.disconnect()
            raise

        await log_info(
            f"PostgreSQL подключён: {config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME}",
            type_msg=TypeMsg.INFO,
        )
        return storage

    async def migrate(self) -> None:
        """
        Создаёт таблицу, недостающие колонки и индексы.

        Все операторы идемпотентны и выполняются в одной транзакции под
        advisory lock, так что одновременный старт нескольких экземпляров безопасен.
        Обновление статистики (ANALYZE) выполняется после и не критично.
        """
        async with self._db.transaction() as conn:
            await conn.execute("SELECT pg_advisory_xact_lock($1)", schema.MIGRATION_LOCK_ID)
            await conn.execute(schema.CREATE_TABLE_SQL)
            for statement in schema.ADD_COLUMNS_SQL:
                await conn.execute(statement)

            for statement in schema.index_statements():
                try:
                    await conn.execute(statement)
                except asyncpg.PostgresError as e:
                    raise StorageError(f"Не удалось создать индекс: {e}") from e

        await log_info("Схема geodata применена", type_msg=TypeMsg.DEBUG)

        try:
            await self._db.execute(schema.ANALYZE_SQL)
        except Exception as e:
            await log_warning(f"Не удалось обновить статистику таблицы: {e}")

    @staticmethod
    def _to_row(hostname: str, data: GeoData) -> list[Any]:
        """Раскладывает запись по колонкам в порядке INSERT."""
        values = {"hostname": hostname, **data.model_dump()}
        return [values[name] for name, _ in schema.GEODATA_COLUMNS]

    async def save(
        self,
        hostname: str,
        data: GeoData,
        *,
        timeout: float | None = None,
    ) -> GeoData:
        self._check_hostname(hostname)

        # Ошибки бэкенда пробрасываются как есть
        row = await asyncio.wait_for(
            self._db.fetchrow(schema.INSERT_SQL, *self._to_row(hostname, data)),
            timeout,
        )

        data.id = row["id"]
        data.created_at = row["created_at"]
        return data

    async def ping(self, *, timeout: float | None = None) -> None:
        try:
            await asyncio.wait_for(self._db.fetchval("SELECT 1"), timeout)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError, RuntimeError) as e:
            raise StorageConnectionError(f"PostgreSQL недоступен: {e}") from e

    async def close(self) -> None:
        await self._db.disconnect()

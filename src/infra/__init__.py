# src/infra/__init__.py
"""
Инфраструктурный слой.
Работа с внешними сервисами: PostgreSQL.
"""

from src.infra.database import DatabaseManager

__all__ = ["DatabaseManager"]

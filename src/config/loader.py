# src/config/loader.py
"""
Загрузчик конфигурации сервиса.
Источник: плоский JSON или YAML файл (по умолчанию config/config.json).
Параметры подключения к БД переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import quote

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings


class ConfigError(Exception):
    """Ошибка загрузки конфигурации."""
    pass


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path(path: str | Path | None = None) -> Path:
    """
    Возвращает путь к файлу конфигурации.

    Приоритет: явный аргумент, переменная CONFIG_PATH, config/config.json.
    """
    if path:
        return Path(path)
    env_path = os.getenv("CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return get_project_root() / "config" / "config.json"


# Секции вложенного формата (Database: {Host: ...}) и префиксы плоских ключей
_SECTION_PREFIXES = {
    "database": "DB_",
    "server": "SERVER_",
    "logging": "LOG_",
}


def _flatten_sections(data: dict[str, Any]) -> dict[str, Any]:
    """Разворачивает секции вида {"Database": {"Host": ...}} в плоские ключи DB_HOST."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if not isinstance(key, str):
            raise ConfigError(f"Ключ конфигурации должен быть строкой: {key!r}")
        prefix = _SECTION_PREFIXES.get(key.lower())
        if prefix and isinstance(value, dict):
            for sub_key, sub_value in value.items():
                if not isinstance(sub_key, str):
                    raise ConfigError(f"Ключ конфигурации должен быть строкой: {key}.{sub_key!r}")
                flat[f"{prefix}{sub_key.upper()}"] = sub_value
        else:
            flat[key] = value
    return flat


def load_config_file(path: str | Path | None = None) -> dict[str, Any]:
    """
    Загружает файл конфигурации и возвращает плоский словарь.

    Raises:
        ConfigError: файл не найден или не разбирается
    """
    config_path = get_config_path(path)
    if not config_path.exists():
        raise ConfigError(f"Файл конфигурации не найден: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(f"Не удалось разобрать {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Не удалось прочитать {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Ожидался объект на верхнем уровне {config_path}")

    # Ключи, начинающиеся с _comment_, служат комментариями
    data = {k: v for k, v in data.items() if not str(k).startswith("_comment_")}
    return _flatten_sections(data)


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "xray-geo-storage"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "colored"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_MAX_BYTES: int = 10485760
    LOG_BACKUP_COUNT: int = 5

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Допустимы только colored и json."""
        if v not in ("colored", "json"):
            raise ValueError(f"Неизвестный формат логов: {v}")
        return v


class DatabaseSettings(BaseModel):
    """Настройки PostgreSQL."""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_NAME: str = "geodata"
    DB_SSLMODE: str = "disable"
    DB_MIN_POOL_SIZE: int = 2
    DB_MAX_POOL_SIZE: int = 10
    DB_COMMAND_TIMEOUT: int = 60

    @field_validator("DB_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str | None) -> str:
        """Получает пароль из переменных окружения, если не задан."""
        if not v:
            return os.getenv("DB_PASSWORD", "")
        return v

    @property
    def dsn(self) -> str:
        """Возвращает DSN для подключения к PostgreSQL."""
        return (
            f"postgresql://{quote(self.DB_USER, safe='')}:{quote(self.DB_PASSWORD, safe='')}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?sslmode={self.DB_SSLMODE}"
        )


class ServerSettings(BaseModel):
    """Настройки HTTP сервера."""
    SERVER_ADDRESS: str = "0.0.0.0"
    SERVER_PORT: int = 8080
    # Дедлайн одного обращения к хранилищу (секунды)
    SERVER_REQUEST_TIMEOUT: float = 10.0


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    system: SystemSettings = Field(default_factory=SystemSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def from_config_data(cls, data: dict[str, Any]) -> "Settings":
        """
        Создаёт объект Settings из плоского словаря конфигурации.
        Параметры подключения к БД переопределяются из окружения.
        """
        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "xray-geo-storage"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", False),
                ENVIRONMENT=data.get("ENVIRONMENT", "development"),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=data.get("LOG_LEVEL", "INFO"),
                LOG_FORMAT=data.get("LOG_FORMAT", "colored"),
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
                LOG_BACKUP_COUNT=data.get("LOG_BACKUP_COUNT", 5),
            ),
            database=DatabaseSettings(
                DB_HOST=os.getenv("DB_HOST", data.get("DB_HOST", "localhost")),
                DB_PORT=os.getenv("DB_PORT", data.get("DB_PORT", 5432)),
                DB_USER=os.getenv("DB_USER", data.get("DB_USER", "postgres")),
                DB_PASSWORD=os.getenv("DB_PASSWORD", data.get("DB_PASSWORD", "")),
                DB_NAME=os.getenv("DB_NAME", data.get("DB_NAME", "geodata")),
                DB_SSLMODE=os.getenv("DB_SSLMODE", data.get("DB_SSLMODE", "disable")),
                DB_MIN_POOL_SIZE=data.get("DB_MIN_POOL_SIZE", 2),
                DB_MAX_POOL_SIZE=data.get("DB_MAX_POOL_SIZE", 10),
                DB_COMMAND_TIMEOUT=data.get("DB_COMMAND_TIMEOUT", 60),
            ),
            server=ServerSettings(
                SERVER_ADDRESS=data.get("SERVER_ADDRESS", "0.0.0.0"),
                SERVER_PORT=data.get("SERVER_PORT", 8080),
                SERVER_REQUEST_TIMEOUT=data.get("SERVER_REQUEST_TIMEOUT", 10.0),
            ),
        )


def load_settings(path: str | Path | None = None) -> Settings:
    """
    Загружает настройки из файла.

    Raises:
        ConfigError: файл отсутствует, не разбирается или содержит недопустимые значения
    """
    data = load_config_file(path)
    try:
        return Settings.from_config_data(data)
    except ValidationError as e:
        raise ConfigError(f"Недопустимые значения в конфигурации: {e}") from e


@lru_cache()
def get_settings(path: str | None = None) -> Settings:
    """
    Возвращает закэшированные настройки приложения.
    Перед чтением файла подгружает .env из корня проекта.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return load_settings(path)

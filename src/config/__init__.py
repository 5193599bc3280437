# src/config/__init__.py
"""
Модуль конфигурации.
Экспортирует настройки приложения.
"""

from src.config.loader import ConfigError, Settings, get_settings, load_settings

__all__ = ["ConfigError", "Settings", "get_settings", "load_settings"]

# src/services/__init__.py
"""
HTTP сервисы приложения.

Сервисы:
- geo_webhook: приём геоданных по webhook + health check
"""

__all__: list[str] = []

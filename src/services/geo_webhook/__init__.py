# src/services/geo_webhook/__init__.py
"""
Geo Webhook: приём результатов геолокации хостов.

Обеспечивает:
- Валидацию входящего webhook
- Сохранение геоданных через интерфейс Storage
- Health check с проверкой подключения к хранилищу
"""

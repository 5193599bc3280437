from fastapi import Request

from src.config.loader import Settings
from src.services.geo_webhook.service import GeoWebhookService
from src.storage.base import Storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> Storage:
    storage = request.app.state.storage
    if storage is None:
        raise RuntimeError("Storage not initialized")
    return storage


def get_geo_service(request: Request) -> GeoWebhookService:
    settings = get_settings(request)
    return GeoWebhookService(get_storage(request), settings.server.SERVER_REQUEST_TIMEOUT)

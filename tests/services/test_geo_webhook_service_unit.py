import pytest
from unittest.mock import AsyncMock, MagicMock

from src.services.geo_webhook.service import GeoWebhookService, InvalidPayloadError
from src.shared.models.webhook_dto import WebhookPayload
from src.storage.base import Storage
from src.storage.exceptions import StorageConnectionError
from src.storage.models import GeoData


def make_storage() -> MagicMock:
    storage = MagicMock(spec=Storage)
    storage.storage_type = "postgres"

    async def save(hostname, data, *, timeout=None):
        data.id = 5
        return data

    storage.save = AsyncMock(side_effect=save)
    storage.ping = AsyncMock(return_value=None)
    return storage


@pytest.mark.asyncio
async def test_ingest_saves_with_timeout():
    storage = make_storage()
    service = GeoWebhookService(storage, request_timeout=3.0)
    payload = WebhookPayload(geo_data=GeoData(country="US", city="Ashburn"), hostname="host-1")

    result = await service.ingest(payload)

    assert result.id == 5
    storage.save.assert_awaited_once_with("host-1", payload.geo_data, timeout=3.0)


@pytest.mark.asyncio
async def test_ingest_requires_hostname():
    storage = make_storage()
    service = GeoWebhookService(storage)

    with pytest.raises(InvalidPayloadError, match="Missing hostname in payload"):
        await service.ingest(WebhookPayload(geo_data=GeoData(), hostname=""))

    storage.save.assert_not_awaited()


@pytest.mark.asyncio
async def test_ingest_requires_geo_data():
    storage = make_storage()
    service = GeoWebhookService(storage)

    with pytest.raises(InvalidPayloadError, match="Missing geo_data in payload"):
        await service.ingest(WebhookPayload(hostname="host-1"))

    storage.save.assert_not_awaited()


@pytest.mark.asyncio
async def test_ingest_reraises_storage_failure():
    storage = make_storage()
    storage.save.side_effect = OSError("connection reset")
    service = GeoWebhookService(storage)

    with pytest.raises(OSError):
        await service.ingest(WebhookPayload(geo_data=GeoData(), hostname="host-1"))


@pytest.mark.asyncio
async def test_is_healthy():
    storage = make_storage()
    service = GeoWebhookService(storage, request_timeout=1.0)

    assert await service.is_healthy() is True
    storage.ping.assert_awaited_once_with(timeout=1.0)
    assert service.storage_type == "postgres"


@pytest.mark.asyncio
async def test_is_unhealthy_when_ping_fails():
    storage = make_storage()
    storage.ping.side_effect = StorageConnectionError("down")
    service = GeoWebhookService(storage)

    assert await service.is_healthy() is False

"""
Business logic for the geo webhook: payload validation, persistence, health.
"""

from __future__ import annotations

from src.common.logger import log_error, log_info, log_warning
from src.common.constants import TypeMsg
from src.shared.models.webhook_dto import WebhookPayload
from src.storage.base import Storage
from src.storage.exceptions import StorageConnectionError
from src.storage.models import GeoData


class InvalidPayloadError(Exception):
    """Webhook payload is missing a required part."""
    pass


class GeoWebhookService:
    """
    Accepts geolocation results and writes them to storage.

    Duplicate deliveries are not deduplicated: every accepted
    webhook becomes a new row.
    """

    def __init__(self, storage: Storage, request_timeout: float | None = None) -> None:
        self._storage = storage
        self._timeout = request_timeout

    @property
    def storage_type(self) -> str:
        return self._storage.storage_type

    async def ingest(self, payload: WebhookPayload) -> GeoData:
        """
        Validates the payload and saves its geo data against the hostname.

        Raises:
            InvalidPayloadError: hostname is empty or geo_data is absent
        """
        if not payload.hostname:
            raise InvalidPayloadError("Missing hostname in payload")
        if payload.geo_data is None:
            raise InvalidPayloadError("Missing geo_data in payload")

        data = payload.geo_data
        try:
            await self._storage.save(payload.hostname, data, timeout=self._timeout)
        except Exception as e:
            await log_error(f"Failed to insert data: {e}", extra={"hostname": payload.hostname})
            raise

        await log_info(
            f"Successfully added GeoData: ID={data.id}, Country={data.country}, "
            f"City={data.city}, ISP={data.isp}",
            type_msg=TypeMsg.INFO,
        )
        return data

    async def is_healthy(self) -> bool:
        """Returns False when storage connectivity cannot be confirmed."""
        try:
            await self._storage.ping(timeout=self._timeout)
        except StorageConnectionError as e:
            await log_warning(f"Storage health check failed: {e}")
            return False
        return True

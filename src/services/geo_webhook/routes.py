import time

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from src.common.constants import HealthState, StorageState
from src.services.geo_webhook.dependencies import get_geo_service
from src.services.geo_webhook.service import GeoWebhookService, InvalidPayloadError
from src.shared.models.webhook_dto import HealthResponse, WebhookPayload, WebhookResponse

router = APIRouter()


@router.post(
    "/webhook",
    response_model=WebhookResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Webhook"],
)
async def receive_webhook(
    payload: WebhookPayload,
    service: GeoWebhookService = Depends(get_geo_service),
):
    try:
        data = await service.ingest(payload)
    except InvalidPayloadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        # Details are already logged by the service
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save data",
        )

    return WebhookResponse(id=data.id)


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Storage is unreachable"}},
    tags=["Health"],
)
async def health_check(service: GeoWebhookService = Depends(get_geo_service)):
    if not await service.is_healthy():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": HealthState.UNHEALTHY.value,
                "storage": StorageState.DISCONNECTED.value,
            },
        )

    return HealthResponse(
        status=HealthState.HEALTHY.value,
        storage=StorageState.CONNECTED.value,
        storage_type=service.storage_type,
        timestamp=int(time.time()),
    )

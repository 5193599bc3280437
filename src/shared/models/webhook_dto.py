from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.storage.models import GeoData


class WebhookPayload(BaseModel):
    geo_data: Optional[GeoData] = None
    hostname: str = ""
    timestamp: Optional[datetime] = None


class WebhookResponse(BaseModel):
    status: str = "success"
    message: str = "Data saved successfully"
    id: int


class HealthResponse(BaseModel):
    status: str
    storage: str
    storage_type: Optional[str] = None
    timestamp: Optional[int] = None

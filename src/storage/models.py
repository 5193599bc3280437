# src/storage/models.py
"""
Модель геоданных: одно наблюдение геолокации.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class GeoData(BaseModel):
    """
    Результат геолокации одного хоста.

    Имена полей во входящем JSON совпадают с ответом ip-api.com
    (countryCode, regionName, as); snake_case имена тоже принимаются.
    id и created_at назначает хранилище при вставке.
    """

    id: int | None = None
    country: str = ""
    country_code: str = Field(default="", alias="countryCode")
    region: str = ""
    region_name: str = Field(default="", alias="regionName")
    city: str = ""
    zip: str = ""
    lat: float = 0.0
    lon: float = 0.0
    timezone: str = ""
    isp: str = ""
    org: str = ""
    as_info: str = Field(default="", alias="as")
    created_at: datetime | None = None

    class Config:
        populate_by_name = True
        from_attributes = True
        allow_inf_nan = False

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        """null в JSON превращается в нулевое значение поля."""
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

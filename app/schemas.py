"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from models.records import WeatherField


class MetricsResponse(BaseModel):
    """Summary statistics for one field, rounded to two decimals."""

    model_config = ConfigDict(populate_by_name=True)

    field: WeatherField
    count: int = Field(..., ge=0)
    avg: float
    min: float
    max: float
    std_dev: float = Field(..., alias="stdDev", ge=0)


class FieldsResponse(BaseModel):
    fields: List[WeatherField]
    descriptions: Dict[str, str]


class ErrorResponse(BaseModel):
    """Body of every non-2xx API response."""

    error: str
    message: str

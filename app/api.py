"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.schemas import ErrorResponse, FieldsResponse, MetricsResponse
from models.records import WeatherField
from services.formatter import not_found_endpoint
from services.query import QueryService, build_default_query_service

router = APIRouter()

_ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def get_query_service() -> QueryService:
    return build_default_query_service()


@router.get(
    "/api/measurements",
    summary="List observations filtered by field and date range.",
    responses=_ERROR_RESPONSES,
)
@router.get(
    "/api/measurements/",
    include_in_schema=False,
    responses=_ERROR_RESPONSES,
)
async def list_measurements(
    field: Optional[str] = Query(None, description="temperature, humidity or pressure."),
    start_date: Optional[str] = Query(None, description="Inclusive start day, YYYY-MM-DD."),
    end_date: Optional[str] = Query(None, description="Inclusive end day, YYYY-MM-DD."),
    service: QueryService = Depends(get_query_service),
) -> List[Dict[str, Any]]:
    return service.list_measurements(field, start_date, end_date)


@router.get(
    "/api/measurements/metrics",
    response_model=MetricsResponse,
    summary="Summary statistics for one field over a date range.",
    responses=_ERROR_RESPONSES,
)
@router.get(
    "/api/measurements/metrics/",
    include_in_schema=False,
    response_model=MetricsResponse,
    responses=_ERROR_RESPONSES,
)
async def measurement_metrics(
    field: Optional[str] = Query(None, description="temperature, humidity or pressure."),
    start_date: Optional[str] = Query(None, description="Inclusive start day, YYYY-MM-DD."),
    end_date: Optional[str] = Query(None, description="Inclusive end day, YYYY-MM-DD."),
    service: QueryService = Depends(get_query_service),
) -> MetricsResponse:
    return service.compute_metrics(field, start_date, end_date)


@router.get(
    "/api/fields",
    response_model=FieldsResponse,
    summary="Queryable fields and their units.",
)
@router.get(
    "/api/fields/",
    include_in_schema=False,
    response_model=FieldsResponse,
)
async def list_fields() -> FieldsResponse:
    return FieldsResponse(
        fields=list(WeatherField),
        descriptions={member.value: member.description for member in WeatherField},
    )


@router.api_route(
    "/api/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def unknown_api_route(path: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=not_found_endpoint().model_dump(),
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}

"""Shaping of query outcomes into response payloads."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from app.schemas import ErrorResponse, MetricsResponse
from models.records import Observation
from services.aggregator import FieldStatistics
from services.errors import QueryError
from services.planner import ProjectedObservation


def round_metric(value: float) -> float:
    """Round to two decimals, halves going up (``Math.round(x * 100) / 100``)."""
    return math.floor(value * 100 + 0.5) / 100


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


def format_record(row: Observation | ProjectedObservation) -> Dict[str, Any]:
    if isinstance(row, ProjectedObservation):
        return {"timestamp": format_timestamp(row.timestamp), row.field.value: row.value}
    return {
        "timestamp": format_timestamp(row.timestamp),
        "temperature": row.temperature,
        "humidity": row.humidity,
        "pressure": row.pressure,
    }


def format_records(rows: Sequence[Observation | ProjectedObservation]) -> List[Dict[str, Any]]:
    return [format_record(row) for row in rows]


def format_metrics(stats: FieldStatistics) -> MetricsResponse:
    return MetricsResponse(
        field=stats.field,
        count=stats.count,
        avg=round_metric(stats.mean),
        min=round_metric(stats.minimum),
        max=round_metric(stats.maximum),
        std_dev=round_metric(stats.std_dev),
    )


def format_error(exc: QueryError) -> ErrorResponse:
    return ErrorResponse(error=exc.error, message=exc.message)


def not_found_endpoint() -> ErrorResponse:
    return ErrorResponse(error="Not found", message="API endpoint not found")


def unexpected_error() -> ErrorResponse:
    return ErrorResponse(
        error="Internal server error",
        message="An unexpected error occurred",
    )

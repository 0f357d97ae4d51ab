"""Aggregation logic for observation fields."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from models.records import TimeRange, WeatherField
from models.statistics import RunningStatistics
from services.errors import NoDataFound
from services.planner import AggregatingSource, ObservationSource
from settings import AGGREGATION_STRATEGIES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldStatistics:
    """Unrounded statistics for one field over a time range."""

    field: WeatherField
    count: int
    mean: float
    minimum: float
    maximum: float
    std_dev: float


def summarize(field: WeatherField, values: Iterable[float]) -> FieldStatistics:
    """Reduce ``values`` in one pass, raising ``NoDataFound`` when empty."""
    running = RunningStatistics()
    for value in values:
        running.push(value)

    if running.count == 0 or running.minimum is None or running.maximum is None:
        raise NoDataFound()

    return FieldStatistics(
        field=field,
        count=running.count,
        mean=running.mean,
        minimum=running.minimum,
        maximum=running.maximum,
        std_dev=running.std_dev,
    )


class AggregationEngine:
    """Computes field statistics, preferring the store's own aggregation."""

    def __init__(self, strategy: str = "auto") -> None:
        if strategy not in AGGREGATION_STRATEGIES:
            raise ValueError(
                f"Unknown aggregation strategy {strategy!r}; "
                f"expected one of: {', '.join(AGGREGATION_STRATEGIES)}"
            )
        self.strategy = strategy

    def compute(
        self, source: ObservationSource, field: WeatherField, time_range: TimeRange
    ) -> FieldStatistics:
        can_aggregate = isinstance(source, AggregatingSource)
        if self.strategy == "store" and not can_aggregate:
            raise TypeError(f"{type(source).__name__} does not provide an aggregate primitive")

        if self.strategy != "stream" and can_aggregate:
            logger.debug("Delegating aggregation to store", extra={"field": field.value, "strategy": "store"})
            return self._from_store(source, field, time_range)

        logger.debug("Streaming aggregation", extra={"field": field.value, "strategy": "stream"})
        values = (field.read(item) for item in source.find(time_range))
        return summarize(field, values)

    @staticmethod
    def _from_store(
        source: AggregatingSource, field: WeatherField, time_range: TimeRange
    ) -> FieldStatistics:
        result = source.aggregate(field, time_range)
        if result is None or result.count == 0:
            raise NoDataFound()
        return FieldStatistics(
            field=field,
            count=result.count,
            mean=result.total / result.count,
            minimum=result.minimum,
            maximum=result.maximum,
            std_dev=result.std_dev_pop if result.count > 1 else 0.0,
        )

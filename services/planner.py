"""Translation of validated filters into store scans."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

from datastore.observation_table import StoreAggregate
from models.records import FilterDescriptor, Observation, TimeRange, WeatherField
from services.errors import NoDataFound


class Projection(str, Enum):
    full_record = "full_record"
    single_field = "single_field"


class ObservationSource(Protocol):
    def find(self, time_range: TimeRange) -> list[Observation]: ...


@runtime_checkable
class AggregatingSource(ObservationSource, Protocol):
    """A source that can reduce a field itself, like a database group stage."""

    def aggregate(self, field: WeatherField, time_range: TimeRange) -> Optional[StoreAggregate]: ...


@dataclass(frozen=True)
class QueryPlan:
    time_range: TimeRange
    projection: Projection
    field: Optional[WeatherField] = None


@dataclass(frozen=True)
class ProjectedObservation:
    """Timestamp plus the value of a single requested field."""

    timestamp: datetime
    field: WeatherField
    value: float


def plan_query(descriptor: FilterDescriptor) -> QueryPlan:
    time_range = TimeRange(start=descriptor.start, end=descriptor.end)
    if descriptor.field is None:
        return QueryPlan(time_range=time_range, projection=Projection.full_record)
    return QueryPlan(
        time_range=time_range,
        projection=Projection.single_field,
        field=descriptor.field,
    )


def project(observation: Observation, plan: QueryPlan) -> Observation | ProjectedObservation:
    if plan.projection is Projection.full_record or plan.field is None:
        return observation
    return ProjectedObservation(
        timestamp=observation.timestamp,
        field=plan.field,
        value=plan.field.read(observation),
    )


def run_list_query(
    source: ObservationSource, plan: QueryPlan
) -> list[Observation | ProjectedObservation]:
    """Scan ``source`` and return projected rows ordered by timestamp.

    Raises ``NoDataFound`` when the range matches no observations.
    """
    matches = source.find(plan.time_range)
    if not matches:
        raise NoDataFound()
    ordered = sorted(matches, key=lambda item: item.timestamp)
    return [project(item, plan) for item in ordered]

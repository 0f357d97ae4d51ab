from __future__ import annotations

from datetime import datetime, timezone

import pytest

from datastore.observation_table import ObservationTable
from models.records import FilterDescriptor, Observation, TimeRange, WeatherField
from services.errors import NoDataFound
from services.planner import ProjectedObservation, Projection, plan_query, run_list_query


def _observation(hour: int, temperature: float) -> Observation:
    return Observation(
        timestamp=datetime(2025, 3, 1, hour, tzinfo=timezone.utc),
        temperature=temperature,
        humidity=temperature * 2,
        pressure=1000.0 + temperature,
    )


def test_plan_without_field_projects_full_record() -> None:
    start = datetime(2025, 3, 1, tzinfo=timezone.utc)
    plan = plan_query(FilterDescriptor(start=start))

    assert plan.projection is Projection.full_record
    assert plan.field is None
    assert plan.time_range == TimeRange(start=start, end=None)


def test_plan_with_field_projects_single_field() -> None:
    plan = plan_query(FilterDescriptor(field=WeatherField.humidity))

    assert plan.projection is Projection.single_field
    assert plan.field is WeatherField.humidity


def test_run_list_query_sorts_and_projects() -> None:
    table = ObservationTable(name="test")
    for hour, temperature in [(5, 2.0), (1, 7.0), (3, -1.5)]:
        table.append(_observation(hour, temperature))

    rows = run_list_query(table, plan_query(FilterDescriptor(field=WeatherField.temperature)))

    assert all(isinstance(row, ProjectedObservation) for row in rows)
    assert [row.timestamp.hour for row in rows] == [1, 3, 5]
    assert [row.value for row in rows] == [7.0, -1.5, 2.0]


def test_run_list_query_applies_time_range() -> None:
    table = ObservationTable(name="test")
    for hour in range(6):
        table.append(_observation(hour, float(hour)))

    descriptor = FilterDescriptor(
        start=datetime(2025, 3, 1, 2, tzinfo=timezone.utc),
        end=datetime(2025, 3, 1, 4, tzinfo=timezone.utc),
    )
    rows = run_list_query(table, plan_query(descriptor))

    assert [row.timestamp.hour for row in rows] == [2, 3, 4]
    assert all(isinstance(row, Observation) for row in rows)


def test_run_list_query_empty_raises_no_data() -> None:
    with pytest.raises(NoDataFound) as excinfo:
        run_list_query(ObservationTable(name="empty"), plan_query(FilterDescriptor()))

    assert excinfo.value.status_code == 404

"""Unit tests for the aggregation logic."""

from __future__ import annotations

import math
import random
import statistics
from datetime import datetime, timedelta, timezone

import pytest

from datastore.observation_table import ObservationTable
from models.records import Observation, TimeRange, WeatherField
from services.aggregator import AggregationEngine, RunningStatistics, summarize
from services.errors import NoDataFound
from services.formatter import format_metrics
from services.planner import AggregatingSource


class FindOnlySource:
    """Store without an aggregation primitive."""

    def __init__(self, observations: list[Observation]) -> None:
        self._observations = observations

    def find(self, time_range: TimeRange) -> list[Observation]:
        return [item for item in self._observations if time_range.contains(item.timestamp)]


def _table(values: list[float]) -> ObservationTable:
    table = ObservationTable(name="test")
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    for offset, value in enumerate(values):
        table.append(
            Observation(
                timestamp=base + timedelta(hours=offset),
                temperature=value,
                humidity=value / 2,
                pressure=1000.0 + value,
            )
        )
    return table


def test_summarize_empty_raises_no_data() -> None:
    with pytest.raises(NoDataFound):
        summarize(WeatherField.temperature, [])


def test_summarize_single_value() -> None:
    stats = summarize(WeatherField.humidity, [42.5])

    assert stats.count == 1
    assert stats.mean == 42.5
    assert stats.minimum == stats.maximum == 42.5
    assert stats.std_dev == 0.0


def test_summarize_uses_population_deviation() -> None:
    values = [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]

    stats = summarize(WeatherField.temperature, values)

    assert stats.count == 8
    assert stats.mean == pytest.approx(5.0)
    assert stats.std_dev == pytest.approx(2.0)
    assert stats.std_dev == pytest.approx(statistics.pstdev(values))


def test_running_statistics_is_single_pass() -> None:
    running = RunningStatistics()

    for value in iter([3.0, -1.0, 8.0]):
        running.push(value)

    assert running.count == 3
    assert running.minimum == -1.0
    assert running.maximum == 8.0
    assert running.mean == pytest.approx(10.0 / 3)


@pytest.mark.parametrize(
    "values",
    [
        [10.0, 20.0, 30.0],
        [-12.4, -3.3, 0.0, 4.8, 17.25],
        [1013.2, 1012.9, 1014.1, 1011.7, 1013.0, 1015.6],
        [55.0] * 5,
        # Exact means sit on a half-cent tie.
        [13.87, -3.71, 38.22, 14.72],
        [0.01, 0.02],
    ],
)
def test_store_and_stream_strategies_agree(values: list[float]) -> None:
    table = _table(values)
    everything = TimeRange()

    delegated = AggregationEngine("store").compute(table, WeatherField.temperature, everything)
    streamed = AggregationEngine("stream").compute(table, WeatherField.temperature, everything)

    assert delegated == streamed
    assert format_metrics(delegated) == format_metrics(streamed)


def test_strategies_agree_on_random_two_decimal_readings() -> None:
    rng = random.Random(20250101)

    for _ in range(2000):
        values = [round(rng.uniform(-30, 40), 2) for _ in range(rng.randint(2, 12))]
        table = _table(values)

        delegated = AggregationEngine("store").compute(table, WeatherField.temperature, TimeRange())
        streamed = AggregationEngine("stream").compute(table, WeatherField.temperature, TimeRange())

        assert format_metrics(delegated) == format_metrics(streamed), values


def test_mean_is_total_over_count() -> None:
    values = [13.87, -3.71, 38.22, 14.72]
    running = RunningStatistics()
    for value in values:
        running.push(value)

    total = 0.0
    for value in values:
        total += value
    assert running.total == total
    assert running.mean == total / 4


def test_table_exposes_aggregate_primitive() -> None:
    assert isinstance(ObservationTable(name="test"), AggregatingSource)
    assert not isinstance(FindOnlySource([]), AggregatingSource)


def test_auto_strategy_streams_when_store_cannot_aggregate() -> None:
    table = _table([1.0, 2.0, 3.0, 4.0])
    source = FindOnlySource(table.find(TimeRange()))

    stats = AggregationEngine("auto").compute(source, WeatherField.pressure, TimeRange())

    assert stats.count == 4
    assert stats.mean == pytest.approx(1002.5)


def test_store_strategy_requires_aggregate_primitive() -> None:
    with pytest.raises(TypeError):
        AggregationEngine("store").compute(FindOnlySource([]), WeatherField.temperature, TimeRange())


def test_unknown_strategy_rejected() -> None:
    with pytest.raises(ValueError):
        AggregationEngine("parallel")


@pytest.mark.parametrize("strategy", ["auto", "store", "stream"])
def test_no_matching_rows_raises_no_data(strategy: str) -> None:
    table = _table([1.0, 2.0])
    later = TimeRange(start=datetime(2026, 1, 1, tzinfo=timezone.utc))

    with pytest.raises(NoDataFound):
        AggregationEngine(strategy).compute(table, WeatherField.humidity, later)


@pytest.mark.parametrize("strategy", ["store", "stream"])
def test_metric_invariants(strategy: str) -> None:
    values = [-7.3, 0.15, 2.345, 11.0, 19.999, 23.4]
    table = _table(values)

    result = format_metrics(AggregationEngine(strategy).compute(table, WeatherField.temperature, TimeRange()))

    assert result.count == len(values)
    assert result.min <= result.avg <= result.max
    assert result.std_dev >= 0
    for metric in (result.avg, result.min, result.max, result.std_dev):
        assert math.isclose(metric * 100, round(metric * 100), abs_tol=1e-6)

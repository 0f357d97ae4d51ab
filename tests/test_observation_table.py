"""Unit tests for the JSON-backed observation table."""

from __future__ import annotations

import json
import logging
from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from datastore.observation_table import ObservationTable
from models.records import Observation, TimeRange, WeatherField


def _sample(day: int = 1, temperature: float = -4.5) -> Observation:
    return Observation(
        timestamp=datetime(2025, 2, day, 6, 30, tzinfo=timezone.utc),
        temperature=temperature,
        humidity=81.0,
        pressure=1021.0,
    )


def test_append_and_find_all() -> None:
    table = ObservationTable(name="measurements")
    table.append(_sample(1))
    table.append(_sample(2))

    assert len(table) == 2
    assert [item.timestamp.day for item in table.find(TimeRange())] == [1, 2]


def test_find_bounds_are_inclusive() -> None:
    table = ObservationTable(name="measurements")
    for day in (1, 2, 3):
        table.append(_sample(day))

    exact = datetime(2025, 2, 2, 6, 30, tzinfo=timezone.utc)
    found = table.find(TimeRange(start=exact, end=exact))

    assert [item.timestamp.day for item in found] == [2]


def test_observations_are_immutable() -> None:
    observation = _sample()

    with pytest.raises(FrozenInstanceError):
        observation.temperature = 0.0  # type: ignore[misc]


def test_append_persists_to_disk_and_reloads(tmp_path) -> None:
    path = tmp_path / "measurements.json"
    table = ObservationTable(name="measurements", persistence_path=path)
    original = _sample()

    table.append(original)

    assert path.exists()
    payload = json.loads(path.read_text())
    assert payload == [
        {
            "timestamp": "2025-02-01T06:30:00+00:00",
            "temperature": -4.5,
            "humidity": 81.0,
            "pressure": 1021.0,
        }
    ]

    reloaded = ObservationTable(name="measurements", persistence_path=path)
    assert reloaded.find(TimeRange()) == [original]


def test_corrupt_file_is_moved_aside_and_logged(tmp_path, caplog) -> None:
    path = tmp_path / "measurements.json"
    path.write_text("{not json")

    with caplog.at_level(logging.WARNING, logger="datastore.observation_table"):
        table = ObservationTable(name="measurements", persistence_path=path)

    assert len(table) == 0
    assert "not valid JSON" in caplog.text

    backup = tmp_path / "measurements.json.corrupt"
    table.append(_sample())

    assert backup.read_text() == "{not json"
    assert len(json.loads(path.read_text())) == 1


def test_aggregate_primitive() -> None:
    table = ObservationTable(name="measurements")
    for day, temperature in ((1, 10.0), (2, 20.0), (3, 30.0)):
        table.append(_sample(day, temperature))

    result = table.aggregate(WeatherField.temperature, TimeRange())

    assert result is not None
    assert result.count == 3
    assert result.total == 60.0
    assert result.minimum == 10.0
    assert result.maximum == 30.0
    assert result.std_dev_pop == pytest.approx(8.164966, rel=1e-6)


def test_aggregate_without_matches_returns_none() -> None:
    table = ObservationTable(name="measurements")
    table.append(_sample())

    later = TimeRange(start=datetime(2030, 1, 1, tzinfo=timezone.utc))

    assert table.aggregate(WeatherField.pressure, later) is None

"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class WeatherField(str, Enum):
    """Closed set of numeric observation fields that can be queried."""

    temperature = "temperature"
    humidity = "humidity"
    pressure = "pressure"

    @property
    def description(self) -> str:
        if self is WeatherField.temperature:
            return "Temperature in Celsius"
        if self is WeatherField.humidity:
            return "Humidity percentage"
        return "Atmospheric pressure in hPa"

    def read(self, observation: "Observation") -> float:
        """Return this field's value from ``observation``."""
        if self is WeatherField.temperature:
            return observation.temperature
        if self is WeatherField.humidity:
            return observation.humidity
        return observation.pressure


VALID_FIELDS: tuple[str, ...] = tuple(member.value for member in WeatherField)


@dataclass(frozen=True, slots=True)
class Observation:
    """A single weather reading as appended by the ingestion job."""

    timestamp: datetime
    temperature: float
    humidity: float
    pressure: float


@dataclass(frozen=True, slots=True)
class TimeRange:
    """Inclusive timestamp predicate; a missing bound is unbounded."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def contains(self, timestamp: datetime) -> bool:
        if self.start is not None and timestamp < self.start:
            return False
        if self.end is not None and timestamp > self.end:
            return False
        return True


@dataclass(frozen=True, slots=True)
class FilterDescriptor:
    """Validated query parameters for a single request."""

    field: Optional[WeatherField] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

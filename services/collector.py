"""Ingestion job: fetch the current weather and append one observation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from datastore.observation_table import ObservationTable
from models.records import Observation
from settings import Settings

logger = logging.getLogger(__name__)


class CollectorError(RuntimeError):
    """Raised when a reading cannot be fetched or understood."""


def parse_current_weather(payload: Dict[str, Any]) -> Observation:
    """Map an OpenWeatherMap ``/weather`` response onto an observation."""
    try:
        main = payload["main"]
        return Observation(
            timestamp=datetime.fromtimestamp(int(payload["dt"]), tz=timezone.utc),
            temperature=float(main["temp"]),
            humidity=float(main["humidity"]),
            pressure=float(main["pressure"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise CollectorError(f"Unexpected weather payload: {exc!r}") from exc


class WeatherCollector:
    """Single-shot producer that appends readings to the observation table."""

    def __init__(
        self,
        table: ObservationTable,
        api_key: Optional[str],
        city: str,
        base_url: str,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.table = table
        self.api_key = api_key
        self.city = city
        self._client = client or httpx.Client(base_url=base_url, timeout=30.0)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        table: ObservationTable,
        client: Optional[httpx.Client] = None,
    ) -> "WeatherCollector":
        return cls(
            table=table,
            api_key=settings.openweather_api_key,
            city=settings.openweather_city,
            base_url=settings.openweather_base_url,
            client=client,
        )

    def close(self) -> None:
        self._client.close()

    def fetch(self) -> Observation:
        if not self.api_key:
            raise CollectorError("OPENWEATHER_API_KEY is not set.")

        try:
            response = self._client.get(
                "/weather",
                params={"q": self.city, "appid": self.api_key, "units": "metric"},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise CollectorError(
                f"Weather API returned status {exc.response.status_code}."
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise CollectorError(f"Weather API request failed: {exc}") from exc

        return parse_current_weather(payload)

    def collect(self) -> Observation:
        """Fetch one reading and persist it."""
        observation = self.fetch()
        self.table.append(observation)
        logger.info(
            "Weather data collected and stored",
            extra={"city": self.city, "observed_at": observation.timestamp.isoformat()},
        )
        return observation

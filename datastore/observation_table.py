from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional

from models.records import Observation, TimeRange, WeatherField
from models.statistics import RunningStatistics
from settings import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreAggregate:
    """Grouped statistics for one field, as produced by the store."""

    count: int
    total: float
    minimum: float
    maximum: float
    std_dev_pop: float


class ObservationTable:

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self._items: List[Observation] = []
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def append(self, observation: Observation) -> None:
        with self._lock:
            self._items.append(observation)
            self._persist()

    def find(self, time_range: TimeRange) -> list[Observation]:
        """Return the observations whose timestamp falls inside ``time_range``.

        Records come back in insertion order; ordering is the caller's job.
        Observations are immutable, so no copies are made.
        """

        with self._lock:
            return [item for item in self._items if time_range.contains(item.timestamp)]

    def aggregate(self, field: WeatherField, time_range: TimeRange) -> Optional[StoreAggregate]:
        """Group every matching record and reduce ``field``.

        Returns ``None`` when nothing matches, mirroring an empty group.
        Values are reduced in insertion order.
        """

        running = RunningStatistics()
        for item in self.find(time_range):
            running.push(field.read(item))
        if running.count == 0 or running.minimum is None or running.maximum is None:
            return None
        return StoreAggregate(
            count=running.count,
            total=running.total,
            minimum=running.minimum,
            maximum=running.maximum,
            std_dev_pop=running.std_dev,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = [_to_document(item) for item in self._items]
        self.persistence_path.write_text(json.dumps(payload, indent=2, sort_keys=True))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "[]"
        except OSError as exc:
            logger.warning("Could not read observation table %r from %s: %s", self.name, self.persistence_path, exc)
            return

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            # Keep the unreadable file so the next append cannot overwrite it.
            backup = self.persistence_path.with_name(self.persistence_path.name + ".corrupt")
            self.persistence_path.replace(backup)
            logger.warning(
                "Observation table %r at %s is not valid JSON (%s); starting empty, original moved to %s",
                self.name,
                self.persistence_path,
                exc,
                backup,
            )
            return

        for document in data:
            self._items.append(_from_document(document))


def _to_document(observation: Observation) -> Dict[str, Any]:
    return {
        "timestamp": observation.timestamp.isoformat(),
        "temperature": observation.temperature,
        "humidity": observation.humidity,
        "pressure": observation.pressure,
    }


def _from_document(document: Dict[str, Any]) -> Observation:
    timestamp = datetime.fromisoformat(document["timestamp"])
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return Observation(
        timestamp=timestamp.astimezone(timezone.utc),
        temperature=float(document["temperature"]),
        humidity=float(document["humidity"]),
        pressure=float(document["pressure"]),
    )


@lru_cache
def build_default_table(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> ObservationTable:
    settings = get_settings()
    table_name = settings.table_name if name is None else name
    table_path = settings.table_persistence_path if path is None else path
    persistence = Path(table_path) if table_path else None
    return ObservationTable(name=table_name, persistence_path=persistence)

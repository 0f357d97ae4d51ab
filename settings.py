from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_TABLE_NAME_ENV = "OBSERVATION_TABLE_NAME"
_TABLE_PATH_ENV = "OBSERVATION_PERSISTENCE_PATH"
_STRATEGY_ENV = "AGGREGATION_STRATEGY"
_STATIC_ROOT_ENV = "STATIC_ROOT_PATH"
_OPENWEATHER_KEY_ENV = "OPENWEATHER_API_KEY"
_OPENWEATHER_CITY_ENV = "OPENWEATHER_CITY"
_OPENWEATHER_URL_ENV = "OPENWEATHER_BASE_URL"
_LOG_LEVEL_ENV = "LOG_LEVEL"

AGGREGATION_STRATEGIES = ("auto", "store", "stream")


@dataclass(frozen=True)
class Settings:
    table_name: str
    table_persistence_path: Optional[str]
    aggregation_strategy: str
    static_root_path: Optional[str]
    openweather_api_key: Optional[str]
    openweather_city: str
    openweather_base_url: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_strategy(default: str) -> str:
    value = os.getenv(_STRATEGY_ENV)
    if value is None:
        return default
    candidate = value.strip().lower()
    return candidate if candidate in AGGREGATION_STRATEGIES else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        table_name=_read_str_env(_TABLE_NAME_ENV, "measurements"),
        table_persistence_path=_read_optional_env(_TABLE_PATH_ENV, "./tmp/measurements.json"),
        aggregation_strategy=_read_strategy("auto"),
        static_root_path=_read_optional_env(_STATIC_ROOT_ENV, "./public"),
        openweather_api_key=_read_optional_env(_OPENWEATHER_KEY_ENV, None),
        openweather_city=_read_str_env(_OPENWEATHER_CITY_ENV, "ASTANA"),
        openweather_base_url=_read_str_env(
            _OPENWEATHER_URL_ENV, "https://api.openweathermap.org/data/2.5"
        ).rstrip("/"),
        log_level=_read_log_level("INFO"),
    )

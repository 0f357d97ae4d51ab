"""Parsing of raw query-string parameters into a filter descriptor."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Optional

from models.records import VALID_FIELDS, FilterDescriptor, WeatherField
from services.errors import InvalidDateFormat, InvalidField, MissingField

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_END_OF_DAY = time(23, 59, 59, 999000)


def _present(value: Optional[str]) -> Optional[str]:
    # Empty query parameters behave as if they were omitted.
    if value is None or value == "":
        return None
    return value


def parse_field(value: Optional[str], *, required: bool = False) -> Optional[WeatherField]:
    candidate = _present(value)
    if candidate is None:
        if required:
            raise MissingField()
        return None
    if candidate not in VALID_FIELDS:
        raise InvalidField(candidate)
    return WeatherField(candidate)


def parse_date(value: str, bound: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string into a calendar date."""
    if not _DATE_PATTERN.fullmatch(value):
        raise InvalidDateFormat(bound, value)
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidDateFormat(bound, value) from exc


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, _END_OF_DAY, tzinfo=timezone.utc)


def parse_filter(
    field: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    *,
    require_field: bool = False,
) -> FilterDescriptor:
    """Validate request parameters.

    Both bounds are optional and independent. A ``start_date`` later than
    ``end_date`` is accepted and simply matches nothing.
    """
    parsed_field = parse_field(field, required=require_field)

    start: Optional[datetime] = None
    raw_start = _present(start_date)
    if raw_start is not None:
        start = start_of_day(parse_date(raw_start, "start_date"))

    end: Optional[datetime] = None
    raw_end = _present(end_date)
    if raw_end is not None:
        end = end_of_day(parse_date(raw_end, "end_date"))

    return FilterDescriptor(field=parsed_field, start=start, end=end)

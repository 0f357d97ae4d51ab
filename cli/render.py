from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer

_COLUMNS = ("temperature", "humidity", "pressure")


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_measurements(rows: List[Dict[str, Any]]) -> None:
    echo_heading(f"Measurements ({len(rows)})")
    for row in rows:
        values = [f"{column}={row[column]}" for column in _COLUMNS if column in row]
        typer.echo(f"  {row.get('timestamp')}  {' '.join(values)}")


def render_metrics(payload: Dict[str, Any]) -> None:
    echo_heading(f"Metrics for {payload.get('field')}")
    echo_key_values(
        [
            ("count", payload.get("count")),
            ("avg", payload.get("avg")),
            ("min", payload.get("min")),
            ("max", payload.get("max")),
            ("stdDev", payload.get("stdDev")),
        ]
    )


def render_fields(payload: Dict[str, Any]) -> None:
    echo_heading("Fields")
    descriptions = payload.get("descriptions") or {}
    for name in payload.get("fields") or []:
        typer.echo(f"  - {name}: {descriptions.get(name, '')}")

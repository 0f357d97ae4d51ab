from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import echo_key_values, render_fields, render_measurements, render_metrics
from datastore.observation_table import build_default_table
from logging_config import configure_logging
from services.collector import CollectorError, WeatherCollector
from settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for querying and feeding the weather observation service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)

_FIELD_HELP = "One of temperature, humidity, pressure."


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP response.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("measurements")
def measurements_command(
    ctx: typer.Context,
    field: Optional[str] = typer.Option(None, "--field", "-f", help=_FIELD_HELP),
    start_date: Optional[str] = typer.Option(None, "--start-date", help="Inclusive start day, YYYY-MM-DD."),
    end_date: Optional[str] = typer.Option(None, "--end-date", help="Inclusive end day, YYYY-MM-DD."),
) -> None:
    """List stored observations."""
    state = _get_state(ctx)
    rows = state.client.get_measurements(field=field, start_date=start_date, end_date=end_date)
    render_measurements(rows)


@app.command("metrics")
def metrics_command(
    ctx: typer.Context,
    field: str = typer.Argument(..., help=_FIELD_HELP),
    start_date: Optional[str] = typer.Option(None, "--start-date", help="Inclusive start day, YYYY-MM-DD."),
    end_date: Optional[str] = typer.Option(None, "--end-date", help="Inclusive end day, YYYY-MM-DD."),
) -> None:
    """Show count, average, min, max and standard deviation for a field."""
    state = _get_state(ctx)
    payload = state.client.get_metrics(field, start_date=start_date, end_date=end_date)
    render_metrics(payload)


@app.command("fields")
def fields_command(ctx: typer.Context) -> None:
    """List the queryable fields."""
    state = _get_state(ctx)
    render_fields(state.client.get_fields())


@app.command("collect")
def collect_command() -> None:
    """Fetch the current weather and append it to the local observation table."""
    configure_logging()
    settings = get_settings()
    collector = WeatherCollector.from_settings(settings, build_default_table())
    try:
        observation = collector.collect()
    except CollectorError as exc:
        logger.error("Error fetching weather data: %s", exc, extra={"city": settings.openweather_city})
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    finally:
        collector.close()

    typer.secho("Weather data collected and stored successfully.", fg=typer.colors.GREEN)
    echo_key_values(
        [
            ("timestamp", observation.timestamp.isoformat()),
            ("temperature", observation.temperature),
            ("humidity", observation.humidity),
            ("pressure", observation.pressure),
        ]
    )

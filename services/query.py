"""Query orchestration for stored weather observations."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from app.schemas import MetricsResponse
from datastore.observation_table import ObservationTable, build_default_table
from services.aggregator import AggregationEngine
from services.errors import InternalError, QueryError
from services.formatter import format_metrics, format_records
from services.planner import plan_query, run_list_query
from services.validator import parse_filter
from settings import get_settings

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "An error occurred while fetching data"
METRICS_FAILED_MESSAGE = "An error occurred while calculating metrics"


class QueryService:
    """Validates request parameters and answers list and metrics queries."""

    def __init__(self, table: ObservationTable, engine: AggregationEngine) -> None:
        self.table = table
        self.engine = engine

    def list_measurements(
        self,
        field: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Return matching observations ordered by timestamp."""
        context = {"field": field, "start_date": start_date, "end_date": end_date}
        descriptor = parse_filter(field, start_date, end_date)
        plan = plan_query(descriptor)

        try:
            rows = run_list_query(self.table, plan)
        except QueryError:
            raise
        except Exception as exc:
            logger.exception("Error fetching measurements", extra=context)
            raise InternalError(FETCH_FAILED_MESSAGE) from exc

        logger.info("Fetched measurements", extra={**context, "row_count": len(rows)})
        return format_records(rows)

    def compute_metrics(
        self,
        field: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> MetricsResponse:
        """Return rounded summary statistics for ``field``."""
        context = {"field": field, "start_date": start_date, "end_date": end_date}
        descriptor = parse_filter(field, start_date, end_date, require_field=True)
        plan = plan_query(descriptor)
        assert plan.field is not None

        try:
            stats = self.engine.compute(self.table, plan.field, plan.time_range)
        except QueryError:
            raise
        except Exception as exc:
            logger.exception("Error calculating metrics", extra=context)
            raise InternalError(METRICS_FAILED_MESSAGE) from exc

        logger.info(
            "Calculated metrics",
            extra={**context, "row_count": stats.count, "strategy": self.engine.strategy},
        )
        return format_metrics(stats)


@lru_cache
def build_default_query_service(strategy: Optional[str] = None) -> QueryService:
    """Factory that wires the query service with the configured table."""
    settings = get_settings()
    table = build_default_table()
    engine = AggregationEngine(strategy or settings.aggregation_strategy)
    return QueryService(table=table, engine=engine)

"""FastAPI adapter for observability dashboard endpoints."""

from fastapi import APIRouter, Query, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from agentobs.adapters.frameworks.query_params import (
    _parse_level_param,
    _parse_limit_param,
    _parse_window_param,
)
from agentobs.context import ObservabilityContext
from agentobs.core.encoding.ndjson import encode_logs
from agentobs.core.encoding.prometheus import encode_analytics

PROMETHEUS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def create_observability_router(context: ObservabilityContext) -> APIRouter:
    """Create a FastAPI router exposing analytics, logs, alerts and exports.

    Args:
        context: The observability context to read from.

    Returns:
        APIRouter with /analytics, /logs, /alerts, /metrics, /export/json
        and /export/csv endpoints configured.
    """
    router = APIRouter()

    @router.get("/analytics")
    async def get_analytics(window_ms: str | None = Query(default=None)) -> JSONResponse:
        """Return windowed analytics as JSON.

        Args:
            window_ms: Trailing window in milliseconds.
        """
        analytics = context.get_analytics(_parse_window_param(window_ms))
        return JSONResponse(content=analytics.to_dict())

    @router.get("/logs")
    async def get_logs(
        level: str | None = Query(default=None),
        operation: str | None = Query(default=None),
        agent_id: str | None = Query(default=None),
        actor_id: str | None = Query(default=None),
        window_ms: str | None = Query(default=None),
        limit: str | None = Query(default=None),
    ) -> Response:
        """Return logs in NDJSON format, newest first."""
        entries = context.get_logs(
            level=_parse_level_param(level),
            operation=operation,
            agent_id=agent_id,
            actor_id=actor_id,
            window_ms=_parse_window_param(window_ms),
            limit=_parse_limit_param(limit),
        )
        return Response(content=encode_logs(entries), media_type="application/x-ndjson")

    @router.get("/alerts")
    async def get_alerts() -> JSONResponse:
        """Return current critical and warning alerts."""
        return JSONResponse(content=context.check_alerts().to_dict())

    @router.get("/metrics")
    async def get_metrics() -> Response:
        """Return window analytics in Prometheus text format."""
        body = encode_analytics(context.get_analytics(), context.config.metric_prefix)
        return Response(content=body, media_type=PROMETHEUS_CONTENT_TYPE)

    @router.get("/export/json")
    async def export_json() -> JSONResponse:
        """Return the JSON snapshot of analytics, recent logs and alerts."""
        snapshot = context.export_metrics().json_snapshot
        return JSONResponse(content=jsonable_encoder(snapshot))

    @router.get("/export/csv")
    async def export_csv() -> Response:
        """Return the most recent raw samples as CSV."""
        return Response(
            content=context.export_metrics().csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="metrics.csv"'},
        )

    return router

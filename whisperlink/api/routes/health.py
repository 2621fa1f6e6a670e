"""Health and metrics endpoints."""

import time

from fastapi import APIRouter, Request

from whisperlink.api.dependencies import StoreDep
from whisperlink.core.telemetry import get_metrics
from whisperlink.models.schemas import HealthResponse

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request, store: StoreDep) -> HealthResponse:
    """Liveness plus the number of unread secrets held in memory."""
    started = request.app.state.started_at
    return HealthResponse(
        status="ok",
        active_secrets=store.size(),
        uptime_seconds=round(max(time.monotonic() - started, 0.0), 3),
    )


@router.get("/metrics")
async def metrics(request: Request, store: StoreDep) -> dict:
    """Simple JSON metrics endpoint for operational visibility."""
    snapshot = get_metrics()
    reaper = request.app.state.reaper
    last = reaper.last_report
    return {
        **snapshot,
        "store_size": store.size(),
        "reaper": {
            "running": reaper.running,
            "last_sweep_at": last.swept_at if last else None,
            "last_sweep_removed": last.removed if last else None,
        },
    }

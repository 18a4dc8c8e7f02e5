"""Health check endpoint for the Quality Gates service."""
from __future__ import annotations

import asyncio
import sqlite3
import time

from fastapi import APIRouter, Request

from src.shared.constants import QUALITY_GATES_SERVICE_NAME, VERSION
from src.shared.models.qualitygates import HealthStatus

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthStatus)
async def health(request: Request) -> HealthStatus:
    """Report service liveness and database connectivity."""

    def _check() -> HealthStatus:
        db_status = "connected"
        pool = getattr(request.app.state, "pool", None)
        if pool is None:
            db_status = "disconnected"
        else:
            try:
                pool.get().execute("SELECT 1")
            except (sqlite3.Error, OSError):
                db_status = "disconnected"

        start_time = getattr(request.app.state, "start_time", time.time())
        return HealthStatus(
            status="healthy" if db_status == "connected" else "degraded",
            service_name=QUALITY_GATES_SERVICE_NAME,
            version=VERSION,
            database=db_status,
            uptime_seconds=time.time() - start_time,
        )

    return await asyncio.to_thread(_check)

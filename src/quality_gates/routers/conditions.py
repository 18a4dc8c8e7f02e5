"""Quality gate condition actions."""
from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Query, Request, Response

from src.quality_gates.routers.params import (
    PARAM_GATE_ID,
    PARAM_ID,
    PARAM_METRIC,
    PARAM_OPERATOR,
    PARAM_PERIOD,
    mandatory_param,
    param_as_int,
    parse_id,
)
from src.quality_gates.services.gate_store import QualityGateStore

router = APIRouter(prefix="/api/qualitygates", tags=["conditions"])


@router.post("/create_condition")
async def create_condition(
    request: Request,
    gateId: str | None = Query(None),
    metric: str | None = Query(None),
    op: str | None = Query(None),
    warning: str | None = Query(None),
    error: str | None = Query(None),
    period: str | None = Query(None),
) -> dict[str, Any]:
    """Add a new condition to a quality gate."""
    store = QualityGateStore(request.app.state.pool)
    condition = await asyncio.to_thread(
        store.create_condition,
        parse_id(gateId, PARAM_GATE_ID),
        mandatory_param(metric, PARAM_METRIC),
        mandatory_param(op, PARAM_OPERATOR),
        warning,
        error,
        param_as_int(period, PARAM_PERIOD),
    )
    return condition.to_payload()


@router.post("/update_condition")
async def update_condition(
    request: Request,
    id: str | None = Query(None),
    metric: str | None = Query(None),
    op: str | None = Query(None),
    warning: str | None = Query(None),
    error: str | None = Query(None),
    period: str | None = Query(None),
) -> dict[str, Any]:
    """Update a condition attached to a quality gate."""
    store = QualityGateStore(request.app.state.pool)
    condition = await asyncio.to_thread(
        store.update_condition,
        parse_id(id, PARAM_ID),
        mandatory_param(metric, PARAM_METRIC),
        mandatory_param(op, PARAM_OPERATOR),
        warning,
        error,
        param_as_int(period, PARAM_PERIOD),
    )
    return condition.to_payload()


@router.post("/delete_condition", status_code=204)
async def delete_condition(request: Request, id: str | None = Query(None)) -> Response:
    """Remove a condition from a quality gate."""
    store = QualityGateStore(request.app.state.pool)
    await asyncio.to_thread(store.delete_condition, parse_id(id, PARAM_ID))
    return Response(status_code=204)

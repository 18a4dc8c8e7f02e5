"""Quality gate actions: gate CRUD, default gate and project association."""
from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Query, Request, Response

from src.quality_gates.routers.params import (
    PARAM_GATE_ID,
    PARAM_ID,
    PARAM_NAME,
    PARAM_PAGE,
    PARAM_PAGE_SIZE,
    PARAM_PROJECT_ID,
    mandatory_param,
    param_as_int,
    parse_id,
)
from src.quality_gates.services.gate_store import QualityGateStore
from src.quality_gates.services.project_finder import QgateProjectFinder
from src.shared.errors import BadRequestError
from src.shared.models.qualitygates import ProjectQgateAssociationQuery

router = APIRouter(prefix="/api/qualitygates", tags=["qualitygates"])


def _store(request: Request) -> QualityGateStore:
    return QualityGateStore(request.app.state.pool)


@router.post("/create")
async def create(request: Request, name: str | None = Query(None)) -> dict[str, Any]:
    """Create a quality gate, given its name."""
    gate = await asyncio.to_thread(
        _store(request).create, mandatory_param(name, PARAM_NAME)
    )
    return gate.to_payload()


@router.post("/copy")
async def copy(
    request: Request,
    id: str | None = Query(None),
    name: str | None = Query(None),
) -> dict[str, Any]:
    """Copy a quality gate, given its id and the name for the new gate."""
    gate = await asyncio.to_thread(
        _store(request).copy,
        parse_id(id, PARAM_ID),
        mandatory_param(name, PARAM_NAME),
    )
    return gate.to_payload()


@router.post("/set_as_default", status_code=204)
async def set_as_default(request: Request, id: str | None = Query(None)) -> Response:
    await asyncio.to_thread(_store(request).set_default, parse_id(id, PARAM_ID))
    return Response(status_code=204)


@router.post("/unset_default", status_code=204)
async def unset_default(request: Request) -> Response:
    await asyncio.to_thread(_store(request).set_default, None)
    return Response(status_code=204)


@router.post("/rename")
async def rename(
    request: Request,
    id: str | None = Query(None),
    name: str | None = Query(None),
) -> dict[str, Any]:
    """Rename a quality gate, given its id and new name."""
    gate = await asyncio.to_thread(
        _store(request).rename,
        parse_id(id, PARAM_ID),
        mandatory_param(name, PARAM_NAME),
    )
    return gate.to_payload()


@router.get("/list")
async def list_gates(request: Request) -> dict[str, Any]:
    """List all quality gates, with the id of the default one when set."""
    store = _store(request)

    def _list() -> dict[str, Any]:
        payload: dict[str, Any] = {
            "qualitygates": [gate.to_payload() for gate in store.list()]
        }
        default = store.get_default()
        if default is not None:
            payload["default"] = default.id
        return payload

    return await asyncio.to_thread(_list)


@router.get("/show")
async def show(
    request: Request,
    id: str | None = Query(None),
    name: str | None = Query(None),
) -> dict[str, Any]:
    """Show a quality gate with its conditions, by id or by name."""
    if id is None and name is None:
        raise BadRequestError(detail="Either one of 'id' or 'name' is required.")
    if id is not None and name is not None:
        raise BadRequestError(detail="Only one of 'id' or 'name' must be provided.")
    store = _store(request)

    def _show() -> dict[str, Any]:
        if id is not None:
            gate = store.get(parse_id(id, PARAM_ID))
        else:
            gate = store.get_by_name(name)
        payload = gate.to_payload()
        conditions = store.list_conditions(gate.id)
        if conditions:
            payload["conditions"] = [c.to_payload() for c in conditions]
        return payload

    return await asyncio.to_thread(_show)


@router.post("/destroy", status_code=204)
async def destroy(request: Request, id: str | None = Query(None)) -> Response:
    await asyncio.to_thread(_store(request).delete, parse_id(id, PARAM_ID))
    return Response(status_code=204)


@router.get("/search")
async def search(
    request: Request,
    gateId: str | None = Query(None),
    selected: str | None = Query(None),
    query: str | None = Query(None),
    page: str | None = Query(None),
    pageSize: str | None = Query(None),
) -> dict[str, Any]:
    """Search projects associated (or not) with a quality gate."""
    page_size = param_as_int(pageSize, PARAM_PAGE_SIZE)
    if page_size is None:
        page_size = request.app.state.config.default_page_size
    association_query = ProjectQgateAssociationQuery(
        gate_id=parse_id(gateId, PARAM_GATE_ID),
        membership=selected,
        project_search=query,
        page_index=param_as_int(page, PARAM_PAGE),
        page_size=min(page_size, request.app.state.config.max_page_size),
    )
    finder = QgateProjectFinder(request.app.state.pool)
    associations = await asyncio.to_thread(finder.find, association_query)
    return associations.to_payload()


@router.post("/select", status_code=204)
async def select(
    request: Request,
    gateId: str | None = Query(None),
    projectId: str | None = Query(None),
) -> Response:
    """Associate a project with a quality gate."""
    await asyncio.to_thread(
        _store(request).associate_project,
        parse_id(gateId, PARAM_GATE_ID),
        parse_id(projectId, PARAM_PROJECT_ID),
    )
    return Response(status_code=204)


@router.post("/deselect", status_code=204)
async def deselect(
    request: Request,
    gateId: str | None = Query(None),
    projectId: str | None = Query(None),
) -> Response:
    """Dissociate a project from a quality gate."""
    await asyncio.to_thread(
        _store(request).dissociate_project,
        parse_id(gateId, PARAM_GATE_ID),
        parse_id(projectId, PARAM_PROJECT_ID),
    )
    return Response(status_code=204)

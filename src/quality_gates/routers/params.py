"""Request parameter parsing shared by the quality gate routers."""
from __future__ import annotations

from src.shared.errors import BadRequestError

PARAM_ID = "id"
PARAM_NAME = "name"
PARAM_GATE_ID = "gateId"
PARAM_PROJECT_ID = "projectId"
PARAM_METRIC = "metric"
PARAM_OPERATOR = "op"
PARAM_PERIOD = "period"
PARAM_PAGE = "page"
PARAM_PAGE_SIZE = "pageSize"


def mandatory_param(value: str | None, name: str) -> str:
    if value is None or value == "":
        raise BadRequestError(detail=f"The '{name}' parameter is missing")
    return value


def parse_id(value: str | None, name: str) -> int:
    """Parse a mandatory numeric id parameter."""
    try:
        return int(mandatory_param(value, name))
    except ValueError:
        raise BadRequestError(detail=f"{name} must be a valid long value") from None


def param_as_int(value: str | None, name: str) -> int | None:
    """Parse an optional integer parameter; absent stays ``None``."""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise BadRequestError(detail=f"{name} must be a valid integer value") from None

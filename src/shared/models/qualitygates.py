"""Quality gate Pydantic v2 data models."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.shared.constants import (
    DEFAULT_PAGE_INDEX,
    DEFAULT_PAGE_SIZE,
    MAX_GATE_NAME_LENGTH,
    MAX_PAGE_SIZE,
    MAX_PERIOD,
    MEMBERSHIP_DESELECTED,
    MEMBERSHIP_SELECTED,
    MIN_PERIOD,
)


class ConditionOperator(str, Enum):
    """Comparison operators of a quality gate condition."""
    EQ = "EQ"
    NE = "NE"
    LT = "LT"
    GT = "GT"


class QualityGate(BaseModel):
    """A stored quality gate."""
    id: int
    name: str = Field(..., max_length=MAX_GATE_NAME_LENGTH)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


class QualityGateCondition(BaseModel):
    """A pass/fail condition attached to a quality gate."""
    id: int
    gate_id: int
    metric_key: str
    operator: ConditionOperator
    warning_threshold: str | None = None
    error_threshold: str | None = None
    period: int | None = Field(default=None, ge=MIN_PERIOD, le=MAX_PERIOD)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    def to_payload(self) -> dict[str, Any]:
        """Render as ``{id, metric, op, warning?, error?, period?}``."""
        payload: dict[str, Any] = {
            "id": self.id,
            "metric": self.metric_key,
            "op": self.operator.value,
        }
        if self.warning_threshold is not None:
            payload["warning"] = self.warning_threshold
        if self.error_threshold is not None:
            payload["error"] = self.error_threshold
        if self.period is not None:
            payload["period"] = self.period
        return payload


class ProjectQgateAssociation(BaseModel):
    """One project's membership status relative to a gate."""
    id: int
    name: str
    is_member: bool

    model_config = {"frozen": True, "from_attributes": True}

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "selected": self.is_member}


class ProjectQgateAssociationQuery(BaseModel):
    """Parameters of a project association search.

    ``None`` for any optional field means "use the default": both membership
    states, no name filter, first page, :data:`DEFAULT_PAGE_SIZE` results.
    """
    gate_id: int
    membership: str | None = None
    project_search: str | None = None
    page_index: int = DEFAULT_PAGE_INDEX
    page_size: int = DEFAULT_PAGE_SIZE

    model_config = {"frozen": True}

    @field_validator("membership", mode="before")
    @classmethod
    def normalize_membership(cls, value: Any) -> str | None:
        if value in (MEMBERSHIP_SELECTED, MEMBERSHIP_DESELECTED):
            return value
        return None

    @field_validator("project_search", mode="before")
    @classmethod
    def normalize_project_search(cls, value: Any) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("page_index", mode="before")
    @classmethod
    def default_page_index(cls, value: Any) -> int:
        if value is None:
            return DEFAULT_PAGE_INDEX
        return max(DEFAULT_PAGE_INDEX, int(value))

    @field_validator("page_size", mode="before")
    @classmethod
    def clamp_page_size(cls, value: Any) -> int:
        if value is None:
            return DEFAULT_PAGE_SIZE
        return max(1, min(int(value), MAX_PAGE_SIZE))

    @property
    def offset(self) -> int:
        """Number of filtered projects that precede the requested page."""
        return (self.page_index - 1) * self.page_size


class Association(BaseModel):
    """A page of project associations for a gate."""
    projects: list[ProjectQgateAssociation] = Field(default_factory=list)
    has_more_results: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Render as ``{more, results: [{id, name, selected}]}``."""
        return {
            "more": self.has_more_results,
            "results": [project.to_payload() for project in self.projects],
        }


class HealthStatus(BaseModel):
    """Health status of a service."""
    status: str = Field(
        default="healthy",
        pattern=r"^(healthy|degraded|unhealthy)$"
    )
    service_name: str
    version: str
    database: str = Field(
        default="connected",
        pattern=r"^(connected|disconnected)$"
    )
    uptime_seconds: float
    details: dict[str, Any] = Field(default_factory=dict)

    model_config = {"from_attributes": True}

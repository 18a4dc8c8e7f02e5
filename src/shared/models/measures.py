"""Measurement value objects consumed by the measure selector.

A measurement is either *plain* or *rule-attributed*.  The distinction is an
explicit :class:`MeasurementKind` discriminant rather than a subclass, so the
selector can switch on it.  All models here are frozen: equality is by value
and instances are hashable.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class MeasurementKind(str, Enum):
    """Discriminant between plain and rule-attributed measurements."""
    PLAIN = "plain"
    RULE = "rule"


class Metric(BaseModel):
    """A metric definition.  Only the key takes part in selection."""
    key: str = Field(..., min_length=1)
    name: str | None = None

    model_config = {"frozen": True}


class Characteristic(BaseModel):
    """A classification dimension, e.g. a technical-debt category."""
    key: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class Requirement(BaseModel):
    """Deprecated scoping axis, superseded by :class:`Characteristic`."""
    key: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class Rule(BaseModel):
    """A static-analysis rule, identified by repository and rule key."""
    repository_key: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.repository_key}:{self.key}"


class Measurement(BaseModel):
    """One recorded value for a metric on a scope.

    ``person_id`` set means the value is attributed to an individual; such
    measurements are never selected.  ``rule`` may only be set on
    :attr:`MeasurementKind.RULE` measurements.
    """
    metric_key: str = Field(..., min_length=1)
    kind: MeasurementKind = MeasurementKind.PLAIN
    value: float | None = None
    data: str | None = None
    characteristic: Characteristic | None = None
    requirement: Requirement | None = None
    person_id: int | str | None = None
    rule: Rule | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_rule_only_on_rule_measures(self) -> "Measurement":
        if self.kind is MeasurementKind.PLAIN and self.rule is not None:
            raise ValueError("a plain measurement cannot carry a rule")
        return self

    @property
    def is_rule_attributed(self) -> bool:
        return self.kind is MeasurementKind.RULE


def rule_measure(metric_key: str, rule: Rule | None, **fields: Any) -> Measurement:
    """Build a rule-attributed :class:`Measurement`."""
    return Measurement(
        metric_key=metric_key, kind=MeasurementKind.RULE, rule=rule, **fields
    )

"""Measure selection -- pick the measurement that represents a metric.

A :data:`Criterion` is one of a closed set of frozen value objects.  The
single entry point :func:`select` scans the candidates in order and applies
the criterion's predicate:

* single-result criteria return the **first** qualifying measurement, or
  ``None``;
* :class:`All` returns the candidates unchanged;
* :class:`AllByMetricForRules` returns every qualifying measurement, in
  input order.

Measurements attributed to a person (``person_id`` set) never qualify.
Absence of a match is never an error.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

from src.shared.models.measures import (
    Characteristic,
    Measurement,
    MeasurementKind,
    Metric,
    Requirement,
    Rule,
)


@dataclass(frozen=True)
class All:
    """Every candidate, unfiltered."""

    @property
    def metric_key(self) -> str | None:
        return None


@dataclass(frozen=True)
class ByMetric:
    """The plain measurement of a metric, outside any characteristic."""
    metric_key: str


@dataclass(frozen=True)
class ByMetricAndCharacteristic:
    """The plain measurement of a metric scoped to a characteristic."""
    metric_key: str
    characteristic: Characteristic | None


@dataclass(frozen=True)
class ByMetricAndRequirement:
    """The plain measurement of a metric scoped to a requirement.

    Requirements are a deprecated axis; prefer
    :class:`ByMetricAndCharacteristic`.
    """
    metric_key: str
    requirement: Requirement | None


@dataclass(frozen=True)
class ByExactMeasurement:
    """The candidate equal to a given measurement."""
    measurement: Measurement

    @property
    def metric_key(self) -> str | None:
        return None


@dataclass(frozen=True)
class ByMetricAndRule:
    """The rule-attributed measurement of a metric for one rule."""
    metric_key: str
    rule: Rule


@dataclass(frozen=True)
class AllByMetricForRules:
    """Every rule-attributed measurement of a metric."""
    metric_key: str


Criterion = Union[
    All,
    ByMetric,
    ByMetricAndCharacteristic,
    ByMetricAndRequirement,
    ByExactMeasurement,
    ByMetricAndRule,
    AllByMetricForRules,
]

_CRITERIA = (
    All,
    ByMetric,
    ByMetricAndCharacteristic,
    ByMetricAndRequirement,
    ByExactMeasurement,
    ByMetricAndRule,
    AllByMetricForRules,
)

MetricRef = Union[Metric, str]


# ------------------------------------------------------------------
# Factories
# ------------------------------------------------------------------

def _key(metric: MetricRef) -> str:
    return metric.key if isinstance(metric, Metric) else metric


def all_measures() -> All:
    return All()


def metric(metric: MetricRef) -> ByMetric:
    return ByMetric(_key(metric))


def characteristic(metric: MetricRef, characteristic: Characteristic | None) -> ByMetricAndCharacteristic:
    return ByMetricAndCharacteristic(_key(metric), characteristic)


def requirement(metric: MetricRef, requirement: Requirement | None) -> ByMetricAndRequirement:
    return ByMetricAndRequirement(_key(metric), requirement)


def measure(measurement: Measurement) -> ByExactMeasurement:
    return ByExactMeasurement(measurement)


def rule(metric: MetricRef, rule: Rule) -> ByMetricAndRule:
    return ByMetricAndRule(_key(metric), rule)


def rules(metric: MetricRef) -> AllByMetricForRules:
    return AllByMetricForRules(_key(metric))


# ------------------------------------------------------------------
# Predicates
# ------------------------------------------------------------------

def _is_plain_for(measurement: Measurement, metric_key: str) -> bool:
    return (
        measurement.kind is MeasurementKind.PLAIN
        and measurement.person_id is None
        and measurement.metric_key == metric_key
    )


def _is_rule_for(measurement: Measurement, metric_key: str) -> bool:
    return (
        measurement.kind is MeasurementKind.RULE
        and measurement.person_id is None
        and measurement.metric_key == metric_key
        and measurement.rule is not None
    )


def matches(criterion: Criterion, measurement: Measurement) -> bool:
    """Return whether *measurement* satisfies *criterion*.

    Raises:
        TypeError: *criterion* is not one of the known criteria.
    """
    if isinstance(criterion, All):
        return True
    if isinstance(criterion, ByMetric):
        return (
            _is_plain_for(measurement, criterion.metric_key)
            and measurement.characteristic is None
        )
    if isinstance(criterion, ByMetricAndCharacteristic):
        # A null axis on either side never matches.
        return (
            _is_plain_for(measurement, criterion.metric_key)
            and measurement.characteristic is not None
            and measurement.characteristic == criterion.characteristic
        )
    if isinstance(criterion, ByMetricAndRequirement):
        return (
            _is_plain_for(measurement, criterion.metric_key)
            and measurement.requirement is not None
            and measurement.requirement == criterion.requirement
        )
    if isinstance(criterion, ByExactMeasurement):
        return measurement.person_id is None and measurement == criterion.measurement
    if isinstance(criterion, ByMetricAndRule):
        return (
            _is_rule_for(measurement, criterion.metric_key)
            and measurement.rule == criterion.rule
        )
    if isinstance(criterion, AllByMetricForRules):
        return _is_rule_for(measurement, criterion.metric_key)
    raise TypeError(f"Unsupported measure criterion: {type(criterion).__name__}")


def select(
    criterion: Criterion,
    candidates: Iterable[Measurement] | None,
) -> Measurement | Iterable[Measurement] | None:
    """Select from *candidates* the measurement(s) matching *criterion*.

    Args:
        criterion: Any member of :data:`Criterion`.
        candidates: Measurements in caller order.  ``None`` is accepted and
            treated as "nothing recorded".

    Returns:
        * :class:`All` -- *candidates* itself (``None`` stays ``None``).
        * :class:`AllByMetricForRules` -- a new list of every match, in
          input order; empty when nothing matches.
        * any other criterion -- the first match, or ``None``.
    """
    if not isinstance(criterion, _CRITERIA):
        raise TypeError(f"Unsupported measure criterion: {type(criterion).__name__}")
    if isinstance(criterion, All):
        return candidates
    if isinstance(criterion, AllByMetricForRules):
        if candidates is None:
            return []
        return [m for m in candidates if matches(criterion, m)]
    if candidates is None:
        return None
    for measurement in candidates:
        if matches(criterion, measurement):
            return measurement
    return None


def select_one(criterion: Criterion, candidates: Iterable[Measurement] | None) -> Measurement | None:
    """Typed wrapper of :func:`select` for single-result criteria."""
    if isinstance(criterion, (All, AllByMetricForRules)):
        raise TypeError(f"{type(criterion).__name__} selects a collection")
    return select(criterion, candidates)


def select_all(criterion: Criterion, candidates: Iterable[Measurement] | None) -> list[Measurement]:
    """Typed wrapper of :func:`select` for collection criteria.

    Always returns a list; ``None`` candidates give an empty list.
    """
    if isinstance(criterion, All):
        return list(candidates or [])
    if isinstance(criterion, AllByMetricForRules):
        return select(criterion, candidates)
    raise TypeError(f"{type(criterion).__name__} selects a single measurement")


def group_by_metric(measurements: Iterable[Measurement]) -> dict[str, list[Measurement]]:
    """Index *measurements* by metric key, preserving order within each key.

    Lets a caller holding many measurements pass only the relevant bucket to
    :func:`select` (``candidates = index.get(criterion.metric_key)`` when the
    criterion exposes a metric key).
    """
    index: dict[str, list[Measurement]] = {}
    for measurement in measurements:
        index.setdefault(measurement.metric_key, []).append(measurement)
    return index

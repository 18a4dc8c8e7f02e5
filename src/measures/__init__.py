"""Measure selection for quality gate evaluation."""

from src.measures.filters import (
    All,
    AllByMetricForRules,
    ByExactMeasurement,
    ByMetric,
    ByMetricAndCharacteristic,
    ByMetricAndRequirement,
    ByMetricAndRule,
    Criterion,
    select,
    select_all,
    select_one,
)

__all__ = [
    "All",
    "AllByMetricForRules",
    "ByExactMeasurement",
    "ByMetric",
    "ByMetricAndCharacteristic",
    "ByMetricAndRequirement",
    "ByMetricAndRule",
    "Criterion",
    "select",
    "select_all",
    "select_one",
]

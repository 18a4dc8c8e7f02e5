"""Tests for measure selection."""
from __future__ import annotations

import pytest

from src.measures import filters
from src.measures.filters import (
    All,
    AllByMetricForRules,
    ByExactMeasurement,
    ByMetric,
    ByMetricAndCharacteristic,
    ByMetricAndRequirement,
    ByMetricAndRule,
    group_by_metric,
    select,
    select_all,
    select_one,
)
from src.shared.models.measures import Measurement, Metric, rule_measure


# ------------------------------------------------------------------
# All
# ------------------------------------------------------------------

class TestAll:
    def test_returns_candidates_unchanged(self, coverage_measures):
        assert select(All(), coverage_measures) is coverage_measures

    def test_none_stays_none(self):
        assert select(All(), None) is None

    def test_select_all_gives_list(self, coverage_measures):
        assert select_all(All(), coverage_measures) == coverage_measures
        assert select_all(All(), None) == []


# ------------------------------------------------------------------
# ByMetric
# ------------------------------------------------------------------

class TestByMetric:
    def test_plain_wins_over_rule_measure(self, coverage_measures):
        assert select(ByMetric("coverage"), coverage_measures) is coverage_measures[0]

    def test_rule_measure_never_matches(self, null_rule):
        candidates = [rule_measure("coverage", null_rule)]
        assert select(ByMetric("coverage"), candidates) is None

    def test_ignores_other_metrics(self):
        candidates = [Measurement(metric_key="ncloc"), Measurement(metric_key="coverage")]
        assert select(ByMetric("coverage"), candidates) is candidates[1]

    def test_ignores_characteristic_scoped_measures(self, reliability):
        scoped = Measurement(metric_key="sqale_index", characteristic=reliability, value=5.0)
        unscoped = Measurement(metric_key="sqale_index", value=12.0)
        assert select(ByMetric("sqale_index"), [scoped, unscoped]) is unscoped
        assert select(ByMetric("sqale_index"), [scoped]) is None

    def test_first_match_wins(self):
        first = Measurement(metric_key="coverage", value=1.0)
        second = Measurement(metric_key="coverage", value=2.0)
        assert select(ByMetric("coverage"), [first, second]) is first

    def test_person_measure_skipped(self):
        personal = Measurement(metric_key="coverage", person_id=42)
        team = Measurement(metric_key="coverage")
        assert select(ByMetric("coverage"), [personal, team]) is team

    def test_empty_and_none(self):
        assert select(ByMetric("coverage"), []) is None
        assert select(ByMetric("coverage"), None) is None

    def test_accepts_any_iterable(self):
        candidates = (m for m in [Measurement(metric_key="coverage")])
        assert select(ByMetric("coverage"), candidates).metric_key == "coverage"

    def test_result_always_plain_unattributed_and_same_metric(self, null_rule, reliability):
        pool = [
            rule_measure("coverage", null_rule),
            Measurement(metric_key="coverage", person_id="7"),
            Measurement(metric_key="coverage", characteristic=reliability),
            Measurement(metric_key="ncloc"),
            Measurement(metric_key="coverage", value=55.0),
        ]
        for size in range(len(pool) + 1):
            result = select(ByMetric("coverage"), pool[:size])
            if result is not None:
                assert result.metric_key == "coverage"
                assert not result.is_rule_attributed
                assert result.person_id is None


# ------------------------------------------------------------------
# ByMetricAndCharacteristic
# ------------------------------------------------------------------

class TestByMetricAndCharacteristic:
    def test_matches_same_characteristic(self, reliability, portability):
        a = Measurement(metric_key="sqale_index", characteristic=portability)
        b = Measurement(metric_key="sqale_index", characteristic=reliability)
        assert select(ByMetricAndCharacteristic("sqale_index", reliability), [a, b]) is b

    def test_null_candidate_never_matches_non_null_target(self, reliability):
        candidates = [Measurement(metric_key="sqale_index")]
        assert select(ByMetricAndCharacteristic("sqale_index", reliability), candidates) is None

    def test_non_null_candidate_never_matches_null_target(self, reliability):
        candidates = [Measurement(metric_key="sqale_index", characteristic=reliability)]
        assert select(ByMetricAndCharacteristic("sqale_index", None), candidates) is None

    def test_both_null_is_not_a_match(self):
        candidates = [Measurement(metric_key="sqale_index")]
        assert select(ByMetricAndCharacteristic("sqale_index", None), candidates) is None

    def test_rule_measure_never_matches(self, reliability, null_rule):
        candidates = [rule_measure("sqale_index", null_rule, characteristic=reliability)]
        assert select(ByMetricAndCharacteristic("sqale_index", reliability), candidates) is None

    def test_person_measure_skipped(self, reliability):
        candidates = [Measurement(metric_key="sqale_index", characteristic=reliability, person_id=1)]
        assert select(ByMetricAndCharacteristic("sqale_index", reliability), candidates) is None


# ------------------------------------------------------------------
# ByMetricAndRequirement
# ------------------------------------------------------------------

class TestByMetricAndRequirement:
    def test_matches_same_requirement(self, exception_handling):
        plain = Measurement(metric_key="sqale_index")
        scoped = Measurement(metric_key="sqale_index", requirement=exception_handling)
        criterion = ByMetricAndRequirement("sqale_index", exception_handling)
        assert select(criterion, [plain, scoped]) is scoped

    def test_null_handling(self, exception_handling):
        plain = Measurement(metric_key="sqale_index")
        scoped = Measurement(metric_key="sqale_index", requirement=exception_handling)
        assert select(ByMetricAndRequirement("sqale_index", exception_handling), [plain]) is None
        assert select(ByMetricAndRequirement("sqale_index", None), [plain, scoped]) is None


# ------------------------------------------------------------------
# ByExactMeasurement
# ------------------------------------------------------------------

class TestByExactMeasurement:
    def test_returns_equal_candidate(self, coverage_measures):
        target = Measurement(metric_key="coverage", value=80.0)
        result = select(ByExactMeasurement(target), coverage_measures)
        assert result is coverage_measures[0]

    def test_matches_rule_measure_by_value(self, coverage_measures, null_rule):
        target = rule_measure("coverage", null_rule, value=3.0)
        assert select(ByExactMeasurement(target), coverage_measures) is coverage_measures[1]

    def test_no_equal_candidate(self, coverage_measures):
        target = Measurement(metric_key="coverage", value=79.0)
        assert select(ByExactMeasurement(target), coverage_measures) is None

    def test_person_measure_never_selected(self):
        personal = Measurement(metric_key="coverage", person_id="42")
        assert select(ByExactMeasurement(personal), [personal]) is None


# ------------------------------------------------------------------
# Rule criteria
# ------------------------------------------------------------------

class TestByMetricAndRule:
    def test_selects_rule_measure(self, coverage_measures, null_rule):
        assert select(ByMetricAndRule("coverage", null_rule), coverage_measures) is coverage_measures[1]

    def test_other_rule_does_not_match(self, coverage_measures, cycle_rule):
        assert select(ByMetricAndRule("coverage", cycle_rule), coverage_measures) is None

    def test_rule_measure_without_rule_never_matches(self, null_rule):
        assert select(ByMetricAndRule("coverage", null_rule), [rule_measure("coverage", None)]) is None

    def test_person_measure_skipped(self, null_rule):
        candidates = [rule_measure("coverage", null_rule, person_id=3)]
        assert select(ByMetricAndRule("coverage", null_rule), candidates) is None


class TestAllByMetricForRules:
    def test_only_rule_measures(self, coverage_measures):
        assert select(AllByMetricForRules("coverage"), coverage_measures) == [coverage_measures[1]]

    def test_ordered_subsequence(self, null_rule, cycle_rule):
        pool = [
            rule_measure("violations", cycle_rule, value=1.0),
            Measurement(metric_key="violations", value=9.0),
            rule_measure("violations", None),
            rule_measure("violations", null_rule, person_id="42"),
            rule_measure("ncloc", null_rule),
            rule_measure("violations", null_rule, value=2.0),
        ]
        result = select(AllByMetricForRules("violations"), pool)
        assert result == [pool[0], pool[5]]

    def test_empty_and_none(self):
        assert select(AllByMetricForRules("violations"), []) == []
        assert select(AllByMetricForRules("violations"), None) == []

    def test_returns_new_list(self, null_rule):
        pool = [rule_measure("violations", null_rule)]
        result = select(AllByMetricForRules("violations"), pool)
        assert result == pool
        assert result is not pool


# ------------------------------------------------------------------
# Cross-cutting
# ------------------------------------------------------------------

def test_person_attributed_measure_is_never_selected(null_rule, reliability, exception_handling):
    personal = Measurement(
        metric_key="coverage",
        characteristic=reliability,
        person_id="42",
    )
    personal_plain = Measurement(metric_key="coverage", person_id="42")
    personal_req = Measurement(metric_key="coverage", requirement=exception_handling, person_id="42")
    personal_rule = rule_measure("coverage", null_rule, person_id="42")
    pool = [personal, personal_plain, personal_req, personal_rule]

    assert select(ByMetric("coverage"), pool) is None
    assert select(ByMetricAndCharacteristic("coverage", reliability), pool) is None
    assert select(ByMetricAndRequirement("coverage", exception_handling), pool) is None
    assert select(ByMetricAndRule("coverage", null_rule), pool) is None
    assert select(AllByMetricForRules("coverage"), pool) == []
    for m in pool:
        assert select(ByExactMeasurement(m), pool) is None


def test_unknown_criterion_rejected():
    with pytest.raises(TypeError):
        select(object(), [])
    with pytest.raises(TypeError):
        select(object(), None)


class TestFactories:
    def test_accept_metric_or_key(self, null_rule, reliability, exception_handling):
        coverage = Metric(key="coverage", name="Coverage")
        assert filters.metric(coverage) == ByMetric("coverage")
        assert filters.metric("coverage") == ByMetric("coverage")
        assert filters.characteristic(coverage, reliability) == ByMetricAndCharacteristic("coverage", reliability)
        assert filters.requirement("coverage", exception_handling) == ByMetricAndRequirement("coverage", exception_handling)
        assert filters.rule(coverage, null_rule) == ByMetricAndRule("coverage", null_rule)
        assert filters.rules(coverage) == AllByMetricForRules("coverage")
        assert filters.all_measures() == All()

    def test_metric_key_exposed_for_indexing(self):
        m = Measurement(metric_key="coverage")
        assert filters.metric("coverage").metric_key == "coverage"
        assert filters.rules("coverage").metric_key == "coverage"
        assert All().metric_key is None
        assert filters.measure(m).metric_key is None


class TestTypedWrappers:
    def test_select_one_rejects_collection_criteria(self, coverage_measures):
        with pytest.raises(TypeError):
            select_one(All(), coverage_measures)
        with pytest.raises(TypeError):
            select_one(AllByMetricForRules("coverage"), coverage_measures)

    def test_select_all_rejects_single_criteria(self, coverage_measures):
        with pytest.raises(TypeError):
            select_all(ByMetric("coverage"), coverage_measures)

    def test_select_one(self, coverage_measures):
        assert select_one(ByMetric("coverage"), coverage_measures) is coverage_measures[0]


def test_group_by_metric_feeds_select(null_rule):
    pool = [
        Measurement(metric_key="ncloc", value=100.0),
        rule_measure("violations", null_rule),
        Measurement(metric_key="violations", value=3.0),
    ]
    index = group_by_metric(pool)
    assert list(index) == ["ncloc", "violations"]
    criterion = ByMetric("violations")
    assert select(criterion, index.get(criterion.metric_key)) is pool[2]
    assert select(ByMetric("coverage"), index.get("coverage")) is None

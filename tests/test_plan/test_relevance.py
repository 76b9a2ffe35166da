"""Tests for src.test_suite.relevance."""
from __future__ import annotations

import pytest

from src.shared.models.scenarios import Scenario
from src.test_suite.relevance import (
    ASSESSMENT_WRITEBACK,
    BUNDLE_MANAGER,
    CONTRIBUTING_FACTORS,
    DOCUMENTATION,
    REGULATORY,
    RELEVANCE_RULES,
    SUPPRESSION,
    KeyMatch,
    RelevanceRule,
    relevant_categories,
)


def _scenario(key: str, required: list[str] | None = None) -> Scenario:
    return Scenario(key=key, name=key, product="sepsis", required_flags=required or [])


END_TO_END = {ASSESSMENT_WRITEBACK, DOCUMENTATION, REGULATORY}


class TestRelevantCategories:
    @pytest.mark.parametrize(
        "key",
        ["sepsis_ed", "sepsis_ed_full_flow", "adult_sepsis_ed_triage", "septic_shock", "septic_shock_icu"],
    )
    def test_end_to_end_family(self, key):
        assert relevant_categories(_scenario(key)) == END_TO_END

    def test_end_to_end_with_bundle_requirement(self):
        scenario = _scenario("sepsis_ed_full_flow", required=["bundle_tracking"])
        assert relevant_categories(scenario) == END_TO_END | {BUNDLE_MANAGER}

    def test_septic_shock_with_bundle_requirement(self):
        scenario = _scenario("septic_shock_ed", required=["sep1", "bundle_tracking"])
        assert BUNDLE_MANAGER in relevant_categories(scenario)

    def test_bundle_requirement_alone_adds_nothing(self):
        assert relevant_categories(_scenario("abx_other", required=["bundle_tracking"])) == frozenset()

    def test_no_sepsis_no_infection(self):
        assert relevant_categories(_scenario("no_sepsis_no_infection")) == {
            ASSESSMENT_WRITEBACK,
            CONTRIBUTING_FACTORS,
        }

    @pytest.mark.parametrize("key", ["abx_workflow", "comfort_care_suppression"])
    def test_suppression_scenarios(self, key):
        assert relevant_categories(_scenario(key)) == {SUPPRESSION}

    def test_septic_shock_rnf_to_icu_unions_both_rules(self):
        assert relevant_categories(_scenario("septic_shock_rnf_to_icu")) == END_TO_END | {
            CONTRIBUTING_FACTORS
        }

    @pytest.mark.parametrize(
        "key",
        ["abx_workflow_v2", "no_sepsis_no_infection_peds", "comfort_care", "rrt_floor", "sepsis"],
    )
    def test_exact_rules_do_not_match_near_keys(self, key):
        assert relevant_categories(_scenario(key)) == frozenset()

    def test_unknown_key_contributes_nothing(self):
        assert relevant_categories(_scenario("brand_new_scenario")) == frozenset()


class TestRelevanceRule:
    def test_equals_rule(self):
        rule = RelevanceRule("abx_workflow", KeyMatch.EQUALS, (SUPPRESSION,))
        assert rule.applies_to(_scenario("abx_workflow"))
        assert not rule.applies_to(_scenario("abx_workflow_2"))

    def test_contains_rule(self):
        rule = RelevanceRule("sepsis_ed", KeyMatch.CONTAINS, (REGULATORY,))
        assert rule.applies_to(_scenario("x_sepsis_ed_y"))

    def test_required_flag_condition(self):
        rule = RelevanceRule(
            "sepsis_ed", KeyMatch.CONTAINS, (BUNDLE_MANAGER,), required_flag="bundle_tracking"
        )
        assert not rule.applies_to(_scenario("sepsis_ed"))
        assert rule.applies_to(_scenario("sepsis_ed", required=["bundle_tracking"]))

    def test_custom_rule_table(self):
        rules = (RelevanceRule("rrt_floor", KeyMatch.EQUALS, ("rrt_scoring",)),)
        assert relevant_categories(_scenario("rrt_floor"), rules) == {"rrt_scoring"}

    def test_table_is_finite_and_explicit(self):
        assert len(RELEVANCE_RULES) == 8
        assert all(isinstance(rule, RelevanceRule) for rule in RELEVANCE_RULES)

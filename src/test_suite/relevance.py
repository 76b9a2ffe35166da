"""Which enabled-flag categories are verified inside which scenario.

The mapping is an explicit table keyed on scenario keys.  A scenario that
matches no rule gets no flag verification block.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.shared.models.scenarios import Scenario

ASSESSMENT_WRITEBACK = "assessment_writeback"
BUNDLE_MANAGER = "bundle_manager"
CONTRIBUTING_FACTORS = "contributing_factors"
DOCUMENTATION = "documentation"
REGULATORY = "regulatory"
SUPPRESSION = "suppression"


class KeyMatch(str, Enum):
    """How a rule's pattern is compared with a scenario key."""
    CONTAINS = "contains"
    EQUALS = "equals"


@dataclass(frozen=True)
class RelevanceRule:
    """Adds *categories* to every scenario whose key matches *pattern*.

    With ``required_flag`` set, the rule only fires when the scenario
    itself lists that flag in its ``required_flags``.
    """
    pattern: str
    match: KeyMatch
    categories: tuple[str, ...]
    required_flag: str | None = None

    def applies_to(self, scenario: Scenario) -> bool:
        if self.match is KeyMatch.EQUALS:
            matched = scenario.key == self.pattern
        else:
            matched = self.pattern in scenario.key
        if not matched:
            return False
        if self.required_flag is not None:
            return self.required_flag in scenario.required_flags
        return True


_END_TO_END = (ASSESSMENT_WRITEBACK, DOCUMENTATION, REGULATORY)

RELEVANCE_RULES: tuple[RelevanceRule, ...] = (
    # End-to-end sepsis in the ED and septic shock flows
    RelevanceRule("sepsis_ed", KeyMatch.CONTAINS, _END_TO_END),
    RelevanceRule("septic_shock", KeyMatch.CONTAINS, _END_TO_END),
    RelevanceRule(
        "sepsis_ed", KeyMatch.CONTAINS, (BUNDLE_MANAGER,),
        required_flag="bundle_tracking",
    ),
    RelevanceRule(
        "septic_shock", KeyMatch.CONTAINS, (BUNDLE_MANAGER,),
        required_flag="bundle_tracking",
    ),
    RelevanceRule(
        "no_sepsis_no_infection", KeyMatch.EQUALS,
        (ASSESSMENT_WRITEBACK, CONTRIBUTING_FACTORS),
    ),
    RelevanceRule("abx_workflow", KeyMatch.EQUALS, (SUPPRESSION,)),
    RelevanceRule("comfort_care_suppression", KeyMatch.EQUALS, (SUPPRESSION,)),
    RelevanceRule(
        "septic_shock_rnf_to_icu", KeyMatch.EQUALS,
        (ASSESSMENT_WRITEBACK, CONTRIBUTING_FACTORS),
    ),
)


def relevant_categories(
    scenario: Scenario,
    rules: tuple[RelevanceRule, ...] = RELEVANCE_RULES,
) -> frozenset[str]:
    """Return the flag categories verified within *scenario*'s block."""
    categories: set[str] = set()
    for rule in rules:
        if rule.applies_to(scenario):
            categories.update(rule.categories)
    return frozenset(categories)

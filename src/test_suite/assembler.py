"""Assembles the ordered rows of a customer's QA test plan.

A plan has two parts:

1. Scenario blocks, in scenario library order, for every scenario that
   applies to the customer: a header row, an optional patient setup row,
   the setup and core test steps, then the verification steps of the
   enabled flags whose category is relevant to the scenario.
2. Absence tests, per owned product: the verification steps of every flag
   explicitly disabled for the product, grouped under category headers.

Rows that represent a test action carry a step number from a single
counter per customer; header and patient setup rows leave it blank.
"""
from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from dataclasses import dataclass

from src.shared.models.flags import Customer, FlagDocument
from src.shared.models.scenarios import Scenario, ScenarioLibrary
from src.shared.utils import title_case_key
from src.test_suite.applicability import scenario_applies
from src.test_suite.flag_tests import FlagTest, FlagTestSelection, select_flag_tests
from src.test_suite.relevance import relevant_categories
from src.test_suite.templating import resolve_ehr_terms, resolve_step_text, role_label

logger = logging.getLogger(__name__)

# Section labels
SCENARIO_SECTION = "SCENARIO"
PATIENT_SETUP_SECTION = "PATIENT SETUP"
SETUP_SECTION = "Setup"
CORE_SECTION = "Bayesian UI Test"
FLAG_HEADER_SECTION = "FLAG VERIFICATION"
FLAG_SECTION = "Flag Verification"
ABSENCE_HEADER_SECTION = "ABSENCE TESTS"
ABSENCE_SECTION = "Absence Test"

VERIFY = "VERIFY"
VERIFY_ABSENT = "VERIFY ABSENT"

FLAG_HEADER_TEXT = (
    "--- Feature-specific verification steps (auto-generated from enabled flags) ---"
)
ABSENCE_HEADER_TEXT = "Verify that disabled features do NOT appear in the application"


@dataclass(frozen=True)
class PlanRow:
    """One row of a test plan.

    The last three columns are left blank for the tester.
    """
    step: int | None
    section: str
    subject: str
    user: str = ""
    description: str = ""
    expected: str = ""
    test_result: str = ""
    pass_fail: str = ""
    issues: str = ""

    def as_fields(self) -> list[object]:
        return [
            self.step,
            self.section,
            self.subject,
            self.user,
            self.description,
            self.expected,
            self.test_result,
            self.pass_fail,
            self.issues,
        ]


@dataclass(frozen=True)
class PlanStats:
    """Summary counts reported for a generated plan."""
    scenario_count: int = 0
    enabled_flag_count: int = 0
    disabled_flag_count: int = 0


class _PlanContext:
    """Per-customer inputs shared by the row builders."""

    def __init__(
        self,
        customer: Customer,
        flag_document: FlagDocument,
        library: ScenarioLibrary,
    ) -> None:
        self.customer = customer
        self.flag_document = flag_document
        self.library = library
        self.configuration = flag_document.configuration_for(customer.key)
        self.steps: Iterator[int] = itertools.count(1)
        self._selections: dict[str, FlagTestSelection] = {}

    def next_step(self) -> int:
        return next(self.steps)

    def flag_tests(self, product_key: str) -> FlagTestSelection:
        if product_key not in self._selections:
            self._selections[product_key] = select_flag_tests(
                self.customer, product_key, self.flag_document, self.library
            )
        return self._selections[product_key]

    def ehr_text(self, text: str) -> str:
        return resolve_ehr_terms(text, self.customer.ehr, self.library.ehr_terminology)

    def role(self, role_key: str | None) -> str:
        return role_label(role_key, self.library.roles)


def _patient_setup_text(scenario: Scenario) -> str:
    profile = scenario.patient_profile
    age = profile.age if profile.age is not None else ""
    return (
        f"Test Patient: Age {age}, {profile.sex or ''}, {profile.location or ''}. "
        f"Chief Complaint: {profile.chief_complaint or 'N/A'}"
    )


def _scenario_rows(scenario: Scenario, ctx: _PlanContext) -> list[PlanRow]:
    rows = [
        PlanRow(
            step=None,
            section=SCENARIO_SECTION,
            subject=f"=== {scenario.name} ===",
            description=scenario.description,
            expected=f"Workflow: {scenario.workflow}",
        )
    ]

    if scenario.patient_profile is not None:
        rows.append(
            PlanRow(
                step=None,
                section=PATIENT_SETUP_SECTION,
                subject=scenario.name,
                description=_patient_setup_text(scenario),
            )
        )

    ehr = ctx.customer.ehr
    terminology = ctx.library.ehr_terminology
    profile = scenario.patient_profile
    for section, steps in (
        (SETUP_SECTION, scenario.setup_steps),
        (CORE_SECTION, scenario.core_test_steps),
    ):
        for step in steps:
            rows.append(
                PlanRow(
                    step=ctx.next_step(),
                    section=section,
                    subject=scenario.name,
                    user=ctx.role(step.role),
                    description=resolve_step_text(step.action, profile, ehr, terminology),
                    expected=resolve_step_text(step.expected, profile, ehr, terminology),
                )
            )

    categories = relevant_categories(scenario)
    scenario_flag_tests = [
        flag_test
        for flag_test in ctx.flag_tests(scenario.product).enabled
        if flag_test.category in categories
    ]
    if scenario_flag_tests:
        rows.append(
            PlanRow(
                step=None,
                section=FLAG_HEADER_SECTION,
                subject=scenario.name,
                description=FLAG_HEADER_TEXT,
            )
        )
        rows.extend(_criteria_rows(scenario_flag_tests, FLAG_SECTION, VERIFY, ctx))

    return rows


def _criteria_rows(
    flag_tests: list[FlagTest], section: str, expected: str, ctx: _PlanContext
) -> list[PlanRow]:
    return [
        PlanRow(
            step=ctx.next_step(),
            section=section,
            subject=flag_test.subject,
            user=ctx.role(criterion.role),
            description=ctx.ehr_text(criterion.step),
            expected=expected,
        )
        for flag_test in flag_tests
        for criterion in flag_test.criteria
    ]


def _absence_rows(product_key: str, ctx: _PlanContext) -> list[PlanRow]:
    disabled = ctx.flag_tests(product_key).disabled
    if not disabled:
        return []

    product_name = ctx.flag_document.product_name(product_key)
    rows = [
        PlanRow(
            step=None,
            section=ABSENCE_HEADER_SECTION,
            subject=f"=== {product_name}: Disabled Flag Verification ===",
            description=ABSENCE_HEADER_TEXT,
        )
    ]

    for category, group in itertools.groupby(disabled, key=lambda test: test.category):
        rows.append(
            PlanRow(
                step=None,
                section=ABSENCE_SECTION,
                subject=f"--- {title_case_key(category)} ---",
            )
        )
        rows.extend(_criteria_rows(list(group), ABSENCE_SECTION, VERIFY_ABSENT, ctx))

    return rows


def build_test_plan(
    customer: Customer,
    flag_document: FlagDocument,
    library: ScenarioLibrary,
) -> list[PlanRow]:
    """Return the ordered rows of *customer*'s test plan.

    The result depends only on the two documents and the customer.
    """
    ctx = _PlanContext(customer, flag_document, library)
    rows: list[PlanRow] = []

    for scenario in library.scenarios:
        if not scenario_applies(scenario, customer, ctx.configuration):
            continue
        rows.extend(_scenario_rows(scenario, ctx))

    for product_key in customer.products:
        rows.extend(_absence_rows(product_key, ctx))

    logger.debug("Built %d plan rows for %s", len(rows), customer.key)
    return rows


def plan_stats(
    customer: Customer,
    flag_document: FlagDocument,
    library: ScenarioLibrary,
) -> PlanStats:
    """Count applicable scenarios and flag tests over every owned product."""
    configuration = flag_document.configuration_for(customer.key)
    scenario_count = sum(
        1
        for scenario in library.scenarios
        if scenario_applies(scenario, customer, configuration)
    )

    enabled_count = 0
    disabled_count = 0
    for product_key in customer.products:
        selection = select_flag_tests(customer, product_key, flag_document, library)
        enabled_count += len(selection.enabled)
        disabled_count += len(selection.disabled)

    return PlanStats(
        scenario_count=scenario_count,
        enabled_flag_count=enabled_count,
        disabled_flag_count=disabled_count,
    )

"""Generates and writes the test plans of every (or one) customer."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from src.shared.errors import CustomerNotFoundError
from src.shared.models.flags import Customer, FlagDocument
from src.shared.models.scenarios import ScenarioLibrary
from src.test_suite.assembler import PlanRow, PlanStats, build_test_plan, plan_stats
from src.test_suite.csv_writer import write_test_plan

logger = logging.getLogger(__name__)


@dataclass
class GeneratedPlan:
    """Outcome of writing one customer's plan.

    ``row_count`` counts plan rows, not the CSV header line.
    """
    customer: Customer
    path: Path
    row_count: int
    stats: PlanStats

    @property
    def filename(self) -> str:
        return self.path.name


def plan_filename(customer_key: str) -> str:
    return f"test-plan-{customer_key}.csv"


def select_customers(
    flag_document: FlagDocument, customer_key: str | None = None
) -> list[Customer]:
    """Return every customer, or only the one matching *customer_key*.

    Raises:
        CustomerNotFoundError: If *customer_key* matches no customer.
    """
    if customer_key is None:
        customers = list(flag_document.customers)
    else:
        customers = [c for c in flag_document.customers if c.key == customer_key]
    if not customers:
        raise CustomerNotFoundError(customer_key or "")
    return customers


def generate_test_plans(
    flag_document: FlagDocument,
    library: ScenarioLibrary,
    output_dir: Path | str,
    customer_key: str | None = None,
) -> list[GeneratedPlan]:
    """Build and write a plan per selected customer.

    Every plan is built before the first file is written, so a failure
    leaves the output directory untouched.
    """
    output_dir = Path(output_dir)
    customers = select_customers(flag_document, customer_key)

    built: list[tuple[Customer, list[PlanRow], PlanStats]] = []
    for customer in customers:
        rows = build_test_plan(customer, flag_document, library)
        stats = plan_stats(customer, flag_document, library)
        built.append((customer, rows, stats))

    output_dir.mkdir(parents=True, exist_ok=True)
    results: list[GeneratedPlan] = []
    for customer, rows, stats in built:
        path = write_test_plan(output_dir / plan_filename(customer.key), rows)
        results.append(
            GeneratedPlan(customer=customer, path=path, row_count=len(rows), stats=stats)
        )

    logger.info("Generated %d test plan(s) in %s", len(results), output_dir)
    return results

"""Serialises test plan rows to CSV."""
from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from pathlib import Path

from src.shared.utils import atomic_write_text
from src.test_suite.assembler import PlanRow

logger = logging.getLogger(__name__)

PLAN_COLUMNS: tuple[str, ...] = (
    "Test Step #",
    "Section",
    "Scenario / Flag",
    "User",
    "Test Step Description",
    "Expected Result",
    "Test Result",
    "Pass/Fail",
    "Description of failure/issues",
)


def render_csv(rows: Iterable[PlanRow]) -> str:
    """Render the column header and *rows* as CSV text.

    Fields containing a comma, a double quote or a line break are quoted
    with inner quotes doubled; ``None`` becomes an empty field.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(PLAN_COLUMNS)
    for row in rows:
        writer.writerow(row.as_fields())
    return buffer.getvalue()


def write_test_plan(path: Path | str, rows: Iterable[PlanRow]) -> Path:
    """Write *rows* to *path*, replacing any previous plan."""
    path = Path(path)
    atomic_write_text(path, render_csv(rows))
    logger.info("Wrote test plan %s", path)
    return path

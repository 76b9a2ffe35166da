"""Test fixtures for the testplan test suite.

Provides small but complete input documents:
- feature_flags.json — products, four customers, the flag catalog and
  per-product configurations
- test_definitions.json — roles, EHR terminology, flag criteria and five
  scenarios

Customers in ``feature_flags.json``:

* ``acme`` (Epic) owns sepsis and rrt and has bundle tracking enabled.
* ``beta`` (Cerner) owns sepsis only and has bundle tracking disabled.
* ``gamma`` uses a vendor without terminology (falls back to Epic).
* ``delta`` owns rrt but has no configuration block at all.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

FIXTURES_DIR = Path(__file__).parent


def fixture_path(name: str) -> Path:
    """Return the absolute path to a named fixture file."""
    path = FIXTURES_DIR / name
    if not path.exists():
        raise FileNotFoundError(f"Fixture not found: {path}")
    return path


def load_flag_data() -> dict[str, Any]:
    """Load a fresh copy of the fixture flag document as a dict."""
    return json.loads(fixture_path("feature_flags.json").read_text(encoding="utf-8"))


def load_test_definitions() -> dict[str, Any]:
    """Load a fresh copy of the fixture scenario library as a dict."""
    return json.loads(fixture_path("test_definitions.json").read_text(encoding="utf-8"))

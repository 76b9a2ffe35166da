"""Shared test fixtures for the testplan test suite."""
from __future__ import annotations

import json
import logging

import pytest

from src.shared.constants import SERVICE_NAME
from src.shared.models.flags import Customer, FlagDocument
from src.shared.models.scenarios import ScenarioLibrary
from tests.fixtures import load_flag_data, load_test_definitions


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers the CLI installs so they never outlive a captured stream."""
    yield
    for name in (SERVICE_NAME, "src"):
        logging.getLogger(name).handlers.clear()


@pytest.fixture
def flag_data() -> dict:
    return load_flag_data()


@pytest.fixture
def definitions_data() -> dict:
    return load_test_definitions()


@pytest.fixture
def flag_document(flag_data) -> FlagDocument:
    return FlagDocument.model_validate(flag_data)


@pytest.fixture
def library(definitions_data) -> ScenarioLibrary:
    return ScenarioLibrary.model_validate(definitions_data)


@pytest.fixture
def acme(flag_document) -> Customer:
    return flag_document.get_customer("acme")


@pytest.fixture
def beta(flag_document) -> Customer:
    return flag_document.get_customer("beta")


@pytest.fixture
def input_files(tmp_path, flag_data, definitions_data):
    """Write both fixture documents to *tmp_path* and return their paths."""
    flags_path = tmp_path / "feature-flags.json"
    definitions_path = tmp_path / "test-definitions.json"
    flags_path.write_text(json.dumps(flag_data), encoding="utf-8")
    definitions_path.write_text(json.dumps(definitions_data), encoding="utf-8")
    return flags_path, definitions_path

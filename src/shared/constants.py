"""Shared constants used across the tooling."""
from __future__ import annotations

# Application version
VERSION: str = "1.2.0"

# Tool name used for loggers and the CLI banner
SERVICE_NAME: str = "testplan"

# Default locations, relative to the working directory
FLAG_DATA_PATH: str = "data/feature-flags.json"
TEST_DEFINITIONS_PATH: str = "data/test-definitions.json"
TEST_PLAN_OUTPUT_DIR: str = "test-plans"
CONFIG_PATH: str = "testplan.yaml"

# Vendor used when a customer's EHR has no terminology entry
DEFAULT_EHR: str = "Epic"

DEFAULT_VIEWER_URL: str = "https://feature-flag-app-pied.vercel.app/"

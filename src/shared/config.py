"""Configuration for the test-plan tooling.

Secrets and log level come from the environment via pydantic-settings;
file locations come from an optional ``testplan.yaml``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings

from src.shared.constants import (
    DEFAULT_VIEWER_URL,
    FLAG_DATA_PATH,
    TEST_DEFINITIONS_PATH,
    TEST_PLAN_OUTPUT_DIR,
)
from src.shared.errors import DataLoadError

logger = logging.getLogger(__name__)


class ToolSettings(BaseSettings):
    """Environment-driven settings shared by every command.

    Values come from the process environment first, then from
    ``.env.deploy`` in the working directory when it exists.
    """
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")
    slack_webhook_url: str | None = Field(
        default=None, validation_alias="SLACK_WEBHOOK_URL"
    )
    viewer_url: str = Field(
        default=DEFAULT_VIEWER_URL, validation_alias="VIEWER_URL"
    )

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "env_file": ".env.deploy",
        "env_file_encoding": "utf-8",
    }


@dataclass
class PathsConfig:
    """Locations of the input documents and the plan output directory."""

    flag_data: str = FLAG_DATA_PATH
    test_definitions: str = TEST_DEFINITIONS_PATH
    output_dir: str = TEST_PLAN_OUTPUT_DIR


@dataclass
class ChangelogConfig:
    """Settings for the flag-data changelog."""

    # Path of the flag document relative to the git repository root
    flags_rel_path: str = FLAG_DATA_PATH
    repo_dir: str = "."


@dataclass
class PlanToolConfig:
    """Top-level configuration composing all sub-configs."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)


def load_tool_config(path: Path | str | None = None) -> PlanToolConfig:
    """Load tool configuration from a YAML file.

    Missing sections fall back to defaults.  Unknown keys are silently
    ignored so that forward-compatible config files work.

    Args:
        path: Path to config YAML.  If ``None`` or the file does not
              exist, returns full defaults.

    Returns:
        Populated configuration dataclass.

    Raises:
        DataLoadError: If the file cannot be read or parsed, or its top
            level is not a mapping.
    """
    if path is None:
        return PlanToolConfig()

    path = Path(path)
    if not path.exists():
        return PlanToolConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise DataLoadError(path, str(exc)) from exc
    if not isinstance(raw, dict):
        raise DataLoadError(path, "top-level value must be a mapping")

    def _pick(data: Any, cls: type) -> dict[str, Any]:
        """Filter *data* to only keys accepted by *cls*."""
        if not isinstance(data, dict):
            return {}
        valid = {f.name for f in fields(cls)}
        return {k: v for k, v in data.items() if k in valid}

    cfg = PlanToolConfig(
        paths=PathsConfig(**_pick(raw.get("paths", {}), PathsConfig)),
        changelog=ChangelogConfig(**_pick(raw.get("changelog", {}), ChangelogConfig)),
    )
    logger.debug("Loaded tool config from %s", path)
    return cfg

"""Typer CLI for the test-plan tooling.

Commands:

* ``testplan generate`` -- write one QA test plan CSV per customer.
* ``testplan changelog`` -- report flag-data changes between git refs and
  optionally post them to Slack.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from src.changelog.diff import detect_changes, has_changes
from src.changelog.formatters import format_changelog, format_slack_message
from src.changelog.slack import post_to_slack
from src.changelog.sources import read_flags_at_ref, read_flags_file
from src.shared.config import PlanToolConfig, ToolSettings, load_tool_config
from src.shared.constants import CONFIG_PATH, SERVICE_NAME, VERSION
from src.shared.errors import DataLoadError, GitRefError, PlanToolError
from src.shared.loader import load_flag_document, load_scenario_library
from src.shared.logging import setup_logging, start_run
from src.test_suite.display import (
    print_error_panel,
    print_generate_header,
    print_notice,
    print_plan_table,
    print_report,
)
from src.test_suite.generator import generate_test_plans

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="testplan",
    help="Generate QA test plans and changelogs from feature-flag data.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"testplan v{VERSION}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Feature-flag test-plan tooling."""
    settings = ToolSettings()
    setup_logging(SERVICE_NAME, settings.log_level)
    start_run()


def _fail(exc: PlanToolError) -> NoReturn:
    hint = f"Expected at: {exc.path}" if isinstance(exc, DataLoadError) else None
    print_error_panel(exc.detail, hint=hint)
    raise typer.Exit(code=exc.exit_code)


def _load_config(path: Path) -> PlanToolConfig:
    try:
        return load_tool_config(path)
    except PlanToolError as exc:
        logger.error("config load failed: %s", exc.detail)
        _fail(exc)


@app.command()
def generate(
    customer: Optional[str] = typer.Option(
        None, "--customer", "-c", help="Only generate the plan for this customer key."
    ),
    flags: Optional[Path] = typer.Option(
        None, "--flags", help="Path to feature-flags.json."
    ),
    definitions: Optional[Path] = typer.Option(
        None, "--definitions", help="Path to test-definitions.json."
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Directory for the generated CSV files."
    ),
    config: Path = typer.Option(
        Path(CONFIG_PATH), "--config", help="Optional YAML config file."
    ),
) -> None:
    """Write a test plan CSV for every customer (or one)."""
    cfg = _load_config(config)
    flags_path = flags or Path(cfg.paths.flag_data)
    definitions_path = definitions or Path(cfg.paths.test_definitions)
    plans_dir = output_dir or Path(cfg.paths.output_dir)

    print_generate_header(flags_path, definitions_path)

    try:
        flag_document = load_flag_document(flags_path)
        library = load_scenario_library(definitions_path)
        plans = generate_test_plans(flag_document, library, plans_dir, customer)
    except PlanToolError as exc:
        logger.error("generate failed: %s", exc.detail)
        _fail(exc)

    print_plan_table(plans, plans_dir)


@app.command()
def changelog(
    refs: Optional[List[str]] = typer.Argument(
        None, help="OLD_REF [NEW_REF]; defaults to HEAD against the working tree."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the Slack payload instead of sending it."
    ),
    flags_path: Optional[str] = typer.Option(
        None, "--flags-path", help="Flag document path relative to the repository root."
    ),
    repo: Optional[Path] = typer.Option(
        None, "--repo", help="Directory inside the git repository."
    ),
    config: Path = typer.Option(
        Path(CONFIG_PATH), "--config", help="Optional YAML config file."
    ),
) -> None:
    """Report flag-data changes and notify Slack."""
    cfg = _load_config(config)
    rel_path = flags_path or cfg.changelog.flags_rel_path
    repo_dir = repo or Path(cfg.changelog.repo_dir)
    refs = refs or []

    if len(refs) > 2:
        print_error_panel("Expected at most two refs: OLD_REF [NEW_REF]")
        raise typer.Exit(code=2)

    old_ref = refs[0] if refs else "HEAD"
    new_ref = refs[1] if len(refs) == 2 else "working tree"

    old_data = read_flags_at_ref(old_ref, rel_path, repo_dir)
    if len(refs) == 2:
        new_data = read_flags_at_ref(new_ref, rel_path, repo_dir)
    else:
        new_data = read_flags_file(repo_dir / rel_path)

    if old_data is None:
        _fail(GitRefError(old_ref, rel_path))
    if new_data is None:
        _fail(GitRefError(new_ref, rel_path))

    changes = detect_changes(old_data, new_data)
    print_report(format_changelog(changes, old_ref, new_ref))

    if not has_changes(changes):
        return

    settings = ToolSettings()
    message = format_slack_message(changes, settings.viewer_url)

    if dry_run:
        print_notice("\nDry run, Slack message preview:", style="yellow")
        print_report(json.dumps(message, indent=2, ensure_ascii=False))
        return

    if not settings.slack_webhook_url:
        print_notice("\nSet SLACK_WEBHOOK_URL to enable Slack notifications.")
        return

    try:
        post_to_slack(settings.slack_webhook_url, message)
    except PlanToolError as exc:
        logger.error("Slack notification failed: %s", exc.detail)
        _fail(exc)

    print_notice("\nSlack notification sent.", style="green")


if __name__ == "__main__":
    app()

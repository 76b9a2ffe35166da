"""Flag-data changelog: diff two revisions of the flag document and notify."""
from src.changelog.diff import ABSENT, FlagChanges, detect_changes, has_changes
from src.changelog.formatters import format_changelog, format_slack_message
from src.changelog.slack import post_to_slack

__all__ = [
    "ABSENT",
    "FlagChanges",
    "detect_changes",
    "has_changes",
    "format_changelog",
    "format_slack_message",
    "post_to_slack",
]

"""Text and Slack renderings of a :class:`FlagChanges`."""
from __future__ import annotations

from datetime import date
from typing import Any

from src.changelog.diff import ABSENT, ConfigChange, FlagChanges, has_changes

RULE = "═" * 55
MISSING = "—"


def format_value(value: Any) -> str:
    """Long label of a flag value; an explicit null prints as ``null``."""
    if value is True:
        return "Enabled"
    if value is False:
        return "Disabled"
    if value is ABSENT:
        return MISSING
    if value is None:
        return "null"
    return str(value)


def format_value_short(value: Any) -> str:
    if value is True:
        return "Y"
    if value is False:
        return "N"
    if value is ABSENT:
        return MISSING
    if value is None:
        return "null"
    return str(value)


def _group_config_changes(
    items: list[ConfigChange], by_product: bool
) -> dict[str, list[ConfigChange]]:
    groups: dict[str, list[ConfigChange]] = {}
    for item in items:
        key = f"{item.customer} / {item.product}" if by_product else item.customer
        groups.setdefault(key, []).append(item)
    return groups


def format_changelog(
    changes: FlagChanges,
    old_ref: str | None = None,
    new_ref: str | None = None,
    today: date | None = None,
) -> str:
    """Format *changes* as a human-readable terminal changelog."""
    today = today or date.today()
    lines = [
        RULE,
        "  FEATURE FLAG CHANGELOG",
        f"  {old_ref or 'previous'} → {new_ref or 'current'}",
        f"  {today.isoformat()}",
        RULE,
        "",
    ]

    if not has_changes(changes):
        lines.append("  No changes detected.")
        return "\n".join(lines)

    def section(title: str, entries: list[str]) -> None:
        if entries:
            lines.append(title)
            lines.extend(entries)
            lines.append("")

    section("📦 Products Added:", [f"  + {p.get('name')}" for p in changes.products_added])
    section("📦 Products Removed:", [f"  - {p.get('name')}" for p in changes.products_removed])
    section(
        "🏥 Customers Added:",
        [
            f"  + {c.get('name')} ({', '.join(c.get('products', []))})"
            for c in changes.customers_added
        ],
    )
    section("🏥 Customers Removed:", [f"  - {c.get('name')}" for c in changes.customers_removed])

    product_lines: list[str] = []
    for change in changes.customer_product_changes:
        if change.added:
            product_lines.append(f"  {change.customer}: + {', '.join(change.added)}")
        if change.removed:
            product_lines.append(f"  {change.customer}: - {', '.join(change.removed)}")
    section("🔄 Customer Product Changes:", product_lines)

    section("🆕 New Flag Definitions:", [f"  + {f}" for f in changes.flags_added])
    section("🗑️  Removed Flag Definitions:", [f"  - {f}" for f in changes.flags_removed])

    if changes.config_changes:
        lines.append("⚙️  Configuration Changes:")
        lines.append("")
        for group, items in _group_config_changes(changes.config_changes, by_product=True).items():
            lines.append(f"  {group}:")
            for item in items:
                lines.append(
                    f"    {item.flag}: {format_value(item.old_value)} → {format_value(item.new_value)}"
                )
            lines.append("")

    note_lines: list[str] = []
    for note in changes.note_changes:
        if note.new_note and not note.old_note:
            verb = "added"
        elif note.old_note and not note.new_note:
            verb = "removed"
        else:
            verb = "updated"
        note_lines.append(f"  {note.customer} / {note.flag}: {verb} note")
    section("📝 Note Changes:", note_lines)

    lines.append(f"─── {changes.total} total change(s) ───")
    return "\n".join(lines)


def _mrkdwn_section(text: str) -> dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text.strip()}}


def format_slack_message(
    changes: FlagChanges,
    viewer_url: str | None = None,
    today: date | None = None,
) -> dict[str, Any]:
    """Build a Slack Block Kit payload summarising *changes*."""
    today = today or date.today()
    blocks: list[dict[str, Any]] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": "Feature Flag Update"},
        },
        {
            "type": "context",
            "elements": [
                {
                    "type": "mrkdwn",
                    "text": f"*{today.isoformat()}* | {len(changes.config_changes)} flag change(s)",
                }
            ],
        },
        {"type": "divider"},
    ]

    for customer, items in _group_config_changes(changes.config_changes, by_product=False).items():
        text = f"*{customer}* — {items[0].product}\n"
        for item in items:
            emoji = ":large_green_circle:" if item.new_value is True else ":red_circle:"
            text += (
                f"{emoji}  `{item.flag}`: "
                f"{format_value_short(item.old_value)} → {format_value_short(item.new_value)}\n"
            )
        blocks.append(_mrkdwn_section(text))

    if changes.customers_added:
        text = "*New Customers*\n"
        for c in changes.customers_added:
            text += f":hospital:  {c.get('name')} ({', '.join(c.get('products', []))})\n"
        blocks.append(_mrkdwn_section(text))

    if changes.flags_added:
        text = "*New Flags*\n"
        for flag_key in changes.flags_added:
            text += f":new:  `{flag_key}`\n"
        blocks.append(_mrkdwn_section(text))

    if viewer_url:
        blocks.append({"type": "divider"})
        blocks.append(
            {
                "type": "context",
                "elements": [{"type": "mrkdwn", "text": f"<{viewer_url}|View Dashboard>"}],
            }
        )

    return {"blocks": blocks}

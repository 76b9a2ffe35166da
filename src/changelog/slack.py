"""Delivery of changelog messages to a Slack incoming webhook."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from src.shared.errors import NotificationError

logger = logging.getLogger(__name__)


def post_to_slack(
    webhook_url: str, message: dict[str, Any], timeout: float = 10.0
) -> str:
    """POST *message* as JSON to *webhook_url*.

    Returns:
        The response body.

    Raises:
        NotificationError: On a transport error or a non-200 response.
    """
    try:
        response = httpx.post(webhook_url, json=message, timeout=timeout)
    except httpx.HTTPError as exc:
        raise NotificationError(f"Slack request failed: {exc}") from exc

    if response.status_code != 200:
        raise NotificationError(
            f"Slack API returned {response.status_code}: {response.text}"
        )
    logger.info("Posted changelog notification (%d blocks)", len(message.get("blocks", [])))
    return response.text

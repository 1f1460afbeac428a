"""Chat webhook messaging helper."""

from __future__ import annotations

import httpx
import structlog

from .models import GarageStatus, Snapshot

LOGGER = structlog.get_logger(__name__)

SUCCESS_CODES = {httpx.codes.OK, httpx.codes.NO_CONTENT}


def format_message(garage: GarageStatus) -> str:
    """Build the chat line for one garage."""
    return f"{garage.tier.icon} *{garage.title}*: {garage.tier.value} ({garage.occupied}/{garage.total})"


def post_to_webhook(client: httpx.Client, webhook_url: str, text: str) -> bool:
    """Send one message; failures are logged and reported as False."""
    try:
        response = client.post(webhook_url, json={"content": text})
    except httpx.HTTPError as exc:
        LOGGER.error("webhook.send.error", error=str(exc))
        return False
    if response.status_code in SUCCESS_CODES:
        LOGGER.info("webhook.send.success", status_code=response.status_code)
        return True
    LOGGER.error("webhook.send.failed", status_code=response.status_code, body=response.text[:200])
    return False


def notify(client: httpx.Client, webhook_url: str, snapshot: Snapshot, *, dry_run: bool = False) -> int:
    """Post a message for every garage in the snapshot and return how many were delivered."""
    delivered = 0
    for garage in snapshot.garages:
        text = format_message(garage)
        if dry_run:
            LOGGER.info("webhook.send.skipped", text=text)
            continue
        if post_to_webhook(client, webhook_url, text):
            delivered += 1
    return delivered

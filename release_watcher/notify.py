"""
Notify module for the Release Watcher pipeline.

Posts a JSON payload to a per-source incoming webhook (e.g. a Slack
workflow webhook) when a change is detected. Delivery problems are
reported through NotificationResult and never raised, so a failed
notification cannot affect change detection.
"""

import json
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from release_watcher.detect import Changed
from release_watcher.utils import get_logger


# Module logger
logger = get_logger("notify")

WEBHOOK_TIMEOUT = 30  # seconds


@dataclass
class NotificationResult:
    """
    Outcome of a webhook delivery.

    Attributes:
        success: Whether the webhook accepted the payload.
        error: Error description if delivery failed, None otherwise.
    """
    success: bool
    error: Optional[str] = None


def build_payload(result: Changed) -> Dict[str, str]:
    """
    Build the webhook payload for a detected change.

    Args:
        result: Changed check result.

    Returns:
        Dictionary with 'source', 'version' and 'changes' keys.
    """
    return {
        "source": result.source.name,
        "version": result.version,
        "changes": result.changes,
    }


def send_webhook_notification(
    webhook_url: str,
    payload: Dict[str, str],
    session: Optional[requests.Session] = None,
    dry_run: bool = False
) -> NotificationResult:
    """
    Send a payload to a webhook.

    Args:
        webhook_url: Incoming webhook URL.
        payload: JSON-serializable payload.
        session: Optional session; plain requests.post is used otherwise.
        dry_run: If True, log the payload without sending it.

    Returns:
        NotificationResult describing the delivery.
    """
    body = json.dumps(payload)

    if dry_run:
        target = webhook_url or "(no webhook configured)"
        logger.info(f"[DRY RUN] Would POST to {target}: {body}")
        return NotificationResult(success=True)

    if not webhook_url:
        return NotificationResult(success=False, error="No webhook URL configured")

    logger.info(f"POST {webhook_url}")
    logger.debug(f"Payload: {body}")

    poster = session.post if session is not None else requests.post

    try:
        response = poster(
            webhook_url,
            data=body,
            headers={"Content-Type": "application/json"},
            timeout=WEBHOOK_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"Webhook request failed: {e}")
        return NotificationResult(success=False, error=str(e))

    if 200 <= response.status_code < 300:
        logger.info(f"Webhook response: {response.status_code} OK")
        return NotificationResult(success=True)

    text = response.text
    logger.error(f"Webhook response: {response.status_code} {text}")
    return NotificationResult(success=False, error=f"{response.status_code}: {text}")


def notify_change(
    result: Changed,
    session: Optional[requests.Session] = None,
    dry_run: bool = False
) -> NotificationResult:
    """
    Notify the source's webhook about a detected change.

    Args:
        result: Changed check result.
        session: Optional HTTP session.
        dry_run: If True, skip the actual request.

    Returns:
        NotificationResult describing the delivery.
    """
    return send_webhook_notification(
        result.source.webhook_url,
        build_payload(result),
        session=session,
        dry_run=dry_run,
    )

"""
Wayback module for the Release Watcher pipeline.

Resolves the closest Wayback Machine snapshot of a page through the
archive.org availability API.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import requests

from release_watcher.fetch import DEFAULT_TIMEOUT
from release_watcher.utils import get_logger


# Module logger
logger = get_logger("wayback")

WAYBACK_AVAILABILITY_URL = "https://archive.org/wayback/available"


@dataclass(frozen=True)
class Snapshot:
    """
    Closest archived copy of a page.

    Attributes:
        url: Snapshot URL on web.archive.org.
        timestamp: Capture time as reported by the archive (YYYYMMDDhhmmss).
    """
    url: str
    timestamp: str


def build_availability_url(target_url: str) -> str:
    """Availability query URL for a target page."""
    return f"{WAYBACK_AVAILABILITY_URL}?url={quote(target_url, safe='')}"


def find_snapshot(
    target_url: str,
    session: requests.Session,
    timeout: int = DEFAULT_TIMEOUT
) -> Optional[Snapshot]:
    """
    Look up the closest available snapshot of a page.

    Args:
        target_url: Page to look up.
        session: HTTP session used for the query.
        timeout: Request timeout in seconds.

    Returns:
        Snapshot, or None when the query fails or no snapshot is available.
    """
    response = session.get(build_availability_url(target_url), timeout=timeout)

    if not 200 <= response.status_code < 300:
        logger.warning(f"Wayback availability query failed with HTTP {response.status_code}")
        return None

    data = response.json()
    archived = data.get("archived_snapshots") if isinstance(data, dict) else None
    closest = archived.get("closest") if isinstance(archived, dict) else None

    if not isinstance(closest, dict) or not closest.get("available"):
        logger.warning(f"No Wayback snapshot available for {target_url}")
        return None

    snapshot_url = closest.get("url")
    if not snapshot_url:
        logger.warning(f"Wayback snapshot for {target_url} has no URL")
        return None

    return Snapshot(url=snapshot_url, timestamp=str(closest.get("timestamp", "")))

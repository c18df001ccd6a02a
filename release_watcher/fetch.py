"""
Fetch module for the Release Watcher pipeline.

This module fetches release-note pages with a browser-like header set.
Some sources block non-browser clients or serve them different content.
Failed fetches are not retried.
"""

from typing import Optional
from urllib.parse import urlparse

import requests

from release_watcher.utils import get_logger


# Module logger
logger = get_logger("fetch")

# Default configuration
DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
)
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def create_session() -> requests.Session:
    """
    Create a requests session carrying the browser-like default headers.

    Returns:
        Configured requests.Session instance.
    """
    session = requests.Session()
    session.headers.update({
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": DEFAULT_ACCEPT,
    })
    return session


def validate_url(url: str) -> bool:
    """
    Validate that a URL is well-formed and uses HTTP/HTTPS.

    Args:
        url: URL string to validate.

    Returns:
        True if URL is valid, False otherwise.
    """
    try:
        parsed = urlparse(url)
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)
    except ValueError:
        return False


def fetch_content(
    url: str,
    session: requests.Session,
    timeout: int = DEFAULT_TIMEOUT
) -> Optional[str]:
    """
    Fetch a URL and return its body text.

    Args:
        url: URL to fetch.
        session: Session created by create_session().
        timeout: Request timeout in seconds.

    Returns:
        Decoded body text on a 2xx response, None for any other status
        or for a malformed URL.

    Raises:
        requests.exceptions.RequestException: On transport failures
            (DNS, TLS, timeout). Callers decide how to report them.
    """
    logger.debug(f"Fetching URL: {url}")

    if not validate_url(url):
        logger.warning(f"Invalid URL format: {url}")
        return None

    response = session.get(url, timeout=timeout)

    if 200 <= response.status_code < 300:
        logger.info(f"Successfully fetched {url} ({len(response.text)} bytes)")
        return response.text

    logger.warning(f"HTTP {response.status_code} for {url}")
    return None

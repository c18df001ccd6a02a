"""
Normalize module for the Release Watcher pipeline.

Reduces an HTML page to the plain text that is fingerprinted. Tags that
carry no visible content (analytics snippets, inlined timestamps, embeds)
are removed first so they cannot cause false change reports.
"""

from bs4 import BeautifulSoup

from release_watcher.utils import get_logger, sanitize_text


# Module logger
logger = get_logger("normalize")

NON_CONTENT_TAGS = ["script", "style", "link", "meta", "noscript", "iframe"]

# Checked in order when a source prefers its main content region
MAIN_CONTENT_TAGS = ["main", "article"]


def _region_text(soup: BeautifulSoup, tag_name: str) -> str:
    """Concatenated text of every element with the given tag name."""
    return "".join(element.get_text() for element in soup.find_all(tag_name))


def extract_stable_content(html: str, prefer_main_content: bool = False) -> str:
    """
    Extract stable plain text from an HTML page.

    Args:
        html: Raw HTML content.
        prefer_main_content: If True, use the text of <main>, then
                             <article>, before falling back to <body>.

    Returns:
        Whitespace-collapsed visible text.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for element in soup.find_all(NON_CONTENT_TAGS):
        element.decompose()

    if prefer_main_content:
        for tag_name in MAIN_CONTENT_TAGS:
            text = _region_text(soup, tag_name)
            if text.strip():
                logger.debug(f"Using <{tag_name}> region for stable content")
                return sanitize_text(text)

    body = soup.body
    text = body.get_text() if body is not None else soup.get_text()

    return sanitize_text(text)

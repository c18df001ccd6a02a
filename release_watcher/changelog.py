"""
Changelog module for the Release Watcher pipeline.

Extracts the latest version and its notes from a markdown changelog
laid out as one heading per release, newest first.
"""

import re
from typing import List, Tuple

from release_watcher.utils import get_logger


# Module logger
logger = get_logger("changelog")

# "## 1.2.3", "# [1.2.3] - 2024-01-01", "### 2.0.0-beta.1"
VERSION_HEADING_PATTERN = re.compile(r"^#+\s*\[?(\d+\.\d+\.\d+[^\]]*)\]?")

UNKNOWN_VERSION = "Unknown"

# Summary length used when the document has no version heading
FALLBACK_SUMMARY_LENGTH = 1000


def extract_markdown_version(content: str) -> Tuple[str, str]:
    """
    Extract the first version block from a markdown changelog.

    The block starts at the first version heading (included) and ends
    right before the second one. Lines above the first heading are ignored.

    Args:
        content: Changelog document text.

    Returns:
        Tuple of (version, changes). Without any version heading the
        version is "Unknown" and the changes are the first
        FALLBACK_SUMMARY_LENGTH characters of the document.
    """
    version = ""
    block: List[str] = []

    for line in content.split("\n"):
        match = VERSION_HEADING_PATTERN.match(line)

        if match:
            if version:
                break
            version = match.group(1).strip()
            block.append(line)
        elif version:
            block.append(line)

    changes = "\n".join(block).strip()

    if not version:
        logger.debug("No version heading found, using document prefix as summary")
        return UNKNOWN_VERSION, content[:FALLBACK_SUMMARY_LENGTH]

    logger.debug(f"Found version {version} ({len(block)} line(s))")
    return version, changes

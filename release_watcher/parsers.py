"""
Parser strategies for the Release Watcher pipeline.

Each strategy fetches a source and turns it into ParsedContent:
- markdown:  raw changelog text, version and notes of the latest release
- hash-only: normalized page text, generic "Update detected" summary
- wayback:   normalized text of the closest Wayback snapshot, generic summary

A strategy returns None when no usable content could be fetched.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

import requests

from release_watcher.changelog import UNKNOWN_VERSION, extract_markdown_version
from release_watcher.config import ParserType, SourceDescriptor
from release_watcher.fetch import fetch_content
from release_watcher.normalize import extract_stable_content
from release_watcher.utils import get_logger
from release_watcher.wayback import find_snapshot


# Module logger
logger = get_logger("parsers")

GENERIC_VERSION = "Update detected"


@dataclass
class ParsedContent:
    """
    Result of running a parser strategy once.

    Attributes:
        stable_content: Text that is fingerprinted; never shown to users.
        version: Extracted version token.
        formatted_changes: Human-readable description of the changes.
    """
    stable_content: str
    version: str = UNKNOWN_VERSION
    formatted_changes: str = ""


ParserFunc = Callable[[SourceDescriptor, requests.Session], Optional[ParsedContent]]


def format_generic_update(source: SourceDescriptor) -> str:
    """Summary for sources whose changes cannot be extracted."""
    return (
        f"{source.name} release notes have been updated.\n\n"
        f"Check the latest changes here:\n{source.release_page_url}"
    )


def parse_markdown(source: SourceDescriptor, session: requests.Session) -> Optional[ParsedContent]:
    """Fetch a markdown changelog and extract its latest release."""
    content = fetch_content(source.url, session)
    if not content:
        return None

    version, changes = extract_markdown_version(content)

    return ParsedContent(
        stable_content=content,
        version=version,
        formatted_changes=changes,
    )


def parse_hash_only(source: SourceDescriptor, session: requests.Session) -> Optional[ParsedContent]:
    """Fetch an unstructured page; only the fact that it changed is reported."""
    content = fetch_content(source.url, session)
    if not content:
        return None

    return ParsedContent(
        stable_content=extract_stable_content(content, source.prefer_main_content),
        version=GENERIC_VERSION,
        formatted_changes=format_generic_update(source),
    )


def parse_wayback(source: SourceDescriptor, session: requests.Session) -> Optional[ParsedContent]:
    """
    Fingerprint the closest Wayback Machine snapshot instead of the live page.

    Used for pages whose live rendering is too unstable to diff. A missing
    snapshot means the check cannot be decided, so None is returned.
    """
    snapshot = find_snapshot(source.url, session)
    if snapshot is None:
        return None

    logger.info(f"Found Wayback snapshot from {snapshot.timestamp}")

    content = fetch_content(snapshot.url, session)
    if not content:
        return None

    return ParsedContent(
        stable_content=extract_stable_content(content, source.prefer_main_content),
        version=GENERIC_VERSION,
        formatted_changes=format_generic_update(source),
    )


PARSERS: Dict[ParserType, ParserFunc] = {
    ParserType.MARKDOWN: parse_markdown,
    ParserType.HASH_ONLY: parse_hash_only,
    ParserType.WAYBACK: parse_wayback,
}


def resolve_parser_type(tag: str) -> Optional[ParserType]:
    """
    Map a configured parser tag to its ParserType.

    Args:
        tag: Parser tag from the source configuration.

    Returns:
        ParserType, or None for an unknown tag.
    """
    try:
        return ParserType(tag)
    except ValueError:
        return None


def get_parser(tag: str) -> Optional[ParserFunc]:
    """Strategy function for a parser tag, or None for an unknown tag."""
    parser_type = resolve_parser_type(tag)
    if parser_type is None:
        return None
    return PARSERS[parser_type]

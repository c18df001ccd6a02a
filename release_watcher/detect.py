"""
Change detection for the Release Watcher pipeline.

check_source() runs a source's parser strategy, fingerprints the stable
content and compares it with the stored fingerprint. Every outcome,
including unexpected exceptions, is returned as a CheckResult.
"""

import hashlib
from dataclasses import dataclass
from typing import Optional, Union

import requests

from release_watcher.config import SourceDescriptor
from release_watcher.fetch import create_session
from release_watcher.parsers import get_parser
from release_watcher.store import FingerprintStore
from release_watcher.utils import get_logger


# Module logger
logger = get_logger("detect")

FETCH_FAILED_ERROR = "Failed to fetch content"


@dataclass(frozen=True)
class Unchanged:
    """The source's stable content matches the stored fingerprint."""
    source: SourceDescriptor


@dataclass(frozen=True)
class Changed:
    """
    The source's stable content differs from the stored fingerprint.

    Attributes:
        source: Source that changed.
        version: Extracted version token.
        changes: Human-readable description of the changes.
        first_check: True when there was no stored fingerprint at all.
                     Such checks are still reported as changes.
    """
    source: SourceDescriptor
    version: str
    changes: str
    first_check: bool = False


@dataclass(frozen=True)
class Failed:
    """The check could not be completed."""
    source: SourceDescriptor
    error: str


CheckResult = Union[Unchanged, Changed, Failed]


def compute_fingerprint(content: str) -> str:
    """
    Compute the fingerprint of stable content.

    Args:
        content: Normalized text of a source.

    Returns:
        SHA-256 hex digest of the UTF-8 encoded content.
    """
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def _run_check(
    source: SourceDescriptor,
    session: requests.Session,
    store: FingerprintStore
) -> CheckResult:
    parser = get_parser(source.parser_type)
    if parser is None:
        logger.error(f"Unknown parser type '{source.parser_type}' for {source.id}")
        return Failed(source, f"Unknown parser type: {source.parser_type}")

    parsed = parser(source, session)
    if parsed is None:
        return Failed(source, FETCH_FAILED_ERROR)

    new_fingerprint = compute_fingerprint(parsed.stable_content)
    old_fingerprint = store.read_fingerprint(source)

    if old_fingerprint == new_fingerprint:
        logger.info(f"No changes for {source.name}")
        return Unchanged(source)

    if not store.write_fingerprint(source, new_fingerprint, parsed.version):
        return Failed(source, f"Failed to save state for {source.id}")

    first_check = old_fingerprint is None
    if first_check:
        logger.info(f"No previous state for {source.name}, recorded baseline")
    else:
        logger.info(f"Change detected for {source.name}: {parsed.version}")

    return Changed(
        source=source,
        version=parsed.version,
        changes=parsed.formatted_changes,
        first_check=first_check,
    )


def check_source(
    source: SourceDescriptor,
    session: Optional[requests.Session] = None,
    store: Optional[FingerprintStore] = None
) -> CheckResult:
    """
    Check one source for changes.

    Args:
        source: Source to check.
        session: HTTP session to use; a new one is created and closed
                 when omitted.
        store: Fingerprint store; defaults to the default data directory.

    Returns:
        Unchanged, Changed or Failed. Never raises.
    """
    logger.info(f"Checking {source.name} ({source.parser_type})")

    if store is None:
        store = FingerprintStore()

    owns_session = session is None
    try:
        if session is None:
            session = create_session()
        return _run_check(source, session, store)
    except Exception as e:
        logger.error(f"Check failed for {source.name}: {e}")
        return Failed(source, str(e) or type(e).__name__)
    finally:
        if owns_session and session is not None:
            session.close()

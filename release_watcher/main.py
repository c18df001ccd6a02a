#!/usr/bin/env python3
"""
Main orchestration module for the Release Watcher pipeline.

Runs one change check per configured source and notifies the source's
webhook when its release notes changed:
load sources → check each source → notify on change

A failing source is logged and reported in the exit code; it never
stops the remaining sources from being checked.
"""

import os
import sys
from typing import List, Optional

import requests

from release_watcher.config import (
    DEFAULT_DATA_DIR,
    SourceDescriptor,
    load_sources,
    select_sources,
    validate_sources,
)
from release_watcher.detect import Changed, Failed, check_source
from release_watcher.fetch import create_session
from release_watcher.notify import notify_change
from release_watcher.store import FingerprintStore
from release_watcher.utils import get_env_flag, get_env_var, get_logger, setup_logging


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def get_data_dir() -> str:
    """
    Get the directory holding the fingerprint files.

    Checks the DATA_DIR environment variable, falls back to the default.
    """
    return get_env_var("DATA_DIR", required=False, default=DEFAULT_DATA_DIR) or DEFAULT_DATA_DIR


def run_pipeline(
    sources: List[SourceDescriptor],
    store: FingerprintStore,
    dry_run: bool = False,
    notify_first_check: bool = True,
    session: Optional[requests.Session] = None
) -> int:
    """
    Check every source and send notifications for detected changes.

    Args:
        sources: Sources to check, in order.
        store: Fingerprint store shared by all checks.
        dry_run: If True, log notifications instead of sending them.
        notify_first_check: If False, a source seen for the first time only
                            records its baseline and is not announced.
        session: HTTP session to use; created and closed here if omitted.

    Returns:
        Exit code (0 if every check succeeded, 1 otherwise).
    """
    logger = get_logger("main")

    logger.info("=" * 60)
    logger.info("Release Watcher Pipeline - Starting")
    logger.info("=" * 60)

    changed = 0
    failed = 0

    owns_session = session is None
    if session is None:
        session = create_session()

    try:
        for index, source in enumerate(sources, 1):
            logger.info(f"[{index}/{len(sources)}] {source.name}")
            result = check_source(source, session=session, store=store)

            if isinstance(result, Failed):
                failed += 1
                logger.error(f"{source.name}: {result.error}")
                continue

            if not isinstance(result, Changed):
                continue

            changed += 1
            logger.info(f"{source.name}: new version {result.version}")

            if result.first_check and not notify_first_check:
                logger.info(f"{source.name}: first check, notification skipped")
                continue

            notification = notify_change(result, dry_run=dry_run)
            if not notification.success:
                # Detection state is already saved; the change is not re-sent
                logger.warning(f"{source.name}: notification failed: {notification.error}")
    finally:
        if owns_session:
            session.close()

    logger.info("=" * 60)
    logger.info("Release Watcher Pipeline - Complete")
    logger.info(f"Summary: {len(sources)} checked, {changed} changed, {failed} failed")
    logger.info("=" * 60)

    return EXIT_FAILURE if failed else EXIT_SUCCESS


def main() -> int:
    """
    Main entry point for the Release Watcher pipeline.

    Sets up logging, builds the source registry and runs the pipeline
    with proper error handling.

    Returns:
        Exit code for the process.
    """
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    setup_logging(log_level)
    logger = get_logger("main")

    dry_run = get_env_flag("DRY_RUN")
    if dry_run:
        logger.info("Running in DRY RUN mode - notifications will be skipped")

    try:
        sources = select_sources(load_sources(), os.environ.get("SOURCES"))
        for warning in validate_sources(sources):
            logger.warning(warning)

        if not sources:
            logger.error("No sources selected")
            return EXIT_CONFIG_ERROR

        return run_pipeline(
            sources,
            FingerprintStore(get_data_dir()),
            dry_run=dry_run,
            notify_first_check=get_env_flag("NOTIFY_ON_FIRST_CHECK", default=True),
        )

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        return EXIT_FAILURE

    except Exception as e:
        logger.exception(f"Unexpected error in pipeline: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())

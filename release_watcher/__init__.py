"""
Release Watcher - Automated release-notes monitoring pipeline.

This package provides functionality to:
- Fetch release-note pages and changelog files from configured sources
- Reduce HTML to stable text and fingerprint it
- Extract the latest version and its changes from markdown changelogs
- Fall back to Wayback Machine snapshots for pages that cannot be diffed live
- Notify a webhook when a source's release notes change
"""

__version__ = "1.0.0"
__author__ = "Release Watcher Team"

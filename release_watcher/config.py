"""
Source configuration for the Release Watcher pipeline.

Defines the source descriptor record, the closed set of parser types,
and loading of the source registry from defaults, a JSON file, or the
environment.
"""

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set
from urllib.parse import urlparse

from release_watcher.utils import get_env_var, get_logger, safe_read_json


# Module logger
logger = get_logger("config")

# Directory holding one fingerprint file per source
DEFAULT_DATA_DIR = ".data"


class ParserType(str, Enum):
    """Fetch and extract policy used for a source."""

    MARKDOWN = "markdown"
    HASH_ONLY = "hash-only"
    WAYBACK = "wayback"


@dataclass(frozen=True)
class SourceDescriptor:
    """
    One monitored release-notes endpoint.

    Attributes:
        id: Unique source identifier, also used to key persisted state.
        name: Display name used in notifications.
        url: URL that is fetched on every check.
        parser_type: Parser tag; one of the ParserType values for a
                     usable source. Kept as given so an unknown tag can be
                     reported per source instead of failing the whole load.
        release_page_url: Human-facing page where the changes can be read.
        prefer_main_content: Fingerprint only the main/article region.
        state_file: File name of the persisted state for this source.
        webhook_url: Incoming webhook notified on change (may be empty).
    """
    id: str
    name: str
    url: str
    parser_type: str
    release_page_url: str
    prefer_main_content: bool = False
    state_file: str = ""
    webhook_url: str = field(default="", repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.state_file:
            object.__setattr__(self, "state_file", f"{self.id}.json")


def get_webhook_url(source_id: str) -> str:
    """Webhook URL for a source from SLACK_WEBHOOK_<ID>, or empty."""
    env_name = "SLACK_WEBHOOK_" + source_id.upper().replace("-", "_")
    return get_env_var(env_name, required=False, default="") or ""


def get_default_sources() -> List[SourceDescriptor]:
    """
    Get the built-in source registry.

    Returns:
        List of SourceDescriptor objects for the shipped sources.
    """
    return [
        SourceDescriptor(
            id="claude",
            name="Claude Code",
            url="https://raw.githubusercontent.com/anthropics/claude-code/main/CHANGELOG.md",
            parser_type=ParserType.MARKDOWN.value,
            release_page_url="https://github.com/anthropics/claude-code/blob/main/CHANGELOG.md",
            webhook_url=get_webhook_url("claude"),
        ),
        SourceDescriptor(
            id="gemini",
            name="Gemini",
            url="https://gemini.google/release-notes/",
            parser_type=ParserType.HASH_ONLY.value,
            release_page_url="https://gemini.google/release-notes/",
            # Page chrome changes independently of the notes themselves
            prefer_main_content=True,
            webhook_url=get_webhook_url("gemini"),
        ),
        SourceDescriptor(
            id="chatgpt",
            name="ChatGPT",
            url="https://help.openai.com/en/articles/6825453-chatgpt-release-notes",
            parser_type=ParserType.WAYBACK.value,
            release_page_url="https://help.openai.com/en/articles/6825453-chatgpt-release-notes",
            webhook_url=get_webhook_url("chatgpt"),
        ),
    ]


def _get_str(entry: Dict[str, Any], key: str) -> str:
    """String value of a config field; missing or null fields are empty."""
    value = entry.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _parse_source_entry(entry: Dict[str, Any]) -> Optional[SourceDescriptor]:
    """
    Parse a single source entry from configuration.

    Args:
        entry: Dictionary with source configuration.

    Returns:
        SourceDescriptor or None if required fields are missing.
    """
    if not isinstance(entry, dict):
        return None

    source_id = _get_str(entry, "id")
    name = _get_str(entry, "name")
    url = _get_str(entry, "url")
    parser_type = _get_str(entry, "parser")

    if not source_id or not name or not url or not parser_type:
        return None

    prefer_main = entry.get("prefer_main_content", False)
    if not isinstance(prefer_main, bool):
        prefer_main = str(prefer_main).lower() in ("true", "1", "yes")

    webhook_url = _get_str(entry, "webhook_url") or get_webhook_url(source_id)

    return SourceDescriptor(
        id=source_id,
        name=name,
        url=url,
        parser_type=parser_type,
        release_page_url=_get_str(entry, "release_page_url") or url,
        prefer_main_content=prefer_main,
        state_file=_get_str(entry, "state_file"),
        webhook_url=webhook_url,
    )


def load_sources(config_path: Optional[str] = None) -> List[SourceDescriptor]:
    """
    Load the source registry from JSON or fall back to the defaults.

    Priority:
    1. SOURCES_CONFIG environment variable (JSON string)
    2. SOURCES_CONFIG_PATH environment variable (file path)
    3. Provided config_path parameter
    4. Built-in default sources

    Args:
        config_path: Optional path to a JSON configuration file.

    Returns:
        List of SourceDescriptor objects.
    """
    data = None

    env_config = os.environ.get("SOURCES_CONFIG", "").strip()
    if env_config:
        try:
            data = json.loads(env_config)
            logger.info("Loaded source config from SOURCES_CONFIG environment variable")
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in SOURCES_CONFIG: {e}")

    if data is None:
        file_path = os.environ.get("SOURCES_CONFIG_PATH", "").strip() or config_path
        if file_path:
            data = safe_read_json(file_path)
            if data is not None:
                logger.info(f"Loaded source config from {file_path}")
            else:
                logger.warning(f"Could not load source config from {file_path}")

    sources: List[SourceDescriptor] = []
    entries = data.get("sources") if isinstance(data, dict) else None
    if data is not None and not isinstance(entries, list):
        logger.warning("Source config has no \"sources\" list, ignoring it")
        entries = None

    if entries:
        for entry in entries:
            source = _parse_source_entry(entry)
            if source is None:
                logger.warning(f"Skipping invalid source entry: {entry!r}")
                continue
            sources.append(source)

    if not sources:
        logger.debug("No sources configured, using built-in defaults")
        sources = get_default_sources()

    logger.info(f"Loaded {len(sources)} source(s): {[s.id for s in sources]}")
    return sources


def validate_sources(sources: List[SourceDescriptor]) -> List[str]:
    """
    Validate source descriptors and return any warnings.

    Args:
        sources: List of SourceDescriptor objects to validate.

    Returns:
        List of warning messages (empty if all valid).
    """
    warnings = []
    seen_ids: Set[str] = set()
    known_types = {p.value for p in ParserType}

    for source in sources:
        if source.id in seen_ids:
            warnings.append(f"Duplicate source id: {source.id}")
        seen_ids.add(source.id)

        if source.parser_type not in known_types:
            warnings.append(f"Source {source.id} has unknown parser type '{source.parser_type}'")

        parsed = urlparse(source.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            warnings.append(f"Source {source.id} has invalid URL '{source.url}'")

    return warnings


def select_sources(sources: List[SourceDescriptor], ids: Optional[str]) -> List[SourceDescriptor]:
    """
    Restrict the registry to a comma-separated list of source ids.

    Args:
        sources: Full source registry.
        ids: Comma-separated ids, or None/empty for all sources.

    Returns:
        Sources whose id is listed, in registry order.
    """
    if not ids or not ids.strip():
        return list(sources)

    wanted = {i.strip() for i in ids.split(",") if i.strip()}
    unknown = wanted - {s.id for s in sources}
    if unknown:
        logger.warning(f"Ignoring unknown source id(s): {sorted(unknown)}")

    return [s for s in sources if s.id in wanted]

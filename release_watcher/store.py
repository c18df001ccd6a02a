"""
Fingerprint storage for the Release Watcher pipeline.

Each source keeps one small JSON file in the data directory:

    {"last_fingerprint": "<sha256 hex>", "version": "1.2.3",
     "last_updated": "2024-01-01T00:00:00Z"}

Only last_fingerprint is used for comparison; the other fields are
informational.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from release_watcher.config import DEFAULT_DATA_DIR, SourceDescriptor
from release_watcher.utils import get_logger, safe_read_json, safe_write_json


# Module logger
logger = get_logger("store")

FINGERPRINT_FIELD = "last_fingerprint"


class FingerprintStore:
    """Reads and writes the last observed fingerprint of each source."""

    def __init__(self, data_dir: str = DEFAULT_DATA_DIR):
        self.data_dir = Path(data_dir)

    def __repr__(self) -> str:
        return f"FingerprintStore(data_dir={str(self.data_dir)!r})"

    def path_for(self, source: SourceDescriptor) -> Path:
        """State file path for a source."""
        return self.data_dir / source.state_file

    def read_fingerprint(self, source: SourceDescriptor) -> Optional[str]:
        """
        Load the last stored fingerprint of a source.

        Args:
            source: Source whose state is read.

        Returns:
            The fingerprint, or None when the source has no usable state yet.
        """
        data = safe_read_json(str(self.path_for(source)))

        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Unexpected state format for {source.id}, ignoring it")
            return None

        fingerprint = data.get(FINGERPRINT_FIELD)
        if not isinstance(fingerprint, str) or not fingerprint:
            return None

        return fingerprint

    def write_fingerprint(
        self,
        source: SourceDescriptor,
        fingerprint: str,
        version: Optional[str] = None
    ) -> bool:
        """
        Persist the new fingerprint of a source.

        Args:
            source: Source whose state is written.
            fingerprint: Fingerprint of the current stable content.
            version: Extracted version, stored for reference only.

        Returns:
            True if the state was saved, False otherwise.
        """
        data: Dict[str, Any] = {
            FINGERPRINT_FIELD: fingerprint,
            "last_updated": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        if version is not None:
            data["version"] = version

        success = safe_write_json(str(self.path_for(source)), data)

        if success:
            logger.debug(f"Saved fingerprint for {source.id}")
        else:
            logger.error(f"Failed to save fingerprint for {source.id}")

        return success

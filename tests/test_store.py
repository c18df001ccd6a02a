"""
Tests for the store module.

Tests cover:
- Reading absent, valid and corrupt state files
- Writing state with metadata
- Atomic write leaving no temporary files
"""

import json
import os

import pytest
from unittest.mock import patch

from release_watcher.config import SourceDescriptor
from release_watcher.store import FingerprintStore, FINGERPRINT_FIELD


@pytest.fixture
def source():
    return SourceDescriptor(
        id="tool",
        name="Tool",
        url="https://example.com/CHANGELOG.md",
        parser_type="markdown",
        release_page_url="https://example.com/CHANGELOG.md",
    )


@pytest.fixture
def store(tmp_path):
    return FingerprintStore(str(tmp_path / "state"))


class TestReadFingerprint:
    """Tests for loading stored fingerprints."""

    def test_absent_state(self, store, source):
        """Test a missing file means no prior state."""
        assert store.read_fingerprint(source) is None

    def test_present_state(self, store, source):
        """Test an existing fingerprint is returned."""
        path = store.path_for(source)
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({FINGERPRINT_FIELD: "abc123"}), encoding="utf-8")

        assert store.read_fingerprint(source) == "abc123"

    @pytest.mark.parametrize("content", [
        "not json {",
        "[]",
        '{"identifier": "1.2.3"}',
        '{"last_fingerprint": ""}',
        '{"last_fingerprint": 42}',
    ])
    def test_unusable_state(self, store, source, content):
        """Test corrupt or foreign state files count as absent."""
        path = store.path_for(source)
        path.parent.mkdir(parents=True)
        path.write_text(content, encoding="utf-8")

        assert store.read_fingerprint(source) is None


class TestWriteFingerprint:
    """Tests for persisting fingerprints."""

    def test_round_trip(self, store, source):
        """Test a written fingerprint is read back."""
        assert store.write_fingerprint(source, "f" * 64, version="1.2.3") is True

        assert store.read_fingerprint(source) == "f" * 64

    def test_file_contents(self, store, source):
        """Test the state file shape."""
        store.write_fingerprint(source, "abc", version="2.0.0")

        with open(store.path_for(source), encoding="utf-8") as f:
            data = json.load(f)

        assert data[FINGERPRINT_FIELD] == "abc"
        assert data["version"] == "2.0.0"
        assert data["last_updated"].endswith("Z")

    def test_uses_state_file_name(self, tmp_path):
        """Test the source's state file name is honored."""
        source = SourceDescriptor(
            id="gemini",
            name="Gemini",
            url="https://example.com",
            parser_type="hash-only",
            release_page_url="https://example.com",
            state_file="custom.json",
        )
        store = FingerprintStore(str(tmp_path))

        store.write_fingerprint(source, "abc")

        assert (tmp_path / "custom.json").exists()

    def test_no_temp_files_left(self, store, source):
        """Test the atomic write cleans up after itself."""
        store.write_fingerprint(source, "a")
        store.write_fingerprint(source, "b")

        assert os.listdir(store.data_dir) == ["tool.json"]

    @patch("release_watcher.utils.json.dump")
    def test_write_failure(self, mock_dump, store, source):
        """Test a failed write returns False and keeps the old state."""
        mock_dump.side_effect = TypeError("not serializable")

        assert store.write_fingerprint(source, "abc") is False
        assert store.read_fingerprint(source) is None
        assert os.listdir(store.data_dir) == []

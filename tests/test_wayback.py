"""
Tests for the wayback module.

Tests cover:
- Availability query URL encoding
- Snapshot resolution from the availability response
- Unavailable snapshots and failed queries
"""

import pytest
from unittest.mock import Mock

from release_watcher.wayback import (
    Snapshot,
    build_availability_url,
    find_snapshot,
)


TARGET = "https://help.example.com/en/articles/1-release-notes"


def make_response(status_code=200, data=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = data
    return response


class TestBuildAvailabilityUrl:
    """Tests for the availability query URL."""

    def test_target_is_fully_encoded(self):
        """Test the target URL is percent-encoded as one parameter."""
        url = build_availability_url("https://a.example/x?y=1&z=2")

        assert url == (
            "https://archive.org/wayback/available"
            "?url=https%3A%2F%2Fa.example%2Fx%3Fy%3D1%26z%3D2"
        )


class TestFindSnapshot:
    """Tests for snapshot lookup."""

    def test_available_snapshot(self):
        """Test the closest snapshot is returned."""
        session = Mock()
        session.get.return_value = make_response(200, {
            "url": TARGET,
            "archived_snapshots": {
                "closest": {
                    "status": "200",
                    "available": True,
                    "url": "http://web.archive.org/web/20240101000000/" + TARGET,
                    "timestamp": "20240101000000",
                }
            },
        })

        snapshot = find_snapshot(TARGET, session)

        assert snapshot == Snapshot(
            url="http://web.archive.org/web/20240101000000/" + TARGET,
            timestamp="20240101000000",
        )
        assert session.get.call_args[0][0] == build_availability_url(TARGET)

    def test_snapshot_not_available(self):
        """Test available=false yields no snapshot."""
        session = Mock()
        session.get.return_value = make_response(200, {
            "archived_snapshots": {
                "closest": {"available": False, "url": "http://x", "timestamp": "1"}
            }
        })

        assert find_snapshot(TARGET, session) is None

    @pytest.mark.parametrize("data", [
        {"archived_snapshots": {}},
        {"url": TARGET},
        {},
        [],
    ])
    def test_missing_closest(self, data):
        """Test responses without a closest snapshot yield None."""
        session = Mock()
        session.get.return_value = make_response(200, data)

        assert find_snapshot(TARGET, session) is None

    def test_query_failure(self):
        """Test a failed availability query yields None."""
        session = Mock()
        session.get.return_value = make_response(503)

        assert find_snapshot(TARGET, session) is None
        session.get.return_value.json.assert_not_called()

    def test_snapshot_without_url(self):
        """Test an available snapshot with no URL is unusable."""
        session = Mock()
        session.get.return_value = make_response(200, {
            "archived_snapshots": {"closest": {"available": True, "timestamp": "1"}}
        })

        assert find_snapshot(TARGET, session) is None

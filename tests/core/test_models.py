"""
Unit tests for core.models.

Tests cover:
- Conference id derivation from name and prefix
- Endpoint stats accumulation
- Fleet status payload shape
"""

from dataclasses import FrozenInstanceError

import pytest

from media_stats.core.models import (
    EndpointStats,
    FleetStatus,
    ReceiveStreamStats,
    SendStreamStats,
    build_conference_id,
)


class TestBuildConferenceId:
    """Tests for build_conference_id."""

    def test_prefix_joined_with_slash(self):
        assert build_conference_id("room1", "conf") == "conf/room1"

    def test_trailing_slash_not_doubled(self):
        assert build_conference_id("room1", "conf/") == "conf/room1"

    def test_no_prefix(self):
        assert build_conference_id("room1") == "room1"
        assert build_conference_id("room1", None) == "room1"

    def test_empty_prefix_still_gets_separator(self):
        """An empty (but configured) prefix is treated like any other prefix."""
        assert build_conference_id("room1", "") == "/room1"


class TestStreamStatsDefaults:
    """Defaults mark jitter and RTT as unset."""

    def test_receive_defaults(self):
        stats = ReceiveStreamStats()
        assert stats.jitter_ms is None
        assert stats.rtt_ms == -1
        assert stats.packets_lost == 0

    def test_send_has_no_loss_count(self):
        assert not hasattr(SendStreamStats(), "packets_lost")

    def test_immutable(self):
        stats = SendStreamStats(ssrc=1)
        with pytest.raises(FrozenInstanceError):
            stats.bytes = 5


class TestEndpointStats:
    """Tests for EndpointStats."""

    def test_add_stats_keeps_order(self):
        ep = EndpointStats("ep1")
        first, second = ReceiveStreamStats(ssrc=1), ReceiveStreamStats(ssrc=2)
        ep.add_receive_stats(first)
        ep.add_receive_stats(second)
        ep.add_send_stats(SendStreamStats(ssrc=3))

        assert [s.ssrc for s in ep.receive_stats] == [1, 2]
        assert [s.ssrc for s in ep.send_stats] == [3]

    def test_instances_do_not_share_lists(self):
        a, b = EndpointStats("a"), EndpointStats("b")
        a.add_send_stats(SendStreamStats())
        assert b.send_stats == []


class TestFleetStatus:
    """Tests for FleetStatus.to_dict."""

    def test_unset_fields_dropped(self):
        assert FleetStatus().to_dict() == {}

    def test_camel_case_keys(self):
        status = FleetStatus(cpu_usage=0.5, conference_count=3, avg_interval_rtt=42.0, interval_download_bit_rate=1000)
        assert status.to_dict() == {
            "cpuUsage": 0.5,
            "conferenceCount": 3,
            "avgIntervalRtt": 42.0,
            "intervalDownloadBitRate": 1000,
        }

    def test_zero_values_kept(self):
        assert FleetStatus(participants_count=0).to_dict() == {"participantsCount": 0}

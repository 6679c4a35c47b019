"""Unit tests for core.source.collect_endpoint_stats."""

from media_stats.core.models import ReceiveStreamStats, SendStreamStats
from media_stats.core.source import collect_endpoint_stats


class TestCollectEndpointStats:
    """Receive and send mappings are merged into one entry per endpoint."""

    def test_union_of_directions(self, make_source):
        source = make_source(
            receive={"ep1": [ReceiveStreamStats(ssrc=1)]},
            send={"ep2": [SendStreamStats(ssrc=2)]},
        )
        endpoints = collect_endpoint_stats(source)

        assert [e.endpoint_id for e in endpoints] == ["ep1", "ep2"]
        assert endpoints[0].send_stats == []
        assert endpoints[1].receive_stats == []

    def test_endpoint_in_both_directions_deduplicated(self, make_source):
        source = make_source(
            receive={"ep1": [ReceiveStreamStats(ssrc=1)]},
            send={"ep1": [SendStreamStats(ssrc=2), SendStreamStats(ssrc=3)]},
        )
        endpoints = collect_endpoint_stats(source)

        assert len(endpoints) == 1
        assert [s.ssrc for s in endpoints[0].receive_stats] == [1]
        assert [s.ssrc for s in endpoints[0].send_stats] == [2, 3]

    def test_endpoint_with_empty_streams_kept(self, make_source):
        source = make_source(receive={"ep1": []})
        endpoints = collect_endpoint_stats(source)
        assert [e.endpoint_id for e in endpoints] == ["ep1"]

    def test_missing_endpoint_ids_skipped(self, make_source):
        source = make_source(
            receive={None: [ReceiveStreamStats(ssrc=1)], "": [], "ep1": [ReceiveStreamStats(ssrc=2)]},
            send={None: [SendStreamStats(ssrc=3)]},
        )
        endpoints = collect_endpoint_stats(source)
        assert [e.endpoint_id for e in endpoints] == ["ep1"]

    def test_non_list_streams_skipped_per_entry(self, make_source):
        good = ReceiveStreamStats(ssrc=2)
        source = make_source(
            receive={"ep-bad": ReceiveStreamStats(ssrc=1), "ep-good": [good]},
            send={"ep-bad": 7, "ep-good": (SendStreamStats(ssrc=3),)},
        )
        endpoints = collect_endpoint_stats(source)

        assert [e.endpoint_id for e in endpoints] == ["ep-good"]
        assert endpoints[0].receive_stats == [good]
        assert [s.ssrc for s in endpoints[0].send_stats] == [3]

    def test_none_mappings_treated_as_empty(self, make_source):
        source = make_source()
        source.receive = None
        source.send = None
        assert collect_endpoint_stats(source) == []

    def test_none_stream_list_treated_as_empty(self, make_source):
        source = make_source(send={"ep1": None})
        endpoints = collect_endpoint_stats(source)
        assert endpoints[0].send_stats == []

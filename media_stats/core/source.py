"""
Statistics source interface.

The source belongs to the media server: it knows the current per-stream
counters for a conference or call. The reporter only reads a fresh snapshot
from it once per cycle.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Sequence

from structlog import get_logger

from ..metrics import MALFORMED_ENTRIES
from .models import EndpointStats, ReceiveStreamStats, SendStreamStats

logger = get_logger(__name__)


class StatsSource(ABC):
    """Provides current stream counters grouped by remote endpoint id."""

    @abstractmethod
    def receive_stats_by_endpoint(self) -> Mapping[str, Sequence[ReceiveStreamStats]]:
        """Streams received from each endpoint."""

    @abstractmethod
    def send_stats_by_endpoint(self) -> Mapping[str, Sequence[SendStreamStats]]:
        """Streams sent to each endpoint."""


def _valid_endpoint_id(endpoint_id) -> bool:
    return isinstance(endpoint_id, str) and endpoint_id != ""


def _valid_streams(streams) -> bool:
    return streams is None or isinstance(streams, (list, tuple))


def collect_endpoint_stats(source: StatsSource) -> List[EndpointStats]:
    """
    Merge receive and send stats into one entry per endpoint.

    Endpoints with only one direction still get an entry. Entries keyed by a
    missing or empty endpoint id, or whose streams are not a list, are
    dropped on their own. Order follows first appearance, receive mapping
    first.
    """
    merged: Dict[str, EndpointStats] = {}

    for endpoint_id, streams in (source.receive_stats_by_endpoint() or {}).items():
        if not _valid_endpoint_id(endpoint_id):
            logger.debug("Skipping receive stats without endpoint id", endpoint_id=endpoint_id)
            MALFORMED_ENTRIES.inc()
            continue
        if not _valid_streams(streams):
            logger.debug("Skipping malformed receive stats", endpoint_id=endpoint_id, streams_type=type(streams).__name__)
            MALFORMED_ENTRIES.inc()
            continue
        entry = merged.setdefault(endpoint_id, EndpointStats(endpoint_id))
        entry.receive_stats.extend(streams or ())

    for endpoint_id, streams in (source.send_stats_by_endpoint() or {}).items():
        if not _valid_endpoint_id(endpoint_id):
            logger.debug("Skipping send stats without endpoint id", endpoint_id=endpoint_id)
            MALFORMED_ENTRIES.inc()
            continue
        if not _valid_streams(streams):
            logger.debug("Skipping malformed send stats", endpoint_id=endpoint_id, streams_type=type(streams).__name__)
            MALFORMED_ENTRIES.inc()
            continue
        entry = merged.setdefault(endpoint_id, EndpointStats(endpoint_id))
        entry.send_stats.extend(streams or ())

    return list(merged.values())

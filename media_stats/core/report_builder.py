"""
Report building: maps one stream's counters onto a backend-shaped record.

Unset measurements are filtered here so they never reach the backend as
zero or negative values.
"""

from typing import Optional

from .models import (
    ConferenceReport,
    ReceiveStreamStats,
    StreamDirection,
    StreamStats,
    UserInfo,
)


def _rtt_or_none(rtt_ms: Optional[int]) -> Optional[int]:
    if rtt_ms is None or rtt_ms < 0:
        return None
    return rtt_ms


def build_report(
    stats: StreamStats,
    direction: StreamDirection,
    user_info: UserInfo,
    remote_user_id: str,
) -> ConferenceReport:
    """
    Build the report for a single stream.

    Args:
        stats: Counters for the stream; a ReceiveStreamStats for inbound.
        direction: INBOUND for streams received from ``remote_user_id``,
            OUTBOUND for streams sent to it.
        user_info: Active conference descriptor (conference id, local user
            id and backend-assigned uc id).
        remote_user_id: Endpoint the stream belongs to.

    Returns:
        The report. Counter values are passed through unvalidated.
    """
    packets_lost = None
    if direction is StreamDirection.INBOUND:
        packets_lost = stats.packets_lost if isinstance(stats, ReceiveStreamStats) else 0

    return ConferenceReport(
        conference_id=user_info.conference_id,
        local_user_id=user_info.user_id,
        remote_user_id=remote_user_id,
        direction=direction,
        ssrc=str(stats.ssrc),
        uc_id=user_info.uc_id,
        bytes=stats.bytes,
        packets=stats.packets,
        fractional_packet_loss=stats.fractional_packet_loss,
        packets_lost=packets_lost,
        jitter=stats.jitter_ms,
        rtt=_rtt_or_none(stats.rtt_ms),
    )

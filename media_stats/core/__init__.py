"""Core data models and report building."""

from .models import (
    ConferenceEvent,
    ConferenceInfo,
    ConferenceReport,
    EndpointStats,
    FleetStatus,
    ReceiveStreamStats,
    SendStreamStats,
    StreamDirection,
    StreamStats,
    UserInfo,
    build_conference_id,
)
from .report_builder import build_report

__all__ = [
    "ConferenceEvent",
    "ConferenceInfo",
    "ConferenceReport",
    "EndpointStats",
    "FleetStatus",
    "ReceiveStreamStats",
    "SendStreamStats",
    "StreamDirection",
    "StreamStats",
    "UserInfo",
    "build_conference_id",
    "build_report",
]

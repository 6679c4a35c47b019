"""
Core data models for media stats reporting.

Value types for one reporting cycle (per-stream counters grouped per remote
endpoint), the descriptors exchanged with the monitoring backend during the
conference lifecycle, and the backend-shaped report records.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional


class StreamDirection(Enum):
    """Direction of a stream relative to the local reporting party."""
    INBOUND = "inbound"    # received from the remote endpoint
    OUTBOUND = "outbound"  # sent to the remote endpoint


class ConferenceEvent(Enum):
    """Conference lifecycle events understood by the backend."""
    SETUP = "conferenceSetup"
    TERMINATED = "conferenceTerminated"


@dataclass(frozen=True)
class StreamStats:
    """Counters shared by both directions of a stream (one SSRC)."""
    ssrc: int = -1
    bytes: int = 0
    packets: int = 0
    fractional_packet_loss: float = 0.0
    jitter_ms: Optional[float] = None  # None means unset
    rtt_ms: Optional[int] = -1         # None or negative means unset


@dataclass(frozen=True)
class SendStreamStats(StreamStats):
    """Counters for one stream sent to an endpoint."""


@dataclass(frozen=True)
class ReceiveStreamStats(StreamStats):
    """Counters for one stream received from an endpoint."""
    packets_lost: int = 0


@dataclass
class EndpointStats:
    """All stream stats for one remote endpoint in one cycle."""
    endpoint_id: str
    receive_stats: List[ReceiveStreamStats] = field(default_factory=list)
    send_stats: List[SendStreamStats] = field(default_factory=list)

    def add_receive_stats(self, stats: ReceiveStreamStats) -> None:
        self.receive_stats.append(stats)

    def add_send_stats(self, stats: SendStreamStats) -> None:
        self.send_stats.append(stats)


@dataclass(frozen=True)
class ConferenceInfo:
    """Descriptor sent with the setup event."""
    conference_id: str
    initiator_id: str


@dataclass(frozen=True)
class UserInfo:
    """Identifies reports for an active conference; also the termination descriptor."""
    conference_id: str
    user_id: str
    uc_id: str


def build_conference_id(conference_name: str, prefix: Optional[str] = None) -> str:
    """Join an optional prefix and a conference name with exactly one '/'."""
    if prefix is None:
        return conference_name
    if not prefix.endswith("/"):
        prefix += "/"
    return prefix + conference_name


@dataclass(frozen=True)
class ConferenceReport:
    """
    One stream's stats in the shape the monitoring backend expects.

    ``packets_lost`` is only carried by inbound reports; ``jitter`` and
    ``rtt`` are None when the measurement was unset and are then left out of
    :meth:`to_dict` entirely.
    """
    conference_id: str
    local_user_id: str
    remote_user_id: str
    direction: StreamDirection
    ssrc: str
    uc_id: str
    bytes: int
    packets: int
    fractional_packet_loss: float
    packets_lost: Optional[int] = None
    jitter: Optional[float] = None
    rtt: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        inbound = self.direction is StreamDirection.INBOUND
        data: Dict[str, Any] = {
            "confID": self.conference_id,
            "localUserID": self.local_user_id,
            "remoteUserID": self.remote_user_id,
            "statsType": self.direction.value,
            "ssrc": self.ssrc,
            "ucID": self.uc_id,
            "bytesReceived" if inbound else "bytesSent": self.bytes,
            "packetsReceived" if inbound else "packetsSent": self.packets,
            "fractionalPacketLoss": self.fractional_packet_loss,
        }
        if inbound and self.packets_lost is not None:
            data["packetsLost"] = self.packets_lost
        if self.jitter is not None:
            data["jitter"] = self.jitter
        if self.rtt is not None:
            data["rtt"] = self.rtt
        return data


@dataclass
class FleetStatus:
    """
    Periodic health record for the media server as a whole.

    Every field is optional; unset fields are dropped from the payload.
    """
    cpu_usage: Optional[float] = None
    memory_usage: Optional[int] = None
    total_memory: Optional[int] = None
    thread_count: Optional[int] = None
    conference_count: Optional[int] = None
    participants_count: Optional[int] = None
    audio_fabric_count: Optional[int] = None
    video_fabric_count: Optional[int] = None
    interval_download_bit_rate: Optional[int] = None
    interval_upload_bit_rate: Optional[int] = None
    interval_received_bytes: Optional[int] = None
    interval_sent_bytes: Optional[int] = None
    interval_loss: Optional[float] = None
    total_loss: Optional[float] = None
    avg_interval_rtt: Optional[float] = None
    avg_interval_jitter: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            head, *rest = f.name.split("_")
            data[head + "".join(part.capitalize() for part in rest)] = value
        return data

"""Shared fixtures: a recording backend and an in-memory stats source."""

from typing import Any, Dict, List, Optional, Sequence

import pytest

from media_stats.backend.base import InitListener, SetupListener, StatsBackend
from media_stats.core.models import ConferenceEvent, ReceiveStreamStats, SendStreamStats
from media_stats.core.registry import StatsService
from media_stats.core.source import StatsSource


class RecordingBackend(StatsBackend):
    """Backend double that records every call in order."""

    def __init__(self, initialized: bool = True):
        self.initialized = initialized
        self.calls: List[tuple] = []
        self.init_listener: Optional[InitListener] = None
        self.init_args: Optional[tuple] = None
        self.setup_listeners: List[SetupListener] = []
        self.events: List[tuple] = []
        self.fleet_updates: List[Any] = []

    def initialize(self, app_id, credentials, user_id, server_info, listener):
        self.init_args = (app_id, credentials, user_id, server_info)
        self.init_listener = listener
        self.calls.append(("initialize", app_id))

    def is_initialized(self):
        return self.initialized

    def begin_endpoint_batch(self, endpoint_id, conference_id):
        self.calls.append(("begin", endpoint_id, conference_id))

    def end_endpoint_batch(self, endpoint_id, conference_id):
        self.calls.append(("end", endpoint_id, conference_id))

    def submit_report(self, endpoint_id, report):
        self.calls.append(("submit", endpoint_id, report))

    def send_conference_event(self, event, descriptor, listener=None):
        self.events.append((event, descriptor))
        self.calls.append(("event", event))
        if listener is not None:
            self.setup_listeners.append(listener)

    def send_fleet_status_update(self, status):
        self.fleet_updates.append(status)

    # helpers
    def confirm_setup(self, uc_id: str = "uc-1") -> None:
        for listener in self.setup_listeners:
            listener.on_response(uc_id)

    def reject_setup(self, reason: str = "invalid_conference", message: str = "rejected") -> None:
        for listener in self.setup_listeners:
            listener.on_error(reason, message)

    def events_of(self, kind: ConferenceEvent) -> List[tuple]:
        return [e for e in self.events if e[0] is kind]

    def reports(self) -> list:
        return [c[2] for c in self.calls if c[0] == "submit"]

    def bracket_calls(self) -> List[tuple]:
        return [c for c in self.calls if c[0] in ("begin", "end")]


class StaticStatsSource(StatsSource):
    """Stats source returning fixed mappings."""

    def __init__(
        self,
        receive: Optional[Dict[Any, Sequence[ReceiveStreamStats]]] = None,
        send: Optional[Dict[Any, Sequence[SendStreamStats]]] = None,
    ):
        self.receive = receive or {}
        self.send = send or {}
        self.reads = 0

    def receive_stats_by_endpoint(self):
        self.reads += 1
        return self.receive

    def send_stats_by_endpoint(self):
        return self.send


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def service(backend):
    svc = StatsService(42, backend)
    svc._initialized = True
    return svc


@pytest.fixture
def receive_stats():
    return ReceiveStreamStats(
        ssrc=111,
        bytes=1000,
        packets=10,
        packets_lost=1,
        fractional_packet_loss=0.1,
        jitter_ms=5.0,
        rtt_ms=40,
    )


@pytest.fixture
def send_stats():
    return SendStreamStats(
        ssrc=222,
        bytes=2000,
        packets=20,
        fractional_packet_loss=0.05,
        jitter_ms=None,
        rtt_ms=-1,
    )


@pytest.fixture
def make_backend():
    """Factory for RecordingBackend instances; keeps track of every one created."""
    created: List[RecordingBackend] = []

    def factory(initialized: bool = True) -> RecordingBackend:
        b = RecordingBackend(initialized=initialized)
        created.append(b)
        return b

    factory.created = created
    return factory


@pytest.fixture
def make_source():
    return StaticStatsSource

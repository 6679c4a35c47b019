"""
Log-only backend.

Accepts everything a real monitoring backend would and writes it to the
structured log instead of the network. Initialization and conference setup
succeed immediately, with a generated uc id. Used for dry runs and local
development.
"""

from __future__ import annotations

import threading
import uuid
from typing import Any, Dict, Optional

from structlog import get_logger

from ..core.models import ConferenceEvent, ConferenceReport, FleetStatus
from .base import Credentials, InitListener, KeyPairCredentials, ServerInfo, SetupListener, StatsBackend

logger = get_logger(__name__)


class LoggingBackend(StatsBackend):
    """Backend that logs reports and events instead of sending them."""

    def __init__(self):
        self._lock = threading.Lock()
        self._initialized = False
        self._listener: Optional[InitListener] = None
        self.app_id: Optional[int] = None
        self.user_id: Optional[str] = None
        self.server_info: Optional[ServerInfo] = None
        self.reports_submitted = 0
        self.events_sent: Dict[str, int] = {}

    def initialize(
        self,
        app_id: int,
        credentials: Credentials,
        user_id: str,
        server_info: ServerInfo,
        listener: InitListener,
    ) -> None:
        auth = "key_pair" if isinstance(credentials, KeyPairCredentials) else "secret"
        with self._lock:
            self.app_id = app_id
            self.user_id = user_id
            self.server_info = server_info
            self._listener = listener
            self._initialized = True
        logger.info(
            "Logging backend initialized",
            app_id=app_id,
            user_id=user_id,
            auth=auth,
            os=server_info.os,
            endpoint_type=server_info.endpoint_type,
        )
        listener.on_initialized("logging backend ready")

    def reinitialize(self) -> None:
        """Repeat the ready announcement, as a real backend does on re-handshake."""
        with self._lock:
            listener = self._listener
        if listener is not None:
            listener.on_initialized("logging backend re-initialized")

    def is_initialized(self) -> bool:
        with self._lock:
            return self._initialized

    def begin_endpoint_batch(self, endpoint_id: str, conference_id: str) -> None:
        logger.debug("Begin endpoint batch", endpoint_id=endpoint_id, conference_id=conference_id)

    def end_endpoint_batch(self, endpoint_id: str, conference_id: str) -> None:
        logger.debug("End endpoint batch", endpoint_id=endpoint_id, conference_id=conference_id)

    def submit_report(self, endpoint_id: str, report: ConferenceReport) -> None:
        with self._lock:
            self.reports_submitted += 1
        logger.info("Conference stats", endpoint_id=endpoint_id, report=report.to_dict())

    def send_conference_event(
        self,
        event: ConferenceEvent,
        descriptor: Any,
        listener: Optional[SetupListener] = None,
    ) -> None:
        with self._lock:
            self.events_sent[event.value] = self.events_sent.get(event.value, 0) + 1
        logger.info("Conference event", conference_event=event.value, conference_id=getattr(descriptor, "conference_id", None))
        if event is ConferenceEvent.SETUP and listener is not None:
            listener.on_response(uuid.uuid4().hex)

    def send_fleet_status_update(self, status: FleetStatus) -> None:
        logger.info("Fleet status", status=status.to_dict())

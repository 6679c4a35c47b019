"""
Conference lifecycle against the monitoring backend.

A conference is announced with a setup event; the backend answers
asynchronously with the identifier (uc id) under which all stats for the
conference must be filed. Reports are gated on that identifier, and a
termination event closes the conference when the owner stops it.

    CREATED -> SETUP_PENDING -> ACTIVE -> TERMINATED

A rejected setup leaves the conference in SETUP_PENDING; it is not retried.
"""

from __future__ import annotations

import threading
import weakref
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from structlog import get_logger

from ..backend.base import SetupListener
from ..metrics import CONFERENCE_EVENTS
from .models import ConferenceEvent, ConferenceInfo, UserInfo, build_conference_id

if TYPE_CHECKING:
    from .registry import StatsService

logger = get_logger(__name__)

SetupErrorCallback = Callable[[str, str], None]


class LifecycleState(Enum):
    CREATED = "created"
    SETUP_PENDING = "setup_pending"
    ACTIVE = "active"
    TERMINATED = "terminated"


class _ConferenceSetupListener(SetupListener):
    """
    Delivers the setup outcome back to its lifecycle.

    Holds only a weak reference so a backend that leaks the listener cannot
    keep the conference alive.
    """

    def __init__(
        self,
        lifecycle_ref: "weakref.ReferenceType[ConferenceLifecycle]",
        conference_id: str,
        on_error: Optional[SetupErrorCallback] = None,
    ):
        self._lifecycle_ref = lifecycle_ref
        self._conference_id = conference_id
        self._on_error = on_error

    def on_response(self, uc_id: str) -> None:
        lifecycle = self._lifecycle_ref()
        # may be None if the conference was garbage collected
        if lifecycle is not None:
            lifecycle._conference_setup_response(uc_id)

    def on_error(self, reason: str, message: str) -> None:
        logger.error(
            "Failed to set up conference with stats backend",
            conference_id=self._conference_id,
            reason=reason,
            message=message,
        )
        if self._on_error is None:
            return
        try:
            self._on_error(reason, message)
        except Exception:
            logger.warning("Setup error callback raised", conference_id=self._conference_id, exc_info=True)


class ConferenceLifecycle:
    """Setup/termination state machine for one conference or call."""

    def __init__(
        self,
        service: "StatsService",
        conference_name: str,
        conference_id_prefix: Optional[str],
        initiator_id: str,
        on_setup_error: Optional[SetupErrorCallback] = None,
    ):
        self._service = service
        self.initiator_id = initiator_id
        self.conference_id = build_conference_id(conference_name, conference_id_prefix)
        self._on_setup_error = on_setup_error

        # Written by the backend callback thread, read by every reporting cycle
        self._lock = threading.Lock()
        self._state = LifecycleState.CREATED
        self._user_info: Optional[UserInfo] = None

    @property
    def state(self) -> LifecycleState:
        with self._lock:
            return self._state

    @property
    def user_info(self) -> Optional[UserInfo]:
        """Descriptor assigned by the backend, once setup has completed."""
        with self._lock:
            return self._user_info

    @property
    def active_user_info(self) -> Optional[UserInfo]:
        """The descriptor to report under, or None while reporting is gated off."""
        with self._lock:
            if self._state is LifecycleState.ACTIVE:
                return self._user_info
            return None

    def start(self) -> None:
        """Send the setup event. Only the first call has any effect."""
        with self._lock:
            if self._state is not LifecycleState.CREATED:
                logger.debug("Conference already started", conference_id=self.conference_id, state=self._state.value)
                return
            self._state = LifecycleState.SETUP_PENDING

        listener = _ConferenceSetupListener(weakref.ref(self), self.conference_id, self._on_setup_error)
        CONFERENCE_EVENTS.labels(event=ConferenceEvent.SETUP.value).inc()
        self._service.backend.send_conference_event(
            ConferenceEvent.SETUP,
            ConferenceInfo(self.conference_id, self.initiator_id),
            listener,
        )
        logger.info("Conference setup requested", conference_id=self.conference_id, initiator_id=self.initiator_id)

    def stop(self) -> None:
        """
        Terminate the conference.

        The termination event is only sent when setup had completed; a
        conference still waiting for its uc id has nothing to terminate.
        Repeated calls are no-ops.
        """
        with self._lock:
            if self._state is LifecycleState.TERMINATED:
                return
            user_info = self._user_info
            self._state = LifecycleState.TERMINATED

        if user_info is None:
            logger.debug("Conference stopped before setup completed", conference_id=self.conference_id)
            return

        CONFERENCE_EVENTS.labels(event=ConferenceEvent.TERMINATED.value).inc()
        self._service.backend.send_conference_event(ConferenceEvent.TERMINATED, user_info)
        logger.info("Conference terminated", conference_id=self.conference_id, uc_id=user_info.uc_id)

    def _conference_setup_response(self, uc_id: str) -> None:
        with self._lock:
            if self._state is not LifecycleState.SETUP_PENDING:
                logger.debug(
                    "Ignoring setup response",
                    conference_id=self.conference_id,
                    state=self._state.value,
                )
                return
            self._user_info = UserInfo(self.conference_id, self.initiator_id, uc_id)
            self._state = LifecycleState.ACTIVE
        logger.info("Conference set up with stats backend", conference_id=self.conference_id, uc_id=uc_id)

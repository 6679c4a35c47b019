"""
Monitoring backend client interface.

The backend client owns network I/O, batching, authentication and retries.
Everything here is fire-and-forget from the caller's point of view:
asynchronous outcomes arrive on listener objects, possibly on a thread the
backend owns.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..core.models import ConferenceEvent, ConferenceReport, FleetStatus


@dataclass(frozen=True)
class ServerInfo:
    """Describes the reporting process to the backend."""
    os: str
    endpoint_type: str = "middlebox"
    name: Optional[str] = None
    ver: Optional[str] = None


@dataclass(frozen=True)
class KeyPairCredentials:
    """Token-based authentication with a registered private key."""
    app_id: int
    key_id: str
    key_path: str
    user_id: str


@dataclass(frozen=True)
class SecretCredentials:
    """Shared-secret authentication."""
    app_secret: str


Credentials = Union[KeyPairCredentials, SecretCredentials]


class InitListener(ABC):
    """Receives the outcome of backend initialization."""

    @abstractmethod
    def on_initialized(self, message: str) -> None:
        """Backend is ready. May be delivered more than once per session."""

    @abstractmethod
    def on_error(self, reason: str, message: str) -> None:
        """Backend failed to initialize."""


class SetupListener(ABC):
    """Receives the outcome of a conference setup event."""

    @abstractmethod
    def on_response(self, uc_id: str) -> None:
        """Conference created; ``uc_id`` identifies it inside the backend."""

    @abstractmethod
    def on_error(self, reason: str, message: str) -> None:
        """Conference setup was rejected."""


class StatsBackend(ABC):
    """A connection to the monitoring backend for one application id."""

    @abstractmethod
    def initialize(
        self,
        app_id: int,
        credentials: Credentials,
        user_id: str,
        server_info: ServerInfo,
        listener: InitListener,
    ) -> None:
        """Start asynchronous initialization."""

    @abstractmethod
    def is_initialized(self) -> bool:
        ...

    @abstractmethod
    def begin_endpoint_batch(self, endpoint_id: str, conference_id: str) -> None:
        """Open the batch of reports for one endpoint."""

    @abstractmethod
    def end_endpoint_batch(self, endpoint_id: str, conference_id: str) -> None:
        """Close the batch opened by :meth:`begin_endpoint_batch`."""

    @abstractmethod
    def submit_report(self, endpoint_id: str, report: ConferenceReport) -> None:
        ...

    @abstractmethod
    def send_conference_event(
        self,
        event: ConferenceEvent,
        descriptor: Any,
        listener: Optional[SetupListener] = None,
    ) -> None:
        ...

    @abstractmethod
    def send_fleet_status_update(self, status: FleetStatus) -> None:
        ...

"""
Stats service registry.

Keeps at most one backend session (stats service) per application id for
the lifetime of the registry. Backend initialization is asynchronous and the
backend re-announces readiness every few hours; only the first announcement
per service reaches the caller.
"""

from __future__ import annotations

import platform
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from structlog import get_logger

from ..backend.base import (
    Credentials,
    InitListener,
    KeyPairCredentials,
    SecretCredentials,
    ServerInfo,
    StatsBackend,
)
from .models import FleetStatus
from ..errors import MISSING_CREDENTIALS

logger = get_logger(__name__)

ErrorCallback = Callable[[str, str], None]


@dataclass(frozen=True)
class VersionInfo:
    """Name and version of the application doing the reporting."""
    application_name: str
    version: str

    def __str__(self) -> str:
        return self.version


class StatsService:
    """Handle for one application id's backend session."""

    def __init__(self, app_id: int, backend: StatsBackend, is_client: bool = False):
        self.app_id = app_id
        self.backend = backend
        # reporting a client connection rather than a server one
        self.is_client = is_client
        self._initialized = False

    def is_initialized(self) -> bool:
        return self._initialized

    def send_fleet_status_update(self, status: FleetStatus) -> bool:
        """
        Forward a fleet status record if the backend is ready.

        The backend does not queue these, so records sent before
        initialization are dropped. Returns whether the record was sent.
        """
        if self.backend is None or not self.backend.is_initialized():
            return False
        self.backend.send_fleet_status_update(status)
        return True

    def __repr__(self) -> str:
        return f"StatsService(app_id={self.app_id}, initialized={self._initialized})"


ReadyCallback = Callable[[StatsService, str], None]


def resolve_credentials(
    app_id: int,
    app_secret: Optional[str],
    key_id: Optional[str],
    key_path: Optional[str],
    user_id: str,
) -> Optional[Credentials]:
    """Prefer a key pair over the shared secret; None if neither is usable."""
    if key_id and key_path:
        return KeyPairCredentials(app_id=app_id, key_id=key_id, key_path=key_path, user_id=user_id)
    logger.warning("Key id or key path missing, will try using app secret", app_id=app_id)
    if app_secret:
        return SecretCredentials(app_secret=app_secret)
    return None


def build_server_info(version: Optional[VersionInfo] = None, is_client: bool = False) -> ServerInfo:
    return ServerInfo(
        os=platform.system(),
        endpoint_type="browser" if is_client else "middlebox",
        name=version.application_name if version else None,
        ver=str(version) if version else None,
    )


def _notify(callback: Optional[Callable[..., None]], *args, app_id: int) -> None:
    if callback is None:
        return
    try:
        callback(*args)
    except Exception:
        logger.warning("Stats service callback raised", app_id=app_id, exc_info=True)


class _ServiceInitListener(InitListener):
    def __init__(
        self,
        registry: "StatsServiceRegistry",
        service: StatsService,
        on_ready: Optional[ReadyCallback],
        on_error: Optional[ErrorCallback],
    ):
        self._registry = registry
        self._service = service
        self._on_ready = on_ready
        self._on_error = on_error

    def on_initialized(self, message: str) -> None:
        self._registry._service_initialized(self._service, message, self._on_ready)

    def on_error(self, reason: str, message: str) -> None:
        logger.error(
            "Stats backend failed to initialize",
            app_id=self._service.app_id,
            reason=reason,
            message=message,
        )
        _notify(self._on_error, reason, message, app_id=self._service.app_id)


class StatsServiceRegistry:
    """
    Creates and tracks stats services by application id.

    Args:
        backend_factory: Returns a new, uninitialized backend client.
    """

    def __init__(self, backend_factory: Callable[[], StatsBackend]):
        self._backend_factory = backend_factory
        self._services: Dict[int, StatsService] = {}
        # reentrant: backends may deliver on_initialized synchronously from initialize()
        self._lock = threading.RLock()

    def get_or_create(
        self,
        app_id: int,
        *,
        app_secret: Optional[str] = None,
        key_id: Optional[str] = None,
        key_path: Optional[str] = None,
        initiator_id: str = "",
        is_client: bool = False,
        version: Optional[VersionInfo] = None,
        on_ready: Optional[ReadyCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Optional[StatsService]:
        """
        Return the service for ``app_id``, creating and initializing it if needed.

        An existing service is returned as-is; its callbacks are not invoked
        again. A new service is registered before initialization completes,
        so concurrent callers share the in-flight instance. ``on_ready`` is
        called with the service once the backend is ready; ``on_error`` with
        ``(reason, message)`` on failure.

        Returns:
            The service, or None when no credentials were supplied.
        """
        with self._lock:
            existing = self._services.get(app_id)
            if existing is not None:
                return existing

            credentials = resolve_credentials(app_id, app_secret, key_id, key_path, initiator_id)
            if credentials is None:
                logger.warning("App secret missing, skipping stats service init", app_id=app_id)
                _notify(on_error, MISSING_CREDENTIALS, "Neither key id/key path nor app secret supplied", app_id=app_id)
                return None

            backend = self._backend_factory()
            service = StatsService(app_id, backend, is_client=is_client)
            self._services[app_id] = service

            backend.initialize(
                app_id,
                credentials,
                initiator_id,
                build_server_info(version, is_client),
                _ServiceInitListener(self, service, on_ready, on_error),
            )
            logger.info("Stats service created", app_id=app_id, is_client=is_client)
            return service

    def get(self, app_id: int) -> Optional[StatsService]:
        with self._lock:
            return self._services.get(app_id)

    def remove(self, app_id: int) -> Optional[StatsService]:
        """Forget the service for ``app_id``; the backend session is left to wind down itself."""
        with self._lock:
            service = self._services.pop(app_id, None)
        if service is not None:
            logger.info("Stats service removed", app_id=app_id)
        return service

    def __len__(self) -> int:
        with self._lock:
            return len(self._services)

    def _service_initialized(self, service: StatsService, message: str, on_ready: Optional[ReadyCallback]) -> None:
        with self._lock:
            # the backend re-initializes periodically; only the first one counts
            if self._services.get(service.app_id) is not service or service.is_initialized():
                return
            service._initialized = True
        logger.debug("Stats backend initialized", app_id=service.app_id, message=message)
        _notify(on_ready, service, message, app_id=service.app_id)

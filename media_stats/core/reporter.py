"""
Periodic stats reporting for one conference or call.

Each cycle pulls a fresh snapshot from the stats source and files one report
per stream with the monitoring backend, bracketed per endpoint. Cycles are
silently skipped until the conference has been set up with the backend and
the backend itself is initialized; missed cycles are not buffered.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Optional

from structlog import get_logger

from ..metrics import ACTIVE_REPORTERS, CYCLES_SKIPPED, MALFORMED_ENTRIES, REPORTS_SUBMITTED
from .lifecycle import ConferenceLifecycle, SetupErrorCallback
from .models import EndpointStats, StreamDirection, StreamStats, UserInfo
from .report_builder import build_report
from .source import StatsSource, collect_endpoint_stats

if TYPE_CHECKING:
    from ..backend.base import StatsBackend
    from .registry import StatsService

logger = get_logger(__name__)


class PeriodicStatsReporter:
    """
    Reports stream stats for one conference every ``period_ms``.

    Args:
        source: Provides the per-endpoint stream counters.
        period_ms: Interval between cycles in milliseconds.
        service: Stats service (backend session) to report to.
        conference_name: Name of the conference or call.
        conference_id_prefix: Optional prefix joined to the name with '/'.
        initiator_id: Id of the local reporting party.
        on_setup_error: Called with (reason, message) if the backend
            rejects the conference setup.
    """

    def __init__(
        self,
        source: StatsSource,
        period_ms: int,
        service: "StatsService",
        conference_name: str,
        conference_id_prefix: Optional[str] = None,
        initiator_id: str = "",
        on_setup_error: Optional[SetupErrorCallback] = None,
    ):
        if period_ms <= 0:
            raise ValueError(f"period_ms must be positive, got {period_ms}")
        self.source = source
        self.period_ms = period_ms
        self.service = service
        self.lifecycle = ConferenceLifecycle(
            service,
            conference_name,
            conference_id_prefix,
            initiator_id,
            on_setup_error=on_setup_error,
        )
        self._task: Optional[asyncio.Task[None]] = None
        self._stopped = False

    @property
    def conference_id(self) -> str:
        return self.lifecycle.conference_id

    @property
    def initiator_id(self) -> str:
        return self.lifecycle.initiator_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def start(self) -> None:
        """Request conference setup and schedule the reporting timer."""
        if self._task is not None or self._stopped:
            return
        self.lifecycle.start()
        self._task = asyncio.create_task(
            self._run_periodically(), name=f"media-stats-{self.conference_id}"
        )
        ACTIVE_REPORTERS.inc()

    async def stop(self) -> None:
        """Cancel the timer and terminate the conference. Safe to repeat."""
        if self._stopped:
            return
        # set before the first await so no cycle can begin after this point
        self._stopped = True
        task, self._task = self._task, None
        try:
            if task is not None:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        except Exception:
            logger.warning("Reporting task ended with an error", conference_id=self.conference_id, exc_info=True)
        finally:
            if task is not None:
                ACTIVE_REPORTERS.dec()
            self.lifecycle.stop()

    async def _run_periodically(self) -> None:
        interval = self.period_ms / 1000.0
        while not self._stopped:
            await asyncio.sleep(interval)
            if self._stopped:
                break
            try:
                self.run_once()
            except Exception:
                logger.warning("Reporting cycle failed", conference_id=self.conference_id, exc_info=True)

    # ------------------------------------------------------------------
    # Reporting cycle
    # ------------------------------------------------------------------
    def run_once(self) -> int:
        """
        Run one reporting cycle.

        Returns:
            Number of reports handed to the backend; 0 for a skipped cycle.
        """
        if self._stopped:
            return 0

        user_info = self.lifecycle.active_user_info
        if user_info is None:
            CYCLES_SKIPPED.labels(reason="not_ready").inc()
            return 0

        backend = self.service.backend
        try:
            ready = backend is not None and backend.is_initialized()
        except Exception:
            logger.warning("Backend readiness check failed", conference_id=self.conference_id, exc_info=True)
            ready = False
        if not ready:
            CYCLES_SKIPPED.labels(reason="backend_not_initialized").inc()
            return 0

        try:
            endpoints = collect_endpoint_stats(self.source)
        except Exception:
            logger.warning("Failed to read stats snapshot", conference_id=self.conference_id, exc_info=True)
            CYCLES_SKIPPED.labels(reason="snapshot_error").inc()
            return 0

        submitted = 0
        for endpoint in endpoints:
            try:
                submitted += self._report_endpoint(backend, user_info, endpoint)
            except Exception:
                logger.warning(
                    "Failed to report endpoint stats",
                    conference_id=self.conference_id,
                    endpoint_id=endpoint.endpoint_id,
                    exc_info=True,
                )
        return submitted

    def _report_endpoint(self, backend: "StatsBackend", user_info: UserInfo, endpoint: EndpointStats) -> int:
        endpoint_id = endpoint.endpoint_id
        submitted = 0
        backend.begin_endpoint_batch(endpoint_id, self.conference_id)
        try:
            for stats in endpoint.receive_stats:
                logger.debug("Receive stats", local=self.initiator_id, direction="<-", remote=endpoint_id, stats=stats)
                if self._submit(backend, user_info, endpoint_id, stats, StreamDirection.INBOUND):
                    submitted += 1
            for stats in endpoint.send_stats:
                logger.debug("Send stats", local=self.initiator_id, direction="->", remote=endpoint_id, stats=stats)
                if self._submit(backend, user_info, endpoint_id, stats, StreamDirection.OUTBOUND):
                    submitted += 1
        finally:
            backend.end_endpoint_batch(endpoint_id, self.conference_id)
        return submitted

    def _submit(
        self,
        backend: "StatsBackend",
        user_info: UserInfo,
        endpoint_id: str,
        stats: StreamStats,
        direction: StreamDirection,
    ) -> bool:
        try:
            report = build_report(stats, direction, user_info, endpoint_id)
            backend.submit_report(endpoint_id, report)
        except Exception:
            logger.warning(
                "Skipping stream stats that could not be reported",
                conference_id=self.conference_id,
                endpoint_id=endpoint_id,
                direction=direction.value,
                exc_info=True,
            )
            MALFORMED_ENTRIES.inc()
            return False
        REPORTS_SUBMITTED.labels(direction=direction.value).inc()
        return True

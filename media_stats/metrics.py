"""Prometheus metrics for the stats reporting path."""

from prometheus_client import Counter, Gauge

REPORTS_SUBMITTED = Counter(
    "media_stats_reports_submitted_total",
    "Stream reports handed to the monitoring backend",
    labelnames=("direction",),
)
CYCLES_SKIPPED = Counter(
    "media_stats_cycles_skipped_total",
    "Reporting cycles skipped before any report was built",
    labelnames=("reason",),
)
MALFORMED_ENTRIES = Counter(
    "media_stats_malformed_entries_total",
    "Snapshot entries skipped because they could not be reported",
)
CONFERENCE_EVENTS = Counter(
    "media_stats_conference_events_total",
    "Conference lifecycle events sent to the monitoring backend",
    labelnames=("event",),
)
ACTIVE_REPORTERS = Gauge(
    "media_stats_active_reporters",
    "Conference reporters with a running timer task",
)

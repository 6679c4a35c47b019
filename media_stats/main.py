"""
Process bootstrap: load config, configure logging, create the stats service.

Conferences attach reporters (see create_reporter) to the service; this
entrypoint only owns the service and the metrics exporter for the process.
"""

import asyncio
import logging
import os
import signal
from typing import Optional

from prometheus_client import start_http_server

from . import __version__
from .backend import LoggingBackend
from .config import AppConfig, load_config, validate_production_config
from .core.lifecycle import SetupErrorCallback
from .core.registry import StatsService, StatsServiceRegistry, VersionInfo
from .core.reporter import PeriodicStatsReporter
from .core.source import StatsSource
from .errors import ConfigurationError
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_service(config: AppConfig, registry: StatsServiceRegistry) -> Optional[StatsService]:
    """Create (or reuse) the stats service described by ``config``."""
    stats = config.stats

    def on_ready(service: StatsService, message: str) -> None:
        logger.info("Stats service ready", app_id=service.app_id, message=message)

    def on_error(reason: str, message: str) -> None:
        logger.error("Stats service failed", app_id=stats.app_id, reason=reason, message=message)

    return registry.get_or_create(
        stats.app_id,
        app_secret=stats.app_secret,
        key_id=stats.key_id,
        key_path=stats.key_path,
        initiator_id=stats.initiator_id,
        is_client=stats.is_client,
        version=VersionInfo(stats.app_name, __version__),
        on_ready=on_ready,
        on_error=on_error,
    )


def create_reporter(
    config: AppConfig,
    service: StatsService,
    source: StatsSource,
    conference_name: str,
    on_setup_error: Optional[SetupErrorCallback] = None,
) -> PeriodicStatsReporter:
    """Build the reporter for one conference from the ``stats`` settings."""
    stats = config.stats
    return PeriodicStatsReporter(
        source,
        stats.interval_ms,
        service,
        conference_name,
        conference_id_prefix=stats.conference_id_prefix,
        initiator_id=stats.initiator_id,
        on_setup_error=on_setup_error,
    )


async def main(config_path: Optional[str] = None) -> None:
    config = load_config(config_path)
    level_name = config.logging.level.upper()
    configure_logging(log_level=getattr(logging, level_name, logging.INFO))

    errors, warnings = validate_production_config(config)
    if errors:
        logger.error("Configuration validation FAILED", errors=errors, warnings=warnings)
        raise ConfigurationError(errors)
    if warnings:
        logger.warning("Configuration warnings", warnings=warnings)

    if config.metrics.enabled:
        start_http_server(config.metrics.port)
        logger.info("Metrics exporter listening", port=config.metrics.port)

    registry = StatsServiceRegistry(LoggingBackend)
    service = create_service(config, registry)
    if service is None:
        return

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown_event.set)

    await shutdown_event.wait()
    registry.remove(service.app_id)


def run() -> None:
    try:
        asyncio.run(main(os.getenv("MEDIA_STATS_CONFIG")))
    except (KeyboardInterrupt, SystemExit):
        pass
    finally:
        logger.info("Media stats reporter has shut down.")


if __name__ == "__main__":
    run()

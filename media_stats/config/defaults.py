"""
Default value application for configuration.

Environment variables override YAML for deployment-specific stats settings;
anything still unset falls back to the model defaults.
"""

import os
from typing import Any, Dict


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_data.get(name)
    if not isinstance(section, dict):
        section = {}
        config_data[name] = section
    return section


def apply_stats_defaults(config_data: Dict[str, Any]) -> None:
    """
    Apply stats reporting overrides from environment variables.

    Environment variables:
    - MEDIA_STATS_APP_ID: backend application id
    - MEDIA_STATS_INITIATOR_ID: id reported as the local user
    - MEDIA_STATS_CONFERENCE_PREFIX: prefix for conference ids
    - MEDIA_STATS_INTERVAL_MS: reporting interval

    Args:
        config_data: Configuration dictionary to modify in-place
    """
    stats = _section(config_data, 'stats')

    env_map = {
        'app_id': 'MEDIA_STATS_APP_ID',
        'initiator_id': 'MEDIA_STATS_INITIATOR_ID',
        'conference_id_prefix': 'MEDIA_STATS_CONFERENCE_PREFIX',
        'interval_ms': 'MEDIA_STATS_INTERVAL_MS',
    }
    for key, env_name in env_map.items():
        value = os.getenv(env_name)
        if value is not None and value.strip() != "":
            stats[key] = value.strip()


def apply_metrics_defaults(config_data: Dict[str, Any]) -> None:
    """
    Apply metrics exporter overrides.

    Environment variables:
    - METRICS_ENABLED: 0|1
    - METRICS_PORT: exporter port
    """
    metrics = _section(config_data, 'metrics')
    enabled = os.getenv('METRICS_ENABLED')
    if enabled is not None:
        metrics['enabled'] = enabled.strip().lower() in ('1', 'true', 'yes')
    port = os.getenv('METRICS_PORT')
    if port:
        metrics['port'] = port

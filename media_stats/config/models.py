"""
Configuration models and loading for the media stats reporter.

Pydantic v2 models validate the merged YAML + environment configuration.
"""

import os
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from .defaults import apply_metrics_defaults, apply_stats_defaults
from .loaders import load_yaml_with_env_expansion, locate_config_file
from .security import inject_stats_credentials


class StatsConfig(BaseModel):
    app_id: int
    initiator_id: str = Field(default="media-server")
    conference_id_prefix: Optional[str] = None
    interval_ms: int = Field(default=5000)
    # true when reporting a client connection (e.g. a gateway) instead of a server
    is_client: bool = Field(default=False)
    app_name: str = Field(default="media-stats-reporter")
    # credentials: environment only, see security.py
    app_secret: Optional[str] = None
    key_id: Optional[str] = None
    key_path: Optional[str] = None

    @field_validator("interval_ms")
    @classmethod
    def _positive_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("interval_ms must be positive")
        return value

    @property
    def has_key_pair(self) -> bool:
        return bool(self.key_id and self.key_path)


class MetricsConfig(BaseModel):
    enabled: bool = Field(default=False)
    port: int = Field(default=9102)


class LoggingConfig(BaseModel):
    level: str = Field(default="info")  # debug|info|warning|error|critical


class AppConfig(BaseModel):
    stats: StatsConfig
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        path: Path to YAML configuration file (absolute or relative to project
            root). When omitted the file is searched for, see locate_config_file.

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If configuration file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If the merged configuration is invalid
    """
    path = locate_config_file(path)
    config_data = load_yaml_with_env_expansion(path)

    inject_stats_credentials(config_data)

    apply_stats_defaults(config_data)
    apply_metrics_defaults(config_data)

    return AppConfig(**config_data)


def validate_production_config(config: AppConfig) -> Tuple[List[str], List[str]]:
    """Validate configuration for production deployment.

    Returns:
        (errors, warnings): errors block startup, warnings are logged but non-blocking
    """
    errors: List[str] = []
    warnings: List[str] = []

    stats = config.stats
    if not stats.has_key_pair and not stats.app_secret:
        errors.append(
            "No stats credentials configured (need MEDIA_STATS_KEY_ID + MEDIA_STATS_KEY_PATH or MEDIA_STATS_APP_SECRET)"
        )
    elif stats.has_key_pair and not os.path.isfile(stats.key_path):
        errors.append(f"Private key file not found: {stats.key_path}")
    elif not stats.has_key_pair:
        warnings.append("Using shared app secret; key pair authentication is preferred")

    if stats.interval_ms < 1000:
        warnings.append(f"Reporting interval very short: {stats.interval_ms}ms (adds backend load)")

    if config.metrics.enabled and not (1024 <= config.metrics.port <= 65535):
        errors.append(f"Metrics port {config.metrics.port} out of valid range (1024-65535)")

    if config.logging.level.lower() == 'debug' or os.getenv('LOG_LEVEL', '').lower() == 'debug':
        warnings.append("Debug logging enabled (logs every stream report)")

    return errors, warnings

"""
Configuration package for the media stats reporter.

This package contains:
- loaders: path resolution, config file discovery, YAML loading
- security: credential injection from the environment
- defaults: environment overrides
- models: Pydantic models, load_config and production validation
"""

from .loaders import find_config_file, load_yaml_with_env_expansion, locate_config_file, resolve_config_path
from .models import (
    AppConfig,
    LoggingConfig,
    MetricsConfig,
    StatsConfig,
    load_config,
    validate_production_config,
)

__all__ = [
    'AppConfig',
    'LoggingConfig',
    'MetricsConfig',
    'StatsConfig',
    'find_config_file',
    'load_config',
    'load_yaml_with_env_expansion',
    'locate_config_file',
    'resolve_config_path',
    'validate_production_config',
]

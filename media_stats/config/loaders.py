"""
Configuration file loaders and path resolution.

This module handles:
- Path resolution (relative to absolute)
- Config file discovery across well-known locations
- YAML file loading with environment variable expansion
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml


# Project root directory (parent of media_stats/)
_PROJ_DIR = Path(__file__).parent.parent.parent.resolve()


def resolve_config_path(path: str) -> str:
    """
    Resolve configuration file path to absolute path.

    If the provided path is not absolute, it is resolved relative to the project root.
    """
    if not os.path.isabs(path):
        return os.path.join(_PROJ_DIR, path)
    return path


def find_config_file(
    file_name: str,
    home_dir_name: Optional[str] = None,
    home_dir_location: Optional[str] = None,
    cwd: Optional[str] = None,
) -> Optional[str]:
    """
    Locate a config file in the known locations.

    Candidates, in order:
    1. ``config/<file_name>`` under the working directory
    2. ``<file_name>`` in the working directory
    3. the same two paths under ``<home_dir_location>/<home_dir_name>``,
       when both are given and that directory exists

    Args:
        file_name: Bare file name to look for
        home_dir_name: Application home directory name
        home_dir_location: Directory containing the application home directory
        cwd: Working directory to search from (default: os.getcwd())

    Returns:
        Absolute path of the first existing candidate, or None
    """
    base = Path(cwd or os.getcwd())
    relative: List[Path] = [Path("config") / file_name, Path(file_name)]
    candidates = [base / rel for rel in relative]

    if home_dir_name and home_dir_location:
        home = Path(home_dir_location) / home_dir_name
        if home.is_dir():
            candidates.extend(home / rel for rel in relative)

    for candidate in candidates:
        if candidate.exists():
            return str(candidate.resolve())
    return None


def load_yaml_with_env_expansion(path: str) -> dict:
    """
    Load YAML file with environment variable expansion.

    Reads the YAML file, expands ${VAR} and $VAR environment variable references,
    then parses the YAML content.

    Raises:
        FileNotFoundError: If configuration file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    try:
        with open(path, 'r') as f:
            config_str = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found at: {path}")

    try:
        config_data = yaml.safe_load(os.path.expandvars(config_str))
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Error parsing YAML configuration: {e}")

    return config_data if config_data is not None else {}


DEFAULT_CONFIG_FILE = "media-stats.yaml"


def locate_config_file(path: Optional[str] = None) -> str:
    """
    Pick the configuration file to load.

    An explicit ``path`` wins and is resolved like resolve_config_path.
    Otherwise the working directory and the application home directory
    (MEDIA_STATS_HOME_DIR_NAME under MEDIA_STATS_HOME_DIR_LOCATION) are
    searched for ``media-stats.yaml``; when nothing is found the path falls
    back to ``config/media-stats.yaml`` under the project root.
    """
    if path:
        return resolve_config_path(path)
    found = find_config_file(
        DEFAULT_CONFIG_FILE,
        home_dir_name=os.getenv("MEDIA_STATS_HOME_DIR_NAME"),
        home_dir_location=os.getenv("MEDIA_STATS_HOME_DIR_LOCATION"),
    )
    if found:
        return found
    return resolve_config_path(os.path.join("config", DEFAULT_CONFIG_FILE))

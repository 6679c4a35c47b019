"""
Credential injection for the monitoring backend.

SECURITY POLICY:
- The application secret and private key location MUST NOT be kept in YAML
- They are read from environment variables only; YAML values are discarded
"""

import os
from typing import Any, Dict

CREDENTIAL_ENV_VARS = {
    "app_secret": "MEDIA_STATS_APP_SECRET",
    "key_id": "MEDIA_STATS_KEY_ID",
    "key_path": "MEDIA_STATS_KEY_PATH",
}


def _is_nonempty_string(val: Any) -> bool:
    return isinstance(val, str) and val.strip() != ""


def inject_stats_credentials(config_data: Dict[str, Any]) -> None:
    """
    Replace stats credentials with values from the environment.

    Environment variables:
    - MEDIA_STATS_APP_SECRET: shared secret
    - MEDIA_STATS_KEY_ID: id of the registered public key
    - MEDIA_STATS_KEY_PATH: path to the private key file

    Unset or blank variables leave the field as None.

    Args:
        config_data: Configuration dictionary to modify in-place
    """
    stats = config_data.get('stats')
    if not isinstance(stats, dict):
        stats = {}
        config_data['stats'] = stats

    for field_name, env_name in CREDENTIAL_ENV_VARS.items():
        value = os.getenv(env_name)
        stats[field_name] = value.strip() if _is_nonempty_string(value) else None

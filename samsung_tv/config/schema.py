"""Configuration schema, defaults, and validation."""

from typing import Any, Dict, List, Optional

from .constants import CONTROL_PORT, DEFAULT_APP_NAME


# Default configuration for a single TV
DEFAULT_TV_CONFIG: Dict[str, Any] = {
    "host": None,                # Required - TV IP address
    "port": CONTROL_PORT,        # 8002
    "alias": None,               # Friendly name for CLI (--tv alias)
    "name": None,                # Display name (auto-populated from TV)
    "mac": None,                 # For Wake-on-LAN
    "app_name": None,            # Overrides the global app name
}


# Full config structure with multi-TV support
DEFAULT_CONFIG: Dict[str, Any] = {
    # Name shown in the TV's authorization prompt
    "app_name": DEFAULT_APP_NAME,

    # Multiple TVs - keyed by TV id (uuid from discovery) or host
    "tvs": {},

    # Default TV for CLI when --tv not specified (id or alias)
    "default_tv": None,

    "options": {
        "keyboard_layout": "qwerty",
        "http_timeout": 5,
        "log_level": "INFO",
    },
}


def deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merge two dictionaries, override takes precedence.

    Args:
        base: Base dictionary
        override: Override dictionary (values take precedence)

    Returns:
        Merged dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif value is not None:  # Don't override with None
            result[key] = value
    return result


def validate_config(config: Dict) -> List[str]:
    """Validate configuration and return list of errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if not config.get("app_name"):
        errors.append("app_name must not be empty")

    tvs = config.get("tvs", {})

    if not tvs:
        errors.append("No TVs configured in 'tvs' section")
    else:
        for tv_id, tv_config in tvs.items():
            if not tv_config.get("host"):
                errors.append(f"tvs.{tv_id}.host is required")
            port = tv_config.get("port", CONTROL_PORT)
            if not isinstance(port, int) or not 1 <= port <= 65535:
                errors.append(f"tvs.{tv_id}.port must be between 1 and 65535")

    default_tv = config.get("default_tv")
    if default_tv and tvs and get_tv_by_id_or_alias(config, default_tv) is None:
        errors.append(f"default_tv '{default_tv}' does not match any TV")

    return errors


def get_tv_by_id_or_alias(config: Dict, id_or_alias: str) -> Optional[Dict]:
    """Get TV config by TV id or alias.

    Args:
        config: Full configuration dictionary
        id_or_alias: TV id or alias to find

    Returns:
        TV config dict if found, None otherwise
    """
    tvs = config.get("tvs", {})

    if id_or_alias in tvs:
        return tvs[id_or_alias]

    for tv_config in tvs.values():
        if tv_config.get("alias") == id_or_alias:
            return tv_config

    return None


def get_tv_id_by_alias(config: Dict, alias: str) -> Optional[str]:
    """Get the TV id for a given alias."""
    for tv_id, tv_config in config.get("tvs", {}).items():
        if tv_config.get("alias") == alias:
            return tv_id
    return None

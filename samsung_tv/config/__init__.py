"""Configuration management for Samsung TV control.

Provides:
- YAML-based configuration with environment variable overrides
- Multi-TV support keyed by TV id, with aliases
- Token storage per TV
- Single source of truth for all constants
"""

# Constants - single source of truth
from .constants import (
    # Network
    CONTROL_PORT,
    HTTP_PORT,
    SSDP_ADDR,
    SSDP_PORT,
    WOL_PORT,
    BROADCAST_ADDR,
    # Endpoints
    CONTROL_SCHEME,
    CONTROL_PATH,
    APPLICATIONS_PATH,
    DEVICE_INFO_PATH,
    # Discovery
    SSDP_SEARCH_TARGET,
    # Client identification
    DEFAULT_APP_NAME,
)

# Schema and validation
from .schema import (
    DEFAULT_CONFIG,
    DEFAULT_TV_CONFIG,
    deep_merge,
    validate_config,
    get_tv_by_id_or_alias,
    get_tv_id_by_alias,
)

# Configuration loading
from .loader import (
    load_config,
    save_config,
    get_config,
    reload_config,
    get_tv_config,
    get_default_tv,
    list_tvs,
    resolve_tv_id,
    add_tv,
    set_default_tv,
    CONFIG_SEARCH_PATHS,
)

# Token storage
from .storage import (
    TokenStorage,
    get_storage,
    get_token,
    save_token,
    delete_token,
)


__all__ = [
    # Constants
    "CONTROL_PORT",
    "HTTP_PORT",
    "SSDP_ADDR",
    "SSDP_PORT",
    "WOL_PORT",
    "BROADCAST_ADDR",
    "CONTROL_SCHEME",
    "CONTROL_PATH",
    "APPLICATIONS_PATH",
    "DEVICE_INFO_PATH",
    "SSDP_SEARCH_TARGET",
    "DEFAULT_APP_NAME",
    # Schema
    "DEFAULT_CONFIG",
    "DEFAULT_TV_CONFIG",
    "deep_merge",
    "validate_config",
    "get_tv_by_id_or_alias",
    "get_tv_id_by_alias",
    # Loader
    "load_config",
    "save_config",
    "get_config",
    "reload_config",
    "get_tv_config",
    "get_default_tv",
    "list_tvs",
    "resolve_tv_id",
    "add_tv",
    "set_default_tv",
    "CONFIG_SEARCH_PATHS",
    # Storage
    "TokenStorage",
    "get_storage",
    "get_token",
    "save_token",
    "delete_token",
]

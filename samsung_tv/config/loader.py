"""Multi-TV YAML configuration.

The file lists TVs by id with optional aliases, the app name shown in the
TV's authorization prompt and CLI options. Environment variables override
the file; ``TV_*`` variables apply to the default TV.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import yaml

from .schema import (
    DEFAULT_CONFIG,
    DEFAULT_TV_CONFIG,
    deep_merge,
    get_tv_by_id_or_alias,
    get_tv_id_by_alias,
)

_LOGGER = logging.getLogger(__name__)

# First existing file wins
CONFIG_SEARCH_PATHS = [
    Path("config.yaml"),
    Path.home() / ".config" / "samsung_tv" / "config.yaml",
    Path("/etc/samsung_tv/config.yaml"),
]

# ENV_VAR: (target, key, converter). Target "tv" is the default TV, None the top level.
ENV_MAPPINGS = {
    "TV_HOST": ("tv", "host", str),
    "TV_PORT": ("tv", "port", int),
    "TV_MAC": ("tv", "mac", str),
    "TV_NAME": ("tv", "name", str),
    "TV_APP_NAME": (None, "app_name", str),
    "LOG_LEVEL": ("options", "log_level", str),
}

_cached_config: Optional[Dict[str, Any]] = None


def load_config(config_path: Optional[str] = None, use_cache: bool = True) -> Dict[str, Any]:
    """Load the configuration.

    Args:
        config_path: File tried before the search paths
        use_cache: Return the previously loaded config if there is one

    Returns:
        Defaults merged with the first readable file and the environment.
        ``_loaded_from`` holds the file path, or None when only defaults apply.
    """
    global _cached_config

    if use_cache and _cached_config is not None:
        return _cached_config

    config = copy.deepcopy(DEFAULT_CONFIG)
    loaded_from = None
    for path in _candidate_files(config_path):
        file_config = _read_yaml(path)
        if file_config is not None:
            config = deep_merge(config, file_config)
            loaded_from = path
            break

    _apply_env_overrides(config)
    config["_loaded_from"] = str(loaded_from) if loaded_from else None

    _cached_config = config
    return config


def _candidate_files(config_path: Optional[str]) -> Iterator[Path]:
    paths = [Path(config_path)] if config_path else []
    for path in paths + list(CONFIG_SEARCH_PATHS):
        if path.suffix in (".yaml", ".yml") and path.is_file():
            yield path


def _read_yaml(path: Path) -> Optional[Dict[str, Any]]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        _LOGGER.warning("Failed to load %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        _LOGGER.warning("Ignoring %s: expected a mapping at the top level", path)
        return None
    _LOGGER.info("Loaded config from %s", path)
    return data


def _apply_env_overrides(config: Dict[str, Any]) -> None:
    tv_overrides: Dict[str, Any] = {}

    for env_var, (target, key, convert) in ENV_MAPPINGS.items():
        raw = os.environ.get(env_var)
        if raw is None:
            continue
        try:
            value = convert(raw)
        except ValueError:
            _LOGGER.warning("Ignoring %s=%r: not a valid %s", env_var, raw, convert.__name__)
            continue

        if target == "tv":
            tv_overrides[key] = value
        elif target is None:
            config[key] = value
        else:
            config.setdefault(target, {})[key] = value

    if tv_overrides:
        _override_default_tv(config, tv_overrides)


def _override_default_tv(config: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    default_tv = config.get("default_tv")
    tv_config = get_tv_by_id_or_alias(config, default_tv) if default_tv else None
    if tv_config is not None:
        tv_config.update(overrides)
        return

    host = overrides.get("host")
    if not host:
        _LOGGER.warning("TV_* overrides ignored: no default TV and TV_HOST is not set")
        return

    # Keyed by host until the TV's id is known
    tv_config = copy.deepcopy(DEFAULT_TV_CONFIG)
    tv_config.update(overrides)
    config["tvs"][host] = tv_config
    config["default_tv"] = host


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> bool:
    """Write the configuration as YAML.

    Args:
        config: Configuration to write; ``_``-prefixed keys are skipped
        path: Destination, defaulting to the file the config was loaded
            from, then the first search path

    Returns:
        True if the file was written
    """
    if path is None:
        loaded_from = config.get("_loaded_from")
        path = Path(loaded_from) if loaded_from else CONFIG_SEARCH_PATHS[0]

    data = {key: value for key, value in config.items() if not key.startswith("_")}
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    except (OSError, yaml.YAMLError) as e:
        _LOGGER.error("Failed to save config to %s: %s", path, e)
        return False
    _LOGGER.info("Saved config to %s", path)
    return True


def get_config(use_cache: bool = True) -> Dict[str, Any]:
    """Current configuration, loaded on first use."""
    return load_config(use_cache=use_cache)


def reload_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Discard the cached configuration and load it again."""
    return load_config(config_path, use_cache=False)


def get_tv_config(id_or_alias: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """TV entry by id or alias.

    Without an argument this is the default TV, or the first configured TV
    when no default is set.
    """
    config = get_config()
    if id_or_alias is None:
        id_or_alias = config.get("default_tv")
        if id_or_alias is None:
            return next(iter(config.get("tvs", {}).values()), None)
    return get_tv_by_id_or_alias(config, id_or_alias)


def get_default_tv() -> Optional[Dict[str, Any]]:
    """Default TV entry."""
    return get_tv_config(None)


def list_tvs() -> List[Dict[str, Any]]:
    """Configured TVs, each with its ``tv_id`` and an ``is_default`` flag."""
    config = get_config()
    default_tv = config.get("default_tv")
    return [
        dict(tv_config, tv_id=tv_id, is_default=default_tv in (tv_id, tv_config.get("alias")))
        for tv_id, tv_config in config.get("tvs", {}).items()
    ]


def resolve_tv_id(id_or_alias: str) -> Optional[str]:
    """TV id for an id or alias, or None if neither matches."""
    config = get_config()
    if id_or_alias in config.get("tvs", {}):
        return id_or_alias
    return get_tv_id_by_alias(config, id_or_alias)


def add_tv(tv_id: str, host: str, alias: Optional[str] = None, **kwargs) -> bool:
    """Add or replace a TV and save the configuration.

    The first TV added becomes the default, referenced by alias if it has one.

    Args:
        tv_id: TV id from discovery, or the host
        host: TV IPv4 address
        alias: Short name for ``--tv``
        **kwargs: Other TV fields such as ``mac`` or ``app_name``

    Returns:
        True if saved
    """
    config = get_config()

    tv_config = copy.deepcopy(DEFAULT_TV_CONFIG)
    tv_config.update(kwargs, host=host)
    if alias:
        tv_config["alias"] = alias
    config["tvs"][tv_id] = tv_config

    if len(config["tvs"]) == 1:
        config["default_tv"] = alias or tv_id

    return save_config(config)


def set_default_tv(id_or_alias: str) -> bool:
    """Make a configured TV the default and save. False if it is unknown."""
    config = get_config()

    if get_tv_by_id_or_alias(config, id_or_alias) is None:
        _LOGGER.error("TV not found: %s", id_or_alias)
        return False

    config["default_tv"] = id_or_alias
    return save_config(config)

"""Control channel endpoint construction.

The TV expects the application name base64-encoded in the ``name`` query
parameter, with padding characters left literal (not percent-escaped).
"""

import base64
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import unquote, urlencode, urlsplit, urlunsplit

from .config.constants import CONTROL_PATH, CONTROL_PORT, CONTROL_SCHEME
from .errors import URLConstructionFailed
from .models import is_ipv4

_LOGGER = logging.getLogger(__name__)


@dataclass
class ConnectionConfig:
    """Settings for one control channel connection.

    Only ``token`` changes after construction, when the TV issues a new one.
    """

    app: str
    host: str
    port: int = CONTROL_PORT
    scheme: str = CONTROL_SCHEME
    path: str = CONTROL_PATH
    token: Optional[str] = None
    tv_id: Optional[str] = None


def is_valid_app_name(name: Optional[str]) -> bool:
    return bool(name)


def is_valid_ip_address(text: Optional[str]) -> bool:
    return is_ipv4(text)


def encode_app_name(app: str) -> str:
    """Base64-encode the application name as the TV expects it."""
    return base64.b64encode(app.encode("utf-8")).decode("ascii")


def build_url(config: ConnectionConfig) -> str:
    """Build the control channel URL for a connection config.

    Returns:
        ``scheme://host:port/path?name=<base64 app>&token=<token>``, with the
        token parameter omitted when no token is stored.

    Raises:
        URLConstructionFailed: If the components do not form an absolute URL
    """
    host = (config.host or "").strip()
    if not host or any(c in host for c in "/?#@ "):
        raise URLConstructionFailed(f"Invalid host: {config.host!r}")
    if not config.scheme or not config.scheme.isalpha():
        raise URLConstructionFailed(f"Invalid scheme: {config.scheme!r}")
    if not isinstance(config.port, int) or not 0 < config.port < 65536:
        raise URLConstructionFailed(f"Invalid port: {config.port!r}")
    if config.path and not config.path.startswith("/"):
        raise URLConstructionFailed(f"Path must be absolute: {config.path!r}")

    query: List[Tuple[str, str]] = [("name", encode_app_name(config.app))]
    if config.token:
        query.append(("token", config.token))

    url = urlunsplit((
        config.scheme,
        f"{host}:{config.port}",
        config.path,
        urlencode(query),
        "",
    ))
    url = unquote(url)

    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        raise URLConstructionFailed(f"Could not build absolute URL from {url!r}")

    _LOGGER.debug("Control channel URL for %s: %s://%s:%s%s", config.app, parts.scheme, host, config.port, parts.path)
    return url

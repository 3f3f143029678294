"""Query and launch applications installed on the TV."""

import json
import logging
import urllib.error
import urllib.request
from typing import Optional

from .config.constants import APPLICATIONS_PATH, DEFAULT_HTTP_TIMEOUT, HTTP_PORT, HTTP_SCHEME
from .errors import AppNotFound, BadURL, InvalidResponse, NetworkError, NoData
from .models import TVApp, TVAppStatus, is_ipv4

_LOGGER = logging.getLogger(__name__)


def build_app_url(tv_ip_address: str, app_id: str) -> Optional[str]:
    """Build ``http://<ip>:8001/api/v2/applications/<id>``, or None if invalid."""
    if not is_ipv4(tv_ip_address) or not app_id or "/" in app_id:
        return None
    return f"{HTTP_SCHEME}://{tv_ip_address}:{HTTP_PORT}{APPLICATIONS_PATH}{app_id}"


class TVAppManager:
    """Application status and launch requests against the TV's REST API."""

    def __init__(self, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.timeout = timeout

    def fetch_status(self, app: TVApp, tv_ip_address: str) -> TVAppStatus:
        """Get the status of an app.

        Raises:
            BadURL, NoData, NetworkError, AppNotFound, InvalidResponse
        """
        data = self._send_request(self._build_url(app, tv_ip_address))
        if not data:
            raise NoData("No data received from the network.")
        try:
            return TVAppStatus.from_dict(json.loads(data))
        except (ValueError, KeyError, TypeError) as e:
            raise InvalidResponse(f"Could not decode app status: {e}") from e

    def launch(self, app: TVApp, tv_ip_address: str) -> None:
        """Launch an app on the TV.

        Raises:
            BadURL, NetworkError, AppNotFound, InvalidResponse
        """
        self._send_request(self._build_url(app, tv_ip_address), method="POST")
        _LOGGER.info("Launched %s on %s", app.name, tv_ip_address)

    def _build_url(self, app: TVApp, tv_ip_address: str) -> str:
        url = build_app_url(tv_ip_address, app.id)
        if url is None:
            raise BadURL(f"Unable to build URL for IP: {tv_ip_address}")
        return url

    def _send_request(self, url: str, method: str = "GET") -> bytes:
        _LOGGER.debug("%s %s", method, url)
        request = urllib.request.Request(url, method=method)
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status = response.status
                data = response.read()
        except urllib.error.HTTPError as e:
            status = e.code
            data = b""
        except (urllib.error.URLError, OSError) as e:
            raise NetworkError(f"Network error: {e}") from e

        if status == 404:
            raise AppNotFound("App Not Found")
        if status != 200:
            raise InvalidResponse(f"Invalid Response (HTTP {status})")
        return data

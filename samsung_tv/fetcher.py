"""Fetch detailed device information from a TV's REST API."""

import json
import logging
import urllib.error
import urllib.request
from urllib.parse import urlsplit

from .config.constants import DEFAULT_HTTP_TIMEOUT
from .errors import FailedRequest, InvalidURL, UnexpectedResponseBody
from .models import TV

_LOGGER = logging.getLogger(__name__)


class TVFetcher:
    """Queries ``http://<ip>:8001/api/v2/`` for a TV's device details."""

    def __init__(self, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.timeout = timeout

    def fetch_device(self, tv: TV) -> TV:
        """Fetch the TV description, including its ``device`` section.

        Args:
            tv: TV whose uri points at its REST API

        Returns:
            TV decoded from the response

        Raises:
            InvalidURL: If the TV uri is not an http(s) URL
            FailedRequest: If the request fails or returns a non-2xx status
            UnexpectedResponseBody: If the body is not a TV description
        """
        parts = urlsplit(tv.uri)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise InvalidURL(tv.uri)

        _LOGGER.debug("Fetching device info from %s", tv.uri)
        try:
            with urllib.request.urlopen(tv.uri, timeout=self.timeout) as response:
                status = response.status
                body = response.read()
        except urllib.error.HTTPError as e:
            raise FailedRequest(f"HTTP {e.code} from {tv.uri}", status=e.code, cause=e) from e
        except (urllib.error.URLError, OSError) as e:
            raise FailedRequest(f"Request to {tv.uri} failed: {e}", cause=e) from e

        if not 200 <= status < 300:
            raise FailedRequest(f"HTTP {status} from {tv.uri}", status=status)

        try:
            return TV.from_dict(json.loads(body))
        except (ValueError, KeyError, TypeError) as e:
            _LOGGER.warning("Unexpected device info from %s: %s", tv.uri, e)
            raise UnexpectedResponseBody(body) from e

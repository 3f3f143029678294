"""Search for Samsung TVs on the local network.

``TVSearcher`` fans search events out to registered observers and can stop
automatically once a specific TV is found. The network side is a
``SearchRemote``; the default one uses SSDP M-SEARCH.
"""

import logging
import socket
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from .config.constants import (
    DEVICE_INFO_PATH,
    HTTP_PORT,
    HTTP_SCHEME,
    SSDP_ADDR,
    SSDP_LOST_AFTER,
    SSDP_PORT,
    SSDP_SEARCH_INTERVAL,
    SSDP_SEARCH_TARGET,
    DEFAULT_TV_TYPE,
)
from .errors import TVFetcherError
from .fetcher import TVFetcher
from .models import TV

_LOGGER = logging.getLogger(__name__)

# SSDP M-SEARCH request template
SSDP_MSEARCH = (
    "M-SEARCH * HTTP/1.1\r\n"
    "HOST: 239.255.255.250:1900\r\n"
    'MAN: "ssdp:discover"\r\n'
    "MX: 3\r\n"
    "ST: {st}\r\n"
    "\r\n"
)


class TVSearchObserver:
    """Receives search notifications. Override what you need."""

    def on_search_start(self) -> None:
        pass

    def on_search_stop(self) -> None:
        pass

    def on_tv_found(self, tv: TV) -> None:
        pass

    def on_tv_lost(self, tv: TV) -> None:
        pass


class SearchRemote(ABC):
    """Network search backend driven by a TVSearcher."""

    @abstractmethod
    def set_observer(self, observer: TVSearchObserver) -> None:
        """Set the observer that receives start/stop/found/lost events."""

    @abstractmethod
    def start_search(self) -> None:
        pass

    @abstractmethod
    def stop_search(self) -> None:
        pass


class TVSearcher(TVSearchObserver):
    """Searches for TVs and notifies observers."""

    def __init__(self, remote: Optional[SearchRemote] = None):
        self._remote = remote or SSDPSearchRemote()
        self._observers: List[TVSearchObserver] = []
        self._lock = threading.Lock()
        self._target_tv_id: Optional[str] = None
        self._remote.set_observer(self)

    # Observers

    def add_search_observer(self, observer: TVSearchObserver) -> None:
        with self._lock:
            self._observers.append(observer)

    def remove_search_observer(self, observer: TVSearchObserver) -> None:
        with self._lock:
            self._observers = [existing for existing in self._observers if existing is not observer]

    def remove_all_search_observers(self) -> None:
        with self._lock:
            self._observers = []

    def _snapshot(self) -> List[TVSearchObserver]:
        with self._lock:
            return list(self._observers)

    # Search

    def configure_target_tv_id(self, target_tv_id: Optional[str]) -> None:
        """Stop searching automatically once the TV with this id is found."""
        self._target_tv_id = target_tv_id

    def start_search(self) -> None:
        self._remote.start_search()

    def stop_search(self) -> None:
        self._remote.stop_search()

    # Remote events

    def on_search_start(self) -> None:
        _LOGGER.debug("TV search started")
        for observer in self._snapshot():
            observer.on_search_start()

    def on_search_stop(self) -> None:
        _LOGGER.debug("TV search stopped")
        for observer in self._snapshot():
            observer.on_search_stop()

    def on_tv_found(self, tv: TV) -> None:
        _LOGGER.info("Found TV %s (%s)", tv.name, tv.id)
        for observer in self._snapshot():
            observer.on_tv_found(tv)
        if self._target_tv_id is not None and tv.id == self._target_tv_id:
            self.stop_search()

    def on_tv_lost(self, tv: TV) -> None:
        _LOGGER.info("Lost TV %s (%s)", tv.name, tv.id)
        for observer in self._snapshot():
            observer.on_tv_lost(tv)


def _parse_ssdp_headers(message: str) -> Dict[str, str]:
    """Parse SSDP message headers into a dictionary."""
    headers = {}
    for line in message.split("\r\n"):
        if ":" in line:
            key, _, value = line.partition(":")
            headers[key.strip().upper()] = value.strip()
    return headers


def tv_from_ssdp_response(ip: str, message: str) -> Optional[TV]:
    """Build a TV from an M-SEARCH response, or None if it is not a Samsung TV."""
    if not message.startswith("HTTP"):
        return None
    headers = _parse_ssdp_headers(message)
    usn = headers.get("USN", "")
    if SSDP_SEARCH_TARGET not in headers.get("ST", "") and SSDP_SEARCH_TARGET not in usn:
        return None
    tv_id = usn.split("::")[0] or ip
    return TV(
        id=tv_id,
        name=ip,
        type=DEFAULT_TV_TYPE,
        uri=f"{HTTP_SCHEME}://{ip}:{HTTP_PORT}{DEVICE_INFO_PATH}",
    )


class SSDPSearchRemote(SearchRemote):
    """Repeated SSDP M-SEARCH for Samsung remote control receivers.

    A TV is reported lost after it misses SSDP_LOST_AFTER search rounds.
    """

    def __init__(
        self,
        interval: float = SSDP_SEARCH_INTERVAL,
        interface: Optional[str] = None,
        fetcher: Optional[TVFetcher] = None,
        describe: bool = True,
    ):
        """Initialize the SSDP search.

        Args:
            interval: Seconds per search round
            interface: Interface IP to bind to (e.g., "10.0.0.50")
            fetcher: Fetches device details of found TVs
            describe: Fetch names and device details of found TVs
        """
        self.interval = interval
        self.interface = interface
        self.fetcher = fetcher or TVFetcher()
        self.describe = describe
        self._observer: Optional[TVSearchObserver] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        # id -> (tv, last round seen)
        self._found: Dict[str, Tuple[TV, int]] = {}

    def set_observer(self, observer: TVSearchObserver) -> None:
        self._observer = observer

    def start_search(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._found = {}
        self._thread = threading.Thread(target=self._run, name="samsung_tv_ssdp", daemon=True)
        self._thread.start()

    def stop_search(self) -> None:
        self._stop_event.set()

    def _run(self) -> None:
        if self._observer:
            self._observer.on_search_start()
        try:
            round_number = 0
            while not self._stop_event.is_set():
                seen = self._search_round()
                self._update_found(seen, round_number)
                round_number += 1
        finally:
            if self._observer:
                self._observer.on_search_stop()

    def _search_round(self) -> Dict[str, TV]:
        seen: Dict[str, TV] = {}
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.settimeout(0.5)
            sock.bind((self.interface or "", 0))
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 2)
            if self.interface:
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton(self.interface))

            msearch = SSDP_MSEARCH.format(st=SSDP_SEARCH_TARGET).encode()
            sock.sendto(msearch, (SSDP_ADDR, SSDP_PORT))

            start_time = time.time()
            while time.time() - start_time < self.interval and not self._stop_event.is_set():
                try:
                    data, addr = sock.recvfrom(4096)
                except socket.timeout:
                    continue
                tv = tv_from_ssdp_response(addr[0], data.decode("utf-8", errors="ignore"))
                if tv is not None:
                    seen[tv.id] = tv
        except OSError as e:
            _LOGGER.warning("SSDP search failed: %s", e)
            self._stop_event.wait(self.interval)
        finally:
            sock.close()
        return seen

    def _update_found(self, seen: Dict[str, TV], round_number: int) -> None:
        for tv_id, tv in seen.items():
            if tv_id in self._found:
                self._found[tv_id] = (self._found[tv_id][0], round_number)
                continue
            tv = self._describe(tv)
            self._found[tv_id] = (tv, round_number)
            if self._observer:
                self._observer.on_tv_found(tv)

        for tv_id, (tv, last_seen) in list(self._found.items()):
            if round_number - last_seen >= SSDP_LOST_AFTER:
                del self._found[tv_id]
                if self._observer:
                    self._observer.on_tv_lost(tv)

    def _describe(self, tv: TV) -> TV:
        if not self.describe:
            return tv
        try:
            described = self.fetcher.fetch_device(tv)
        except TVFetcherError as e:
            _LOGGER.debug("Could not fetch details for %s: %s", tv.uri, e)
            return tv
        # Keep the SSDP id so found/lost events match
        return replace(described, id=tv.id, uri=tv.uri)

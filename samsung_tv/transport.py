"""Bidirectional message transport for the control channel.

``Transport`` is the interface the connection state machine drives.
``WebSocketTransport`` implements it with websocket-client, running the
socket on one background thread so events arrive one at a time.
"""

import logging
import ssl
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import websocket

_LOGGER = logging.getLogger(__name__)


class TransportEventKind(Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    CANCELLED = "cancelled"
    TEXT = "text"
    BINARY = "binary"
    ERROR = "error"


@dataclass(frozen=True)
class TransportEvent:
    """Event delivered by a transport.

    ``payload`` is the message for TEXT/BINARY and the exception for ERROR.
    """

    kind: TransportEventKind
    payload: Any = None


EventHandler = Callable[[TransportEvent], None]


class TrustPolicy(ABC):
    """Decides how the TV's TLS certificate is evaluated."""

    @abstractmethod
    def sslopt(self) -> Dict[str, Any]:
        """SSL options passed to the WebSocket connection."""


class TrustAllPolicy(TrustPolicy):
    """Accept any certificate.

    Samsung TVs present self-signed certificates. This is insecure; inject a
    CertificateTrustPolicy where real validation is needed.
    """

    def sslopt(self) -> Dict[str, Any]:
        return {"cert_reqs": ssl.CERT_NONE, "check_hostname": False}


class CertificateTrustPolicy(TrustPolicy):
    """Verify the TV certificate against a CA bundle."""

    def __init__(self, ca_certs: Optional[str] = None, check_hostname: bool = False):
        self.ca_certs = ca_certs
        self.check_hostname = check_hostname

    def sslopt(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "cert_reqs": ssl.CERT_REQUIRED,
            "check_hostname": self.check_hostname,
        }
        if self.ca_certs:
            options["ca_certs"] = self.ca_certs
        return options


class Transport(ABC):
    """Persistent message channel to the TV."""

    @abstractmethod
    def connect(self) -> None:
        """Open the channel. Completion is reported as a CONNECTED event."""

    @abstractmethod
    def disconnect(self) -> None:
        """Request closure. Completion is reported as DISCONNECTED/CANCELLED."""

    @abstractmethod
    def write_text(self, text: str, on_complete: Optional[Callable[[], None]] = None) -> None:
        """Send a text message, calling on_complete once written."""

    @abstractmethod
    def write_binary(self, data: bytes, on_complete: Optional[Callable[[], None]] = None) -> None:
        """Send a binary message, calling on_complete once written."""


TransportFactory = Callable[[str, TrustPolicy, EventHandler], Transport]


class WebSocketTransport(Transport):
    """Transport over a secure WebSocket."""

    def __init__(
        self,
        url: str,
        trust_policy: Optional[TrustPolicy] = None,
        on_event: Optional[EventHandler] = None,
        ping_interval: float = 0,
    ):
        """Initialize the transport.

        Args:
            url: Control channel URL
            trust_policy: Certificate trust policy (default trusts all)
            on_event: Called with every TransportEvent, on the socket thread
            ping_interval: Seconds between keepalive pings (0 disables)
        """
        self.url = url
        self.trust_policy = trust_policy or TrustAllPolicy()
        self.on_event = on_event
        self.ping_interval = ping_interval

        self._app: Optional[websocket.WebSocketApp] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._opened = False
        self._closed = False

    def connect(self) -> None:
        if self._thread is not None:
            _LOGGER.debug("Transport already started")
            return

        self._app = websocket.WebSocketApp(
            self.url,
            on_open=self._on_open,
            on_message=self._on_message,
            on_error=self._on_error,
            on_close=self._on_close,
        )
        self._thread = threading.Thread(
            target=self._run,
            name="samsung_tv_ws",
            daemon=True,
        )
        self._thread.start()

    def disconnect(self) -> None:
        if self._app is not None:
            self._app.close()

    def write_text(self, text: str, on_complete: Optional[Callable[[], None]] = None) -> None:
        self._write(text, websocket.ABNF.OPCODE_TEXT, on_complete)

    def write_binary(self, data: bytes, on_complete: Optional[Callable[[], None]] = None) -> None:
        self._write(data, websocket.ABNF.OPCODE_BINARY, on_complete)

    def _write(self, data: Any, opcode: int, on_complete: Optional[Callable[[], None]]) -> None:
        if self._app is None:
            self._emit(TransportEvent(TransportEventKind.ERROR, websocket.WebSocketConnectionClosedException("Not connected")))
            return
        try:
            self._app.send(data, opcode=opcode)
        except (websocket.WebSocketException, OSError) as err:
            _LOGGER.warning("WebSocket write failed: %s", err)
            self._emit(TransportEvent(TransportEventKind.ERROR, err))
            return
        if on_complete is not None:
            on_complete()

    def _run(self) -> None:
        try:
            self._app.run_forever(
                sslopt=self.trust_policy.sslopt(),
                ping_interval=self.ping_interval,
            )
        finally:
            # run_forever may return without on_close when the handshake fails
            self._finish(TransportEventKind.CANCELLED)

    def _emit(self, event: TransportEvent) -> None:
        if self.on_event is not None:
            self.on_event(event)

    def _finish(self, kind: TransportEventKind) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._emit(TransportEvent(kind))

    # websocket-client callbacks

    def _on_open(self, ws) -> None:
        with self._lock:
            self._opened = True
        _LOGGER.debug("WebSocket opened: %s", self.url.split("?")[0])
        self._emit(TransportEvent(TransportEventKind.CONNECTED))

    def _on_message(self, ws, message) -> None:
        if isinstance(message, (bytes, bytearray)):
            self._emit(TransportEvent(TransportEventKind.BINARY, bytes(message)))
        else:
            self._emit(TransportEvent(TransportEventKind.TEXT, message))

    def _on_error(self, ws, error) -> None:
        _LOGGER.debug("WebSocket error: %s", error)
        self._emit(TransportEvent(TransportEventKind.ERROR, error))

    def _on_close(self, ws, close_status_code, close_msg) -> None:
        _LOGGER.debug("WebSocket closed (%s): %s", close_status_code, close_msg)
        with self._lock:
            opened = self._opened
        self._finish(TransportEventKind.DISCONNECTED if opened else TransportEventKind.CANCELLED)

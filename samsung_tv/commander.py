"""Samsung TV remote control client.

Connects to the TV's secure WebSocket control channel, tracks the
authorization handshake, and sends remote key presses in order.

All outcomes are delivered to registered listeners; public operations
never raise. Transport events must be delivered one at a time.
"""

import logging
import threading
from typing import List, Optional

from .command_queue import CommandQueue
from .connection import ConnectionConfig, build_url, is_valid_app_name, is_valid_ip_address
from .errors import (
    AuthResponseUnexpectedChannelEvent,
    ConnectionAlreadyEstablished,
    InvalidAppNameEntered,
    InvalidIPAddressEntered,
    KeyboardCharNotFound,
    NoTokenInAuthResponse,
    PacketDataParsingFailed,
    RemoteCommandAuthenticationStatusNotAllowed,
    RemoteCommandNotConnectedToTV,
    TVCommanderError,
    URLConstructionFailed,
    WebSocketError,
)
from .keyboard import KeyboardLayout, plan_text_entry
from .keys import ControlKey
from .models import TV, AuthStatus, ConnectionState
from .packets import AuthResponse, ChannelEvent, RemoteCommand, parse_auth_response, resolve_token
from .transport import (
    Transport,
    TransportEvent,
    TransportEventKind,
    TransportFactory,
    TrustAllPolicy,
    TrustPolicy,
    WebSocketTransport,
)

_LOGGER = logging.getLogger(__name__)


class TVCommanderListener:
    """Receives notifications from a TVCommander.

    Subclass and override the methods you need; the defaults do nothing.
    """

    def on_connect(self, commander: "TVCommander") -> None:
        pass

    def on_disconnect(self, commander: "TVCommander") -> None:
        pass

    def on_auth_status(self, commander: "TVCommander", status: AuthStatus) -> None:
        pass

    def on_token_update(self, commander: "TVCommander", token: str) -> None:
        pass

    def on_command_written(self, commander: "TVCommander", command: RemoteCommand) -> None:
        pass

    def on_error(self, commander: "TVCommander", error: TVCommanderError) -> None:
        pass


class TVCommander:
    """Client to control a Samsung TV over its remote control channel."""

    def __init__(
        self,
        config: ConnectionConfig,
        transport_factory: Optional[TransportFactory] = None,
    ):
        """Initialize the commander.

        Args:
            config: Connection settings; its token is updated when the TV
                issues a new one
            transport_factory: Creates the transport for each connection
                (defaults to WebSocketTransport)
        """
        self._config = config
        self._transport_factory = transport_factory or WebSocketTransport
        self._transport: Optional[Transport] = None
        self._connection_state = ConnectionState.DISCONNECTED
        self._auth_status = AuthStatus.NONE
        self._listeners: List[TVCommanderListener] = []
        self._listeners_lock = threading.Lock()
        self._queue = CommandQueue(
            write=self._write_text,
            on_written=self._on_command_written,
            on_error=self._report_error,
        )

    @classmethod
    def create(
        cls,
        host: str,
        app_name: str,
        token: Optional[str] = None,
        tv_id: Optional[str] = None,
        transport_factory: Optional[TransportFactory] = None,
    ) -> "TVCommander":
        """Create a commander for a TV at an IPv4 address.

        Raises:
            InvalidAppNameEntered: If app_name is empty
            InvalidIPAddressEntered: If host is not an IPv4 address
        """
        if not is_valid_app_name(app_name):
            raise InvalidAppNameEntered()
        if not is_valid_ip_address(host):
            raise InvalidIPAddressEntered(cause=host)
        config = ConnectionConfig(app=app_name, host=host, token=token, tv_id=tv_id)
        return cls(config, transport_factory=transport_factory)

    @classmethod
    def for_tv(
        cls,
        tv: TV,
        app_name: str,
        token: Optional[str] = None,
        transport_factory: Optional[TransportFactory] = None,
    ) -> "TVCommander":
        """Create a commander for a discovered TV.

        Raises:
            InvalidAppNameEntered: If app_name is empty
            InvalidIPAddressEntered: If the TV has no usable IPv4 address
        """
        host = tv.ip_address
        if host is None:
            raise InvalidIPAddressEntered(cause=tv.uri)
        return cls.create(host, app_name, token=token, tv_id=tv.id, transport_factory=transport_factory)

    # Properties

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def connection_state(self) -> ConnectionState:
        return self._connection_state

    @property
    def auth_status(self) -> AuthStatus:
        return self._auth_status

    @property
    def is_connected(self) -> bool:
        return self._connection_state == ConnectionState.CONNECTED

    @property
    def pending_commands(self) -> List[RemoteCommand]:
        return self._queue.pending

    # Listeners

    def add_listener(self, listener: TVCommanderListener) -> None:
        with self._listeners_lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_listener(self, listener: TVCommanderListener) -> None:
        with self._listeners_lock:
            self._listeners = [existing for existing in self._listeners if existing is not listener]

    def clear_listeners(self) -> None:
        with self._listeners_lock:
            self._listeners = []

    def _notify(self, method: str, *args) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            getattr(listener, method)(self, *args)

    def _report_error(self, error: TVCommanderError) -> None:
        _LOGGER.warning("%s: %s", type(error).__name__, error)
        self._notify("on_error", error)

    # Connection

    def connect(self, trust_policy: Optional[TrustPolicy] = None) -> None:
        """Open the control channel.

        The TV shows an authorization prompt for unknown apps; the result
        arrives through ``on_auth_status``.

        Args:
            trust_policy: Certificate trust policy (default trusts all)
        """
        if self._connection_state != ConnectionState.DISCONNECTED:
            self._report_error(ConnectionAlreadyEstablished())
            return
        try:
            url = build_url(self._config)
        except URLConstructionFailed as err:
            self._report_error(err)
            return

        _LOGGER.info("Connecting to TV at %s:%s", self._config.host, self._config.port)
        self._connection_state = ConnectionState.CONNECTING
        self._transport = self._transport_factory(
            url,
            trust_policy or TrustAllPolicy(),
            self.handle_transport_event,
        )
        self._transport.connect()

    def disconnect(self) -> None:
        """Request the control channel to close.

        State changes when the transport reports the disconnect.
        """
        if self._transport is not None:
            _LOGGER.debug("Disconnect requested")
            self._transport.disconnect()

    def handle_transport_event(self, event: TransportEvent) -> None:
        """Process one event from the transport."""
        if event.kind == TransportEventKind.CONNECTED:
            self._on_connected()
        elif event.kind in (TransportEventKind.DISCONNECTED, TransportEventKind.CANCELLED):
            self._on_disconnected()
        elif event.kind in (TransportEventKind.TEXT, TransportEventKind.BINARY):
            self._on_packet(event.payload)
        elif event.kind == TransportEventKind.ERROR:
            self._report_error(WebSocketError(str(event.payload) if event.payload else None, cause=event.payload))

    def _on_connected(self) -> None:
        self._connection_state = ConnectionState.CONNECTED
        _LOGGER.info("Connected to TV at %s:%s", self._config.host, self._config.port)
        self._notify("on_connect")

    def _on_disconnected(self) -> None:
        self._connection_state = ConnectionState.DISCONNECTED
        self._auth_status = AuthStatus.NONE
        self._transport = None
        self._queue.clear()
        _LOGGER.info("Disconnected from TV at %s", self._config.host)
        self._notify("on_disconnect")

    def _on_packet(self, payload) -> None:
        try:
            response = parse_auth_response(payload)
        except PacketDataParsingFailed as err:
            self._report_error(err)
            return
        self._handle_auth_response(response)

    def _handle_auth_response(self, response: AuthResponse) -> None:
        if self._connection_state != ConnectionState.CONNECTED:
            _LOGGER.debug("Ignoring %s received while %s", response.event.value, self._connection_state.value)
            return

        if response.event == ChannelEvent.CONNECT:
            self._set_auth_status(AuthStatus.ALLOWED)
            token = resolve_token(response, self._config.app)
            if token:
                self._update_token(token)
            else:
                self._report_error(NoTokenInAuthResponse(cause=response))
        elif response.event == ChannelEvent.UNAUTHORIZED:
            self._set_auth_status(AuthStatus.DENIED)
        elif response.event == ChannelEvent.TIMEOUT:
            self._set_auth_status(AuthStatus.NONE)
        else:
            self._report_error(AuthResponseUnexpectedChannelEvent(
                f"Unexpected channel event: {response.event.value}",
                cause=response,
            ))

    def _set_auth_status(self, status: AuthStatus) -> None:
        self._auth_status = status
        _LOGGER.info("Auth status: %s", status.value)
        self._notify("on_auth_status", status)

    def _update_token(self, token: str) -> None:
        if token == self._config.token:
            return
        self._config.token = token
        _LOGGER.debug("Received new auth token (...%s)", token[-4:])
        self._notify("on_token_update", token)

    # Remote commands

    def send_remote_command(self, key: ControlKey) -> None:
        """Queue a key press for delivery to the TV."""
        if self._connection_state != ConnectionState.CONNECTED:
            self._report_error(RemoteCommandNotConnectedToTV())
            return
        if self._auth_status != AuthStatus.ALLOWED:
            self._report_error(RemoteCommandAuthenticationStatusNotAllowed())
            return
        self._queue.enqueue(RemoteCommand.click(key))

    def enter_text(self, text: str, layout: KeyboardLayout) -> None:
        """Type text on an on-screen keyboard by navigating it with the remote.

        Characters missing from the layout are reported and skipped.
        """
        keys = plan_text_entry(
            text,
            layout,
            on_char_not_found=lambda char: self._report_error(KeyboardCharNotFound(char)),
        )
        for key in keys:
            self.send_remote_command(key)

    def _write_text(self, text: str, on_complete) -> None:
        transport = self._transport
        if transport is None:
            return
        transport.write_text(text, on_complete)

    def _on_command_written(self, command: RemoteCommand) -> None:
        self._notify("on_command_written", command)

"""Tests for the TV commander connection and auth state machine."""

from __future__ import annotations

import pytest

from samsung_tv.commander import TVCommander
from samsung_tv.connection import ConnectionConfig
from samsung_tv.errors import (
    AuthResponseUnexpectedChannelEvent,
    ConnectionAlreadyEstablished,
    InvalidAppNameEntered,
    InvalidIPAddressEntered,
    KeyboardCharNotFound,
    NoTokenInAuthResponse,
    PacketDataParsingFailed,
    RemoteCommandAuthenticationStatusNotAllowed,
    RemoteCommandNotConnectedToTV,
    URLConstructionFailed,
    WebSocketError,
)
from samsung_tv.keyboard import YOUTUBE
from samsung_tv.keys import ControlKey
from samsung_tv.models import TV, AuthStatus, ConnectionState
from samsung_tv.transport import TransportEventKind, TrustAllPolicy

from .conftest import (
    AUTH_ALLOWED_NO_TOKEN,
    AUTH_ALLOWED_WITH_CLIENT_TOKEN,
    AUTH_ALLOWED_WITH_TOKEN,
    AUTH_TIMEOUT,
    AUTH_UNAUTHORIZED,
    RecordingListener,
)


def test_create_validates_inputs() -> None:
    """Test construction rejects empty app names and non-IPv4 hosts."""
    with pytest.raises(InvalidAppNameEntered):
        TVCommander.create("192.168.0.1", "")
    with pytest.raises(InvalidIPAddressEntered):
        TVCommander.create("tv.local", "Test")


def test_for_tv_uses_tv_address() -> None:
    """Test creating a commander from a discovered TV."""
    tv = TV(id="uuid:1", name="TV", type="Samsung SmartTV", uri="http://192.168.0.1:8001/api/v2/")

    tv_commander = TVCommander.for_tv(tv, "Test")

    assert tv_commander.config.host == "192.168.0.1"
    assert tv_commander.config.tv_id == "uuid:1"

    with pytest.raises(InvalidIPAddressEntered):
        TVCommander.for_tv(TV(id="x", name="", type="", uri=""), "Test")


def test_initial_state(commander) -> None:
    """Test a new commander is disconnected with no auth."""
    assert commander.connection_state == ConnectionState.DISCONNECTED
    assert commander.auth_status == AuthStatus.NONE
    assert not commander.is_connected
    assert commander.pending_commands == []


def test_connect(commander, transports, listener) -> None:
    """Test connect creates a transport for the control URL."""
    commander.connect()

    assert commander.connection_state == ConnectionState.CONNECTING
    assert len(transports) == 1
    transport = transports[0]
    assert transport.connect_calls == 1
    assert transport.url == (
        "wss://192.168.0.1:8002/api/v2/channels/samsung.remote.control?name=VGVzdA=="
    )
    assert isinstance(transport.trust_policy, TrustAllPolicy)

    transport.open()

    assert commander.connection_state == ConnectionState.CONNECTED
    assert commander.is_connected
    assert listener.names() == ["connect"]


def test_connect_with_stored_token(transport_factory, transports) -> None:
    """Test a stored token is sent in the URL."""
    tv_commander = TVCommander.create("192.168.0.1", "Test", token="1234567", transport_factory=transport_factory)

    tv_commander.connect()

    assert transports[0].url.endswith("?name=VGVzdA==&token=1234567")


def test_connect_twice(commander, transports, listener) -> None:
    """Test a second connect reports ConnectionAlreadyEstablished."""
    commander.connect()
    commander.connect()

    assert len(transports) == 1
    assert isinstance(listener.last_error, ConnectionAlreadyEstablished)

    transports[0].open()
    commander.connect()

    assert len(transports) == 1
    assert len(listener.errors) == 2
    assert commander.connection_state == ConnectionState.CONNECTED


def test_connect_invalid_url(transport_factory, transports) -> None:
    """Test URL construction failure is reported and state is unchanged."""
    listener = RecordingListener()
    tv_commander = TVCommander(ConnectionConfig(app="Test", host="bad host"), transport_factory=transport_factory)
    tv_commander.add_listener(listener)

    tv_commander.connect()

    assert transports == []
    assert isinstance(listener.last_error, URLConstructionFailed)
    assert tv_commander.connection_state == ConnectionState.DISCONNECTED


def test_send_before_connect(commander, listener) -> None:
    """Test commands are rejected while disconnected."""
    commander.send_remote_command(ControlKey.MUTE)

    assert isinstance(listener.last_error, RemoteCommandNotConnectedToTV)
    assert commander.pending_commands == []


def test_send_before_auth(commander, connected, listener) -> None:
    """Test commands are rejected until the TV allows the client."""
    commander.send_remote_command(ControlKey.MUTE)

    assert isinstance(listener.last_error, RemoteCommandAuthenticationStatusNotAllowed)
    assert connected.written == []


def test_auth_allowed_with_token(commander, connected, listener) -> None:
    """Test an allowed response sets the status and stores the body token."""
    connected.receive(AUTH_ALLOWED_WITH_TOKEN)

    assert commander.auth_status == AuthStatus.ALLOWED
    assert listener.auth_statuses == [AuthStatus.ALLOWED]
    assert listener.tokens == ["99999999"]
    assert commander.config.token == "99999999"
    # Status is reported before the token
    assert listener.names() == ["connect", "auth_status", "token_update"]


def test_auth_allowed_with_client_token(commander, connected, listener) -> None:
    """Test the token is taken from the client registered under the app name."""
    connected.receive(AUTH_ALLOWED_WITH_CLIENT_TOKEN)

    assert commander.auth_status == AuthStatus.ALLOWED
    assert listener.tokens == ["99999999"]


def test_auth_same_token_not_renotified(transport_factory, transports) -> None:
    """Test an unchanged token does not trigger on_token_update."""
    listener = RecordingListener()
    tv_commander = TVCommander.create("192.168.0.1", "Test", token="99999999", transport_factory=transport_factory)
    tv_commander.add_listener(listener)
    tv_commander.connect()
    transports[0].open()

    transports[0].receive(AUTH_ALLOWED_WITH_TOKEN)

    assert listener.tokens == []
    assert tv_commander.auth_status == AuthStatus.ALLOWED


def test_auth_allowed_without_token(commander, connected, listener) -> None:
    """Test an allowed response without token still allows but reports an error."""
    connected.receive(AUTH_ALLOWED_NO_TOKEN)

    assert commander.auth_status == AuthStatus.ALLOWED
    assert isinstance(listener.last_error, NoTokenInAuthResponse)
    assert listener.last_error.response is not None
    assert listener.tokens == []


def test_auth_timeout(commander, connected, listener) -> None:
    """Test a timed out prompt resets auth status to none."""
    connected.receive(AUTH_TIMEOUT)

    assert commander.auth_status == AuthStatus.NONE
    assert listener.auth_statuses == [AuthStatus.NONE]


def test_auth_unauthorized(commander, connected, listener) -> None:
    """Test a refused prompt sets auth status to denied."""
    connected.receive(AUTH_UNAUTHORIZED)

    assert commander.auth_status == AuthStatus.DENIED
    assert listener.auth_statuses == [AuthStatus.DENIED]

    commander.send_remote_command(ControlKey.ENTER)
    assert isinstance(listener.last_error, RemoteCommandAuthenticationStatusNotAllowed)


def test_unexpected_channel_event(commander, connected, listener) -> None:
    """Test a known but unexpected channel event is reported."""
    connected.receive('{"event":"ms.channel.ready"}')

    assert isinstance(listener.last_error, AuthResponseUnexpectedChannelEvent)
    assert commander.auth_status == AuthStatus.NONE


@pytest.mark.parametrize(
    "kind,payload",
    [
        (TransportEventKind.TEXT, "not json"),
        (TransportEventKind.TEXT, '{"event":"unknownEvent"}'),
        (TransportEventKind.BINARY, b""),
    ],
)
def test_invalid_packets(commander, connected, listener, kind, payload) -> None:
    """Test unparseable packets are reported without changing state."""
    connected.emit(kind, payload)

    assert isinstance(listener.last_error, PacketDataParsingFailed)
    assert commander.auth_status == AuthStatus.NONE
    assert commander.is_connected


def test_packets_ignored_before_connected(commander, transports, listener) -> None:
    """Test auth packets are ignored while still connecting."""
    commander.connect()

    transports[0].receive(AUTH_ALLOWED_WITH_TOKEN)

    assert commander.auth_status == AuthStatus.NONE
    assert listener.events == []


def test_transport_error(commander, connected, listener) -> None:
    """Test transport errors are wrapped in WebSocketError."""
    cause = OSError("connection reset")

    connected.emit(TransportEventKind.ERROR, cause)

    error = listener.last_error
    assert isinstance(error, WebSocketError)
    assert error.cause is cause
    assert commander.is_connected


def test_disconnect(commander, authorized, listener) -> None:
    """Test disconnect resets connection and auth state."""
    commander.disconnect()

    assert authorized.disconnect_calls == 1
    # State changes only once the transport reports the close
    assert commander.is_connected

    authorized.close()

    assert commander.connection_state == ConnectionState.DISCONNECTED
    assert commander.auth_status == AuthStatus.NONE
    assert listener.names()[-1] == "disconnect"


def test_cancelled_connect(commander, transports, listener) -> None:
    """Test a connection that never opened ends disconnected."""
    commander.connect()

    transports[0].emit(TransportEventKind.CANCELLED)

    assert commander.connection_state == ConnectionState.DISCONNECTED
    assert listener.names() == ["disconnect"]


def test_reconnect_after_disconnect(commander, authorized, transports) -> None:
    """Test a new transport is created after a disconnect."""
    authorized.close()

    commander.connect()

    assert len(transports) == 2
    assert transports[1].url.endswith("&token=99999999")


def test_send_remote_command(commander, authorized, listener) -> None:
    """Test an allowed client writes click commands."""
    commander.send_remote_command(ControlKey.MUTE)

    assert authorized.written == [
        '{"method":"ms.remote.control","params":{"Cmd":"Click","DataOfCmd":"KEY_MUTE",'
        '"Option":false,"TypeOfRemote":"SendRemoteKey"}}'
    ]
    assert listener.written_keys == [ControlKey.MUTE]


def test_disconnect_abandons_queue(commander, authorized, listener) -> None:
    """Test queued commands are dropped on disconnect."""
    authorized.auto_complete = False
    commander.send_remote_command(ControlKey.UP)
    commander.send_remote_command(ControlKey.DOWN)
    assert len(commander.pending_commands) == 2

    authorized.close()

    assert commander.pending_commands == []
    # A late completion of the abandoned write is ignored
    authorized.complete_next()
    assert listener.written_keys == []


def test_enter_text(commander, authorized, listener) -> None:
    """Test text entry sends the planned key presses."""
    commander.enter_text("text", YOUTUBE)

    assert listener.written_keys == [
        ControlKey.ENTER,
        ControlKey.UP, ControlKey.UP, ControlKey.LEFT, ControlKey.ENTER,
        ControlKey.DOWN, ControlKey.DOWN, ControlKey.DOWN, ControlKey.LEFT, ControlKey.LEFT, ControlKey.ENTER,
        ControlKey.UP, ControlKey.RIGHT, ControlKey.RIGHT, ControlKey.RIGHT, ControlKey.ENTER,
    ]


def test_enter_text_missing_char(commander, authorized, listener) -> None:
    """Test characters missing from the layout are reported."""
    commander.enter_text("a!", YOUTUBE)

    error = listener.last_error
    assert isinstance(error, KeyboardCharNotFound)
    assert error.char == "!"
    assert listener.written_keys == [ControlKey.ENTER]


def test_listener_management(commander, connected, listener) -> None:
    """Test listeners can be removed and are notified once."""
    other = RecordingListener()
    commander.add_listener(other)
    commander.add_listener(other)

    connected.receive(AUTH_TIMEOUT)
    assert other.names() == ["auth_status"]

    commander.remove_listener(other)
    connected.receive(AUTH_TIMEOUT)
    assert other.names() == ["auth_status"]

    commander.clear_listeners()
    connected.receive(AUTH_TIMEOUT)
    assert listener.auth_statuses == [AuthStatus.NONE, AuthStatus.NONE]

"""Fixtures for Samsung TV tests."""

from __future__ import annotations

from typing import Any, Callable, List, Tuple

import pytest

from samsung_tv.commander import TVCommander, TVCommanderListener
from samsung_tv.transport import Transport, TransportEvent, TransportEventKind, TrustPolicy


# Auth packets as sent by the TV
AUTH_ALLOWED_WITH_TOKEN = (
    '{"data":{"clients":[{"attributes":{"name":"VGVzdA=="},"connectTime":1713369027676,'
    '"deviceName":"VGVzdA==","id":"502e895e-251f-48ca-b786-0f83b20102c5","isHost":false}],'
    '"id":"502e895e-251f-48ca-b786-0f83b20102c5","token":"99999999"},"event":"ms.channel.connect"}'
)

AUTH_ALLOWED_WITH_CLIENT_TOKEN = (
    '{"data":{"clients":[{"attributes":{"name":"VGVzdA==","token":"99999999"},"connectTime":1713369027676,'
    '"deviceName":"VGVzdA==","id":"502e895e-251f-48ca-b786-0f83b20102c5","isHost":false}],'
    '"id":"502e895e-251f-48ca-b786-0f83b20102c5"},"event":"ms.channel.connect"}'
)

AUTH_ALLOWED_NO_TOKEN = '{"event":"ms.channel.connect","data":{}}'
AUTH_TIMEOUT = '{"event":"ms.channel.timeOut"}'
AUTH_UNAUTHORIZED = '{"event":"ms.channel.unauthorized"}'

# Device info returned by http://<ip>:8001/api/v2/
MOCK_DEVICE_INFO = {
    "device": {
        "TokenAuthSupport": "true",
        "wifiMac": "00:00:00:00:0A:AA",
        "ip": "192.168.0.1",
        "modelName": "QN55Q7DAAFXZA",
        "name": "Samsung Q7DAA 55 TV",
    },
    "id": "uuid:4B0307C2-919B-4613-889A-F2D52F8538BC",
    "isSupport": "{}",
    "name": "Samsung Q7DAA 55 TV",
    "remote": "1.0",
    "type": "Samsung SmartTV",
    "uri": "http://192.168.0.1:8001/api/v2/",
    "version": "2.0.25",
}

TEST_HOST = "192.168.0.1"
TEST_APP_NAME = "Test"


class FakeTransport(Transport):
    """In-memory transport that records writes.

    With ``auto_complete`` off, write completions are held until
    ``complete_next`` is called.
    """

    def __init__(self, url: str, trust_policy: TrustPolicy, on_event: Callable[[TransportEvent], None]):
        self.url = url
        self.trust_policy = trust_policy
        self.on_event = on_event
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.written: List[Any] = []
        self.held_completions: List[Callable[[], None]] = []
        self.auto_complete = True

    def connect(self) -> None:
        self.connect_calls += 1

    def disconnect(self) -> None:
        self.disconnect_calls += 1

    def write_text(self, text, on_complete=None) -> None:
        self._write(text, on_complete)

    def write_binary(self, data, on_complete=None) -> None:
        self._write(data, on_complete)

    def _write(self, payload, on_complete) -> None:
        self.written.append(payload)
        if on_complete is None:
            return
        if self.auto_complete:
            on_complete()
        else:
            self.held_completions.append(on_complete)

    def complete_next(self) -> None:
        self.held_completions.pop(0)()

    # Simulated TV side

    def emit(self, kind: TransportEventKind, payload: Any = None) -> None:
        self.on_event(TransportEvent(kind, payload))

    def open(self) -> None:
        self.emit(TransportEventKind.CONNECTED)

    def close(self) -> None:
        self.emit(TransportEventKind.DISCONNECTED)

    def receive(self, text: str) -> None:
        self.emit(TransportEventKind.TEXT, text)


class RecordingListener(TVCommanderListener):
    """Records every notification as (name, args)."""

    def __init__(self):
        self.events: List[Tuple[str, tuple]] = []

    def on_connect(self, commander):
        self.events.append(("connect", ()))

    def on_disconnect(self, commander):
        self.events.append(("disconnect", ()))

    def on_auth_status(self, commander, status):
        self.events.append(("auth_status", (status,)))

    def on_token_update(self, commander, token):
        self.events.append(("token_update", (token,)))

    def on_command_written(self, commander, command):
        self.events.append(("command_written", (command,)))

    def on_error(self, commander, error):
        self.events.append(("error", (error,)))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    @property
    def errors(self) -> list:
        return [args[0] for name, args in self.events if name == "error"]

    @property
    def last_error(self):
        errors = self.errors
        return errors[-1] if errors else None

    @property
    def auth_statuses(self) -> list:
        return [args[0] for name, args in self.events if name == "auth_status"]

    @property
    def tokens(self) -> List[str]:
        return [args[0] for name, args in self.events if name == "token_update"]

    @property
    def written_keys(self) -> list:
        return [args[0].key for name, args in self.events if name == "command_written"]


@pytest.fixture
def transports() -> List[FakeTransport]:
    """Every FakeTransport created by the factory, in order."""
    return []


@pytest.fixture
def transport_factory(transports):
    """Transport factory returning FakeTransports."""
    def factory(url, trust_policy, on_event):
        transport = FakeTransport(url, trust_policy, on_event)
        transports.append(transport)
        return transport
    return factory


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def commander(transport_factory, listener) -> TVCommander:
    """Commander for the test TV with a recording listener attached."""
    tv_commander = TVCommander.create(TEST_HOST, TEST_APP_NAME, transport_factory=transport_factory)
    tv_commander.add_listener(listener)
    return tv_commander


@pytest.fixture
def connected(commander, transports) -> FakeTransport:
    """Connect the commander and open its transport."""
    commander.connect()
    transport = transports[-1]
    transport.open()
    return transport


@pytest.fixture
def authorized(commander, connected) -> FakeTransport:
    """Connected transport on which the TV allowed this client."""
    connected.receive(AUTH_ALLOWED_WITH_TOKEN)
    return connected


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point config search paths at tmp_path and reset the cached config."""
    from samsung_tv.config import loader

    config_file = tmp_path / "config.yaml"
    monkeypatch.setattr(loader, "CONFIG_SEARCH_PATHS", [config_file])
    monkeypatch.setattr(loader, "_cached_config", None)
    for var in loader.ENV_MAPPINGS:
        monkeypatch.delenv(var, raising=False)
    return config_file

"""Wire format for the Samsung remote control channel.

Inbound packets are JSON envelopes::

    {"event": "ms.channel.connect",
     "data": {"id": "...", "token": "...", "clients": [...]}}

Outbound remote commands are JSON objects with method ``ms.remote.control``.
"""

import base64
import binascii
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .errors import PacketDataParsingFailed
from .keys import ControlKey


class ChannelEvent(Enum):
    """Channel-level events sent by the TV."""

    CONNECT = "ms.channel.connect"
    DISCONNECT = "ms.channel.disconnect"
    CLIENT_CONNECT = "ms.channel.clientConnect"
    CLIENT_DISCONNECT = "ms.channel.clientDisconnect"
    DATA = "ms.channel.data"
    ERROR = "ms.channel.error"
    MESSAGE = "ms.channel.message"
    PING = "ms.channel.ping"
    READY = "ms.channel.ready"
    TIMEOUT = "ms.channel.timeOut"
    UNAUTHORIZED = "ms.channel.unauthorized"


@dataclass(frozen=True)
class TVClientAttributes:
    """Attributes of a client connected to the TV."""

    name: Optional[str] = None   # base64-encoded app name
    token: Optional[str] = None  # refreshed token for that client


@dataclass(frozen=True)
class TVClient:
    """A client connected to the TV."""

    attributes: TVClientAttributes
    connect_time: int
    device_name: str
    id: str
    is_host: bool

    @property
    def decoded_name(self) -> Optional[str]:
        """Client display name with the base64 encoding removed."""
        if self.attributes.name is None:
            return None
        try:
            return base64.b64decode(self.attributes.name, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None


@dataclass(frozen=True)
class AuthResponseBody:
    """Payload of an auth envelope."""

    clients: List[TVClient] = field(default_factory=list)
    id: Optional[str] = None
    token: Optional[str] = None


@dataclass(frozen=True)
class AuthResponse:
    """Inbound envelope: channel event plus optional body."""

    event: ChannelEvent
    data: Optional[AuthResponseBody] = None


def _require(value: Any, kind: type, what: str) -> Any:
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise PacketDataParsingFailed(f"Unexpected type for {what}: {type(value).__name__}")
    return value


def _optional_str(value: Any, what: str) -> Optional[str]:
    if value is None:
        return None
    return _require(value, str, what)


def _parse_client(raw: Any) -> TVClient:
    _require(raw, dict, "client")
    attributes = _require(raw.get("attributes", {}), dict, "client.attributes")
    try:
        return TVClient(
            attributes=TVClientAttributes(
                name=_optional_str(attributes.get("name"), "attributes.name"),
                token=_optional_str(attributes.get("token"), "attributes.token"),
            ),
            connect_time=_require(raw["connectTime"], int, "connectTime"),
            device_name=_require(raw["deviceName"], str, "deviceName"),
            id=_require(raw["id"], str, "client.id"),
            is_host=_require(raw["isHost"], bool, "isHost"),
        )
    except KeyError as err:
        raise PacketDataParsingFailed(f"Client missing field {err}", cause=err) from err


def _parse_body(raw: Any) -> AuthResponseBody:
    _require(raw, dict, "data")
    clients = _require(raw.get("clients", []), list, "clients")
    return AuthResponseBody(
        clients=[_parse_client(client) for client in clients],
        id=_optional_str(raw.get("id"), "data.id"),
        token=_optional_str(raw.get("token"), "data.token"),
    )


def parse_auth_response(payload: Union[str, bytes]) -> AuthResponse:
    """Parse an inbound channel packet.

    Args:
        payload: Text or binary message received from the TV

    Returns:
        Parsed AuthResponse

    Raises:
        PacketDataParsingFailed: If the payload is not a valid envelope
    """
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as err:
            raise PacketDataParsingFailed("Packet is not UTF-8", cause=err) from err

    try:
        raw = json.loads(payload)
    except (TypeError, ValueError) as err:
        raise PacketDataParsingFailed("Packet is not valid JSON", cause=err) from err

    _require(raw, dict, "packet")
    event_name = _require(raw.get("event"), str, "event")
    try:
        event = ChannelEvent(event_name)
    except ValueError as err:
        raise PacketDataParsingFailed(f"Unknown channel event: {event_name}", cause=err) from err

    data = raw.get("data")
    return AuthResponse(
        event=event,
        data=_parse_body(data) if data is not None else None,
    )


# Token resolution strategies, tried in order


def token_from_body(response: AuthResponse, app_name: str) -> Optional[str]:
    """New token issued directly in the envelope body."""
    if response.data is None:
        return None
    return response.data.token or None


def token_from_matching_client(response: AuthResponse, app_name: str) -> Optional[str]:
    """Refreshed token from the client entry registered under our app name."""
    if response.data is None:
        return None
    for client in response.data.clients:
        if client.decoded_name == app_name and client.attributes.token:
            return client.attributes.token
    return None


TOKEN_STRATEGIES: Sequence[Callable[[AuthResponse, str], Optional[str]]] = (
    token_from_body,
    token_from_matching_client,
)


def resolve_token(response: AuthResponse, app_name: str) -> Optional[str]:
    """Find the auth token in an allowed response, or None."""
    for strategy in TOKEN_STRATEGIES:
        token = strategy(response, app_name)
        if token:
            return token
    return None


# Outbound commands


class RemoteMethod(Enum):
    CONTROL = "ms.remote.control"


class RemoteCommandType(Enum):
    CLICK = "Click"


class RemoteControlType(Enum):
    INPUT_END = "SendInputEnd"
    INPUT_STRING = "SendInputString"
    MOUSE_DEVICE = "ProcessMouseDevice"
    REMOTE_KEY = "SendRemoteKey"


@dataclass(frozen=True)
class RemoteCommandParams:
    """Parameters of a remote control command."""

    cmd: RemoteCommandType
    data_of_cmd: ControlKey
    option: bool
    type_of_remote: RemoteControlType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Cmd": self.cmd.value,
            "DataOfCmd": self.data_of_cmd.value,
            "Option": self.option,
            "TypeOfRemote": self.type_of_remote.value,
        }


@dataclass(frozen=True)
class RemoteCommand:
    """Remote control command sent over the control channel."""

    method: RemoteMethod
    params: RemoteCommandParams

    @classmethod
    def click(cls, key: ControlKey) -> "RemoteCommand":
        """Single key press on the remote."""
        return cls(
            method=RemoteMethod.CONTROL,
            params=RemoteCommandParams(
                cmd=RemoteCommandType.CLICK,
                data_of_cmd=key,
                option=False,
                type_of_remote=RemoteControlType.REMOTE_KEY,
            ),
        )

    @property
    def key(self) -> ControlKey:
        return self.params.data_of_cmd

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.method.value, "params": self.params.to_dict()}

    def to_json(self) -> str:
        """Serialize to the wire text format.

        Raises:
            TypeError, ValueError: If the command cannot be serialized
        """
        return json.dumps(self.to_dict(), separators=(",", ":"))

"""Data models for Samsung TVs, apps, and connection state."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

from .config.constants import BROADCAST_ADDR, WOL_PORT


class AuthStatus(Enum):
    """Authorization status of this client with the TV."""

    NONE = "none"        # Authorization not completed
    ALLOWED = "allowed"  # Client may send commands
    DENIED = "denied"    # TV refused this client


class ConnectionState(Enum):
    """Lifecycle of the control channel connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


# JSON key -> TVDevice field, for keys that differ from the field name
_DEVICE_KEYS = {
    "countryCode": "country_code",
    "description": "device_description",
    "developerIP": "developer_ip",
    "developerMode": "developer_mode",
    "duid": "duid",
    "firmwareVersion": "firmware_version",
    "FrameTVSupport": "frame_tv_support",
    "GamePadSupport": "game_pad_support",
    "id": "id",
    "ImeSyncedSupport": "ime_synced_support",
    "ip": "ip",
    "Language": "language",
    "model": "model",
    "modelName": "model_name",
    "name": "name",
    "networkType": "network_type",
    "OS": "os",
    "PowerState": "power_state",
    "resolution": "resolution",
    "smartHubAgreement": "smart_hub_agreement",
    "ssid": "ssid",
    "TokenAuthSupport": "token_auth_support",
    "type": "type",
    "udn": "udn",
    "VoiceSupport": "voice_support",
    "WallScreenRatio": "wall_screen_ratio",
    "WallService": "wall_service",
    "wifiMac": "wifi_mac",
}


def is_ipv4(text: Optional[str]) -> bool:
    """Check that text is a dotted-quad IPv4 address."""
    if not text:
        return False
    parts = text.split(".")
    if len(parts) != 4:
        return False
    for part in parts:
        if not part.isdigit() or len(part) > 3 or int(part) > 255:
            return False
    return True


@dataclass(frozen=True)
class TVDevice:
    """Detailed device information reported by the TV's REST API."""

    token_auth_support: str
    wifi_mac: str
    country_code: Optional[str] = None
    device_description: Optional[str] = None
    developer_ip: Optional[str] = None
    developer_mode: Optional[str] = None
    duid: Optional[str] = None
    firmware_version: Optional[str] = None
    frame_tv_support: Optional[str] = None
    game_pad_support: Optional[str] = None
    id: Optional[str] = None
    ime_synced_support: Optional[str] = None
    ip: Optional[str] = None
    language: Optional[str] = None
    model: Optional[str] = None
    model_name: Optional[str] = None
    name: Optional[str] = None
    network_type: Optional[str] = None
    os: Optional[str] = None
    power_state: Optional[str] = None
    resolution: Optional[str] = None
    smart_hub_agreement: Optional[str] = None
    ssid: Optional[str] = None
    type: Optional[str] = None
    udn: Optional[str] = None
    voice_support: Optional[str] = None
    wall_screen_ratio: Optional[str] = None
    wall_service: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TVDevice":
        """Build from the TV's JSON ``device`` object.

        Raises:
            KeyError: If TokenAuthSupport or wifiMac is missing
        """
        kwargs = {
            field_name: data[key]
            for key, field_name in _DEVICE_KEYS.items()
            if key in data
        }
        for required in ("TokenAuthSupport", "wifiMac"):
            if required not in data:
                raise KeyError(required)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            key: getattr(self, field_name)
            for key, field_name in _DEVICE_KEYS.items()
            if getattr(self, field_name) is not None
        }


@dataclass(frozen=True)
class TV:
    """A Samsung TV found on the network."""

    id: str
    name: str
    type: str
    uri: str
    device: Optional[TVDevice] = None
    is_support: Optional[str] = None
    remote: Optional[str] = None
    version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TV":
        """Build from the JSON returned by ``http://<ip>:8001/api/v2/``.

        Raises:
            KeyError: If a required field is missing
            TypeError: If the payload is not an object
        """
        if not isinstance(data, dict):
            raise TypeError("TV payload must be an object")
        device = data.get("device")
        return cls(
            id=data["id"],
            name=data["name"],
            type=data["type"],
            uri=data["uri"],
            device=TVDevice.from_dict(device) if device is not None else None,
            is_support=data.get("isSupport"),
            remote=data.get("remote"),
            version=data.get("version"),
        )

    @property
    def ip_address(self) -> Optional[str]:
        """IPv4 address from the uri host, falling back to the device ip."""
        try:
            host = urlsplit(self.uri).hostname
        except ValueError:
            host = None
        if is_ipv4(host):
            return host
        if self.device and is_ipv4(self.device.ip):
            return self.device.ip
        return None

    def with_device(self, device: TVDevice) -> "TV":
        """Return a copy with detailed device info attached."""
        return replace(self, device=device)


@dataclass(frozen=True)
class TVApp:
    """An application installable on the TV."""

    id: str
    name: str

    @classmethod
    def all_apps(cls) -> List["TVApp"]:
        return list(APPS.values())


# Known application ids
APPS = {
    "espn": TVApp(id="3201708014618", name="ESPN"),
    "hulu": TVApp(id="3201601007625", name="Hulu"),
    "max": TVApp(id="3202301029760", name="Max"),
    "netflix": TVApp(id="3201907018807", name="Netflix"),
    "paramount": TVApp(id="3201710014981", name="Paramount +"),
    "pluto": TVApp(id="3201808016802", name="Pluto TV"),
    "prime": TVApp(id="3201910019365", name="Prime Video"),
    "spotify": TVApp(id="3201606009684", name="Spotify"),
    "youtube": TVApp(id="111299001912", name="YouTube"),
}


@dataclass(frozen=True)
class TVAppStatus:
    """Status of an application as reported by the TV."""

    id: str
    name: str
    running: bool
    version: str
    visible: bool

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TVAppStatus":
        return cls(
            id=data["id"],
            name=data["name"],
            running=bool(data["running"]),
            version=data["version"],
            visible=bool(data["visible"]),
        )


@dataclass
class TVWakeOnLANDevice:
    """Target for a Wake-on-LAN magic packet."""

    mac: str
    broadcast: str = BROADCAST_ADDR
    port: int = WOL_PORT

    @classmethod
    def from_device(
        cls,
        device: TVDevice,
        broadcast: str = BROADCAST_ADDR,
        port: int = WOL_PORT,
    ) -> "TVWakeOnLANDevice":
        return cls(mac=device.wifi_mac, broadcast=broadcast, port=port)

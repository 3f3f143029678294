"""Samsung Smart TV remote control library.

Controls Tizen TVs over the secure WebSocket remote control channel.
"""

from .commander import TVCommander, TVCommanderListener
from .connection import ConnectionConfig, build_url
from .errors import (
    TVCommanderError,
    InvalidAppNameEntered,
    InvalidIPAddressEntered,
    URLConstructionFailed,
    ConnectionAlreadyEstablished,
    RemoteCommandNotConnectedToTV,
    RemoteCommandAuthenticationStatusNotAllowed,
    PacketDataParsingFailed,
    AuthResponseUnexpectedChannelEvent,
    NoTokenInAuthResponse,
    CommandConversionToStringFailed,
    WebSocketError,
    KeyboardCharNotFound,
    WakeOnLANConnectionError,
    WakeOnLANProcessingError,
    UnknownError,
    TVFetcherError,
    TVAppManagerError,
)
from .keys import (
    ControlKey,
    ALL_KEYS,
    KEY_NAME_MAP,
    get_key,
)
from .keyboard import (
    KeyboardLayout,
    QWERTY,
    YOUTUBE,
    LAYOUTS,
    plan_text_entry,
)
from .models import (
    TV,
    TVDevice,
    TVApp,
    TVAppStatus,
    TVWakeOnLANDevice,
    AuthStatus,
    ConnectionState,
    APPS,
)
from .packets import (
    AuthResponse,
    ChannelEvent,
    RemoteCommand,
    parse_auth_response,
    resolve_token,
)
from .transport import (
    Transport,
    TransportEvent,
    TransportEventKind,
    TrustPolicy,
    TrustAllPolicy,
    CertificateTrustPolicy,
    WebSocketTransport,
)
from .fetcher import TVFetcher
from .apps import TVAppManager
from .search import TVSearcher, TVSearchObserver, SearchRemote, SSDPSearchRemote
from .wol import create_magic_packet, wake_on_lan
from .config import (
    # Config loading
    load_config,
    save_config,
    get_config,
    reload_config,
    get_tv_config,
    get_default_tv,
    list_tvs,
    add_tv,
    set_default_tv,
    # Token storage
    TokenStorage,
    get_storage,
    # Constants
    CONTROL_PORT,
    HTTP_PORT,
    DEFAULT_APP_NAME,
)

__version__ = "1.0.0"
__all__ = [
    # Commander
    "TVCommander",
    "TVCommanderListener",
    "ConnectionConfig",
    "build_url",
    # Errors
    "TVCommanderError",
    "InvalidAppNameEntered",
    "InvalidIPAddressEntered",
    "URLConstructionFailed",
    "ConnectionAlreadyEstablished",
    "RemoteCommandNotConnectedToTV",
    "RemoteCommandAuthenticationStatusNotAllowed",
    "PacketDataParsingFailed",
    "AuthResponseUnexpectedChannelEvent",
    "NoTokenInAuthResponse",
    "CommandConversionToStringFailed",
    "WebSocketError",
    "KeyboardCharNotFound",
    "WakeOnLANConnectionError",
    "WakeOnLANProcessingError",
    "UnknownError",
    "TVFetcherError",
    "TVAppManagerError",
    # Keys
    "ControlKey",
    "ALL_KEYS",
    "KEY_NAME_MAP",
    "get_key",
    # Keyboard
    "KeyboardLayout",
    "QWERTY",
    "YOUTUBE",
    "LAYOUTS",
    "plan_text_entry",
    # Models
    "TV",
    "TVDevice",
    "TVApp",
    "TVAppStatus",
    "TVWakeOnLANDevice",
    "AuthStatus",
    "ConnectionState",
    "APPS",
    # Packets
    "AuthResponse",
    "ChannelEvent",
    "RemoteCommand",
    "parse_auth_response",
    "resolve_token",
    # Transport
    "Transport",
    "TransportEvent",
    "TransportEventKind",
    "TrustPolicy",
    "TrustAllPolicy",
    "CertificateTrustPolicy",
    "WebSocketTransport",
    # REST API
    "TVFetcher",
    "TVAppManager",
    # Discovery
    "TVSearcher",
    "TVSearchObserver",
    "SearchRemote",
    "SSDPSearchRemote",
    # Wake-on-LAN
    "create_magic_packet",
    "wake_on_lan",
    # Config
    "load_config",
    "save_config",
    "get_config",
    "reload_config",
    "get_tv_config",
    "get_default_tv",
    "list_tvs",
    "add_tv",
    "set_default_tv",
    "TokenStorage",
    "get_storage",
    "CONTROL_PORT",
    "HTTP_PORT",
    "DEFAULT_APP_NAME",
]

"""Error types for Samsung TV control.

Every error carries a ``kind`` discriminant and an optional ``cause``
holding the underlying exception (or offending value) for diagnostics.
The connection state machine reports these to its listeners instead of
raising them.
"""

from typing import Any, Optional


class TVCommanderError(Exception):
    """Base error for TV remote control failures."""

    kind = "unknown"

    def __init__(self, message: Optional[str] = None, cause: Any = None):
        super().__init__(message or self.__doc__)
        self.cause = cause

    def __repr__(self) -> str:
        if self.cause is None:
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}(cause={self.cause!r})"


# Configuration errors


class InvalidAppNameEntered(TVCommanderError):
    """Application name must not be empty."""

    kind = "invalid_app_name"


class InvalidIPAddressEntered(TVCommanderError):
    """TV address is not a valid IPv4 address."""

    kind = "invalid_ip_address"


class URLConstructionFailed(TVCommanderError):
    """Control channel URL could not be constructed."""

    kind = "url_construction_failed"


# Protocol/state errors


class ConnectionAlreadyEstablished(TVCommanderError):
    """Connection is already established or in progress."""

    kind = "connection_already_established"


class RemoteCommandNotConnectedToTV(TVCommanderError):
    """Cannot send a command without a connection to the TV."""

    kind = "remote_command_not_connected"


class RemoteCommandAuthenticationStatusNotAllowed(TVCommanderError):
    """Cannot send a command before the TV allowed this client."""

    kind = "remote_command_not_allowed"


# Wire errors


class PacketDataParsingFailed(TVCommanderError):
    """Inbound packet could not be parsed."""

    kind = "packet_data_parsing_failed"


class AuthResponseUnexpectedChannelEvent(TVCommanderError):
    """Auth response carried an unexpected channel event."""

    kind = "auth_response_unexpected_channel_event"

    @property
    def response(self):
        return self.cause


class NoTokenInAuthResponse(TVCommanderError):
    """Allowed auth response did not contain a token."""

    kind = "no_token_in_auth_response"

    @property
    def response(self):
        return self.cause


class CommandConversionToStringFailed(TVCommanderError):
    """Remote command could not be serialized."""

    kind = "command_conversion_failed"


# Transport errors


class WebSocketError(TVCommanderError):
    """WebSocket transport reported an error."""

    kind = "websocket_error"


# Input errors


class KeyboardCharNotFound(TVCommanderError):
    """Character is not present on the keyboard layout."""

    kind = "keyboard_char_not_found"

    def __init__(self, char: str):
        super().__init__(f"Character {char!r} not found on keyboard layout", cause=char)
        self.char = char


# Wake-on-LAN errors


class WakeOnLANConnectionError(TVCommanderError):
    """Wake-on-LAN socket could not be opened."""

    kind = "wake_on_lan_connection_error"


class WakeOnLANProcessingError(TVCommanderError):
    """Wake-on-LAN magic packet could not be sent."""

    kind = "wake_on_lan_processing_error"


class UnknownError(TVCommanderError):
    """An unknown error occurred."""


# HTTP device fetch errors


class TVFetcherError(Exception):
    """Base error for device info requests."""


class InvalidURL(TVFetcherError):
    """TV uri is not a valid URL."""


class FailedRequest(TVFetcherError):
    """HTTP request failed or returned a non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None, cause: Any = None):
        super().__init__(message)
        self.status = status
        self.cause = cause


class UnexpectedResponseBody(TVFetcherError):
    """Response body could not be decoded as a TV."""

    def __init__(self, body: bytes):
        super().__init__("Unexpected response body")
        self.body = body


# HTTP application errors


class TVAppManagerError(Exception):
    """Base error for application requests."""


class BadURL(TVAppManagerError):
    """Application URL could not be built."""


class NoData(TVAppManagerError):
    """No data received from the network."""


class NetworkError(TVAppManagerError):
    """Request failed before a response was received."""


class AppNotFound(TVAppManagerError):
    """Application is not installed on the TV."""


class InvalidResponse(TVAppManagerError):
    """TV returned an unexpected response."""

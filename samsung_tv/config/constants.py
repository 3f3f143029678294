"""All constants for Samsung TV control - single source of truth.

Consolidates hardcoded values used by:
- connection.py (control channel endpoint)
- apps.py (application REST endpoint)
- search.py (SSDP addresses)
- wol.py (Wake-on-LAN defaults)
"""

# === Network Ports ===
CONTROL_PORT = 8002            # Secure WebSocket control channel
HTTP_PORT = 8001               # REST API (device info, applications)
SSDP_PORT = 1900               # Standard SSDP port
WOL_PORT = 9                   # Wake-on-LAN UDP port

# === Network Addresses ===
SSDP_ADDR = "239.255.255.250"  # SSDP multicast address
BROADCAST_ADDR = "255.255.255.255"

# === Control Channel ===
CONTROL_SCHEME = "wss"
CONTROL_PATH = "/api/v2/channels/samsung.remote.control"

# === REST API ===
HTTP_SCHEME = "http"
APPLICATIONS_PATH = "/api/v2/applications/"
DEVICE_INFO_PATH = "/api/v2/"
DEFAULT_HTTP_TIMEOUT = 5.0

# === Discovery ===
SSDP_SEARCH_TARGET = "urn:samsung.com:device:RemoteControlReceiver:1"
SSDP_SEARCH_INTERVAL = 5.0     # Seconds between M-SEARCH rounds
SSDP_LOST_AFTER = 3            # Missed rounds before a TV counts as lost
DEFAULT_TV_TYPE = "Samsung SmartTV"

# === Client Identification ===
DEFAULT_APP_NAME = "SamsungTVCommander"

"""Wake-on-LAN support for Samsung TV."""

import logging
import socket
from typing import Optional

from .errors import TVCommanderError, WakeOnLANConnectionError, WakeOnLANProcessingError
from .models import TVWakeOnLANDevice

_LOGGER = logging.getLogger(__name__)


def create_magic_packet(mac_address: str) -> bytes:
    """Create a Wake-on-LAN magic packet.

    The magic packet consists of:
    - 6 bytes of 0xFF
    - 16 repetitions of the target MAC address (6 bytes each)

    Args:
        mac_address: MAC address in format XX:XX:XX:XX:XX:XX or XX-XX-XX-XX-XX-XX

    Returns:
        Magic packet as bytes

    Raises:
        ValueError: If the MAC address is malformed
    """
    mac = mac_address.upper().replace(":", "").replace("-", "")
    if len(mac) != 12:
        raise ValueError(f"Invalid MAC address: {mac_address}")

    mac_bytes = bytes.fromhex(mac)

    return b"\xff" * 6 + mac_bytes * 16


def wake_on_lan(device: TVWakeOnLANDevice) -> Optional[TVCommanderError]:
    """Send a Wake-on-LAN magic packet to power on a TV.

    Args:
        device: MAC address, broadcast address and port to send to

    Returns:
        None on success, otherwise the error that prevented sending
    """
    try:
        packet = create_magic_packet(device.mac)
    except ValueError as e:
        return WakeOnLANProcessingError(str(e), cause=e)

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    except OSError as e:
        _LOGGER.warning("WoL socket error: %s", e)
        return WakeOnLANConnectionError(str(e), cause=e)

    try:
        sock.sendto(packet, (device.broadcast, device.port))
    except OSError as e:
        _LOGGER.warning("WoL send error: %s", e)
        return WakeOnLANProcessingError(str(e), cause=e)
    finally:
        sock.close()

    _LOGGER.info("Sent magic packet to %s via %s:%d", device.mac, device.broadcast, device.port)
    return None

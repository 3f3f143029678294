"""Remote key constants for Samsung TV.

Each key maps to the token sent as ``DataOfCmd`` in a remote control command.
"""

from enum import Enum
from typing import List


class ControlKey(Enum):
    """Keys on a Samsung TV remote control."""

    # Power
    POWER_OFF = "KEY_POWEROFF"

    # Navigation
    UP = "KEY_UP"
    DOWN = "KEY_DOWN"
    LEFT = "KEY_LEFT"
    RIGHT = "KEY_RIGHT"
    ENTER = "KEY_ENTER"
    RETURN = "KEY_RETURN"

    # Menus
    CHANNEL_LIST = "KEY_CH_LIST"
    MENU = "KEY_MENU"
    SOURCE = "KEY_SOURCE"
    GUIDE = "KEY_GUIDE"
    TOOLS = "KEY_TOOLS"
    INFO = "KEY_INFO"
    CONTENTS = "KEY_CONTENTS"

    # Color Buttons
    RED = "KEY_RED"
    GREEN = "KEY_GREEN"
    YELLOW = "KEY_YELLOW"
    BLUE = "KEY_BLUE"

    KEY_3D = "KEY_PANNEL_CHDOWN"

    # Volume
    VOLUME_UP = "KEY_VOLUP"
    VOLUME_DOWN = "KEY_VOLDOWN"
    MUTE = "KEY_MUTE"

    # Numbers
    NUMBER_0 = "KEY_0"
    NUMBER_1 = "KEY_1"
    NUMBER_2 = "KEY_2"
    NUMBER_3 = "KEY_3"
    NUMBER_4 = "KEY_4"
    NUMBER_5 = "KEY_5"
    NUMBER_6 = "KEY_6"
    NUMBER_7 = "KEY_7"
    NUMBER_8 = "KEY_8"
    NUMBER_9 = "KEY_9"

    # Sources
    SOURCE_TV = "KEY_DTV"
    SOURCE_HDMI = "KEY_HDMI"


# All keys for reference
ALL_KEYS: List[ControlKey] = list(ControlKey)

# Key name mapping for CLI
KEY_NAME_MAP = {
    "power": ControlKey.POWER_OFF,
    "off": ControlKey.POWER_OFF,
    "poweroff": ControlKey.POWER_OFF,
    "up": ControlKey.UP,
    "down": ControlKey.DOWN,
    "left": ControlKey.LEFT,
    "right": ControlKey.RIGHT,
    "enter": ControlKey.ENTER,
    "ok": ControlKey.ENTER,
    "select": ControlKey.ENTER,
    "back": ControlKey.RETURN,
    "return": ControlKey.RETURN,
    "chlist": ControlKey.CHANNEL_LIST,
    "channels": ControlKey.CHANNEL_LIST,
    "menu": ControlKey.MENU,
    "source": ControlKey.SOURCE,
    "input": ControlKey.SOURCE,
    "guide": ControlKey.GUIDE,
    "tools": ControlKey.TOOLS,
    "info": ControlKey.INFO,
    "contents": ControlKey.CONTENTS,
    "home": ControlKey.CONTENTS,
    "red": ControlKey.RED,
    "green": ControlKey.GREEN,
    "yellow": ControlKey.YELLOW,
    "blue": ControlKey.BLUE,
    "3d": ControlKey.KEY_3D,
    "volumeup": ControlKey.VOLUME_UP,
    "volup": ControlKey.VOLUME_UP,
    "vol+": ControlKey.VOLUME_UP,
    "volumedown": ControlKey.VOLUME_DOWN,
    "voldown": ControlKey.VOLUME_DOWN,
    "vol-": ControlKey.VOLUME_DOWN,
    "mute": ControlKey.MUTE,
    "0": ControlKey.NUMBER_0,
    "1": ControlKey.NUMBER_1,
    "2": ControlKey.NUMBER_2,
    "3": ControlKey.NUMBER_3,
    "4": ControlKey.NUMBER_4,
    "5": ControlKey.NUMBER_5,
    "6": ControlKey.NUMBER_6,
    "7": ControlKey.NUMBER_7,
    "8": ControlKey.NUMBER_8,
    "9": ControlKey.NUMBER_9,
    "tv": ControlKey.SOURCE_TV,
    "dtv": ControlKey.SOURCE_TV,
    "hdmi": ControlKey.SOURCE_HDMI,
}


def get_key(name: str) -> ControlKey:
    """Get key from friendly name or wire token.

    Args:
        name: Key name (e.g., 'up', 'volup', 'KEY_MUTE', 'mute')

    Returns:
        Matching ControlKey

    Raises:
        KeyError: If no key matches the name
    """
    name_lower = name.lower().strip()

    # Check name map first
    if name_lower in KEY_NAME_MAP:
        return KEY_NAME_MAP[name_lower]

    # Try wire token, with or without KEY_ prefix
    token = name.upper().strip()
    if not token.startswith("KEY_"):
        token = f"KEY_{token}"
    try:
        return ControlKey(token)
    except ValueError:
        pass

    # Enum member name (e.g. VOLUME_UP)
    member = name.upper().strip()
    if member in ControlKey.__members__:
        return ControlKey[member]

    raise KeyError(name)

"""On-screen keyboard navigation.

Converts text into the directional key presses needed to type it on a
TV's on-screen keyboard. Moves are vertical first, then horizontal.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .keys import ControlKey

_LOGGER = logging.getLogger(__name__)

KeyboardLayout = Sequence[Sequence[str]]

QWERTY: KeyboardLayout = (
    ("1", "2", "3", "4", "5", "6", "7", "8", "9", "0"),
    ("q", "w", "e", "r", "t", "y", "u", "i", "o", "p"),
    ("a", "s", "d", "f", "g", "h", "j", "k", "l"),
    ("z", "x", "c", "v", "b", "n", "m"),
)

YOUTUBE: KeyboardLayout = (
    ("a", "b", "c", "d", "e", "f", "g"),
    ("h", "i", "j", "k", "l", "m", "n"),
    ("o", "p", "q", "r", "s", "t", "u"),
    ("v", "w", "x", "y", "z", "-", "'"),
)

LAYOUTS = {
    "qwerty": QWERTY,
    "youtube": YOUTUBE,
}


def find_char(layout: KeyboardLayout, char: str) -> Optional[Tuple[int, int]]:
    """Return (row, column) of the first occurrence of char, or None."""
    for row, chars in enumerate(layout):
        for col, key in enumerate(chars):
            if key == char:
                return row, col
    return None


def moves_between(start: Tuple[int, int], end: Tuple[int, int]) -> List[ControlKey]:
    """Directional keys to move the cursor from start to end."""
    row_diff = end[0] - start[0]
    col_diff = end[1] - start[1]
    moves = [ControlKey.DOWN if row_diff > 0 else ControlKey.UP] * abs(row_diff)
    moves += [ControlKey.RIGHT if col_diff > 0 else ControlKey.LEFT] * abs(col_diff)
    return moves


def plan_text_entry(
    text: str,
    layout: KeyboardLayout,
    on_char_not_found: Optional[Callable[[str], None]] = None,
) -> List[ControlKey]:
    """Plan the key presses that type text on a keyboard layout.

    The cursor is assumed to rest on the first character, so the plan starts
    with one ENTER. Each following character adds the moves from the previous
    one plus an ENTER. If either character of a pair is not on the layout,
    ``on_char_not_found`` is called with it and the pair is skipped.

    Args:
        text: Text to type
        layout: Rows of single characters
        on_char_not_found: Called with each character missing from the layout

    Returns:
        Ordered list of ControlKey presses (empty for empty text)
    """
    if not text:
        return []

    keys = [ControlKey.ENTER]
    for current, following in zip(text, text[1:]):
        start = find_char(layout, current)
        end = find_char(layout, following)
        if start is None or end is None:
            missing = current if start is None else following
            _LOGGER.debug("Character %r not on keyboard layout", missing)
            if on_char_not_found is not None:
                on_char_not_found(missing)
            continue
        keys.extend(moves_between(start, end))
        keys.append(ControlKey.ENTER)
    return keys

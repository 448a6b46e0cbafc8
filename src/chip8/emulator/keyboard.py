"""
Keypad for the CHIP-8 VM
========================

The CHIP-8 has a 16-key hexadecimal keypad, laid out as:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

The core only ever sees a 16-entry boolean array indexed by logical key
0x0-0xF, supplied by the host once per tick. Key names let tests and
hosts refer to keys by their label; the QWERTY table maps the
conventional left-hand block of a PC keyboard onto the keypad:

    1 2 3 4        1 2 3 C
    Q W E R   ->   4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F

Copyright (c) 2025 chip8-vm Contributors
"""

from typing import Dict, List, Optional, Sequence

KEY_COUNT = 16


# =============================================================================
# KEY NAME TABLES
# =============================================================================

# Keypad label -> logical key index
KEY_NAME_TO_INDEX: Dict[str, int] = {f"{i:X}": i for i in range(KEY_COUNT)}

# Host keyboard character -> logical key index
KEY_TO_INDEX_QWERTY: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


class Keypad:
    """
    Sixteen-key logical keypad state.

    The keypad is read-only to the executor; only the host changes it,
    either wholesale via set_state() or per key via key_down()/key_up().

    Example:
        >>> keypad = Keypad()
        >>> keypad.key_down("A")
        >>> keypad.is_pressed(0xA)
        True
        >>> keypad.first_pressed()
        10
    """

    def __init__(self):
        self._keys: List[bool] = [False] * KEY_COUNT

    # =========================================================================
    # Host Input API
    # =========================================================================

    def set_state(self, keys: Sequence[bool]) -> None:
        """
        Replace the whole keypad state.

        Args:
            keys: 16 booleans indexed by logical key

        Raises:
            ValueError: If keys does not have exactly 16 entries
        """
        if len(keys) != KEY_COUNT:
            raise ValueError(f"expected {KEY_COUNT} key states, got {len(keys)}")
        self._keys = [bool(k) for k in keys]

    def key_down(self, key: str | int) -> None:
        """
        Press a key.

        Args:
            key: Keypad label ("0"-"F") or logical index (0-15)
        """
        self._keys[self._resolve(key)] = True

    def key_up(self, key: str | int) -> None:
        """Release a key."""
        self._keys[self._resolve(key)] = False

    def clear(self) -> None:
        """Release all keys."""
        self._keys = [False] * KEY_COUNT

    # =========================================================================
    # Executor Read API
    # =========================================================================

    def is_pressed(self, index: int) -> bool:
        """Check if logical key (masked to 0-15) is pressed."""
        return self._keys[index & 0xF]

    def first_pressed(self) -> Optional[int]:
        """Return the lowest pressed key index, or None if no key is down."""
        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def state(self) -> List[bool]:
        """Return a copy of the 16 key states."""
        return list(self._keys)

    @staticmethod
    def _resolve(key: str | int) -> int:
        if isinstance(key, int):
            if not 0 <= key < KEY_COUNT:
                raise ValueError(f"key index must be 0-15, got {key}")
            return key
        index = KEY_NAME_TO_INDEX.get(key.upper())
        if index is None:
            raise ValueError(f"unknown keypad key {key!r}")
        return index


def keys_from_names(names: Sequence[str], layout: Dict[str, int] = KEY_NAME_TO_INDEX) -> List[bool]:
    """
    Build a 16-entry key state array from key names.

    Unknown names are skipped.

    Args:
        names: Pressed key names
        layout: Name to index table (keypad labels by default)

    Returns:
        List of 16 booleans
    """
    keys = [False] * KEY_COUNT
    for name in names:
        index = layout.get(name.upper())
        if index is not None:
            keys[index] = True
    return keys

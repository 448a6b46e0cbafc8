"""
Keypad Unit Tests
=================

Copyright (c) 2025 chip8-vm Contributors
"""

import pytest

from chip8.emulator.keyboard import (
    KEY_COUNT,
    KEY_TO_INDEX_QWERTY,
    Keypad,
    keys_from_names,
)


class TestKeypad:
    """Test host input and executor reads."""

    def test_starts_released(self):
        keypad = Keypad()
        assert keypad.state() == [False] * KEY_COUNT
        assert keypad.first_pressed() is None

    def test_key_down_by_label(self):
        keypad = Keypad()
        keypad.key_down("a")
        assert keypad.is_pressed(0xA)

    def test_key_up(self):
        keypad = Keypad()
        keypad.key_down(3)
        keypad.key_up(3)
        assert not keypad.is_pressed(3)

    def test_first_pressed_is_lowest(self):
        keypad = Keypad()
        keypad.key_down("F")
        keypad.key_down("2")
        assert keypad.first_pressed() == 2

    def test_is_pressed_masks_index(self):
        keypad = Keypad()
        keypad.key_down(1)
        assert keypad.is_pressed(0x11)

    def test_set_state(self):
        keypad = Keypad()
        keys = [False] * 16
        keys[7] = True
        keypad.set_state(keys)
        assert keypad.state() == keys

    def test_set_state_wrong_length(self):
        with pytest.raises(ValueError):
            Keypad().set_state([False] * 15)

    def test_clear(self):
        keypad = Keypad()
        keypad.key_down(0)
        keypad.clear()
        assert keypad.first_pressed() is None

    @pytest.mark.parametrize("key", ["G", "", 16, -1])
    def test_unknown_key(self, key):
        with pytest.raises(ValueError):
            Keypad().key_down(key)


class TestKeyTables:
    """Test key name helpers."""

    def test_keys_from_names(self):
        keys = keys_from_names(["1", "f"])
        assert keys[0x1] and keys[0xF]
        assert sum(keys) == 2

    def test_keys_from_names_skips_unknown(self):
        assert sum(keys_from_names(["Z"])) == 0

    def test_qwerty_layout(self):
        keys = keys_from_names(["Q", "X", "4"], KEY_TO_INDEX_QWERTY)
        assert [i for i, k in enumerate(keys) if k] == [0x0, 0x4, 0xC]

    def test_qwerty_covers_keypad(self):
        assert sorted(KEY_TO_INDEX_QWERTY.values()) == list(range(16))

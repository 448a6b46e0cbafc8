"""
Call Stack for the CHIP-8 VM
============================

A bounded return-address stack: a fixed number of slots plus an explicit
depth count. Every push and pop is bounds-checked; a push onto a full
stack or a pop from an empty one raises instead of touching memory
outside the stack.

Copyright (c) 2025 chip8-vm Contributors
"""

from typing import List

from chip8.errors import StackOverflowError, StackUnderflowError

STACK_DEPTH = 12


class CallStack:
    """
    Fixed-capacity subroutine return-address stack.

    Attributes:
        capacity: Maximum number of return addresses
        depth: Number of valid entries (the stack pointer)

    Example:
        >>> stack = CallStack()
        >>> stack.push(0x202)
        >>> stack.depth
        1
        >>> hex(stack.pop())
        '0x202'
    """

    def __init__(self, capacity: int = STACK_DEPTH):
        self.capacity = capacity
        self._slots: List[int] = [0] * capacity
        self._depth = 0

    @property
    def depth(self) -> int:
        """Number of return addresses currently on the stack."""
        return self._depth

    @property
    def is_full(self) -> bool:
        return self._depth >= self.capacity

    @property
    def is_empty(self) -> bool:
        return self._depth == 0

    def push(self, address: int) -> None:
        """
        Push a return address.

        Args:
            address: 16-bit return address

        Raises:
            StackOverflowError: If the stack already holds capacity entries
        """
        if self.is_full:
            raise StackOverflowError(self._depth)
        self._slots[self._depth] = address & 0xFFFF
        self._depth += 1

    def pop(self) -> int:
        """
        Pop the most recent return address.

        Returns:
            The return address

        Raises:
            StackUnderflowError: If the stack is empty
        """
        if self.is_empty:
            raise StackUnderflowError()
        self._depth -= 1
        return self._slots[self._depth]

    def peek(self) -> int:
        """Return the top address without popping (raises when empty)."""
        if self.is_empty:
            raise StackUnderflowError()
        return self._slots[self._depth - 1]

    def entries(self) -> List[int]:
        """Return valid entries, oldest first."""
        return list(self._slots[:self._depth])

    def reset(self) -> None:
        """Discard all entries."""
        self._slots = [0] * self.capacity
        self._depth = 0

    def __len__(self) -> int:
        return self._depth

    def __repr__(self) -> str:
        addresses = ", ".join(f"${a:03X}" for a in self.entries())
        return f"CallStack([{addresses}], capacity={self.capacity})"

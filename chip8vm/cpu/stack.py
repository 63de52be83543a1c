"""
chip8vm — Call Stack

Passive store of return addresses. The stack pointer lives in the CPU;
push/pop just index into the slots. Popping clears the slot.
"""

from ..config import STACK_DEPTH, ADDRESS_MASK
from ..faults import StackOverflow, StackUnderflow


class Stack:

    def __init__(self, depth: int = STACK_DEPTH):
        self._depth = depth
        self._slots = [0] * depth

    @property
    def depth(self) -> int:
        return self._depth

    def push(self, address: int, pointer: int):
        if not 0 <= pointer < self._depth:
            raise StackOverflow(pointer, self._depth)
        self._slots[pointer] = address & ADDRESS_MASK

    def pop(self, pointer: int) -> int:
        if not 0 <= pointer < self._depth:
            raise StackUnderflow(pointer, self._depth)
        address = self._slots[pointer]
        self._slots[pointer] = 0
        return address

    def snapshot(self) -> tuple:
        return tuple(self._slots)

    def reset(self):
        self._slots = [0] * self._depth

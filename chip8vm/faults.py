"""
chip8vm — Fatal Machine Faults

Every condition that stops the interpreter abnormally derives from
MachineFault. None of these are recoverable inside the machine: the run
loop propagates them to the caller and the emulator is expected to be
reset (or discarded) afterwards.

Arithmetic carry / borrow is NOT a fault. It is reported through VF.
"""

from typing import Optional


class MachineFault(Exception):
    """Base class for all fatal interpreter errors."""
    pass


class UnrecognizedInstruction(MachineFault):
    """Decoded word matches no known instruction pattern."""

    def __init__(self, word: int, address: Optional[int] = None):
        self.word = word
        self.address = address
        if address is None:
            msg = f"Unrecognized instruction 0x{word:04X}"
        else:
            msg = f"Unrecognized instruction 0x{word:04X} at 0x{address:03X}"
        super().__init__(msg)


class RegisterIndexOutOfRange(MachineFault):
    """Register operand outside V0..VF."""

    def __init__(self, index: int, count: int = 16):
        self.index = index
        self.count = count
        super().__init__(f"Register index {index} out of range (0..{count - 1})")


class AddressOutOfBounds(MachineFault):
    """Memory access at or past the end of the address space."""

    def __init__(self, address: int, capacity: int):
        self.address = address
        self.capacity = capacity
        super().__init__(
            f"Address 0x{address:X} out of bounds (capacity 0x{capacity:X})")


class StackFault(MachineFault):
    """Call stack pointer left [0, depth]."""

    def __init__(self, pointer: int, depth: int):
        self.pointer = pointer
        self.depth = depth
        super().__init__(self._describe())

    def _describe(self) -> str:
        return f"Stack fault at pointer {self.pointer} (depth {self.depth})"


class StackOverflow(StackFault):
    def _describe(self) -> str:
        return f"Stack overflow: CALL with {self.pointer} of {self.depth} slots in use"


class StackUnderflow(StackFault):
    def _describe(self) -> str:
        return f"Stack underflow: RET with stack pointer {self.pointer}"

"""
chip8vm — CPU Register File

Register model:
  V0–VE  general purpose, 8-bit
  VF     8-bit, also the flag register (carry / borrow / shift-out)

VF is a real register in the same array. An instruction that reads VF as
an operand and then writes the flag sees the flag clobber its operand
or result; that aliasing is part of the machine definition and is kept.

Index operands are validated with a strict 0 <= index < 16 check.
"""

from ..config import NUM_REGISTERS, FLAG_REGISTER, REGISTER_MASK
from ..faults import RegisterIndexOutOfRange


class RegisterFile:
    """16 x 8-bit registers, indexable like a list."""

    __slots__ = ('_v',)

    def __init__(self):
        self._v = [0] * NUM_REGISTERS

    def _check(self, index: int):
        if not isinstance(index, int) or not 0 <= index < NUM_REGISTERS:
            raise RegisterIndexOutOfRange(index, NUM_REGISTERS)

    def __getitem__(self, index: int) -> int:
        self._check(index)
        return self._v[index]

    def __setitem__(self, index: int, value: int):
        self._check(index)
        self._v[index] = value & REGISTER_MASK

    def __len__(self) -> int:
        return NUM_REGISTERS

    def __iter__(self):
        return iter(list(self._v))

    # --- Flag register ---

    @property
    def VF(self) -> int:
        return self._v[FLAG_REGISTER]

    @VF.setter
    def VF(self, value: int):
        self._v[FLAG_REGISTER] = value & REGISTER_MASK

    # --- Display ---

    def display(self) -> str:
        """Format register state for debugging."""
        return ' '.join(f"V{i:X}={v:02X}" for i, v in enumerate(self._v))

    def reset(self):
        self._v = [0] * NUM_REGISTERS

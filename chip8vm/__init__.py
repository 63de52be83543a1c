# chip8vm — Pure-software CHIP-8 register machine interpreter
#
# Core components:
#   - cpu/regs.py     16 x 8-bit registers, VF doubles as the flag register
#   - cpu/stack.py    16 return-address slots (passive, pointer owned by CPU)
#   - cpu/decoder.py  nibble split + tagged instruction decode
#   - cpu/alu.py      8-bit arithmetic returning (result, flag)
#   - mem/memory.py   4K memory with independent write/read cursors
#   - emu.py          fetch-decode-execute loop
#
# Program loading, CLI and exit codes live in chip8run.py at the repo root.

from .emu import Chip8Emulator, StopReason
from .faults import (
    MachineFault,
    UnrecognizedInstruction,
    RegisterIndexOutOfRange,
    AddressOutOfBounds,
    StackFault,
    StackOverflow,
    StackUnderflow,
)

__version__ = "0.2.0"

__all__ = [
    "Chip8Emulator",
    "StopReason",
    "MachineFault",
    "UnrecognizedInstruction",
    "RegisterIndexOutOfRange",
    "AddressOutOfBounds",
    "StackFault",
    "StackOverflow",
    "StackUnderflow",
]

"""
chip8vm — 8-bit ALU

Pure functions. Arithmetic and shifts return (result, flag) where result
is already masked to 8 bits and flag is the 0/1 value destined for VF.
Logic ops return the result only; they never touch VF.

The caller decides whether and in what order result and flag are
committed (see the handlers in emu.py). The ALU never sees registers.
"""

MASK8 = 0xFF


def add8(a: int, b: int) -> tuple:
    """a + b. Flag = carry out of bit 7."""
    total = a + b
    return (total & MASK8, 1 if total > MASK8 else 0)


def sub8(a: int, b: int) -> tuple:
    """a - b. Flag = NOT borrow (1 when a >= b)."""
    return ((a - b) & MASK8, 1 if a >= b else 0)


def shr8(val: int) -> tuple:
    """Logical shift right. Flag = bit 0 of the shifted result.

    4 -> (2, 0), 2 -> (1, 1), 5 -> (2, 0).
    """
    result = (val & MASK8) >> 1
    return (result, result & 0x01)


def shl8(val: int) -> tuple:
    """Shift left, 8-bit wrap. Flag = bit shifted out (bit 7)."""
    return ((val << 1) & MASK8, (val >> 7) & 0x01)


def or8(a: int, b: int) -> int:
    return (a | b) & MASK8


def and8(a: int, b: int) -> int:
    return (a & b) & MASK8


def xor8(a: int, b: int) -> int:
    return (a ^ b) & MASK8

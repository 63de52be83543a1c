"""
chip8vm — Instruction Decoder

Every instruction is one 16-bit word split into four nibbles:

  0x8324
    8 -> c  instruction family
    3 -> x  register index (Vx)
    2 -> y  register index (Vy)
    4 -> d  sub-opcode / low nibble

Immediates are rebuilt from the low nibbles:
  nn  = (y << 4) | d            8-bit literal
  nnn = (x << 8) | (y << 4) | d  12-bit address

decode_instruction() turns a word into an Instruction: an Op tag plus
its operands. The instruction set is closed; anything that is not in the
tables below raises UnrecognizedInstruction.

Operand formats:
  INH     no operands              HALT, RET
  ADDR    nnn                      JP, CALL
  REG_IMM Vx, nn                   SE, SNE, LD, ADD
  REG_REG Vx, Vy                   SE, SNE, LD, OR, AND, XOR, ADD, SUB, SUBN
  REG     Vx (y ignored)           SHR, SHL
"""

from enum import Enum
from typing import Iterator, NamedTuple, Optional, Tuple

from ..config import PROGRAM_START
from ..faults import UnrecognizedInstruction

# ──────────────────────────────────────────────
# Operand format constants
# ──────────────────────────────────────────────

INH     = 'INH'
ADDR    = 'ADDR'
REG_IMM = 'REG_IMM'
REG_REG = 'REG_REG'
REG     = 'REG'


class Op(Enum):
    HALT      = 'HALT'
    RET       = 'RET'
    JP        = 'JP'
    CALL      = 'CALL'
    SE_VX_NN  = 'SE_VX_NN'
    SNE_VX_NN = 'SNE_VX_NN'
    SE_VX_VY  = 'SE_VX_VY'
    LD_VX_NN  = 'LD_VX_NN'
    ADD_VX_NN = 'ADD_VX_NN'
    LD_VX_VY  = 'LD_VX_VY'
    OR        = 'OR'
    AND       = 'AND'
    XOR       = 'XOR'
    ADD_VX_VY = 'ADD_VX_VY'
    SUB       = 'SUB'
    SHR       = 'SHR'
    SUBN      = 'SUBN'
    SHL       = 'SHL'
    SNE_VX_VY = 'SNE_VX_VY'


# Op -> (assembler mnemonic, operand format)
OP_INFO = {
    Op.HALT:      ('HALT', INH),
    Op.RET:       ('RET',  INH),
    Op.JP:        ('JP',   ADDR),
    Op.CALL:      ('CALL', ADDR),
    Op.SE_VX_NN:  ('SE',   REG_IMM),
    Op.SNE_VX_NN: ('SNE',  REG_IMM),
    Op.SE_VX_VY:  ('SE',   REG_REG),
    Op.LD_VX_NN:  ('LD',   REG_IMM),
    Op.ADD_VX_NN: ('ADD',  REG_IMM),
    Op.LD_VX_VY:  ('LD',   REG_REG),
    Op.OR:        ('OR',   REG_REG),
    Op.AND:       ('AND',  REG_REG),
    Op.XOR:       ('XOR',  REG_REG),
    Op.ADD_VX_VY: ('ADD',  REG_REG),
    Op.SUB:       ('SUB',  REG_REG),
    Op.SHR:       ('SHR',  REG),
    Op.SUBN:      ('SUBN', REG_REG),
    Op.SHL:       ('SHL',  REG),
    Op.SNE_VX_VY: ('SNE',  REG_REG),
}


# ──────────────────────────────────────────────
# Decode tables
# ──────────────────────────────────────────────

# Family nibble -> Op, for families where c alone decides
FAMILY_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_VX_NN,
    0x4: Op.SNE_VX_NN,
    0x6: Op.LD_VX_NN,
    0x7: Op.ADD_VX_NN,
}

# Family 0: only two complete words are defined
SYSTEM_OPS = {
    0x0000: Op.HALT,
    0x00EE: Op.RET,
}

# Family 5 / 9: register compare, low nibble must be 0
COMPARE_OPS = {
    0x5: Op.SE_VX_VY,
    0x9: Op.SNE_VX_VY,
}

# Family 8: low nibble selects the ALU operation
ALU_OPS = {
    0x0: Op.LD_VX_VY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_VX_VY,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}


class Instruction(NamedTuple):
    """A decoded instruction: the Op tag plus every operand field."""
    op: Op
    word: int
    x: int
    y: int
    nn: int
    nnn: int

    @property
    def mnemonic(self) -> str:
        return OP_INFO[self.op][0]

    def __str__(self) -> str:
        mnem = self.mnemonic
        fmt = OP_INFO[self.op][1]
        if fmt == INH:
            return mnem
        if fmt == ADDR:
            return f"{mnem} 0x{self.nnn:03X}"
        if fmt == REG_IMM:
            return f"{mnem} V{self.x:X}, 0x{self.nn:02X}"
        if fmt == REG_REG:
            return f"{mnem} V{self.x:X}, V{self.y:X}"
        return f"{mnem} V{self.x:X}"


def decode(word: int) -> Tuple[int, int, int, int]:
    """Split a 16-bit word into its four nibbles (c, x, y, d)."""
    c = (word & 0xF000) >> 12
    x = (word & 0x0F00) >> 8
    y = (word & 0x00F0) >> 4
    d = word & 0x000F
    return c, x, y, d


def immediate8(y: int, d: int) -> int:
    """8-bit literal from the two low nibbles."""
    return (y << 4) | d


def immediate12(x: int, y: int, d: int) -> int:
    """12-bit address from the three low nibbles."""
    return (x << 8) | (y << 4) | d


def _lookup(word: int) -> Optional[Op]:
    c, x, y, d = decode(word)
    if c == 0x0:
        return SYSTEM_OPS.get(word)
    if c in FAMILY_OPS:
        return FAMILY_OPS[c]
    if c in COMPARE_OPS:
        return COMPARE_OPS[c] if d == 0 else None
    if c == 0x8:
        return ALU_OPS.get(d)
    return None


def decode_instruction(word: int, address: Optional[int] = None) -> Instruction:
    """Decode a 16-bit word into an Instruction.

    address is only used to make the error message point at the fetch.
    """
    word &= 0xFFFF
    op = _lookup(word)
    if op is None:
        raise UnrecognizedInstruction(word, address)
    c, x, y, d = decode(word)
    return Instruction(op, word, x, y, immediate8(y, d), immediate12(x, y, d))


def disassemble(image: bytes, origin: int = PROGRAM_START) -> Iterator[Tuple[int, int, str]]:
    """Walk a big-endian program image, yielding (address, word, text).

    Words that do not decode are shown as data (DW 0xNNNN).
    """
    data = bytes(image)
    if len(data) % 2:
        data += b"\x00"
    for offset in range(0, len(data), 2):
        word = (data[offset] << 8) | data[offset + 1]
        try:
            text = str(decode_instruction(word))
        except UnrecognizedInstruction:
            text = f"DW 0x{word:04X}"
        yield origin + offset, word, text

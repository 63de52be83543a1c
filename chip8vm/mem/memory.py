"""
chip8vm — 4K Memory with Independent Write / Read Cursors

Memory map:
  $000–$1FF  Reserved (interpreter area on the original machine)
  $200–$FFF  Program space, images load here, cursors start here

Two cursors walk the same flat bytearray:
  write_cursor  advanced by write(), appends instruction words
  read_cursor   advanced by read(), the program counter

They are independent so a program can keep being appended while an
earlier instruction stream is still being read.

Byte order: write() stores a word low byte first and read(2) rebuilds it
as byte[1] << 8 | byte[0], so set_opcode(0x6012) round-trips as 0x6012.
Program images on disk are big-endian words; load() stores each image
word in the same low-byte-first layout so both paths fetch identically.

Every access must stay below capacity. Nothing wraps: going past the end
raises AddressOutOfBounds.
"""

import logging
from pathlib import Path
from typing import Union

from ..config import MEMORY_SIZE, PROGRAM_START, WORD_SIZE
from ..faults import AddressOutOfBounds

log = logging.getLogger(__name__)


class Memory:
    """Flat byte store with a write cursor and a read cursor."""

    def __init__(self, capacity: int = MEMORY_SIZE, origin: int = PROGRAM_START):
        self._capacity = capacity
        self._origin = origin
        self._mem = bytearray(capacity)
        self.write_cursor: int = origin
        self.read_cursor: int = origin

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def origin(self) -> int:
        """Program origin: where images load and both cursors start."""
        return self._origin

    def _check(self, address: int, size: int):
        if address < 0 or address + size > self._capacity:
            raise AddressOutOfBounds(address, self._capacity)

    # --- Sequential access ---

    def write(self, word: int):
        """Append a 16-bit word (little-endian) at the write cursor."""
        self._check(self.write_cursor, WORD_SIZE)
        word &= 0xFFFF
        self._mem[self.write_cursor] = word & 0xFF
        self._mem[self.write_cursor + 1] = (word >> 8) & 0xFF
        self.write_cursor += WORD_SIZE

    def read(self, size: int = WORD_SIZE) -> int:
        """Read 1 or 2 bytes at the read cursor and advance it.

        Returns byte[1] << 8 | byte[0]; a 1-byte read leaves byte[1] = 0.
        """
        if size not in (1, 2):
            raise ValueError(f"read size must be 1 or 2, got {size}")
        self._check(self.read_cursor, size)
        data = [0, 0]
        for i in range(size):
            data[i] = self._mem[self.read_cursor]
            self.read_cursor += 1
        return (data[1] << 8) | data[0]

    # --- Random access ---

    def write_into(self, word: int, address: int):
        """Store a 16-bit word (little-endian) at an explicit address.

        Neither cursor moves. Both bytes must fit below capacity.
        """
        self._check(address, WORD_SIZE)
        word &= 0xFFFF
        self._mem[address] = word & 0xFF
        self._mem[address + 1] = (word >> 8) & 0xFF

    def read8(self, address: int) -> int:
        """Peek one byte without touching the cursors."""
        self._check(address, 1)
        return self._mem[address]

    def read16(self, address: int) -> int:
        """Peek the instruction word stored at address (same layout as read)."""
        self._check(address, WORD_SIZE)
        return (self._mem[address + 1] << 8) | self._mem[address]

    # --- Bulk load ---

    def load(self, image: Union[bytes, bytearray]):
        """Copy a big-endian program image into memory at the origin.

        Each image word (hi, lo) is stored as (lo, hi) so read(2) fetches
        it back unchanged. An odd trailing byte becomes the high byte of a
        last word whose low byte is zero. Cursors are left alone.
        """
        data = bytes(image)
        if len(data) % 2:
            data += b"\x00"
        self._check(self._origin, len(data))
        for i in range(0, len(data), 2):
            self._mem[self._origin + i] = data[i + 1]
            self._mem[self._origin + i + 1] = data[i]
        log.debug("Loaded %d-byte image at 0x%03X", len(image), self._origin)

    def load_file(self, path: Union[str, Path]):
        """Read a program image from disk and load() it."""
        data = Path(path).read_bytes()
        self.load(data)
        log.info("Program image loaded from %s (%d bytes)", path, len(data))

    # --- Debug ---

    def dump(self, start: int = PROGRAM_START, end: int = MEMORY_SIZE) -> bytes:
        """Raw copy of [start, end) for inspection."""
        return bytes(self._mem[start:end])

    def hexdump(self, start: int, length: int = 64) -> str:
        """Hex dump of memory for debugging (clamped to capacity)."""
        lines = []
        end = min(start + length, self._capacity)
        for addr in range(start, end, 16):
            row = self._mem[addr:min(addr + 16, end)]
            hex_bytes = ' '.join(f'{b:02X}' for b in row)
            lines.append(f'{addr:03X}  {hex_bytes}')
        return '\n'.join(lines)

    def reset(self):
        """Zero memory and rewind both cursors to the origin."""
        self._mem = bytearray(self._capacity)
        self.write_cursor = self._origin
        self.read_cursor = self._origin

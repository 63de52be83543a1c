"""
chip8vm — Main Emulator Class

Integrates:
  - Register file (cpu/regs.py)
  - Call stack (cpu/stack.py)
  - Decoder (cpu/decoder.py)
  - ALU (cpu/alu.py)
  - Memory (mem/memory.py)

Execution model:
  1. Fetch the word at the read cursor (Memory.read(2), cursor += 2)
  2. Decode it into an Instruction (Op tag + operands)
  3. Dispatch to the handler for that Op
  4. Repeat until HALT (0x0000) or a MachineFault

Termination:
  - HALT:  run() returns None, step() returns StopReason.HALT
  - fault: the MachineFault propagates out of step()/run()

There is no internal instruction budget. A host that needs one drives
step() itself (chip8run.py does this for --max-steps).
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from .cpu.regs import RegisterFile
from .cpu.stack import Stack
from .cpu.decoder import Instruction, Op, decode_instruction
from .cpu import alu
from .mem.memory import Memory
from .faults import MachineFault, StackOverflow, StackUnderflow

log = logging.getLogger(__name__)

TraceHook = Callable[[int, Instruction], None]


class StopReason(Enum):
    HALT = 'HALT'
    TIMEOUT = 'TIMEOUT'


class Chip8Emulator:
    """CHIP-8 register machine interpreter.

    Usage:
        emu = Chip8Emulator()
        emu.set_opcode(0x6012)   # LD V0, 0x12
        emu.run()
        emu.registers[0]         # 0x12
    """

    def __init__(self):
        self.registers = RegisterFile()
        self.memory = Memory()
        self.stack = Stack()
        self.stack_pointer: int = 0
        self.instructions_executed: int = 0

        # Trace output
        self._trace = False
        self._trace_output: List[str] = []
        self._trace_hook: Optional[TraceHook] = None

        self._dispatch = self._build_dispatch()

    @property
    def read_cursor(self) -> int:
        """Program counter: offset of the next fetch."""
        return self.memory.read_cursor

    @read_cursor.setter
    def read_cursor(self, address: int):
        self.memory.read_cursor = address

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load(self, image: bytes):
        """Copy a big-endian program image into memory at 0x200."""
        self.memory.load(image)

    def load_binary(self, path_or_data: Union[str, Path, bytes, bytearray]):
        """Load a program image from a file path or raw bytes."""
        if isinstance(path_or_data, (str, Path)):
            self.memory.load_file(path_or_data)
        else:
            self.memory.load(bytes(path_or_data))

    def set_opcode(self, word: int):
        """Append one instruction word at the write cursor."""
        self.memory.write(word)

    def write_into(self, word: int, address: int):
        """Place one instruction word at an explicit address."""
        self.memory.write_into(word, address)

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[StopReason]:
        """Execute one instruction. Returns StopReason.HALT on HALT, else None.

        Faults are logged at DEBUG and re-raised; reporting them is the
        caller's job.
        """
        address = self.memory.read_cursor
        try:
            instr = decode_instruction(self.memory.read(2), address)

            if self._trace_hook is not None:
                self._trace_hook(address, instr)
            if self._trace:
                self._trace_output.append(
                    f"${address:03X}: {str(instr):14s} "
                    f"{self.registers.display()} SP={self.stack_pointer}"
                )
            log.debug("$%03X: %s", address, instr)

            self.instructions_executed += 1
            self._dispatch[instr.op](instr)
        except _HaltException:
            return StopReason.HALT
        except MachineFault as e:
            log.debug("Machine fault at $%03X: %s", address, e)
            raise
        return None

    def run(self):
        """Run until HALT. Faults propagate as MachineFault."""
        log.debug("Run started at $%03X", self.memory.read_cursor)
        while self.step() is not StopReason.HALT:
            pass
        log.info("HALT at $%03X after %d instructions",
                 self.memory.read_cursor - 2, self.instructions_executed)

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(instr)
    # Result first, flag last: with x == F the flag write wins.

    def _build_dispatch(self) -> dict:
        """Build Op -> handler dispatch table."""
        return {
            # ── Control flow ──
            Op.HALT:      self._op_halt,
            Op.RET:       self._op_ret,
            Op.JP:        self._op_jp,
            Op.CALL:      self._op_call,

            # ── Conditional skips ──
            Op.SE_VX_NN:  self._op_se_vx_nn,
            Op.SNE_VX_NN: self._op_sne_vx_nn,
            Op.SE_VX_VY:  self._op_se_vx_vy,
            Op.SNE_VX_VY: self._op_sne_vx_vy,

            # ── Load / immediate arithmetic ──
            Op.LD_VX_NN:  self._op_ld_vx_nn,
            Op.ADD_VX_NN: self._op_add_vx_nn,
            Op.LD_VX_VY:  self._op_ld_vx_vy,

            # ── Logic ──
            Op.OR:        self._op_or,
            Op.AND:       self._op_and,
            Op.XOR:       self._op_xor,

            # ── Arithmetic / shifts (touch VF) ──
            Op.ADD_VX_VY: self._op_add_vx_vy,
            Op.SUB:       self._op_sub,
            Op.SUBN:      self._op_subn,
            Op.SHR:       self._op_shr,
            Op.SHL:       self._op_shl,
        }

    # ── Control flow ──

    def _op_halt(self, instr):
        raise _HaltException("HALT")

    def _op_ret(self, instr):
        if self.stack_pointer <= 0:
            raise StackUnderflow(self.stack_pointer, self.stack.depth)
        self.stack_pointer -= 1
        self.memory.read_cursor = self.stack.pop(self.stack_pointer)

    def _op_jp(self, instr):
        self.memory.read_cursor = instr.nnn

    def _op_call(self, instr):
        if self.stack_pointer >= self.stack.depth:
            raise StackOverflow(self.stack_pointer, self.stack.depth)
        self.stack.push(self.memory.read_cursor, self.stack_pointer)
        self.stack_pointer += 1
        self.memory.read_cursor = instr.nnn

    # ── Conditional skips ──

    def _skip_if(self, condition: bool):
        """Skip the next instruction: one extra word past the read cursor."""
        if condition:
            self.memory.read_cursor += 2

    def _op_se_vx_nn(self, instr):
        self._skip_if(self.registers[instr.x] == instr.nn)

    def _op_sne_vx_nn(self, instr):
        self._skip_if(self.registers[instr.x] != instr.nn)

    def _op_se_vx_vy(self, instr):
        self._skip_if(self.registers[instr.x] == self.registers[instr.y])

    def _op_sne_vx_vy(self, instr):
        self._skip_if(self.registers[instr.x] != self.registers[instr.y])

    # ── Load / immediate arithmetic ──

    def _op_ld_vx_nn(self, instr):
        self.registers[instr.x] = instr.nn

    def _op_add_vx_nn(self, instr):
        result, _ = alu.add8(self.registers[instr.x], instr.nn)
        self.registers[instr.x] = result

    def _op_ld_vx_vy(self, instr):
        self.registers[instr.x] = self.registers[instr.y]

    # ── Logic ──

    def _op_or(self, instr):
        regs = self.registers
        regs[instr.x] = alu.or8(regs[instr.x], regs[instr.y])

    def _op_and(self, instr):
        regs = self.registers
        regs[instr.x] = alu.and8(regs[instr.x], regs[instr.y])

    def _op_xor(self, instr):
        regs = self.registers
        regs[instr.x] = alu.xor8(regs[instr.x], regs[instr.y])

    # ── Arithmetic / shifts ──

    def _op_add_vx_vy(self, instr):
        # On carry Vx keeps its old value; only the flag is raised.
        regs = self.registers
        result, carry = alu.add8(regs[instr.x], regs[instr.y])
        if carry:
            log.debug("ADD V%X, V%X overflowed, VF=1", instr.x, instr.y)
            regs.VF = 1
        else:
            regs[instr.x] = result

    def _op_sub(self, instr):
        regs = self.registers
        result, no_borrow = alu.sub8(regs[instr.x], regs[instr.y])
        regs[instr.x] = result
        regs.VF = no_borrow

    def _op_subn(self, instr):
        regs = self.registers
        vx, vy = regs[instr.x], regs[instr.y]
        if vy < vx:
            regs.VF = 1
            return
        regs[instr.x] = vy - vx
        regs.VF = 0

    def _op_shr(self, instr):
        regs = self.registers
        result, low = alu.shr8(regs[instr.x])
        regs[instr.x] = result
        regs.VF = low

    def _op_shl(self, instr):
        regs = self.registers
        result, out = alu.shl8(regs[instr.x])
        regs[instr.x] = result
        regs.VF = out

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def set_trace_hook(self, hook: Optional[TraceHook]):
        """Call hook(address, instruction) before every instruction. None removes it."""
        self._trace_hook = hook

    def enable_trace(self, enable: bool = True):
        """Enable the in-memory instruction trace."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def display(self) -> str:
        """One-line machine state for debugging."""
        return (f"PC={self.memory.read_cursor:03X} SP={self.stack_pointer} "
                f"{self.registers.display()}")

    def reset(self):
        """Full emulator reset to power-on state."""
        self.registers.reset()
        self.memory.reset()
        self.stack.reset()
        self.stack_pointer = 0
        self.instructions_executed = 0
        self._trace_output.clear()


# Internal exception for flow control
class _HaltException(Exception):
    pass

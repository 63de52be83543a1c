"""
chip8vm — Machine Constants + Logging Defaults

Everything here is fixed by the CHIP-8 machine definition except the
logging block at the bottom, which the CLI can override with flags.
"""

import logging

# =============================================================================
#  MEMORY MAP
# =============================================================================
MEMORY_SIZE = 4096          # 4K flat address space
PROGRAM_START = 0x200       # $000-$1FF reserved (interpreter area on real HW)
WORD_SIZE = 2               # every instruction is one 16-bit word


# =============================================================================
#  CPU
# =============================================================================
NUM_REGISTERS = 16          # V0..VF
FLAG_REGISTER = 0xF         # VF: carry / borrow / shift-out
REGISTER_MASK = 0xFF        # registers are 8-bit
STACK_DEPTH = 16            # nested CALLs allowed
ADDRESS_MASK = 0xFFFF       # stack slots hold 16-bit return addresses


# =============================================================================
#  LOGGING
# =============================================================================
LOGGER_NAME = "chip8vm"
FILE_LOG_FORMAT = (
    "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)
FILE_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
DEFAULT_CONSOLE_LEVEL = logging.WARNING

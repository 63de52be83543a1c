#!/usr/bin/env python3
"""
chip8run — run a CHIP-8 program image on the chip8vm interpreter

Usage:
    python chip8run.py <rom> [--max-steps N] [--trace] [--dump]
                             [--disassemble] [-v|-vv] [-q] [--log-file PATH]

The image is raw big-endian 16-bit instruction words, loaded at 0x200.
Execution stops at HALT (0x0000) or on a machine fault.

Exit codes:
    0  program reached HALT
    1  image unreadable, or the machine faulted
    2  bad command line (argparse)
    3  --max-steps reached before HALT

Examples:
    python chip8run.py game.ch8
    python chip8run.py game.ch8 --max-steps 10000 --dump
    python chip8run.py game.ch8 --disassemble
"""

import argparse
import sys
from typing import List, Optional

from chip8vm import Chip8Emulator, MachineFault, StopReason, __version__
from chip8vm.config import PROGRAM_START
from chip8vm.cpu.decoder import disassemble
from chip8vm.log_setup import setup_logging, level_from_verbosity

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_TIMEOUT = 3


def run_bounded(emu: Chip8Emulator, max_steps: int) -> StopReason:
    """Drive step() at most max_steps times."""
    for _ in range(max_steps):
        if emu.step() is StopReason.HALT:
            return StopReason.HALT
    return StopReason.TIMEOUT


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8run",
        description="Run a CHIP-8 program image on the chip8vm interpreter",
    )
    parser.add_argument("rom", help="Program image (raw big-endian words)")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Stop with exit code 3 after N instructions")
    parser.add_argument("--trace", action="store_true",
                        help="Print the instruction trace after the run")
    parser.add_argument("--dump", action="store_true",
                        help="Print final machine state")
    parser.add_argument("--disassemble", action="store_true",
                        help="List the image as instructions and exit")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v, -vv)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", default=None,
                        help="Also write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"chip8run {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log = setup_logging(
        console_level=level_from_verbosity(args.verbose, args.quiet),
        log_file=args.log_file,
    )

    # Read input
    try:
        with open(args.rom, "rb") as f:
            image = f.read()
    except OSError as e:
        print(f"Error reading {args.rom}: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.disassemble:
        for address, word, text in disassemble(image, PROGRAM_START):
            print(f"{address:03X}  {word:04X}  {text}")
        return EXIT_OK

    emu = Chip8Emulator()
    emu.enable_trace(args.trace)

    try:
        emu.load(image)
        log.info("Loaded %s (%d bytes)", args.rom, len(image))
        if args.max_steps is None:
            emu.run()
            reason = StopReason.HALT
        else:
            reason = run_bounded(emu, args.max_steps)
    except MachineFault as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.dump:
            print(emu.display())
        return EXIT_ERROR
    finally:
        if args.trace:
            print(emu.get_trace())

    if args.dump:
        print(emu.display())

    if reason is StopReason.TIMEOUT:
        print(f"Error: no HALT within {args.max_steps} instructions",
              file=sys.stderr)
        return EXIT_TIMEOUT

    log.info("Finished: %d instructions executed", emu.instructions_executed)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

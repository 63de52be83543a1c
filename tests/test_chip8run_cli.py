"""
chip8run CLI Tests

Exit codes and output of the command-line front end. Images are written
to tmp_path as raw big-endian words.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

import chip8run


def write_rom(tmp_path, *words, name="prog.ch8"):
    rom = tmp_path / name
    rom.write_bytes(b"".join(w.to_bytes(2, "big") for w in words))
    return str(rom)


def test_clean_halt_exits_zero(tmp_path):
    rom = write_rom(tmp_path, 0x6012, 0x0000)
    assert chip8run.main([rom]) == 0


def test_missing_argument_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        chip8run.main([])
    assert exc.value.code == 2
    assert "rom" in capsys.readouterr().err


def test_unreadable_file(tmp_path, capsys):
    missing = str(tmp_path / "nope.ch8")
    assert chip8run.main([missing]) == 1
    assert "Error reading" in capsys.readouterr().err


def test_fault_exits_nonzero(tmp_path, capsys):
    rom = write_rom(tmp_path, 0xFFFF)
    assert chip8run.main(["-q", rom]) == 1
    assert "Unrecognized instruction 0xFFFF" in capsys.readouterr().err


def test_fault_reported_once(tmp_path, capsys):
    """Default verbosity: one stderr line for the fault, no duplicate log record."""
    rom = write_rom(tmp_path, 0xFFFF)
    assert chip8run.main([rom]) == 1
    err = capsys.readouterr().err
    assert err.count("Unrecognized instruction 0xFFFF") == 1
    assert "Machine fault" not in err


def test_image_too_large(tmp_path, capsys):
    rom = tmp_path / "big.ch8"
    rom.write_bytes(bytes(4096))
    assert chip8run.main(["-q", str(rom)]) == 1
    assert "out of bounds" in capsys.readouterr().err


def test_max_steps_timeout(tmp_path, capsys):
    """JP 0x200 forever → exit 3 once the bound is hit."""
    rom = write_rom(tmp_path, 0x1200)
    assert chip8run.main(["--max-steps", "50", rom]) == 3
    assert "no HALT within 50" in capsys.readouterr().err


def test_max_steps_halts_in_time(tmp_path):
    rom = write_rom(tmp_path, 0x6012)
    assert chip8run.main(["--max-steps", "50", rom]) == 0


def test_dump(tmp_path, capsys):
    rom = write_rom(tmp_path, 0x6012, 0x6134)
    assert chip8run.main(["--dump", rom]) == 0
    out = capsys.readouterr().out
    assert "V0=12" in out
    assert "V1=34" in out


def test_trace(tmp_path, capsys):
    rom = write_rom(tmp_path, 0x6012)
    assert chip8run.main(["--trace", rom]) == 0
    out = capsys.readouterr().out
    assert "$200: LD V0, 0x12" in out
    assert "$202: HALT" in out


def test_disassemble(tmp_path, capsys):
    rom = write_rom(tmp_path, 0x6012, 0x2300, 0xFFFF)
    assert chip8run.main(["--disassemble", rom]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "200  6012  LD V0, 0x12",
        "202  2300  CALL 0x300",
        "204  FFFF  DW 0xFFFF",
    ]


def test_log_file(tmp_path):
    rom = write_rom(tmp_path, 0x6012)
    log_path = tmp_path / "logs" / "run.log"
    assert chip8run.main(["--log-file", str(log_path), rom]) == 0
    text = log_path.read_text(encoding="utf-8")
    assert "LD V0, 0x12" in text
    assert "HALT at $202" in text


def test_run_bounded_helper():
    emu = chip8run.Chip8Emulator()
    emu.set_opcode(0x1200)
    assert chip8run.run_bounded(emu, 10) is chip8run.StopReason.TIMEOUT
    assert emu.instructions_executed == 10

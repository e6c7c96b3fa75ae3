"""
CLI tests — rv32sim.main() with argv lists, output checked via capsys.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

import rv32sim
from rv32i_emulator.log_setup import LOGGER_NAME, setup_logging, verbosity_to_level

SAMPLES = Path(__file__).parent / "programs_samples"


def test_runs_program_file(capsys):
    assert rv32sim.main([str(SAMPLES / "arith.dat")]) == 0
    out = capsys.readouterr().out
    assert "Stopped: END after 7 steps, pc=0x0000001C" in out
    assert "x18 =          15" in out


def test_demo(capsys):
    assert rv32sim.main(["--demo"]) == 0
    out = capsys.readouterr().out
    assert "Stopped: END after 4 steps" in out
    assert "x5  =          16  (0x00000010)" in out


def test_dump_mem(capsys):
    assert rv32sim.main([str(SAMPLES / "memory.dat"), "--dump-mem", "0:1"]) == 0
    out = capsys.readouterr().out
    assert "Memory:" in out
    assert "[   0] =        2047" in out


def test_dump_mem_out_of_range(capsys):
    assert rv32sim.main([str(SAMPLES / "memory.dat"), "--dump-mem", "2047:2"]) == 1
    assert "out of range" in capsys.readouterr().err


def test_trace(capsys):
    assert rv32sim.main(["--demo", "--trace"]) == 0
    out = capsys.readouterr().out
    assert "beq x8, x9, 12" in out
    assert "add x6, x8, x9" not in out     # skipped by the branch


def test_missing_file(tmp_path, capsys):
    assert rv32sim.main([str(tmp_path / "nope.dat")]) == 1
    assert "Error reading" in capsys.readouterr().err


def test_bad_instruction(tmp_path, capsys):
    path = tmp_path / "bad.dat"
    path.write_text("00000000000000000000000001111111\n", encoding="utf-8")
    assert rv32sim.main([str(path)]) == 1
    captured = capsys.readouterr()
    assert "Stopped: ILLEGAL after 0 steps" in captured.out
    assert "invalid opcode" in captured.err


def test_step_limit(tmp_path, capsys):
    path = tmp_path / "spin.dat"
    path.write_text("00000000000000000000000001101111\n", encoding="utf-8")   # jal x0, 0
    assert rv32sim.main([str(path), "--max-steps", "5", "-q"]) == 1
    assert "Stopped: TIMEOUT after 5 steps" in capsys.readouterr().out


def test_profile_choice(capsys):
    assert rv32sim.main(["--demo", "--profile", "rv32i"]) == 0
    with pytest.raises(SystemExit) as exc:
        rv32sim.main(["--demo", "--profile", "rv64"])
    assert exc.value.code == 2


def test_requires_program_or_demo(capsys):
    with pytest.raises(SystemExit) as exc:
        rv32sim.main([])
    assert exc.value.code == 2
    assert "--demo" in capsys.readouterr().err


def test_bad_window_syntax(capsys):
    with pytest.raises(SystemExit):
        rv32sim.main(["--demo", "--dump-mem", "12"])


def test_log_file(tmp_path, capsys):
    log_path = tmp_path / "logs" / "run.log"
    assert rv32sim.main(["--demo", "--log-file", str(log_path)]) == 0
    text = log_path.read_text(encoding="utf-8")
    assert "Loaded 6 instructions" in text
    assert "beq x8, x9, 12" in text


def test_non_utf8_file(tmp_path, capsys):
    path = tmp_path / "binary.dat"
    path.write_bytes(b"\xff\xfe\x00garbage")
    assert rv32sim.main([str(path)]) == 1
    assert "Error reading" in capsys.readouterr().err


def test_negative_window_count(capsys):
    with pytest.raises(SystemExit) as exc:
        rv32sim.main(["--demo", "--dump-mem", "5:-3"])
    assert exc.value.code == 2
    assert "must not be negative" in capsys.readouterr().err


def test_window_accepts_hex():
    assert rv32sim.parse_window("0x10:4") == (16, 4)
    assert rv32sim.parse_window("7:0") == (7, 0)


def test_program_and_demo_conflict(capsys):
    with pytest.raises(SystemExit) as exc:
        rv32sim.main([str(SAMPLES / "arith.dat"), "--demo"])
    assert exc.value.code == 2
    assert "not allowed with" in capsys.readouterr().err


class TestLogging:
    @pytest.mark.parametrize("verbose, quiet, level", [
        (0, False, logging.WARNING),
        (1, False, logging.INFO),
        (2, False, logging.DEBUG),
        (3, False, logging.DEBUG),
        (0, True, logging.ERROR),
        (2, True, logging.ERROR),
    ])
    def test_verbosity_to_level(self, verbose, quiet, level):
        assert verbosity_to_level(verbose, quiet) == level

    def test_setup_logging_replaces_handlers(self, tmp_path):
        setup_logging(logging.INFO, log_file=tmp_path / "first.log")
        logger = setup_logging(logging.DEBUG)
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.handlers[0].level == logging.DEBUG
        assert logger.level == logging.DEBUG

    def test_file_handler_captures_debug(self, tmp_path):
        logger = setup_logging(logging.WARNING, log_file=tmp_path / "run.log")
        assert len(logger.handlers) == 2
        console, fh = logger.handlers
        assert console.level == logging.WARNING
        assert isinstance(fh, logging.FileHandler)
        assert fh.level == logging.DEBUG
        assert logger.level == logging.DEBUG

    @pytest.mark.parametrize("flags, level", [
        ([], logging.WARNING),
        (["-v"], logging.INFO),
        (["-vv"], logging.DEBUG),
        (["-q"], logging.ERROR),
    ])
    def test_cli_flags_set_console_level(self, flags, level, capsys):
        assert rv32sim.main(["--demo"] + flags) == 0
        handlers = logging.getLogger(LOGGER_NAME).handlers
        assert len(handlers) == 1
        assert handlers[0].level == level

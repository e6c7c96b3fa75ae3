"""
RV32I Text Emulator
===================
Decodes and executes a reduced 32-bit RISC-V (RV32I) instruction set
written as plain text: one 32-character '0'/'1' string per instruction,
most-significant bit first.

Architecture:
    ┌────────────┐    ┌──────────┐    ┌──────────────┐    ┌──────────────────┐
    │ Program    │───>│ Decoder  │───>│ Instruction  │───>│ Emulator step()  │
    │ (strings)  │    │ (text)   │    │ (dataclass)  │    │ regs / mem / pc  │
    └────────────┘    └──────────┘    └──────────────┘    └──────────────────┘

    - loader.py:      whitespace-separated program files → list of strings
    - decoder.py:     bit-string → Instruction record, or a DecodeError
    - instruction.py: op enums + one frozen dataclass per format (R/I/S/B/U/J)
    - alu.py:         32-bit arithmetic, shifts, compares, load/store widths
    - regs.py:        32 registers + program counter
    - memory.py:      2048 signed 32-bit words, word-addressed
    - profiles.py:    'reference' (literal) vs 'rv32i' (base ISA) switches
    - emu.py:         fetch → decode → dispatch → advance
"""

__version__ = "0.2.0"

from typing import Optional, Sequence

from .errors import *
from .instruction import (
    Instruction, ROp, IOp, SOp, BOp, UOp, JOp,
    RegisterInstruction, ImmediateInstruction, StoreInstruction,
    BranchInstruction, UpperImmediateInstruction, JumpInstruction,
)
from .decoder import decode
from .emu import RV32IEmulator, RunResult, StopReason
from .loader import load_program, parse_program
from .profiles import MACHINE_PROFILES, DEFAULT_PROFILE


def run_program(program: Sequence[str], *, profile: str = DEFAULT_PROFILE,
                max_steps: Optional[int] = None) -> RV32IEmulator:
    """Run a program to completion and return the emulator.

    The caller inspects emu.registers() / emu.memory() afterwards, and
    emu.last_result for why execution stopped.

    Args:
        program: instruction strings, one per slot.
        profile: machine profile name ('reference' or 'rv32i').
        max_steps: step limit (default RV32IEmulator.DEFAULT_MAX_STEPS).
    """
    emu = RV32IEmulator(program, profile=profile)
    emu.run(max_steps=max_steps)
    return emu

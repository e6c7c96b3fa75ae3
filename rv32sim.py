#!/usr/bin/env python3
"""
rv32sim — RV32I text-encoding emulator CLI

Usage:
    python rv32sim.py <program.dat> [--profile reference|rv32i] [--max-steps N]
                                    [--trace] [--dump-mem START:COUNT] [-v] [-q]
    python rv32sim.py --demo

A program file holds whitespace-separated 32-character binary strings,
one per instruction, most-significant bit first.

Examples:
    python rv32sim.py tests/programs_samples/arith.dat
    python rv32sim.py loop.dat --profile rv32i --trace
    python rv32sim.py memory.dat --dump-mem 0:40
    python rv32sim.py --demo -vv                     # per-step debug log

Exit status: 0 when the program ran off its end, 1 on any other stop
reason or unreadable input, 2 on internal error.
"""

import argparse
import logging
import sys
import os

# Allow running from project root without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from rv32i_emulator import RV32IEmulator, StopReason, MemoryAccessFault, __version__
from rv32i_emulator.log_setup import setup_logging, verbosity_to_level
from rv32i_emulator.loader import load_program
from rv32i_emulator.profiles import MACHINE_PROFILES, DEFAULT_PROFILE

log = logging.getLogger("rv32i_emulator.cli")

# addi x8,x0,8 / addi x9,x0,8 / beq x8,x9,12 / add x6,x8,x9 /
# beq x0,x0,8 / add x5,x8,x9  →  x5=16, x8=8, x9=8
DEMO_PROGRAM = [
    "00000000100000000000010000010011",
    "00000000100000000000010010010011",
    "00000000100101000000011001100011",
    "00000000100101000000001100110011",
    "00000000000000000000010001100011",
    "00000000100101000000001010110011",
]


def parse_window(value: str):
    """Parse START:COUNT (decimal or 0x hex) for --dump-mem."""
    try:
        start, count = value.split(":", 1)
        start, count = int(start, 0), int(count, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected START:COUNT, got '{value}'") from None
    if count < 0:
        raise argparse.ArgumentTypeError(f"COUNT must not be negative, got {count}")
    return start, count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rv32sim",
        description="RV32I emulator for text-encoded (32-char binary) programs",
        epilog="Profiles: " + ", ".join(
            f"{name} ({p['description']})" for name, p in MACHINE_PROFILES.items()),
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("program", nargs="?",
                        help="Program file (whitespace-separated instructions)")
    source.add_argument("--demo", action="store_true",
                        help="Run the built-in demonstration program")
    parser.add_argument("--profile", default=DEFAULT_PROFILE,
                        choices=list(MACHINE_PROFILES.keys()),
                        help=f"Machine profile (default: {DEFAULT_PROFILE})")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Stop after N instructions "
                             f"(default: {RV32IEmulator.DEFAULT_MAX_STEPS})")
    parser.add_argument("--trace", action="store_true",
                        help="Print one line per executed instruction")
    parser.add_argument("--dump-mem", type=parse_window, default=None,
                        metavar="START:COUNT",
                        help="Print a window of memory slots after the run")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v, -vv)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", default=None,
                        help="Also write a full DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"rv32sim {__version__}")
    return parser


def print_registers(regs):
    print("Registers (non-zero):")
    nonzero = [(i, v) for i, v in enumerate(regs) if v]
    if not nonzero:
        print("  (all zero)")
    for i, v in nonzero:
        print(f"  x{i:<2d} = {v:>11d}  (0x{v & 0xFFFFFFFF:08X})")


def print_memory(window):
    print("Memory:")
    for addr, value in window:
        print(f"  [{addr:4d}] = {value:>11d}  (0x{value & 0xFFFFFFFF:08X})")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbosity_to_level(args.verbose, args.quiet), log_file=args.log_file)

    if args.program:
        try:
            program = load_program(args.program)
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading {args.program}: {e}", file=sys.stderr)
            return 1
    elif args.demo:
        program = list(DEMO_PROGRAM)
    else:
        parser.error("a program file or --demo is required")

    log.info("Loaded %d instructions (profile: %s)", len(program), args.profile)

    try:
        emu = RV32IEmulator(program, profile=args.profile)
        emu.enable_trace(args.trace)
        result = emu.run(max_steps=args.max_steps)

        if args.trace:
            print(emu.get_trace())

        print(f"Stopped: {result.reason.value} after {result.steps} steps, "
              f"pc=0x{emu.pc:08X}")
        if result.error is not None and result.reason is not StopReason.END:
            print(f"Error: {result.error}", file=sys.stderr)

        print_registers(emu.registers())
        if args.dump_mem:
            start, count = args.dump_mem
            print_memory(emu.mem.window(start, count))

    except MemoryAccessFault as e:
        print(f"Error: --dump-mem: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Internal emulator error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())

"""
RV32I Emulator — Main Emulator Class

Integrates:
  - Register file + program counter (regs.py)
  - Word-addressed memory (memory.py)
  - Text decoder (decoder.py)
  - ALU primitives (alu.py)
  - Machine profile switches (profiles.py)

Execution model, one step():
  1. Fetch the instruction string at pc // 4
     (ProgramCounterOutOfBounds past the last slot)
  2. Decode it (DecodeError subclasses)
  3. Look up the handler for the operation (UnsupportedInstruction if none)
  4. Run the handler: it reads operands, mutates registers/memory, and
     returns a new pc for taken branches and jumps
  5. Otherwise advance pc by 4

A failed step leaves registers, memory and pc exactly as they were.
Handlers read everything that can fault (memory slots, JALR's computed
register) before they write anything.

Termination reasons for run():
  - END:          ran past the last instruction (normal end of program)
  - ILLEGAL:      an instruction string failed to decode
  - FAULT:        register or memory index out of range
  - UNSUPPORTED:  decoded operation has no handler
  - TIMEOUT:      max_steps exceeded
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from . import alu
from .decoder import decode, LOAD_FUNCTS
from .errors import (
    CpuError, DecodeError, MachineFault,
    ProgramCounterOutOfBounds, UnsupportedInstruction,
)
from .instruction import (
    Instruction, ROp, IOp, SOp, BOp, UOp, JOp,
    RegisterInstruction, ImmediateInstruction, StoreInstruction,
    BranchInstruction, UpperImmediateInstruction, JumpInstruction,
)
from .loader import load_program
from .memory import Memory
from .profiles import DEFAULT_PROFILE, JALR_REGISTER_NUMBER, get_profile
from .regs import Registers, INSTRUCTION_BYTES

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
# Operation tables
# ──────────────────────────────────────────────

ALU_FUNCS: Dict[Union[ROp, IOp], Callable[[int, int], int]] = {
    ROp.ADD: alu.add,   IOp.ADDI: alu.add,
    ROp.SUB: alu.sub,
    ROp.XOR: alu.xor,   IOp.XORI: alu.xor,
    ROp.OR: alu.or_,    IOp.ORI: alu.or_,
    ROp.AND: alu.and_,  IOp.ANDI: alu.and_,
    ROp.SLL: alu.sll,   IOp.SLLI: alu.sll,
    ROp.SRL: alu.srl,   IOp.SRLI: alu.srl,
    ROp.SRA: alu.sra,   IOp.SRAI: alu.sra,
    ROp.SLT: alu.slt,   IOp.SLTI: alu.slt,
    ROp.SLTU: alu.sltu, IOp.SLTIU: alu.sltu,
}

LOAD_EXTEND: Dict[IOp, Callable[[int], int]] = {
    IOp.LB: alu.load_byte,
    IOp.LH: alu.load_half,
    IOp.LW: alu.load_word,
    IOp.LBU: alu.load_byte_unsigned,
    IOp.LHU: alu.load_half_unsigned,
}

# Bits replaced by a store; None means the whole slot
STORE_WIDTHS: Dict[SOp, Optional[int]] = {
    SOp.SB: 8,
    SOp.SH: 16,
    SOp.SW: None,
}

BRANCH_PREDICATES: Dict[BOp, Callable[[int, int], bool]] = {
    BOp.BEQ: alu.eq,
    BOp.BNE: alu.ne,
    BOp.BLT: alu.lt,
    BOp.BGE: alu.ge,
    BOp.BLTU: alu.ltu,
    BOp.BGEU: alu.geu,
}


class StopReason(Enum):
    END = 'END'
    ILLEGAL = 'ILLEGAL'
    FAULT = 'FAULT'
    UNSUPPORTED = 'UNSUPPORTED'
    TIMEOUT = 'TIMEOUT'


@dataclass
class RunResult:
    """Outcome of run(): why it stopped, how far it got, and the error."""
    reason: StopReason
    steps: int
    error: Optional[CpuError] = None

    @property
    def ok(self) -> bool:
        """True when the program simply ran off its end."""
        return self.reason is StopReason.END


class RV32IEmulator:
    """RV32I emulator over a program of 32-character bit strings.

    Usage:
        emu = RV32IEmulator(program)
        result = emu.run()
        assert result.reason is StopReason.END
        print(emu.registers()[8])

    step() raises on failure; run() turns those errors into a RunResult.
    """

    DEFAULT_MAX_STEPS = 1_000_000

    def __init__(self, program: Sequence[str], profile: str = DEFAULT_PROFILE):
        self.program: Tuple[str, ...] = tuple(program)
        self.profile_name = profile
        self.profile = get_profile(profile)

        # Core state
        self.regs = Registers(hardwire_zero=self.profile["hardwire_zero"])
        self.mem = Memory()
        self.steps = 0
        self.last_result: Optional[RunResult] = None

        # Trace output
        self._trace = False
        self._trace_output: List[str] = []

        # Operation → handler (built once per instance)
        self._dispatch = self._build_dispatch()

    @classmethod
    def from_file(cls, path: Union[str, Path],
                  profile: str = DEFAULT_PROFILE) -> 'RV32IEmulator':
        """Load a whitespace-separated program file."""
        return cls(load_program(path), profile=profile)

    # ══════════════════════════════════════════════
    # State inspection
    # ══════════════════════════════════════════════

    @property
    def pc(self) -> int:
        return self.regs.pc

    def registers(self) -> List[int]:
        """Snapshot of x0..x31."""
        return self.regs.snapshot()

    def memory(self) -> List[int]:
        """Snapshot of every memory slot."""
        return self.mem.snapshot()

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def fetch(self) -> str:
        """Instruction string at the current pc."""
        pc = self.regs.pc
        index = pc // INSTRUCTION_BYTES
        if index >= len(self.program):
            raise ProgramCounterOutOfBounds(
                f"program counter out of bounds (slot {index} of {len(self.program)})",
                pc=pc)
        return self.program[index]

    def step(self) -> Instruction:
        """Execute one instruction and return the decoded record.

        Raises:
            ProgramCounterOutOfBounds: pc is past the last instruction.
            DecodeError: the instruction string is malformed.
            UnsupportedInstruction: no handler for the decoded operation.
            MachineFault: register or memory index out of range.
        """
        pc = self.regs.pc
        text = self.fetch()

        try:
            instruction = decode(
                text, sign_extend=self.profile["sign_extend_immediates"])
        except DecodeError as e:
            e.with_pc(pc)
            raise

        handler = self._dispatch.get(instruction.op)
        if handler is None:
            raise UnsupportedInstruction(
                f"{instruction.op.value} not supported", pc=pc)

        logger.debug("0x%08X: %s  %s", pc, text, instruction)

        try:
            target = handler(instruction)
        except MachineFault as e:
            e.with_pc(pc)
            raise

        if target is None:
            self.regs.advance()
        else:
            self.regs.pc = target
        self.steps += 1

        if self._trace:
            self._trace_output.append(
                f"0x{pc:08X}: {text}  {str(instruction):24s} {self.regs.display()}")

        return instruction

    def run(self, max_steps: Optional[int] = None) -> RunResult:
        """Step until an error or the step limit.

        Args:
            max_steps: Maximum instructions to execute (TIMEOUT after that)

        Returns:
            RunResult; reason END means the program completed normally.
        """
        if max_steps is None:
            max_steps = self.DEFAULT_MAX_STEPS

        executed = 0
        result = None
        while result is None and executed < max_steps:
            try:
                self.step()
            except ProgramCounterOutOfBounds as e:
                logger.info("Program finished after %d steps", executed)
                result = RunResult(StopReason.END, executed, e)
            except DecodeError as e:
                logger.error("Decode error: %s", e)
                result = RunResult(StopReason.ILLEGAL, executed, e)
            except MachineFault as e:
                logger.error("Machine fault: %s", e)
                result = RunResult(StopReason.FAULT, executed, e)
            except UnsupportedInstruction as e:
                logger.error("Unsupported: %s", e)
                result = RunResult(StopReason.UNSUPPORTED, executed, e)
            else:
                executed += 1

        if result is None:
            logger.warning("Step limit of %d reached at pc=0x%08X",
                           max_steps, self.regs.pc)
            result = RunResult(StopReason.TIMEOUT, executed)
        self.last_result = result
        return result

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Each returns the new pc for a redirect, or None for pc + 4.

    def _build_dispatch(self) -> Dict[Enum, Callable[[Instruction], Optional[int]]]:
        dispatch: Dict[Enum, Callable] = {}
        for op in ALU_FUNCS:
            dispatch[op] = self._op_register if isinstance(op, ROp) else self._op_immediate
        for op in LOAD_FUNCTS.values():
            dispatch[op] = self._op_load
        dispatch[IOp.JALR] = self._op_jalr
        for op in STORE_WIDTHS:
            dispatch[op] = self._op_store
        for op in BRANCH_PREDICATES:
            dispatch[op] = self._op_branch
        dispatch[UOp.LUI] = self._op_lui
        dispatch[UOp.AUIPC] = self._op_auipc
        dispatch[JOp.JAL] = self._op_jal
        return dispatch

    # ── Register / immediate ALU ──

    def _op_register(self, ins: RegisterInstruction):
        a = self.regs.read(ins.rs1)
        b = self.regs.read(ins.rs2)
        self.regs.write(ins.rd, ALU_FUNCS[ins.op](a, b))

    def _op_immediate(self, ins: ImmediateInstruction):
        a = self.regs.read(ins.rs1)
        self.regs.write(ins.rd, ALU_FUNCS[ins.op](a, ins.imm))

    # ── Memory ──

    def _op_load(self, ins: ImmediateInstruction):
        addr = self.regs.read(ins.rs1) + ins.imm
        word = self.mem.read_word(addr)
        self.regs.write(ins.rd, LOAD_EXTEND[ins.op](word))

    def _op_store(self, ins: StoreInstruction):
        addr = self.regs.read(ins.rs1) + ins.imm
        value = self.regs.read(ins.rs2)
        width = STORE_WIDTHS[ins.op]
        if width is None:
            self.mem.write_word(addr, value)
        else:
            self.mem.write_low(addr, value, width)

    # ── Control flow ──

    def _op_branch(self, ins: BranchInstruction) -> Optional[int]:
        a = self.regs.read(ins.rs1)
        b = self.regs.read(ins.rs2)
        if BRANCH_PREDICATES[ins.op](a, b):
            return self.regs.pc + ins.imm
        return None

    def _op_jal(self, ins: JumpInstruction) -> int:
        pc = self.regs.pc
        self.regs.write(ins.rd, pc + INSTRUCTION_BYTES)
        return pc + ins.imm

    def _op_jalr(self, ins: ImmediateInstruction) -> int:
        """Register-indirect jump.

        The reference profile jumps to the value held in register number
        (rs1 + imm), not to x[rs1] + imm. The target is read before rd is
        written so rd may name the same register.
        """
        pc = self.regs.pc
        if self.profile["jalr_target"] == JALR_REGISTER_NUMBER:
            target = self.regs.read(ins.rs1 + ins.imm)
        else:
            target = (self.regs.read(ins.rs1) + ins.imm) & ~1
        self.regs.write(ins.rd, pc + INSTRUCTION_BYTES)
        return target

    # ── Upper immediate ──

    def _op_lui(self, ins: UpperImmediateInstruction):
        self.regs.write(ins.rd, alu.upper(ins.imm))

    def _op_auipc(self, ins: UpperImmediateInstruction):
        self.regs.write(ins.rd, self.regs.pc + alu.upper(ins.imm))

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Record one line per executed instruction."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def reset(self):
        """Zero registers, memory and pc; keep the program."""
        self.regs.reset()
        self.mem.reset()
        self.steps = 0
        self.last_result = None
        self._trace_output.clear()

"""
Instruction records produced by the decoder and consumed by the emulator.

Six formats, one frozen dataclass each. Every record carries an operation
tag from its format's enum plus only the operand fields that format
defines:

    Format          Record                 Fields
    R (register)    RegisterInstruction    op, rd, rs1, rs2
    I (immediate)   ImmediateInstruction   op, rd, rs1, imm
    S (store)       StoreInstruction       op, rs1, rs2, imm
    B (branch)      BranchInstruction      op, rs1, rs2, imm
    U (upper imm)   UpperImmediateInstruction  op, rd, imm
    J (jump)        JumpInstruction        op, rd, imm

Records are built fresh for every fetch and thrown away after the step.
str() gives an assembler-style rendering used by trace output.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Union


# ──────────────────────────────────────────────
# Operation tags
# ──────────────────────────────────────────────

class ROp(enum.Enum):
    ADD = "add"
    SUB = "sub"
    XOR = "xor"
    OR = "or"
    AND = "and"
    SLL = "sll"
    SRL = "srl"
    SRA = "sra"
    SLT = "slt"
    SLTU = "sltu"


class IOp(enum.Enum):
    # Arithmetic / logic
    ADDI = "addi"
    XORI = "xori"
    ORI = "ori"
    ANDI = "andi"
    SLLI = "slli"
    SRLI = "srli"
    SRAI = "srai"
    SLTI = "slti"
    SLTIU = "sltiu"
    # Loads
    LB = "lb"
    LH = "lh"
    LW = "lw"
    LBU = "lbu"
    LHU = "lhu"
    # Register-indirect jump
    JALR = "jalr"

    @property
    def is_load(self) -> bool:
        return self in _LOADS


_LOADS = frozenset({IOp.LB, IOp.LH, IOp.LW, IOp.LBU, IOp.LHU})


class SOp(enum.Enum):
    SB = "sb"
    SH = "sh"
    SW = "sw"


class BOp(enum.Enum):
    BEQ = "beq"
    BNE = "bne"
    BLT = "blt"
    BGE = "bge"
    BLTU = "bltu"
    BGEU = "bgeu"


class UOp(enum.Enum):
    LUI = "lui"
    AUIPC = "auipc"


class JOp(enum.Enum):
    JAL = "jal"


# ──────────────────────────────────────────────
# Variants
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class RegisterInstruction:
    op: ROp
    rd: int
    rs1: int
    rs2: int

    def __str__(self) -> str:
        return f"{self.op.value} x{self.rd}, x{self.rs1}, x{self.rs2}"


@dataclass(frozen=True)
class ImmediateInstruction:
    op: IOp
    rd: int
    rs1: int
    imm: int

    def __str__(self) -> str:
        if self.op.is_load:
            return f"{self.op.value} x{self.rd}, {self.imm}(x{self.rs1})"
        return f"{self.op.value} x{self.rd}, x{self.rs1}, {self.imm}"


@dataclass(frozen=True)
class StoreInstruction:
    op: SOp
    rs1: int
    rs2: int
    imm: int

    def __str__(self) -> str:
        return f"{self.op.value} x{self.rs2}, {self.imm}(x{self.rs1})"


@dataclass(frozen=True)
class BranchInstruction:
    op: BOp
    rs1: int
    rs2: int
    imm: int

    def __str__(self) -> str:
        return f"{self.op.value} x{self.rs1}, x{self.rs2}, {self.imm}"


@dataclass(frozen=True)
class UpperImmediateInstruction:
    op: UOp
    rd: int
    imm: int

    def __str__(self) -> str:
        return f"{self.op.value} x{self.rd}, 0x{self.imm & 0xFFFFF:X}"


@dataclass(frozen=True)
class JumpInstruction:
    op: JOp
    rd: int
    imm: int

    def __str__(self) -> str:
        return f"{self.op.value} x{self.rd}, {self.imm}"


Instruction = Union[
    RegisterInstruction,
    ImmediateInstruction,
    StoreInstruction,
    BranchInstruction,
    UpperImmediateInstruction,
    JumpInstruction,
]

"""
RV32I Text Decoder — 32-character bit string → Instruction record

Input is a string of exactly 32 characters from {'0', '1'}. Index 0 is
the most-significant bit (bit 31), index 31 the least-significant (bit 0).

Fixed fields (bit ranges, MSB-first):

    31        25 24    20 19    15 14  12 11     7 6       0
    ┌──────────┬────────┬────────┬──────┬────────┬─────────┐
    │  funct7  │  rs2   │  rs1   │funct3│   rd   │ opcode  │
    └──────────┴────────┴────────┴──────┴────────┴─────────┘

The opcode selects the format. Within a format, funct3 (and funct7 for
register ops and immediate shifts) selects the operation.

Immediates are assembled by concatenating format-specific bit ranges
into one digit string (see IMMEDIATE_LAYOUTS) and parsing it as a
non-negative base-2 magnitude. No sign extension happens unless the
caller asks for it with sign_extend=True; the 'reference' machine
profile keeps the plain magnitude so a negative branch offset comes out
as a large positive one.

Error order: length, opcode, then the format's subfields in the order
rd, rs1, rs2, imm (those present), then funct.
"""

from typing import Dict, Tuple, Union

from .alu import sign_extend as _sign_extend
from .errors import (
    FormatError, OpcodeError, FunctError, RdError, Rs1Error, Rs2Error, ImmError,
)
from .instruction import (
    Instruction, ROp, IOp, SOp, BOp, UOp, JOp,
    RegisterInstruction, ImmediateInstruction, StoreInstruction,
    BranchInstruction, UpperImmediateInstruction, JumpInstruction,
)

__all__ = ['decode', 'bits', 'INSTRUCTION_WIDTH', 'IMMEDIATE_LAYOUTS']

INSTRUCTION_WIDTH = 32

# ──────────────────────────────────────────────
# Opcodes
# ──────────────────────────────────────────────

OPCODE_OP = '0110011'       # R
OPCODE_OP_IMM = '0010011'   # I, arithmetic/logic
OPCODE_LOAD = '0000011'     # I, loads
OPCODE_JALR = '1100111'     # I, register-indirect jump
OPCODE_STORE = '0100011'    # S
OPCODE_BRANCH = '1100011'   # B
OPCODE_LUI = '0110111'      # U
OPCODE_AUIPC = '0010111'    # U
OPCODE_JAL = '1101111'      # J

IMMEDIATE_OPCODES = (OPCODE_OP_IMM, OPCODE_LOAD, OPCODE_JALR)
UPPER_OPCODES = {
    OPCODE_LUI: UOp.LUI,
    OPCODE_AUIPC: UOp.AUIPC,
}

# ──────────────────────────────────────────────
# Function tables
# ──────────────────────────────────────────────

# (funct3, funct7) -> op
R_FUNCTS: Dict[Tuple[str, str], ROp] = {
    ('000', '0000000'): ROp.ADD,
    ('000', '0100000'): ROp.SUB,
    ('100', '0000000'): ROp.XOR,
    ('110', '0000000'): ROp.OR,
    ('111', '0000000'): ROp.AND,
    ('001', '0000000'): ROp.SLL,
    ('101', '0000000'): ROp.SRL,
    ('101', '0100000'): ROp.SRA,
    ('010', '0000000'): ROp.SLT,
    ('011', '0000000'): ROp.SLTU,
}

# funct3 -> op; funct7 is part of the immediate here and is ignored
OP_IMM_FUNCTS: Dict[str, IOp] = {
    '000': IOp.ADDI,
    '100': IOp.XORI,
    '110': IOp.ORI,
    '111': IOp.ANDI,
    '010': IOp.SLTI,
    '011': IOp.SLTIU,
}

# Shifts are the exception: funct7 picks logical vs arithmetic
OP_IMM_SHIFT_FUNCTS: Dict[Tuple[str, str], IOp] = {
    ('001', '0000000'): IOp.SLLI,
    ('101', '0000000'): IOp.SRLI,
    ('101', '0100000'): IOp.SRAI,
}

LOAD_FUNCTS: Dict[str, IOp] = {
    '000': IOp.LB,
    '001': IOp.LH,
    '010': IOp.LW,
    '100': IOp.LBU,
    '101': IOp.LHU,
}

STORE_FUNCTS: Dict[str, SOp] = {
    '000': SOp.SB,
    '001': SOp.SH,
    '010': SOp.SW,
}

BRANCH_FUNCTS: Dict[str, BOp] = {
    '000': BOp.BEQ,
    '001': BOp.BNE,
    '100': BOp.BLT,
    '101': BOp.BGE,
    '110': BOp.BLTU,
    '111': BOp.BGEU,
}

# ──────────────────────────────────────────────
# Immediate layouts
# ──────────────────────────────────────────────
# MSB → LSB. A (hi, lo) pair is an inclusive bit range of the instruction,
# a plain string is a literal digit appended as-is.

ImmPart = Union[Tuple[int, int], str]

IMMEDIATE_LAYOUTS: Dict[str, Tuple[ImmPart, ...]] = {
    'I': ((31, 20),),
    'S': ((31, 25), (11, 7)),
    'B': ((31, 31), (7, 7), (30, 25), (11, 8), '0'),
    'U': ((31, 12),),
    'J': ((31, 31), (19, 12), (20, 20), (30, 21), '0'),
}

_BINARY_DIGITS = frozenset('01')


def bits(text: str, hi: int, lo: int) -> str:
    """Return the digits for instruction bits [hi:lo], MSB first."""
    return text[INSTRUCTION_WIDTH - 1 - hi:INSTRUCTION_WIDTH - lo]


def _is_binary(digits: str) -> bool:
    return bool(digits) and _BINARY_DIGITS.issuperset(digits)


def _register(text: str, hi: int, lo: int, error) -> int:
    digits = bits(text, hi, lo)
    if not _is_binary(digits):
        raise error()
    return int(digits, 2)


def _rd(text: str) -> int:
    return _register(text, 11, 7, RdError)


def _rs1(text: str) -> int:
    return _register(text, 19, 15, Rs1Error)


def _rs2(text: str) -> int:
    return _register(text, 24, 20, Rs2Error)


def _immediate(text: str, fmt: str, sign_extend: bool) -> int:
    digits = ''.join(
        part if isinstance(part, str) else bits(text, *part)
        for part in IMMEDIATE_LAYOUTS[fmt]
    )
    if not _is_binary(digits):
        raise ImmError()
    value = int(digits, 2)
    if sign_extend:
        value = _sign_extend(value, len(digits))
    return value


def _lookup(table, key):
    op = table.get(key)
    if op is None:
        raise FunctError()
    return op


def _immediate_op(opcode: str, funct3: str, funct7: str) -> IOp:
    if opcode == OPCODE_JALR:
        return IOp.JALR
    if opcode == OPCODE_LOAD:
        return _lookup(LOAD_FUNCTS, funct3)
    if funct3 in OP_IMM_FUNCTS:
        return OP_IMM_FUNCTS[funct3]
    return _lookup(OP_IMM_SHIFT_FUNCTS, (funct3, funct7))


def decode(text: str, sign_extend: bool = False) -> Instruction:
    """Decode one 32-character instruction string.

    Args:
        text: '0'/'1' digits, bit 31 first.
        sign_extend: sign-extend immediates from their format width
            instead of keeping the plain base-2 magnitude.

    Raises:
        DecodeError subclass describing the first problem found.
    """
    if len(text) != INSTRUCTION_WIDTH:
        raise FormatError()

    opcode = bits(text, 6, 0)
    funct3 = bits(text, 14, 12)
    funct7 = bits(text, 31, 25)

    if opcode == OPCODE_OP:
        rd, rs1, rs2 = _rd(text), _rs1(text), _rs2(text)
        op = _lookup(R_FUNCTS, (funct3, funct7))
        return RegisterInstruction(op, rd, rs1, rs2)

    if opcode in IMMEDIATE_OPCODES:
        rd, rs1 = _rd(text), _rs1(text)
        imm = _immediate(text, 'I', sign_extend)
        op = _immediate_op(opcode, funct3, funct7)
        return ImmediateInstruction(op, rd, rs1, imm)

    if opcode == OPCODE_STORE:
        rs1, rs2 = _rs1(text), _rs2(text)
        imm = _immediate(text, 'S', sign_extend)
        op = _lookup(STORE_FUNCTS, funct3)
        return StoreInstruction(op, rs1, rs2, imm)

    if opcode == OPCODE_BRANCH:
        rs1, rs2 = _rs1(text), _rs2(text)
        imm = _immediate(text, 'B', sign_extend)
        op = _lookup(BRANCH_FUNCTS, funct3)
        return BranchInstruction(op, rs1, rs2, imm)

    if opcode == OPCODE_JAL:
        rd = _rd(text)
        imm = _immediate(text, 'J', sign_extend)
        return JumpInstruction(JOp.JAL, rd, imm)

    if opcode in UPPER_OPCODES:
        rd = _rd(text)
        imm = _immediate(text, 'U', sign_extend)
        return UpperImmediateInstruction(UPPER_OPCODES[opcode], rd, imm)

    raise OpcodeError()

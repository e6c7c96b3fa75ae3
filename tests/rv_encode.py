"""
Test-side RV32I encoder: operand fields → 32-character bit string.

Only used to build fixtures; the project itself ships no assembler.
Immediates are masked to their field width, so negative offsets encode
as two's complement bit patterns.
"""

OP = 0b0110011
OP_IMM = 0b0010011
LOAD = 0b0000011
JALR = 0b1100111
STORE = 0b0100011
BRANCH = 0b1100011
LUI = 0b0110111
AUIPC = 0b0010111
JAL = 0b1101111


def _bin(value: int, width: int) -> str:
    return format(value & ((1 << width) - 1), f'0{width}b')


def r_type(funct7: int, rs2: int, rs1: int, funct3: int, rd: int, opcode: int = OP) -> str:
    return (_bin(funct7, 7) + _bin(rs2, 5) + _bin(rs1, 5) +
            _bin(funct3, 3) + _bin(rd, 5) + _bin(opcode, 7))


def i_type(imm: int, rs1: int, funct3: int, rd: int, opcode: int = OP_IMM) -> str:
    return _bin(imm, 12) + _bin(rs1, 5) + _bin(funct3, 3) + _bin(rd, 5) + _bin(opcode, 7)


def s_type(imm: int, rs2: int, rs1: int, funct3: int) -> str:
    return (_bin(imm >> 5, 7) + _bin(rs2, 5) + _bin(rs1, 5) +
            _bin(funct3, 3) + _bin(imm, 5) + _bin(STORE, 7))


def b_type(imm: int, rs2: int, rs1: int, funct3: int) -> str:
    return (_bin(imm >> 12, 1) + _bin(imm >> 5, 6) + _bin(rs2, 5) + _bin(rs1, 5) +
            _bin(funct3, 3) + _bin(imm >> 1, 4) + _bin(imm >> 11, 1) + _bin(BRANCH, 7))


def u_type(imm: int, rd: int, opcode: int = LUI) -> str:
    return _bin(imm, 20) + _bin(rd, 5) + _bin(opcode, 7)


def j_type(imm: int, rd: int) -> str:
    return (_bin(imm >> 20, 1) + _bin(imm >> 1, 10) + _bin(imm >> 11, 1) +
            _bin(imm >> 12, 8) + _bin(rd, 5) + _bin(JAL, 7))


# ── Mnemonic shorthands used across the tests ──

def add(rd, rs1, rs2):
    return r_type(0, rs2, rs1, 0b000, rd)


def sub(rd, rs1, rs2):
    return r_type(0b0100000, rs2, rs1, 0b000, rd)


def addi(rd, rs1, imm):
    return i_type(imm, rs1, 0b000, rd)


def lw(rd, rs1, imm):
    return i_type(imm, rs1, 0b010, rd, LOAD)


def sw(rs2, rs1, imm):
    return s_type(imm, rs2, rs1, 0b010)


def beq(rs1, rs2, imm):
    return b_type(imm, rs2, rs1, 0b000)


def bne(rs1, rs2, imm):
    return b_type(imm, rs2, rs1, 0b001)


def jal(rd, imm):
    return j_type(imm, rd)


def jalr(rd, rs1, imm):
    return i_type(imm, rs1, 0b000, rd, JALR)


def lui(rd, imm):
    return u_type(imm, rd, LUI)


def auipc(rd, imm):
    return u_type(imm, rd, AUIPC)

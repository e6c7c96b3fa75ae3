"""
RV32I Emulator — 32-bit ALU primitives

Registers and memory words hold signed 32-bit integers. Python ints are
unbounded, so every result is folded back into range with to_signed32().

Shift amounts use the low 5 bits of the operand, matching the hardware
shifter (for SRAI the funct7 bits sit in the immediate and are dropped
here).

Comparison ops return 1 or 0. The *u variants compare the unsigned
reinterpretation of both operands.
"""

MASK32 = 0xFFFFFFFF
SIGN32 = 0x80000000
SHAMT_MASK = 0x1F


# ══════════════════════════════════════════════
# Width conversion
# ══════════════════════════════════════════════

def to_signed32(value: int) -> int:
    """Wrap any int into signed 32-bit two's complement."""
    value &= MASK32
    return value - (1 << 32) if value & SIGN32 else value


def to_unsigned32(value: int) -> int:
    """Reinterpret a signed 32-bit value as unsigned."""
    return value & MASK32


def sign_extend(value: int, bits: int) -> int:
    """Sign-extend the low `bits` bits of value.

    >>> sign_extend(0xFFF, 12)
    -1
    >>> sign_extend(0x7FF, 12)
    2047
    """
    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        value -= 1 << bits
    return value


def zero_extend(value: int, bits: int) -> int:
    return value & ((1 << bits) - 1)


# ══════════════════════════════════════════════
# Arithmetic / logic : (a, b) -> signed 32-bit result
# ══════════════════════════════════════════════

def add(a: int, b: int) -> int:
    return to_signed32(a + b)


def sub(a: int, b: int) -> int:
    return to_signed32(a - b)


def xor(a: int, b: int) -> int:
    return to_signed32(a ^ b)


def or_(a: int, b: int) -> int:
    return to_signed32(a | b)


def and_(a: int, b: int) -> int:
    return to_signed32(a & b)


def sll(a: int, b: int) -> int:
    """Logical left shift."""
    return to_signed32(a << (b & SHAMT_MASK))


def srl(a: int, b: int) -> int:
    """Logical right shift: zero-fill over the unsigned value."""
    return to_signed32(to_unsigned32(a) >> (b & SHAMT_MASK))


def sra(a: int, b: int) -> int:
    """Arithmetic right shift: the sign bit is replicated."""
    return to_signed32(to_signed32(a) >> (b & SHAMT_MASK))


def slt(a: int, b: int) -> int:
    return 1 if to_signed32(a) < to_signed32(b) else 0


def sltu(a: int, b: int) -> int:
    return 1 if to_unsigned32(a) < to_unsigned32(b) else 0


# ══════════════════════════════════════════════
# Branch predicates : (a, b) -> bool
# ══════════════════════════════════════════════

def eq(a: int, b: int) -> bool:
    return to_signed32(a) == to_signed32(b)


def ne(a: int, b: int) -> bool:
    return to_signed32(a) != to_signed32(b)


def lt(a: int, b: int) -> bool:
    return to_signed32(a) < to_signed32(b)


def ge(a: int, b: int) -> bool:
    return to_signed32(a) >= to_signed32(b)


def ltu(a: int, b: int) -> bool:
    return to_unsigned32(a) < to_unsigned32(b)


def geu(a: int, b: int) -> bool:
    return to_unsigned32(a) >= to_unsigned32(b)


# ══════════════════════════════════════════════
# Memory helpers
# ══════════════════════════════════════════════

def load_byte(word: int) -> int:
    """LB: low 8 bits, sign-extended."""
    return sign_extend(word, 8)


def load_half(word: int) -> int:
    """LH: low 16 bits, sign-extended."""
    return sign_extend(word, 16)


def load_byte_unsigned(word: int) -> int:
    """LBU: low 8 bits, zero-extended."""
    return zero_extend(word, 8)


def load_half_unsigned(word: int) -> int:
    """LHU: low 16 bits, zero-extended."""
    return zero_extend(word, 16)


def load_word(word: int) -> int:
    return to_signed32(word)


def merge_low(old: int, value: int, bits: int) -> int:
    """Replace the low `bits` bits of old with those of value.

    Used by SB/SH: the remaining high bits of the slot are kept.
    """
    mask = (1 << bits) - 1
    return to_signed32((old & ~mask) | (value & mask))


def upper(imm: int) -> int:
    """LUI/AUIPC operand: imm << 12 folded to 32 bits."""
    return to_signed32(imm << 12)

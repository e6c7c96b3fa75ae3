"""
ALU primitive tests — 32-bit wrapping, shifts, compares, load/store widths.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from rv32i_emulator import alu


class TestWidthConversion:
    def test_to_signed32_wraps(self):
        assert alu.to_signed32(0x7FFFFFFF) == 2147483647
        assert alu.to_signed32(0x80000000) == -2147483648
        assert alu.to_signed32(0xFFFFFFFF) == -1
        assert alu.to_signed32(1 << 32) == 0

    def test_mask_constant(self):
        assert alu.MASK32 == 0xFFFFFFFF == (1 << 32) - 1

    def test_to_unsigned32(self):
        assert alu.to_unsigned32(-1) == 0xFFFFFFFF
        assert alu.to_unsigned32(5) == 5

    @pytest.mark.parametrize("value, bits, expected", [
        (0xFFF, 12, -1),
        (0x7FF, 12, 2047),
        (0x800, 12, -2048),
        (0x1FF8, 13, -8),
        (0x80, 8, -128),
        (0x17F, 8, 127),     # only the low bits count
    ])
    def test_sign_extend(self, value, bits, expected):
        assert alu.sign_extend(value, bits) == expected

    def test_zero_extend(self):
        assert alu.zero_extend(-1, 8) == 0xFF
        assert alu.zero_extend(0x12345, 16) == 0x2345


class TestArithmetic:
    def test_add_wraps(self):
        assert alu.add(0x7FFFFFFF, 1) == -2147483648
        assert alu.add(-1, 1) == 0

    def test_sub_wraps(self):
        assert alu.sub(-2147483648, 1) == 2147483647
        assert alu.sub(7, 8) == -1

    def test_logic(self):
        assert alu.xor(7, 8) == 15
        assert alu.or_(7, 8) == 15
        assert alu.and_(7, 8) == 0
        assert alu.and_(-1, 0xFF) == 0xFF

    def test_shift_left(self):
        assert alu.sll(1, 4) == 16
        assert alu.sll(1, 31) == -2147483648
        assert alu.sll(1, 33) == 2          # only the low 5 bits count

    def test_shift_right_logical_zero_fills(self):
        assert alu.srl(-16, 2) == 0x3FFFFFFC
        assert alu.srl(-1, 31) == 1

    def test_shift_right_arithmetic_keeps_sign(self):
        assert alu.sra(-16, 2) == -4
        assert alu.sra(16, 2) == 4
        assert alu.sra(-16, 0x400 | 2) == -4   # SRAI funct7 bits are ignored

    def test_set_less_than(self):
        assert alu.slt(-1, 1) == 1
        assert alu.slt(1, -1) == 0
        assert alu.sltu(-1, 1) == 0
        assert alu.sltu(1, -1) == 1
        assert alu.slt(3, 3) == 0


class TestBranchPredicates:
    def test_signed_vs_unsigned(self):
        assert alu.lt(-1, 0)
        assert not alu.ltu(-1, 0)
        assert alu.geu(-1, 0)
        assert not alu.ge(-1, 0)

    def test_equality(self):
        assert alu.eq(8, 8)
        assert alu.ne(8, 9)
        assert alu.eq(0xFFFFFFFF, -1)


class TestMemoryHelpers:
    def test_loads(self):
        assert alu.load_byte(0x80) == -128
        assert alu.load_byte_unsigned(0x80) == 128
        assert alu.load_half(0x8000) == -32768
        assert alu.load_half_unsigned(0x8000) == 32768
        assert alu.load_byte(2047) == -1
        assert alu.load_half(2047) == 2047
        assert alu.load_word(-5) == -5

    def test_merge_low_keeps_high_bits(self):
        assert alu.merge_low(0x12345678, 0xAB, 8) == 0x123456AB
        assert alu.merge_low(0x12345678, 0xFFFFABCD, 16) == 0x1234ABCD
        assert alu.merge_low(-1, 0, 8) == -256

    def test_upper(self):
        assert alu.upper(0x12345) == 0x12345000
        assert alu.upper(0xFFFFF) == -4096
        assert alu.upper(1) == 4096

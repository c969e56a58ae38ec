"""Tests for field extraction and per-format immediate reconstruction."""

from riscv_decode import fields
from riscv_decode.fields import (
    b_immediate,
    i_immediate,
    j_immediate,
    s_immediate,
    sign_extend,
    to_signed,
    u_immediate,
)


# ---------- sign_extend tests ----------

class TestSignExtend:
    def test_positive_12bit(self) -> None:
        """12-bit value 0x7FF (max positive) stays positive."""
        assert sign_extend(0x7FF, 12) == 0x000007FF

    def test_negative_12bit(self) -> None:
        """12-bit value 0x800 (MSB set) sign-extends to 0xFFFFF800."""
        assert sign_extend(0x800, 12) == 0xFFFFF800

    def test_negative_12bit_all_ones(self) -> None:
        """12-bit value 0xFFF (-1) sign-extends to 0xFFFFFFFF."""
        assert sign_extend(0xFFF, 12) == 0xFFFFFFFF

    def test_negative_13bit(self) -> None:
        assert sign_extend(0x1000, 13) == 0xFFFFF000

    def test_positive_21bit(self) -> None:
        assert sign_extend(0x0FFFFF, 21) == 0x0FFFFF

    def test_negative_21bit(self) -> None:
        assert sign_extend(0x100000, 21) == 0xFFF00000

    def test_ignores_bits_above_width(self) -> None:
        """Bits above the field width do not leak into the result."""
        assert sign_extend(0xF07F, 12) == 0x7F

    def test_one_bit_field(self) -> None:
        assert sign_extend(0x1, 1) == 0xFFFFFFFF
        assert sign_extend(0x9, 4) == 0xFFFFFFF9
        assert sign_extend(0x9, 5) == 0x00000009

    def test_zero(self) -> None:
        assert sign_extend(0, 12) == 0


class TestToSigned:
    def test_positive(self) -> None:
        assert to_signed(42) == 42

    def test_min_negative(self) -> None:
        assert to_signed(0x80000000) == -2147483648

    def test_minus_one(self) -> None:
        assert to_signed(0xFFFFFFFF) == -1


# ---------- Fixed fields ----------

class TestFields:
    def test_r_type_fields(self) -> None:
        """SUB x5, x6, x7: every fixed field lands in its own slot."""
        word = (0b0100000 << 25) | (7 << 20) | (6 << 15) | (0b000 << 12) | (5 << 7) | 0x33
        assert fields.opcode(word) == 0x33
        assert fields.rd(word) == 5
        assert fields.funct3(word) == 0
        assert fields.rs1(word) == 6
        assert fields.rs2(word) == 7
        assert fields.funct7(word) == 0b0100000

    def test_all_ones_word(self) -> None:
        word = 0xFFFFFFFF
        assert fields.opcode(word) == 0x7F
        assert fields.rd(word) == 31
        assert fields.rs1(word) == 31
        assert fields.rs2(word) == 31
        assert fields.funct3(word) == 0b111
        assert fields.funct7(word) == 0x7F
        assert fields.shamt(word) == 31
        assert fields.zimm(word) == 31

    def test_csr_is_unsigned(self) -> None:
        """csr is the top 12 bits with no sign extension."""
        assert fields.csr(0xFFF00073) == 0xFFF
        assert fields.csr(0x30200073) == 0x302


# ---------- Immediates ----------

def _encode_b(imm13: int) -> int:
    imm = imm13 & 0x1FFF
    return (((imm >> 12) & 1) << 31) | (((imm >> 5) & 0x3F) << 25) | \
           (((imm >> 1) & 0xF) << 8) | (((imm >> 11) & 1) << 7) | 0x63


def _encode_j(imm21: int) -> int:
    imm = imm21 & 0x1FFFFF
    return (((imm >> 20) & 1) << 31) | (((imm >> 1) & 0x3FF) << 21) | \
           (((imm >> 11) & 1) << 20) | (((imm >> 12) & 0xFF) << 12) | 0x6F


class TestIImmediate:
    def test_max_positive(self) -> None:
        assert i_immediate(0x7FF00013) == 2047

    def test_min_negative(self) -> None:
        assert i_immediate(0x80000013) == -2048

    def test_minus_one(self) -> None:
        assert i_immediate(0xFFF00013) == -1


class TestSImmediate:
    def test_split_fields(self) -> None:
        """imm[11:5] from bits 31:25, imm[4:0] from bits 11:7."""
        word = (0b0000001 << 25) | (0b00011 << 7) | 0x23
        assert s_immediate(word) == 0b0000001_00011

    def test_negative(self) -> None:
        """-4 = 0xFFC: hi = 0x7F, lo = 0x1C"""
        word = (0x7F << 25) | (0x1C << 7) | 0x23
        assert s_immediate(word) == -4

    def test_ignores_register_fields(self) -> None:
        word = (31 << 20) | (31 << 15) | (0b111 << 12) | 0x23
        assert s_immediate(word) == 0


class TestBImmediate:
    def test_only_sign_bit(self) -> None:
        """Only bit 31 set among immediate bits: most negative offset."""
        assert b_immediate(0x80000063) == -4096

    def test_bit7_is_imm11(self) -> None:
        assert b_immediate(1 << 7 | 0x63) == 2048

    def test_bits_11_8_are_imm4_1(self) -> None:
        assert b_immediate(0xF << 8 | 0x63) == 0b11110

    def test_bits_30_25_are_imm10_5(self) -> None:
        assert b_immediate(0x3F << 25 | 0x63) == 0x7E0

    def test_max_positive(self) -> None:
        assert b_immediate(_encode_b(4094)) == 4094

    def test_negative(self) -> None:
        assert b_immediate(_encode_b(-16)) == -16

    def test_always_even(self) -> None:
        assert b_immediate(0xFFFFFFFF) % 2 == 0
        assert b_immediate(0xFFFFFFFF) == -2


class TestUImmediate:
    def test_low_bits_cleared(self) -> None:
        assert u_immediate(0xDEADBFFF) == 0xDEADB000

    def test_top_bit_stays_unsigned(self) -> None:
        assert u_immediate(0xFFFFF037) == 0xFFFFF000


class TestJImmediate:
    def test_only_sign_bit(self) -> None:
        """Only bit 31 set: most negative jump offset."""
        assert j_immediate(0x8000006F) == -(1 << 20)

    def test_bit20_is_imm11(self) -> None:
        assert j_immediate(1 << 20 | 0x6F) == 2048

    def test_bits_19_12_stay_in_place(self) -> None:
        assert j_immediate(0xFF << 12 | 0x6F) == 0xFF000

    def test_max_positive(self) -> None:
        assert j_immediate(0x7FFFF06F) == 1048574

    def test_round_values(self) -> None:
        assert j_immediate(_encode_j(100)) == 100
        assert j_immediate(_encode_j(-20)) == -20

    def test_always_even(self) -> None:
        assert j_immediate(0xFFFFFFFF) == -2

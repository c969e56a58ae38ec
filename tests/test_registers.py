"""Tests for the register table."""

import pytest

from riscv_decode.errors import DecodeError, InvalidRegister
from riscv_decode.registers import Register, list_from_bitmask, resolve, to_index

# RISC-V ABI register names (x0-x31)
ABI_NAMES: list[str] = [
    "zero", "ra", "sp", "gp", "tp",
    "t0", "t1", "t2",
    "s0", "s1",
    "a0", "a1", "a2", "a3", "a4", "a5", "a6", "a7",
    "s2", "s3", "s4", "s5", "s6", "s7", "s8", "s9", "s10", "s11",
    "t3", "t4", "t5", "t6",
]


class TestResolve:
    def test_round_trip(self) -> None:
        """to_index(resolve(i)) == i for every 5-bit index."""
        for i in range(32):
            assert to_index(resolve(i)) == i

    def test_abi_names(self) -> None:
        for i, name in enumerate(ABI_NAMES):
            assert resolve(i).abi_name == name

    def test_x_names(self) -> None:
        assert resolve(0).x_name == "x0"
        assert resolve(31).x_name == "x31"

    def test_named_values(self) -> None:
        assert resolve(0) is Register.ZERO
        assert resolve(2) is Register.SP
        assert resolve(10) is Register.A0
        assert resolve(16) is Register.A6
        assert resolve(31) is Register.T6

    @pytest.mark.parametrize("value", [-1, 32, 255, 1 << 20])
    def test_out_of_range(self, value: int) -> None:
        """Indices outside 0-31 are rejected with the raw value attached."""
        with pytest.raises(InvalidRegister) as exc_info:
            resolve(value)
        assert exc_info.value.value == value
        assert isinstance(exc_info.value, DecodeError)
        assert str(value) in str(exc_info.value)


class TestListFromBitmask:
    def test_empty(self) -> None:
        assert list_from_bitmask(0) == []

    def test_single_low_bit(self) -> None:
        assert list_from_bitmask(0b1) == [Register.ZERO]

    def test_low_three(self) -> None:
        assert list_from_bitmask(0b111) == [Register.ZERO, Register.RA, Register.SP]

    def test_single_high_bit(self) -> None:
        assert list_from_bitmask(0b1000000000000000) == [Register.A5]

    def test_contiguous_run(self) -> None:
        assert list_from_bitmask(0b1110000000000000) == [
            Register.A3, Register.A4, Register.A5,
        ]

    def test_low_half(self) -> None:
        assert list_from_bitmask(0xFFFF) == [resolve(i) for i in range(16)]

    def test_all_registers_ascending(self) -> None:
        assert list_from_bitmask(0xFFFFFFFF) == list(Register)

    def test_sparse_mask_keeps_order(self) -> None:
        mask = (1 << 31) | (1 << 10) | (1 << 1)
        assert list_from_bitmask(mask) == [Register.RA, Register.A0, Register.T6]

    def test_bits_above_31_ignored(self) -> None:
        assert list_from_bitmask(1 << 32) == []
        assert list_from_bitmask((1 << 40) | 1) == [Register.ZERO]

"""Register table: maps 5-bit register indices to named integer registers."""

from __future__ import annotations

from enum import IntEnum

from .errors import InvalidRegister


class Register(IntEnum):
    """The 32 RV32I integer registers, named by their ABI names."""

    ZERO = 0
    RA = 1
    SP = 2
    GP = 3
    TP = 4
    T0 = 5
    T1 = 6
    T2 = 7
    S0 = 8
    S1 = 9
    A0 = 10
    A1 = 11
    A2 = 12
    A3 = 13
    A4 = 14
    A5 = 15
    A6 = 16
    A7 = 17
    S2 = 18
    S3 = 19
    S4 = 20
    S5 = 21
    S6 = 22
    S7 = 23
    S8 = 24
    S9 = 25
    S10 = 26
    S11 = 27
    T3 = 28
    T4 = 29
    T5 = 30
    T6 = 31

    @property
    def abi_name(self) -> str:
        """Lowercase ABI name, e.g. "zero", "sp", "a0"."""
        return self.name.lower()

    @property
    def x_name(self) -> str:
        """Architectural name, e.g. "x0", "x2", "x10"."""
        return f"x{self.value}"


_BY_INDEX: tuple[Register, ...] = tuple(Register)


def resolve(index: int) -> Register:
    """Return the register for a 5-bit index.

    Raises:
        InvalidRegister: If ``index`` is outside 0-31.
    """
    if not 0 <= index < 32:
        raise InvalidRegister(index)
    return _BY_INDEX[index]


def to_index(register: Register) -> int:
    """Return the 5-bit index of ``register``."""
    return int(register)


def list_from_bitmask(mask: int) -> list[Register]:
    """Registers whose bit is set in ``mask``, in ascending index order.

    Only bits 0-31 are considered.
    """
    return [reg for reg in _BY_INDEX if (mask >> reg) & 1]

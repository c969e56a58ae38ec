"""Decoded instruction model: Instruction and the closed set of Operation variants.

Each RV32I/Zicsr mnemonic is a frozen dataclass carrying exactly the
operands meaningful to it. Registers are ``Register`` values; immediates
are stored already sign-extended (see the per-variant notes below).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union, get_args

from .registers import Register


class InstructionWidth(Enum):
    """Width of the binary encoding. Only 32-bit words are decoded."""

    BIT32 = 32


def _signed16(value: int) -> int:
    return value - 0x10000 if value & 0x8000 else value


# ---------------------------------------------------------------------------
# U-type / jumps
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LUI:
    """imm is the unsigned upper immediate with bits 11:0 zero."""

    rd: Register
    imm: int


@dataclass(frozen=True)
class AUIPC:
    """imm is the unsigned upper immediate with bits 11:0 zero."""

    rd: Register
    imm: int


@dataclass(frozen=True)
class JAL:
    """imm is a signed, even byte offset in [-2**20, 2**20)."""

    rd: Register
    imm: int


@dataclass(frozen=True)
class JALR:
    rd: Register
    rs1: Register
    imm: int


# ---------------------------------------------------------------------------
# Branches: imm is a signed, even byte offset in [-4096, 4096)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BEQ:
    rs1: Register
    rs2: Register
    imm: int


@dataclass(frozen=True)
class BNE:
    rs1: Register
    rs2: Register
    imm: int


@dataclass(frozen=True)
class BLT:
    rs1: Register
    rs2: Register
    imm: int


@dataclass(frozen=True)
class BGE:
    rs1: Register
    rs2: Register
    imm: int


@dataclass(frozen=True)
class BLTU:
    rs1: Register
    rs2: Register
    imm: int


@dataclass(frozen=True)
class BGEU:
    rs1: Register
    rs2: Register
    imm: int


# ---------------------------------------------------------------------------
# Loads: imm is the sign-extended 12-bit offset held in a 16-bit unsigned
# container (e.g. -4 is stored as 0xFFFC); `offset` gives the signed value.
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LB:
    rd: Register
    rs1: Register
    imm: int

    @property
    def offset(self) -> int:
        return _signed16(self.imm)


@dataclass(frozen=True)
class LH:
    rd: Register
    rs1: Register
    imm: int

    @property
    def offset(self) -> int:
        return _signed16(self.imm)


@dataclass(frozen=True)
class LW:
    rd: Register
    rs1: Register
    imm: int

    @property
    def offset(self) -> int:
        return _signed16(self.imm)


@dataclass(frozen=True)
class LBU:
    rd: Register
    rs1: Register
    imm: int

    @property
    def offset(self) -> int:
        return _signed16(self.imm)


@dataclass(frozen=True)
class LHU:
    rd: Register
    rs1: Register
    imm: int

    @property
    def offset(self) -> int:
        return _signed16(self.imm)


# ---------------------------------------------------------------------------
# Stores: imm is a signed 12-bit offset
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SB:
    rs1: Register
    rs2: Register
    imm: int


@dataclass(frozen=True)
class SH:
    rs1: Register
    rs2: Register
    imm: int


@dataclass(frozen=True)
class SW:
    rs1: Register
    rs2: Register
    imm: int


# ---------------------------------------------------------------------------
# Register-immediate arithmetic: imm is signed 12-bit, shamt unsigned 5-bit
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ADDI:
    rd: Register
    rs1: Register
    imm: int


@dataclass(frozen=True)
class SLTI:
    rd: Register
    rs1: Register
    imm: int


@dataclass(frozen=True)
class SLTIU:
    rd: Register
    rs1: Register
    imm: int


@dataclass(frozen=True)
class XORI:
    rd: Register
    rs1: Register
    imm: int


@dataclass(frozen=True)
class ORI:
    rd: Register
    rs1: Register
    imm: int


@dataclass(frozen=True)
class ANDI:
    rd: Register
    rs1: Register
    imm: int


@dataclass(frozen=True)
class SLLI:
    rd: Register
    rs1: Register
    shamt: int


@dataclass(frozen=True)
class SRLI:
    rd: Register
    rs1: Register
    shamt: int


@dataclass(frozen=True)
class SRAI:
    rd: Register
    rs1: Register
    shamt: int


# ---------------------------------------------------------------------------
# Register-register arithmetic
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ADD:
    rd: Register
    rs1: Register
    rs2: Register


@dataclass(frozen=True)
class SUB:
    rd: Register
    rs1: Register
    rs2: Register


@dataclass(frozen=True)
class SLL:
    rd: Register
    rs1: Register
    rs2: Register


@dataclass(frozen=True)
class SLT:
    rd: Register
    rs1: Register
    rs2: Register


@dataclass(frozen=True)
class SLTU:
    rd: Register
    rs1: Register
    rs2: Register


@dataclass(frozen=True)
class XOR:
    rd: Register
    rs1: Register
    rs2: Register


@dataclass(frozen=True)
class SRL:
    rd: Register
    rs1: Register
    rs2: Register


@dataclass(frozen=True)
class SRA:
    rd: Register
    rs1: Register
    rs2: Register


@dataclass(frozen=True)
class OR:
    rd: Register
    rs1: Register
    rs2: Register


@dataclass(frozen=True)
class AND:
    rd: Register
    rs1: Register
    rs2: Register


# ---------------------------------------------------------------------------
# Zero-operand markers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FENCE:
    pass


@dataclass(frozen=True)
class FENCE_I:
    pass


@dataclass(frozen=True)
class ECALL:
    pass


@dataclass(frozen=True)
class EBREAK:
    pass


@dataclass(frozen=True)
class MRET:
    pass


# ---------------------------------------------------------------------------
# CSR access: csr is the unsigned 12-bit index, zimm an unsigned 5-bit value
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CSRRW:
    rd: Register
    rs1: Register
    csr: int


@dataclass(frozen=True)
class CSRRS:
    rd: Register
    rs1: Register
    csr: int


@dataclass(frozen=True)
class CSRRC:
    rd: Register
    rs1: Register
    csr: int


@dataclass(frozen=True)
class CSRRWI:
    rd: Register
    zimm: int
    csr: int


@dataclass(frozen=True)
class CSRRSI:
    rd: Register
    zimm: int
    csr: int


@dataclass(frozen=True)
class CSRRCI:
    rd: Register
    zimm: int
    csr: int


Operation = Union[
    LUI, AUIPC, JAL, JALR,
    BEQ, BNE, BLT, BGE, BLTU, BGEU,
    LB, LH, LW, LBU, LHU,
    SB, SH, SW,
    ADDI, SLTI, SLTIU, XORI, ORI, ANDI, SLLI, SRLI, SRAI,
    ADD, SUB, SLL, SLT, SLTU, XOR, SRL, SRA, OR, AND,
    FENCE, FENCE_I, ECALL, EBREAK, MRET,
    CSRRW, CSRRS, CSRRC, CSRRWI, CSRRSI, CSRRCI,
]

OPERATIONS: tuple[type, ...] = get_args(Operation)


def mnemonic(operation: Operation) -> str:
    """Return the assembler mnemonic of an operation, e.g. "FENCE.I"."""
    return type(operation).__name__.replace("_", ".")


@dataclass(frozen=True)
class Instruction:
    """Decoded RISC-V instruction: encoding width plus operation."""

    width: InstructionWidth
    operation: Operation

    def is_32bit(self) -> bool:
        return self.width is InstructionWidth.BIT32

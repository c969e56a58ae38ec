"""Decode errors: one exception type per invalid encoding field."""

from __future__ import annotations


class DecodeError(ValueError):
    """Base class for all instruction decode failures.

    Subclasses carry the raw field values that caused the rejection.
    ``decode`` attaches the offending instruction word as ``word`` before
    re-raising, so callers can report the failing address and encoding.
    """

    def __init__(self) -> None:
        super().__init__()
        self.word: int | None = None

    def describe(self) -> str:
        """Human-readable description of the invalid field."""
        return "Invalid instruction encoding"

    def __str__(self) -> str:
        text = self.describe()
        if self.word is not None:
            text += f" (word=0x{self.word:08X})"
        return text


class UnrecognizedOpcode(DecodeError):
    """The 7-bit opcode matches none of the supported instruction classes."""

    def __init__(self, opcode: int) -> None:
        super().__init__()
        self.opcode = opcode

    def describe(self) -> str:
        return f"Unrecognized opcode: 0b{self.opcode:07b}"


class InvalidFunct3(DecodeError):
    """funct3 does not name an instruction within the opcode's class."""

    def __init__(self, opcode: int, funct3: int) -> None:
        super().__init__()
        self.opcode = opcode
        self.funct3 = funct3

    def describe(self) -> str:
        return (f"Invalid funct3 0b{self.funct3:03b} "
                f"for opcode 0b{self.opcode:07b}")


class InvalidFunct7(DecodeError):
    """funct7 does not disambiguate a valid instruction for this funct3."""

    def __init__(self, funct3: int, funct7: int) -> None:
        super().__init__()
        self.funct3 = funct3
        self.funct7 = funct7

    def describe(self) -> str:
        return (f"Invalid funct7 0b{self.funct7:07b} "
                f"for funct3 0b{self.funct3:03b}")


class InvalidFunct12(DecodeError):
    """A SYSTEM word with funct3=0 that is not ECALL, EBREAK or MRET."""

    def __init__(self, funct3: int, funct12: int) -> None:
        super().__init__()
        self.funct3 = funct3
        self.funct12 = funct12

    def describe(self) -> str:
        return (f"Invalid funct12 0x{self.funct12:03X} "
                f"for funct3 0b{self.funct3:03b}")


class InvalidSystemOperands(DecodeError):
    """ECALL, EBREAK or MRET funct12 with nonzero rd or rs1 fields."""

    def __init__(self, funct12: int, rd: int, rs1: int) -> None:
        super().__init__()
        self.funct12 = funct12
        self.rd = rd
        self.rs1 = rs1

    def describe(self) -> str:
        return (f"Nonzero operand fields rd={self.rd} rs1={self.rs1} "
                f"for funct12 0x{self.funct12:03X}")


class InvalidRegister(DecodeError):
    """A register field resolved to an index outside 0-31."""

    def __init__(self, value: int) -> None:
        super().__init__()
        self.value = value

    def describe(self) -> str:
        return f"Invalid register index: {self.value}"

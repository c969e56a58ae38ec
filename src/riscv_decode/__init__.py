"""RV32I + Zicsr instruction decoder."""

from .decode import DecodedWord, decode, decode_bytes, decode_stream
from .errors import (
    DecodeError,
    InvalidFunct3,
    InvalidFunct7,
    InvalidFunct12,
    InvalidRegister,
    InvalidSystemOperands,
    UnrecognizedOpcode,
)
from .instruction import OPERATIONS, Instruction, InstructionWidth, Operation, mnemonic
from .registers import Register, list_from_bitmask, resolve, to_index

__all__ = [
    "DecodeError",
    "DecodedWord",
    "Instruction",
    "InstructionWidth",
    "InvalidFunct12",
    "InvalidFunct3",
    "InvalidFunct7",
    "InvalidRegister",
    "InvalidSystemOperands",
    "OPERATIONS",
    "Operation",
    "Register",
    "UnrecognizedOpcode",
    "decode",
    "decode_bytes",
    "decode_stream",
    "list_from_bitmask",
    "mnemonic",
    "resolve",
    "to_index",
]

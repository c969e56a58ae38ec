"""Instruction decoder: dispatches on opcode and builds Operation variants."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from . import fields
from .errors import (
    DecodeError,
    InvalidFunct3,
    InvalidFunct7,
    InvalidFunct12,
    InvalidSystemOperands,
    UnrecognizedOpcode,
)
from .instruction import (
    ADD, ADDI, AND, ANDI, AUIPC, BEQ, BGE, BGEU, BLT, BLTU, BNE,
    CSRRC, CSRRCI, CSRRS, CSRRSI, CSRRW, CSRRWI, EBREAK, ECALL, FENCE,
    FENCE_I, JAL, JALR, LB, LBU, LH, LHU, LUI, LW, MRET, OR, ORI, SB, SH,
    SLL, SLLI, SLT, SLTI, SLTIU, SLTU, SRA, SRAI, SRL, SRLI, SUB, SW, XOR,
    XORI, Instruction, InstructionWidth, Operation,
)
from .registers import Register, resolve

# Opcode constants
OP_R_TYPE = 0x33
OP_I_ARITH = 0x13
OP_LOAD = 0x03
OP_STORE = 0x23
OP_BRANCH = 0x63
OP_LUI = 0x37
OP_AUIPC = 0x17
OP_JAL = 0x6F
OP_JALR = 0x67
OP_SYSTEM = 0x73
OP_FENCE = 0x0F

# Fixed SYSTEM encodings
WORD_ECALL = 0x00000073
WORD_EBREAK = 0x00100073
WORD_MRET = 0x30200073

_FUNCT7_BASE = 0b0000000
_FUNCT7_ALT = 0b0100000  # SUB / SRA / SRAI

# R-type: (funct3, funct7) -> variant
_R_VARIANTS: dict[tuple[int, int], type] = {
    (0b000, _FUNCT7_BASE): ADD,
    (0b000, _FUNCT7_ALT): SUB,
    (0b001, _FUNCT7_BASE): SLL,
    (0b010, _FUNCT7_BASE): SLT,
    (0b011, _FUNCT7_BASE): SLTU,
    (0b100, _FUNCT7_BASE): XOR,
    (0b101, _FUNCT7_BASE): SRL,
    (0b101, _FUNCT7_ALT): SRA,
    (0b110, _FUNCT7_BASE): OR,
    (0b111, _FUNCT7_BASE): AND,
}

# I-type arithmetic (non-shift): funct3 -> variant
_I_VARIANTS: dict[int, type] = {
    0b000: ADDI, 0b010: SLTI, 0b011: SLTIU,
    0b100: XORI, 0b110: ORI, 0b111: ANDI,
}

# Shift-immediate: (funct3, funct7) -> variant
_SHIFT_VARIANTS: dict[tuple[int, int], type] = {
    (0b001, _FUNCT7_BASE): SLLI,
    (0b101, _FUNCT7_BASE): SRLI,
    (0b101, _FUNCT7_ALT): SRAI,
}

_LOAD_VARIANTS: dict[int, type] = {
    0b000: LB, 0b001: LH, 0b010: LW, 0b100: LBU, 0b101: LHU,
}

_STORE_VARIANTS: dict[int, type] = {
    0b000: SB, 0b001: SH, 0b010: SW,
}

_BRANCH_VARIANTS: dict[int, type] = {
    0b000: BEQ, 0b001: BNE, 0b100: BLT,
    0b101: BGE, 0b110: BLTU, 0b111: BGEU,
}

_FENCE_VARIANTS: dict[int, type] = {
    0b000: FENCE, 0b001: FENCE_I,
}

# CSR access via rs1 / via zimm: funct3 -> variant
_CSR_REG_VARIANTS: dict[int, type] = {
    0b001: CSRRW, 0b010: CSRRS, 0b011: CSRRC,
}
_CSR_IMM_VARIANTS: dict[int, type] = {
    0b101: CSRRWI, 0b110: CSRRSI, 0b111: CSRRCI,
}

# funct3=0 SYSTEM words, matched on the whole word
_SYSTEM_WORDS: dict[int, type] = {
    WORD_ECALL: ECALL, WORD_EBREAK: EBREAK,
}
_SYSTEM_FUNCT12 = frozenset(word >> 20 for word in (WORD_ECALL, WORD_EBREAK, WORD_MRET))


def _rd(word: int) -> Register:
    return resolve(fields.rd(word))


def _rs1(word: int) -> Register:
    return resolve(fields.rs1(word))


def _rs2(word: int) -> Register:
    return resolve(fields.rs2(word))


def _lookup(table: dict[int, type], word: int) -> type:
    """Select a variant by funct3, raising InvalidFunct3 when unmapped."""
    funct3 = fields.funct3(word)
    variant = table.get(funct3)
    if variant is None:
        raise InvalidFunct3(fields.opcode(word), funct3)
    return variant


# ---------------------------------------------------------------------------
# Per-opcode handlers
# ---------------------------------------------------------------------------

def _decode_op(word: int) -> Operation:
    # R-type: no immediate; every funct3 needs funct7 to pick the variant
    funct3 = fields.funct3(word)
    funct7 = fields.funct7(word)
    variant = _R_VARIANTS.get((funct3, funct7))
    if variant is None:
        raise InvalidFunct7(funct3, funct7)
    return variant(rd=_rd(word), rs1=_rs1(word), rs2=_rs2(word))


def _decode_op_imm(word: int) -> Operation:
    funct3 = fields.funct3(word)
    if funct3 in (0b001, 0b101):
        # Shift-immediate: funct7 occupies imm[11:5], shamt imm[4:0]
        funct7 = fields.funct7(word)
        variant = _SHIFT_VARIANTS.get((funct3, funct7))
        if variant is None:
            raise InvalidFunct7(funct3, funct7)
        return variant(rd=_rd(word), rs1=_rs1(word), shamt=fields.shamt(word))
    variant = _lookup(_I_VARIANTS, word)
    return variant(rd=_rd(word), rs1=_rs1(word), imm=fields.i_immediate(word))


def _decode_load(word: int) -> Operation:
    variant = _lookup(_LOAD_VARIANTS, word)
    imm = fields.i_immediate(word) & 0xFFFF
    return variant(rd=_rd(word), rs1=_rs1(word), imm=imm)


def _decode_store(word: int) -> Operation:
    variant = _lookup(_STORE_VARIANTS, word)
    return variant(rs1=_rs1(word), rs2=_rs2(word), imm=fields.s_immediate(word))


def _decode_branch(word: int) -> Operation:
    variant = _lookup(_BRANCH_VARIANTS, word)
    return variant(rs1=_rs1(word), rs2=_rs2(word), imm=fields.b_immediate(word))


def _decode_lui(word: int) -> Operation:
    return LUI(rd=_rd(word), imm=fields.u_immediate(word))


def _decode_auipc(word: int) -> Operation:
    return AUIPC(rd=_rd(word), imm=fields.u_immediate(word))


def _decode_jal(word: int) -> Operation:
    return JAL(rd=_rd(word), imm=fields.j_immediate(word))


def _decode_jalr(word: int) -> Operation:
    funct3 = fields.funct3(word)
    if funct3 != 0:
        raise InvalidFunct3(OP_JALR, funct3)
    return JALR(rd=_rd(word), rs1=_rs1(word), imm=fields.i_immediate(word))


def _decode_fence(word: int) -> Operation:
    # pred/succ/fm are not modelled; FENCE and FENCE.I carry no operands
    return _lookup(_FENCE_VARIANTS, word)()


def _decode_system(word: int) -> Operation:
    # MRET has funct3=0 but is matched on the full word before funct3 dispatch
    if word == WORD_MRET:
        return MRET()

    funct3 = fields.funct3(word)
    if funct3 == 0:
        variant = _SYSTEM_WORDS.get(word)
        if variant is not None:
            return variant()
        funct12 = fields.csr(word)
        if funct12 not in _SYSTEM_FUNCT12:
            raise InvalidFunct12(funct3, funct12)
        raise InvalidSystemOperands(funct12, fields.rd(word), fields.rs1(word))

    csr = fields.csr(word)
    if funct3 in _CSR_REG_VARIANTS:
        return _CSR_REG_VARIANTS[funct3](rd=_rd(word), rs1=_rs1(word), csr=csr)
    variant = _lookup(_CSR_IMM_VARIANTS, word)
    return variant(rd=_rd(word), zimm=fields.zimm(word), csr=csr)


_HANDLERS: dict[int, Callable[[int], Operation]] = {
    OP_R_TYPE: _decode_op,
    OP_I_ARITH: _decode_op_imm,
    OP_LOAD: _decode_load,
    OP_STORE: _decode_store,
    OP_BRANCH: _decode_branch,
    OP_LUI: _decode_lui,
    OP_AUIPC: _decode_auipc,
    OP_JAL: _decode_jal,
    OP_JALR: _decode_jalr,
    OP_FENCE: _decode_fence,
    OP_SYSTEM: _decode_system,
}


def decode(word: int) -> Instruction:
    """Decode a 32-bit instruction word into an Instruction.

    Args:
        word: The instruction word as an unsigned 32-bit integer.

    Returns:
        The decoded Instruction.

    Raises:
        DecodeError: If any field is invalid. The raised error has its
            ``word`` attribute set to the offending word.
        ValueError: If ``word`` does not fit in 32 bits.
    """
    if not 0 <= word <= 0xFFFFFFFF:
        raise ValueError(f"Instruction word out of 32-bit range: {word:#x}")

    opcode = fields.opcode(word)
    handler = _HANDLERS.get(opcode)
    try:
        if handler is None:
            raise UnrecognizedOpcode(opcode)
        operation = handler(word)
    except DecodeError as e:
        e.word = word
        raise
    return Instruction(width=InstructionWidth.BIT32, operation=operation)


def decode_bytes(data: bytes) -> Instruction:
    """Decode one instruction from exactly 4 little-endian bytes.

    Raises:
        ValueError: If ``data`` is not exactly 4 bytes long.
        DecodeError: If the assembled word is not a valid instruction.
    """
    if len(data) != 4:
        raise ValueError(f"Expected 4 instruction bytes, got {len(data)}")
    return decode(int.from_bytes(data, "little"))


@dataclass(frozen=True)
class DecodedWord:
    """One word of a decoded buffer: either an instruction or an error."""

    addr: int
    word: int
    instruction: Instruction | None
    error: DecodeError | None = None


def decode_stream(data: bytes, base: int = 0) -> Iterator[DecodedWord]:
    """Decode consecutive little-endian words from a buffer.

    Decode failures are reported per word rather than aborting the scan.
    A trailing partial word (fewer than 4 bytes) is ignored.

    Args:
        data: Raw instruction bytes.
        base: Address of the first byte, used for ``DecodedWord.addr``.

    Yields:
        A DecodedWord for every complete 4-byte word in ``data``.
    """
    for offset in range(0, len(data) - 3, 4):
        word = int.from_bytes(data[offset:offset + 4], "little")
        addr = (base + offset) & 0xFFFFFFFF
        try:
            instruction = decode(word)
        except DecodeError as e:
            yield DecodedWord(addr=addr, word=word, instruction=None, error=e)
            continue
        yield DecodedWord(addr=addr, word=word, instruction=instruction)

"""Field extraction and immediate reconstruction for 32-bit RISC-V words.

Each encoding format scatters its immediate differently; every format gets
its own helper so the bit shuffling can be tested in isolation. All
signed immediates are returned as Python ints (negative when the sign bit
is set), already sign-extended.
"""


def sign_extend(value: int, bits: int) -> int:
    """Sign-extend a `bits`-wide value to 32 bits."""
    value &= (1 << bits) - 1
    sign_bit = 1 << (bits - 1)
    return ((value ^ sign_bit) - sign_bit) & 0xFFFFFFFF


def to_signed(value: int) -> int:
    """Interpret a 32-bit unsigned value as signed Python int."""
    return value - 0x100000000 if value >= 0x80000000 else value


# ---------------------------------------------------------------------------
# Fixed-position fields
# ---------------------------------------------------------------------------

def opcode(word: int) -> int:
    return word & 0x7F


def rd(word: int) -> int:
    return (word >> 7) & 0x1F


def funct3(word: int) -> int:
    return (word >> 12) & 0x7


def rs1(word: int) -> int:
    return (word >> 15) & 0x1F


def rs2(word: int) -> int:
    return (word >> 20) & 0x1F


def funct7(word: int) -> int:
    return (word >> 25) & 0x7F


def shamt(word: int) -> int:
    """Shift amount for SLLI/SRLI/SRAI (bits 24:20), unsigned."""
    return (word >> 20) & 0x1F


def csr(word: int) -> int:
    """CSR index (bits 31:20), unsigned and unvalidated."""
    return (word >> 20) & 0xFFF


def zimm(word: int) -> int:
    """5-bit CSR immediate, stored in the rs1 position."""
    return (word >> 15) & 0x1F


# ---------------------------------------------------------------------------
# Immediates
# ---------------------------------------------------------------------------

def i_immediate(word: int) -> int:
    # imm[11:0] = inst[31:20]
    return to_signed(sign_extend(word >> 20, 12))


def s_immediate(word: int) -> int:
    # imm[11:5] = inst[31:25], imm[4:0] = inst[11:7]
    return to_signed(sign_extend((funct7(word) << 5) | rd(word), 12))


def b_immediate(word: int) -> int:
    """B-type branch offset: 13-bit signed, bit 0 always 0."""
    imm = (
        ((word >> 31) & 1) << 12
        | ((word >> 7) & 1) << 11
        | ((word >> 25) & 0x3F) << 5
        | ((word >> 8) & 0xF) << 1
    )
    return to_signed(sign_extend(imm, 13))


def u_immediate(word: int) -> int:
    """U-type immediate: inst[31:12] already in the upper position, unsigned."""
    return word & 0xFFFFF000


def j_immediate(word: int) -> int:
    """J-type jump offset: 21-bit signed, bit 0 always 0."""
    imm = (
        ((word >> 31) & 1) << 20
        | ((word >> 12) & 0xFF) << 12
        | ((word >> 20) & 1) << 11
        | ((word >> 21) & 0x3FF) << 1
    )
    return to_signed(sign_extend(imm, 21))

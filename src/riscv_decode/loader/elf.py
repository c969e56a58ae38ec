"""ELF reader: finds the code a decoder should walk in ELF32 RISC-V files."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass
from typing import NamedTuple

ELF_MAGIC = b"\x7fELF"
_ELFCLASS32 = 1
_ELFDATA2LSB = 1
_EM_RISCV = 0xF3
_PT_LOAD = 1
_PF_X = 0x1

# e_ident (magic, class, data, version, padding) followed by the ELF32 fields
_EHDR = struct.Struct("<4sBBB9xHHIIIIIHHHHHH")
_PHDR = struct.Struct("<IIIIIIII")


class _FileHeader(NamedTuple):
    magic: bytes
    ei_class: int
    ei_data: int
    ei_version: int
    e_type: int
    e_machine: int
    e_version: int
    e_entry: int
    e_phoff: int
    e_shoff: int
    e_flags: int
    e_ehsize: int
    e_phentsize: int
    e_phnum: int
    e_shentsize: int
    e_shnum: int
    e_shstrndx: int


class _ProgramHeader(NamedTuple):
    p_type: int
    p_offset: int
    p_vaddr: int
    p_paddr: int
    p_filesz: int
    p_memsz: int
    p_flags: int
    p_align: int


# (field, required value, message); checked in order, first mismatch wins
_HEADER_CHECKS = (
    ("magic", ELF_MAGIC, "Bad ELF magic: {!r} (expected {!r})"),
    ("ei_class", _ELFCLASS32, "Unsupported ELF class: {} (expected {} for 32-bit)"),
    ("ei_data", _ELFDATA2LSB,
     "Unsupported ELF endianness: {} (expected {} for little-endian)"),
    ("e_machine", _EM_RISCV,
     "Unsupported machine type: 0x{:04X} (expected 0x{:04X} for RISC-V)"),
)


@dataclass(frozen=True)
class ElfSegment:
    """A PT_LOAD segment: its file bytes placed at ``vaddr``."""

    vaddr: int
    data: bytes
    memsz: int
    flags: int = 0

    @property
    def executable(self) -> bool:
        return bool(self.flags & _PF_X)


@dataclass(frozen=True)
class ElfProgram:
    entry: int
    segments: list[ElfSegment]

    def code_segments(self) -> list[ElfSegment]:
        """Loadable segments marked executable, in file order."""
        return [seg for seg in self.segments if seg.executable]


def is_elf(data: bytes) -> bool:
    return data[:4] == ELF_MAGIC


def _read_header(data: bytes) -> _FileHeader:
    if len(data) < _EHDR.size:
        raise ValueError(
            f"File too small for ELF header: {len(data)} bytes "
            f"(need at least {_EHDR.size})"
        )
    header = _FileHeader._make(_EHDR.unpack_from(data))
    for name, expected, message in _HEADER_CHECKS:
        actual = getattr(header, name)
        if actual != expected:
            raise ValueError(message.format(actual, expected))
    return header


def _program_headers(data: bytes, header: _FileHeader) -> Iterator[tuple[int, _ProgramHeader]]:
    for index in range(header.e_phnum):
        offset = header.e_phoff + index * header.e_phentsize
        if offset + _PHDR.size > len(data):
            raise ValueError(
                f"Program header {index} extends beyond file "
                f"(offset {offset}, file size {len(data)})"
            )
        yield index, _ProgramHeader._make(_PHDR.unpack_from(data, offset))


def _load_segment(data: bytes, index: int, ph: _ProgramHeader) -> ElfSegment:
    end = ph.p_offset + ph.p_filesz
    if end > len(data):
        raise ValueError(
            f"Segment {index} data extends beyond file "
            f"(offset {ph.p_offset}, filesz {ph.p_filesz}, file size {len(data)})"
        )
    # bytes past filesz are zero-fill and never hold instructions
    if ph.p_filesz > ph.p_memsz:
        raise ValueError(
            f"Segment {index} filesz {ph.p_filesz} exceeds memsz {ph.p_memsz}"
        )
    return ElfSegment(
        vaddr=ph.p_vaddr,
        data=data[ph.p_offset:end],
        memsz=ph.p_memsz,
        flags=ph.p_flags,
    )


def parse_elf(data: bytes) -> ElfProgram:
    """Parse a 32-bit little-endian RISC-V ELF image.

    Only PT_LOAD segments are kept; use ``ElfProgram.code_segments`` for
    the ones worth decoding.

    Raises:
        ValueError: If the header is unsupported or a segment lies outside
            the file.
    """
    header = _read_header(data)
    segments = [
        _load_segment(data, index, ph)
        for index, ph in _program_headers(data, header)
        if ph.p_type == _PT_LOAD
    ]
    return ElfProgram(entry=header.e_entry, segments=segments)

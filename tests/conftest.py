"""Shared fixtures: minimal ELF32 RISC-V images built in memory."""

import struct

import pytest

_EHDR = struct.Struct("<4sBBB9xHHIIIIIHHHHHH")
_PHDR = struct.Struct("<IIIIIIII")

_PT_LOAD = 1
_PF_X = 0x1
_PF_R = 0x4

# Field defaults for a valid RV32 little-endian executable, in _EHDR order
_EHDR_DEFAULTS = {
    "magic": b"\x7fELF",
    "ei_class": 1,       # ELFCLASS32
    "ei_data": 1,        # ELFDATA2LSB
    "ei_version": 1,
    "e_type": 2,         # ET_EXEC
    "e_machine": 0xF3,   # EM_RISCV
    "e_version": 1,
    "e_entry": 0x80000000,
    "e_phoff": _EHDR.size,
    "e_shoff": 0,
    "e_flags": 0,
    "e_ehsize": _EHDR.size,
    "e_phentsize": _PHDR.size,
    "e_phnum": 0,
    "e_shentsize": 0,
    "e_shnum": 0,
    "e_shstrndx": 0,
}


def _pack_header(**overrides) -> bytes:
    fields = {**_EHDR_DEFAULTS, **overrides}
    return _EHDR.pack(*fields.values())


def _pack_segment(seg: dict, offset: int) -> bytes:
    data = seg.get("data", b"")
    return _PHDR.pack(
        seg.get("p_type", _PT_LOAD),
        offset,
        seg.get("vaddr", 0x80000000),
        0,
        seg.get("filesz", len(data)),
        seg.get("memsz", len(data)),
        seg.get("flags", _PF_R | _PF_X),
        0x1000,
    )


@pytest.fixture
def make_elf():
    """Factory fixture: build an ELF image from segment dicts.

    Each dict may hold: data (bytes), vaddr, filesz, memsz, p_type, flags.
    """
    def _make(segments: list[dict], entry: int = 0x80000000) -> bytes:
        offset = _EHDR.size + len(segments) * _PHDR.size
        phdrs = b""
        for seg in segments:
            phdrs += _pack_segment(seg, offset)
            offset += len(seg.get("data", b""))
        payload = b"".join(seg.get("data", b"") for seg in segments)
        return _pack_header(e_entry=entry, e_phnum=len(segments)) + phdrs + payload
    return _make


@pytest.fixture
def make_elf_header():
    """Factory fixture: build a bare ELF32 header with overridable fields."""
    return _pack_header

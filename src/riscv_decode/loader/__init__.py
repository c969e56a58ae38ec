"""ELF reader module."""

from .elf import ElfProgram, ElfSegment, is_elf, parse_elf

__all__ = ["ElfProgram", "ElfSegment", "is_elf", "parse_elf"]

"""Command-line interface for the RV32I instruction decoder."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from dataclasses import fields

from rich.console import Console
from rich.table import Table

from .decode import DecodedWord, decode_stream
from .instruction import Operation, mnemonic
from .loader.elf import is_elf, parse_elf
from .registers import Register


def _parse_int(value: str) -> int:
    """Parse a hex number, with or without 0x prefix, underscores allowed."""
    text = value.strip().lower().replace("_", "")
    if text.startswith("0x"):
        text = text[2:]
    try:
        number = int(text, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid hex value '{value}'") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"'{value}' must not be negative")
    return number


def _parse_word(value: str) -> int:
    """Parse a WORD argument: a hex number that fits in 32 bits.

    Raises:
        argparse.ArgumentTypeError: If the value is not hex or too wide.
    """
    word = _parse_int(value)
    if word > 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f"'{value}' does not fit in 32 bits")
    return word


def format_operands(operation: Operation) -> str:
    """Render operand fields as ``name=value`` pairs.

    Registers use ABI names, csr indices are hex and immediates decimal
    (signed offsets for loads).
    """
    parts: list[str] = []
    for field in fields(operation):
        value = getattr(operation, field.name)
        if isinstance(value, Register):
            text = value.abi_name
        elif field.name == "csr":
            text = f"0x{value:03X}"
        elif field.name == "imm" and hasattr(operation, "offset"):
            text = str(operation.offset)
        else:
            text = str(value)
        parts.append(f"{field.name}={text}")
    return " ".join(parts)


def build_table(results: Iterable[DecodedWord], title: str | None = None) -> Table:
    """Build a Rich table with one row per decoded word."""
    table = Table(title=title)
    table.add_column("Address", style="cyan", no_wrap=True)
    table.add_column("Word", no_wrap=True)
    table.add_column("Mnemonic", style="bold")
    table.add_column("Operands")

    for item in results:
        addr = f"{item.addr:08X}"
        word = f"{item.word:08X}"
        if item.instruction is None:
            table.add_row(addr, word, "[red]invalid[/red]", f"[red]{item.error}[/red]")
        else:
            op = item.instruction.operation
            table.add_row(addr, word, mnemonic(op), format_operands(op))
    return table


def _decode_file(path: str, base: int) -> list[tuple[str, list[DecodedWord]]]:
    """Decode an ELF or raw binary file into titled groups of results.

    Raises:
        SystemExit: If the file cannot be read or is not a usable ELF.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        print(f"Error: cannot read '{path}': {e}", file=sys.stderr)
        sys.exit(1)

    if not is_elf(data):
        if len(data) % 4:
            print(f"Warning: ignoring {len(data) % 4} trailing bytes in {path}",
                  file=sys.stderr)
        return [(path, list(decode_stream(data, base)))]

    try:
        prog = parse_elf(data)
    except ValueError as e:
        print(f"Error: {path}: {e}", file=sys.stderr)
        sys.exit(1)

    segments = prog.code_segments()
    if not segments:
        print(f"Error: no executable segments in '{path}'", file=sys.stderr)
        sys.exit(1)
    return [
        (f"{path} @ 0x{seg.vaddr:08X}", list(decode_stream(seg.data, seg.vaddr)))
        for seg in segments
    ]


def main(argv: list[str] | None = None) -> None:
    """Entry point for the decoder CLI."""
    parser = argparse.ArgumentParser(description="RV32I instruction decoder")
    sub = parser.add_subparsers(dest="command")

    words_parser = sub.add_parser("words", help="Decode hex instruction words")
    words_parser.add_argument("words", nargs="+", type=_parse_word, metavar="WORD",
                              help="32-bit instruction word in hex")

    file_parser = sub.add_parser("file", help="Decode a raw binary or ELF file")
    file_parser.add_argument("path", help="Path to binary or ELF file")
    file_parser.add_argument(
        "--base", type=_parse_int, default=0, metavar="ADDR",
        help="Load address of a raw binary, in hex (default 0)",
    )

    for p in (words_parser, file_parser):
        p.add_argument("--strict", action="store_true",
                       help="Exit with status 1 if any word fails to decode")

    args = parser.parse_args(argv)

    if args.command == "words":
        data = b"".join(w.to_bytes(4, "little") for w in args.words)
        groups = [(None, list(decode_stream(data)))]
    elif args.command == "file":
        groups = _decode_file(args.path, args.base)
    else:
        parser.print_help()
        sys.exit(1)

    console = Console()
    failures = 0
    for title, results in groups:
        console.print(build_table(results, title))
        failures += sum(1 for r in results if r.error is not None)

    if failures:
        print(f"{failures} word(s) failed to decode.", file=sys.stderr)
        if args.strict:
            sys.exit(1)

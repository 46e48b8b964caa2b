"""Command that prints information about a .dol executable."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence

from .dol import DolError, Header, SectionInfo

_UNITS = "KMGTPE"
_LEFT = "left"
_CENTER = "center"


def format_size(size: int) -> str:
    """Format a byte count with binary units, e.g. ``1.5 KiB``."""
    if size < 0:
        raise ValueError("size must not be negative")
    if size < 1024:
        return f"{size} B"
    exponent = 0
    while exponent < len(_UNITS) and size >= 1024 ** (exponent + 1):
        exponent += 1
    return f"{size / 1024**exponent:.1f} {_UNITS[exponent - 1]}iB"


def _hex(value: int) -> str:
    return f"0x{value:08X}"


def _align(text: str, width: int, alignment: str) -> str:
    return text.center(width) if alignment == _CENTER else text.ljust(width)


def _render_table(header: list[str], rows: list[list[tuple[str, str]]]) -> str:
    widths = [len(cell) for cell in header]
    for row in rows:
        widths = [max(w, len(text)) for w, (text, _) in zip(widths, row)]

    def rule(left: str, fill: str, mid: str, right: str) -> str:
        return left + mid.join(fill * (w + 2) for w in widths) + right

    def line(cells: list[tuple[str, str]]) -> str:
        parts = (f" {_align(text, w, al)} " for w, (text, al) in zip(widths, cells))
        return "│" + "│".join(parts) + "│"

    lines = [rule("╭", "─", "┬", "╮"), line([(h, _CENTER) for h in header])]
    lines.append(rule("╞", "═", "╪", "╡"))
    for index, row in enumerate(rows):
        if index:
            lines.append(rule("├", "─", "┼", "┤"))
        lines.append(line(row))
    lines.append(rule("╰", "─", "┴", "╯"))
    return "\n".join(lines)


def _section_row(name: str, section: SectionInfo) -> list[tuple[str, str]]:
    return [
        (name, _LEFT),
        (_hex(section.offset), _LEFT),
        (_hex(section.target), _LEFT),
        (_hex(section.size), _LEFT),
        (format_size(section.size), _CENTER),
    ]


def build_report(name: str, file_size: int, header: Header) -> str:
    """Describe the file and its sections as text."""
    info = f" {name} ({format_size(file_size)})  Entry: {_hex(header.entry)} "

    rows = [
        _section_row(f".text{i}", section)
        for i, section in enumerate(header.text_sections())
    ]
    rows += [
        _section_row(f".data{i}", section)
        for i, section in enumerate(header.data_sections())
    ]
    rows.append(
        [
            (".bss", _LEFT),
            ("-", _CENTER),
            (_hex(header.bss_target), _LEFT),
            (_hex(header.bss_size), _LEFT),
            (format_size(header.bss_size), _CENTER),
        ]
    )
    table = _render_table(
        ["Section", "Offset", "Target", "Length", "Length (Bytes)"], rows
    )
    return f"{info}\n{table}"


def main(argv: Sequence[str] | None = None) -> int:
    """Print information about a .dol file."""
    parser = argparse.ArgumentParser(
        prog="dolinfo", description="Print information about a .dol file."
    )
    parser.add_argument("input", help="path to the .dol file")
    args = parser.parse_args(argv)

    try:
        stream = open(args.input, "rb")
    except OSError as exc:
        print(f"error: opening .dol file: {exc}", file=sys.stderr)
        return 1

    with stream:
        try:
            header = Header.read(stream)
        except DolError as exc:
            print(f"error: parsing .dol header: {exc}", file=sys.stderr)
            return 1
        file_size = os.fstat(stream.fileno()).st_size

    print(build_report(os.path.basename(args.input), file_size, header))
    return 0


if __name__ == "__main__":
    sys.exit(main())
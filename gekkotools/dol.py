"""Reading and writing of .dol executables."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import BinaryIO

HEADER_SIZE = 0x100
TEXT_SECTION_COUNT = 7
DATA_SECTION_COUNT = 11

_T = TEXT_SECTION_COUNT
_D = DATA_SECTION_COUNT
_HEADER_STRUCT = struct.Struct(f">{_T}I{_D}I{_T}I{_D}I{_T}I{_D}I3I")
_U32_MAX = 0xFFFF_FFFF


class DolError(Exception):
    """A .dol file is malformed or truncated."""


@dataclass(frozen=True)
class SectionInfo:
    """Location of a section in the file and in memory."""

    offset: int
    target: int
    size: int


@dataclass(frozen=True)
class Section:
    """A loaded section: its target address and contents."""

    target: int
    content: bytes


def _zeros(count: int):
    return field(default_factory=lambda: [0] * count)


def _check_u32(name: str, value: int) -> None:
    if not 0 <= value <= _U32_MAX:
        raise ValueError(f"{name} value {value:#x} does not fit in 32 bits")


@dataclass
class Header:
    """The header of a .dol file. Zero offsets mark absent sections."""

    text_offsets: list[int] = _zeros(TEXT_SECTION_COUNT)
    data_offsets: list[int] = _zeros(DATA_SECTION_COUNT)
    text_targets: list[int] = _zeros(TEXT_SECTION_COUNT)
    data_targets: list[int] = _zeros(DATA_SECTION_COUNT)
    text_sizes: list[int] = _zeros(TEXT_SECTION_COUNT)
    data_sizes: list[int] = _zeros(DATA_SECTION_COUNT)
    bss_target: int = 0
    bss_size: int = 0
    entry: int = 0

    SIZE = _HEADER_STRUCT.size

    def __post_init__(self) -> None:
        for name, count in (
            ("text_offsets", TEXT_SECTION_COUNT),
            ("data_offsets", DATA_SECTION_COUNT),
            ("text_targets", TEXT_SECTION_COUNT),
            ("data_targets", DATA_SECTION_COUNT),
            ("text_sizes", TEXT_SECTION_COUNT),
            ("data_sizes", DATA_SECTION_COUNT),
        ):
            values = list(getattr(self, name))
            if len(values) != count:
                raise ValueError(f"{name} must have {count} entries, got {len(values)}")
            for value in values:
                _check_u32(name, value)
            setattr(self, name, values)
        for name in ("bss_target", "bss_size", "entry"):
            _check_u32(name, getattr(self, name))

    @classmethod
    def from_bytes(cls, data: bytes) -> Header:
        """Parse a header from the start of ``data``."""
        if len(data) < _HEADER_STRUCT.size:
            raise DolError(
                f"header needs {_HEADER_STRUCT.size} bytes, only {len(data)} available"
            )
        values = _HEADER_STRUCT.unpack_from(data)
        pos = 0

        def take(count: int) -> list[int]:
            nonlocal pos
            chunk = list(values[pos : pos + count])
            pos += count
            return chunk

        return cls(
            text_offsets=take(_T),
            data_offsets=take(_D),
            text_targets=take(_T),
            data_targets=take(_D),
            text_sizes=take(_T),
            data_sizes=take(_D),
            bss_target=values[-3],
            bss_size=values[-2],
            entry=values[-1],
        )

    @classmethod
    def read(cls, stream: BinaryIO) -> Header:
        """Read a header from a binary stream."""
        return cls.from_bytes(stream.read(_HEADER_STRUCT.size))

    def to_bytes(self) -> bytes:
        """Encode the header (without padding) in big endian."""
        return _HEADER_STRUCT.pack(
            *self.text_offsets,
            *self.data_offsets,
            *self.text_targets,
            *self.data_targets,
            *self.text_sizes,
            *self.data_sizes,
            self.bss_target,
            self.bss_size,
            self.entry,
        )

    @staticmethod
    def _sections(offsets, targets, sizes) -> Iterator[SectionInfo]:
        for offset, target, size in zip(offsets, targets, sizes):
            if offset != 0:
                yield SectionInfo(offset=offset, target=target, size=size)

    def text_sections(self) -> Iterator[SectionInfo]:
        """The .text sections that are present."""
        return self._sections(self.text_offsets, self.text_targets, self.text_sizes)

    def data_sections(self) -> Iterator[SectionInfo]:
        """The .data sections that are present."""
        return self._sections(self.data_offsets, self.data_targets, self.data_sizes)


@dataclass
class Dol:
    """A .dol executable: a header padded to 0x100 bytes, then the body."""

    header: Header
    body: bytes = b""

    @classmethod
    def from_bytes(cls, data: bytes) -> Dol:
        """Parse a whole .dol file."""
        header = Header.from_bytes(data)
        return cls(header=header, body=bytes(data[HEADER_SIZE:]))

    @classmethod
    def read(cls, stream: BinaryIO) -> Dol:
        """Read a whole .dol file from a binary stream."""
        header = Header.read(stream)
        stream.read(HEADER_SIZE - Header.SIZE)
        return cls(header=header, body=stream.read())

    def to_bytes(self) -> bytes:
        """Encode the executable, padding the header to 0x100 bytes."""
        return self.header.to_bytes().ljust(HEADER_SIZE, b"\0") + bytes(self.body)

    def _bytes(self, info: SectionInfo) -> bytes:
        start = info.offset - HEADER_SIZE
        if start < 0:
            raise DolError(f"section offset {info.offset:#x} lies inside the header")
        end = start + info.size
        if start > len(self.body) or end > len(self.body):
            raise DolError(
                f"section at {info.offset:#x} with size {info.size:#x} exceeds the file"
            )
        return self.body[start:end]

    def _load(self, infos: Iterator[SectionInfo]) -> Iterator[Section]:
        for info in infos:
            yield Section(target=info.target, content=self._bytes(info))

    def text_sections(self) -> Iterator[Section]:
        """Contents of the .text sections."""
        return self._load(self.header.text_sections())

    def data_sections(self) -> Iterator[Section]:
        """Contents of the .data sections."""
        return self._load(self.header.data_sections())

    def entrypoint(self) -> int:
        """Address where execution starts."""
        return self.header.entry
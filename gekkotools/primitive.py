"""Memory primitives: bytes, half-words and words, signed or unsigned."""

from __future__ import annotations

import sys
from enum import Enum
from typing import Literal

_Order = Literal["little", "big"]


class Primitive(Enum):
    """An integer type that can be read from and written to memory."""

    U8 = (1, False)
    U16 = (2, False)
    U32 = (4, False)
    I8 = (1, True)
    I16 = (2, True)
    I32 = (4, True)

    def __init__(self, size: int, signed: bool) -> None:
        self.size = size
        self.signed = signed

    def alignment(self) -> int:
        """The alignment of this primitive, in bytes."""
        return self.size

    def _read(self, buf: bytes, order: _Order) -> int:
        chunk = bytes(buf[: self.size]).ljust(self.size, b"\0")
        return int.from_bytes(chunk, order, signed=self.signed)

    def _write(self, value: int, buf: bytearray, order: _Order) -> None:
        data = value.to_bytes(self.size, order, signed=self.signed)
        count = min(len(buf), self.size)
        buf[:count] = data[:count]

    def read_ne_bytes(self, buf: bytes) -> int:
        """Read a value in native byte order; a short buffer is padded with zeros."""
        return self._read(buf, sys.byteorder)

    def write_ne_bytes(self, value: int, buf: bytearray) -> None:
        """Write a value in native byte order; bytes past the buffer's end are dropped."""
        self._write(value, buf, sys.byteorder)

    def read_le_bytes(self, buf: bytes) -> int:
        """Read a value in little endian; a short buffer is padded with zeros."""
        return self._read(buf, "little")

    def write_le_bytes(self, value: int, buf: bytearray) -> None:
        """Write a value in little endian; bytes past the buffer's end are dropped."""
        self._write(value, buf, "little")

    def read_be_bytes(self, buf: bytes) -> int:
        """Read a value in big endian; a short buffer is padded with zeros."""
        return self._read(buf, "big")

    def write_be_bytes(self, value: int, buf: bytearray) -> None:
        """Write a value in big endian; bytes past the buffer's end are dropped."""
        self._write(value, buf, "big")
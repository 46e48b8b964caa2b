"""32-bit memory addresses with wrapping arithmetic."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

_MASK = 0xFFFF_FFFF


@total_ordering
@dataclass(frozen=True, eq=False)
class Address:
    """A memory address: an unsigned 32-bit value."""

    value: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"address must be an int, not {type(self.value).__name__}")
        if not 0 <= self.value <= _MASK:
            raise ValueError(f"address {self.value:#x} does not fit in 32 bits")

    def is_aligned(self, alignment: int) -> bool:
        """Return True if the address is a multiple of ``alignment``."""
        if alignment == 0:
            return self.value == 0
        return self.value % alignment == 0

    def __add__(self, other: object) -> Address:
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        return Address((self.value + other) & _MASK)

    def __sub__(self, other: object) -> Address:
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        return Address((self.value - other) & _MASK)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Address):
            return self.value == other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Address):
            return self.value < other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"0x{self.value >> 16:04X}_{self.value & 0xFFFF:04X}"

    def __repr__(self) -> str:
        return str(self)
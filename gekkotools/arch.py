"""Register layouts and exception kinds of the Gekko PowerPC CPU."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, ClassVar

from .address import Address

FREQUENCY = 486_000_000
"""The CPU frequency, in hertz."""

SPECIAL_SRR1_BITS_MASK = 0b0111_1000_0011_1100_0000_0000_0000_0000
MSR_TO_SRR1_MASK = 0b0000_0111_1100_0000_1111_1111_1111_1111
SRR1_TO_MSR_MASK = 0b1000_0111_1100_0000_1111_1111_0111_0011

_MASK32 = 0xFFFF_FFFF
_KIB_128 = 128 * 1024


class ExceptionKind(IntEnum):
    """An exception the CPU can take; values are the low 16 bits of its vector."""

    RESET = 0x0100
    MACHINE_CHECK = 0x0200
    DSI = 0x0300
    ISI = 0x0400
    INTERRUPT = 0x0500
    ALIGNMENT = 0x0600
    PROGRAM = 0x0700
    FLOAT_UNAVAILABLE = 0x0800
    DECREMENTER = 0x0900
    SYSCALL = 0x0C00
    TRACE = 0x0D00
    PERFORMANCE_MONITOR = 0x0F00
    BREAKPOINT = 0x1300

    def srr0_skip(self) -> bool:
        """Whether SRR0 should point past the instruction that raised the exception."""
        return self not in (
            ExceptionKind.RESET,
            ExceptionKind.MACHINE_CHECK,
            ExceptionKind.INTERRUPT,
            ExceptionKind.DECREMENTER,
        )


class _Bits:
    """A bit range inside a register, exposed as an attribute."""

    def __init__(
        self, start: int, end: int | None = None, kind: Callable[[int], Any] | None = None
    ) -> None:
        if end is None:
            end = start + 1
            kind = kind or bool
        self.start = start
        self.width = end - start
        self.mask = (1 << self.width) - 1
        self.kind = kind or int
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, owner: type | None = None) -> Any:
        if obj is None:
            return self
        return self.kind((obj._bits >> self.start) & self.mask)

    def __set__(self, obj: Any, value: Any) -> None:
        raw = int(value)
        if not 0 <= raw <= self.mask:
            raise ValueError(
                f"{self.name} value {raw} does not fit in {self.width} bit(s)"
            )
        obj._bits = (obj._bits & ~(self.mask << self.start)) | (raw << self.start)


class _BitStruct:
    """A fixed-width register whose fields are views on its raw bits."""

    WIDTH: ClassVar[int] = 32
    _DEFAULT: ClassVar[int] = 0
    _FIELDS: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._FIELDS = tuple(
            name for name, attr in vars(cls).items() if isinstance(attr, _Bits)
        )

    def __init__(self, bits: int | None = None, **fields: Any) -> None:
        value = self._DEFAULT if bits is None else int(bits)
        if not 0 <= value < (1 << self.WIDTH):
            raise ValueError(
                f"{value:#x} does not fit in {self.WIDTH} bits of {type(self).__name__}"
            )
        self._bits = value
        for name, field_value in fields.items():
            if name not in self._FIELDS:
                raise TypeError(f"{type(self).__name__} has no field {name!r}")
            setattr(self, name, field_value)

    def copy(self):
        """An independent copy of the register."""
        return type(self)(self._bits)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._bits == other._bits

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in self._FIELDS)
        return f"{type(self).__name__}({fields})"


class Cond(_BitStruct):
    """A 4-bit condition field of the condition register."""

    WIDTH = 4

    ov = _Bits(0)
    eq = _Bits(1)
    gt = _Bits(2)
    lt = _Bits(3)

    @classmethod
    def from_bits(cls, bits: int) -> Cond:
        """Build the field from its raw bits."""
        return cls(bits)

    def to_bits(self) -> int:
        """The raw bits of the field."""
        return self._bits


class CondReg(_BitStruct):
    """The condition register: eight 4-bit condition fields.

    Index 0 holds the lowest bits, which is CR7 in PowerPC numbering.
    """

    WIDTH = 32
    FIELD_COUNT: ClassVar[int] = 8

    @classmethod
    def from_bits(cls, bits: int) -> CondReg:
        """Build the register from its raw bits."""
        return cls(bits)

    def to_bits(self) -> int:
        """The raw bits of the register."""
        return self._bits

    def _check(self, index: int) -> int:
        if not 0 <= index < self.FIELD_COUNT:
            raise IndexError(f"condition field index {index} out of range")
        return index * Cond.WIDTH

    def __getitem__(self, index: int) -> Cond:
        shift = self._check(index)
        return Cond.from_bits((self._bits >> shift) & 0xF)

    def __setitem__(self, index: int, cond: Cond) -> None:
        shift = self._check(index)
        self._bits = (self._bits & ~(0xF << shift)) | (cond.to_bits() << shift)

    def __len__(self) -> int:
        return self.FIELD_COUNT

    @property
    def fields(self) -> tuple[Cond, ...]:
        """All condition fields, lowest bits first."""
        return tuple(self[index] for index in range(self.FIELD_COUNT))

    @fields.setter
    def fields(self, conds: Any) -> None:
        conds = list(conds)
        if len(conds) != self.FIELD_COUNT:
            raise ValueError(f"expected {self.FIELD_COUNT} condition fields")
        for index, cond in enumerate(conds):
            self[index] = cond

    def __repr__(self) -> str:
        return f"CondReg(fields={list(self.fields)!r})"


class MachineState(_BitStruct):
    """The machine state register (MSR). Defaults to high exception vectors."""

    WIDTH = 32
    _DEFAULT = 1 << 6

    little_endian = _Bits(0)
    recoverable_exception = _Bits(1)
    performance_monitor = _Bits(2)
    data_addr_translation = _Bits(4)
    instr_addr_translation = _Bits(5)
    exception_prefix = _Bits(6)
    float_exception_mode_1 = _Bits(8)
    branch_trace = _Bits(9)
    step_trace = _Bits(10)
    float_exception_mode_0 = _Bits(11)
    machine_check = _Bits(12)
    float_available = _Bits(13)
    user_mode = _Bits(14)
    external_interrupts = _Bits(15)
    exception_little_endian = _Bits(16)
    reduced_power = _Bits(18)

    @classmethod
    def from_bits(cls, bits: int) -> MachineState:
        """Build the register from its raw bits."""
        return cls(bits)

    def to_bits(self) -> int:
        """The raw bits of the register."""
        return self._bits

    def enter_exception_mode(self) -> None:
        """Reset the MSR as the CPU does when it takes an exception."""
        prev = self.copy()
        self._bits = 0
        self.little_endian = prev.exception_little_endian
        self.exception_prefix = prev.exception_prefix
        self.machine_check = prev.machine_check
        self.exception_little_endian = prev.exception_little_endian


class XerReg(_BitStruct):
    """The XER register: carry, overflow and string byte count."""

    WIDTH = 32

    byte_count = _Bits(0, 7)
    carry = _Bits(29)
    overflow = _Bits(30)
    overflow_fuse = _Bits(31)

    @classmethod
    def from_bits(cls, bits: int) -> XerReg:
        """Build the register from its raw bits."""
        return cls(bits)

    def to_bits(self) -> int:
        """The raw bits of the register."""
        return self._bits


def _as_address(addr: Address | int) -> Address:
    return addr if isinstance(addr, Address) else Address(int(addr))


class Bat(_BitStruct):
    """A block address translation register pair (upper word in the high bits)."""

    WIDTH = 64

    protection = _Bits(0, 2)
    wimg = _Bits(3, 7)
    physical_address_region = _Bits(17, 32)
    user_mode = _Bits(32)
    supervisor_mode = _Bits(33)
    block_length_mask = _Bits(34, 45)
    effective_address_region = _Bits(49, 64)

    @classmethod
    def from_bits(cls, bits: int) -> Bat:
        """Build the register from its raw 64 bits."""
        return cls(bits)

    def to_bits(self) -> int:
        """The raw 64 bits of the register."""
        return self._bits

    @classmethod
    def from_words(cls, upper: int, lower: int) -> Bat:
        """Build the register from its upper and lower 32-bit words."""
        for name, word in (("upper", upper), ("lower", lower)):
            if not 0 <= word <= _MASK32:
                raise ValueError(f"{name} word {word:#x} does not fit in 32 bits")
        return cls((upper << 32) | lower)

    def _length_mask(self) -> int:
        return (self.block_length_mask << 17) & _MASK32

    def block_length(self) -> int:
        """The length of the memory region, in bytes."""
        return (_KIB_128 << bin(self.block_length_mask).count("1")) & _MASK32

    def start(self) -> Address:
        """The first effective address of the region."""
        base = (self.effective_address_region << 17) & _MASK32
        return Address(base & ~self._length_mask() & _MASK32)

    def physical_start(self) -> Address:
        """The first physical address of the region."""
        base = (self.physical_address_region << 17) & _MASK32
        return Address(base & ~self._length_mask() & _MASK32)

    def end(self) -> Address:
        """The last effective address of the region, inclusive."""
        return self.start() + (self.block_length() - 1)

    def physical_end(self) -> Address:
        """The last physical address of the region, inclusive."""
        return self.physical_start() + (self.block_length() - 1)

    def contains(self, addr: Address | int) -> bool:
        """Whether the region holds the given effective address."""
        return self.start() <= _as_address(addr) <= self.end()

    def translate(self, addr: Address | int) -> Address:
        """Translate an effective address into a physical address."""
        value = _as_address(addr).value
        offset = value & 0x1FFFF
        region = (value & 0x0FFE_0000) & self._length_mask()
        region |= (self.physical_address_region << 17) & _MASK32
        return Address(region | offset)


class QuantizedType(IntEnum):
    """The data type of a quantized load or store."""

    FLOAT = 0
    RESERVED0 = 1
    RESERVED1 = 2
    RESERVED2 = 3
    U8 = 4
    U16 = 5
    I8 = 6
    I16 = 7


class QuantReg(_BitStruct):
    """A graphics quantization register (GQR)."""

    WIDTH = 32

    store_type = _Bits(0, 3, QuantizedType)
    store_scale = _Bits(8, 14)
    load_type = _Bits(16, 19, QuantizedType)
    load_scale = _Bits(24, 30)

    @classmethod
    def from_bits(cls, bits: int) -> QuantReg:
        """Build the register from its raw bits."""
        return cls(bits)

    def to_bits(self) -> int:
        """The raw bits of the register."""
        return self._bits
"""The register file of the Gekko CPU and the names that identify its registers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .address import Address
from .arch import (
    MSR_TO_SRR1_MASK,
    SPECIAL_SRR1_BITS_MASK,
    Bat,
    CondReg,
    ExceptionKind,
    MachineState,
    QuantReg,
    XerReg,
)

_MASK32 = 0xFFFF_FFFF
_HIGH_VECTOR_BASE = 0xFFF0_0000


class GPR(Enum):
    """A general purpose register; ``GPR(n)`` raises ValueError for n outside 0..31."""

    R0 = 0
    R1 = 1
    R2 = 2
    R3 = 3
    R4 = 4
    R5 = 5
    R6 = 6
    R7 = 7
    R8 = 8
    R9 = 9
    R10 = 10
    R11 = 11
    R12 = 12
    R13 = 13
    R14 = 14
    R15 = 15
    R16 = 16
    R17 = 17
    R18 = 18
    R19 = 19
    R20 = 20
    R21 = 21
    R22 = 22
    R23 = 23
    R24 = 24
    R25 = 25
    R26 = 26
    R27 = 27
    R28 = 28
    R29 = 29
    R30 = 30
    R31 = 31

    @property
    def index(self) -> int:
        """The register number."""
        return self.value


class FPR(Enum):
    """A floating point register; ``FPR(n)`` raises ValueError for n outside 0..31."""

    R0 = 0
    R1 = 1
    R2 = 2
    R3 = 3
    R4 = 4
    R5 = 5
    R6 = 6
    R7 = 7
    R8 = 8
    R9 = 9
    R10 = 10
    R11 = 11
    R12 = 12
    R13 = 13
    R14 = 14
    R15 = 15
    R16 = 16
    R17 = 17
    R18 = 18
    R19 = 19
    R20 = 20
    R21 = 21
    R22 = 22
    R23 = 23
    R24 = 24
    R25 = 25
    R26 = 26
    R27 = 27
    R28 = 28
    R29 = 29
    R30 = 30
    R31 = 31

    @property
    def index(self) -> int:
        """The register number."""
        return self.value


class SPR(Enum):
    """A special purpose register, valued by its SPR number.

    ``SPR(n)`` raises ValueError for an unknown number.
    """

    XER = 1
    LR = 8
    CTR = 9
    DEC = 22
    SRR0 = 26
    SRR1 = 27
    SPRG0 = 272
    SPRG1 = 273
    SPRG2 = 274
    SPRG3 = 275
    TBL = 284
    TBU = 285
    IBAT0U = 528
    IBAT0L = 529
    IBAT1U = 530
    IBAT1L = 531
    IBAT2U = 532
    IBAT2L = 533
    IBAT3U = 534
    IBAT3L = 535
    DBAT0U = 536
    DBAT0L = 537
    DBAT1U = 538
    DBAT1L = 539
    DBAT2U = 540
    DBAT2L = 541
    DBAT3U = 542
    DBAT3L = 543
    GQR0 = 912
    GQR1 = 913
    GQR2 = 914
    GQR3 = 915
    GQR4 = 916
    GQR5 = 917
    GQR6 = 918
    GQR7 = 919
    HID2 = 920
    MMCR0 = 952
    PMC1 = 953
    PMC2 = 954
    MMCR1 = 956
    PMC3 = 957
    PMC4 = 958
    HID0 = 1008
    HID1 = 1009
    L2CR = 1017

    @property
    def number(self) -> int:
        """The SPR number used by mfspr and mtspr."""
        return self.value

    def is_data_bat(self) -> bool:
        """Whether this is one of the data BAT registers."""
        return SPR.DBAT0U.value <= self.value <= SPR.DBAT3L.value

    def is_instr_bat(self) -> bool:
        """Whether this is one of the instruction BAT registers."""
        return SPR.IBAT0U.value <= self.value <= SPR.IBAT3L.value

    def is_bat(self) -> bool:
        """Whether this is any BAT register."""
        return self.is_data_bat() or self.is_instr_bat()


class Reg(Enum):
    """Registers that are neither GPRs, FPRs nor SPRs."""

    PC = "pc"
    MSR = "msr"
    CR = "cr"
    FPSCR = "fpscr"
    SR0 = "sr0"
    SR1 = "sr1"
    SR2 = "sr2"
    SR3 = "sr3"
    SR4 = "sr4"
    SR5 = "sr5"
    SR6 = "sr6"
    SR7 = "sr7"
    SR8 = "sr8"
    SR9 = "sr9"
    SR10 = "sr10"
    SR11 = "sr11"
    SR12 = "sr12"
    SR13 = "sr13"
    SR14 = "sr14"
    SR15 = "sr15"
    TBL = "tbl"
    TBU = "tbu"


SEGMENT_REGISTERS: tuple[Reg, ...] = tuple(Reg[f"SR{i}"] for i in range(16))
"""The sixteen segment registers, in order."""

AnyReg = Union[GPR, FPR, SPR, Reg]


def all_registers() -> Iterator[AnyReg]:
    """PC, MSR, CR and FPSCR, then every GPR, every SPR and every FPR."""
    yield Reg.PC
    yield Reg.MSR
    yield Reg.CR
    yield Reg.FPSCR
    yield from GPR
    yield from SPR
    yield from FPR


def _zeros(count: int):
    return field(default_factory=lambda: [0] * count)


@dataclass
class User:
    """User level registers."""

    gpr: list[int] = _zeros(32)
    fpr: list[list[float]] = field(
        default_factory=lambda: [[0.0, 0.0] for _ in range(32)]
    )
    cr: CondReg = field(default_factory=CondReg)
    fpscr: int = 0
    xer: XerReg = field(default_factory=XerReg)
    lr: int = 0
    ctr: int = 0


@dataclass
class MemoryManagement:
    """Memory management registers: BATs, segment registers and SDR1."""

    ibat: list[Bat] = field(default_factory=lambda: [Bat() for _ in range(4)])
    dbat: list[Bat] = field(default_factory=lambda: [Bat() for _ in range(4)])
    sr: list[int] = _zeros(16)
    sdr1: int = 0

    def setup_default_bats(self) -> None:
        """Load the BAT values the boot code leaves behind."""
        self.ibat = [
            Bat.from_words(0x8000_1FFF, 0x0000_0002),
            Bat.from_words(0x0000_0000, 0x0000_0000),
            Bat.from_words(0x0000_0000, 0x0000_0000),
            Bat.from_words(0xFFF0_001F, 0xFFF0_0001),
        ]
        self.dbat = [
            Bat.from_words(0x8000_1FFF, 0x0000_0002),
            Bat.from_words(0xC000_1FFF, 0x0000_002A),
            Bat.from_words(0x0000_0000, 0x0000_0000),
            Bat.from_words(0xFFF0_001F, 0xFFF0_0001),
        ]


@dataclass
class ExceptionHandling:
    """Exception handling registers."""

    dar: int = 0
    dsisr: int = 0
    sprg: list[int] = _zeros(4)
    srr: list[int] = _zeros(2)


@dataclass
class Configuration:
    """Configuration registers: MSR and HID0-2."""

    msr: MachineState = field(default_factory=MachineState)
    hid: list[int] = _zeros(3)


@dataclass
class Miscellaneous:
    """Time base, decrementer and L2 control."""

    tb: int = 0
    dec: int = 0
    l2cr: int = 0


@dataclass
class PerformanceMonitor:
    """Performance counters and monitor control registers."""

    counters: list[int] = _zeros(4)
    control: list[int] = _zeros(2)


@dataclass
class Supervisor:
    """Supervisor level registers."""

    config: Configuration = field(default_factory=Configuration)
    memory: MemoryManagement = field(default_factory=MemoryManagement)
    exception: ExceptionHandling = field(default_factory=ExceptionHandling)
    gq: list[QuantReg] = field(default_factory=lambda: [QuantReg() for _ in range(8)])
    performance: PerformanceMonitor = field(default_factory=PerformanceMonitor)
    misc: Miscellaneous = field(default_factory=Miscellaneous)


@dataclass
class Registers:
    """All the registers of the CPU."""

    pc: Address = field(default_factory=Address)
    user: User = field(default_factory=User)
    supervisor: Supervisor = field(default_factory=Supervisor)

    def raise_exception(self, exception: ExceptionKind) -> None:
        """Take an exception: save state into SRR0/SRR1 and jump to its vector."""
        exception = ExceptionKind(exception)
        handling = self.supervisor.exception
        msr = self.supervisor.config.msr

        srr0 = self.pc.value
        if exception.srr0_skip():
            srr0 = (srr0 + 4) & _MASK32
        handling.srr[0] = srr0

        srr1 = handling.srr[1] & ~MSR_TO_SRR1_MASK & _MASK32
        srr1 |= msr.to_bits() & MSR_TO_SRR1_MASK
        srr1 &= ~SPECIAL_SRR1_BITS_MASK & _MASK32
        handling.srr[1] = srr1

        msr.enter_exception_mode()

        base = _HIGH_VECTOR_BASE if msr.exception_prefix else 0
        self.pc = Address(base | int(exception))
import pytest
from hypothesis import given
from hypothesis import strategies as st

from gekkotools.address import Address
from gekkotools.arch import (
    MSR_TO_SRR1_MASK,
    SRR1_TO_MSR_MASK,
    Bat,
    Cond,
    CondReg,
    ExceptionKind,
    MachineState,
    QuantizedType,
    QuantReg,
    XerReg,
)

u32 = st.integers(min_value=0, max_value=0xFFFF_FFFF)
u64 = st.integers(min_value=0, max_value=0xFFFF_FFFF_FFFF_FFFF)

IBAT0_WORDS = (0x8000_1FFF, 0x0000_0002)
DBAT1_WORDS = (0xC000_1FFF, 0x0000_002A)


def default_ibat0():
    return Bat.from_words(*IBAT0_WORDS)


def default_dbat1():
    return Bat.from_words(*DBAT1_WORDS)


@pytest.mark.parametrize(
    "kind, expected",
    [
        (ExceptionKind.RESET, False),
        (ExceptionKind.MACHINE_CHECK, False),
        (ExceptionKind.INTERRUPT, False),
        (ExceptionKind.DECREMENTER, False),
        (ExceptionKind.DSI, True),
        (ExceptionKind.SYSCALL, True),
        (ExceptionKind.PROGRAM, True),
        (ExceptionKind.BREAKPOINT, True),
    ],
)
def test_srr0_skip(kind, expected):
    assert kind.srr0_skip() is expected


@pytest.mark.parametrize("cls", [CondReg, MachineState, XerReg, QuantReg])
@given(bits=u32)
def test_32bit_round_trip(cls, bits):
    assert cls.from_bits(bits).to_bits() == bits


@given(bits=u64)
def test_bat_round_trip(bits):
    assert Bat.from_bits(bits).to_bits() == bits


@given(bits=st.integers(min_value=0, max_value=15))
def test_cond_round_trip(bits):
    cond = Cond.from_bits(bits)
    assert cond.to_bits() == bits
    assert Cond(ov=cond.ov, eq=cond.eq, gt=cond.gt, lt=cond.lt) == cond


def test_cond_out_of_range():
    with pytest.raises(ValueError):
        Cond.from_bits(16)


def test_unknown_field_rejected():
    with pytest.raises(TypeError):
        Cond(zero=True)


def test_field_value_too_wide():
    with pytest.raises(ValueError):
        XerReg(byte_count=128)
    with pytest.raises(ValueError):
        QuantReg(store_scale=64)


@given(bits=u32, index=st.integers(min_value=0, max_value=7))
def test_condreg_fields_partition_bits(bits, index):
    cr = CondReg.from_bits(bits)
    assert len(cr.fields) == 8
    total = sum(cond.to_bits() << (4 * i) for i, cond in enumerate(cr.fields))
    assert total == bits
    cond = cr[index]
    cr[index] = Cond()
    cr[index] = cond
    assert cr.to_bits() == bits


def test_condreg_set_field_only_touches_that_field():
    cr = CondReg()
    cr[3] = Cond(lt=True, eq=True)
    assert cr[3] == Cond(lt=True, eq=True)
    assert all(cr[i] == Cond() for i in range(8) if i != 3)


def test_condreg_index_out_of_range():
    with pytest.raises(IndexError):
        CondReg()[8]


def test_machine_state_default():
    msr = MachineState()
    assert msr.exception_prefix is True
    assert msr.little_endian is False
    assert msr.external_interrupts is False
    assert msr == MachineState(bits=0, exception_prefix=True)


@given(bits=u32)
def test_enter_exception_mode(bits):
    msr = MachineState.from_bits(bits)
    prev = msr.copy()
    msr.enter_exception_mode()
    assert msr.little_endian == prev.exception_little_endian
    assert msr.exception_little_endian == prev.exception_little_endian
    assert msr.exception_prefix == prev.exception_prefix
    assert msr.machine_check == prev.machine_check
    assert msr.external_interrupts is False
    assert msr.data_addr_translation is False
    assert msr.instr_addr_translation is False
    assert msr.float_available is False


def test_field_assignment_updates_bits():
    msr = MachineState.from_bits(0)
    msr.external_interrupts = True
    assert MachineState.from_bits(msr.to_bits()).external_interrupts is True
    assert msr.to_bits() & MSR_TO_SRR1_MASK == msr.to_bits()
    assert msr.to_bits() & SRR1_TO_MSR_MASK == msr.to_bits()


def test_quant_reg_types():
    gqr = QuantReg(load_type=QuantizedType.U8, store_type=QuantizedType.I16, load_scale=5)
    again = QuantReg.from_bits(gqr.to_bits())
    assert again.load_type is QuantizedType.U8
    assert again.store_type is QuantizedType.I16
    assert again.load_scale == 5
    assert again.store_scale == 0


def test_bat_from_words():
    bat = default_ibat0()
    assert bat.to_bits() >> 32 == 0x8000_1FFF
    assert bat.to_bits() & 0xFFFF_FFFF == 0x0000_0002
    with pytest.raises(ValueError):
        Bat.from_words(1 << 32, 0)


def test_default_ibat_region():
    bat = default_ibat0()
    assert bat.start() == 0x8000_0000
    assert bat.physical_start() == 0
    assert bat.block_length() == 0x1000_0000
    assert bat.contains(bat.start())
    assert bat.contains(bat.end())
    assert not bat.contains(bat.end() + 1)
    assert not bat.contains(bat.start() - 1)


def test_block_length_doubles_per_mask_bit():
    assert Bat(block_length_mask=1).block_length() == 2 * Bat().block_length()
    assert Bat(block_length_mask=3).block_length() == 4 * Bat().block_length()


@given(bits=u64)
def test_bat_region_invariants(bits):
    bat = Bat.from_bits(bits)
    assert bat.end() - bat.start().value == bat.block_length() - 1
    assert bat.physical_end() - bat.physical_start().value == bat.block_length() - 1
    assert bat.start().value & (bat.block_length_mask << 17) == 0
    assert bat.contains(bat.start())


@pytest.mark.parametrize("words", [IBAT0_WORDS, DBAT1_WORDS])
@given(offset=st.integers(min_value=0, max_value=0x0FFF_FFFF))
def test_translate_maps_region_linearly(words, offset):
    bat = Bat.from_words(*words)
    assert bat.translate(bat.start() + offset) == bat.physical_start() + offset


def test_translate_accepts_int_and_address():
    bat = default_dbat1()
    start = bat.start()
    assert bat.translate(start) == bat.translate(start.value)
    assert bat.translate(start) == bat.physical_start()
    assert isinstance(bat.translate(start), Address) and bat.contains(start.value)
import pytest
from hypothesis import given, strategies as st

from gekkotools.address import Address

u32 = st.integers(min_value=0, max_value=0xFFFF_FFFF)


def test_display_format():
    assert str(Address(0x8000_3100)) == "0x8000_3100"
    assert repr(Address(0x1)) == "0x0000_0001"


def test_add_wraps_around():
    assert Address(0xFFFF_FFFF) + 1 == Address(0)


def test_sub_wraps_around():
    assert Address(0) - 1 == 0xFFFF_FFFF


def test_add_negative_is_subtraction():
    assert Address(0x100) + (-4) == Address(0x100) - 4


def test_equality_with_int():
    assert Address(42) == 42
    assert hash(Address(42)) == hash(42)


def test_ordering():
    assert Address(1) < Address(2)
    assert sorted([Address(3), Address(1), Address(2)]) == [Address(1), Address(2), Address(3)]


def test_int_conversion():
    assert int(Address(0x1234)) == 0x1234


def test_is_aligned():
    assert Address(0x100).is_aligned(4)
    assert not Address(0x102).is_aligned(4)
    assert Address(0x102).is_aligned(2)


def test_is_aligned_zero():
    assert Address(0).is_aligned(0)
    assert not Address(4).is_aligned(0)


@pytest.mark.parametrize("value", [-1, 0x1_0000_0000])
def test_out_of_range(value):
    with pytest.raises(ValueError):
        Address(value)


def test_rejects_non_int():
    with pytest.raises(TypeError):
        Address("0x100")


def test_add_rejects_non_int():
    with pytest.raises(TypeError):
        Address(0) + 1.5


@given(u32, st.integers(min_value=-(2**31), max_value=2**32 - 1))
def test_add_sub_round_trip(value, delta):
    addr = Address(value)
    assert (addr + delta) - delta == addr


@given(u32)
def test_str_parses_back(value):
    text = str(Address(value)).replace("_", "")
    assert int(text, 16) == value
import pytest

from elite_rtsi.utils import EliteError, ErrorCode, pack, split_string, unpack


def test_split_string_single_char():
    assert split_string("a,b,c", ",") == ["a", "b", "c"]


def test_split_string_multi_char_delimiter():
    assert split_string("x::y", "::") == ["x", "y"]


def test_split_string_empty_text():
    assert split_string("", ",") == []


def test_split_string_without_delimiter_present():
    assert split_string("DOUBLE", ",") == ["DOUBLE"]


def test_pack_is_big_endian():
    assert pack("H", 0x1234) == b"\x12\x34"


@pytest.mark.parametrize(
    "kind, value",
    [
        ("?", True),
        ("B", 200),
        ("H", 65535),
        ("I", 4000000000),
        ("Q", 2**63 + 5),
        ("i", -123456),
        ("d", 3.25),
        ("3d", [1.0, -2.0, 0.5]),
        ("6i", [1, -2, 3, -4, 5, -6]),
        ("6I", [1, 2, 3, 4, 5, 6]),
    ],
)
def test_pack_unpack_round_trip(kind, value):
    data = pack(kind, value)
    result, offset = unpack(kind, data, 0)
    assert result == value
    assert offset == len(data)


def test_unpack_advances_offset():
    data = pack("I", 7) + pack("d", 2.5)
    first, offset = unpack("I", data, 0)
    second, end = unpack("d", data, offset)
    assert first == 7
    assert second == 2.5
    assert end == len(data)


def test_unpack_vector_returns_list():
    values = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    result, _ = unpack("6d", pack("6d", values))
    assert result == values


def test_unpack_short_data_raises():
    with pytest.raises(ValueError):
        unpack("d", b"\x00\x01", 0)


def test_pack_wrong_item_count_raises():
    with pytest.raises(ValueError):
        pack("3d", [1.0, 2.0])


def test_elite_error_carries_code():
    err = EliteError(ErrorCode.SOCKET_FAIL, "broken pipe")
    assert err.code is ErrorCode.SOCKET_FAIL
    assert "broken pipe" in str(err)
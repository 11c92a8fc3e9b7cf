import pytest

from elite_rtsi.datatypes import (
    JointMode,
    RobotMode,
    RtsiType,
    TaskStatus,
)
from elite_rtsi.utils import EliteError, ErrorCode, pack, unpack


def test_from_name_known():
    assert RtsiType.from_name("VECTOR6D") is RtsiType.VECTOR6D
    assert RtsiType.from_name("UINT32") is RtsiType.UINT32


def test_from_name_unknown_raises():
    with pytest.raises(EliteError) as info:
        RtsiType.from_name("STRING")
    assert info.value.code is ErrorCode.RTSI_UNKNOWN_VARIABLE_TYPE
    assert "STRING" in str(info.value)


def test_vector_defaults_have_right_length():
    assert RtsiType.VECTOR6D.default() == [0.0] * 6
    assert RtsiType.VECTOR3D.default() == [0.0] * 3
    assert RtsiType.VECTOR6INT32.default() == [0] * 6


def test_scalar_defaults_are_zero():
    assert RtsiType.BOOL.default() is False
    assert RtsiType.DOUBLE.default() == 0.0
    assert RtsiType.UINT64.default() == 0


def test_default_is_fresh_each_call():
    first = RtsiType.VECTOR6D.default()
    first[0] = 9.0
    assert RtsiType.VECTOR6D.default()[0] == 0.0


@pytest.mark.parametrize("kind", list(RtsiType))
def test_default_round_trips_through_wire_format(kind):
    data = pack(kind.fmt, kind.default())
    assert len(data) == kind.size
    value, offset = unpack(kind.fmt, data, 0)
    assert value == kind.default()
    assert offset == kind.size


def test_wire_integers_map_to_enums():
    assert RobotMode(7) is RobotMode.RUNNING
    assert JointMode(253) is JointMode.MODE_RUNNING
    assert TaskStatus(2) is TaskStatus.PAUSED
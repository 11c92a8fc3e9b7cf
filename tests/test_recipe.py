import struct

import pytest

from elite_rtsi.datatypes import RtsiType
from elite_rtsi.recipe import RtsiRecipe
from elite_rtsi.utils import EliteError, ErrorCode


def _message(recipe_id, payload, kind=79):
    return struct.pack(">HBB", 4 + len(payload), kind, recipe_id) + payload


def _setup(names, types, recipe_id=1):
    recipe = RtsiRecipe(names)
    recipe.parse_type_package(_message(recipe_id, ",".join(types).encode()))
    return recipe


def test_parse_type_package_sets_id_and_defaults():
    recipe = _setup(["timestamp", "actual_joint_positions"], ["DOUBLE", "VECTOR6D"], recipe_id=3)
    assert recipe.id == 3
    assert recipe.types == {"timestamp": RtsiType.DOUBLE, "actual_joint_positions": RtsiType.VECTOR6D}
    assert recipe.get_value("timestamp") == 0.0
    assert recipe.get_value("actual_joint_positions") == [0.0] * 6


def test_unknown_type_raises():
    recipe = RtsiRecipe(["foo"])
    with pytest.raises(EliteError) as info:
        recipe.parse_type_package(_message(1, b"NOT_FOUND"))
    assert info.value.code is ErrorCode.RTSI_UNKNOWN_VARIABLE_TYPE
    assert '"foo"' in info.value.message


def test_type_count_mismatch_raises():
    recipe = RtsiRecipe(["a", "b"])
    with pytest.raises(EliteError) as info:
        recipe.parse_type_package(_message(1, b"DOUBLE"))
    assert info.value.code is ErrorCode.RTSI_RECIPE_PARSER_FAIL


def test_parse_data_package_decodes_values():
    recipe = _setup(["t", "mode", "flag", "q"], ["DOUBLE", "INT32", "BOOL", "VECTOR3D"], recipe_id=2)
    payload = struct.pack(">di?3d", 1.5, -4, True, 0.25, 0.5, 0.75)
    assert recipe.parse_data_package(_message(2, payload)) is True
    assert recipe.get_value("t") == 1.5
    assert recipe.get_value("mode") == -4
    assert recipe.get_value("flag") is True
    assert recipe.get_value("q") == [0.25, 0.5, 0.75]


def test_nonzero_byte_decodes_as_true_bool():
    recipe = _setup(["flag"], ["BOOL"])
    recipe.parse_data_package(_message(1, b"\x07"))
    assert recipe.get_value("flag") is True


def test_data_package_for_other_recipe_is_ignored():
    recipe = _setup(["t"], ["DOUBLE"], recipe_id=1)
    assert recipe.parse_data_package(_message(9, struct.pack(">d", 2.0))) is False
    assert recipe.get_value("t") == 0.0


def test_short_data_package_raises():
    recipe = _setup(["t"], ["DOUBLE"])
    with pytest.raises(EliteError) as info:
        recipe.parse_data_package(_message(1, b"\x00\x01"))
    assert info.value.code is ErrorCode.RTSI_RECIPE_PARSER_FAIL


def test_pack_to_bytes_wire_format():
    recipe = _setup(["speed_slider_mask", "tool_digital_output"], ["UINT16", "UINT8"], recipe_id=5)
    recipe.set_value("speed_slider_mask", 0x0102)
    recipe.set_value("tool_digital_output", 0x0A)
    assert recipe.pack_to_bytes() == b"\x05\x01\x02\x0a"


def test_pack_then_parse_round_trip():
    names = ["a", "b", "c", "d", "e"]
    types = ["UINT64", "VECTOR6INT32", "VECTOR6UINT32", "BOOL", "UINT32"]
    source = _setup(names, types, recipe_id=4)
    target = _setup(names, types, recipe_id=4)
    values = {"a": 2**40, "b": [-1, 2, -3, 4, -5, 6], "c": [1, 2, 3, 4, 5, 6], "d": True, "e": 99}
    for name, value in values.items():
        source.set_value(name, value)
    packed = source.pack_to_bytes()
    message = struct.pack(">HB", 3 + len(packed), 85) + packed
    assert target.parse_data_package(message) is True
    assert {name: target.get_value(name) for name in names} == values


def test_pack_without_types_raises():
    with pytest.raises(EliteError) as info:
        RtsiRecipe(["a"]).pack_to_bytes()
    assert info.value.code is ErrorCode.RTSI_RECIPE_PARSER_FAIL


def test_unknown_name_raises_key_error():
    recipe = _setup(["t"], ["DOUBLE"])
    with pytest.raises(KeyError):
        recipe.get_value("missing")
    with pytest.raises(KeyError):
        recipe.set_value("missing", 1.0)


def test_set_value_rejects_value_that_does_not_fit():
    recipe = _setup(["mask", "q"], ["UINT8", "VECTOR6D"])
    with pytest.raises(ValueError):
        recipe.set_value("mask", 300)
    with pytest.raises(ValueError):
        recipe.set_value("q", [1.0, 2.0])
    assert recipe.get_value("mask") == 0


def test_get_value_returns_copy_of_vectors():
    recipe = _setup(["q"], ["VECTOR3D"])
    recipe.set_value("q", (1.0, 2.0, 3.0))
    value = recipe.get_value("q")
    value[0] = 100.0
    assert recipe.get_value("q") == [1.0, 2.0, 3.0]
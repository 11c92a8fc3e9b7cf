import pytest

from elite_rtsi.version import SDK_VERSION_INFO, VersionInfo


def test_from_string_parses_all_fields():
    assert VersionInfo.from_string("2.14.5.1") == VersionInfo(2, 14, 5, 1)


def test_to_string_round_trip():
    version = VersionInfo(3, 0, 12, 7)
    assert VersionInfo.from_string(version.to_string()) == version
    assert str(version) == version.to_string()


def test_missing_trailing_fields_are_zero():
    assert VersionInfo.from_string("2.3") == VersionInfo(2, 3, 0, 0)


@pytest.mark.parametrize("text", ["", "a.b", "1.2.3.4.5", "1.-2.3.4", "1..2"])
def test_invalid_strings_raise(text):
    with pytest.raises(ValueError):
        VersionInfo.from_string(text)


def test_ordering_is_lexicographic():
    assert VersionInfo(2, 0, 0, 0) > VersionInfo(1, 99, 99, 99)
    assert VersionInfo(1, 2, 3, 4) < VersionInfo(1, 2, 3, 5)
    assert VersionInfo(1, 2, 3, 4) <= VersionInfo(1, 2, 3, 4)
    assert VersionInfo(1, 3, 0, 0) >= VersionInfo(1, 2, 9, 9)


def test_sdk_version_matches_project():
    assert SDK_VERSION_INFO.to_string() == "1.2.0.0"
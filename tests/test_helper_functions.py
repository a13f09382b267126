import pytest

from mapping_validator.helper_functions import (
    _str_to_bool,
    _str_to_float,
    _str_to_int64,
    truncate_preview,
)

pytestmark = pytest.mark.unit


def test_truncate_preview():
    assert truncate_preview("short") == "short"
    assert truncate_preview("x" * 100) == "x" * 100
    assert truncate_preview("x" * 101) == "x" * 97 + "..."
    assert len(truncate_preview("x" * 300)) == 100
    assert truncate_preview("abcdef", limit=5) == "ab..."


@pytest.mark.parametrize(
    "value,expected",
    [
        ("true", True),
        (" TRUE ", True),
        ("1", True),
        ("false", False),
        ("0", False),
        ("yes", None),
        ("", None),
        (True, True),
    ],
)
def test_str_to_bool(value, expected):
    assert _str_to_bool(value) is expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("42", 42),
        ("-7", -7),
        ("+3", 3),
        (" 12 ", 12),
        ("9223372036854775807", 2**63 - 1),
        ("9223372036854775808", None),
        ("1.0", None),
        ("abc", None),
        ("\u0661\u0662", None),
        ("", None),
    ],
)
def test_str_to_int64(value, expected):
    assert _str_to_int64(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("1.5", 1.5),
        ("-2", -2.0),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("1,5", None),
        ("x", None),
        ("\u0661.\u0662", None),
    ],
)
def test_str_to_float(value, expected):
    assert _str_to_float(value) == expected

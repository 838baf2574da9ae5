import pytest

from filering.config_manager.helpers import parse_bytes


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0b", 0),
        ("1", 1),
        ("4096", 4096),
        ("4k", 4 * 1024),
        ("4kb", 4 * 1024),
        ("16mb", 16 * 1024 * 1024),
        ("16m", 16777216),
        ("1gb", 1024 * 1024 * 1024),
        ("  8KB ", 8 * 1024),
        (32768, 32768),
    ],
)
def test_parse_bytes_valid(value: str | int, expected: int) -> None:
    assert parse_bytes(value) == expected


@pytest.mark.parametrize("value", ["", "   ", "nope", "kb", "10tb", "1.5mb"])
def test_parse_bytes_invalid(value: str) -> None:
    with pytest.raises(ValueError):
        parse_bytes(value)

"""Helpers for parsing byte-sized configuration values."""

_UNIT_MULTIPLIERS = {
    "": 1,
    "b": 1,
    "k": 1024,
    "kb": 1024,
    "m": 1024**2,
    "mb": 1024**2,
    "g": 1024**3,
    "gb": 1024**3,
}


def parse_bytes(value: int | str) -> int:
    """Parse a byte quantity from an integer or unit-suffixed string.

    Supported string units (case-insensitive):
        b, k, kb, m, mb, g, gb

    Args:
        value: Raw byte value as an ``int`` or a string such as ``"16mb"``.

    Returns:
        The parsed value in bytes.

    Raises:
        ValueError: If the input cannot be parsed or contains an unknown unit.
    """
    if isinstance(value, int):
        return value

    text = str(value).strip().lower()
    digits = text.rstrip("bkmg")
    unit = text[len(digits) :]

    if not digits.isdigit():
        raise ValueError(f"Invalid byte value: {value!r}")
    if unit not in _UNIT_MULTIPLIERS:
        raise ValueError(f"Unknown byte unit in value: {value!r}")

    return int(digits) * _UNIT_MULTIPLIERS[unit]

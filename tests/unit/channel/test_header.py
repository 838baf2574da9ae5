"""Tests for the block header codec."""

from __future__ import annotations

import struct

import pytest

from filering.channel.header import (
    FREE_HEADER,
    BlockHeader,
    decode_header,
    encode_header,
)
from filering.exceptions import ConsistencyFault


def test_encode_is_big_endian() -> None:
    """Serial comes first, both fields network byte order."""
    assert encode_header(1, 16) == b"\x00\x01\x00\x10"
    assert encode_header(0x0102, 0x0304) == struct.pack("!HH", 0x0102, 0x0304)


def test_free_header_is_all_zero() -> None:
    assert FREE_HEADER == b"\x00\x00\x00\x00"
    assert decode_header(FREE_HEADER).is_free


def test_decode_returns_fields() -> None:
    header = decode_header(b"\x00\x02\x00\x08")

    assert header == BlockHeader(serial=2, used=8)
    assert not header.is_free


def test_header_with_zero_serial_but_data_is_not_free() -> None:
    """A wrapped serial of 0 still carries a non-zero used field."""
    assert not BlockHeader(serial=0, used=5).is_free


@pytest.mark.parametrize("data", [b"", b"\x00\x01", b"\x00\x01\x00\x10\x00"])
def test_decode_rejects_wrong_length(data: bytes) -> None:
    with pytest.raises(ConsistencyFault):
        decode_header(data)


def test_encode_rejects_values_outside_16_bits() -> None:
    with pytest.raises(struct.error):
        encode_header(0x10000, 4)

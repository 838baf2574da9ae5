"""Tests for ring geometry, cursors and the backing file wrapper."""

from __future__ import annotations

from pathlib import Path

import pytest

from filering.channel.header import FREE_HEADER, encode_header
from filering.channel.layout import BlockFile, Cursor, RingLayout
from filering.config_manager.channel_config import ChannelConfig
from filering.exceptions import ConfigurationMismatch, ConsistencyFault


def test_block_offsets(config: ChannelConfig) -> None:
    layout = RingLayout(config)

    assert layout.block_count == 4
    assert layout.payload_capacity == 4092
    assert layout.block_offset(0) == 0
    assert layout.block_offset(3) == 3 * 4096


@pytest.mark.parametrize("block", [-1, 4, 100])
def test_block_offset_outside_ring_is_a_fault(
    config: ChannelConfig, block: int
) -> None:
    layout = RingLayout(config)

    with pytest.raises(ConsistencyFault):
        layout.block_offset(block)


def test_advance_wraps_after_last_block(config: ChannelConfig) -> None:
    layout = RingLayout(config)

    assert [layout.advance(i) for i in range(4)] == [1, 2, 3, 0]


def test_layout_rejects_uneven_file_size() -> None:
    with pytest.raises(ConfigurationMismatch):
        RingLayout(ChannelConfig(file_size=4096 * 3 + 1))


def test_cursor_starts_after_header() -> None:
    cursor = Cursor()

    assert (cursor.block, cursor.position, cursor.serial) == (0, 4, 1)


def test_cursor_next_block_wraps_and_keeps_counting(config: ChannelConfig) -> None:
    """Serial keeps increasing when the block index wraps to 0."""
    layout = RingLayout(config)
    cursor = Cursor(block=3, position=4096, serial=4)

    cursor.next_block(layout)

    assert (cursor.block, cursor.position, cursor.serial) == (0, 4, 5)


def test_cursor_serial_wraps_at_16_bits(config: ChannelConfig) -> None:
    layout = RingLayout(config)
    cursor = Cursor(block=1, position=4096, serial=0xFFFF)

    cursor.next_block(layout)

    assert cursor.serial == 0


def test_block_file_reads_and_writes_headers(
    channel_path: Path, config: ChannelConfig
) -> None:
    with BlockFile(channel_path, RingLayout(config)) as block_file:
        assert block_file.is_free(2)

        block_file.write_header(2, encode_header(7, 20))

        assert block_file.read_header(2) == encode_header(7, 20)
        assert not block_file.is_free(2)

    raw = channel_path.read_bytes()
    assert raw[2 * 4096 : 2 * 4096 + 4] == b"\x00\x07\x00\x14"


def test_block_file_zero_fill(channel_path: Path, config: ChannelConfig) -> None:
    channel_path.write_bytes(b"\xff" * config.file_size)

    with BlockFile(channel_path, RingLayout(config)) as block_file:
        block_file.zero_fill()
        assert all(block_file.read_header(i) == FREE_HEADER for i in range(4))

    assert channel_path.read_bytes() == bytes(config.file_size)


def test_block_file_rejects_wrong_file_size(
    tmp_path: Path, config: ChannelConfig
) -> None:
    path = tmp_path / "short.bin"
    path.write_bytes(bytes(4096))

    with pytest.raises(ConfigurationMismatch, match="expected 16384"):
        BlockFile(path, RingLayout(config))


def test_block_file_missing_file_raises_os_error(
    tmp_path: Path, config: ChannelConfig
) -> None:
    with pytest.raises(FileNotFoundError):
        BlockFile(tmp_path / "missing.bin", RingLayout(config))


def test_block_file_close_is_idempotent(
    channel_path: Path, config: ChannelConfig
) -> None:
    block_file = BlockFile(channel_path, RingLayout(config))
    block_file.close()
    block_file.close()

    with pytest.raises(ValueError, match="closed"):
        block_file.read_header(0)

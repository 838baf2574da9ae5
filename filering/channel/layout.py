"""Block geometry of the ring and positional access to its backing file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from filering.channel.header import FREE_HEADER
from filering.config_manager.channel_config import ChannelConfig
from filering.const import (
    HEADER_SIZE,
    INITIAL_BLOCK,
    INITIAL_POSITION,
    INITIAL_SERIAL,
    SERIAL_MODULUS,
)
from filering.exceptions import ConfigurationMismatch, ConsistencyFault

logger = logging.getLogger(__name__)


class RingLayout:
    """Maps block indices to byte ranges in the backing file.

    Block ``i`` occupies ``[i * block_size, (i + 1) * block_size)``.
    """

    def __init__(self, config: ChannelConfig) -> None:
        """Initialize the layout, rejecting geometry that cannot work."""
        config.validate_geometry()
        self.block_size = config.block_size
        self.block_count = config.block_count
        self.payload_capacity = self.block_size - HEADER_SIZE

    def block_offset(self, block: int) -> int:
        """Return the file offset of the first byte of ``block``."""
        if not 0 <= block < self.block_count:
            logger.error(
                "Block %d outside ring of %d blocks", block, self.block_count
            )
            raise ConsistencyFault(
                f"Block {block} outside ring of {self.block_count} blocks"
            )
        return block * self.block_size

    def advance(self, block: int) -> int:
        """Return the index of the block after ``block``, wrapping at the end."""
        return (block + 1) % self.block_count


@dataclass
class Cursor:
    """Position of one channel end within the ring."""

    block: int = INITIAL_BLOCK
    position: int = INITIAL_POSITION
    serial: int = INITIAL_SERIAL

    def next_block(self, layout: RingLayout) -> None:
        """Move to the start of the following block's payload."""
        self.block = layout.advance(self.block)
        self.position = INITIAL_POSITION
        self.serial = (self.serial + 1) % SERIAL_MODULUS


class BlockFile:
    """Unbuffered positional I/O on the backing file.

    Every write is issued straight to the file descriptor, so writes reach
    the file in the order they are made. ``OSError`` is never caught here.
    """

    def __init__(self, path: str | Path, layout: RingLayout) -> None:
        """Open an existing backing file of exactly the configured size.

        Raises:
            ConfigurationMismatch: if the file size differs from the layout.
            OSError: if the file cannot be opened.
        """
        self.path = Path(path)
        self.layout = layout
        self._fd: int | None = os.open(self.path, os.O_RDWR)
        expected_size = layout.block_size * layout.block_count
        actual_size = os.fstat(self._fd).st_size
        if actual_size != expected_size:
            self.close()
            raise ConfigurationMismatch(
                f"{self.path} is {actual_size} bytes, expected {expected_size}"
            )
        logger.debug("Opened %s (%d bytes)", self.path, actual_size)

    @property
    def fd(self) -> int:
        """Return the open file descriptor."""
        if self._fd is None:
            raise ValueError(f"I/O operation on closed channel file {self.path}")
        return self._fd

    def read_at(self, offset: int, length: int) -> bytes:
        """Read ``length`` bytes starting at ``offset``."""
        return os.pread(self.fd, length, offset)

    def write_at(self, offset: int, data: bytes) -> None:
        """Write all of ``data`` starting at ``offset``."""
        view = memoryview(data)
        while view:
            written = os.pwrite(self.fd, view, offset)
            view = view[written:]
            offset += written

    def read_header(self, block: int) -> bytes:
        """Return the raw header bytes of ``block``."""
        data = self.read_at(self.layout.block_offset(block), HEADER_SIZE)
        if len(data) != HEADER_SIZE:
            logger.error("Short header read at block %d: %r", block, data)
            raise ConsistencyFault(f"Short header read at block {block}")
        return data

    def write_header(self, block: int, header: bytes) -> None:
        """Overwrite the header of ``block``."""
        self.write_at(self.layout.block_offset(block), header)

    def zero_fill(self) -> None:
        """Overwrite every block with zeros so all of them read as FREE."""
        empty_block = bytes(self.layout.block_size)
        for block in range(self.layout.block_count):
            self.write_at(self.layout.block_offset(block), empty_block)
        logger.debug(
            "Zeroed %d blocks in %s", self.layout.block_count, self.path
        )

    def is_free(self, block: int) -> bool:
        """Whether the header of ``block`` is the FREE sentinel."""
        return self.read_header(block) == FREE_HEADER

    def close(self) -> None:
        """Close the file descriptor. Safe to call more than once."""
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> BlockFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

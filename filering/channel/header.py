"""Encoding and decoding of the 4-byte block header."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from filering.const import HEADER_FORMAT, HEADER_SIZE
from filering.exceptions import ConsistencyFault

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockHeader:
    """Header stored at the start of every block.

    Attributes:
        serial: generation number the sender gave the block when it started
            writing into it.
        used: offset of the end of valid data in the block, header included.
    """

    serial: int
    used: int

    @property
    def is_free(self) -> bool:
        """Whether the block may be (re)written by the sender."""
        return self.serial == 0 and self.used == 0


def encode_header(serial: int, used: int) -> bytes:
    """Pack a header as two big-endian unsigned 16-bit integers.

    Args:
        serial: block generation number.
        used: valid byte offset within the block, including the header.

    Returns:
        The 4 header bytes.
    """
    return struct.pack(HEADER_FORMAT, serial, used)


def decode_header(data: bytes) -> BlockHeader:
    """Unpack header bytes read from the start of a block.

    Raises:
        ConsistencyFault: if ``data`` is not exactly one header long.
    """
    if len(data) != HEADER_SIZE:
        logger.error("Header must be %d bytes, got %d", HEADER_SIZE, len(data))
        raise ConsistencyFault(
            f"Header must be {HEADER_SIZE} bytes, got {len(data)}"
        )
    serial, used = struct.unpack(HEADER_FORMAT, data)
    return BlockHeader(serial=serial, used=used)


FREE_HEADER = encode_header(0, 0)

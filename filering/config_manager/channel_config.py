"""Pydantic model for the geometry and timing shared by both channel ends."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, PositiveFloat, PositiveInt

from filering.const import (
    BLOCK_SIZE,
    DEFAULT_FILE_SIZE,
    DEFAULT_POLL_INTERVAL,
    HEADER_SIZE,
    MAX_HEADER_FIELD,
)
from filering.exceptions import ConfigurationMismatch

logger = logging.getLogger(__name__)


class ChannelConfig(BaseModel):
    """Configuration both the sender and the receiver must agree on.

    Nothing in the file records these values, so each side has to be opened
    with an equal configuration.

    Attributes:
        file_size: size of the backing file in bytes.
        block_size: size of each ring slot in bytes, header included.
        poll_interval: seconds to sleep between header polls while waiting.
    """

    file_size: PositiveInt = DEFAULT_FILE_SIZE
    block_size: PositiveInt = BLOCK_SIZE
    poll_interval: PositiveFloat = Field(default=DEFAULT_POLL_INTERVAL)

    @property
    def block_count(self) -> int:
        """Number of blocks in the ring."""
        return self.file_size // self.block_size

    def validate_geometry(self) -> None:
        """Check that the file can be split into usable blocks.

        Raises:
            ConfigurationMismatch: if the block size cannot hold a header and
                payload, does not fit the 16-bit ``used`` field, or does not
                divide the file size evenly.
        """
        if self.block_size <= HEADER_SIZE:
            raise ConfigurationMismatch(
                f"block_size {self.block_size} leaves no room for payload"
            )
        if self.block_size > MAX_HEADER_FIELD:
            raise ConfigurationMismatch(
                f"block_size {self.block_size} exceeds {MAX_HEADER_FIELD}"
            )
        if self.file_size % self.block_size != 0:
            raise ConfigurationMismatch(
                f"file_size {self.file_size} is not a multiple of "
                f"block_size {self.block_size}"
            )
        logger.debug(
            "Channel geometry: %d blocks of %d bytes",
            self.block_count,
            self.block_size,
        )

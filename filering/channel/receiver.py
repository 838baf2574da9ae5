"""Read side of the file ring channel."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from filering.channel.header import FREE_HEADER, decode_header
from filering.channel.layout import BlockFile, Cursor, RingLayout
from filering.config_manager.channel_config import ChannelConfig
from filering.const import INITIAL_POSITION, ROLLOVER_LOG_INTERVAL
from filering.exceptions import ConsistencyFault
from filering.sampled_logger import make_sampled_logger

logger = logging.getLogger(__name__)


class Receiver:
    """Reads the byte stream written by a ``Sender`` on the same file.

    - Single writer of FREE headers, which hand blocks back to the sender.
    - Never modifies the file on open.

    A block holds readable data when its header carries the serial the
    receiver expects next. The last header seen is remembered so a header
    left over from before is not mistaken for fresh data.
    """

    def __init__(self, path: str | Path, config: ChannelConfig) -> None:
        """Open the backing file without touching its contents.

        Args:
            path: path of the file the sender writes to.
            config: geometry and poll interval shared with the sender.
        """
        self.config = config
        self.layout = RingLayout(config)
        self._file = BlockFile(path, self.layout)
        self.cursor = Cursor()
        self._last_header = FREE_HEADER
        self._announced = INITIAL_POSITION
        self._log_rollover = make_sampled_logger(
            "Receiver rollover #%d into block %d (serial %d)",
            log_interval=ROLLOVER_LOG_INTERVAL,
            target_logger=logger,
        )

    def read_exact(self, num_bytes: int) -> bytes:
        """Read exactly ``num_bytes`` bytes, blocking until all have arrived.

        Args:
            num_bytes: number of bytes to return.

        Returns:
            The next ``num_bytes`` bytes of the stream.

        Raises:
            ValueError: if ``num_bytes`` is negative.
            ConsistencyFault: if the cursor would run past the block end.
        """
        if num_bytes < 0:
            raise ValueError(f"num_bytes must be non-negative, got {num_bytes}")

        buffer = bytearray()
        while len(buffer) < num_bytes:
            wanted = num_bytes - len(buffer)
            available = self._wait_for_block_to_read(wanted)
            buffer += self._block_read(min(wanted, available))
        return bytes(buffer)

    def read_available(self, max_bytes: int) -> bytes:
        """Read up to ``max_bytes`` bytes that have already been published.

        Blocks until at least one byte is available, then returns whatever is
        ready without waiting for more, following into the next blocks when
        they are already published.

        Raises:
            ValueError: if ``max_bytes`` is negative.
        """
        if max_bytes < 0:
            raise ValueError(f"max_bytes must be non-negative, got {max_bytes}")
        if max_bytes == 0:
            return b""

        self._wait_for_block_to_read(1)
        buffer = bytearray()
        while len(buffer) < max_bytes:
            available = self._bytes_available()
            if not available:
                break
            buffer += self._block_read(min(max_bytes - len(buffer), available))
        return bytes(buffer)

    read = read_available

    def close(self) -> None:
        """Close the backing file."""
        self._file.close()

    def __enter__(self) -> Receiver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _bytes_available(self) -> int:
        """Return how many announced bytes of the current block are unread.

        The header is only taken into account when it carries the expected
        serial and differs from the last header observed for this block.
        """
        raw_header = self._file.read_header(self.cursor.block)
        header = decode_header(raw_header)
        if header.serial == self.cursor.serial and raw_header != self._last_header:
            if header.used > self.layout.block_size:
                logger.error(
                    "Block %d announces %d bytes, block size is %d",
                    self.cursor.block,
                    header.used,
                    self.layout.block_size,
                )
                raise ConsistencyFault(
                    f"Block {self.cursor.block} announces {header.used} bytes"
                )
            self._last_header = raw_header
            self._announced = header.used
        return max(self._announced - self.cursor.position, 0)

    def _wait_for_block_to_read(self, minimum_available: int) -> int:
        """Poll until the current block holds ``minimum_available`` bytes.

        The minimum is capped at what is left of the block, so a request that
        spans blocks waits for the current block to fill up first.
        """
        block_space = self.layout.block_size - self.cursor.position
        minimum_available = min(minimum_available, block_space)
        available = self._bytes_available()
        while available < minimum_available:
            time.sleep(self.config.poll_interval)
            available = self._bytes_available()
        return available

    def _block_read(self, num_bytes: int) -> bytes:
        """Read bytes known to be available in the current block."""
        cursor = self.cursor
        offset = self.layout.block_offset(cursor.block) + cursor.position
        data = self._file.read_at(offset, num_bytes)
        cursor.position += len(data)
        if cursor.position > self.layout.block_size:
            logger.error(
                "Block overread: position %d in block %d of size %d",
                cursor.position,
                cursor.block,
                self.layout.block_size,
            )
            raise ConsistencyFault(
                f"Block overread: position {cursor.position} exceeds "
                f"block size {self.layout.block_size}"
            )
        if cursor.position == self.layout.block_size:
            self._next_block()
        return data

    def _next_block(self) -> None:
        """Release the finished block to the sender and move to the next one."""
        self._file.write_header(self.cursor.block, FREE_HEADER)
        self.cursor.next_block(self.layout)
        self._last_header = FREE_HEADER
        self._announced = INITIAL_POSITION
        self._log_rollover(self.cursor.block, self.cursor.serial)

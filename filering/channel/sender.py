"""Write side of the file ring channel."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from pathlib import Path

from filering.channel.header import encode_header
from filering.channel.layout import BlockFile, Cursor, RingLayout
from filering.config_manager.channel_config import ChannelConfig
from filering.const import ROLLOVER_LOG_INTERVAL, SLOW_WAIT_POLLS
from filering.exceptions import ConsistencyFault
from filering.sampled_logger import make_sampled_logger

logger = logging.getLogger(__name__)


class Sender:
    """Appends bytes to the ring, one block at a time.

    - Single writer of payload bytes and of non-FREE headers.
    - Blocks when the next block has not been released by the receiver.

    Opening a sender zero-fills the whole file, discarding anything a
    receiver has not read yet.
    """

    def __init__(self, path: str | Path, config: ChannelConfig) -> None:
        """Open the backing file and reset every block to FREE.

        Args:
            path: path of an existing file of ``config.file_size`` bytes.
            config: geometry and poll interval shared with the receiver.
        """
        self.config = config
        self.layout = RingLayout(config)
        self._file = BlockFile(path, self.layout)
        self._file.zero_fill()
        self.cursor = Cursor()
        self._log_rollover = make_sampled_logger(
            "Sender rollover #%d into block %d (serial %d)",
            log_interval=ROLLOVER_LOG_INTERVAL,
            target_logger=logger,
        )

    def write_exact(self, data: bytes | bytearray | memoryview) -> None:
        """Append all of ``data`` to the channel.

        Each chunk's payload is written before the header that announces it.
        Blocks while the ring is full.

        :param data: the bytes to send
        :raises ConsistencyFault: if the cursor would run past the block end
        """
        remaining = memoryview(data).cast("B")
        while remaining:
            space = self.layout.block_size - self.cursor.position
            chunk = remaining[:space]
            remaining = remaining[space:]
            self._block_write(chunk)

    write = write_exact

    def write_lines(self, lines: Iterable[str | bytes]) -> None:
        """Send each item terminated by a single newline.

        A newline is appended only to items that do not already end with one.
        Every item is sent with its own ``write_exact`` call.
        """
        for line in lines:
            data = line.encode("utf-8") if isinstance(line, str) else bytes(line)
            if not data.endswith(b"\n"):
                data += b"\n"
            self.write_exact(data)

    def close(self) -> None:
        """Close the backing file."""
        self._file.close()

    def __enter__(self) -> Sender:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _block_write(self, chunk: memoryview) -> None:
        """Write a chunk that fits in the current block, then its header."""
        cursor = self.cursor
        offset = self.layout.block_offset(cursor.block) + cursor.position
        self._file.write_at(offset, chunk)
        cursor.position += len(chunk)
        if cursor.position > self.layout.block_size:
            logger.error(
                "Block overwrite: position %d in block %d of size %d",
                cursor.position,
                cursor.block,
                self.layout.block_size,
            )
            raise ConsistencyFault(
                f"Block overwrite: position {cursor.position} exceeds "
                f"block size {self.layout.block_size}"
            )
        self._file.write_header(
            cursor.block, encode_header(cursor.serial, cursor.position)
        )
        if cursor.position == self.layout.block_size:
            self._next_block()

    def _next_block(self) -> None:
        """Move to the next block and wait until the receiver has freed it."""
        self.cursor.next_block(self.layout)
        self._log_rollover(self.cursor.block, self.cursor.serial)
        self._wait_for_free_block()

    def _wait_for_free_block(self) -> None:
        polls = 0
        while not self._file.is_free(self.cursor.block):
            polls += 1
            if polls == SLOW_WAIT_POLLS:
                logger.warning(
                    "Sender waiting on block %d for %.1fs; receiver is behind",
                    self.cursor.block,
                    polls * self.config.poll_interval,
                )
            time.sleep(self.config.poll_interval)

"""Constants for the file ring channel."""

import struct

BLOCK_SIZE = 4096
DEFAULT_FILE_SIZE = 16777216  # (16mb)
DEFAULT_POLL_INTERVAL = 0.2  # seconds

# serial as uint16, used as uint16 (both big-endian)
HEADER_FORMAT = "!HH"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
MAX_HEADER_FIELD = 0xFFFF
SERIAL_MODULUS = MAX_HEADER_FIELD + 1

# Cursor values both sides start from
INITIAL_BLOCK = 0
INITIAL_POSITION = HEADER_SIZE
INITIAL_SERIAL = 1

# Sender logs a warning once a backpressure wait has lasted this many polls
SLOW_WAIT_POLLS = 50
ROLLOVER_LOG_INTERVAL = 1000

ENV_PREFIX = "FILERING_"

"""Stream lines from one process to another through a shared file.

Usage:
    python examples/example_line_stream.py /tmp/channel.bin
"""

import argparse
import logging
import multiprocessing
from pathlib import Path

import filering

NUM_LINES = 20000


def receive_lines(path: str, config_json: str) -> None:
    """Read lines until the sender's final marker arrives."""
    config = filering.ChannelConfig.model_validate_json(config_json)
    received = 0
    pending = b""
    with filering.open_receiver(path, config) as receiver:
        while True:
            pending += receiver.read_available(65536)
            *lines, pending = pending.split(b"\n")
            for line in lines:
                if line == b"done":
                    print(f"Receiver got {received} lines")
                    return
                received += 1


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", type=Path)
    parser.add_argument("--poll-interval", type=float, default=0.01)
    args = parser.parse_args()

    config = filering.ConfigManager().resolve_effective_config(
        {"poll_interval": args.poll_interval}
    )
    with open(args.path, "wb") as f:
        f.truncate(config.file_size)

    # Open the sender first, it zero-fills the file.
    sender = filering.open_sender(args.path, config)
    receiver_process = multiprocessing.Process(
        target=receive_lines, args=(str(args.path), config.model_dump_json())
    )
    receiver_process.start()

    with sender:
        sender.write_lines(f"line {i}" for i in range(NUM_LINES))
        sender.write_lines(["done"])

    receiver_process.join()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    main()

"""Byte-stream channel between one sender and one receiver over a shared file."""

from __future__ import annotations

from pathlib import Path

from .channel.receiver import Receiver
from .channel.sender import Sender
from .config_manager.channel_config import ChannelConfig
from .config_manager.config import ConfigManager
from .exceptions import ConfigurationMismatch, ConsistencyFault, FileRingError

__version__ = "0.1.0"

__all__ = [
    "ChannelConfig",
    "ConfigManager",
    "ConfigurationMismatch",
    "ConsistencyFault",
    "FileRingError",
    "Receiver",
    "Sender",
    "open_receiver",
    "open_sender",
]


def _resolve(config: ChannelConfig | None) -> ChannelConfig:
    if config is not None:
        return config
    return ConfigManager().resolve_effective_config()


def open_sender(path: str | Path, config: ChannelConfig | None = None) -> Sender:
    """Open the write end of a channel, zero-filling the backing file.

    Args:
        path: existing file of ``config.file_size`` bytes.
        config: channel geometry. Resolved from defaults and the environment
            when omitted.
    """
    return Sender(path, _resolve(config))


def open_receiver(
    path: str | Path, config: ChannelConfig | None = None
) -> Receiver:
    """Open the read end of a channel without modifying the backing file.

    Args:
        path: file the sender writes to.
        config: channel geometry, equal to the sender's.
    """
    return Receiver(path, _resolve(config))

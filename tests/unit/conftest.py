"""Shared fixtures for channel tests."""

from pathlib import Path

import pytest

from filering.config_manager.channel_config import ChannelConfig

TEST_BLOCK_SIZE = 4096
TEST_BLOCK_COUNT = 4
TEST_POLL_INTERVAL = 0.01


@pytest.fixture
def config() -> ChannelConfig:
    """Small ring with real-size blocks and a fast poll."""
    return ChannelConfig(
        file_size=TEST_BLOCK_SIZE * TEST_BLOCK_COUNT,
        block_size=TEST_BLOCK_SIZE,
        poll_interval=TEST_POLL_INTERVAL,
    )


@pytest.fixture
def channel_path(tmp_path: Path, config: ChannelConfig) -> Path:
    """Zero-filled backing file sized for ``config``."""
    path = tmp_path / "channel.bin"
    path.write_bytes(bytes(config.file_size))
    return path


@pytest.fixture(autouse=True)
def clear_channel_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FILERING_* settings from the host out of the tests."""
    for name in (
        "FILERING_FILE_SIZE",
        "FILERING_BLOCK_SIZE",
        "FILERING_POLL_INTERVAL",
    ):
        monkeypatch.delenv(name, raising=False)

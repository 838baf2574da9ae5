"""Resolve channel configuration from defaults, environment, and overrides."""

from __future__ import annotations

import os
from typing import Any

from pydantic import ValidationError

from filering.config_manager.channel_config import ChannelConfig
from filering.config_manager.helpers import parse_bytes
from filering.const import ENV_PREFIX
from filering.exceptions import ConfigurationMismatch

_ENV_MAP: dict[str, str] = {
    "file_size": f"{ENV_PREFIX}FILE_SIZE",
    "block_size": f"{ENV_PREFIX}BLOCK_SIZE",
    "poll_interval": f"{ENV_PREFIX}POLL_INTERVAL",
}


class ConfigManager:
    """Build the effective channel configuration."""

    def __init__(self, base_config: ChannelConfig | None = None) -> None:
        """Initialise ConfigManager.

        Args:
            base_config: Configuration to start from. Defaults are used when
                omitted.
        """
        self.base_config = base_config or ChannelConfig()

    def _read_env_overrides(self) -> dict[str, Any]:
        """Read configuration overrides from environment variables.

        Returns:
            A dictionary of configuration field names to override values.

        Raises:
            ConfigurationMismatch: if a variable is set but cannot be parsed.
        """
        overrides: dict[str, Any] = {}

        for field_name, env_var_name in _ENV_MAP.items():
            env_value = os.getenv(env_var_name)
            if env_value is None:
                continue

            try:
                if field_name in {"file_size", "block_size"}:
                    overrides[field_name] = parse_bytes(env_value)
                else:
                    overrides[field_name] = float(env_value)
            except ValueError as exc:
                raise ConfigurationMismatch(
                    f"Invalid value for {env_var_name}: {env_value!r}"
                ) from exc

        return overrides

    def resolve_effective_config(
        self, overrides: dict[str, Any] | None = None
    ) -> ChannelConfig:
        """Resolve the effective configuration for a channel end.

        Precedence is base config, then environment, then ``overrides``.

        Args:
            overrides: Optional explicit field values.

        Returns:
            The resolved and geometry-checked ``ChannelConfig``.
        """
        merged = self.base_config.model_dump()
        merged.update(self._read_env_overrides())
        if overrides is not None:
            merged.update(overrides)

        try:
            config = ChannelConfig(**merged)
        except ValidationError as exc:
            raise ConfigurationMismatch(str(exc)) from exc

        config.validate_geometry()
        return config

"""Retrieval of dynamic configuration values from SSM Parameter Store."""

from __future__ import annotations

from typing import Any, Protocol

from .cliconfig import CliConfig


class ConfigStoreError(RuntimeError):
    """Raised when a configuration value cannot be retrieved."""


class _SsmClient(Protocol):
    def get_parameter(self, **kwargs: Any) -> dict: ...


class SsmConfigStore:
    """Reads values stored under ``/funcie/<environment>/<key>``."""

    def __init__(self, config: CliConfig, ssm_client: _SsmClient) -> None:
        self._environment = config.environment
        self._ssm = ssm_client

    def get_config_value(self, key: str) -> str:
        """Return the value stored for ``key`` in the configured environment."""
        name = f"/funcie/{self._environment}/{key}"
        try:
            response = self._ssm.get_parameter(Name=name)
            return response["Parameter"]["Value"]
        except Exception as err:
            raise ConfigStoreError(f"failed to get config key {key}: {err}") from err
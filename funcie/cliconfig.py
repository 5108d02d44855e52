"""User-supplied settings for the funcie command-line tool."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ConnectConfig:
    """Options for the ``connect`` command."""

    remote_host: str = ""
    remote_port: int = 6379
    local_port: int = 6379


@dataclass
class InitConfig:
    """Options for the ``init`` command."""


@dataclass
class DestroyConfig:
    """Options for the ``destroy`` command."""


@dataclass
class CliConfig:
    """Settings shared by every command of the command-line tool."""

    connect_config: ConnectConfig | None = None
    init_config: InitConfig | None = None
    destroy_config: DestroyConfig | None = None
    environment: str = "default"
    region: str = ""
    version_string: str = ""

    def version(self) -> str:
        """Return the human-readable version of the tool."""
        return f"funcie v{self.version_string}"
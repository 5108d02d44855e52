"""The ``connect`` command: a port-forwarding tunnel to the deployment's Redis."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Protocol

from .cliconfig import CliConfig, ConnectConfig


class ConnectError(RuntimeError):
    """Raised when the tunnel cannot be established."""


@dataclass
class SsmTunnellerOptions:
    """What a tunneller needs to attach to a started SSM session."""

    output: dict
    instance_id: str


class _ConfigStore(Protocol):
    def get_config_value(self, key: str) -> str: ...


class _SsmClient(Protocol):
    def start_session(self, **kwargs: Any) -> dict: ...

    def terminate_session(self, **kwargs: Any) -> dict: ...


class _Tunneller(Protocol):
    def open_tunnel(self, options: Any) -> None: ...


class _ConnectivityService(Protocol):
    def wait_for_connectivity(self, endpoint: str, timeout: float | None = None) -> None: ...


class ConnectCommand:
    """Keeps a tunnel to the remote Redis open, reopening it after each drop."""

    def __init__(
        self,
        cli_config: CliConfig,
        config_store: _ConfigStore,
        connect_client: _SsmClient,
        tunneller: _Tunneller,
        connectivity_service: _ConnectivityService,
        stop_event: threading.Event | None = None,
    ) -> None:
        self._cli_config = cli_config
        self._config_store = config_store
        self._ssm = connect_client
        self._tunneller = tunneller
        self._connectivity = connectivity_service
        self._stop = stop_event or threading.Event()

    def run(self) -> None:
        """Open tunnels until the stop event is set."""
        conf = self._connect_config()

        if not conf.remote_host:
            try:
                host = self._config_store.get_config_value("redis_host")
            except Exception as err:
                raise ConnectError(f"failed to get Redis host: {err}") from err
            conf.remote_host = host.split(":")[0]

        ssm_endpoint = f"https://ssm.{self._cli_config.region}.amazonaws.com"

        while not self._stop.is_set():
            try:
                self._connectivity.wait_for_connectivity(ssm_endpoint)
            except Exception as err:
                raise ConnectError(f"failed to wait for connectivity: {err}") from err

            try:
                self._start_tunnel()
            except ConnectError as err:
                raise ConnectError(f"failed to start tunnel: {err}") from err

    def _connect_config(self) -> ConnectConfig:
        if self._cli_config.connect_config is None:
            self._cli_config.connect_config = ConnectConfig()
        return self._cli_config.connect_config

    def _start_tunnel(self) -> None:
        conf = self._connect_config()

        try:
            instance_id = self._config_store.get_config_value("bastion_instance_id")
        except Exception as err:
            raise ConnectError(f"failed to get instance ID: {err}") from err

        try:
            session = self._ssm.start_session(
                Target=instance_id,
                DocumentName="AWS-StartPortForwardingSessionToRemoteHost",
                Parameters={
                    "portNumber": [str(conf.remote_port)],
                    "localPortNumber": [str(conf.local_port)],
                    "host": [conf.remote_host],
                },
            )
        except Exception as err:
            raise ConnectError(f"failed to start session: {err}") from err

        try:
            self._tunneller.open_tunnel(
                SsmTunnellerOptions(output=session, instance_id=instance_id)
            )
        except Exception as err:
            raise ConnectError(f"failed to open tunnel: {err}") from err

        try:
            self._ssm.terminate_session(SessionId=session.get("SessionId"))
        except Exception as err:
            raise ConnectError(f"failed to terminate session: {err}") from err
"""The ``destroy`` command: tears down a funcie deployment."""

from __future__ import annotations

import os
from typing import Protocol

from . import paths
from .cliconfig import CliConfig


class DestroyError(RuntimeError):
    """Raised when the deployment cannot be destroyed."""


class _TerraformClient(Protocol):
    def destroy(self, directory: str, var_file_path: str) -> None: ...


class DestroyCommand:
    """Destroys the infrastructure created by the ``init`` command."""

    def __init__(self, cli_config: CliConfig, terraform_client: _TerraformClient) -> None:
        self._cli_config = cli_config
        self._terraform = terraform_client

    def run(self) -> None:
        """Destroy the deployment described by the saved variables file."""
        tf_dir = paths.terraform_dir()
        vars_file = paths.terraform_vars_path()

        if not os.path.exists(vars_file):
            raise DestroyError("could not find an instance of funcie to destroy")

        try:
            self._terraform.destroy(tf_dir, vars_file)
        except Exception as err:
            raise DestroyError(f"failed to destroy funcie instance: {err}") from err

        print("The funcie infrastructure has been destroyed.")
        print(
            "Destroying the docker container is not yet implemented. "
            "Please run `docker ps` and `docker rm` to remove the container."
        )
"""Thin wrappers around the external command-line tools funcie drives."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_GREY = "\x1b[90m"
_RESET = "\x1b[0m"


class ToolError(RuntimeError):
    """Raised when an external tool cannot be run or fails."""


@dataclass
class RunnerOptions:
    """Options for running a command."""

    args: Sequence[str] = ()
    env: Mapping[str, str] | None = None
    working_dir: str = ""


def _echo_command(text: str) -> None:
    stream = sys.stdout
    if stream.isatty():
        text = f"{_GREY}{text}{_RESET}"
    print(text, file=stream)


class ProcessRunner:
    """Runs commands, echoing their output while also capturing it."""

    def run(self, cmd: str, *args: str) -> str:
        """Run ``cmd`` with ``args`` and return its standard output."""
        return self.run_with_options(cmd, RunnerOptions(args=list(args)))

    def run_with_options(self, cmd: str, options: RunnerOptions) -> str:
        """Run ``cmd`` as described by ``options`` and return its standard output.

        Variables from the current environment take precedence over ``options.env``.
        """
        args = list(options.args)
        env = dict(options.env or {})
        env.update(os.environ)

        _echo_command(f"{cmd} {' '.join(args)}")

        chunks: list[str] = []
        try:
            with subprocess.Popen(
                [cmd, *args],
                stdout=subprocess.PIPE,
                env=env,
                cwd=options.working_dir or None,
                text=True,
                start_new_session=os.name == "posix",
            ) as proc:
                for line in proc.stdout or ():
                    sys.stdout.write(line)
                    chunks.append(line)
                sys.stdout.flush()
                returncode = proc.wait()
        except OSError as err:
            raise ToolError(f"failed to run command {cmd}: {err}") from err

        if returncode != 0:
            raise ToolError(f"failed to run command {cmd}: exit status {returncode}")
        return "".join(chunks)


@dataclass
class DockerRunOptions:
    """How a container should be run."""

    env: dict[str, str] = field(default_factory=dict)
    exposed_ports: list[int] = field(default_factory=list)
    restart_policy: str = ""


class DockerCliClient:
    """Drives the docker command-line tool."""

    def __init__(self, runner: ProcessRunner) -> None:
        self._runner = runner

    def run_container(self, image: str, options: DockerRunOptions) -> None:
        """Start ``image`` detached with the given options."""
        args = ["run", "-d"]
        for key, value in options.env.items():
            args += ["-e", f"{key}={value}"]
        for port in options.exposed_ports:
            args += ["-p", f"{port}:{port}"]
        if options.restart_policy:
            args += ["--restart", options.restart_policy]
        args.append(image)

        try:
            self._runner.run("docker", *args)
        except ToolError as err:
            raise ToolError(f"failed to run container {image}: {err}") from err

        logger.info("container started; remember to run funcie connect to open the tunnel")


class GitCliClient:
    """Drives the git command-line tool."""

    def __init__(self, runner: ProcessRunner) -> None:
        self._runner = runner

    def shallow_clone(self, url: str, directory: str, branch: str) -> None:
        """Clone ``branch`` of ``url`` into ``directory`` with depth 1, replacing it."""
        try:
            shutil.rmtree(directory)
        except FileNotFoundError:
            pass
        except OSError as err:
            raise ToolError(f"failed to remove directory {directory}: {err}") from err

        try:
            self._runner.run(
                "git", "clone", url, "-c", "advice.detachedHead=false",
                "--branch", branch, "--depth", "1", directory,
            )
        except ToolError as err:
            raise ToolError(f"failed to clone repository {url}: {err}") from err

    def checkout(self, url: str, directory: str, branch: str) -> None:
        """Check out ``branch`` in ``directory``, cloning it first if missing."""
        if not os.path.exists(directory):
            self.shallow_clone(url, directory, branch)
            return

        steps = [
            (("-C", directory, "fetch", "--tags", "origin"), "failed to fetch branch"),
            (("-c", "advice.detachedHead=false", "-C", directory, "checkout", branch),
             "failed to checkout branch"),
            (("-C", directory, "pull"), "failed to pull changes for branch"),
        ]
        for args, message in steps:
            try:
                self._runner.run("git", *args)
            except ToolError as err:
                raise ToolError(f"{message} {branch}: {err}") from err


class TerraformCliClient:
    """Drives the terraform command-line tool."""

    def __init__(self, runner: ProcessRunner) -> None:
        self._runner = runner

    def _run(self, *args: str) -> str:
        return self._runner.run_with_options(
            "terraform",
            RunnerOptions(args=list(args), env={"TF_IN_AUTOMATION": "true"}),
        )

    def init(self, directory: str) -> None:
        """Initialise the Terraform project in ``directory``."""
        try:
            self._run(f"-chdir={directory}", "init", "-input=false")
        except ToolError as err:
            raise ToolError(
                f"failed to initialize Terraform project in directory {directory}: {err}"
            ) from err

    def apply(self, directory: str, var_file_path: str) -> None:
        """Apply the configuration in ``directory`` with variables from a file."""
        try:
            self._run(
                f"-chdir={directory}", "apply", "-input=false", "-auto-approve",
                f"-var-file={var_file_path}",
            )
        except ToolError as err:
            raise ToolError(
                f"failed to apply Terraform configuration in directory {directory}: {err}"
            ) from err

    def destroy(self, directory: str, var_file_path: str) -> None:
        """Destroy the resources of the project in ``directory``."""
        try:
            self._run(
                f"-chdir={directory}", "destroy", "-input=false", "-auto-approve",
                f"-var-file={var_file_path}",
            )
        except ToolError as err:
            raise ToolError(
                f"failed to destroy Terraform project in directory {directory}: {err}"
            ) from err
"""The ``init`` command: interactively deploys a new funcie instance."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, TextIO, TypeVar

from . import paths
from .aws_resources import ElastiCacheCluster, Subnet, Vpc
from .cliconfig import CliConfig
from .hcl import marshal_array
from .tools import DockerRunOptions

TF_MODULE_REPO = "[email]:Kapps/terraform-aws-funcie.git"
DOCKER_CLIENT_IMAGE = "public.ecr.aws/w1h1o7p8/funcie-client-bastion"

T = TypeVar("T")


class InitError(RuntimeError):
    """Raised when a deployment cannot be initialised."""


@dataclass
class TerraformVars:
    """Variables handed to the funcie Terraform module."""

    vpc_id: str = ""
    private_subnets: list[str] = field(default_factory=list)
    public_subnets: list[str] = field(default_factory=list)
    redis_host: str = ""
    region: str = ""


def marshal_variables(variables: TerraformVars) -> str:
    """Render ``variables`` as the contents of a ``.tfvars`` file."""
    return (
        "\n"
        f'vpc_id             = "{variables.vpc_id}"\n'
        f"private_subnet_ids = {marshal_array(variables.private_subnets)}\n"
        f"public_subnet_ids  = {marshal_array(variables.public_subnets)}\n"
        f'redis_host         = "{variables.redis_host}"\n'
        f'region             = "{variables.region}"\n'
    )


class ConsolePrompter:
    """Asks questions on the terminal; options are ``(label, value)`` pairs."""

    def __init__(
        self, input_func: Callable[[str], str] = input, output: TextIO | None = None
    ) -> None:
        self._input = input_func
        self._output = output

    def _print(self, text: str = "") -> None:
        print(text, file=self._output or sys.stdout)

    def _header(self, title: str, description: str) -> None:
        self._print(title)
        if description:
            self._print(description)

    @staticmethod
    def _parse_index(answer: str, count: int) -> int | None:
        if not answer.isdigit():
            return None
        index = int(answer) - 1
        return index if 0 <= index < count else None

    def select(self, title: str, description: str, options: Sequence[tuple[str, T]]) -> T:
        """Return the value of the one option the user picks; the first by default."""
        options = list(options)
        if not options:
            raise ValueError("no options to select from")
        self._header(title, description)
        for number, (label, _) in enumerate(options, 1):
            self._print(f"  {number}) {label}")
        while True:
            answer = self._input(f"Select [1-{len(options)}] (default 1): ").strip()
            if not answer:
                return options[0][1]
            index = self._parse_index(answer, len(options))
            if index is not None:
                return options[index][1]
            self._print(f"Invalid choice: {answer}")

    def multi_select(
        self,
        title: str,
        description: str,
        options: Sequence[tuple[str, T]],
        selected: Sequence[T],
    ) -> list[T]:
        """Return the values the user picks; an empty answer keeps ``selected``."""
        options = list(options)
        self._header(title, description)
        for number, (label, value) in enumerate(options, 1):
            mark = "x" if value in selected else " "
            self._print(f"  [{mark}] {number}) {label}")
        while True:
            answer = self._input(
                "Numbers separated by commas, 'none' for none (empty keeps marked): "
            ).strip()
            if not answer:
                return [value for _, value in options if value in selected]
            if answer.lower() == "none":
                return []
            parts = [part for part in answer.replace(",", " ").split() if part]
            indices = [self._parse_index(part, len(options)) for part in parts]
            if all(index is not None for index in indices):
                chosen = set(indices)
                return [value for index, (_, value) in enumerate(options) if index in chosen]
            self._print(f"Invalid choice: {answer}")

    def confirm(self, title: str, affirmative: str) -> bool:
        """Ask a yes/no question; the answer defaults to no."""
        self._print(title)
        while True:
            answer = self._input(f"{affirmative}? [y/N]: ").strip().lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("", "n", "no"):
                return False
            self._print(f"Invalid answer: {answer}")


class _Prompter(Protocol):
    def select(self, title: str, description: str, options: Sequence[tuple[str, Any]]) -> Any: ...

    def multi_select(
        self, title: str, description: str, options: Sequence[tuple[str, Any]], selected: Sequence[Any]
    ) -> list[Any]: ...

    def confirm(self, title: str, affirmative: str) -> bool: ...


class InitCommand:
    """Collects deployment choices, applies the Terraform module and starts the bastion."""

    def __init__(
        self,
        cli_config: CliConfig,
        resource_lister: Any,
        git_client: Any,
        terraform_client: Any,
        docker_client: Any,
        prompter: _Prompter | None = None,
        module_repo: str = TF_MODULE_REPO,
    ) -> None:
        self._cli_config = cli_config
        self._lister = resource_lister
        self._git = git_client
        self._terraform = terraform_client
        self._docker = docker_client
        self._prompter = prompter or ConsolePrompter()
        self._module_repo = module_repo

    def run(self) -> None:
        """Run the interactive deployment."""
        try:
            vpc = self._prompt_vpc()
        except InitError as err:
            raise InitError(f"failed to prompt for VPC: {err}") from err

        private: list[Subnet] = []
        public: list[Subnet] = []
        if vpc.id:
            try:
                private, public = self._prompt_subnets(vpc.id)
            except InitError as err:
                raise InitError(f"failed to prompt for subnet: {err}") from err

        try:
            cluster = self._prompt_elasticache()
        except InitError as err:
            raise InitError(f"failed to prompt for ElastiCache cluster: {err}") from err

        variables = TerraformVars(
            vpc_id=vpc.id,
            private_subnets=[subnet.id for subnet in private],
            public_subnets=[subnet.id for subnet in public],
            redis_host=cluster.primary_endpoint if cluster is not None else "",
            region=self._cli_config.region,
        )

        try:
            self._run_terraform(variables)
        except InitError as err:
            raise InitError(f"failed to write terraform vars: {err}") from err

        try:
            self._prompt_docker_run()
        except InitError as err:
            raise InitError(f"failed to configure docker container: {err}") from err

    def _prompt_vpc(self) -> Vpc:
        try:
            vpcs = self._lister.list_vpcs()
        except Exception as err:
            raise InitError(f"failed to list vpcs: {err}") from err

        default = Vpc(id="", name="")
        options = [("<create funcie-managed VPC with NAT instance config>", default)]
        options += [(str(vpc), vpc) for vpc in vpcs]
        try:
            return self._prompter.select(
                "Which VPC would you like to use?",
                "Or default to have funcie provision / reuse a VPC.",
                options,
            )
        except Exception as err:
            raise InitError(f"failed to select VPC: {err}") from err

    def _prompt_subnets(self, vpc_id: str) -> tuple[list[Subnet], list[Subnet]]:
        try:
            subnets = self._lister.list_subnets()
        except Exception as err:
            raise InitError(f"failed to list subnets: {err}") from err

        filtered = [subnet for subnet in subnets if subnet.vpc_id == vpc_id]
        public = [subnet for subnet in filtered if subnet.public]
        private = [subnet for subnet in filtered if not subnet.public]
        options = [(str(subnet), subnet) for subnet in filtered]

        try:
            private = self._prompter.multi_select(
                "Which private subnets would you like to use?",
                "This will be used for resources such as the Elasticache instance.",
                options,
                private,
            )
        except Exception as err:
            raise InitError(f"failed to select private subnets: {err}") from err

        try:
            public = self._prompter.multi_select(
                "Which public subnets would you like to use?",
                "This will be used for resources such as the bastion host.",
                options,
                public,
            )
        except Exception as err:
            raise InitError(f"failed to select public subnets: {err}") from err

        return private, public

    def _prompt_elasticache(self) -> ElastiCacheCluster | None:
        try:
            clusters = self._lister.list_elasticache_clusters()
        except Exception as err:
            raise InitError(f"failed to list ElastiCache clusters: {err}") from err

        options = [("<create new cluster>", ElastiCacheCluster(arn="", name=""))]
        options += [(str(cluster), cluster) for cluster in clusters]
        try:
            selected = self._prompter.select(
                "Which ElastiCache cluster would you like to use?",
                "Or default to have funcie provision / reuse a cluster.",
                options,
            )
        except Exception as err:
            raise InitError(f"failed to select ElastiCache cluster: {err}") from err

        return selected if selected.name else None

    def _prompt_docker_run(self) -> None:
        try:
            confirmed = self._prompter.confirm(
                "Would you like to configure the client bastion to auto-launch?",
                "Yes, auto-launch the client bastion",
            )
        except Exception as err:
            raise InitError(f"failed to confirm docker run: {err}") from err

        if not confirmed:
            return

        redis_host = "host.docker.internal" if sys.platform == "darwin" else "localhost"
        image = f"{DOCKER_CLIENT_IMAGE}:v{self._cli_config.version_string}".strip()
        options = DockerRunOptions(
            env={
                "FUNCIE_REDIS_ADDRESS": f"{redis_host}:6379",
                "FUNCIE_LISTEN_ADDRESS": "0.0.0.0:24193",
            },
            exposed_ports=[24193],
            restart_policy="unless-stopped",
        )
        try:
            self._docker.run_container(image, options)
        except Exception as err:
            raise InitError(f"failed to run client bastion container: {err}") from err

    def _run_terraform(self, variables: TerraformVars) -> None:
        contents = marshal_variables(variables)
        base_dir = paths.funcie_base_dir()
        var_file = paths.terraform_vars_path()

        try:
            os.mkdir(base_dir, 0o755)
        except FileExistsError:
            pass
        except OSError as err:
            raise InitError(f"failed to create directory for terraform vars: {err}") from err

        try:
            with open(var_file, "w", encoding="utf-8") as handle:
                handle.write(contents)
        except OSError as err:
            raise InitError(f"failed to write terraform vars to {var_file}: {err}") from err

        branch = "v" + self._cli_config.version_string.strip()
        print(f"Cloning funcie terraform module with tag {branch}...")

        module_dir = paths.terraform_dir()
        try:
            self._git.checkout(self._module_repo, module_dir, branch)
        except Exception as err:
            raise InitError(f"failed to clone terraform module: {err}") from err

        print(f"Cloned terraform module to {module_dir}; running init.")

        try:
            self._terraform.init(module_dir)
        except Exception as err:
            raise InitError(f"failed to initialize terraform module: {err}") from err

        print("Terraform module initialized; will deploy module with the following parameters:")
        print(contents)

        try:
            confirmed = self._prompter.confirm(
                "Would you like to proceed with the deployment? Remember, some resources are "
                "not part of the AWS free tier and therefore charges will apply.",
                "I understand, deploy module",
            )
        except Exception as err:
            raise InitError(f"failed to confirm deployment: {err}") from err

        if not confirmed:
            raise InitError("deployment cancelled")

        print("Applying terraform configuration...")

        try:
            self._terraform.apply(module_dir, var_file)
        except Exception as err:
            raise InitError(f"failed to apply terraform configuration: {err}") from err

        print("Terraform configuration applied successfully.")
# funcie

Building blocks for developing serverless functions locally, with invocations
that reach the cloud routed through a bastion to a handler on your own
machine. The package provides the deployment commands (connect, init,
destroy) as classes, wrappers around the `git`, `terraform` and `docker`
command-line tools, AWS resource listing, bastion configuration read from the
environment, and translation of local host names for a bastion running in
Docker.

It has no runtime dependencies beyond the standard library.

## Requirements

Python 3.10 or later. The tool wrappers run the `git`, `terraform` and
`docker` executables, which must be on your `PATH` when they are used.

## Modules

| Module | Contents |
| --- | --- |
| `funcie.hcl` | `marshal_array` renders strings as an HCL list literal. |
| `funcie.paths` | `funcie_base_dir`, `terraform_dir`, `terraform_vars_path`: locations under `$HOME/.funcie`. |
| `funcie.tools` | `ProcessRunner`, `RunnerOptions`, `GitCliClient`, `TerraformCliClient`, `DockerCliClient`, `DockerRunOptions`; failures raise `ToolError`. |
| `funcie.aws_resources` | `AwsResourceLister` returns `Vpc`, `Subnet` and `ElastiCacheCluster` values; failures raise `ResourceListError`. |
| `funcie.connectivity` | `HttpConnectivityService` waits until an endpoint answers; raises `ConnectivityError` or `TimeoutError`. |
| `funcie.cliconfig` | `CliConfig` with `ConnectConfig`, `InitConfig`, `DestroyConfig`. |
| `funcie.configstore` | `SsmConfigStore` reads `/funcie/<environment>/<key>` parameters; raises `ConfigStoreError`. |
| `funcie.connect` | `ConnectCommand` keeps a port-forwarding session to the deployment's Redis open; raises `ConnectError`. |
| `funcie.init_command` | `InitCommand`, `ConsolePrompter`, `TerraformVars`, `marshal_variables`; raises `InitError`. |
| `funcie.destroy` | `DestroyCommand` destroys the Terraform deployment; raises `DestroyError`. |
| `funcie.bastion_config` | `ClientBastionConfig`, `ServerBastionConfig`, `client_config_from_environment`, `server_config_from_environment`, `parse_duration`; raises `ConfigError`. |
| `funcie.hosttranslator` | `DockerHostTranslator` maps local hosts to `host.docker.internal` when that name resolves. |

## Examples

Terraform values:

```python
from funcie.hcl import marshal_array
from funcie.init_command import TerraformVars, marshal_variables

marshal_array(["subnet-1", "subnet-2"])   # '["subnet-1", "subnet-2"]'
print(marshal_variables(TerraformVars(vpc_id="vpc-1", region="us-east-1")))
```

Where funcie keeps its state:

```python
from funcie.paths import funcie_base_dir, terraform_dir, terraform_vars_path

funcie_base_dir()       # $HOME/.funcie
terraform_dir()         # $HOME/.funcie/terraform-aws-funcie
terraform_vars_path()   # $HOME/.funcie/funcli.tfvars
```

Running tools. Each command is echoed before it runs, its standard output is
both shown and returned, and a non-zero exit raises `ToolError`. Variables in
the current environment take precedence over those in `RunnerOptions.env`.

```python
from funcie.tools import ProcessRunner, GitCliClient, TerraformCliClient

runner = ProcessRunner()
output = runner.run("git", "--version")

terraform = TerraformCliClient(runner)
terraform.init("/path/to/module")   # runs with TF_IN_AUTOMATION=true
```

Listing AWS resources. The clients are objects that behave like the AWS SDK
EC2 and ElastiCache clients: keyword arguments in, response dictionaries out.
VPCs and clusters are sorted by name; subnets put private ones first, then
sort by ID, and a subnet counts as public when a route table associated with
it has a route through an `igw-` gateway.

```python
from funcie.aws_resources import AwsResourceLister

lister = AwsResourceLister(ec2_client, elasticache_client)
for subnet in lister.list_subnets():
    print(subnet)          # "name: subnet-id (Public)" or "(Private)"
```

Waiting for connectivity:

```python
from funcie.connectivity import HttpConnectivityService

service = HttpConnectivityService(retry_interval=0.5)
service.wait_for_connectivity("https://ssm.us-east-1.amazonaws.com", timeout=30)
```

Any HTTP response counts as reachable. A dropped connection is treated as an
outage and retried; other failures raise `ConnectivityError`, and passing the
timeout raises `TimeoutError`.

Bastion configuration from an environment mapping (the process environment is
used when none is given):

```python
from funcie.bastion_config import (
    client_config_from_environment,
    server_config_from_environment,
    parse_duration,
)

client = client_config_from_environment({"FUNCIE_REDIS_ADDRESS": "localhost:6379"})
# listen_address "127.0.0.1:24193", base_channel_name "funcie:requests"

server = server_config_from_environment({
    "FUNCIE_REDIS_ADDRESS": "localhost:6379",
    "FUNCIE_LISTEN_ADDRESS": "0.0.0.0:8082",
})
# request_ttl 15 minutes, request_channel "funcie:requests",
# response_key_prefix "funcie:response"

parse_duration("1h30m")   # timedelta(hours=1, minutes=30)
```

A missing required variable or an unparsable `FUNCIE_REQUEST_TTL` raises
`ConfigError`. `parse_duration` accepts signed sequences of numbers with the
units `ns`, `us` (or `µs`), `ms`, `s`, `m` and `h`; the result is truncated
to microseconds.

Docker host translation:

```python
from funcie.hosttranslator import DockerHostTranslator

translator = DockerHostTranslator()
translator.translate_local_host_to_resolved_host("127.0.0.1")
# "host.docker.internal" when that name resolves, otherwise "127.0.0.1"
```

Loopback and unspecified addresses and `localhost` are translated; other hosts
are returned unchanged. The lookup is done once per translator, and a custom
lookup function can be passed to the constructor.

## Commands

`ConnectCommand`, `InitCommand` and `DestroyCommand` each have a `run()`
method and take their collaborators in the constructor. `InitCommand` asks
its questions through a prompter with `select`, `multi_select` and `confirm`
methods; `ConsolePrompter` is a plain terminal implementation of them.

## What this package does not do

- It installs no command-line program; the commands are classes to be wired
  up and run from your own code.
- It contains no tunneller that carries an SSM port-forwarding session:
  `ConnectCommand` starts and terminates the session and hands it to a
  tunneller object that you supply.
- It contains no bastion servers, no Redis message transport and no handler
  for running functions; `funcie.bastion_config` and `funcie.hosttranslator`
  only provide the settings and host mapping such a bastion would use.
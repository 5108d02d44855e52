import pytest

from funcie.cliconfig import CliConfig
from funcie.configstore import ConfigStoreError, SsmConfigStore


class FakeSsm:
    def __init__(self, values=None, error=None):
        self.values = values or {}
        self.error = error
        self.names = []

    def get_parameter(self, **kwargs):
        self.names.append(kwargs["Name"])
        if self.error:
            raise self.error
        return {"Parameter": {"Name": kwargs["Name"], "Value": self.values[kwargs["Name"]]}}


def test_reads_parameter_under_environment_path():
    ssm = FakeSsm({"/funcie/staging/redis_host": "redis.internal:6379"})
    store = SsmConfigStore(CliConfig(environment="staging"), ssm)

    assert store.get_config_value("redis_host") == "redis.internal:6379"
    assert ssm.names == ["/funcie/staging/redis_host"]


def test_default_environment_path():
    ssm = FakeSsm({"/funcie/default/bastion_host": "10.0.0.5"})
    store = SsmConfigStore(CliConfig(), ssm)
    assert store.get_config_value("bastion_host") == "10.0.0.5"


def test_client_error_is_wrapped():
    cause = RuntimeError("access denied")
    store = SsmConfigStore(CliConfig(), FakeSsm(error=cause))

    with pytest.raises(ConfigStoreError, match="failed to get config key redis_host") as info:
        store.get_config_value("redis_host")
    assert info.value.__cause__ is cause


def test_missing_parameter_is_wrapped():
    store = SsmConfigStore(CliConfig(), FakeSsm({}))
    with pytest.raises(ConfigStoreError, match="missing"):
        store.get_config_value("missing")
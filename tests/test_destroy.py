import pytest

from funcie import paths
from funcie.cliconfig import CliConfig
from funcie.destroy import DestroyCommand, DestroyError
from funcie.tools import ToolError


class FakeTerraform:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def destroy(self, directory, var_file_path):
        self.calls.append((directory, var_file_path))
        if self.error:
            raise self.error


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


def write_vars_file():
    import os

    os.makedirs(paths.funcie_base_dir(), exist_ok=True)
    with open(paths.terraform_vars_path(), "w") as handle:
        handle.write('vpc_id = ""\n')


def test_missing_vars_file_raises(home):
    terraform = FakeTerraform()
    with pytest.raises(DestroyError, match="could not find an instance of funcie to destroy"):
        DestroyCommand(CliConfig(), terraform).run()
    assert terraform.calls == []


def test_destroys_with_saved_vars(home, capsys):
    write_vars_file()
    terraform = FakeTerraform()

    DestroyCommand(CliConfig(), terraform).run()

    assert terraform.calls == [(paths.terraform_dir(), paths.terraform_vars_path())]
    assert "The funcie infrastructure has been destroyed." in capsys.readouterr().out


def test_terraform_failure_is_wrapped(home):
    write_vars_file()
    cause = ToolError("exit status 1")
    with pytest.raises(DestroyError, match="failed to destroy funcie instance") as info:
        DestroyCommand(CliConfig(), FakeTerraform(error=cause)).run()
    assert info.value.__cause__ is cause
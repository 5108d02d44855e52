import posixpath

from funcie.paths import funcie_base_dir, terraform_dir, terraform_vars_path


def test_base_dir_is_under_home(monkeypatch, tmp_path):
    home = tmp_path.as_posix()
    monkeypatch.setenv("HOME", home)
    base = funcie_base_dir()
    assert posixpath.dirname(base) == home
    assert posixpath.basename(base) == ".funcie"


def test_base_dir_without_home(monkeypatch):
    monkeypatch.setenv("HOME", "")
    assert funcie_base_dir() == ".funcie"


def test_terraform_dir_is_inside_base(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", tmp_path.as_posix())
    directory = terraform_dir()
    assert posixpath.dirname(directory) == funcie_base_dir()
    assert posixpath.basename(directory) == "terraform-aws-funcie"
    assert not directory.endswith("/")


def test_terraform_vars_path_is_inside_base(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", tmp_path.as_posix())
    path = terraform_vars_path()
    assert posixpath.dirname(path) == funcie_base_dir()
    assert posixpath.basename(path) == "funcli.tfvars"
"""Locations of the files funcie keeps in the user's home directory."""

from __future__ import annotations

import os
import posixpath


def funcie_base_dir() -> str:
    """Return the base directory for funcie configuration and storage."""
    return posixpath.join(os.environ.get("HOME", ""), ".funcie")


def terraform_dir() -> str:
    """Return the directory holding the funcie Terraform module checkout."""
    return posixpath.join(funcie_base_dir(), "terraform-aws-funcie")


def terraform_vars_path() -> str:
    """Return the path of the Terraform variables file used by init and destroy."""
    return posixpath.join(funcie_base_dir(), "funcli.tfvars")
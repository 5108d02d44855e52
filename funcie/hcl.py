"""Helpers for writing values in HCL (Terraform variable file) syntax."""

from __future__ import annotations

from collections.abc import Iterable


def marshal_array(values: Iterable[str]) -> str:
    """Render strings as an HCL list literal, such as ``["a", "b"]``."""
    quoted = ", ".join(f'"{value}"' for value in values)
    return f"[{quoted}]"
"""
Smoke tests for package structure and availability.

Scope
-----
These tests verify that the package is installed correctly and that the
top-level modules and entry points are importable.
"""

from __future__ import annotations

import importlib

import pytest

from qsol_simplify import __version__


def test_package_importable() -> None:
    """Ensure the top-level package can be imported."""
    mod = importlib.import_module("qsol_simplify")
    assert mod is not None


def test_version_is_set() -> None:
    """Ensure the package exposes a valid version string."""
    assert isinstance(__version__, str)
    assert len(__version__) > 0


def test_cli_module_exposes_app() -> None:
    """The `qsol-simplify` script entry point is `qsol_simplify.cli:app`."""
    cli = importlib.import_module("qsol_simplify.cli")
    assert hasattr(cli, "app"), "qsol_simplify.cli must expose an 'app' Typer object."


@pytest.mark.parametrize(  # type: ignore[misc]
    "module",
    [
        "qsol_simplify.pipelines",
        "qsol_simplify.llm",
        "qsol_simplify.api.app",
        "qsol_simplify.transport.worker",
        "qsol_simplify.transport.subprocess_client",
    ],
)
def test_modules_importable(module: str) -> None:
    assert importlib.import_module(module) is not None

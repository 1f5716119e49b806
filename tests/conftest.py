"""Shared test fixtures for git-quickstart tests."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from git_quickstart.core.config import Settings
from git_quickstart.core.models import (
    ConfigField,
    KernelFamily,
    OperatorConfig,
    OSName,
    ShellKind,
    SystemProfile,
)


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    """A throwaway $HOME with an empty ~/.bashrc."""
    home = tmp_path / "home"
    home.mkdir()
    (home / ".bashrc").write_text("# ~/.bashrc\nalias ll='ls -l'\n")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("GIT_HUB_PKG_TOKEN", raising=False)
    return home


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(log_dir=str(tmp_path / "logs"))


@pytest.fixture
def ubuntu_profile(fake_home) -> SystemProfile:
    """Bare-metal Ubuntu 24.04 on x86_64 with bash."""
    return SystemProfile(
        os_name=OSName.UBUNTU,
        os_version="24.04",
        os_major_version=24,
        architecture="x86_64",
        kernel_family=KernelFamily.LINUX,
        is_virtualized_guest=False,
        shell_kind=ShellKind.BASH,
        profile_path=str(fake_home / ".bashrc"),
    )


@pytest.fixture
def macos_profile(fake_home) -> SystemProfile:
    """MacOS 14 on Apple Silicon with bash."""
    return SystemProfile(
        os_name=OSName.MACOS,
        os_version="14.5",
        os_major_version=14,
        architecture="aarch64",
        kernel_family=KernelFamily.DARWIN,
        is_virtualized_guest=False,
        shell_kind=ShellKind.BASH,
        profile_path=str(fake_home / ".bashrc"),
    )


@pytest.fixture
def console() -> Console:
    """Console writing to a buffer; read it back with console.file.getvalue()."""
    return Console(file=io.StringIO(), width=300, force_terminal=False)


@pytest.fixture
def make_config():
    """Factory for OperatorConfig values."""
    return _make_config


def _make_config(
    name: str = "",
    email: str = "",
    token: str = "",
    current_name: str | None = None,
    current_email: str | None = None,
    current_token: str | None = None,
    from_env: bool = False,
) -> OperatorConfig:
    """Helper to build an OperatorConfig for testing."""
    return OperatorConfig(
        full_name=ConfigField(current=current_name, entered=name),
        email_address=ConfigField(current=current_email, entered=email),
        auth_token=ConfigField(current=current_token, entered=token),
        token_from_environment=from_env,
    )

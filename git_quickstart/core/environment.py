"""Environment detection — OS, version, architecture, shell, guest VM."""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from git_quickstart.core.errors import MissingCommand, UnsupportedPlatform, UnsupportedShell
from git_quickstart.core.models import KernelFamily, OSName, ShellKind, SystemProfile

logger = logging.getLogger(__name__)

# Minimum supported major version per OS.
SUPPORTED_OS = {
    OSName.UBUNTU: (22, KernelFamily.LINUX),
    OSName.MACOS: (14, KernelFamily.DARWIN),
}

_MACOS_ALIASES = {"macos", "macos server", "mac os x"}
_ARCH_ALIASES = {"arm64": "aarch64", "amd64": "x86_64"}

GUEST_MARKERS = [
    ("/run/WSL", "WSL2"),
    ("/opt/orbstack-guest", "OrbStack"),
]

# Profile candidates per shell, in order of preference.
PROFILE_CANDIDATES = {
    ShellKind.BASH: [".bashrc", ".bash_profile"],
    ShellKind.ZSH: [".zshrc", ".zprofile"],
}

REQUIRED_COMMANDS = {
    KernelFamily.LINUX: ["apt-get", "dpkg"],
    KernelFamily.DARWIN: ["sw_vers", "bash"],
}


def probe() -> SystemProfile:
    """Detect the current machine, failing fast when it is not supported."""
    shell_kind, profile_path = _resolve_shell(
        os.environ.get("SHELL", ""), Path.home()
    )
    raw_name, version = _detect_os_release()
    os_name = _normalize_os_name(raw_name)
    major = _major_version(version)
    architecture = _normalize_arch(platform.machine())
    guest_kind = _detect_guest()

    supported = SUPPORTED_OS.get(os_name)
    if supported is None or major < supported[0]:
        machine = f"{architecture}/{guest_kind}" if guest_kind else architecture
        display = os_name.value if os_name is not OSName.UNKNOWN else raw_name
        raise UnsupportedPlatform(
            f'"{display} {version} ({machine})" is not a supported operating system.'
        )

    profile = SystemProfile(
        os_name=os_name,
        os_version=version,
        os_major_version=major,
        architecture=architecture,
        kernel_family=supported[1],
        is_virtualized_guest=guest_kind is not None,
        shell_kind=shell_kind,
        profile_path=str(profile_path),
        guest_kind=guest_kind,
    )
    logger.info(
        "Detected %s %s (%s), shell %s, profile %s",
        profile.os_name.value,
        profile.os_version,
        profile.machine,
        profile.shell_kind.value,
        profile.profile_path,
    )
    return profile


def require_commands(profile: SystemProfile) -> None:
    """Fail with MissingCommand if a tool the installers shell out to is absent."""
    for command in REQUIRED_COMMANDS[profile.kernel_family]:
        if shutil.which(command) is None:
            raise MissingCommand(command)


def _resolve_shell(shell: str, home: Path) -> tuple[ShellKind, Path]:
    if "bash" in shell:
        kind = ShellKind.BASH
    elif "zsh" in shell:
        kind = ShellKind.ZSH
    else:
        raise UnsupportedShell(f'The current shell "{shell}" is not supported.')

    candidates = PROFILE_CANDIDATES[kind]
    for name in candidates:
        path = home / name
        if path.is_file():
            return kind, path

    names = " or ".join(f"~/{n}" for n in candidates)
    raise UnsupportedShell(
        f"Can not find a valid {kind.value} profile. "
        f"Ensure either {names} already exist"
    )


def _detect_os_release() -> tuple[str, str]:
    """Return (product name, version) as reported by the OS."""
    system = platform.system()
    if system == "Linux":
        name = _run_quiet(["lsb_release", "-si"])
        version = _run_quiet(["lsb_release", "-sr"])
        if name and version:
            return name, version
        try:
            release = platform.freedesktop_os_release()
        except OSError:
            return "Unknown", "0.0.0"
        return release.get("NAME", "Unknown"), release.get("VERSION_ID", "0.0.0")
    if system == "Darwin":
        name = _run_quiet(["sw_vers", "-productName"]) or "macOS"
        version = _run_quiet(["sw_vers", "-productVersion"]) or platform.mac_ver()[0]
        return name, version or "0.0.0"
    return system or "Unknown", platform.release() or "0.0.0"


def _run_quiet(argv: list[str]) -> Optional[str]:
    try:
        result = subprocess.run(
            argv, capture_output=True, text=True, timeout=5,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip().strip('"')
    return None


def _normalize_os_name(name: str) -> OSName:
    lowered = name.strip().lower()
    if lowered in _MACOS_ALIASES:
        return OSName.MACOS
    if lowered == "ubuntu":
        return OSName.UBUNTU
    return OSName.UNKNOWN


def _major_version(version: str) -> int:
    try:
        return int(version.split(".")[0])
    except ValueError:
        return 0


def _normalize_arch(machine: str) -> str:
    return _ARCH_ALIASES.get(machine.lower(), machine)


def _detect_guest() -> Optional[str]:
    for marker, kind in GUEST_MARKERS:
        if os.path.isdir(marker):
            return kind
    return None

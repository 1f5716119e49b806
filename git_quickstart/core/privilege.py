"""Privilege negotiation — never run elevated, but hold a sudo grant."""

from __future__ import annotations

import logging
import os
import shutil

from git_quickstart.core.commands import run_cmd
from git_quickstart.core.errors import ElevationUnavailable, RunningElevated
from git_quickstart.core.models import KernelFamily, SystemProfile

logger = logging.getLogger(__name__)

SUDO = "sudo"


def resolve_elevation(profile: SystemProfile) -> None:
    """Ensure later privileged steps can call sudo without re-prompting.

    The process itself must not be elevated; elevation is requested per
    command. On MacOS a grant is only needed when Homebrew has to be installed.
    """
    if shutil.which(SUDO) is None:
        raise ElevationUnavailable(f'This script requires "{SUDO}" to be installed.')

    if _is_elevated():
        raise RunningElevated(
            f'This script must be run **without** using "{SUDO}". '
            "You will be prompted if needed."
        )

    if profile.kernel_family is KernelFamily.DARWIN and shutil.which("brew"):
        logger.info("Homebrew present, sudo grant not needed on %s", profile.os_name.value)
        return

    if run_cmd([SUDO, "-n", "true"], check=False).ok:
        logger.info("Existing sudo session is valid")
        return

    logger.info("No cached sudo grant, prompting")
    if not run_cmd([SUDO, "-v"], check=False, capture=False).ok:
        raise ElevationUnavailable(
            f'Something went wrong when using "{SUDO}" to elevate the current script.'
        )


def _is_elevated() -> bool:
    if os.environ.get("SUDO_USER"):
        return True
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0

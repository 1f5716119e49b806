"""Installs or upgrades git and git-credential-manager."""

from __future__ import annotations

import logging
import os
import tempfile

from git_quickstart.core.commands import download_file, run_cmd
from git_quickstart.core.errors import StepError, UnknownOperatingSystem
from git_quickstart.core.merger import ensure_profile_line
from git_quickstart.core.models import MergeResult, OSName, StepOutcome
from git_quickstart.installers.base import GCM, InstallerStep

logger = logging.getLogger(__name__)

GCM_DEB_URL = (
    "https://github.com/git-ecosystem/git-credential-manager/releases/download/"
    "v{version}/gcm-linux_amd64.{version}.deb"
)
HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
HOMEBREW_PREFIX = {
    "aarch64": "/opt/homebrew/bin/brew",
    "x86_64": "/usr/local/bin/brew",
}


class EnsureVcsClientStep(InstallerStep):
    """Latest git (and GCM where it is needed), upgrading what is there."""

    name = "git"

    def run(self) -> StepOutcome:
        if self.profile.os_name is OSName.UBUNTU:
            return self._install_ubuntu()
        if self.profile.os_name is OSName.MACOS:
            return self._install_macos()
        raise UnknownOperatingSystem(self.profile.os_name.value)

    def _install_ubuntu(self) -> StepOutcome:
        logger.info("Updating and upgrading system packages and installing git")
        for args in (["update"], ["upgrade"], ["install", "git"], ["clean"]):
            run_cmd(["sudo", "apt-get", "-y", *args])

        if self.profile.is_virtualized_guest:
            logger.info(
                "Detected that Ubuntu is running in a VM (%s). "
                "Skipping git-credential-manager installation.",
                self.profile.guest_kind,
            )
            return StepOutcome.SUCCESS
        if self.which(GCM):
            logger.info("%s is already installed. Skipping.", GCM)
            return StepOutcome.SUCCESS
        if self.profile.architecture != "x86_64":
            logger.warning(
                "No %s package is published for %s. Install it manually.",
                GCM,
                self.profile.architecture,
            )
            return StepOutcome.SUCCESS

        logger.info("Bare metal installation of Ubuntu detected. Installing %s using dpkg", GCM)
        url = GCM_DEB_URL.format(version=self.settings.gcm_version)
        with tempfile.TemporaryDirectory(prefix="git-quickstart-gcm-") as tmpdir:
            logger.info("Using temp directory '%s'", tmpdir)
            deb = download_file(url, os.path.join(tmpdir, os.path.basename(url)))
            run_cmd(["sudo", "dpkg", "-i", deb])
        # GCM needs `git-credential-manager configure` before first use.
        return StepOutcome.SUCCESS_NEEDS_FOLLOWUP

    def _install_macos(self) -> StepOutcome:
        outcome = StepOutcome.SUCCESS
        brew = self.which("brew")
        if brew:
            logger.info("Updating and upgrading brew packages")
            run_cmd([brew, "update"])
            doctor = run_cmd([brew, "doctor"], check=False)
            if not doctor.ok:
                logger.warning("brew doctor reported problems; continuing")
        else:
            brew = self._bootstrap_homebrew()
            changed = ensure_profile_line(
                self.profile.profile_path,
                f'eval "$({brew} shellenv)"',
                comment="# homebrew",
            )
            if changed is MergeResult.CHANGED:
                outcome = StepOutcome.SUCCESS_NEEDS_RELOAD

        run_cmd([brew, "install", "git"])
        run_cmd([brew, "install", "--cask", GCM])
        return outcome

    def _bootstrap_homebrew(self) -> str:
        logger.info("Installing homebrew")
        with tempfile.TemporaryDirectory(prefix="git-quickstart-homebrew-") as tmpdir:
            logger.info("Using temp directory '%s'", tmpdir)
            script = download_file(HOMEBREW_INSTALL_URL, os.path.join(tmpdir, "install.sh"))
            run_cmd(["bash", script], env={"NONINTERACTIVE": "1"}, cwd=tmpdir)

        brew = HOMEBREW_PREFIX.get(self.profile.architecture, HOMEBREW_PREFIX["x86_64"])
        if not os.path.exists(brew):
            raise StepError(f"Homebrew installer finished but {brew} does not exist")
        return brew

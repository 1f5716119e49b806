"""Applies collected configuration to git, the credential store and the profile."""

from __future__ import annotations

import logging
import os
from typing import Optional

from git_quickstart.core.config import Settings
from git_quickstart.core.errors import StepError
from git_quickstart.core.merger import (
    credential_slot_pattern,
    ensure_file,
    upsert_credential_line,
    upsert_profile_export,
)
from git_quickstart.core.models import MergeResult, OperatorConfig, StepOutcome, SystemProfile
from git_quickstart.core.vcs import GitConfig
from git_quickstart.installers.base import GCM, InstallerStep

logger = logging.getLogger(__name__)

WSL_GCM_PATH = "/mnt/c/Program Files/Git/mingw64/bin/git-credential-manager.exe"


class ApplyConfigurationStep(InstallerStep):
    """Reconciles git settings, the credential line and the token export."""

    name = "git-config"

    def __init__(
        self,
        profile: SystemProfile,
        settings: Settings,
        config: OperatorConfig,
        git_config: Optional[GitConfig] = None,
    ):
        super().__init__(profile, settings)
        self.config = config
        self.git_config = git_config or GitConfig()

    def run(self) -> StepOutcome:
        helper = self._resolve_helper()
        settings = [
            ("user.name", self.config.full_name.value),
            ("user.email", self.config.email_address.value),
            ("credential.helper", helper),
        ]
        helper_changed = False
        for key, value in settings:
            if not value:
                logger.info("No value for git config setting '%s', skipping.", key)
                continue
            changed = self.git_config.reconcile(key, value)
            if key == "credential.helper":
                helper_changed = changed

        token = self.config.auth_token.value
        credentials = self.settings.credentials_path
        ensure_file(credentials, mode=0o600)
        profile_changed = False
        if not token:
            logger.info("No token provided, leaving %s and profile untouched.", credentials)
        else:
            upsert_credential_line(
                credentials,
                credential_slot_pattern(self.settings.credential_host),
                self.settings.credential_line(token),
            )
            if self.config.token_from_environment:
                logger.info(
                    "%s already exported by the environment, leaving profile untouched.",
                    self.settings.token_var,
                )
            else:
                merge = upsert_profile_export(
                    self.profile.profile_path, self.settings.token_var, token
                )
                profile_changed = merge is MergeResult.CHANGED

        if helper is None:
            raise StepError(
                f'"{GCM}" was expected to be installed but was not found. '
                "Identity and token were applied; credential.helper was not set."
            )
        if profile_changed:
            return StepOutcome.SUCCESS_NEEDS_RELOAD
        if helper_changed:
            return StepOutcome.SUCCESS_NEEDS_FOLLOWUP
        return StepOutcome.SUCCESS

    def _resolve_helper(self) -> Optional[str]:
        helper = self.which(GCM)
        if helper:
            return helper
        if self.profile.guest_kind == "WSL2" and os.path.isfile(WSL_GCM_PATH):
            logger.info(
                '"%s" was not found but WSL2 detected, setting "credential.helper" to "%s".',
                GCM,
                WSL_GCM_PATH,
            )
            # git runs helpers through the shell
            return WSL_GCM_PATH.replace(" ", "\\ ")
        return None

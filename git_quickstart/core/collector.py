"""Config collector — gathers identity and token from the operator."""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Prompt

from git_quickstart.core.config import Settings
from git_quickstart.core.merger import find_profile_export
from git_quickstart.core.models import ConfigField, OperatorConfig, SystemProfile
from git_quickstart.core.vcs import GitConfig

logger = logging.getLogger(__name__)

# (label, current value, secret) -> raw answer
AskCallback = Callable[[str, Optional[str], bool], str]


class ConfigCollector:
    """Resolves what the configuration step should reconcile.

    Nothing is written here; the collector only reads current state and
    asks the operator for replacements.
    """

    def __init__(
        self,
        settings: Settings,
        git_config: Optional[GitConfig] = None,
        console: Optional[Console] = None,
        ask_callback: Optional[AskCallback] = None,
    ):
        self.settings = settings
        self.git_config = git_config or GitConfig()
        self.console = console or Console()
        self.ask_callback = ask_callback or self._interactive_ask

    def collect(self, profile: SystemProfile) -> OperatorConfig:
        self.console.print(
            "[cyan]Responses will be used to configure git and git-credential-manager.[/]\n"
        )
        full_name = self._ask_setting("Full name", "user.name")
        email = self._ask_setting("Email address", "user.email")

        token_var = self.settings.token_var
        env_token = os.environ.get(token_var, "").strip()
        if env_token:
            logger.info(
                "Environment variable %s is already set. Skipping token prompt.", token_var
            )
            token = ConfigField(current=env_token)
            from_env = True
        else:
            logger.info("Profile is \"%s\".", profile.profile_path)
            current = find_profile_export(profile.profile_path, token_var)
            token = ConfigField(
                current=current,
                entered=self.ask_callback("GitHub token", current, True).strip(),
            )
            from_env = False
        self.console.print()

        return OperatorConfig(
            full_name=full_name,
            email_address=email,
            auth_token=token,
            token_from_environment=from_env,
        )

    def _ask_setting(self, label: str, key: str) -> ConfigField:
        current = self.git_config.get(key)
        entered = self.ask_callback(label, current, False).strip()
        return ConfigField(current=current, entered=entered)

    def _interactive_ask(self, label: str, current: Optional[str], secret: bool) -> str:
        """Prompt once; an empty answer keeps ``current``."""
        if secret and current:
            label = f"{label} [dim](press Enter to keep the current token)[/]"
        answer = Prompt.ask(
            f"[cyan]{label}[/]",
            console=self.console,
            default=current or "",
            show_default=bool(current) and not secret,
            password=secret,
        )
        # Prompt returns the default on empty input; report that as "no entry".
        if current and answer == current:
            return ""
        return answer

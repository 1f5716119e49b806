"""Git global configuration access."""

from __future__ import annotations

import logging
from typing import Optional

from git_quickstart.core.commands import run_cmd

logger = logging.getLogger(__name__)

GIT = "git"


class GitConfig:
    """Reads and writes ``git config --global`` settings."""

    def __init__(self, git: str = GIT):
        self.git = git

    def get(self, key: str) -> Optional[str]:
        """Return the current value, or None if unset or git is missing."""
        try:
            result = run_cmd([self.git, "config", "--global", key], check=False)
        except OSError:
            logger.info("%s is not available, treating '%s' as unset", self.git, key)
            return None
        value = result.output.strip()
        if not result.ok or not value:
            return None
        return value

    def set(self, key: str, value: str) -> None:
        run_cmd([self.git, "config", "--global", "--replace-all", key, value])

    def reconcile(self, key: str, value: str) -> bool:
        """Write ``value`` only if it differs from the current one.

        Returns True if a write happened.
        """
        if self.get(key) != value:
            self.set(key, value)
            logger.info("git config setting '%s' was updated to '%s'.", key, value)
            return True
        logger.info("git config setting '%s' is already set to '%s', skipping.", key, value)
        return False

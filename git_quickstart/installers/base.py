"""InstallerStep — the contract every platform installer follows."""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from typing import Optional

from git_quickstart.core.config import Settings
from git_quickstart.core.models import StepOutcome, SystemProfile

GCM = "git-credential-manager"


class InstallerStep(ABC):
    """A named unit of work run by the StepRunner.

    ``run`` executes on a worker thread. It reports partial success through
    its return value and failure by raising.
    """

    name: str

    def __init__(self, profile: SystemProfile, settings: Settings):
        self.profile = profile
        self.settings = settings

    @abstractmethod
    def run(self) -> StepOutcome: ...

    @staticmethod
    def which(command: str) -> Optional[str]:
        return shutil.which(command)

"""Exception hierarchy for git-quickstart."""

from __future__ import annotations

from typing import Sequence


class QuickstartError(Exception):
    """Base class for every error raised by git-quickstart."""


class PreflightError(QuickstartError):
    """Raised before any mutation when the machine cannot be set up."""


class UnsupportedPlatform(PreflightError):
    pass


class UnsupportedShell(PreflightError):
    pass


class MissingCommand(PreflightError):
    def __init__(self, command: str):
        super().__init__(f'Required command "{command}" was not found.')
        self.command = command


class ElevationUnavailable(PreflightError):
    pass


class RunningElevated(PreflightError):
    pass


class StepError(QuickstartError):
    """Raised inside an installer step; the step runner records it as a failure."""


class UnknownOperatingSystem(StepError):
    def __init__(self, os_name: str):
        super().__init__(f'Unknown operating system "{os_name}".')
        self.os_name = os_name


class CommandError(StepError):
    def __init__(self, argv: Sequence[str], returncode: int, output: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"Command failed ({returncode}): {' '.join(self.argv)}"
        )

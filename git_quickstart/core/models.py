"""Core data models for git-quickstart."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class OSName(Enum):
    UBUNTU = "Ubuntu"
    MACOS = "MacOS"
    UNKNOWN = "Unknown"


class KernelFamily(Enum):
    LINUX = "Linux"
    DARWIN = "Darwin"


class ShellKind(Enum):
    BASH = "bash"
    ZSH = "zsh"


@dataclass(frozen=True)
class SystemProfile:
    os_name: OSName
    os_version: str
    os_major_version: int
    architecture: str
    kernel_family: KernelFamily
    is_virtualized_guest: bool
    shell_kind: ShellKind
    profile_path: str
    guest_kind: Optional[str] = None  # "WSL2", "OrbStack"

    @property
    def machine(self) -> str:
        if self.guest_kind:
            return f"{self.architecture}/{self.guest_kind}"
        return self.architecture


@dataclass(frozen=True)
class ConfigField:
    """A value read from current state plus what the operator typed."""

    current: Optional[str] = None
    entered: str = ""

    @property
    def value(self) -> str:
        if self.entered:
            return self.entered
        return self.current or ""


@dataclass(frozen=True)
class OperatorConfig:
    full_name: ConfigField
    email_address: ConfigField
    auth_token: ConfigField
    token_from_environment: bool = False


class StepOutcome(Enum):
    SUCCESS = 0
    SUCCESS_NEEDS_RELOAD = 90
    SUCCESS_NEEDS_FOLLOWUP = 91
    FAILED = 1

    @classmethod
    def from_exit_code(cls, code: int) -> StepOutcome:
        for outcome in cls:
            if outcome.value == code and outcome is not cls.FAILED:
                return outcome
        return cls.FAILED

    @property
    def succeeded(self) -> bool:
        return self is not StepOutcome.FAILED


@dataclass(frozen=True)
class StepResult:
    name: str
    outcome: StepOutcome
    detail: str = ""


@dataclass
class RunState:
    environment_updated: bool = False
    followup_needed: bool = False
    any_step_failed: bool = False
    results: list[StepResult] = field(default_factory=list)

    def record(self, result: StepResult) -> None:
        """Fold one step result into the aggregate flags."""
        self.results.append(result)
        if result.outcome is StepOutcome.SUCCESS_NEEDS_RELOAD:
            self.environment_updated = True
        elif result.outcome is StepOutcome.SUCCESS_NEEDS_FOLLOWUP:
            self.followup_needed = True
        elif result.outcome is StepOutcome.FAILED:
            self.any_step_failed = True


class MergeResult(Enum):
    CHANGED = "changed"
    UNCHANGED = "unchanged"


@dataclass
class InstallReport:
    state: RunState
    log_path: str
    duration_seconds: float

    @property
    def success(self) -> bool:
        return not self.state.any_step_failed

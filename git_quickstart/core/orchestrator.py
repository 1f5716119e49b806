"""Orchestrator — preflight, collect, install, configure, report."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from rich.console import Console

from git_quickstart.core.collector import ConfigCollector
from git_quickstart.core.config import Settings
from git_quickstart.core.environment import probe, require_commands
from git_quickstart.core.logging_utils import log_session
from git_quickstart.core.models import InstallReport, OperatorConfig, RunState, SystemProfile
from git_quickstart.core.privilege import resolve_elevation
from git_quickstart.core.runner import StepRunner
from git_quickstart.installers.base import InstallerStep
from git_quickstart.installers.vcs_client import EnsureVcsClientStep
from git_quickstart.installers.vcs_config import ApplyConfigurationStep

logger = logging.getLogger(__name__)


def build_steps(
    profile: SystemProfile, settings: Settings, config: OperatorConfig
) -> list[InstallerStep]:
    return [
        EnsureVcsClientStep(profile, settings),
        ApplyConfigurationStep(profile, settings, config),
    ]


class Orchestrator:
    """Runs one installation: probe → elevate → collect → steps → report.

    Preflight errors propagate to the caller before anything is changed.
    Step failures are folded into the RunState and only surface in the
    completion report.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        collector_factory: Optional[Callable[[Settings, Console], ConfigCollector]] = None,
    ):
        self.settings = settings or Settings()
        self.console = console or Console()
        self.collector_factory = collector_factory or (
            lambda s, c: ConfigCollector(s, console=c)
        )

    def run(self) -> InstallReport:
        start_time = time.time()
        with log_session(self.settings.log_dir) as log_path:
            profile = probe()
            require_commands(profile)
            resolve_elevation(profile)

            collector = self.collector_factory(self.settings, self.console)
            config = collector.collect(profile)

            state = RunState()
            runner = StepRunner(self.console)
            for step in build_steps(profile, self.settings, config):
                state.record(runner.run_step(step.name, step.run))

            report = InstallReport(
                state=state,
                log_path=log_path,
                duration_seconds=time.time() - start_time,
            )
            logger.info(
                "Run finished in %.1fs: failed=%s reload=%s followup=%s",
                report.duration_seconds,
                state.any_step_failed,
                state.environment_updated,
                state.followup_needed,
            )
        self._display_report(report)
        return report

    def _display_report(self, report: InstallReport) -> None:
        state = report.state
        elapsed = f"[dim]({report.duration_seconds:.1f}s)[/]"
        self.console.print()
        if state.any_step_failed:
            self.console.print(f"[red]✗[/] Done! {elapsed}\n")
            self.console.print(
                f"[yellow]An error occurred. Review \"{report.log_path}\" for more information.[/]"
            )
            for result in state.results:
                if not result.outcome.succeeded and result.detail:
                    self.console.print(f"[yellow]  {result.name}: {result.detail}[/]")
        else:
            self.console.print(f"[green]✓[/] Done! {elapsed}\n")
        self.console.print(
            "[cyan]🚀 You should now be able to use git and git-credential-manager "
            "to clone a private repository.[/]\n"
        )
        if state.followup_needed:
            self.console.print(
                "[yellow]Additional configuration needed. "
                "Run \"git-credential-manager configure\".[/]"
            )
        if state.environment_updated:
            self.console.print(
                "[yellow]Environment was updated. Reload your current shell before proceeding.[/]"
            )

"""Step runner — runs one installer step in the background behind a spinner."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Union

from rich.console import Console

from git_quickstart.core.models import StepOutcome, StepResult

logger = logging.getLogger(__name__)

StepThunk = Callable[[], Union[StepOutcome, int, None]]

SPINNER = "dots"
REFRESH_PER_SECOND = 20  # 50 ms per frame


def to_outcome(raw: Union[StepOutcome, int, None]) -> StepOutcome:
    """Map whatever a step returned onto a StepOutcome.

    Raw integers follow the exit-code convention: 0 success, 90 needs
    reload, 91 needs follow-up, anything else failed.
    """
    if isinstance(raw, StepOutcome):
        return raw
    if raw is None:
        return StepOutcome.SUCCESS
    return StepOutcome.from_exit_code(int(raw))


class StepRunner:
    """Executes named steps sequentially, one worker thread at a time."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def run_step(self, name: str, thunk: StepThunk) -> StepResult:
        """Run ``thunk`` to completion and report its outcome.

        Exceptions raised by the step are logged and become FAILED; they
        never propagate past this method. The cursor is hidden while the
        spinner runs and always restored.
        """
        logger.info("=" * 35)
        logger.info("%s: starting", name)
        logger.info("=" * 35)

        detail = ""
        self.console.show_cursor(False)
        try:
            with ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"step-{name}") as pool:
                future = pool.submit(thunk)
                with self.console.status(
                    f"Installing {name}",
                    spinner=SPINNER,
                    spinner_style="blue",
                    refresh_per_second=REFRESH_PER_SECOND,
                ):
                    try:
                        outcome = to_outcome(future.result())
                    except Exception as e:
                        logger.exception("Step %s raised", name)
                        outcome = StepOutcome.FAILED
                        detail = str(e)
        finally:
            self.console.show_cursor(True)

        logger.info("%s: completed with outcome %s (%d)", name, outcome.name, outcome.value)
        self._display(name, outcome)
        return StepResult(name=name, outcome=outcome, detail=detail)

    def _display(self, name: str, outcome: StepOutcome) -> None:
        if outcome.succeeded:
            self.console.print(f"[green]✓[/] Installing {name}")
        else:
            self.console.print(f"[red]✗[/] Installing {name}")

"""External command runner — every collaborator tool goes through run_cmd."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import urllib.request
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from git_quickstart.core.errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[str] = None,
    capture: bool = True,
) -> CmdResult:
    """Run a command with consistent logging.

    stdout and stderr are merged and written to the log, never to the
    terminal. ``capture=False`` hands the terminal to the child instead,
    which is only used for interactive prompts such as ``sudo -v``.
    Raises CommandError on a non-zero exit when ``check`` is set.
    """
    argv_list = list(argv)
    logger.info("CMD %s", format_argv(argv_list))

    if capture:
        p = subprocess.run(
            argv_list,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            text=True,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
        output = p.stdout or ""
    else:
        p = subprocess.run(
            argv_list,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
        output = ""

    if output.strip():
        logger.info("OUTPUT %s", output.rstrip())
    logger.info("EXIT %d %s", p.returncode, argv_list[0])

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, output)

    return CmdResult(argv=argv_list, returncode=p.returncode, output=output)


def download_file(url: str, dest: str, timeout: int = 60) -> str:
    """Fetch ``url`` into ``dest`` and return ``dest``."""
    logger.info("GET %s -> %s", url, dest)
    req = urllib.request.Request(
        url,
        headers={"User-Agent": "git-quickstart/1.0"},
    )
    with urllib.request.urlopen(req, timeout=timeout) as resp, open(dest, "wb") as f:
        shutil.copyfileobj(resp, f)
    return dest

"""Per-run log file."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

LOG_NAME = "install.log"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)


@contextmanager
def log_session(log_dir: Optional[str] = None, level: int = logging.INFO) -> Iterator[str]:
    """Route all package logging to a fresh ``install.log`` for one run.

    The file is truncated on entry; the handler is removed and closed on
    exit. Yields the log file path.
    """
    directory = log_dir or tempfile.mkdtemp(prefix="git-quickstart-")
    Path(directory).mkdir(parents=True, exist_ok=True)
    log_path = os.path.join(directory, LOG_NAME)

    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setFormatter(_FORMAT)
    handler.setLevel(level)

    package_logger = logging.getLogger("git_quickstart")
    previous_level = package_logger.level
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.info("Logging to %s", log_path)
    try:
        yield log_path
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(previous_level)
        handler.close()

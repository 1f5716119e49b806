"""Idempotent line merges for shell profiles and the git credential store.

Files are loaded as an ordered list of lines with their original line
endings, the target line is located by a regex predicate (never by line
number), replaced or appended, and the result is written back atomically
through a temp file in the same directory. Every other line is preserved
byte for byte.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlsplit

from git_quickstart.core.models import MergeResult

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

PROFILE_COMMENT = "# github token for private registries"
BACKUP_SUFFIX = ".bak"


def ensure_file(path: PathLike, mode: Optional[int] = None) -> bool:
    """Create ``path`` (and its parent) if missing. Returns True if created."""
    p = Path(path)
    if p.exists():
        return False
    p.parent.mkdir(parents=True, exist_ok=True)
    p.touch()
    if mode is not None:
        os.chmod(p, mode)
    logger.info("Created %s", p)
    return True


def read_lines(path: PathLike) -> list[str]:
    with open(path, encoding="utf-8", newline="") as f:
        return f.readlines()


def write_lines(path: PathLike, lines: list[str], backup: bool = False) -> None:
    """Atomically replace ``path`` with ``lines``, optionally keeping a .bak copy."""
    p = Path(path)
    if backup and p.exists():
        shutil.copy2(p, str(p) + BACKUP_SUFFIX)
    fd, tmp = tempfile.mkstemp(dir=str(p.parent), prefix=f".{p.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.writelines(lines)
        if p.exists():
            shutil.copymode(p, tmp)
        os.replace(tmp, p)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def _export_pattern(var_name: str) -> re.Pattern[str]:
    return re.compile(
        rf"^\s*export\s+{re.escape(var_name)}=(?P<value>.*?)\s*$",
        re.IGNORECASE,
    )


def _strip_eol(line: str) -> tuple[str, str]:
    body = line.rstrip("\r\n")
    return body, line[len(body):]


def _unquote(raw: str) -> str:
    try:
        parts = shlex.split(raw, comments=True)
    except ValueError:
        return raw
    return parts[0] if len(parts) == 1 else raw


def _appended(lines: list[str], new: list[str]) -> list[str]:
    out = list(lines)
    if out and not out[-1].endswith(("\n", "\r")):
        out[-1] += "\n"
    out.extend(f"{line}\n" for line in new)
    return out


def export_line(var_name: str, value: str) -> str:
    return f"export {var_name}={shlex.quote(value)}"


def find_profile_export(path: PathLike, var_name: str) -> Optional[str]:
    """Return the value exported for ``var_name`` in ``path``, if any."""
    if not Path(path).exists():
        return None
    pattern = _export_pattern(var_name)
    for line in read_lines(path):
        match = pattern.match(_strip_eol(line)[0])
        if match:
            return _unquote(match.group("value"))
    return None


def upsert_profile_export(
    path: PathLike,
    var_name: str,
    value: str,
    comment: str = PROFILE_COMMENT,
) -> MergeResult:
    """Make ``path`` export ``var_name=value`` exactly once.

    An existing export line (variable name matched case-insensitively) is
    rewritten in place when its value differs, keeping a ``.bak`` copy of
    the previous file. Otherwise a blank line, ``comment`` and the export
    line are appended.
    """
    ensure_file(path)
    lines = read_lines(path)
    pattern = _export_pattern(var_name)

    for index, line in enumerate(lines):
        body, eol = _strip_eol(line)
        match = pattern.match(body)
        if match is None:
            continue
        if _unquote(match.group("value")) == value:
            logger.info("Profile %s already exports %s with correct value. Skipping.", path, var_name)
            return MergeResult.UNCHANGED
        logger.info("Profile %s exports %s with stale value. Updating.", path, var_name)
        lines[index] = export_line(var_name, value) + eol
        write_lines(path, lines, backup=True)
        return MergeResult.CHANGED

    logger.info("Adding export of %s to profile %s.", var_name, path)
    write_lines(path, _appended(lines, ["", comment, export_line(var_name, value)]))
    return MergeResult.CHANGED


def ensure_profile_line(path: PathLike, line: str, comment: str) -> MergeResult:
    """Append ``line`` (preceded by ``comment``) unless it is already present."""
    ensure_file(path)
    lines = read_lines(path)
    if any(_strip_eol(existing)[0].strip() == line for existing in lines):
        logger.info("Profile %s already contains %r. Skipping.", path, line)
        return MergeResult.UNCHANGED
    logger.info("Adding %r to profile %s.", line, path)
    write_lines(path, _appended(lines, ["", comment, line]))
    return MergeResult.CHANGED


def credential_slot_pattern(host: str, username: str = "oauth2") -> str:
    """Pattern matching this tool's credential line for ``host``, any secret."""
    return rf"^https://{re.escape(username)}:[^@\s]*@{re.escape(host)}/?$"


def _same_credential(a: str, b: str) -> bool:
    """Scheme, host and user compare case-insensitively; the secret exactly."""
    try:
        left, right = urlsplit(a.strip()), urlsplit(b.strip())
        if not (left.scheme and left.hostname and right.scheme and right.hostname):
            return a.strip().lower() == b.strip().lower()
        same_port = left.port == right.port
    except ValueError:
        # malformed URL (bad port or bracketed host) on an unrelated line
        return False
    return (
        left.scheme.lower() == right.scheme.lower()
        and left.hostname == right.hostname  # urlsplit lowercases hostname
        and same_port
        and (left.username or "").lower() == (right.username or "").lower()
        and left.password == right.password
        and left.path.rstrip("/") == right.path.rstrip("/")
    )


def upsert_credential_line(path: PathLike, host_pattern: str, new_line: str) -> MergeResult:
    """Make ``path`` contain ``new_line`` in the slot matched by ``host_pattern``.

    A line equal to ``new_line`` is left alone; the first line matching
    ``host_pattern`` (case-insensitive) with a different credential is
    rewritten in place; otherwise ``new_line`` is appended. Other lines,
    including other accounts on the same host, are untouched.
    """
    created = ensure_file(path, mode=0o600)
    lines = read_lines(path)
    pattern = re.compile(host_pattern, re.IGNORECASE)

    if any(_same_credential(_strip_eol(line)[0], new_line) for line in lines):
        logger.info("Credential store %s already holds the credential. Skipping.", path)
        return MergeResult.UNCHANGED

    for index, line in enumerate(lines):
        body, eol = _strip_eol(line)
        if pattern.match(body.strip()):
            logger.info("Credential store %s holds a stale credential. Updating.", path)
            lines[index] = new_line + eol
            write_lines(path, lines)
            return MergeResult.CHANGED

    logger.info("Adding credential to %s%s.", path, " (new file)" if created else "")
    write_lines(path, _appended(lines, [new_line]))
    return MergeResult.CHANGED

"""Run settings — CLI flag → env var → default."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

TOKEN_VAR = "GIT_HUB_PKG_TOKEN"
DEFAULT_HOST = "github.com"
GCM_VERSION = "2.6.0"

_ENV_PREFIX = "GIT_QUICKSTART_"


@dataclass(frozen=True)
class Settings:
    token_var: str = TOKEN_VAR
    credential_host: str = DEFAULT_HOST
    gcm_version: str = GCM_VERSION
    log_dir: Optional[str] = None

    @property
    def credentials_path(self) -> str:
        return os.path.join(os.path.expanduser("~"), ".git-credentials")

    def credential_line(self, token: str) -> str:
        return f"https://oauth2:{token}@{self.credential_host}"


def _from_env(name: str) -> Optional[str]:
    value = os.environ.get(_ENV_PREFIX + name, "").strip()
    return value or None


def resolve_settings(
    host: Optional[str] = None,
    log_dir: Optional[str] = None,
) -> Settings:
    """Build Settings from CLI values, falling back to GIT_QUICKSTART_* vars."""
    return Settings(
        credential_host=host or _from_env("HOST") or DEFAULT_HOST,
        gcm_version=_from_env("GCM_VERSION") or GCM_VERSION,
        log_dir=log_dir or _from_env("LOG_DIR"),
    )

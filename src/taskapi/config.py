"""Application settings loaded from environment variables.

Every variable carries the ``TASKAPI_`` prefix. Values may also come from a
``.env`` file in the working directory; the process environment wins over
the file. Malformed numeric or boolean values fall back to the default
instead of failing at startup.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import TypeVar

from dotenv import dotenv_values

ENV_PREFIX = "TASKAPI"
DEFAULT_ENV_FILE = ".env"

N = TypeVar("N", int, float)


class _EnvReader:
    """Typed access to ``TASKAPI_*`` values; blank counts as unset."""

    def __init__(self, values: Mapping[str, str | None]) -> None:
        self._values = values

    def raw(self, suffix: str) -> str | None:
        value = self._values.get(f"{ENV_PREFIX}_{suffix}")
        if value is None or not value.strip():
            return None
        return value.strip()

    def text(self, suffix: str, default: str) -> str:
        value = self.raw(suffix)
        return default if value is None else value

    def number(self, suffix: str, default: N, cast: Callable[[str], N]) -> N:
        value = self.raw(suffix)
        if value is None:
            return default
        try:
            return cast(value)
        except ValueError:
            return default

    def flag(self, suffix: str, default: bool) -> bool:
        value = self.raw(suffix)
        if value is None:
            return default
        return value.lower() in {"1", "true", "yes", "y", "on"}

    def items(self, suffix: str, default: list[str]) -> list[str]:
        value = self.raw(suffix)
        if value is None:
            return list(default)
        return value.replace(",", " ").split()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Storage ----
    db_path: Path
    db_timeout: float

    # ---- HTTP ----
    api_prefix: str
    cors_origins: list[str]
    host: str
    port: int
    reload: bool

    # ---- Logging ----
    log_level: str
    log_file: Path | None


def _read_env_file(env_file: str | Path | None) -> dict[str, str | None]:
    if env_file is None or not Path(env_file).is_file():
        return {}
    return dotenv_values(env_file)


def load_settings(
    env_file: str | Path | None = DEFAULT_ENV_FILE,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build a fresh Settings object.

    ``env_file`` is read with python-dotenv when it exists; keys already in
    ``environ`` (``os.environ`` by default) take precedence over it.
    """
    env = _EnvReader({**_read_env_file(env_file), **(os.environ if environ is None else environ)})

    prefix = env.text("API_PREFIX", "").rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix

    log_file = env.raw("LOG_FILE")

    return Settings(
        db_path=Path(env.text("DB_PATH", "tasks.db")).expanduser(),
        db_timeout=env.number("DB_TIMEOUT", 30.0, float),
        api_prefix=prefix,
        cors_origins=env.items("CORS_ORIGINS", ["*"]),
        host=env.text("HOST", "0.0.0.0"),
        port=env.number("PORT", 8000, int),
        reload=env.flag("RELOAD", False),
        log_level=env.text("LOG_LEVEL", "INFO").upper(),
        log_file=Path(log_file).expanduser() if log_file else None,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return load_settings()

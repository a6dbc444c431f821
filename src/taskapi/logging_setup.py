"""Logging configuration for the API process."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Third-party loggers that are too chatty at INFO.
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "multipart")


def setup_logging(level: str | int = logging.INFO, log_file: str | Path | None = None) -> None:
    """
    Configure the root logger with:
    - Console handler on stderr
    - Optional file handler (parent directories are created)

    Call this once, before the application starts serving.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from taskapi.logging_setup import setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "nested" / "api.log"
    setup_logging("DEBUG", log_file)

    logging.getLogger("taskapi.test").debug("hello from test")
    for h in logging.getLogger().handlers:
        h.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG taskapi.test: hello from test" in text


def test_setup_logging_replaces_handlers() -> None:
    setup_logging("INFO")
    setup_logging("WARNING")

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.WARNING


def test_unknown_level_defaults_to_info() -> None:
    setup_logging("LOUD")
    assert logging.getLogger().level == logging.INFO

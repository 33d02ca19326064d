"""Tests for trace logging setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from p4unity.logs import configure_logging, log_event


def test_quiet_logger_writes_nothing(tmp_path: Path) -> None:
    logger = configure_logging(False, log_dir=tmp_path / "logs")
    log_event(logger, "Boot", args=["1"])

    assert not (tmp_path / "logs").exists()
    assert all(isinstance(h, logging.NullHandler) for h in logger.handlers)


def test_verbose_logger_writes_json_lines(tmp_path: Path) -> None:
    logger = configure_logging(True, log_dir=tmp_path / "logs")
    log_event(logger, "fstat", path="//Depot/Game/Assets/a.png.meta", ignored_action="delete")
    configure_logging(False)

    files = list((tmp_path / "logs").glob("*.txt"))
    assert len(files) == 1
    entry = json.loads(files[0].read_text(encoding="utf-8").splitlines()[0])
    assert entry["msg"] == "fstat"
    assert entry["ignored_action"] == "delete"
    assert entry["level"] == "info"


def test_each_verbose_run_gets_its_own_file(tmp_path: Path) -> None:
    for _ in range(2):
        log_event(configure_logging(True, log_dir=tmp_path), "Boot")
    configure_logging(False)

    assert len(list(tmp_path.glob("*.txt"))) == 2

"""Path policy: which file records are subject to pairing validation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Literal

from p4unity.logs import log_event
from p4unity.validation.types import FileRecord

SkipReason = Literal["tilde", "dotfile", "whitelist", "assets_root"]

ASSETS_SEGMENT = "/Assets/"


def split_depot_path(path: str) -> tuple[str, str]:
    """Split a depot path into (directory, leaf); the directory keeps its trailing slash."""
    head, sep, leaf = path.rpartition("/")
    return head + sep, leaf


class PolicyFilter:
    """Apply ignore rules and the path whitelist to parsed records."""

    def __init__(self, whitelist: Sequence[str], logger: logging.Logger):
        self.whitelist = tuple(whitelist)
        self.logger = logger

    def check(self, record: FileRecord) -> SkipReason | None:
        """Return None when the record should be validated, otherwise why it was skipped."""
        directory, leaf = split_depot_path(record.path)

        # Unity never imports anything under a `Foo~/` directory
        if "~/" in directory:
            return "tilde"

        # .p4ignore, .tests.json et al
        if leaf.startswith("."):
            return "dotfile"

        matched = next((prefix for prefix in self.whitelist if directory.startswith(prefix)), None)
        if matched is None:
            return "whitelist"

        if ASSETS_SEGMENT not in directory:
            return "assets_root"

        log_event(self.logger, "Whitelist", path=record.path, passed=matched)
        return None

    def apply(self, records: Sequence[FileRecord]) -> list[FileRecord]:
        """Return the records that survive every rule, in input order."""
        kept = []
        for record in records:
            reason = self.check(record)
            if reason is None:
                kept.append(record)
            else:
                log_event(self.logger, "Skipped", path=record.path, reason=reason)
        return kept

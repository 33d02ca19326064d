"""Bucket file records by the kind of change being made."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from p4unity.logs import log_event
from p4unity.validation.types import Classification, FileRecord

ADD_OPS = frozenset({"add", "import", "move/add"})
DELETE_OPS = frozenset({"delete", "purge", "archive", "move/delete"})
# head actions that mean the file is present in the depot right now
EXISTS_OPS = frozenset({"add", "edit", "import", "move/add"})


def is_add_like(operation: str) -> bool:
    return operation in ADD_OPS


def is_delete_like(operation: str) -> bool:
    return operation in DELETE_OPS


def is_exists_like(operation: str) -> bool:
    return operation in EXISTS_OPS


def classify_records(records: Iterable[FileRecord], logger: logging.Logger) -> Classification:
    """Build the add/delete path sets for one run.

    Operations outside both vocabularies (edit, integrate, branch, ...) land in
    neither set and are never pairing-checked.
    """
    result = Classification()
    for record in records:
        if is_add_like(record.operation):
            log_event(logger, "MarkedForAdd", path=record.path)
            result.added.add(record.path)
            result.added_lower.add(record.path.lower())
        if is_delete_like(record.operation):
            log_event(logger, "MarkedForDelete", path=record.path)
            result.deleted.add(record.path)
            result.deleted_lower.add(record.path.lower())
    return result

"""Parsing for `p4 -s describe -s` reports."""

from __future__ import annotations

import re
from collections.abc import Iterable

from p4unity.errors import ChangelistNotFoundError, ReportShapeError
from p4unity.validation.types import ChangelistReport, FileRecord

# //Depot/Project/Assets/Native/Binding.cs.meta#1 add
_FILE_RECORD = re.compile(r"^([^#]+)#(\d+) ([\w/]+)$")
_NO_SUCH_CHANGELIST = "no such changelist"

HEADER_TAG = "text:"
RECORD_TAG = "info1:"
ERROR_TAG = "error:"


def filter_lines_by_tag(lines: Iterable[str], tag: str) -> list[str]:
    """Keep lines tagged `tag` by `p4 -s`, with the tag cut off and blanks dropped."""
    result = []
    for line in lines:
        if line.startswith(tag):
            value = line[len(tag):].strip()
            if value:
                result.append(value)
    return result


def split_report(raw: str, changelist: int | None = None) -> ChangelistReport:
    """Split raw describe output into header and file-record blocks.

    With the -s global flag p4 tags each line, e.g.

        text: Change 9148 by harry@harry_pc on 2020/01/01 11:11:11 *pending*
        text:  Example changelist
        text: Affected files ...
        info1: //Depot/Thing/Assets/Native/Binding.cs.meta#1 add

    Raises:
        ChangelistNotFoundError: If p4 says the changelist does not exist
    """
    lines = raw.splitlines()
    if lines and _NO_SUCH_CHANGELIST in lines[0]:
        raise ChangelistNotFoundError(changelist if changelist is not None else -1)

    return ChangelistReport(
        header=tuple(filter_lines_by_tag(lines, HEADER_TAG)),
        records=tuple(filter_lines_by_tag(lines, RECORD_TAG)),
    )


def parse_record(line: str) -> FileRecord:
    """Parse one file record line.

    Raises:
        ReportShapeError: If the line is not `<path>#<revision> <operation>`
    """
    match = _FILE_RECORD.match(line.strip())
    if match is None:
        raise ReportShapeError(line)
    path, revision, operation = match.groups()
    return FileRecord(path=path, revision=int(revision), operation=operation)

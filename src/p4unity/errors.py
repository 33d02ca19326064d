"""Error types raised across p4unity.

Usage errors mean the changelist could not be validated at all. Structural
errors abort a run without a verdict. Content violations are not exceptions;
they accumulate on the Verdict.
"""

from __future__ import annotations


class P4UnityError(RuntimeError):
    """Base class for all p4unity failures."""


class ConfigError(P4UnityError):
    """Config file missing, malformed, or an override failed to parse."""


class UsageError(P4UnityError):
    """The invocation itself was unusable (bad argument, unknown changelist)."""


class ChangelistNotFoundError(UsageError):
    """p4 reported the requested changelist does not exist."""

    def __init__(self, changelist: int):
        super().__init__(f"cannot find changelist [{changelist}]")
        self.changelist = changelist


class P4CommandError(UsageError):
    """The p4 executable could not be launched or returned non-zero."""


class StructuralError(P4UnityError):
    """The report or a remote lookup was unusable; no verdict is produced."""


class EmptyReportError(StructuralError):
    """The describe report had no header or no file records."""


class ReportShapeError(StructuralError):
    """A file record line did not match the expected `path#rev op` shape."""

    def __init__(self, line: str):
        super().__init__(f"unexpected report shape; file parse failed for '{line}'")
        self.line = line


class RemoteLookupError(StructuralError):
    """An fstat existence check failed without a definitive answer."""

    def __init__(self, depot_path: str, detail: str):
        super().__init__(f"fstat failed for '{depot_path}'\n( {detail} )")
        self.depot_path = depot_path
        self.detail = detail

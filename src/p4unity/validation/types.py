"""Types for changelist validation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

ViolationType = Literal["missing_meta", "missing_asset", "orphaned_meta"]

# Given a depot path, True when it exists at head with an add/edit-style action.
# Raises RemoteLookupError when no definitive answer is available.
ExistenceOracle = Callable[[str], bool]

META_SUFFIX = ".meta"


@dataclass(frozen=True)
class FileRecord:
    """One parsed `<depot-path>#<revision> <operation>` line."""

    path: str
    revision: int
    operation: str


@dataclass(frozen=True)
class ChangelistReport:
    """A describe report split into commit-message header and file records."""

    header: tuple[str, ...]
    records: tuple[str, ...]


@dataclass
class Classification:
    """Paths bucketed by operation, with lower-cased mirrors for case-insensitive lookups."""

    added: set[str] = field(default_factory=set)
    added_lower: set[str] = field(default_factory=set)
    deleted: set[str] = field(default_factory=set)
    deleted_lower: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class Violation:
    """Single pairing violation."""

    type: ViolationType
    path: str
    message: str


@dataclass
class Verdict:
    """Outcome of one validation run."""

    allowed: bool
    violations: list[Violation] = field(default_factory=list)
    bypassed: bool = False

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]

"""Asset/.meta pairing checks over a classified changelist."""

from __future__ import annotations

import logging
import posixpath

from p4unity.logs import log_event
from p4unity.validation.types import META_SUFFIX, Classification, ExistenceOracle, Violation


def is_meta(path: str) -> bool:
    return posixpath.splitext(path)[1] == META_SUFFIX


def is_directory_meta(meta_path: str) -> bool:
    """True when the .meta has no extension left once `.meta` is removed.

    Unity writes `Folder.meta` for folders, and the depot has no entry for a
    bare folder to pair against. Extensionless assets are indistinguishable.
    """
    base = meta_path[: -len(META_SUFFIX)]
    return not posixpath.splitext(base)[1].strip()


class PairingValidator:
    """Check that assets and their .meta files move through the depot together."""

    def __init__(self, oracle: ExistenceOracle, logger: logging.Logger):
        self.oracle = oracle
        self.logger = logger

    def _in_changelist(self, path: str, exact: set[str], lowered: set[str]) -> bool:
        return path in exact or path.lower() in lowered

    def check_added(self, classification: Classification) -> list[Violation]:
        """Every added asset needs its .meta, and every added .meta its asset.

        Partners are looked for in the changelist first (exact, then ignoring
        case) and then in the depot.

        Raises:
            RemoteLookupError: If a depot lookup fails
        """
        added, added_lower = classification.added, classification.added_lower
        log_event(self.logger, "Checking ADD list", count=len(added))

        violations: list[Violation] = []
        for path in sorted(added):
            if not is_meta(path):
                partner = path + META_SUFFIX
                if self._in_changelist(partner, added, added_lower) or self.oracle(partner):
                    continue
                violations.append(Violation(
                    type="missing_meta",
                    path=path,
                    message=f"Missing .meta file for '{path}'",
                ))
                continue

            if is_directory_meta(path):
                log_event(self.logger, "DirectoryMeta", path=path)
                continue

            partner = path[: -len(META_SUFFIX)]
            if self._in_changelist(partner, added, added_lower) or self.oracle(partner):
                continue
            violations.append(Violation(
                type="missing_asset",
                path=path,
                message=f"Missing asset for .meta file '{path}'",
            ))

        return violations

    def check_deleted(self, classification: Classification) -> list[Violation]:
        """A deleted asset must not leave its .meta behind in the depot.

        Deleted .meta files whose asset stays are not checked.

        Raises:
            RemoteLookupError: If a depot lookup fails
        """
        deleted, deleted_lower = classification.deleted, classification.deleted_lower
        log_event(self.logger, "Checking DEL list", count=len(deleted))

        violations: list[Violation] = []
        for path in sorted(deleted):
            if is_meta(path):
                continue

            partner = path + META_SUFFIX
            if self._in_changelist(partner, deleted, deleted_lower):
                continue
            # not deleted here; fine if it is already gone from the depot
            if not self.oracle(partner):
                continue
            violations.append(Violation(
                type="orphaned_meta",
                path=path,
                message=f"Need to delete the orphaned .meta for '{path}'",
            ))

        return violations

    def validate(self, classification: Classification) -> list[Violation]:
        """Run the add pass then the delete pass, collecting every violation."""
        return self.check_added(classification) + self.check_deleted(classification)

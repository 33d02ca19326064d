"""p4 queries used by the validation gate."""

from __future__ import annotations

import logging
import re

from p4unity.config import AppConfig
from p4unity.errors import P4CommandError, RemoteLookupError
from p4unity.logs import log_event
from p4unity.p4.exec import ExecError, P4Connection, run_p4
from p4unity.validation.classify import is_exists_like
from p4unity.validation.parser import ERROR_TAG, filter_lines_by_tag

# just the "headAction <operation>" line from fstat
_HEAD_ACTION = re.compile(r"(?m)headAction\s+([\w/]+)")

# <file> - no file(s) at that changelist number.  <- known, but not at that CL
# <file> - no such file(s).                       <- not known to p4 at all
_NO_FILES_MATCH = re.compile(r"no\s+(?:such)?\s?file\(s\)")


def connection_from_config(config: AppConfig) -> P4Connection:
    return P4Connection(
        server=config.perforce_server,
        user=config.perforce_user,
        password=config.perforce_pass,
    )


class P4Client:
    """Run describe and fstat against one server."""

    def __init__(self, connection: P4Connection, logger: logging.Logger):
        self.connection = connection
        self.logger = logger

    def describe_changelist(self, changelist: int) -> str:
        """Return the tagged `describe -s` output for a changelist.

        Raises:
            P4CommandError: If p4 cannot be launched or the describe fails
        """
        try:
            result = run_p4(["describe", "-s", str(changelist)], connection=self.connection)
        except ExecError as exc:
            raise P4CommandError(f"failed to launch P4; {exc}") from exc
        log_event(self.logger, "p4-describe", output=result.stdout)
        return result.stdout

    def file_exists_in_depot(self, depot_path: str) -> bool:
        """True when the head action of `depot_path` implies it is in the depot.

        Raises:
            RemoteLookupError: If fstat fails for any reason other than the file being unknown
        """
        try:
            result = run_p4(["fstat", depot_path], connection=self.connection, check=False)
        except ExecError as exc:
            raise RemoteLookupError(depot_path, str(exc)) from exc

        output = result.output
        log_event(self.logger, "fstat", path=depot_path, out=output)

        # p4 -s can report an error line (e.g. protections) and still exit 0
        has_error = bool(filter_lines_by_tag(output.splitlines(), ERROR_TAG))
        if result.returncode != 0 or has_error:
            if _NO_FILES_MATCH.search(output):
                return False
            raise RemoteLookupError(depot_path, output.strip() or f"exit status {result.returncode}")

        match = _HEAD_ACTION.search(output)
        if match is None:
            log_event(self.logger, "fstat", path=depot_path, failed="no headAction")
            return False

        head_action = match.group(1)
        if not is_exists_like(head_action):
            log_event(self.logger, "fstat", path=depot_path, ignored_action=head_action)
            return False
        return True

"""Command runner for the p4 command-line client."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for a p4 invocation."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """Combined stdout and stderr, in that order."""
        return self.stdout + self.stderr


class ExecError(RuntimeError):
    """Raised when p4 cannot be launched or returns non-zero in check mode."""

    def __init__(self, message: str, result: ExecResult | None = None):
        super().__init__(message)
        self.result = result

    @classmethod
    def from_result(cls, result: ExecResult, argv: list[str]) -> ExecError:
        detail = result.output.strip()
        return cls(f"command failed ({result.returncode}): {_render(argv)}\n{detail}", result)


@dataclass(frozen=True)
class P4Connection:
    """Global p4 connection flags; empty values defer to the p4 environment."""

    server: str = ""
    user: str = ""
    password: str = ""

    def global_args(self) -> list[str]:
        args: list[str] = []
        if self.server:
            args += ["-p", self.server]
        if self.user:
            args += ["-u", self.user]
        if self.password:
            args += ["-P", self.password]
        return args


def _render(argv: list[str]) -> str:
    # never echo the password into logs or trigger output
    masked = list(argv)
    for i, arg in enumerate(masked[:-1]):
        if arg == "-P":
            masked[i + 1] = "********"
    return " ".join(masked)


def run_command(argv: list[str], *, check: bool = True) -> ExecResult:
    """Run command and return structured result.

    Output is decoded as UTF-8 with surrogateescape: a non-unicode server can
    report Latin-1 depot paths, and those must round-trip unchanged when passed
    back as arguments.
    """
    try:
        completed = subprocess.run(
            argv,
            capture_output=True,
            encoding="utf-8",
            errors="surrogateescape",
            check=False,
        )
    except OSError as exc:
        raise ExecError(f"failed to launch {argv[0]}: {exc}") from exc
    result = ExecResult(
        argv=tuple(argv),
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
    if check and result.returncode != 0:
        raise ExecError.from_result(result, argv)
    return result


def run_p4(
    args: list[str],
    *,
    connection: P4Connection,
    check: bool = True,
) -> ExecResult:
    """Run a p4 command with tagged (-s) output."""
    return run_command(["p4", *connection.global_args(), "-s", *args], check=check)

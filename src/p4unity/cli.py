"""p4unity CLI - `change-content` trigger entry point.

Trigger table entry:

    p4unity change-content //Depot/... "p4unity %changelist%"
"""

from __future__ import annotations

import time
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from p4unity import __version__
from p4unity.config import load_config
from p4unity.errors import ConfigError, EmptyReportError, StructuralError, UsageError
from p4unity.logs import configure_logging, log_event
from p4unity.p4.client import P4Client, connection_from_config
from p4unity.validation.gate import run_gate

# Anything other than 0 halts the submit. Flipping EXIT_SUCCESS to non-zero is
# handy against a live depot: the checks run and report, but nothing lands.
EXIT_SUCCESS = 0
EXIT_BYPASS = 0
EXIT_PROBLEMS = 1
EXIT_ERROR_EXCEPTION = 1
EXIT_ERROR_EMPTY = 1
EXIT_ERROR_USAGE = 1

cli = typer.Typer(
    name="p4unity",
    help="Block Perforce submits that split Unity assets from their .meta files.",
    add_completion=False,
)
console = Console(soft_wrap=True)


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def parse_changelist(value: str) -> int:
    """Parse the changelist argument as a positive integer.

    Raises:
        UsageError: If the value is not a positive integer
    """
    try:
        changelist = int(value)
    except ValueError as e:
        raise UsageError(f"changelist {value} not a number ({e})") from e
    if changelist <= 0:
        raise UsageError(f"changelist {value} must be a positive number")
    return changelist


def _printable(text: str) -> str:
    """Undo surrogateescape from p4 output so odd depot bytes print as U+FFFD."""
    return escape(text.encode("utf-8", "surrogateescape").decode("utf-8", "replace"))


def _exit_code_for(exc: Exception) -> int:
    if isinstance(exc, UsageError):
        return EXIT_ERROR_USAGE
    if isinstance(exc, EmptyReportError):
        return EXIT_ERROR_EMPTY
    return EXIT_ERROR_EXCEPTION


@cli.command()
def check(
    changelist: str = typer.Argument(..., help="Changelist number, as passed by %changelist%."),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default ./p4unity.toml, then ./p4unity.yaml)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show p4unity version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Validate asset/.meta pairing for a changelist being submitted."""
    _ = version
    started = time.perf_counter()

    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[bold red]\\[p4unity:config][/bold red] {_printable(str(e))}")
        raise typer.Exit(EXIT_ERROR_EXCEPTION) from e

    logger = configure_logging(config.verbose_logs)
    log_event(logger, "Boot", args=[changelist])

    exit_code = EXIT_ERROR_EXCEPTION
    try:
        number = parse_changelist(changelist)
        client = P4Client(connection_from_config(config), logger)
        raw = client.describe_changelist(number)
        verdict = run_gate(raw, config, client.file_exists_in_depot, logger, changelist=number)

        if verdict.bypassed:
            console.print("[yellow]\\[p4unity] bypassing validation[/yellow]")
            exit_code = EXIT_BYPASS
        elif verdict.allowed:
            console.print("[green]success[/green]")
            exit_code = EXIT_SUCCESS
        else:
            for v in verdict.violations:
                console.print(f"[red]{_printable(v.message)}[/red]")
            console.print(
                f"[bold red]\\[p4unity] changelist {number} blocked "
                f"({len(verdict.violations)} problems)[/bold red]"
            )
            exit_code = EXIT_PROBLEMS

    except (UsageError, StructuralError) as e:
        console.print(f"[bold red]\\[p4unity][/bold red] {_printable(str(e))}")
        log_event(logger, "error", kind=type(e).__name__, detail=str(e))
        exit_code = _exit_code_for(e)
    finally:
        log_event(logger, "Performance", elapsed=f"{time.perf_counter() - started:.3f}s")

    raise typer.Exit(exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

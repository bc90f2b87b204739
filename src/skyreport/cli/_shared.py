"""State and error handling shared by the sub-commands."""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click.utils as click_utils
import typer

from skyreport import logger
from skyreport.cli.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_IOERR,
    EXIT_NOINPUT,
    EXIT_SOFTWARE,
    EXIT_UNAVAILABLE,
)
from skyreport.core.config import load_settings
from skyreport.core.pipeline import Runtime, dispatch
from skyreport.errors import (
    BaselineNotFoundError,
    ConfigError,
    NetworkError,
    ParseError,
    ProcessError,
    SkyreportError,
    StorageError,
    WorkspaceError,
)

if TYPE_CHECKING:
    from skyreport.core.config import Settings
    from skyreport.core.model.action import Action
    from skyreport.core.pipeline import RunResult

# Most specific first.
_EXIT_CODES: tuple[tuple[type[SkyreportError], int], ...] = (
    (BaselineNotFoundError, EXIT_NOINPUT),
    (ParseError, EXIT_DATAERR),
    (WorkspaceError, EXIT_SOFTWARE),
    (ProcessError, EXIT_SOFTWARE),
    (StorageError, EXIT_IOERR),
    (NetworkError, EXIT_UNAVAILABLE),
    (ConfigError, EXIT_CONFIG),
)


@dataclasses.dataclass(slots=True)
class CliOptions:
    """Global flags collected by the root callback."""

    debug: bool = False
    quiet: bool = False
    publish: bool = True
    config: Path | None = None


def exit_code_for(exc: SkyreportError) -> int:
    for kind, code in _EXIT_CODES:
        if isinstance(exc, kind):
            return code
    return EXIT_GENERIC


def use_color() -> bool:
    stdout_is_tty = bool(getattr(sys.stdout, "isatty", lambda: False)())
    return stdout_is_tty and not click_utils.should_strip_ansi(sys.stdout)


def _fail(opts: CliOptions, exc: SkyreportError) -> typer.Exit:
    logger.error("The task failed with: %s", exc)
    logger.error("skyreport operation failed")
    if opts.debug:
        raise exc
    return typer.Exit(code=exit_code_for(exc))


def load_cli_settings(opts: CliOptions) -> Settings:
    try:
        return load_settings(Path.cwd(), config_file=opts.config)
    except SkyreportError as exc:
        raise _fail(opts, exc) from exc


def run_action(opts: CliOptions, action: Action) -> RunResult:
    """Single place where a failed run is logged and turned into an exit code."""
    settings = load_cli_settings(opts)
    try:
        runtime = Runtime.create(settings, publish=opts.publish)
        return dispatch(action, runtime)
    except SkyreportError as exc:
        raise _fail(opts, exc) from exc


__all__ = ["CliOptions", "exit_code_for", "load_cli_settings", "run_action", "use_color"]

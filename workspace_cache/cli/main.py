"""Main CLI entry point for the workspace-cache command.

This module provides the Typer application used to inspect and maintain
the local workspace store: bootstrap it, summarize it, check the page tree,
rewrite old records in the current schema, and delete the record.
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ..config_loader import ConfigLoader
from ..errors import ConfigError
from ..persistence.errors import PersistenceError
from .models import ExitCode
from .output import OutputHandler
from .store_command import StoreCommand

app = typer.Typer(
    name="workspace-cache",
    help="""Inspect and maintain the local workspace store.

QUICK START:
  workspace-cache init       # Create the welcome page in an empty store
  workspace-cache show       # Summarize the stored workspace
  workspace-cache check      # Check page tree consistency
  workspace-cache migrate    # Rewrite the record in the current schema
  workspace-cache reset -y   # Delete the stored record""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)


@dataclass
class CliContext:
    """Options shared by every command, set by the app callback."""
    config_path: Optional[str]
    verbosity: int
    no_color: bool
    logdir: Optional[str]


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'workspace_cache' namespace logger; the root logger
    is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("workspace_cache")
    app_logger.setLevel(level)
    # Repeated invocations in one process must not stack handlers
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"workspace-cache_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _prepare(ctx: typer.Context):
    """Configure logging and load configuration for a command.

    Returns:
        Tuple of (OutputHandler, WorkspaceConfig)
    """
    options: CliContext = ctx.obj
    _configure_logging(options.verbosity, options.logdir)
    output = OutputHandler(verbosity=options.verbosity, no_color=options.no_color)

    try:
        config = ConfigLoader.load(options.config_path)
    except ConfigError as e:
        logger.error(f"Failed to load configuration: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.debug(f"Store directory: {config.store_dir}")
    output.debug(f"Storage key: {config.storage_key}")
    return output, config


def _fail(output: OutputHandler, action: str, error: Exception) -> None:
    if isinstance(error, PersistenceError):
        logger.error(f"{action} failed: {error}")
        output.error(f"{action} failed: {error}")
    else:
        logger.exception(f"Unexpected error during {action.lower()}")
        output.error(f"Unexpected error: {error}")
    raise typer.Exit(ExitCode.GENERAL_ERROR)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"workspace-cache version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Configuration file (default: {ConfigLoader.DEFAULT_CONFIG_FILE})",
        metavar="FILE",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Inspect and maintain the local workspace store."""
    ctx.obj = CliContext(
        config_path=config_path,
        verbosity=verbosity,
        no_color=no_color,
        logdir=logdir,
    )


@app.command()
def init(ctx: typer.Context) -> None:
    """Create the welcome page if the stored workspace has no pages."""
    output, config = _prepare(ctx)

    try:
        page_id = StoreCommand(config).init()
    except Exception as e:
        _fail(output, "Initialization", e)

    if page_id is None:
        output.warning("Workspace already has pages, nothing to do")
    else:
        output.success(f"Created welcome page {page_id}")
        output.info(f"  Store directory: {config.store_dir}")
    raise typer.Exit(ExitCode.SUCCESS)


@app.command()
def show(ctx: typer.Context) -> None:
    """Summarize the stored workspace."""
    output, config = _prepare(ctx)

    try:
        summary = StoreCommand(config).summarize()
    except Exception as e:
        _fail(output, "Loading", e)

    output.print_summary(summary)
    raise typer.Exit(ExitCode.SUCCESS)


@app.command()
def check(ctx: typer.Context) -> None:
    """Check the consistency of the stored page tree."""
    output, config = _prepare(ctx)

    try:
        problems = StoreCommand(config).check()
    except Exception as e:
        _fail(output, "Check", e)

    if problems:
        output.print_problems(problems)
        raise typer.Exit(ExitCode.INCONSISTENT)

    output.success("Page tree is consistent")
    raise typer.Exit(ExitCode.SUCCESS)


@app.command()
def migrate(ctx: typer.Context) -> None:
    """Rewrite the stored record in the current schema."""
    output, config = _prepare(ctx)

    try:
        with output.spinner("Migrating workspace..."):
            result = StoreCommand(config).migrate()
    except Exception as e:
        _fail(output, "Migration", e)

    if result is None:
        output.warning("No stored workspace found")
        raise typer.Exit(ExitCode.SUCCESS)

    changed, saved = result

    if not saved:
        output.error("Migrated workspace could not be saved; see log for details")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if changed:
        output.success("Workspace migrated to the current schema")
    else:
        output.success("Workspace already current, record rewritten")
    raise typer.Exit(ExitCode.SUCCESS)


@app.command()
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Delete without asking for confirmation",
    ),
) -> None:
    """Delete the stored workspace record."""
    output, config = _prepare(ctx)

    if not yes and not typer.confirm(
        f"Delete the workspace record '{config.storage_key}'?"
    ):
        output.warning("Reset cancelled")
        raise typer.Exit(ExitCode.SUCCESS)

    try:
        StoreCommand(config).reset()
    except Exception as e:
        _fail(output, "Reset", e)

    output.success(f"Deleted workspace record '{config.storage_key}'")
    raise typer.Exit(ExitCode.SUCCESS)


def main() -> None:
    """Main entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()

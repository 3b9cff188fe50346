"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Uses Rich for colored messages, spinners and tables. Supports verbosity
levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator, List

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner
from rich.table import Table

from .models import WorkspaceSummary


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Workspace migrated")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Args:
            message: Message to display with spinner
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def print_summary(self, summary: WorkspaceSummary) -> None:
        """Display a table describing the stored workspace.

        Args:
            summary: Counts gathered from the stored workspace
        """
        table = Table(title="Workspace", show_header=False)
        table.add_column("Item", style="bold")
        table.add_column("Value", justify="right")

        table.add_row("Pages", str(summary.page_count))
        table.add_row("Root pages", str(summary.root_page_count))
        table.add_row("Blocks", str(summary.block_count))
        table.add_row("Media blocks", str(summary.media_block_count))
        table.add_row("Daily tasks", str(summary.daily_task_count))
        table.add_row("Calendar events", str(summary.calendar_event_count))
        table.add_row("Wallets", str(summary.wallet_count))
        table.add_row("Transactions", str(summary.transaction_count))
        table.add_row("Record size", f"{summary.record_bytes} bytes")
        table.add_row("Current section", summary.current_section)

        self.console.print(table)

        if summary.problems:
            self.print_problems(summary.problems)

    def print_problems(self, problems: List[str]) -> None:
        """Display tree consistency problems in red."""
        self.console.print(f"\n[red]Found {len(problems)} problem(s):[/red]")
        for problem in problems:
            self.console.print(f"  [red]•[/red] {problem}")

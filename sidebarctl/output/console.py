# Sidebarctl Console Output
# Rich-based console output for user-friendly display

from pathlib import Path
from typing import Any, Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.table import Table

from sidebarctl.operations import BatchResult, Listing, OutcomeStatus
from sidebarctl.reload import ReloadResult

FULL_DISK_ACCESS_STEPS = "System Settings → Privacy & Security → Full Disk Access"
RELOAD_REMINDER = "Run with --reload to apply changes, or restart Finder manually."


class Console:
    """
    Console output manager using Rich.

    Confirmations go to stdout; warnings, errors and remediation go to stderr.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(no_color=not colored, highlight=False, soft_wrap=True)
        self._err_console = RichConsole(stderr=True, no_color=not colored, highlight=False, soft_wrap=True)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._err_console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._err_console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]✓[/green] {escape(message)}")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{escape(message)}[/blue]")

    def print_reload_reminder(self) -> None:
        self._console.print(f"[dim]{RELOAD_REMINDER}[/dim]")

    def print_remediation(self, message: str, store_path: Optional[Path | str] = None) -> None:
        """
        Print Full Disk Access guidance after an access failure.

        Args:
            message: The access error message.
            store_path: Store file that could not be accessed.
        """
        self.print_error(message)
        if store_path:
            self._err_console.print(f"    SFL path: {escape(str(store_path))}")
        self._err_console.print(
            f"    Fix: {FULL_DISK_ACCESS_STEPS} → enable your terminal (e.g., Terminal, iTerm2), then rerun."
        )

    def print_batch_result(self, result: BatchResult) -> None:
        """Print one line per path of a multi-path add or replace."""
        for outcome in result.outcomes:
            if outcome.status == OutcomeStatus.ADDED:
                self.print_success(f"Linked {outcome.path}")
            elif outcome.status == OutcomeStatus.FAILED:
                message = outcome.error.message if outcome.error else "unknown error"
                self.print_error(message)
            elif outcome.status == OutcomeStatus.SKIPPED:
                self.print_warning(f"Skipped {outcome.path} (stopped after previous failure)")

    def print_listing_details(self, listing: Listing) -> None:
        """Print a table of resolved items (verbose listing)."""
        table = Table(show_header=True, header_style="bold")
        table.add_column("Path")
        table.add_column("Visible")
        table.add_column("UUID", style="dim")

        for entry in listing.entries:
            path = escape(entry.path)
            if entry.is_stale:
                path += " [yellow](stale)[/yellow]"
            visible = "[green]yes[/green]" if entry.item.is_visible else "[dim]no[/dim]"
            table.add_row(path, visible, entry.item.uuid or "")

        self._console.print(table)

    def print_properties(self, properties: dict[str, Any]) -> None:
        """Print store-wide properties, one ``key = value`` line each."""
        if not properties:
            self._console.print("[dim]No properties[/dim]")
            return

        for key, value in sorted(properties.items()):
            self._console.print(f"[bold]{escape(key)}[/bold] = {escape(repr(value))}")

    def print_reload_result(self, result: ReloadResult) -> None:
        """Print what a reload did."""
        daemon = result.daemon
        if daemon.failed:
            self.print_warning(f"Could not signal {daemon.process}: {daemon.error}")
        elif daemon.signalled:
            self.print_success(f"Reloaded {daemon.process}")
        elif self.verbose:
            self.print_info(f"{daemon.process} was not running")

        finder = result.finder
        if finder is None:
            return
        if finder.failed:
            self.print_error(f"Could not restart {finder.process}: {finder.error}")
        elif finder.signalled:
            self.print_success(f"Restarted {finder.process}")
        else:
            self.print_info(f"{finder.process} was not running")


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)

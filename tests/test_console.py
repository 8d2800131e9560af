# Tests for sidebarctl.output.console
# Rich-based console output

from io import StringIO

from rich.console import Console as RichConsole

from sidebarctl.errors import BookmarkError
from sidebarctl.operations import AddOutcome, BatchResult, ListedItem, Listing, OutcomeStatus
from sidebarctl.output.console import RELOAD_REMINDER, Console, create_console
from sidebarctl.reload import ReloadResult, SignalResult
from sidebarctl.store import SFLItem


def _make_console(verbose: bool = False) -> Console:
    """Create a console with captured stdout and stderr."""
    console = Console(verbose=verbose, colored=False)
    console._console = RichConsole(file=StringIO(), no_color=True, highlight=False, soft_wrap=True)
    console._err_console = RichConsole(file=StringIO(), no_color=True, highlight=False, soft_wrap=True)
    return console


def _get_output(console: Console) -> str:
    """Get captured stdout from console."""
    return console._console.file.getvalue()


def _get_errors(console: Console) -> str:
    """Get captured stderr from console."""
    return console._err_console.file.getvalue()


class TestConsoleBasic:
    """Tests for basic console methods."""

    def test_print(self):
        c = _make_console()
        c.print("hello world")
        assert "hello world" in _get_output(c)

    def test_print_error_goes_to_stderr(self):
        c = _make_console()
        c.print_error("something failed")
        assert "Error: something failed" in _get_errors(c)
        assert _get_output(c) == ""

    def test_print_warning_goes_to_stderr(self):
        c = _make_console()
        c.print_warning("be careful")
        assert "Warning: be careful" in _get_errors(c)

    def test_print_success(self):
        c = _make_console()
        c.print_success("all good")
        assert "✓ all good" in _get_output(c)

    def test_markup_in_paths_is_escaped(self):
        c = _make_console()
        c.print_success("Linked /tmp/[red]odd")
        assert "/tmp/[red]odd" in _get_output(c)

    def test_reload_reminder(self):
        c = _make_console()
        c.print_reload_reminder()
        assert RELOAD_REMINDER in _get_output(c)


class TestRemediation:
    """Tests for Full Disk Access guidance."""

    def test_includes_store_path_and_steps(self):
        c = _make_console()
        c.print_remediation("Permission denied", "/x/FavoriteItems.sfl4")
        errors = _get_errors(c)
        assert "Error: Permission denied" in errors
        assert "SFL path: /x/FavoriteItems.sfl4" in errors
        assert "Full Disk Access" in errors

    def test_without_store_path(self):
        c = _make_console()
        c.print_remediation("Permission denied")
        assert "SFL path" not in _get_errors(c)


class TestBatchResult:
    """Tests for per-path add output."""

    def test_mixed_outcomes(self):
        c = _make_console()
        result = BatchResult(
            outcomes=[
                AddOutcome("/a", OutcomeStatus.ADDED),
                AddOutcome("/b", OutcomeStatus.FAILED, BookmarkError("Path does not exist: /b")),
                AddOutcome("/c", OutcomeStatus.SKIPPED),
            ]
        )
        c.print_batch_result(result)
        assert "✓ Linked /a" in _get_output(c)
        errors = _get_errors(c)
        assert "Error: Path does not exist: /b" in errors
        assert "Skipped /c" in errors


class TestListing:
    """Tests for listing and property display."""

    def test_listing_details(self):
        c = _make_console(verbose=True)
        item = SFLItem({"uuid": "ABC", "visibility": 1})
        listing = Listing(entries=[ListedItem(item=item, path="/gone", is_stale=True)])
        c.print_listing_details(listing)
        output = _get_output(c)
        assert "/gone" in output
        assert "stale" in output
        assert "ABC" in output

    def test_no_properties(self):
        c = _make_console()
        c.print_properties({})
        assert "No properties" in _get_output(c)

    def test_properties_sorted(self):
        c = _make_console()
        c.print_properties({"b.key": 0, "a.key": 1})
        lines = _get_output(c).splitlines()
        assert lines == ["a.key = 1", "b.key = 0"]


class TestReloadResult:
    """Tests for reload output."""

    def test_daemon_reloaded(self):
        c = _make_console()
        c.print_reload_result(ReloadResult(daemon=SignalResult("sharedfilelistd", signalled=True)))
        assert "Reloaded sharedfilelistd" in _get_output(c)

    def test_daemon_not_running_is_quiet(self):
        c = _make_console()
        c.print_reload_result(ReloadResult(daemon=SignalResult("sharedfilelistd")))
        assert _get_output(c) == ""

    def test_fallback_to_finder(self):
        c = _make_console()
        result = ReloadResult(
            daemon=SignalResult("sharedfilelistd", error="Operation not permitted"),
            finder=SignalResult("Finder", signalled=True),
            fell_back=True,
        )
        c.print_reload_result(result)
        assert "Could not signal sharedfilelistd" in _get_errors(c)
        assert "Restarted Finder" in _get_output(c)

    def test_finder_failure(self):
        c = _make_console()
        result = ReloadResult(
            daemon=SignalResult("sharedfilelistd", signalled=True),
            finder=SignalResult("Finder", error="killall exited with 2"),
        )
        c.print_reload_result(result)
        assert "Could not restart Finder" in _get_errors(c)


class TestCreateConsole:
    """Tests for create_console()."""

    def test_flags(self):
        c = create_console(verbose=True, colored=False)
        assert c.verbose is True
        assert c._console.no_color is True

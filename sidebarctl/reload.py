# Sidebarctl Reload
# Signal sharedfilelistd (and optionally Finder) to pick up on-disk changes

import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

KILLALL = "/usr/bin/killall"
DAEMON_PROCESS = "sharedfilelistd"
FINDER_PROCESS = "Finder"

# killall exits 1 when no matching process is running
KILLALL_NO_MATCH = 1

Runner = Callable[[list[str]], subprocess.CompletedProcess]


def _run_command(cmd: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(cmd, check=False, capture_output=True, text=True)


@dataclass
class SignalResult:
    """Outcome of signalling one process."""

    process: str
    signalled: bool = False
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class ReloadResult:
    """Outcome of a reload."""

    daemon: SignalResult
    finder: Optional[SignalResult] = None
    fell_back: bool = False

    @property
    def finder_restarted(self) -> bool:
        return self.finder is not None and self.finder.signalled

    @property
    def success(self) -> bool:
        if self.finder is not None:
            return not self.finder.failed
        return not self.daemon.failed


def signal_process(process: str, runner: Optional[Runner] = None) -> SignalResult:
    """
    Terminate a process by name.

    A process that is not running counts as success.

    Args:
        process: Process name passed to killall.
        runner: Command runner (defaults to subprocess.run).

    Returns:
        SignalResult describing what happened.
    """
    run = runner or _run_command
    try:
        result = run([KILLALL, process])
    except OSError as e:
        return SignalResult(process, error=f"Unable to run killall: {e}")

    if result.returncode == 0:
        return SignalResult(process, signalled=True)
    if result.returncode == KILLALL_NO_MATCH:
        return SignalResult(process)

    stderr = (result.stderr or "").strip()
    return SignalResult(process, error=stderr or f"killall exited with {result.returncode}")


def reload(force: bool = False, runner: Optional[Runner] = None) -> ReloadResult:
    """
    Make the OS pick up store changes.

    Signals sharedfilelistd; Finder is restarted too when ``force`` is set or
    when the daemon could not be signalled.

    Args:
        force: Also restart Finder.
        runner: Command runner (defaults to subprocess.run).

    Returns:
        ReloadResult with per-process outcomes.
    """
    daemon = signal_process(DAEMON_PROCESS, runner)
    result = ReloadResult(daemon=daemon)

    if force or daemon.failed:
        result.fell_back = daemon.failed and not force
        result.finder = signal_process(FINDER_PROCESS, runner)

    return result

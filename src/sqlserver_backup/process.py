#
# process.py
# GoBackup SQL Server
#
# Supervises the GoBackup child process and turns host termination signals into a shutdown request for the blocking wait.
#
# Thales Matheus Mendonça Santos - October 2026
#
"""Child process supervision and shutdown signal routing."""
from __future__ import annotations

import contextlib
import logging
import signal
import subprocess
from typing import List, Optional, Sequence

SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT, signal.SIGQUIT)


class ShutdownRequested(BaseException):
    """Raised from the signal handler into whatever the main flow is blocked on."""

    def __init__(self, signum: int):
        self.signum = signum
        super().__init__(f"received {signal_name(signum)}")


def signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)


def _request_shutdown(signum, frame):
    raise ShutdownRequested(signum)


@contextlib.contextmanager
def shutdown_signals():
    """Route SIGTERM/SIGINT/SIGQUIT into ShutdownRequested; restore handlers on exit."""
    previous = {sig: signal.signal(sig, _request_shutdown) for sig in SHUTDOWN_SIGNALS}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


@contextlib.contextmanager
def deferred_shutdown_signals(redeliver: bool = True):
    """
    Record shutdown signals instead of acting on them, yielding the list of
    signal numbers received. With ``redeliver`` the first one is raised again
    once the previous handlers are back in place.
    """
    pending: List[int] = []

    def record(signum, frame):
        pending.append(signum)

    previous = {sig: signal.signal(sig, record) for sig in SHUTDOWN_SIGNALS}
    try:
        yield pending
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
        if redeliver and pending:
            signal.raise_signal(pending[0])


def ignore_shutdown_signals():
    # Repeated signals must not interrupt a shutdown already in progress.
    for sig in SHUTDOWN_SIGNALS:
        signal.signal(sig, signal.SIG_IGN)


class ManagedProcess:
    """Owns one child process from spawn until it has been reaped."""

    def __init__(self, command: Sequence[str], logger: Optional[logging.Logger] = None):
        self.command = list(command)
        self.log = logger or logging.getLogger("sqlserver_backup")
        self.proc: Optional[subprocess.Popen] = None

    def start(self) -> "ManagedProcess":
        # No shutdown may land between the fork and self.proc being set.
        with deferred_shutdown_signals():
            self.proc = subprocess.Popen(self.command)
        return self

    @property
    def pid(self) -> Optional[int]:
        return self.proc.pid if self.proc is not None else None

    @property
    def returncode(self) -> Optional[int]:
        return self.proc.returncode if self.proc is not None else None

    def is_running(self) -> bool:
        return self.proc is not None and self.proc.poll() is None

    def wait(self) -> int:
        return self.proc.wait()

    def stop(self, grace_period: float) -> Optional[int]:
        """
        Send SIGTERM and wait up to ``grace_period`` seconds, then SIGKILL.
        Returns the child's exit status, or None if it was never started.
        """
        if self.proc is None:
            return None
        if self.proc.poll() is not None:
            return self.proc.returncode

        self.log.info("Stopping GoBackup process (PID: %d)", self.proc.pid)
        self.proc.terminate()
        try:
            return self.proc.wait(timeout=grace_period)
        except subprocess.TimeoutExpired:
            self.log.warning(
                "GoBackup process (PID: %d) still running after %.0fs; sending SIGKILL",
                self.proc.pid,
                grace_period,
            )
            self.proc.kill()
            return self.proc.wait()


__all__ = [
    "SHUTDOWN_SIGNALS",
    "ShutdownRequested",
    "signal_name",
    "shutdown_signals",
    "deferred_shutdown_signals",
    "ignore_shutdown_signals",
    "ManagedProcess",
]

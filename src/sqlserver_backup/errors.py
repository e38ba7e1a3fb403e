#
# errors.py
# GoBackup SQL Server
#
# Exception types for every fatal path of the entrypoint, each carrying the process exit status it maps to.
#
# Thales Matheus Mendonça Santos - October 2026
#
"""Fatal entrypoint errors and their exit statuses."""
from __future__ import annotations

from typing import Optional, Sequence

EXIT_OK = 0
EXIT_BACKUP_FAILED = 1
EXIT_MISSING_CONFIG = 2
EXIT_TEMPLATE_NOT_FOUND = 3
EXIT_INVALID_RUN_MODE = 4
EXIT_DAEMON_EXITED = 5


class EntrypointError(RuntimeError):
    """Base class for errors that terminate the entrypoint."""

    exit_code = EXIT_BACKUP_FAILED


class MissingConfigurationError(EntrypointError):
    exit_code = EXIT_MISSING_CONFIG

    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__("Missing required environment variables: " + ", ".join(self.missing))


class TemplateNotFoundError(EntrypointError):
    exit_code = EXIT_TEMPLATE_NOT_FOUND

    def __init__(self, template_path):
        self.template_path = template_path
        super().__init__(f"Configuration template not found at {template_path}")


class InvalidRunModeError(EntrypointError):
    exit_code = EXIT_INVALID_RUN_MODE

    def __init__(self, run_mode: str, valid: Sequence[str]):
        self.run_mode = run_mode
        super().__init__(
            f"Invalid RUN_MODE: {run_mode!r}. Valid options are: " + ", ".join(repr(v) for v in valid)
        )


class BackupFailedError(EntrypointError):
    exit_code = EXIT_BACKUP_FAILED

    def __init__(self, detail: str, returncode: Optional[int] = None):
        self.returncode = returncode
        super().__init__(f"One-time backup failed: {detail}")


class DaemonExitedError(EntrypointError):
    exit_code = EXIT_DAEMON_EXITED

    def __init__(self, detail: str, returncode: Optional[int] = None):
        self.returncode = returncode
        super().__init__(f"GoBackup daemon exited unexpectedly: {detail}")


__all__ = [
    "EXIT_OK",
    "EXIT_BACKUP_FAILED",
    "EXIT_MISSING_CONFIG",
    "EXIT_TEMPLATE_NOT_FOUND",
    "EXIT_INVALID_RUN_MODE",
    "EXIT_DAEMON_EXITED",
    "EntrypointError",
    "MissingConfigurationError",
    "TemplateNotFoundError",
    "InvalidRunModeError",
    "BackupFailedError",
    "DaemonExitedError",
]

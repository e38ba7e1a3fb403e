#
# runner.py
# GoBackup SQL Server
#
# Coordinates the container start-up: validating the environment, rendering gobackup.yml, probing dependencies, and running GoBackup once or as a daemon.
#
# Thales Matheus Mendonça Santos - October 2026
#
"""Run the entrypoint from validation through GoBackup execution."""
from __future__ import annotations

import enum
import logging
import os
from typing import Mapping, Optional

from .config import BackupConfig, DEFAULT_CONFIG
from .environment import BackupEnvironment, load_environment
from .errors import EXIT_OK, BackupFailedError, DaemonExitedError, InvalidRunModeError
from .logging_setup import setup_logging
from .probes import log_probe_result, probe_database, probe_object_store
from .process import (
    ManagedProcess,
    ShutdownRequested,
    deferred_shutdown_signals,
    ignore_shutdown_signals,
    shutdown_signals,
    signal_name,
)
from .rendering import materialize_config


class RunMode(enum.Enum):
    ONCE = "once"
    DAEMON = "daemon"


def resolve_run_mode(value: Optional[str]) -> RunMode:
    raw = (value or "").strip().lower() or RunMode.DAEMON.value
    try:
        return RunMode(raw)
    except ValueError:
        raise InvalidRunModeError(value, [m.value for m in RunMode]) from None


class Entrypoint:
    """
    One container start-up. Steps run strictly in order; only the probes
    are allowed to fail without stopping the sequence.
    """

    def __init__(
        self,
        config: BackupConfig = DEFAULT_CONFIG,
        environ: Optional[Mapping[str, str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.environ = os.environ if environ is None else environ
        self.log = logger or setup_logging(config)
        self.child: Optional[ManagedProcess] = None

    def run(self) -> int:
        with shutdown_signals():
            try:
                return self._run_steps()
            except ShutdownRequested as e:
                return self.shutdown(e.signum)

    def _run_steps(self) -> int:
        log = self.log
        log.info("GoBackup SQL Server Backup Container")
        log.info("======================================")

        env = load_environment(self.environ, logger=log)
        materialize_config(self.config, self.environ, logger=log)

        # Results are logged and dropped: probes never decide what runs next.
        for probe in (probe_database, probe_object_store):
            log_probe_result(probe(self.config, env, logger=log), logger=log)

        log.info("Run mode: %s", env.run_mode)
        mode = resolve_run_mode(env.run_mode)

        if mode is RunMode.ONCE:
            return self.run_once(env)
        return self.run_daemon(env)

    def _spawn(self, command, managed: bool = False) -> ManagedProcess:
        self.log.info("Running: %s", " ".join(command))
        child = ManagedProcess(command, logger=self.log)
        if managed:
            # Registered before the fork so a shutdown can always reach it.
            self.child = child
        return child.start()

    def run_once(self, env: BackupEnvironment) -> int:
        self.log.info("Executing one-time backup")
        # Signals wait until gobackup perform is done; the backup is never cut short.
        with deferred_shutdown_signals(redeliver=False) as pending:
            try:
                child = self._spawn(self.config.settings.perform_command)
            except OSError as e:
                raise BackupFailedError(f"could not start GoBackup: {e}") from e
            rc = child.wait()

        if pending:
            self.log.info(
                "Received shutdown signal (%s) during the one-time backup; it was allowed to finish",
                signal_name(pending[0]),
            )
        if rc != 0:
            self.log.error("One-time backup failed (exit status %d)", rc)
            raise BackupFailedError(f"exit status {rc}", returncode=rc)
        self.log.info("One-time backup completed successfully")
        if pending:
            return self.shutdown(pending[0])
        return EXIT_OK

    def run_daemon(self, env: BackupEnvironment) -> int:
        self.log.info("Starting scheduled backup daemon (cron: %s)", env.backup_cron)
        try:
            child = self._spawn(self.config.settings.daemon_command, managed=True)
        except OSError as e:
            raise DaemonExitedError(f"could not start GoBackup: {e}") from e

        self.log.info("GoBackup daemon started (PID: %d)", child.pid)
        self.log.info("Container will run continuously and execute backups on schedule")

        # Only a shutdown signal is expected to end this wait.
        rc = child.wait()
        self.log.error("GoBackup daemon exited unexpectedly (exit status %d)", rc)
        raise DaemonExitedError(f"exit status {rc}", returncode=rc)

    def shutdown(self, signum: int) -> int:
        ignore_shutdown_signals()
        self.log.info("Received shutdown signal (%s), cleaning up...", signal_name(signum))
        if self.child is not None:
            rc = self.child.stop(self.config.settings.shutdown_grace_period)
            self.log.info("GoBackup process exited (status %s)", rc)
        self.log.info("Shutdown complete")
        return EXIT_OK


def run_entrypoint(
    config: BackupConfig = DEFAULT_CONFIG,
    environ: Optional[Mapping[str, str]] = None,
    logger: Optional[logging.Logger] = None,
) -> int:
    return Entrypoint(config=config, environ=environ, logger=logger).run()


__all__ = ["RunMode", "resolve_run_mode", "Entrypoint", "run_entrypoint"]

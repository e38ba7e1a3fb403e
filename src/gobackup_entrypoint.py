#!/usr/bin/env python3
#
# gobackup_entrypoint.py
# GoBackup SQL Server
#
# Container entry point that sets up logging, runs the start-up sequence and maps fatal errors to process exit statuses.
#
# Thales Matheus Mendonça Santos - October 2026
#
"""
Thin wrapper used as the container ENTRYPOINT; delegates to the
sqlserver_backup package.
"""
from __future__ import annotations

import os
import sys

from sqlserver_backup.config import BackupConfig, Paths
from sqlserver_backup.errors import EntrypointError
from sqlserver_backup.logging_setup import setup_logging
from sqlserver_backup.runner import run_entrypoint


def main():
    # Image layout defaults; LOG_FILE optionally mirrors stdout to a rotating file.
    config = BackupConfig(paths=Paths(log_file=os.environ.get("LOG_FILE") or None))
    logger = setup_logging(config)
    logger.info("Starting GoBackup SQL Server container")
    try:
        code = run_entrypoint(config=config, environ=os.environ, logger=logger)
    except EntrypointError as e:
        logger.error("[FATAL] %s", e)
        sys.exit(e.exit_code)
    except Exception:
        logger.exception("[FATAL] Unexpected error during start-up")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":  # pragma: no cover
    main()

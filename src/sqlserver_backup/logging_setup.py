#
# logging_setup.py
# GoBackup SQL Server
#
# Configures the stdout handler (and an optional rotating file handler) shared by the entrypoint steps.
#
# Thales Matheus Mendonça Santos - October 2026
#
"""Logging configuration helpers."""
import logging
import sys
from logging.handlers import RotatingFileHandler

from .config import BackupConfig

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: BackupConfig, logger_name: str = "sqlserver_backup") -> logging.Logger:
    """
    Configure a stdout handler + optional rotating file handler.
    Safe to call multiple times; existing handlers are reused.
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # Container runtimes collect stdout, so everything goes there.
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(logging.INFO)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    log_file = config.paths.log_file
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            str(log_file),
            maxBytes=config.settings.log_max_bytes,
            backupCount=config.settings.log_backup_count,
        )
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger


__all__ = ["setup_logging", "LOG_FORMAT", "DATE_FORMAT"]

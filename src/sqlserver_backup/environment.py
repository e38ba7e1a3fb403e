#
# environment.py
# GoBackup SQL Server
#
# Validates the operator-supplied environment and freezes it into a single record that is passed explicitly to every later step.
#
# Thales Matheus Mendonça Santos - October 2026
#
"""Environment validation and the immutable BackupEnvironment record."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

from .errors import MissingConfigurationError

# Order matters: missing keys are reported in this order.
REQUIRED_ENV = (
    "MSSQL_HOST",
    "MSSQL_DATABASE",
    "MSSQL_PASSWORD",
    "MINIO_ENDPOINT",
    "MINIO_BUCKET",
    "MINIO_ACCESS_KEY",
    "MINIO_SECRET_KEY",
)

OPTIONAL_DEFAULTS = {
    "MSSQL_PORT": "1433",
    "MSSQL_USERNAME": "sa",
    "MSSQL_TRUST_CERT": "true",
    "MINIO_REGION": "us-east-1",
    "MINIO_PATH": "backups/sqlserver",
    "MINIO_TIMEOUT": "300",
    "MINIO_MAX_RETRIES": "3",
    "BACKUP_CRON": "0 2 * * *",
    "RUN_MODE": "daemon",
    "SKIP_HEALTH_CHECK": "false",
}

TRUTHY = frozenset({"1", "true", "yes", "on"})


def env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY


def find_missing(environ: Mapping[str, str]) -> List[str]:
    """Return every required key that is unset or empty, in declaration order."""
    return [name for name in REQUIRED_ENV if not environ.get(name)]


def validate_environment(environ: Mapping[str, str], logger: Optional[logging.Logger] = None):
    log = logger or logging.getLogger("sqlserver_backup")
    log.info("Validating required environment variables")
    missing = find_missing(environ)
    if missing:
        log.error("Missing required environment variables:")
        for name in missing:
            log.error("  - %s", name)
        log.error("Please set all required environment variables and try again")
        raise MissingConfigurationError(missing)
    log.info("All required environment variables are set")


@dataclass(frozen=True)
class BackupEnvironment:
    mssql_host: str
    mssql_database: str
    mssql_password: str
    minio_endpoint: str
    minio_bucket: str
    minio_access_key: str
    minio_secret_key: str
    mssql_port: str = OPTIONAL_DEFAULTS["MSSQL_PORT"]
    mssql_username: str = OPTIONAL_DEFAULTS["MSSQL_USERNAME"]
    mssql_trust_cert: str = OPTIONAL_DEFAULTS["MSSQL_TRUST_CERT"]
    minio_region: str = OPTIONAL_DEFAULTS["MINIO_REGION"]
    minio_path: str = OPTIONAL_DEFAULTS["MINIO_PATH"]
    minio_timeout: str = OPTIONAL_DEFAULTS["MINIO_TIMEOUT"]
    minio_max_retries: str = OPTIONAL_DEFAULTS["MINIO_MAX_RETRIES"]
    backup_cron: str = OPTIONAL_DEFAULTS["BACKUP_CRON"]
    run_mode: str = OPTIONAL_DEFAULTS["RUN_MODE"]
    skip_health_check: bool = False

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "BackupEnvironment":
        """
        Build the record from a validated environment.

        Raises MissingConfigurationError if required keys are absent, so a
        record can never exist with incomplete configuration.
        """
        missing = find_missing(environ)
        if missing:
            raise MissingConfigurationError(missing)

        def opt(name: str) -> str:
            # Empty values fall back to defaults, like ${VAR:-default} in a shell.
            return environ.get(name) or OPTIONAL_DEFAULTS[name]

        return cls(
            mssql_host=environ["MSSQL_HOST"],
            mssql_database=environ["MSSQL_DATABASE"],
            mssql_password=environ["MSSQL_PASSWORD"],
            minio_endpoint=environ["MINIO_ENDPOINT"],
            minio_bucket=environ["MINIO_BUCKET"],
            minio_access_key=environ["MINIO_ACCESS_KEY"],
            minio_secret_key=environ["MINIO_SECRET_KEY"],
            mssql_port=opt("MSSQL_PORT"),
            mssql_username=opt("MSSQL_USERNAME"),
            mssql_trust_cert=opt("MSSQL_TRUST_CERT"),
            minio_region=opt("MINIO_REGION"),
            minio_path=opt("MINIO_PATH"),
            minio_timeout=opt("MINIO_TIMEOUT"),
            minio_max_retries=opt("MINIO_MAX_RETRIES"),
            backup_cron=opt("BACKUP_CRON"),
            run_mode=opt("RUN_MODE"),
            skip_health_check=env_flag(environ.get("SKIP_HEALTH_CHECK")),
        )


def load_environment(environ: Mapping[str, str], logger: Optional[logging.Logger] = None) -> BackupEnvironment:
    validate_environment(environ, logger=logger)
    return BackupEnvironment.from_environ(environ)


__all__ = [
    "REQUIRED_ENV",
    "OPTIONAL_DEFAULTS",
    "env_flag",
    "find_missing",
    "validate_environment",
    "BackupEnvironment",
    "load_environment",
]

#
# conftest.py
# GoBackup SQL Server
#
# Creates reusable pytest fixtures: a temporary container layout, a complete environment, and helpers that stand in for the external tools.
#
# Thales Matheus Mendonça Santos - October 2026
#
import sys

import pytest

from sqlserver_backup.config import BackupConfig, Paths, Settings

TEMPLATE = """\
models:
  sqlserver:
    schedule:
      cron: "${BACKUP_CRON:-0 2 * * *}"
    databases:
      mssql:
        host: ${MSSQL_HOST}
        port: ${MSSQL_PORT:-1433}
        password: ${MSSQL_PASSWORD}
    storages:
      minio:
        endpoint: ${MINIO_ENDPOINT}
        bucket: ${MINIO_BUCKET}
"""


def python_command(code: str, *args: str):
    """Command tuple that runs ``code`` in a fresh interpreter."""
    return (sys.executable, "-c", code, *args)


@pytest.fixture
def temp_config(tmp_path):
    paths = Paths(
        template_path=tmp_path / "app" / "gobackup.yml.template",
        config_dir=tmp_path / "etc" / "gobackup",
        scratch_dir=tmp_path / "scratch",
    )
    settings = Settings(
        perform_command=python_command("import sys; sys.exit(0)"),
        daemon_command=python_command("import sys; sys.exit(0)"),
        sqlpackage_bin=str(tmp_path / "bin" / "sqlpackage"),
        db_probe_timeout=10,
        store_probe_timeout=1,
        shutdown_grace_period=5.0,
    )
    config = BackupConfig(paths=paths, settings=settings)

    # Create the minimal layout the image provides.
    paths.template_path.parent.mkdir(parents=True, exist_ok=True)
    paths.template_path.write_text(TEMPLATE)
    paths.scratch_dir.mkdir(parents=True, exist_ok=True)

    return config


@pytest.fixture
def full_env():
    return {
        "MSSQL_HOST": "sqlserver",
        "MSSQL_DATABASE": "SalesDB",
        "MSSQL_PASSWORD": "S3cret!",
        "MINIO_ENDPOINT": "http://minio:9000",
        "MINIO_BUCKET": "backups",
        "MINIO_ACCESS_KEY": "minioadmin",
        "MINIO_SECRET_KEY": "minioadmin",
        "SKIP_HEALTH_CHECK": "true",
    }

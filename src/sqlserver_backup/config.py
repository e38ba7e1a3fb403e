#
# config.py
# GoBackup SQL Server
#
# Defines dataclasses for the container file layout and runtime settings so the entrypoint can be pointed at alternative roots and commands during tests.
#
# Thales Matheus Mendonça Santos - October 2026
#
"""Configuration objects for the GoBackup SQL Server entrypoint.

The defaults mirror the container image layout. A BackupConfig bundles
filesystem paths and runtime settings; values supplied by the operator
through environment variables live in :mod:`sqlserver_backup.environment`.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


@dataclass
class Paths:
    template_path: Path = Path("/app/gobackup.yml.template")
    config_dir: Path = Path("/etc/gobackup")
    scratch_dir: Path = Path("/tmp")
    log_file: Optional[Path] = None

    def __post_init__(self):
        # Normalize inputs to Path objects even when callers pass strings.
        self.template_path = Path(self.template_path)
        self.config_dir = Path(self.config_dir)
        self.scratch_dir = Path(self.scratch_dir)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)
        # GoBackup reads this file; an operator mount here wins over rendering.
        self.config_path = self.config_dir / "gobackup.yml"
        # Disposable output of the sqlpackage connectivity probe.
        self.probe_schema_path = self.scratch_dir / "test_schema.sql"


@dataclass
class Settings:
    perform_command: Tuple[str, ...] = ("gobackup", "perform")
    daemon_command: Tuple[str, ...] = ("gobackup", "run")
    sqlpackage_bin: str = "sqlpackage"
    db_probe_timeout: int = 120  # seconds
    store_probe_timeout: int = 5  # seconds
    shutdown_grace_period: float = 30.0  # seconds before SIGKILL
    validate_rendered_config: bool = True
    log_max_bytes: int = 10 * 1024 * 1024  # 10 MB
    log_backup_count: int = 5


@dataclass
class BackupConfig:
    paths: Paths = field(default_factory=Paths)
    settings: Settings = field(default_factory=Settings)


DEFAULT_CONFIG = BackupConfig()

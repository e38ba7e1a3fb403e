#
# __init__.py
# GoBackup SQL Server
#
# Package initializer exporting the config dataclasses and the entrypoint runner used by the container.
#
# Thales Matheus Mendonça Santos - October 2026
#
"""GoBackup SQL Server container entrypoint package."""
# Re-export the configuration and runner used by the wrapper script.
from .config import BackupConfig, DEFAULT_CONFIG, Paths, Settings
from .errors import EntrypointError
from .runner import RunMode, run_entrypoint

__version__ = "1.0.0"

__all__ = [
    "BackupConfig",
    "DEFAULT_CONFIG",
    "Paths",
    "Settings",
    "EntrypointError",
    "RunMode",
    "run_entrypoint",
]

#
# probes.py
# GoBackup SQL Server
#
# Best-effort connectivity checks against SQL Server (via sqlpackage) and the object store (via HTTP); results are informational only.
#
# Thales Matheus Mendonça Santos - October 2026
#
"""Advisory connectivity probes.

Probes never raise. Each returns a :class:`ProbeResult` that the caller logs
and then drops; a failed probe does not change what the entrypoint does next.
"""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

import requests

from .config import BackupConfig
from .environment import BackupEnvironment

# Any of these proves the endpoint is up and speaking HTTP.
REACHABLE_STATUS_CODES = frozenset({403, 404})


@dataclass
class ProbeResult:
    name: str
    ok: bool
    skipped: bool = False
    detail: str = ""


def redact(text: str, secret: str) -> str:
    # Connection errors from sqlpackage can echo the password back.
    return text.replace(secret, "***") if secret else text


def build_sqlpackage_probe_command(config: BackupConfig, env: BackupEnvironment) -> List[str]:
    return [
        config.settings.sqlpackage_bin,
        "/Action:Script",
        f"/SourceServerName:{env.mssql_host},{env.mssql_port}",
        f"/SourceDatabaseName:{env.mssql_database}",
        f"/SourceUser:{env.mssql_username}",
        f"/SourcePassword:{env.mssql_password}",
        f"/SourceTrustServerCertificate:{env.mssql_trust_cert}",
        f"/TargetFile:{config.paths.probe_schema_path}",
        "/p:ExtractTarget=SchemaOnly",
    ]


def probe_database(
    config: BackupConfig, env: BackupEnvironment, logger: Optional[logging.Logger] = None
) -> ProbeResult:
    log = logger or logging.getLogger("sqlserver_backup")
    if env.skip_health_check:
        log.info("Skipping SQL Server health check (SKIP_HEALTH_CHECK set)")
        return ProbeResult("sqlserver", ok=False, skipped=True)

    log.info("Testing SQL Server connectivity (%s,%s/%s)", env.mssql_host, env.mssql_port, env.mssql_database)
    target = config.paths.probe_schema_path
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        proc = subprocess.run(
            build_sqlpackage_probe_command(config, env),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=config.settings.db_probe_timeout,
        )
        if proc.returncode == 0 and target.is_file():
            target.unlink(missing_ok=True)
            return ProbeResult("sqlserver", ok=True, detail="schema script generated")
    except subprocess.TimeoutExpired:
        return ProbeResult("sqlserver", ok=False, detail=f"timed out after {config.settings.db_probe_timeout}s")
    except (subprocess.SubprocessError, OSError, ValueError) as e:
        detail = f"could not run {config.settings.sqlpackage_bin}: {e}"
        return ProbeResult("sqlserver", ok=False, detail=redact(detail, env.mssql_password))

    output = (proc.stdout or "").strip()
    return ProbeResult(
        "sqlserver", ok=False, detail=redact(f"exit status {proc.returncode}: {output}", env.mssql_password)
    )


def probe_object_store(
    config: BackupConfig, env: BackupEnvironment, logger: Optional[logging.Logger] = None
) -> ProbeResult:
    log = logger or logging.getLogger("sqlserver_backup")
    if env.skip_health_check:
        log.info("Skipping MinIO health check (SKIP_HEALTH_CHECK set)")
        return ProbeResult("minio", ok=False, skipped=True)

    log.info("Testing MinIO connectivity (%s)", env.minio_endpoint)
    try:
        resp = requests.get(env.minio_endpoint, timeout=config.settings.store_probe_timeout)
    except requests.RequestException as e:
        return ProbeResult("minio", ok=False, detail=f"{env.minio_endpoint}: {e}")

    code = resp.status_code
    if 200 <= code < 300 or code in REACHABLE_STATUS_CODES:
        return ProbeResult("minio", ok=True, detail=f"HTTP {code}")
    return ProbeResult("minio", ok=False, detail=f"{env.minio_endpoint}: HTTP {code}")


def log_probe_result(result: ProbeResult, logger: Optional[logging.Logger] = None):
    log = logger or logging.getLogger("sqlserver_backup")
    if result.skipped:
        return
    if result.ok:
        log.info("%s connection test successful (%s)", result.name, result.detail)
        return
    log.warning("%s connection test failed", result.name)
    log.warning("This is informational only - container will continue")
    log.warning("Error details: %s", result.detail)


__all__ = [
    "REACHABLE_STATUS_CODES",
    "ProbeResult",
    "redact",
    "build_sqlpackage_probe_command",
    "probe_database",
    "probe_object_store",
    "log_probe_result",
]

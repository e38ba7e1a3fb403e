#
# rendering.py
# GoBackup SQL Server
#
# Renders gobackup.yml from its template with shell-style placeholders, writing it atomically unless the operator already mounted one.
#
# Thales Matheus Mendonça Santos - October 2026
#
"""Configuration document rendering and advisory YAML checks."""
from __future__ import annotations

import enum
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .config import BackupConfig
from .errors import TemplateNotFoundError

# ${NAME} or ${NAME:-default}; the default runs up to the closing brace.
PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


class ConfigCheck(enum.Enum):
    VALID = "valid"
    INVALID = "invalid"
    UNCHECKED = "unchecked"


def render_template(text: str, environ: Mapping[str, str]) -> str:
    """
    Substitute ``${NAME}`` and ``${NAME:-default}`` placeholders.

    A set, non-empty environment value wins; otherwise the inline default is
    used, and a placeholder without one renders as an empty string. Values
    are inserted verbatim, without any YAML quoting.
    """

    def repl(m: re.Match) -> str:
        value = environ.get(m.group(1))
        if value:
            return value
        return m.group(2) or ""

    return PLACEHOLDER_RE.sub(repl, text)


def write_atomic(target: Path, content: str):
    # Write next to the target and rename so GoBackup never sees a partial file.
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=".gobackup_", suffix=".part", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def check_config_syntax(
    config_path: Path, enabled: bool = True, logger: Optional[logging.Logger] = None
) -> ConfigCheck:
    log = logger or logging.getLogger("sqlserver_backup")
    if not enabled:
        log.warning("YAML validation disabled; %s was not checked", config_path)
        return ConfigCheck.UNCHECKED
    try:
        with open(config_path, encoding="utf-8") as f:
            yaml.safe_load(f)
    except yaml.YAMLError as e:
        # Advisory only: GoBackup reports the definitive error when it loads the file.
        log.warning("Configuration file is not valid YAML: %s", e)
        return ConfigCheck.INVALID
    log.info("Configuration file YAML syntax is valid")
    return ConfigCheck.VALID


def materialize_config(
    config: BackupConfig, environ: Mapping[str, str], logger: Optional[logging.Logger] = None
) -> Optional[ConfigCheck]:
    """
    Produce ``gobackup.yml`` from the template.

    Returns the syntax check outcome, or None when an existing document was
    kept as is.
    """
    log = logger or logging.getLogger("sqlserver_backup")
    paths = config.paths
    log.info("Generating GoBackup configuration file")

    if not paths.template_path.is_file():
        raise TemplateNotFoundError(paths.template_path)

    if paths.config_path.exists():
        log.info("Configuration file already exists at %s, skipping generation", paths.config_path)
        log.info("Using user-provided configuration")
        return None

    template = paths.template_path.read_text(encoding="utf-8")
    write_atomic(paths.config_path, render_template(template, environ))
    log.info("Configuration file generated successfully at %s", paths.config_path)

    return check_config_syntax(
        paths.config_path, enabled=config.settings.validate_rendered_config, logger=log
    )


__all__ = [
    "PLACEHOLDER_RE",
    "ConfigCheck",
    "render_template",
    "write_atomic",
    "check_config_syntax",
    "materialize_config",
]

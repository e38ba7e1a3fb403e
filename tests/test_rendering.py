#
# test_rendering.py
# GoBackup SQL Server
#
# Covers placeholder substitution, the skip-if-present rule for operator-mounted configs, and the advisory YAML check.
#
# Thales Matheus Mendonça Santos - October 2026
#
from pathlib import Path

import pytest
import yaml

from sqlserver_backup.errors import EXIT_TEMPLATE_NOT_FOUND, TemplateNotFoundError
from sqlserver_backup.rendering import ConfigCheck, check_config_syntax, materialize_config, render_template

SHIPPED_TEMPLATE = Path(__file__).resolve().parents[1] / "gobackup.yml.template"


def test_render_value_and_inline_default():
    out = render_template("a=${FOO} b=${BAR:-baz}", {"FOO": "hello"})
    assert out == "a=hello b=baz"


def test_render_unset_without_default_is_empty():
    assert render_template("a=[${FOO}]", {}) == "a=[]"


def test_render_empty_value_uses_default():
    # Same as the shell: ${VAR:-x} also applies when VAR is set but empty.
    assert render_template("${BAR:-baz}", {"BAR": ""}) == "baz"


def test_render_leaves_other_dollar_text_alone():
    text = "cost: $5 and $HOME and ${ not-a-name }"
    assert render_template(text, {"HOME": "/root"}) == text


def test_render_default_with_spaces_and_values_are_not_escaped():
    out = render_template('cron: "${CRON:-0 2 * * *}" pw: ${PW}', {"PW": 'a"b: c'})
    assert out == 'cron: "0 2 * * *" pw: a"b: c'


def test_materialize_writes_rendered_config(temp_config, full_env):
    result = materialize_config(temp_config, full_env)

    assert result is ConfigCheck.VALID
    doc = yaml.safe_load(temp_config.paths.config_path.read_text())
    model = doc["models"]["sqlserver"]
    assert model["databases"]["mssql"]["host"] == "sqlserver"
    assert model["databases"]["mssql"]["port"] == 1433
    assert model["schedule"]["cron"] == "0 2 * * *"
    assert model["storages"]["minio"]["bucket"] == "backups"
    # No temp files are left behind next to the config.
    assert [p.name for p in temp_config.paths.config_dir.iterdir()] == ["gobackup.yml"]


def test_existing_config_is_left_byte_identical(temp_config, full_env):
    target = temp_config.paths.config_path
    target.parent.mkdir(parents=True)
    original = b"models: {custom: true}\n# operator supplied\n"
    target.write_bytes(original)

    assert materialize_config(temp_config, full_env) is None
    assert target.read_bytes() == original


def test_missing_template_is_fatal(temp_config, full_env):
    temp_config.paths.template_path.unlink()
    with pytest.raises(TemplateNotFoundError) as exc:
        materialize_config(temp_config, full_env)
    assert exc.value.exit_code == EXIT_TEMPLATE_NOT_FOUND
    assert not temp_config.paths.config_path.exists()


def test_invalid_yaml_is_advisory(temp_config, full_env):
    temp_config.paths.template_path.write_text("models: [unclosed\n")
    assert materialize_config(temp_config, full_env) is ConfigCheck.INVALID
    # The file is still written for GoBackup to report on.
    assert temp_config.paths.config_path.exists()


def test_disabled_check_is_reported_as_unchecked(tmp_path, caplog):
    cfg = tmp_path / "gobackup.yml"
    cfg.write_text("models: [unclosed\n")
    assert check_config_syntax(cfg, enabled=False) is ConfigCheck.UNCHECKED
    assert any("not checked" in r.getMessage() for r in caplog.records)


def test_shipped_template_renders_to_valid_yaml(full_env):
    full_env["MINIO_TIMEOUT"] = "600"
    doc = yaml.safe_load(render_template(SHIPPED_TEMPLATE.read_text(), full_env))
    model = doc["models"]["sqlserver"]
    db = model["databases"]["mssql"]
    storage = model["storages"]["minio"]
    assert db["database"] == "SalesDB"
    assert db["username"] == "sa"
    assert db["trustServerCertificate"] is True
    assert storage["endpoint"] == "http://minio:9000"
    assert storage["path"] == "backups/sqlserver"
    assert storage["timeout"] == 600
    assert storage["max_retries"] == 3
    assert model["schedule"]["cron"] == "0 2 * * *"

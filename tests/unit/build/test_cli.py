"""Unit tests for the ormayu-build command line."""

import json
import logging
from pathlib import Path

import pytest
import yaml

from ormayu_build.build.cli import main
from ormayu_build.build.config import BuildDescriptor


@pytest.fixture(autouse=True)
def restore_root_level():
    level = logging.getLogger().level
    yield
    logging.getLogger().setLevel(level)


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage: ormayu-build" in capsys.readouterr().out


def test_resolve_json(temp_config_file: Path, capsys):
    assert main(["--config", str(temp_config_file), "resolve"]) == 0

    descriptor = BuildDescriptor.from_json(capsys.readouterr().out)
    assert descriptor.app_version.version_code == 12
    assert descriptor.app_version.version_name == "1.4.2"
    assert descriptor.sdk.compile_sdk == 35


def test_resolve_yaml_to_file(temp_config_file: Path, tmp_path: Path):
    output = tmp_path / "descriptor.yaml"

    assert main(["--config", str(temp_config_file), "resolve", "--format", "yaml", "-o", str(output)]) == 0

    data = yaml.safe_load(output.read_text(encoding="utf-8"))
    assert data["identity"]["application_id"] == "com.example.ormayu_app"


def test_project_dir_option_overrides_config(tmp_path: Path, capsys):
    other = tmp_path / "other"
    other.mkdir()
    (other / "local.properties").write_text("flutter.versionCode=40\n", encoding="utf-8")

    assert main(["--config", str(tmp_path / "absent.yaml"), "--project-dir", str(other), "resolve"]) == 0

    assert json.loads(capsys.readouterr().out)["app_version"]["version_code"] == 40


def test_render_symbolic(temp_config_file: Path, capsys):
    assert main(["--config", str(temp_config_file), "render", "--symbolic"]) == 0

    script = capsys.readouterr().out
    assert "compileSdk = flutter.compileSdkVersion" in script
    assert 'signingConfig = signingConfigs.getByName("debug")' in script


def test_check_reports_warning(temp_config_file: Path, capsys):
    assert main(["--config", str(temp_config_file), "check"]) == 0

    assert "[WARNING] signing.release" in capsys.readouterr().out


def test_check_reports_errors(tmp_path: Path, capsys):
    (tmp_path / "local.properties").write_text(
        "flutter.minSdkVersion=36\n", encoding="utf-8"
    )

    assert main(["--config", str(tmp_path / "absent.yaml"), "--project-dir", str(tmp_path), "check"]) == 1

    assert "[ERROR] sdk.target_sdk" in capsys.readouterr().out


def test_build_writes_outputs(temp_config_file: Path, tmp_path: Path, capsys):
    output_dir = tmp_path / "cli-out"

    assert main(["--config", str(temp_config_file), "build", "--output-dir", str(output_dir)]) == 0

    assert (output_dir / "descriptor.json").exists()
    assert (output_dir / "build.gradle.kts").exists()
    assert str(output_dir) in capsys.readouterr().out


def test_missing_properties_fails(tmp_path: Path, capsys):
    code = main(["--config", str(tmp_path / "absent.yaml"), "--project-dir", str(tmp_path / "nowhere"), "resolve"])

    assert code == 1
    assert "local.properties not found" in capsys.readouterr().err


def test_invalid_config_fails(tmp_path: Path, capsys):
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("logging:\n  format: xml\n", encoding="utf-8")

    assert main(["--config", str(config_file), "resolve"]) == 1
    assert "Failed to initialize ConfigManager" in capsys.readouterr().err


def test_log_level_option(temp_config_file: Path, capsys):
    assert main(["--config", str(temp_config_file), "--log-level", "error", "resolve"]) == 0
    assert json.loads(capsys.readouterr().out)["plugins"][0] == "com.android.application"


def test_unwritable_output_fails(temp_config_file: Path, tmp_path: Path, capsys):
    target = tmp_path / "existing-dir"
    target.mkdir()

    assert main(["--config", str(temp_config_file), "resolve", "-o", str(target)]) == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_invalid_build_options_fail(temp_config_file: Path, monkeypatch, capsys):
    monkeypatch.setenv("ORMAYU_BUILD__OUTPUT_DIR", "2024")

    assert main(["--config", str(temp_config_file), "build"]) == 1
    assert "Invalid build options" in capsys.readouterr().err

"""
tests/test_cli.py
Tests for the command-line interface (run() and its exit codes).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from modelforge import __version__
from modelforge.cli import (
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    cli_main,
    run,
)
from modelforge.exporters import MANIFEST_FILE_NAME


@pytest.fixture()
def invalid_model_path(user_order_dict: Dict[str, Any], tmp_path: Path) -> Path:
    """Model whose two entities share the class name 'User'."""
    user_order_dict["entities"][1]["name"] = "User"
    path = tmp_path / "invalid.yaml"
    path.write_text(yaml.safe_dump({"model": user_order_dict}), encoding="utf-8")
    return path


class TestGenerationMode:
    def test_writes_files(self, model_yaml_path: Path, output_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = run(["-m", str(model_yaml_path), "-o", str(output_dir)])
        assert code == EXIT_SUCCESS
        assert (output_dir / "Controllers.cs").exists()
        assert (output_dir / MANIFEST_FILE_NAME).exists()
        assert "Generation Report" in capsys.readouterr().out

    def test_quiet_prints_nothing(self, model_yaml_path: Path, output_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(["-m", str(model_yaml_path), "-o", str(output_dir), "-q"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == ""

    def test_no_drops(self, model_yaml_path: Path, output_dir: Path) -> None:
        run(["-m", str(model_yaml_path), "-o", str(output_dir), "--no-drops", "-q"])
        assert "DROP TABLE" not in (output_dir / "schema.sqlserver.sql").read_text(encoding="utf-8")

    def test_clean(self, model_yaml_path: Path, output_dir: Path) -> None:
        output_dir.mkdir()
        (output_dir / "stale.cs").write_text("old", encoding="utf-8")
        assert run(["-m", str(model_yaml_path), "-o", str(output_dir), "--clean", "-q"]) == EXIT_SUCCESS
        assert not (output_dir / "stale.cs").exists()

    def test_strict_blocks(self, invalid_model_path: Path, output_dir: Path) -> None:
        code = run(["-m", str(invalid_model_path), "-o", str(output_dir), "--strict", "-q"])
        assert code == EXIT_VALIDATION_ERROR
        assert not output_dir.exists()

    def test_errors_without_strict(self, invalid_model_path: Path, output_dir: Path) -> None:
        assert run(["-m", str(invalid_model_path), "-o", str(output_dir), "-q"]) == EXIT_SUCCESS


class TestSingleKindMode:
    def test_prints_artifact(self, model_yaml_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(["-m", str(model_yaml_path), "-k", "sql-sqlite"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert 'CREATE TABLE "Users" (' in out
        assert out.endswith(";\n")

    def test_openapi_is_json(self, model_json_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(["-m", str(model_json_path), "-k", "openapi"]) == EXIT_SUCCESS
        doc = json.loads(capsys.readouterr().out)
        assert "/api/users" in doc["paths"]

    def test_dialect_flag(self, model_yaml_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        run(["-m", str(model_yaml_path), "-k", "context-configuration", "--dialect", "postgresql"])
        assert "public class ShopDbContext" in capsys.readouterr().out

    def test_unknown_kind(self, model_yaml_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(["-m", str(model_yaml_path), "-k", "cobol"]) == EXIT_INPUT_ERROR
        assert capsys.readouterr().out == ""

    def test_strict_single_kind(self, invalid_model_path: Path) -> None:
        assert run(["-m", str(invalid_model_path), "-k", "dtos", "--strict"]) == EXIT_VALIDATION_ERROR


class TestValidateOnly:
    def test_valid_model(self, model_yaml_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(["-m", str(model_yaml_path), "--validate-only"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Model Validation Report" in out
        assert "Valid:     Yes" in out

    def test_invalid_model(self, invalid_model_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(["-m", str(invalid_model_path), "--validate-only"]) == EXIT_VALIDATION_ERROR
        out = capsys.readouterr().out
        assert "DUPLICATE_ENTITY_NAME" in out
        assert "Valid:     No" in out

    def test_unparseable_model(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert run(["-m", str(path), "--validate-only"]) == EXIT_INPUT_ERROR


class TestInputErrors:
    def test_missing_model_file(self, tmp_path: Path) -> None:
        assert run(["-m", str(tmp_path / "missing.yaml"), "-o", str(tmp_path)]) == EXIT_INPUT_ERROR

    def test_model_path_is_directory(self, tmp_path: Path) -> None:
        assert run(["-m", str(tmp_path), "--validate-only"]) == EXIT_INPUT_ERROR

    def test_output_required(self, model_yaml_path: Path) -> None:
        assert run(["-m", str(model_yaml_path)]) == EXIT_INPUT_ERROR

    def test_model_argument_required(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run([])
        assert exc_info.value.code == 2

    def test_bad_dialect_choice(self, model_yaml_path: Path) -> None:
        with pytest.raises(SystemExit):
            run(["-m", str(model_yaml_path), "-k", "dtos", "--dialect", "oracle"])


class TestEntryPoint:
    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_cli_main_exits_with_code(self, model_yaml_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli_main(["-m", str(model_yaml_path), "-k", "dtos", "-q"])
        assert exc_info.value.code == EXIT_SUCCESS

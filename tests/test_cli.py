"""Tests for the command-line interface."""

import json
from pathlib import Path

from typer.testing import CliRunner

from allocprep.cli import app

runner = CliRunner()


class TestValidateCommand:
    """Tests for the validate command."""

    def test_clean_data(self, config_file: Path) -> None:
        """Test that clean inputs exit with code 0."""
        result = runner.invoke(app, ["validate", "--config", str(config_file)])
        assert result.exit_code == 0, result.output
        assert "No issues found" in result.output

    def test_json_output(self, config_file: Path) -> None:
        """Test the machine-readable summary."""
        result = runner.invoke(app, ["validate", "-c", str(config_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data == {"issues": [], "counts": {"error": 0, "warning": 0, "info": 0}}

    def test_errors_exit_nonzero(self, config_file: Path, data_dir: Path) -> None:
        """Test that any error-level issue gives exit code 1."""
        (data_dir / "tasks.csv").write_text(
            "TaskID,Duration,MaxConcurrent\nT1,0,1\n", encoding="utf-8"
        )
        result = runner.invoke(app, ["validate", "-c", str(config_file), "--json"])
        assert result.exit_code == 1
        ids = [issue["id"] for issue in json.loads(result.stdout)["issues"]]
        assert "task-duration:T1" in ids

    def test_missing_identifier_fails(self, config_file: Path, data_dir: Path) -> None:
        """Test that a blank identifier in an upload gives exit code 1."""
        (data_dir / "clients.csv").write_text(
            "ClientID,Name,Priority,Tasks\nC1,Acme,3,T1\n,Nameless,3,T2\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["validate", "-c", str(config_file), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert [issue["id"] for issue in data["issues"]] == ["clients:1:ClientID"]
        assert data["counts"]["error"] == 1

    def test_missing_input_file(self, config_file: Path, data_dir: Path) -> None:
        """Test that a configured file that does not exist is reported."""
        (data_dir / "workers.csv").unlink()
        result = runner.invoke(app, ["validate", "-c", str(config_file)])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_missing_config(self, tmp_path: Path) -> None:
        """Test that a missing config path is a usage error."""
        result = runner.invoke(app, ["validate", "-c", str(tmp_path / "none.yaml")])
        assert result.exit_code != 0


class TestIngestCommand:
    """Tests for the ingest command."""

    def test_shows_mapping_and_counts(self, config_file: Path) -> None:
        """Test the ingestion report."""
        result = runner.invoke(app, ["ingest", "-c", str(config_file)])
        assert result.exit_code == 0, result.output
        assert "Header mapping (clients)" in result.output
        assert "Loaded records" in result.output


class TestExportCommand:
    """Tests for the export command."""

    def test_writes_bundle(self, config_file: Path, tmp_path: Path) -> None:
        """Test export with a rule and a preset."""
        out_dir = tmp_path / "bundle"
        result = runner.invoke(
            app,
            [
                "export",
                "-c",
                str(config_file),
                "-o",
                str(out_dir),
                "--rule",
                "co-run T1 T2",
                "--preset",
                "fairDistribution",
            ],
        )
        assert result.exit_code == 0, result.output
        for name in ("clients.cleaned.csv", "workers.cleaned.csv", "tasks.cleaned.csv"):
            assert (out_dir / name).exists()

        data = json.loads((out_dir / "rules.json").read_text(encoding="utf-8"))
        assert data["rules"][0]["type"] == "coRun"
        assert data["rules"][0]["tasks"] == ["T1", "T2"]
        assert data["priorities"]["profile"] == "fairDistribution"

    def test_default_output_dir(self, config_file: Path, tmp_path: Path) -> None:
        """Test that the bundle lands under output.root/project."""
        result = runner.invoke(app, ["export", "-c", str(config_file)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "output" / "test-project" / "rules.json").exists()

    def test_unknown_preset(self, config_file: Path, tmp_path: Path) -> None:
        """Test that an unknown preset aborts the export."""
        result = runner.invoke(
            app, ["export", "-c", str(config_file), "-o", str(tmp_path / "x"), "-p", "fastest"]
        )
        assert result.exit_code == 1
        assert not (tmp_path / "x").exists()


class TestSearchAndRuleCommands:
    """Tests for the natural-language commands."""

    def test_search(self, config_file: Path) -> None:
        """Test filtering tasks by duration."""
        result = runner.invoke(app, ["search", "-c", str(config_file), "duration > 2"])
        assert result.exit_code == 0, result.output
        assert "1/3 tasks" in result.output

    def test_rule(self) -> None:
        """Test converting a sentence into rule JSON."""
        result = runner.invoke(app, ["rule", "phase window T3 phases 1-3"])
        assert result.exit_code == 0
        (rule,) = json.loads(result.stdout)
        assert rule["type"] == "phaseWindow"
        assert rule["taskId"] == "T3"
        assert rule["allowedPhases"] == [1, 2, 3]

    def test_rule_not_recognized(self) -> None:
        """Test that unrecognized text exits with code 1."""
        result = runner.invoke(app, ["rule", "make it fast"])
        assert result.exit_code == 1


def test_version() -> None:
    """Test the version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "allocprep version" in result.output

"""Tests for the command-line interface."""

import json
import math

import pytest
from click.testing import CliRunner

from reportcard import __version__
from reportcard.cli.main import _display_result, cli
from reportcard.core.aggregator import Aggregator
from reportcard.core.check import Score

BUILTIN_ONLY = "disable: [fmt, vet, lint]\n"


@pytest.fixture
def runner(monkeypatch, tmp_path):
    monkeypatch.delenv("REPORTCARD_THRESHOLD", raising=False)
    monkeypatch.delenv("REPORTCARD_TIMEOUT", raising=False)
    monkeypatch.chdir(tmp_path)
    return CliRunner()


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    (root / ".reportcard.yml").write_text(BUILTIN_ONLY)
    return root


class TestGradeCommand:
    """Tests for the grade command."""

    def test_clean_tree_passes(self, runner, project):
        (project / "add.py").write_text("def add(a, b):\n    return a + b\n")

        result = runner.invoke(cli, ["grade", str(project)])

        assert result.exit_code == 0
        assert "Grade: A+ (100.0%)" in result.output
        assert "Files: 1" in result.output
        assert "Issues: 0" in result.output
        assert "cyclo: 100%" in result.output

    def test_below_threshold_fails(self, runner, project):
        (project / "mod.py").write_text("def f():\n    x = 1\n    return 2\n")

        result = runner.invoke(cli, ["grade", str(project), "--verbose"])

        assert result.exit_code == 1
        assert "Grade: C (75.0%)" in result.output
        assert "ineffassign: 0%" in result.output
        assert "mod.py" in result.output
        assert "Line 2: ineffectual assignment to x" in result.output

    def test_verbose_lists_files_then_lines(self, runner, project):
        """Test verbose output lists each flagged file followed by its issues, in order."""
        (project / "a.py").write_text(
            "def f():\n    x = 1\n    return 2\n\n\ndef g():\n    y = 2\n    return 3\n"
        )
        (project / "b.py").write_text("def h():\n    z = 1\n    return 0\n")

        result = runner.invoke(cli, ["grade", str(project), "-v"])

        section = result.output[result.output.index("ineffassign:"):result.output.index("misspell:")]
        expected = [
            "a.py",
            "Line 2: ineffectual assignment to x",
            "Line 7: ineffectual assignment to y",
            "b.py",
            "Line 2: ineffectual assignment to z",
        ]
        position = 0
        for text in expected:
            position = section.index(text, position) + len(text)
        assert "Issues: 2" in result.output

    def test_quiet_output_hides_issues(self, runner, project):
        (project / "mod.py").write_text("def f():\n    x = 1\n    return 2\n")

        result = runner.invoke(cli, ["grade", str(project)])

        assert "ineffassign: 0%" in result.output
        assert "Line 2" not in result.output

    def test_threshold_option(self, runner, project):
        (project / "mod.py").write_text("def f():\n    x = 1\n    return 2\n")

        result = runner.invoke(cli, ["grade", str(project), "-t", "70"])

        assert result.exit_code == 0

    def test_threshold_from_environment(self, runner, project, monkeypatch):
        (project / "mod.py").write_text("def f():\n    x = 1\n    return 2\n")
        monkeypatch.setenv("REPORTCARD_THRESHOLD", "70")

        result = runner.invoke(cli, ["grade", str(project)])

        assert result.exit_code == 0

    def test_no_source_files(self, runner, project):
        (project / "README.md").write_text("# nothing here\n")

        result = runner.invoke(cli, ["grade", str(project)])

        assert result.exit_code == 2
        assert "Fatal error checking" in result.output
        assert "no .py files found" in result.output

    def test_invalid_config(self, runner, project):
        (project / "add.py").write_text("x = 1\n")
        (project / ".reportcard.yml").write_text("threshold: high\n")

        result = runner.invoke(cli, ["grade", str(project)])

        assert result.exit_code == 2
        assert "threshold must be a number" in result.output

    def test_explicit_config(self, runner, project, tmp_path):
        (project / "add.py").write_text("x = 1\n")
        config = tmp_path / "strict.yml"
        config.write_text(BUILTIN_ONLY + "threshold: 100\n")

        result = runner.invoke(cli, ["grade", str(project), "--config", str(config)])

        assert result.exit_code == 0

    def test_json_output(self, runner, project):
        (project / "add.py").write_text("def add(a, b):\n    return a + b\n")
        (project / "gen.py").write_text("# Code generated by protoc. DO NOT EDIT.\nx = 1\n")

        result = runner.invoke(cli, ["grade", str(project), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["grade"] == "A+"
        assert data["average"] == 1.0
        assert data["files"] == 1
        assert data["skipped"] == ["gen.py"]
        assert [c["name"] for c in data["checks"]] == ["cyclo", "ineffassign", "misspell"]
        assert (project / "gen.py").exists()


class TestOtherCommands:
    """Tests for the remaining commands."""

    def test_check_tools(self, runner):
        result = runner.invoke(cli, ["check-tools"])

        assert result.exit_code == 0
        for name in ("fmt", "vet", "lint", "cyclo", "misspell", "ineffassign"):
            assert name in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestDisplayResult:
    """Tests for the text report."""

    def test_non_finite_percentages(self, capsys):
        """Test NaN and infinite percentages are printed instead of crashing."""
        result = Aggregator().aggregate(
            [Score("nan", "d", 1.0, math.nan), Score("inf", "d", 1.0, math.inf)],
            files=1,
        )

        _display_result(result, verbose=False)

        output = capsys.readouterr().out
        assert "Grade: F" in output
        assert "inf: inf" in output
        assert "nan: nan" in output

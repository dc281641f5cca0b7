"""Tests for configuration loading."""

import textwrap

import pytest

from reportcard.config import CONFIG_FILENAME, Settings, load_settings, read_config_file
from reportcard.core.errors import ConfigError
from reportcard.core.grade import DEFAULT_GRADE_TABLE


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep the host environment and any .env file out of the tests."""
    monkeypatch.delenv("REPORTCARD_THRESHOLD", raising=False)
    monkeypatch.delenv("REPORTCARD_TIMEOUT", raising=False)
    monkeypatch.chdir(tmp_path)


def write_config(directory, text, name=CONFIG_FILENAME):
    path = directory / name
    path.write_text(textwrap.dedent(text))
    return path


class TestSettings:
    """Tests for Settings validation."""

    def test_defaults(self):
        settings = Settings()

        assert settings.threshold == 90.0
        assert settings.timeout == 300.0
        assert settings.max_file_size == 1024 * 1024
        assert settings.disabled == frozenset()
        assert settings.grades is DEFAULT_GRADE_TABLE

    @pytest.mark.parametrize("kwargs", [
        {"threshold": -1},
        {"threshold": 101},
        {"timeout": 0},
        {"weights": {"fmt": 0}},
        {"weights": {"fmt": -0.5}},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            Settings(**kwargs)


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_no_config_file(self, tmp_path):
        assert load_settings(tmp_path) == Settings()

    def test_reads_config_from_tree(self, tmp_path):
        write_config(tmp_path, """
            threshold: 75
            timeout: 60
            exclude_dirs: [generated, migrations]
            weights:
              lint: 0.2
            disable: [fmt]
            grades:
              Pass: 60
              floor: Fail
        """)

        settings = load_settings(tmp_path)

        assert settings.threshold == 75.0
        assert settings.timeout == 60.0
        assert settings.exclude_dirs == frozenset({"generated", "migrations"})
        assert settings.weights == {"lint": 0.2}
        assert settings.disabled == frozenset({"fmt"})
        assert settings.grades.grade(60) == "Pass"
        assert settings.grades.grade(59.9) == "Fail"

    def test_explicit_config_path(self, tmp_path):
        path = write_config(tmp_path, "threshold: 50\n", name="custom.yml")

        assert load_settings(tmp_path / "elsewhere", path).threshold == 50.0

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        write_config(tmp_path, "threshold: 75\ntimeout: 60\n")
        monkeypatch.setenv("REPORTCARD_THRESHOLD", "80")
        monkeypatch.setenv("REPORTCARD_TIMEOUT", "10")

        settings = load_settings(tmp_path)

        assert settings.threshold == 80.0
        assert settings.timeout == 10.0

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("REPORTCARD_THRESHOLD=65\n")

        assert load_settings(tmp_path).threshold == 65.0

    def test_overrides_win(self, tmp_path, monkeypatch):
        write_config(tmp_path, "threshold: 75\n")
        monkeypatch.setenv("REPORTCARD_THRESHOLD", "80")

        settings = load_settings(tmp_path, threshold=95, timeout=None)

        assert settings.threshold == 95
        assert settings.timeout == 300.0

    def test_invalid_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REPORTCARD_TIMEOUT", "soon")

        with pytest.raises(ConfigError, match="REPORTCARD_TIMEOUT"):
            load_settings(tmp_path)

    @pytest.mark.parametrize("text,match", [
        ("colour: blue\n", "unknown configuration keys: colour"),
        ("threshold: high\n", "threshold must be a number"),
        ("threshold: 150\n", "threshold must be between 0 and 100"),
        ("weights: [fmt]\n", "weights must be a mapping"),
        ("grades:\n  A: 90\n  B: high\n", "invalid grade table"),
        ("grades:\n  A: 80\n  B: 80\n", "decreasing"),
        ("- just\n- a list\n", "must contain a mapping"),
        ("threshold: [unclosed\n", "invalid YAML"),
    ])
    def test_invalid_config(self, tmp_path, text, match):
        write_config(tmp_path, text)

        with pytest.raises(ConfigError, match=match):
            load_settings(tmp_path)


class TestReadConfigFile:
    """Tests for read_config_file function."""

    def test_empty_file(self, tmp_path):
        assert read_config_file(write_config(tmp_path, "")) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="could not read"):
            read_config_file(tmp_path / "missing.yml")

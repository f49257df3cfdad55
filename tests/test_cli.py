"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from shoaling.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def history_file(tmp_path, monkeypatch):
    path = tmp_path / "history.json"
    monkeypatch.setenv("HISTORY_PATH", str(path))
    monkeypatch.setenv("GEMINI_API_KEY", "")
    return path


class TestCommands:
    """Tests for the offline commands."""

    def test_profile_json(self):
        result = runner.invoke(app, ["profile", "--slope", "1", "--depth", "40", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["run"] == pytest.approx(500)
        assert data["shelf_knee_x"] == pytest.approx(50)
        assert data["steep_factor"] == 0.0

    def test_profile_table(self):
        result = runner.invoke(app, ["profile", "--slope", "8"])

        assert result.exit_code == 0
        assert "Propagation" in result.output

    def test_slope_out_of_range(self):
        result = runner.invoke(app, ["profile", "--slope", "11"])

        assert result.exit_code != 0

    def test_sample(self):
        result = runner.invoke(app, ["sample", "--steps", "5"])

        assert result.exit_code == 0
        assert "Wave run" in result.output

    def test_render(self, tmp_path):
        path = tmp_path / "frame.png"
        result = runner.invoke(app, ["render", str(path), "--slope", "3", "--seawall", "9"])

        assert result.exit_code == 0
        assert path.exists()

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert "shoaling v" in result.output


class TestHistoryCommands:
    """Tests for the history sub-commands."""

    def test_list_empty(self):
        result = runner.invoke(app, ["history", "list"])

        assert result.exit_code == 0
        assert "No simulations recorded." in result.output

    def test_restore_unknown(self):
        result = runner.invoke(app, ["history", "restore", "123"])

        assert result.exit_code == 1

    def test_assess_without_key_saves_nothing(self, history_file):
        result = runner.invoke(app, ["assess", "--slope", "2"])

        assert result.exit_code == 0
        assert "analysis failed" in result.output
        assert not history_file.exists()

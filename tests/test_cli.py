"""Tests for polyloc.cli via typer's CliRunner."""

import json

import pytest
from typer.testing import CliRunner

from polyloc import __version__
from polyloc.cli import app

runner = CliRunner()


@pytest.fixture
def project(sample_project, isolated_config):
    return sample_project


def run_json(*args):
    result = runner.invoke(app, [*args, "--format", "json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestCli:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_json_output(self, project):
        data = run_json(str(project))
        assert data["metadata"]["total_files"] == 4
        assert data["metadata"]["function_extraction_enabled"] is False

    def test_functions_flag(self, project):
        data = run_json(str(project), "-f")
        app_py = next(f for f in data["files"] if f["path"].endswith("app.py"))
        assert app_py["functions"][0]["name"] == "main"
        assert app_py["functions"][0]["complexity"] is None

    def test_func_analysis_estimates_complexity(self, project):
        data = run_json(str(project), "--func-analysis")
        app_py = next(f for f in data["files"] if f["path"].endswith("app.py"))
        assert app_py["functions"][0]["complexity"] == 2
        assert "function_summary" in data

    def test_type_filter(self, project):
        data = run_json(str(project), "-t", "py")
        assert list(data["breakdown"]) == ["python"]

    def test_repeated_and_comma_separated_types(self, project):
        data = run_json(str(project), "-t", "py,rs", "--type", "json")
        assert set(data["breakdown"]) == {"python", "rust", "json"}

    def test_warn_size(self, project):
        data = run_json(str(project), "--warn-size", "4")
        codes = [w["error_code"] for w in data["warnings"]]
        assert codes.count("SC106") == 1

    def test_no_parallel_and_workers(self, project):
        data = run_json(str(project), "--no-parallel", "--workers", "2")
        assert data["metadata"]["total_files"] == 4

    def test_exclude(self, project):
        data = run_json(str(project), "--exclude", "*.rs")
        assert "rust" not in data["breakdown"]

    def test_rich_output(self, project):
        result = runner.invoke(app, [str(project)])
        assert result.exit_code == 0
        assert "Python" in result.output

    def test_export(self, project, tmp_path):
        target = tmp_path / "out.json"
        result = runner.invoke(app, [str(project), "--export", str(target)])
        assert result.exit_code == 0
        assert json.loads(target.read_text())["metadata"]["total_files"] == 4

    def test_html_export(self, project, tmp_path):
        target = tmp_path / "out.html"
        result = runner.invoke(app, [str(project), "--export", str(target)])
        assert result.exit_code == 0
        assert "const DATA = " in target.read_text(encoding="utf-8")

    def test_tree(self, project):
        result = runner.invoke(app, [str(project), "--tree"])
        assert result.exit_code == 0
        assert "app.py" in result.output
        assert "data.json" not in result.output

    def test_tree_with_binary_files(self, project):
        result = runner.invoke(app, [str(project), "--tree", "-b"])
        assert result.exit_code == 0
        assert "data.json" in result.output

    def test_detailed(self, project):
        result = runner.invoke(app, [str(project), "-d"])
        assert result.exit_code == 0
        assert "Lines by Extension" in result.output

    def test_tree_ignored_for_json(self, project):
        data = run_json(str(project), "--tree")
        assert data["metadata"]["total_files"] == 4

    def test_config_file(self, project, tmp_path):
        config = tmp_path / "custom.toml"
        config.write_text('default_types = ["rs"]\n')
        data = run_json(str(project), "--config", str(config))
        assert list(data["breakdown"]) == ["rust"]


class TestCliErrors:
    def test_unknown_type(self, project):
        result = runner.invoke(app, [str(project), "-t", "klingon"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_directory(self, project, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "nowhere")])
        assert result.exit_code == 1

    def test_missing_config(self, project, tmp_path):
        result = runner.invoke(app, [str(project), "--config", str(tmp_path / "none.toml")])
        assert result.exit_code == 1

    def test_bad_format(self, project):
        result = runner.invoke(app, [str(project), "--format", "xml"])
        assert result.exit_code == 1

    def test_verbose_and_quiet(self, project):
        result = runner.invoke(app, [str(project), "-v", "-q"])
        assert result.exit_code == 1

    def test_unsupported_export(self, project, tmp_path):
        result = runner.invoke(app, [str(project), "--export", str(tmp_path / "out.txt")])
        assert result.exit_code == 1

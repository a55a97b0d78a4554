"""Tests for the ultra-debugger command line."""

import json

import pytest
from typer.testing import CliRunner

from ultra_debugger import __version__
from ultra_debugger.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def fast_harness(monkeypatch, tmp_path):
    """No simulated delays; no stray config files or env vars."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ULTRA_DEBUGGER_MAX_EXECUTION_DELAY", "0")
    monkeypatch.setenv("ULTRA_DEBUGGER_SUITE_DELAY", "0")
    monkeypatch.setenv("ULTRA_DEBUGGER_MEMORY_SAMPLE_LIMIT", "1")
    monkeypatch.setenv("ULTRA_DEBUGGER_MEMORY_SAMPLE_INTERVAL", "0")


class TestCli:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_files(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 1

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "missing.js")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_single_file_writes_outputs(self, js_file, tmp_path):
        out = tmp_path / "results"
        result = runner.invoke(app, [str(js_file), "-o", str(out), "-q"])
        assert result.exit_code == 0, result.output
        report = json.loads((out / "debug-report.json").read_text(encoding="utf-8"))
        assert report["fileName"] == "app.js"
        assert (out / "fixed-code.js").exists()

    def test_custom_names_and_skips(self, js_file, tmp_path):
        out = tmp_path / "results"
        result = runner.invoke(
            app, [str(js_file), "-o", str(out), "-r", "r.json", "--no-fixed", "-q"]
        )
        assert result.exit_code == 0, result.output
        assert (out / "r.json").exists()
        assert not (out / "fixed-code.js").exists()

    def test_json_format(self, js_file, tmp_path):
        result = runner.invoke(
            app, [str(js_file), "--no-report", "--no-fixed", "--format", "json", "-q"]
        )
        assert result.exit_code == 0, result.output
        start = result.output.index("{")
        data = json.loads(result.output[start:])
        assert data["summary"]["totalIssues"] == 1

    def test_unknown_format(self, js_file):
        result = runner.invoke(app, [str(js_file), "--format", "xml", "-q"])
        assert result.exit_code == 1

    def test_multiple_files(self, js_file, tmp_path):
        other = tmp_path / "util.js"
        other.write_text("let total = 1;\n", encoding="utf-8")
        out = tmp_path / "results"
        result = runner.invoke(app, [str(js_file), str(other), "-o", str(out), "-q"])
        assert result.exit_code == 0, result.output
        batch = json.loads((out / "multi-file-debug-report.json").read_text(encoding="utf-8"))
        assert batch["summary"]["successful"] == 2
        assert (out / "app.fixed.js").exists()
        assert (out / "util.fixed.js").exists()

    def test_multiple_flag_with_one_file(self, js_file, tmp_path):
        out = tmp_path / "results"
        result = runner.invoke(app, ["-m", str(js_file), "-o", str(out), "--no-fixed", "-q"])
        assert result.exit_code == 0, result.output
        assert (out / "multi-file-debug-report.json").exists()

    def test_eslint_fallback(self, js_file, tmp_path, monkeypatch):
        monkeypatch.setenv("ULTRA_DEBUGGER_LINTER_TIMEOUT_SECONDS", "5")
        out = tmp_path / "results"
        config = tmp_path / "cfg.toml"
        config.write_text('linter_command = ["definitely-not-eslint-binary"]\n', encoding="utf-8")
        result = runner.invoke(
            app, [str(js_file), "--eslint", "-c", str(config), "-o", str(out), "--no-fixed", "-q"]
        )
        assert result.exit_code == 0, result.output
        report = json.loads((out / "debug-report.json").read_text(encoding="utf-8"))
        assert report["analysis"]["engine"] == "builtin"

    def test_log_file(self, js_file, tmp_path):
        log = tmp_path / "run.log"
        result = runner.invoke(
            app, [str(js_file), "--no-report", "--no-fixed", "--log-file", str(log)]
        )
        assert result.exit_code == 0, result.output
        assert "Debug process completed for app.js" in log.read_text(encoding="utf-8")

"""Tests for the CLI commands: argument parsing, output formatting, errors."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from mypa.cli.app import cli
from mypa.page import set_page


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolate(tmp_path, monkeypatch):
    """Run every command in an empty directory with no user config."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    for name in ("MYPA_CONFIG", "PORT", "AUTHORIZED_SITES", "ADDITIONAL_SITES"):
        monkeypatch.delenv(name, raising=False)
    with patch("mypa.cli.app.configure_logging"):
        yield
    set_page(None)


# ── CLI group ────────────────────────────────────────────────────


class TestCliGroup:
    def test_no_command_shows_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli)
        assert result.exit_code == 0
        assert "Multi-screen page" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "mypa" in result.output
        assert "0.3.0" in result.output

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("actions", "call", "sites", "merge-sites", "serve", "mcp"):
            assert command in result.output

    def test_bad_config_file(self, runner: CliRunner, tmp_path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("not = [valid")
        result = runner.invoke(cli, ["--config", str(path), "actions"])
        assert result.exit_code == 1
        assert "Error:" in result.output


# ── actions ──────────────────────────────────────────────────────


class TestActionsCommand:
    def test_json(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["actions", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["state"]["screens"] == 1
        assert "iframe.kizuna.call" in [t["name"] for t in data["tools"]]

    def test_table(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["actions"])
        assert result.exit_code == 0
        assert "layout.set" in result.output
        assert "Screens: 1" in result.output


# ── call ─────────────────────────────────────────────────────────


class TestCallCommand:
    def test_layout_set(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["call", "layout.set", "--args", '{"count": 3}', "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["state"]["screens"] == 3

    def test_failure_exits_nonzero(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["call", "nav.goto", "--args", '{"index": 5}', "--json"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"] == "tool_failed"

    def test_unknown_tool(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["call", "nope"])
        assert result.exit_code == 1
        assert "unknown_tool" in result.output

    def test_invalid_json(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["call", "layout.set", "--args", "{count"])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_args_must_be_object(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["call", "layout.set", "--args", "[3]"])
        assert result.exit_code == 1
        assert "must be a JSON object" in result.output


# ── sites ────────────────────────────────────────────────────────


class TestSitesCommands:
    def test_sites_default(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["sites"])
        assert result.exit_code == 0
        assert "hongkoala.com" in result.output

    def test_sites_from_env(self, runner: CliRunner, monkeypatch) -> None:
        monkeypatch.setenv("AUTHORIZED_SITES", "https://zed.example/")
        result = runner.invoke(cli, ["sites"])
        assert "zed.example" in result.output
        assert "hongkoala" not in result.output

    def test_merge_sites(self, runner: CliRunner, tmp_path) -> None:
        path = tmp_path / "authorized-sites.json"
        path.write_text(json.dumps({"sites": ["https://a.example/"]}))
        result = runner.invoke(cli, ["merge-sites", "--sites", '["https://b.example/"]'])
        assert result.exit_code == 0
        assert "updated successfully (2 sites)" in result.output
        assert json.loads(path.read_text())["sites"] == [
            "https://a.example/",
            "https://b.example/",
        ]

    def test_merge_sites_from_env(self, runner: CliRunner, tmp_path, monkeypatch) -> None:
        path = tmp_path / "other.json"
        path.write_text(json.dumps({"sites": []}))
        monkeypatch.setenv("ADDITIONAL_SITES", '["https://c.example/"]')
        result = runner.invoke(cli, ["merge-sites", "--file", str(path)])
        assert result.exit_code == 0
        assert json.loads(path.read_text())["sites"] == ["https://c.example/"]

    def test_merge_sites_missing_file(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["merge-sites", "--sites", "[]"])
        assert result.exit_code == 1
        assert "Error reading" in result.output


# ── serve / mcp ──────────────────────────────────────────────────


class TestServeCommand:
    def test_serve_runs_uvicorn(self, runner: CliRunner) -> None:
        with patch("uvicorn.run") as mock_run:
            result = runner.invoke(cli, ["serve", "--port", "4100"])
        assert result.exit_code == 0
        assert "Server running at http://127.0.0.1:4100" in result.output
        _, kwargs = mock_run.call_args
        assert kwargs == {"host": "127.0.0.1", "port": 4100}

    def test_mcp_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["mcp", "--help"])
        assert result.exit_code == 0
        assert "MCP" in result.output


# ── logging ──────────────────────────────────────────────────────


class TestLoggingConfig:
    @pytest.mark.parametrize(
        "args",
        [["actions", "--json"], ["sites"], ["call", "iframes.list", "--json"]],
    )
    def test_commands_apply_logging_section(
        self, runner: CliRunner, tmp_path, args: list[str]
    ) -> None:
        (tmp_path / "mypa.toml").write_text('[logging]\nlevel = "DEBUG"\n')
        with patch("mypa.cli.app.configure_logging") as mock_configure:
            result = runner.invoke(cli, args)
        assert result.exit_code == 0
        (logging_config,), _ = mock_configure.call_args
        assert logging_config.level == "DEBUG"

"""Tests for the git-quickstart command line."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from git_quickstart.cli import app
from git_quickstart.core.errors import RunningElevated, UnsupportedPlatform

runner = CliRunner()


def _report(success=True):
    report = MagicMock()
    report.success = success
    return report


class TestInstall:
    @patch("git_quickstart.core.orchestrator.Orchestrator")
    def test_no_command_runs_install(self, mock_orch):
        mock_orch.return_value.run.return_value = _report()
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        mock_orch.return_value.run.assert_called_once_with()

    @patch("git_quickstart.core.orchestrator.Orchestrator")
    def test_failed_step_exits_nonzero(self, mock_orch):
        mock_orch.return_value.run.return_value = _report(success=False)
        result = runner.invoke(app, ["install"])
        assert result.exit_code == 1

    @patch("git_quickstart.core.orchestrator.Orchestrator")
    def test_preflight_error_reported(self, mock_orch):
        mock_orch.return_value.run.side_effect = RunningElevated("Run this script without sudo.")
        result = runner.invoke(app, ["install"])
        assert result.exit_code == 1
        assert "Run this script without sudo." in result.output

    @patch("git_quickstart.core.orchestrator.Orchestrator")
    def test_interrupt(self, mock_orch):
        mock_orch.return_value.run.side_effect = KeyboardInterrupt
        result = runner.invoke(app, ["install"])
        assert result.exit_code == 130
        assert "Cancelled" in result.output

    @patch("git_quickstart.core.orchestrator.Orchestrator")
    def test_options_reach_settings(self, mock_orch, tmp_path, monkeypatch):
        monkeypatch.delenv("GIT_QUICKSTART_HOST", raising=False)
        mock_orch.return_value.run.return_value = _report()
        log_dir = str(tmp_path / "logs")

        runner.invoke(app, ["install", "--log-dir", log_dir, "--host", "git.example.com"])

        settings = mock_orch.call_args.kwargs["settings"]
        assert settings.log_dir == log_dir
        assert settings.credential_host == "git.example.com"


class TestDetect:
    @patch("git_quickstart.core.environment.probe")
    def test_shows_profile(self, mock_probe, ubuntu_profile):
        mock_probe.return_value = ubuntu_profile
        result = runner.invoke(app, ["detect"])
        assert result.exit_code == 0
        assert "Ubuntu 24.04" in result.output
        assert "x86_64" in result.output

    @patch("git_quickstart.core.environment.probe")
    def test_unsupported(self, mock_probe):
        mock_probe.side_effect = UnsupportedPlatform(
            '"Fedora 40 (x86_64)" is not a supported operating system.'
        )
        result = runner.invoke(app, ["detect"])
        assert result.exit_code == 1
        assert "not a supported operating system" in result.output


class TestVersion:
    def test_prints_version(self):
        import git_quickstart

        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"git-quickstart {git_quickstart.__version__}" in result.output

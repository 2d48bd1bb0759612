"""Unit tests for the git process wrapper."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from linestage.config import GitConfig
from linestage.git.process import GitCommandError, check_exit_code, run_git


class TestRunGit:
    """Tests for run_git function."""

    def test_run_git_prefixes_binary(self, tmp_path: Path):
        """run_git puts the configured binary in front of the arguments."""
        config = GitConfig(git_binary="/usr/bin/git", timeout_sec=5)

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="ok", stderr="")
            result = run_git(["status"], cwd=tmp_path, config=config)

            cmd = mock_run.call_args.args[0]
            assert cmd == ["/usr/bin/git", "status"]
            assert mock_run.call_args.kwargs["cwd"] == tmp_path
            assert mock_run.call_args.kwargs["timeout"] == 5
            assert result.stdout == "ok"
            assert result.ok

    def test_run_git_passes_stdin(self, tmp_path: Path):
        """input_text is written to the process stdin."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
            run_git(["apply", "-"], cwd=tmp_path, input_text="patch", config=GitConfig())

            assert mock_run.call_args.kwargs["input"] == "patch"
            assert mock_run.call_args.kwargs["text"] is True

    def test_run_git_explicit_timeout_wins(self, tmp_path: Path):
        """A per-call timeout overrides the configured one."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
            run_git(["status"], cwd=tmp_path, timeout_sec=3, config=GitConfig())

            assert mock_run.call_args.kwargs["timeout"] == 3

    def test_run_git_returns_failure_exit_code(self, tmp_path: Path):
        """Non-zero exit codes are returned, not raised."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=128, stdout="", stderr="fatal")
            result = run_git(["status"], cwd=tmp_path, config=GitConfig())

            assert result.exit_code == 128
            assert result.stderr == "fatal"
            assert not result.ok

    def test_run_git_logs_unexpected_exit_codes(self, tmp_path: Path):
        """Failures are logged at ERROR."""
        with (
            patch("subprocess.run") as mock_run,
            patch("linestage.git.process.logger") as mock_logger,
        ):
            mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="boom")
            run_git(["diff"], cwd=tmp_path, config=GitConfig())

            mock_logger.error.assert_called_once()

    def test_run_git_accepted_exit_codes_are_quiet(self, tmp_path: Path):
        """Exit codes listed in success_codes are not logged as errors."""
        with (
            patch("subprocess.run") as mock_run,
            patch("linestage.git.process.logger") as mock_logger,
        ):
            mock_run.return_value = MagicMock(returncode=1, stdout="diff", stderr="")
            result = run_git(["diff"], cwd=tmp_path, config=GitConfig(), success_codes=(0, 1))

            mock_logger.error.assert_not_called()
            assert result.exit_code == 1

    def test_run_git_timeout_returns_124(self, tmp_path: Path):
        """run_git returns exit code 124 on timeout."""
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=30)
            result = run_git(["diff"], cwd=tmp_path, config=GitConfig())

            assert result.exit_code == 124
            assert "timed out" in result.stderr

    def test_run_git_none_output_becomes_empty(self, tmp_path: Path):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout=None, stderr=None)
            result = run_git(["status"], cwd=tmp_path, config=GitConfig())

            assert result.stdout == ""
            assert result.stderr == ""


class TestCheckExitCode:
    """Tests for check_exit_code function."""

    def test_check_exit_code_success(self):
        """check_exit_code returns None for success."""
        assert check_exit_code("git_status", 0) is None

    def test_check_exit_code_failure(self):
        """check_exit_code returns GitCommandError for failure."""
        error = check_exit_code("git_apply", 1, stderr="error: patch failed\n")

        assert isinstance(error, GitCommandError)
        assert error.exit_code == 1
        assert "git_apply" in str(error)
        assert "patch failed" in str(error)

    def test_check_exit_code_custom_success(self):
        """check_exit_code accepts a custom success code."""
        assert check_exit_code("git_diff", 1, success=1) is None
        assert check_exit_code("git_diff", 0, success=1) is not None

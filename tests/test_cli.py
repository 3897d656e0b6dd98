"""Tests for release_with_ease.cli.main (argument parsing, exit codes, error reporting)."""

import os
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import pytest

from release_with_ease.cli.main import main, parse_args, run
from release_with_ease.errors import ExecutionError, UpstreamError, UserAbort


class TestParseArgs:
    def test_defaults(self) -> None:
        opts = parse_args([])
        assert opts.dry_run is False
        assert opts.verbose is False
        assert opts.project_root == Path.cwd()
        assert opts.config_path is None

    def test_flags(self, tmp_path: Path) -> None:
        opts = parse_args(
            ["--dry-run", "-v", "--project-root", str(tmp_path), "--config", str(tmp_path / "c.yaml")]
        )
        assert opts.dry_run is True
        assert opts.verbose is True
        assert opts.project_root == tmp_path.resolve()
        assert opts.config_path == (tmp_path / "c.yaml").resolve()

    def test_unknown_argument_exits_1(self) -> None:
        with patch("sys.stderr", new=StringIO()) as fake_err, pytest.raises(SystemExit) as exc_info:
            parse_args(["release"])
        assert exc_info.value.code == 1
        assert "Unknown argument: release" in fake_err.getvalue()

    def test_help_exits_0(self) -> None:
        with patch("sys.stderr", new=StringIO()), pytest.raises(SystemExit) as exc_info:
            parse_args(["--help"])
        assert exc_info.value.code == 0


class TestRun:
    def test_missing_api_key(self, project: Path) -> None:
        with (
            patch.dict(os.environ, {}, clear=True),
            patch("release_with_ease.cli.main.execute") as execute,
            patch("sys.stderr", new=StringIO()) as fake_err,
        ):
            assert run(project) == 1
        execute.assert_not_called()
        assert "OPENAI_API_KEY environment variable is required" in fake_err.getvalue()

    def test_success_returns_0(self, project: Path) -> None:
        with (
            patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test", "EDITOR": "vim"}, clear=True),
            patch("release_with_ease.cli.main.execute") as execute,
        ):
            assert run(project) == 0
        release_run = execute.call_args[0][0]
        assert release_run.api_key == "sk-test"
        assert release_run.editor_command == "vim"
        assert release_run.dry_run is False
        assert release_run.config.project_root == project

    def test_dry_run_banner(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with (
            patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test"}, clear=True),
            patch("release_with_ease.cli.main.execute") as execute,
        ):
            assert run(project, dry_run=True) == 0
        assert execute.call_args[0][0].dry_run is True
        assert "DRY RUN MODE" in capsys.readouterr().out

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (UserAbort("Aborted by user."), "Aborted by user."),
            (UpstreamError("Failed to determine version bump: Bad Request 400", detail="bad model"), "bad model"),
            (ExecutionError("Command failed", stderr="fatal: rejected"), "fatal: rejected"),
        ],
    )
    def test_release_errors_return_1(self, project: Path, error: Exception, expected: str) -> None:
        with (
            patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test"}, clear=True),
            patch("release_with_ease.cli.main.execute", side_effect=error),
            patch("sys.stderr", new=StringIO()) as fake_err,
        ):
            assert run(project) == 1
        err = fake_err.getvalue()
        assert err.startswith("Error: ")
        assert expected in err

    def test_bad_config_returns_1(self, project: Path) -> None:
        (project / ".release-with-ease.yaml").write_text("commit_limit: lots\n")
        with (
            patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test"}, clear=True),
            patch("release_with_ease.cli.main.execute") as execute,
            patch("sys.stderr", new=StringIO()) as fake_err,
        ):
            assert run(project) == 1
        execute.assert_not_called()
        assert "commit_limit" in fake_err.getvalue()


class TestMain:
    def test_exit_code_propagates(self, project: Path) -> None:
        with patch("release_with_ease.cli.main.run", return_value=1) as m, pytest.raises(SystemExit) as exc_info:
            main(["--dry-run", "--project-root", str(project)])
        assert exc_info.value.code == 1
        assert m.call_args.kwargs["dry_run"] is True

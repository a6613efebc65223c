"""CLI core stories: traceback handling, the main entry, help, info and unexpected errors."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner, Result

from dotr import __init__conf__
from dotr.adapters import cli as cli_mod
from dotr.composition import AppServices, build_production, build_testing

# ======================== traceback state ========================


@pytest.mark.os_agnostic
def test_traceback_state_round_trips(managed_traceback_state: None) -> None:
    """Both flags start off, switch on together and can be put back."""
    previous = cli_mod.snapshot_traceback_state()
    assert previous == (False, False)

    cli_mod.apply_traceback_preferences(True)
    assert cli_mod.snapshot_traceback_state() == (True, True)

    cli_mod.restore_traceback_state(previous)
    assert cli_mod.snapshot_traceback_state() == (False, False)


@pytest.mark.os_agnostic
def test_traceback_flag_is_active_only_while_the_command_runs(
    monkeypatch: pytest.MonkeyPatch,
    managed_traceback_state: None,
) -> None:
    """--traceback is visible inside the command and reset once main returns."""
    seen: list[tuple[bool, bool]] = []
    monkeypatch.setattr(__init__conf__, "print_info", lambda: seen.append(cli_mod.snapshot_traceback_state()))

    exit_code = cli_mod.main(["--traceback", "info"], services_factory=build_testing)

    assert exit_code == 0
    assert seen == [(True, True)]
    assert cli_mod.snapshot_traceback_state() == (False, False)


@pytest.mark.os_agnostic
def test_main_requires_a_services_factory() -> None:
    """Forgetting the composition root is a programming error."""
    with pytest.raises(ValueError, match="services_factory is required"):
        cli_mod.main(["info"])


# ======================== help ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize("args", [[], ["--traceback"]])
def test_group_without_subcommand_prints_help(
    cli_runner: CliRunner,
    production_factory: Callable[[], Any],
    args: list[str],
) -> None:
    """No subcommand lists the dotfiles commands."""
    result = cli_runner.invoke(cli_mod.cli, args, obj=production_factory)

    assert result.exit_code == 0
    assert "Usage:" in result.output
    for command in ("init", "import", "deploy", "update", "diff", "print-vars"):
        assert command in result.output


@pytest.mark.os_agnostic
def test_main_without_arguments_prints_help(
    managed_traceback_state: None,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """main([]) behaves like the bare console script."""
    exit_code = cli_mod.main([], services_factory=build_production)

    assert exit_code == 0
    assert "Usage:" in capsys.readouterr().out


# ======================== unexpected errors ========================


def _exploding_factory() -> Callable[[], AppServices]:
    """Production services whose repository loader hits an unexpected bug."""

    def _boom(_repo_root: Path) -> Any:
        raise RuntimeError("I should fail")

    services = replace(build_production(), load_repository=_boom)
    return lambda: services


@pytest.mark.os_agnostic
def test_traceback_flag_displays_full_exception_traceback(
    managed_traceback_state: None,
    capsys: pytest.CaptureFixture[str],
    strip_ansi: Callable[[str], str],
    tmp_path: Path,
) -> None:
    """--traceback prints the complete traceback on failure."""
    exit_code = cli_mod.main(["--traceback", "-w", str(tmp_path), "diff"], services_factory=_exploding_factory())

    plain_err = strip_ansi(capsys.readouterr().err)

    assert exit_code != 0
    assert "Traceback (most recent call last)" in plain_err
    assert "RuntimeError: I should fail" in plain_err
    assert "[TRUNCATED" not in plain_err
    assert lib_cli_exit_tools.config.traceback is False
    assert lib_cli_exit_tools.config.traceback_force_color is False


@pytest.mark.os_agnostic
def test_unexpected_error_propagates_out_of_the_command(
    cli_runner: CliRunner,
    tmp_path: Path,
) -> None:
    """Errors that are not dotr errors are not turned into exit codes by commands."""
    result: Result = cli_runner.invoke(cli_mod.cli, ["-w", str(tmp_path), "deploy"], obj=_exploding_factory())

    assert result.exit_code != 0
    assert isinstance(result.exception, RuntimeError)


@pytest.mark.os_agnostic
def test_info_command_displays_project_metadata(
    cli_runner: CliRunner,
    production_factory: Callable[[], Any],
) -> None:
    """info command displays project name and version."""
    result: Result = cli_runner.invoke(cli_mod.cli, ["info"], obj=production_factory)

    assert result.exit_code == 0
    assert f"Info for {__init__conf__.name}:" in result.output
    assert __init__conf__.version in result.output


@pytest.mark.os_agnostic
def test_unknown_command_shows_no_such_command_error(
    cli_runner: CliRunner,
    production_factory: Callable[[], Any],
) -> None:
    """Unknown command produces 'No such command' error."""
    result: Result = cli_runner.invoke(cli_mod.cli, ["does-not-exist"], obj=production_factory)

    assert result.exit_code != 0
    assert "No such command" in result.output


@pytest.mark.os_agnostic
def test_restore_traceback_false_keeps_flags_enabled(
    managed_traceback_state: None,
) -> None:
    """restore_traceback=False leaves traceback flags enabled after command."""
    cli_mod.apply_traceback_preferences(False)

    cli_mod.main(["--traceback", "info"], restore_traceback=False, services_factory=build_production)

    assert lib_cli_exit_tools.config.traceback is True
    assert lib_cli_exit_tools.config.traceback_force_color is True



@pytest.mark.os_agnostic
def test_info_reports_repository_and_tool_settings(
    cli_runner: CliRunner,
    config_cli_context: Callable[[dict[str, Any]], Callable[[], Any]],
    tmp_path: Path,
) -> None:
    """info shows the working directory and the settings actions and backups will use."""
    (tmp_path / "config.toml").write_text("[packages]\n")
    factory = config_cli_context({"dotr": {"shell": "/bin/zsh", "backup_suffix": ".orig"}})

    result: Result = cli_runner.invoke(cli_mod.cli, ["-w", str(tmp_path), "info"], obj=factory)

    assert result.exit_code == 0
    assert str(tmp_path.resolve()) in result.output
    assert "config.toml   = found" in result.output
    assert "action shell  = /bin/zsh" in result.output
    assert "backup suffix = .orig" in result.output


@pytest.mark.os_agnostic
def test_info_flags_a_directory_without_config(
    cli_runner: CliRunner,
    production_factory: Callable[[], Any],
    tmp_path: Path,
) -> None:
    """info works outside a repository and says so."""
    result: Result = cli_runner.invoke(cli_mod.cli, ["-w", str(tmp_path), "info"], obj=production_factory)

    assert result.exit_code == 0
    assert "config.toml   = missing" in result.output


@pytest.mark.os_agnostic
def test_closed_stdout_exits_with_broken_pipe_code(tmp_path: Path) -> None:
    """Piping into a reader that quits early is not reported as a crash."""

    def _closed_pipe(_repo_root: Path) -> Any:
        raise BrokenPipeError

    services = replace(build_production(), load_repository=_closed_pipe)

    exit_code = cli_mod.main(["-w", str(tmp_path), "diff"], services_factory=lambda: services)

    assert exit_code == cli_mod.ExitCode.BROKEN_PIPE

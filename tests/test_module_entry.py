"""Module entry stories ensuring `python -m dotr` and the console script mirror the CLI."""

from __future__ import annotations

import runpy
import subprocess
import sys
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any

import lib_cli_exit_tools
import pytest

from dotr import __init__conf__, entry
from dotr.adapters import cli as cli_mod
from dotr.adapters.cli import ExitCode
from dotr.composition import AppServices, build_production


def _exploding_build() -> AppServices:
    """Production wiring whose repository loader has an unexpected bug."""

    def _boom(_repo_root: Path) -> Any:
        raise RuntimeError("I should fail")

    return replace(build_production(), load_repository=_boom)


@pytest.fixture
def quiet_tracebacks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", False, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", False, raising=False)


# ======================== python -m dotr ========================


@pytest.mark.os_agnostic
def test_module_entry_without_arguments_shows_help(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Bare `python -m dotr` prints usage and exits 0."""
    monkeypatch.setattr(sys, "argv", ["dotr"], raising=False)

    with pytest.raises(SystemExit) as exc:
        runpy.run_module("dotr.__main__", run_name="__main__")

    captured = capsys.readouterr()
    assert exc.value.code == 0
    assert "Usage:" in captured.out
    assert "deploy" in captured.out


@pytest.mark.os_agnostic
def test_module_entry_reports_missing_repository_config(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
) -> None:
    """A directory without config.toml is a configuration error, not a crash."""
    monkeypatch.setattr(sys, "argv", ["dotr", "-w", str(tmp_path), "diff"], raising=False)

    with pytest.raises(SystemExit) as exc:
        runpy.run_module("dotr.__main__", run_name="__main__")

    assert exc.value.code == ExitCode.CONFIG_ERROR
    assert "Traceback" not in capsys.readouterr().err


@pytest.mark.os_agnostic
def test_module_entry_formats_unexpected_errors_via_exit_helpers(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    strip_ansi: Callable[[str], str],
    quiet_tracebacks: None,
    tmp_path: Path,
) -> None:
    """Bugs surface as a short lib_cli_exit_tools message."""
    monkeypatch.setattr("dotr.composition.build_production", _exploding_build)
    monkeypatch.setattr(sys, "argv", ["dotr", "-w", str(tmp_path), "diff"], raising=False)

    with pytest.raises(SystemExit) as exc:
        runpy.run_module("dotr.__main__", run_name="__main__")

    plain_err = strip_ansi(capsys.readouterr().err)
    assert exc.value.code != 0
    assert "I should fail" in plain_err
    assert "Traceback (most recent call last)" not in plain_err


@pytest.mark.os_agnostic
def test_module_entry_traceback_flag_prints_full_traceback(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    strip_ansi: Callable[[str], str],
    quiet_tracebacks: None,
    tmp_path: Path,
) -> None:
    """--traceback prints the whole stack and is reset afterwards."""
    monkeypatch.setattr("dotr.composition.build_production", _exploding_build)
    monkeypatch.setattr(sys, "argv", ["dotr", "--traceback", "-w", str(tmp_path), "deploy"])

    with pytest.raises(SystemExit) as exc:
        runpy.run_module("dotr.__main__", run_name="__main__")

    plain_err = strip_ansi(capsys.readouterr().err)
    assert exc.value.code != 0
    assert "Traceback (most recent call last)" in plain_err
    assert "RuntimeError: I should fail" in plain_err
    assert lib_cli_exit_tools.config.traceback is False


@pytest.mark.os_agnostic
def test_cli_facade_exports_every_command() -> None:
    """The CLI package re-exports each registered command."""
    expected = {
        "cli_config",
        "cli_deploy",
        "cli_diff",
        "cli_import",
        "cli_info",
        "cli_init",
        "cli_print_vars",
        "cli_update",
    }

    assert expected == {name for name in dir(cli_mod) if name.startswith("cli_")}


@pytest.mark.os_agnostic
@pytest.mark.parametrize(("argv", "needle"), [(["--help"], "Usage:"), (["--version"], __init__conf__.version)])
def test_module_entry_in_subprocess(argv: list[str], needle: str) -> None:
    """The real `python -m dotr` invocation path."""
    result = subprocess.run(  # noqa: S603
        [sys.executable, "-m", "dotr", *argv],
        capture_output=True,
        timeout=30,
        check=False,
        # rich-click emits Unicode that cp1252 consoles cannot decode
        encoding="utf-8",
        errors="replace",
    )

    assert result.returncode == 0
    assert needle in result.stdout


# ======================== console script ========================


@pytest.mark.os_agnostic
def test_entry_main_invokes_cli_with_help(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """entry.main() wires production services and runs the group."""
    monkeypatch.setattr(sys, "argv", ["dotr", "--help"])

    exit_code = entry.main()

    captured = capsys.readouterr()
    assert exit_code == 0
    assert __init__conf__.shell_command in captured.out


@pytest.mark.os_agnostic
def test_entry_main_returns_nonzero_on_error(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    strip_ansi: Callable[[str], str],
    quiet_tracebacks: None,
    tmp_path: Path,
) -> None:
    """entry.main() returns the exit code instead of raising."""
    monkeypatch.setattr(entry, "build_production", _exploding_build)
    monkeypatch.setattr(sys, "argv", ["dotr", "-w", str(tmp_path), "diff"])

    exit_code = entry.main()

    assert exit_code != 0
    assert "I should fail" in strip_ansi(capsys.readouterr().err)

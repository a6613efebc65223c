"""Shared pytest fixtures for dotr tests.

Settings, CLI and traceback fixtures plus throwaway dotfiles repositories:
- tool-settings injection through ``get_config`` only
- ``make_repo``/``home`` build real trees under ``tmp_path``
- ``testing_services`` bundles the in-memory doubles with their factory
- every test runs with an initialised lib_log_rich runtime
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import lib_log_rich.runtime
import pytest
from click.testing import CliRunner
from lib_layered_config import Config
from lib_layered_config.domain.config import SourceInfo

from dotr.adapters.memory import ActionRecorder, InMemoryUserVariables, ScriptedLineReader

if TYPE_CHECKING:
    from dotr.composition import AppServices

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture(autouse=True)
def _logging_runtime() -> Iterator[None]:
    """Run every test against a quiet, initialised lib_log_rich runtime.

    ``main()`` shuts the runtime down when it returns, so it is started
    afresh for each test and only stopped if still running afterwards.
    """
    if not lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.init(
            lib_log_rich.runtime.RuntimeConfig(
                service="dotr",
                environment="test",
                console_level="CRITICAL",
                backend_level="CRITICAL",
                queue_enabled=False,
            )
        )
        lib_log_rich.runtime.attach_std_logging()
    yield
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.shutdown()


@pytest.fixture(autouse=True)
def _no_ambient_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's own ``DOTR_PROFILE`` out of every test."""
    monkeypatch.delenv("DOTR_PROFILE", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test.

    Use ``result.stdout`` for clean output (e.g., JSON parsing) so log
    records on stderr do not contaminate it.
    """
    return CliRunner()


@pytest.fixture
def production_factory() -> Callable[[], AppServices]:
    """Provide the production services factory for tests.

    Example:
        def test_info(cli_runner: CliRunner, production_factory: Callable[[], AppServices]) -> None:
            result = cli_runner.invoke(cli, ["info"], obj=production_factory)
            assert result.exit_code == 0
    """
    from dotr.composition import build_production

    return build_production


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return _remove_ansi_codes(value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test.

    Use this whenever a test reads or mutates the global
    ``lib_cli_exit_tools.config`` traceback flags.
    """
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache before each test.

    Only clears before, not after, to avoid errors when the function
    has been monkeypatched during the test (losing cache_clear method).
    """
    from dotr.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts.

    Example:
        def test_section(config_factory: Callable[[dict[str, Any]], Config]) -> None:
            config = config_factory({"dotr": {"backup_suffix": ".bak"}})
            assert config.get("dotr.backup_suffix") == ".bak"
    """

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def source_info_factory() -> Callable[[str, str, str | None], SourceInfo]:
    """Create SourceInfo dicts for provenance-tracking tests.

    Example:
        def test_provenance(source_info_factory: Callable[..., SourceInfo]) -> None:
            info = source_info_factory("dotr.backup_suffix", "user", "/home/user/.config/dotr/config.toml")
            assert info["layer"] == "user"
    """

    def _factory(key: str, layer: str, path: str | None = None) -> SourceInfo:
        return {"layer": layer, "path": path, "key": key}

    return _factory


@pytest.fixture
def inject_config(
    clear_config_cache: None,
) -> Callable[[Config], Callable[[], AppServices]]:
    """Return a factory that provides production services with an injected Config.

    Only replaces the settings I/O boundary (``get_config``), not the Config
    object itself.

    Example:
        def test_config_display(cli_runner, config_factory, inject_config) -> None:
            factory = inject_config(config_factory({"section": {"key": "value"}}))
            result = cli_runner.invoke(cli, ["config"], obj=factory)
            assert "key" in result.output
    """
    from dotr.composition import build_production

    def _inject(config: Config) -> Callable[[], AppServices]:
        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        test_services = replace(build_production(), get_config=_fake_get_config)
        return lambda: test_services

    return _inject


@pytest.fixture
def config_cli_context(
    inject_config: Callable[[Config], Callable[[], AppServices]],
) -> Callable[[dict[str, Any]], Callable[[], AppServices]]:
    """Create a services factory whose tool settings come from a plain dict.

    Simpler than ``inject_config`` when you don't need a pre-built Config object.

    Example:
        def test_config_display(cli_runner, config_cli_context) -> None:
            factory = config_cli_context({"dotr": {"shell": "/bin/zsh"}})
            result = cli_runner.invoke(cli, ["config"], obj=factory)
            assert "/bin/zsh" in result.output
    """

    def _create(config_data: dict[str, Any]) -> Callable[[], AppServices]:
        return inject_config(Config(config_data, {}))

    return _create


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``~`` at an empty directory inside ``tmp_path``."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """An empty directory to use as the dotfiles repository root."""
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def make_repo(repo: Path) -> Callable[..., Path]:
    """Return a helper writing ``config.toml`` and store files into ``repo``.

    Example:
        def test_deploy(make_repo) -> None:
            root = make_repo('[packages.bashrc]\\nsrc = "dotfiles/bashrc"\\ndest = "~/.bashrc"\\n',
                             {"dotfiles/bashrc": "alias ll='ls -l'\\n"})
    """

    def _make(config_toml: str, files: Mapping[str, str] | None = None) -> Path:
        (repo / "config.toml").write_text(config_toml, encoding="utf-8")
        for relative, content in (files or {}).items():
            target = repo / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return repo

    return _make


@dataclass
class TestingServices:
    """In-memory doubles wired into one ``build_testing`` factory.

    Attributes:
        reader: Scripted prompt answers.
        user_variables: Stored prompt answers.
        actions: Recorded pre/post actions.
    """

    __test__ = False

    reader: ScriptedLineReader
    user_variables: InMemoryUserVariables
    actions: ActionRecorder

    def factory(self) -> Callable[[], AppServices]:
        from dotr.composition import build_testing

        services = build_testing(reader=self.reader, user_variables=self.user_variables, actions=self.actions)
        return lambda: services


@pytest.fixture
def testing_services() -> Callable[..., TestingServices]:
    """Return a builder for :class:`TestingServices` with optional answers and exit codes.

    Example:
        def test_prompt(cli_runner, testing_services) -> None:
            doubles = testing_services(answers=["me@example.com"])
            cli_runner.invoke(cli, ["-w", str(root), "deploy"], obj=doubles.factory())
            assert doubles.user_variables.saves == 1
    """

    def _build(
        *,
        answers: tuple[str, ...] | list[str] = (),
        stored: Mapping[Path, Mapping[str, Any]] | None = None,
        exit_codes: Mapping[str, int] | None = None,
    ) -> TestingServices:
        return TestingServices(
            reader=ScriptedLineReader(answers),
            user_variables=InMemoryUserVariables(stored),
            actions=ActionRecorder(exit_codes=dict(exit_codes or {})),
        )

    return _build

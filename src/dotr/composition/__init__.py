"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

# Configuration services
from ..adapters.config.display import display_config
from ..adapters.config.loader import get_config

# Filesystem services
from ..adapters.filesystem.local import copy_file, list_files, make_directory, read_file, write_file

# Logging services
from ..adapters.logging.setup import init_logging

# Repository services
from ..adapters.repository.store import load_repository, save_repository
from ..adapters.repository.uservariables import load_user_variables, save_user_variables

# Shell and terminal services
from ..adapters.system.actions import run_action
from ..adapters.system.prompt import read_line

# Templating services
from ..adapters.templating.jinja import detect_template, render_template

# Static conformance assertions: pyright verifies that each adapter function
# structurally satisfies its corresponding Protocol at type-check time.
if TYPE_CHECKING:
    from ..adapters.memory import ActionRecorder, InMemoryUserVariables, ScriptedLineReader
    from ..application.ports import (
        CopyFile,
        DetectTemplate,
        DisplayConfig,
        GetConfig,
        InitLogging,
        ListFiles,
        LoadRepository,
        LoadUserVariables,
        MakeDirectory,
        ReadFile,
        ReadLine,
        RenderTemplate,
        RunAction,
        SaveRepository,
        SaveUserVariables,
        WriteFile,
    )

    _assert_get_config: GetConfig = get_config
    _assert_display_config: DisplayConfig = display_config
    _assert_init_logging: InitLogging = init_logging
    _assert_load_repository: LoadRepository = load_repository
    _assert_save_repository: SaveRepository = save_repository
    _assert_load_user_variables: LoadUserVariables = load_user_variables
    _assert_save_user_variables: SaveUserVariables = save_user_variables
    _assert_read_line: ReadLine = read_line
    _assert_detect_template: DetectTemplate = detect_template
    _assert_render_template: RenderTemplate = render_template
    _assert_run_action: RunAction = run_action
    _assert_read_file: ReadFile = read_file
    _assert_write_file: WriteFile = write_file
    _assert_copy_file: CopyFile = copy_file
    _assert_make_directory: MakeDirectory = make_directory
    _assert_list_files: ListFiles = list_files


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    display_config: DisplayConfig
    init_logging: InitLogging
    load_repository: LoadRepository
    save_repository: SaveRepository
    load_user_variables: LoadUserVariables
    save_user_variables: SaveUserVariables
    read_line: ReadLine
    detect_template: DetectTemplate
    render_template: RenderTemplate
    run_action: RunAction
    read_file: ReadFile
    write_file: WriteFile
    copy_file: CopyFile
    make_directory: MakeDirectory
    list_files: ListFiles


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        display_config=display_config,
        init_logging=init_logging,
        load_repository=load_repository,
        save_repository=save_repository,
        load_user_variables=load_user_variables,
        save_user_variables=save_user_variables,
        read_line=read_line,
        detect_template=detect_template,
        render_template=render_template,
        run_action=run_action,
        read_file=read_file,
        write_file=write_file,
        copy_file=copy_file,
        make_directory=make_directory,
        list_files=list_files,
    )


def build_testing(
    *,
    reader: ScriptedLineReader | None = None,
    user_variables: InMemoryUserVariables | None = None,
    actions: ActionRecorder | None = None,
) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Settings, logging, prompts, user variables and actions stay in memory.
    The repository store, templating and file operations remain real so
    tests drive them against ``tmp_path`` trees.

    Args:
        reader: Scripted answers for prompts. Defaults to an empty script,
            so any prompt aborts.
        user_variables: Store for answered prompts. Pass your own to assert
            on what was persisted.
        actions: Recorder standing in for the shell.

    Returns:
        AppServices container with in-memory adapters.
    """
    from ..adapters.memory import (
        ActionRecorder,
        InMemoryUserVariables,
        ScriptedLineReader,
        display_config_in_memory,
        get_config_in_memory,
        init_logging_in_memory,
    )

    store = user_variables if user_variables is not None else InMemoryUserVariables()

    return AppServices(
        get_config=get_config_in_memory,
        display_config=display_config_in_memory,
        init_logging=init_logging_in_memory,
        load_repository=load_repository,
        save_repository=save_repository,
        load_user_variables=store.load,
        save_user_variables=store.save,
        read_line=reader if reader is not None else ScriptedLineReader(),
        detect_template=detect_template,
        render_template=render_template,
        run_action=actions if actions is not None else ActionRecorder(),
        read_file=read_file,
        write_file=write_file,
        copy_file=copy_file,
        make_directory=make_directory,
        list_files=list_files,
    )


__all__ = [
    "AppServices",
    "build_production",
    "build_testing",
]

"""In-memory adapter implementations for testing.

Provides lightweight implementations of application ports that operate
entirely in memory -- no settings discovery, no terminal, no shell.

Contents:
    * :mod:`.config` - In-memory settings adapters
    * :mod:`.logging` - In-memory logging adapter
    * :mod:`.prompts` - Scripted line reader and user-variable store
    * :mod:`.actions` - Recording action runner
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .actions import ActionRecorder, RecordedAction
from .config import display_config_in_memory, get_config_in_memory
from .logging import init_logging_in_memory
from .prompts import InMemoryUserVariables, ScriptedLineReader

# Static conformance assertions
if TYPE_CHECKING:
    from dotr.application.ports import (
        DisplayConfig,
        GetConfig,
        InitLogging,
        LoadUserVariables,
        ReadLine,
        RunAction,
        SaveUserVariables,
    )

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_display_config: DisplayConfig = display_config_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_read_line: ReadLine = ScriptedLineReader()
    _assert_run_action: RunAction = ActionRecorder()
    _assert_load_user_variables: LoadUserVariables = InMemoryUserVariables().load
    _assert_save_user_variables: SaveUserVariables = InMemoryUserVariables().save

__all__ = [
    "ActionRecorder",
    "InMemoryUserVariables",
    "RecordedAction",
    "ScriptedLineReader",
    "display_config_in_memory",
    "get_config_in_memory",
    "init_logging_in_memory",
]

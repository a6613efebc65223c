"""Domain-specific exceptions for typed error handling at boundaries.

Resolution-level errors (:class:`UnknownPackageError`,
:class:`UnknownProfileError`, :class:`ConfigurationError`) abort a command
before any file is touched. Unit-level errors (:class:`RenderError`,
:class:`UnitIOError`) are caught by the deployment pipeline, recorded
against the offending unit, and never stop the remaining units.
"""

from __future__ import annotations


class DotrError(Exception):
    """Base class for every error raised by dotr's own code."""


class ConfigurationError(DotrError):
    """Missing, invalid, or incomplete configuration.

    Raised when ``config.toml``, ``.uservariables.toml`` or the tool's own
    settings are absent, malformed, or logically inconsistent. Typically
    caught at CLI boundaries to provide user-friendly error messages.

    Example:
        >>> err = ConfigurationError("config.toml not found in /tmp/dots")
        >>> str(err)
        'config.toml not found in /tmp/dots'
    """


class UnknownPackageError(DotrError, LookupError):
    """A requested package name (or dependency) is absent from the config tree.

    Example:
        >>> err = UnknownPackageError("nvim")
        >>> err.name
        'nvim'
        >>> str(err)
        "Package 'nvim' not found in configuration"
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Package '{name}' not found in configuration")


class UnknownProfileError(DotrError, LookupError):
    """A requested profile name is absent from the config tree.

    Example:
        >>> str(UnknownProfileError("work"))
        "Profile 'work' not found in configuration"
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Profile '{name}' not found in configuration")


class RenderError(DotrError):
    """Template rendering failed (syntax error, undefined name, bad filter).

    Example:
        >>> err = RenderError("'EMAIL' is undefined", line=3)
        >>> str(err)
        "'EMAIL' is undefined (line 3)"
    """

    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.message = message
        self.line = line
        suffix = f" (line {line})" if line is not None else ""
        super().__init__(f"{message}{suffix}")


class UnitIOError(DotrError, OSError):
    """A read, write, or backup failed for a single deployment unit.

    Wraps the underlying :class:`OSError` so the pipeline can report the
    unit's identity alongside the operating-system message.

    Example:
        >>> err = UnitIOError("write", "/home/u/.bashrc", PermissionError(13, "Permission denied"))
        >>> str(err)
        'write failed for /home/u/.bashrc: [Errno 13] Permission denied'
    """

    def __init__(self, operation: str, path: object, cause: OSError) -> None:
        self.operation = operation
        self.path = str(path)
        self.cause = cause
        super().__init__(f"{operation} failed for {self.path}: {cause}")


class PromptAbortedError(DotrError):
    """No answer could be read for an interactive prompt (EOF, Ctrl+C).

    Example:
        >>> err = PromptAbortedError("GIT_EMAIL")
        >>> str(err)
        "No input available for prompt 'GIT_EMAIL'"
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No input available for prompt '{key}'")


class ImportPathError(DotrError, ValueError):
    """The path handed to ``import`` cannot be copied into the store under a free name."""


__all__ = [
    "ConfigurationError",
    "DotrError",
    "ImportPathError",
    "PromptAbortedError",
    "RenderError",
    "UnitIOError",
    "UnknownPackageError",
    "UnknownProfileError",
]

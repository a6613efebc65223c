"""Typed view of the ``[dotr]`` section of the layered tool settings."""

from __future__ import annotations

from typing import cast

from lib_layered_config import Config
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ...domain.errors import ConfigurationError


class DotrSettings(BaseModel):
    """Pydantic model for ``[dotr]`` settings, parsed once at the boundary.

    Example:
        >>> settings = DotrSettings()
        >>> settings.backup_suffix, settings.diff_context_lines
        ('.dotrbak', 3)
        >>> DotrSettings(backup_suffix="bak").backup_suffix
        '.bak'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    backup_suffix: str = ".dotrbak"
    diff_context_lines: int = Field(default=3, ge=0)
    shell: str = ""
    user_variables_file: str = ".uservariables.toml"

    @field_validator("backup_suffix")
    @classmethod
    def _leading_dot(cls, value: str) -> str:
        value = value.strip()
        if not value.strip("."):
            raise ValueError("backup_suffix must not be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("user_variables_file")
    @classmethod
    def _plain_filename(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError("user_variables_file must be a plain file name")
        return value


def load_settings(config: Config) -> DotrSettings:
    """Parse the ``[dotr]`` section of *config*.

    Raises:
        ConfigurationError: When a value has the wrong type or is out of range.

    Example:
        >>> load_settings(Config({"dotr": {"diff_context_lines": 5}}, {})).diff_context_lines
        5
    """
    raw: object = config.get("dotr", default={})
    try:
        return DotrSettings.model_validate(cast("dict[str, object]", raw) if raw else {})
    except ValidationError as exc:
        problems = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())
        raise ConfigurationError(f"Invalid [dotr] settings: {problems}") from exc


__all__ = ["DotrSettings", "load_settings"]

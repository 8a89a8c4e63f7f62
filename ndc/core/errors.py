"""Error taxonomy for project generation."""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every error raised while generating a project."""

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigurationError(ScaffoldError, ValueError):
    """Raised when the project configuration is invalid."""


class UnknownTemplateError(ConfigurationError):
    """Raised when a template-root identifier is not in the catalog."""


class AssetError(ScaffoldError):
    """Raised when the template asset repository cannot be listed or read."""


class TemplateRenderError(ScaffoldError):
    """Raised when a name or file body cannot be compiled or executed."""


class OutputError(ScaffoldError):
    """Raised when the destination tree cannot be written."""

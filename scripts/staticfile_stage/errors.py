"""Exception hierarchy shared by the staging compiler."""

from __future__ import annotations

__all__ = [
    "ConfigParseError",
    "DependencyNotFoundError",
    "ExtractError",
    "FetchError",
    "FlagWriteError",
    "RootNotDirectoryError",
    "RootNotFoundError",
    "ScriptWriteError",
    "StageError",
    "StagingIOError",
]


class StageError(RuntimeError):
    """Raised when the staging pipeline cannot complete successfully."""


class ConfigParseError(StageError):
    """Raised when the ``Staticfile`` exists but cannot be parsed."""


class RootNotFoundError(StageError):
    """Raised when the configured root directory does not exist."""


class RootNotDirectoryError(StageError):
    """Raised when the configured root directory is a plain file."""


class StagingIOError(StageError):
    """Raised when relocating application files into ``public`` fails."""


class DependencyNotFoundError(StageError):
    """Raised when the manifest has no usable version of a dependency."""


class FetchError(StageError):
    """Raised when a dependency archive cannot be downloaded or verified."""


class ExtractError(StageError):
    """Raised when a dependency archive cannot be unpacked."""


class FlagWriteError(StageError):
    """Raised when a feature marker file cannot be written."""


class ScriptWriteError(StageError):
    """Raised when the ``.profile.d`` startup script cannot be written."""

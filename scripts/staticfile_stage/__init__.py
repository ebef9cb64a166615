"""Staging compiler that prepares static sites for serving with nginx.

The package reads the ``Staticfile`` directives of an application, moves the
files to serve into ``public``, installs nginx and writes the startup hook
that renders its configuration when the container boots.
"""

from __future__ import annotations

from .config import Configuration, Setting, SettingState, load_directives
from .environment import buildpack_dir, read_version
from .errors import (
    ConfigParseError,
    DependencyNotFoundError,
    ExtractError,
    FetchError,
    FlagWriteError,
    RootNotDirectoryError,
    RootNotFoundError,
    ScriptWriteError,
    StageError,
    StagingIOError,
)
from .flags import feature_flags, write_flags
from .log import Logger
from .manifest import Dependency, DependencyResolver, Manifest
from .pipeline import CompileResult, compile_app
from .profile_d import write_startup_script
from .provision import provision_server
from .root import resolve_root
from .staging import RESERVED_NAMES, stage_files

__all__ = [
    "CompileResult",
    "ConfigParseError",
    "Configuration",
    "Dependency",
    "DependencyNotFoundError",
    "DependencyResolver",
    "ExtractError",
    "FetchError",
    "FlagWriteError",
    "Logger",
    "Manifest",
    "RESERVED_NAMES",
    "RootNotDirectoryError",
    "RootNotFoundError",
    "ScriptWriteError",
    "Setting",
    "SettingState",
    "StageError",
    "StagingIOError",
    "buildpack_dir",
    "compile_app",
    "feature_flags",
    "load_directives",
    "provision_server",
    "read_version",
    "resolve_root",
    "stage_files",
    "write_flags",
    "write_startup_script",
]

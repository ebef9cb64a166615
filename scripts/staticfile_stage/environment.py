"""Environment helpers shared by the staging compiler."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import StageError

__all__ = ["BUILDPACK_DIR_ENV", "buildpack_dir", "read_version"]

BUILDPACK_DIR_ENV = "BUILDPACK_DIR"


def buildpack_dir(default: Path) -> Path:
    """Return the tool's resource root.

    Parameters
    ----------
    default:
        Directory used when ``BUILDPACK_DIR`` is unset or empty, normally the
        checkout that contains the ``scripts`` directory.
    """
    value = os.environ.get(BUILDPACK_DIR_ENV)
    if not value:
        return Path(default).resolve()
    return Path(value)


def read_version(resource_root: Path) -> str:
    """Return the buildpack version recorded in ``resource_root/VERSION``.

    Raises
    ------
    StageError
        Raised when the ``VERSION`` file is missing, unreadable or empty.
    """
    version_file = resource_root / "VERSION"
    try:
        version = version_file.read_text(encoding="utf-8").strip()
    except OSError as exc:
        message = f"Unable to read buildpack version from {version_file}"
        raise StageError(message) from exc
    if not version:
        message = f"Buildpack version file {version_file} is empty"
        raise StageError(message)
    return version

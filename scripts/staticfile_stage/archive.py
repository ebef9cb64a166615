"""Archive extraction backed by the system ``tar`` executable."""

from __future__ import annotations

from pathlib import Path

from plumbum import local
from plumbum.commands import CommandNotFound, ProcessExecutionError

from .errors import ExtractError

__all__ = ["extract_tar_gz"]


def extract_tar_gz(archive: Path, destination: Path) -> None:
    """Unpack the gzip-compressed tarball ``archive`` into ``destination``.

    ``tar`` preserves the permissions and symlinks of the nginx distribution,
    which the runtime relies on for ``nginx/sbin/nginx``.

    Raises
    ------
    ExtractError
        Raised when ``tar`` is unavailable or rejects the archive.
    """

    destination.mkdir(parents=True, exist_ok=True)
    try:
        tar = local["tar"]
        tar["-xzf", str(archive), "-C", str(destination)]()
    except CommandNotFound as exc:
        message = "tar executable not found on PATH"
        raise ExtractError(message) from exc
    except ProcessExecutionError as exc:
        stderr = (exc.stderr or "").strip()
        message = f"Failed to extract {archive}: {stderr or exc}"
        raise ExtractError(message) from exc

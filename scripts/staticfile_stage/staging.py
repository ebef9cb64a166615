"""Relocation of application files into the ``public`` directory."""

from __future__ import annotations

import os
import shutil
import tempfile
import typing as typ
from pathlib import Path

from .config import AUTH_FILE, DIRECTIVES_FILE
from .errors import StagingIOError

if typ.TYPE_CHECKING:
    from .config import Configuration
    from .log import Logger

__all__ = ["PUBLIC_DIR", "RESERVED_NAMES", "is_eligible", "stage_files"]

PUBLIC_DIR = "public"

RESERVED_NAMES: frozenset[str] = frozenset(
    {
        DIRECTIVES_FILE,
        AUTH_FILE,
        "manifest.yml",
        ".profile",
        "stackato.yml",
    }
)


def is_eligible(name: str, config: Configuration) -> bool:
    """Return ``True`` when the entry ``name`` should be served.

    Examples
    --------
    >>> from staticfile_stage.config import Configuration
    >>> is_eligible("index.html", Configuration())
    True
    >>> is_eligible(".env", Configuration())
    False
    >>> is_eligible("Staticfile", Configuration())
    False
    """

    if name in RESERVED_NAMES:
        return False
    return not (name.startswith(".") and not config.host_dot_files.enabled)


def stage_files(
    build_dir: Path, app_root: Path, config: Configuration, logger: Logger
) -> Path:
    """Move eligible entries of ``app_root`` into ``build_dir/public``.

    Entries are moved into a private directory first, which is then renamed
    onto the target, so ``public`` never appears half populated. Entries moved
    before a failure are not restored.

    Parameters
    ----------
    build_dir : Path
        Build directory that will contain the ``public`` directory.
    app_root : Path
        Absolute root returned by :func:`staticfile_stage.root.resolve_root`.
    config : Configuration
        Directives controlling whether dotfiles are served.
    logger : Logger
        Receives the begin-step announcement.

    Returns
    -------
    Path
        The ``public`` directory.

    Raises
    ------
    StagingIOError
        Raised when any entry or the final directory cannot be moved.
    """

    logger.begin_step("Copying project files into public")

    public_dir = Path(os.path.abspath(build_dir / PUBLIC_DIR))
    app_root = Path(os.path.abspath(app_root))
    if public_dir == app_root:
        return public_dir

    try:
        staging_dir = Path(
            tempfile.mkdtemp(prefix=".staticfile-", dir=public_dir.parent)
        )
        for entry in sorted(app_root.iterdir()):
            if entry == staging_dir or not is_eligible(entry.name, config):
                continue
            shutil.move(entry, staging_dir / entry.name)
        staging_dir.rename(public_dir)
    except OSError as exc:
        message = f"Unable to move project files into {public_dir}: {exc}"
        raise StagingIOError(message) from exc
    return public_dir

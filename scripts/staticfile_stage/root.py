"""Resolution of the application root directory."""

from __future__ import annotations

import os
import typing as typ
from pathlib import Path

from .errors import RootNotDirectoryError, RootNotFoundError

if typ.TYPE_CHECKING:
    from .config import Configuration
    from .log import Logger

__all__ = ["resolve_root"]


def resolve_root(build_dir: Path, config: Configuration, logger: Logger) -> Path:
    """Return the absolute application root for ``build_dir``.

    Parameters
    ----------
    build_dir : Path
        Build directory supplied by the platform.
    config : Configuration
        Directives whose ``root`` value, when set, is relative to
        ``build_dir``.
    logger : Logger
        Receives the resolved path, even when validation then fails.

    Raises
    ------
    RootNotFoundError
        Raised when the root does not exist.
    RootNotDirectoryError
        Raised when the root is a plain file.
    """

    relative = config.root_relative
    root = Path(os.path.abspath(build_dir / relative))
    logger.begin_step(f"Root folder {root}")

    if not root.exists():
        message = (
            "the application Staticfile specifies a root directory "
            f"{relative} that does not exist"
        )
        raise RootNotFoundError(message)
    if not root.is_dir():
        message = (
            "the application Staticfile specifies a root directory "
            f"{relative} that is a plain file, but was expected to be a directory"
        )
        raise RootNotDirectoryError(message)
    return root

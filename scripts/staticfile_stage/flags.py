"""Marker files read by the nginx template when the container starts."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .errors import FlagWriteError

if typ.TYPE_CHECKING:
    from .config import Configuration, Setting
    from .log import Logger

__all__ = ["MARKER_CONTENT", "feature_flags", "write_flags"]

MARKER_CONTENT = "x"

# Configuration field, marker file name, and whether the payload is written.
_MARKERS: tuple[tuple[str, str, bool], ...] = (
    ("host_dot_files", ".enable_dotfiles", False),
    ("location_include", ".enable_location_include", True),
    ("directory_index", ".enable_directory_index", False),
    ("ssi", ".enable_ssi", False),
    ("push_state", ".enable_pushstate", False),
    ("hsts", ".enable_hsts", False),
    ("force_https", ".enable_force_https", False),
)


def feature_flags(config: Configuration) -> dict[str, str]:
    """Return marker file names mapped to their content for ``config``.

    Examples
    --------
    >>> from staticfile_stage.config import Configuration
    >>> feature_flags(Configuration())
    {}
    """

    flags: dict[str, str] = {}
    for field, marker, carries_payload in _MARKERS:
        setting: Setting = getattr(config, field)
        if setting.enabled:
            flags[marker] = setting.value if carries_payload else MARKER_CONTENT
    return flags


def write_flags(conf_dir: Path, config: Configuration, logger: Logger) -> list[Path]:
    """Write one marker per enabled feature into ``conf_dir``.

    Markers written before a failure are left in place.

    Raises
    ------
    FlagWriteError
        Raised when a marker cannot be written.
    """

    logger.begin_step("Writing nginx feature markers")

    written: list[Path] = []
    for marker, content in feature_flags(config).items():
        path = conf_dir / marker
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            message = f"Unable to write {path}: {exc}"
            raise FlagWriteError(message) from exc
        written.append(path)
    return written

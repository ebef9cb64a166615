"""Sequential staging pipeline turning a build directory into a deployable app."""

from __future__ import annotations

import contextlib
import dataclasses
import typing as typ
from pathlib import Path

from .archive import extract_tar_gz
from .config import load_directives
from .environment import read_version
from .errors import StageError
from .flags import write_flags
from .profile_d import write_startup_script
from .provision import provision_server
from .root import resolve_root
from .staging import stage_files

if typ.TYPE_CHECKING:
    from .config import Configuration
    from .log import Logger
    from .manifest import DependencyResolver
    from .provision import Extractor

__all__ = ["CompileResult", "compile_app"]


@dataclasses.dataclass(slots=True)
class CompileResult:
    """Outcome of :func:`compile_app`."""

    config: Configuration
    app_root: Path
    public_dir: Path
    conf_dir: Path
    markers: list[Path]
    startup_script: Path


@contextlib.contextmanager
def _step(logger: Logger, failure: str) -> typ.Iterator[None]:
    """Log ``failure`` with the error text before re-raising it."""

    try:
        yield
    except (StageError, OSError) as exc:
        logger.error(f"{failure}: {exc}")
        raise


def compile_app(
    build_dir: Path,
    resolver: DependencyResolver,
    *,
    resource_root: Path,
    logger: Logger,
    archive_path: Path | None = None,
    extract: Extractor = extract_tar_gz,
) -> CompileResult:
    """Stage ``build_dir`` for serving with nginx.

    Parameters
    ----------
    build_dir : Path
        Application tree supplied by the platform; modified in place.
    resolver : DependencyResolver
        Source of the nginx archive, normally a
        :class:`~staticfile_stage.manifest.Manifest`.
    resource_root : Path
        Tool resource directory holding ``VERSION`` and ``conf`` templates.
    logger : Logger
        Receives progress and error messages.
    archive_path : Path | None, optional
        Download location for the nginx archive.
    extract : Callable[[Path, Path], None], optional
        Archive extraction primitive.

    Returns
    -------
    CompileResult
        Paths of everything the pipeline produced.

    Raises
    ------
    StageError
        Raised by the first failing step, after its error has been logged.
    OSError
        Raised unchanged when copying nginx configuration files fails.
    """

    with _step(logger, "Could not determine buildpack version"):
        version = read_version(resource_root)
    logger.begin_step(f"Staticfile Buildpack Version {version}")

    with _step(logger, "Unable to load Staticfile"):
        config = load_directives(build_dir, logger)

    with _step(logger, "Invalid root directory"):
        app_root = resolve_root(build_dir, config, logger)

    with _step(logger, "Failed copying project files"):
        public_dir = stage_files(build_dir, app_root, config, logger)

    with _step(logger, "Unable to install nginx"):
        conf_dir = provision_server(
            build_dir,
            config,
            resolver,
            resource_root=resource_root,
            logger=logger,
            archive_path=archive_path,
            extract=extract,
        )

    with _step(logger, "Could not write config markers from Staticfile"):
        markers = write_flags(conf_dir, config, logger)

    with _step(logger, "Could not write .profile.d script"):
        startup_script = write_startup_script(build_dir, logger)

    return CompileResult(
        config=config,
        app_root=app_root,
        public_dir=public_dir,
        conf_dir=conf_dir,
        markers=markers,
        startup_script=startup_script,
    )

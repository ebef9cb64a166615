"""Installation of the nginx distribution into the build directory."""

from __future__ import annotations

import shutil
import tempfile
import typing as typ
from pathlib import Path

from .archive import extract_tar_gz
from .staging import PUBLIC_DIR

if typ.TYPE_CHECKING:
    from .config import Configuration
    from .log import Logger
    from .manifest import DependencyResolver

__all__ = [
    "CONF_TEMPLATES",
    "HTPASSWD",
    "SERVER_DEPENDENCY",
    "conf_dir",
    "provision_server",
    "select_conf_source",
]

SERVER_DEPENDENCY = "nginx"
CONF_TEMPLATES: tuple[str, ...] = ("nginx.conf", "mime.types")
HTPASSWD = ".htpasswd"

Extractor = typ.Callable[[Path, Path], None]


def conf_dir(build_dir: Path) -> Path:
    """Return the nginx configuration directory inside ``build_dir``."""
    return build_dir / SERVER_DEPENDENCY / "conf"


def default_archive_path() -> Path:
    return Path(tempfile.gettempdir()) / f"{SERVER_DEPENDENCY}.tgz"


def select_conf_source(build_dir: Path, resource_root: Path, name: str) -> Path:
    """Return the file to install as ``nginx/conf/<name>``.

    A file of the same name at the top of ``public`` overrides the template
    bundled in ``resource_root/conf``.
    """

    custom = build_dir / PUBLIC_DIR / name
    if custom.is_file():
        return custom
    return resource_root / "conf" / name


def provision_server(
    build_dir: Path,
    config: Configuration,
    resolver: DependencyResolver,
    *,
    resource_root: Path,
    logger: Logger,
    archive_path: Path | None = None,
    extract: Extractor = extract_tar_gz,
) -> Path:
    """Fetch, unpack and configure nginx inside ``build_dir``.

    Parameters
    ----------
    build_dir : Path
        Build directory that receives the ``nginx`` tree.
    config : Configuration
        Directives; ``basic_auth`` and ``auth_file`` decide whether the
        credentials file is installed.
    resolver : DependencyResolver
        Locates and downloads the nginx archive.
    resource_root : Path
        Tool resource directory holding the default ``conf`` templates.
    logger : Logger
        Receives progress messages.
    archive_path : Path | None, optional
        Download location for the archive, ``$TMPDIR/nginx.tgz`` by default.
    extract : Callable[[Path, Path], None], optional
        Archive extraction primitive.

    Returns
    -------
    Path
        The nginx configuration directory.

    Raises
    ------
    DependencyNotFoundError
        Raised when the manifest has no default nginx version.
    FetchError
        Raised when the archive cannot be downloaded or verified.
    ExtractError
        Raised when the archive cannot be unpacked.
    OSError
        Raised unchanged when a configuration file cannot be copied.
    """

    logger.begin_step("Setting up nginx")

    dependency = resolver.default_version(SERVER_DEPENDENCY)
    logger.info(f"Using Nginx version {dependency.version}")

    archive = archive_path or default_archive_path()
    resolver.fetch(dependency, archive)
    extract(archive, build_dir)

    target_dir = conf_dir(build_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    for name in CONF_TEMPLATES:
        source = select_conf_source(build_dir, resource_root, name)
        shutil.copyfile(source, target_dir / name)

    if config.basic_auth and config.auth_file is not None:
        shutil.copyfile(config.auth_file, target_dir / HTPASSWD)

    return target_dir

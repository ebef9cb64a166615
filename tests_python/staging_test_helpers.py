"""Shared helpers for the staging compiler test suites."""

from __future__ import annotations

import io
import tarfile
from pathlib import Path

__all__ = [
    "BUNDLED_MIME_TYPES",
    "BUNDLED_NGINX_CONF",
    "log_lines",
    "make_nginx_archive",
    "write_resource_root",
]

BUNDLED_NGINX_CONF = "# bundled nginx.conf\n"
BUNDLED_MIME_TYPES = "types { text/html html; }\n"


def log_lines(buffer: io.StringIO) -> list[str]:
    """Return the lines written to ``buffer`` so far."""

    return buffer.getvalue().splitlines()


def write_resource_root(root: Path, version: str = "1.4.0") -> Path:
    """Populate ``root`` with the files the compiler reads from its resources.

    Parameters
    ----------
    root : Path
        Directory to create.
    version : str
        Content of the ``VERSION`` file.
    """

    conf = root / "conf"
    conf.mkdir(parents=True)
    (conf / "nginx.conf").write_text(BUNDLED_NGINX_CONF, encoding="utf-8")
    (conf / "mime.types").write_text(BUNDLED_MIME_TYPES, encoding="utf-8")
    (root / "VERSION").write_text(f"{version}\n", encoding="utf-8")
    return root


def _add_entry(
    archive: tarfile.TarFile, name: str, data: bytes | None = None, mode: int = 0o644
) -> None:
    info = tarfile.TarInfo(name)
    if data is None:
        info.type = tarfile.DIRTYPE
        info.mode = 0o755
        archive.addfile(info)
        return
    info.size = len(data)
    info.mode = mode
    archive.addfile(info, io.BytesIO(data))


def make_nginx_archive(path: Path) -> Path:
    """Write a gzip tarball shaped like the nginx distribution to ``path``.

    The archive contains ``nginx/conf``, ``nginx/logs``, ``nginx/lib`` and an
    executable ``nginx/sbin/nginx`` placeholder.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as archive:
        for directory in ("nginx", "nginx/conf", "nginx/logs", "nginx/lib", "nginx/sbin"):
            _add_entry(archive, directory)
        _add_entry(archive, "nginx/conf/nginx.conf", b"# upstream nginx.conf\n")
        _add_entry(archive, "nginx/sbin/nginx", b"#!/bin/sh\n", mode=0o755)
    return path

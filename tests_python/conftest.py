"""Shared fixtures for the staging compiler test suite."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from staging_test_helpers import make_nginx_archive, write_resource_root
from staticfile_stage import Dependency, Logger, Manifest
from staticfile_stage.manifest import file_sha256


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """Create an empty build directory."""
    root = tmp_path / "build"
    root.mkdir()
    return root


@pytest.fixture
def log_buffer() -> io.StringIO:
    """Collect everything written by :func:`logger`."""
    return io.StringIO()


@pytest.fixture
def logger(log_buffer: io.StringIO) -> Logger:
    """Logger writing into ``log_buffer``."""
    return Logger(log_buffer)


@pytest.fixture
def resource_root(tmp_path: Path) -> Path:
    """Populate a tool resource directory with default templates."""
    root = tmp_path / "buildpack"
    write_resource_root(root)
    return root


@pytest.fixture
def nginx_archive(tmp_path: Path) -> Path:
    """Build a small nginx distribution tarball."""
    return make_nginx_archive(tmp_path / "dist" / "nginx-1.25.3.tgz")


@pytest.fixture
def manifest(resource_root: Path, nginx_archive: Path) -> Manifest:
    """Manifest serving ``nginx_archive`` through a ``file://`` URI."""
    return Manifest(
        root_dir=resource_root,
        default_versions={"nginx": "1.25.x"},
        dependencies=[
            Dependency(
                name="nginx",
                version="1.25.3",
                uri=nginx_archive.as_uri(),
                sha256=file_sha256(nginx_archive),
            )
        ],
        language="staticfile",
    )


@pytest.fixture
def archive_path(tmp_path: Path) -> Path:
    """Download location for the nginx archive."""
    return tmp_path / "download" / "nginx.tgz"

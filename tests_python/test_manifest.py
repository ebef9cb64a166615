"""Tests for the dependency manifest."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from staticfile_stage import (
    Dependency,
    DependencyNotFoundError,
    FetchError,
    Manifest,
    StageError,
)
from staticfile_stage.manifest import file_sha256, version_matches


def write_manifest(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_load_reads_defaults_and_dependencies(tmp_path: Path) -> None:
    manifest_file = write_manifest(
        tmp_path / "manifest.yml",
        """\
language: staticfile
default_versions:
- name: nginx
  version: 1.25.x
dependencies:
- name: nginx
  version: 1.25.3
  uri: https://example.invalid/nginx-1.25.3.tgz
  sha256: abc123
""",
    )

    manifest = Manifest.load(manifest_file)

    assert manifest.language == "staticfile"
    assert manifest.root_dir == tmp_path
    assert manifest.default_versions == {"nginx": "1.25.x"}
    assert manifest.dependencies == [
        Dependency(
            name="nginx",
            version="1.25.3",
            uri="https://example.invalid/nginx-1.25.3.tgz",
            sha256="abc123",
        )
    ]


def test_repository_manifest_parses() -> None:
    repo_manifest = Path(__file__).resolve().parents[1] / "manifest.yml"

    manifest = Manifest.load(repo_manifest)

    assert manifest.language == "staticfile"
    assert "nginx" in manifest.default_versions


@pytest.mark.parametrize(
    "content",
    [
        pytest.param("- not\n- a mapping\n", id="sequence"),
        pytest.param("dependencies:\n- name: nginx\n", id="missing-version"),
        pytest.param("default_versions: [unterminated\n", id="invalid-yaml"),
    ],
)
def test_load_rejects_malformed_manifest(tmp_path: Path, content: str) -> None:
    manifest_file = write_manifest(tmp_path / "manifest.yml", content)

    with pytest.raises(StageError):
        Manifest.load(manifest_file)


def test_load_missing_manifest_raises(tmp_path: Path) -> None:
    with pytest.raises(StageError):
        Manifest.load(tmp_path / "manifest.yml")


@pytest.mark.parametrize(
    ("constraint", "version", "expected"),
    [
        ("1.25.x", "1.25.3", True),
        ("1.25.x", "1.24.9", False),
        ("1.x", "1.27.0", True),
        ("1.x", "2.0.0", False),
        ("1.25.3", "1.25.3", True),
        ("1.25.3", "1.25.30", False),
        ("1.25.x", "1.25", False),
    ],
)
def test_version_matches(constraint: str, version: str, expected: bool) -> None:
    assert version_matches(constraint, version) is expected


def test_default_version_picks_highest_match(tmp_path: Path) -> None:
    manifest = Manifest(
        root_dir=tmp_path,
        default_versions={"nginx": "1.25.x"},
        dependencies=[
            Dependency("nginx", "1.25.2", "file:///a"),
            Dependency("nginx", "1.25.10", "file:///b"),
            Dependency("nginx", "1.27.0", "file:///c"),
            Dependency("other", "1.25.99", "file:///d"),
        ],
    )

    assert manifest.default_version("nginx").version == "1.25.10"


def test_default_version_without_default_raises(tmp_path: Path) -> None:
    manifest = Manifest(root_dir=tmp_path, default_versions={}, dependencies=[])

    with pytest.raises(DependencyNotFoundError, match="No default version"):
        manifest.default_version("nginx")


def test_default_version_without_matching_dependency_raises(tmp_path: Path) -> None:
    manifest = Manifest(
        root_dir=tmp_path,
        default_versions={"nginx": "1.25.x"},
        dependencies=[Dependency("nginx", "1.24.0", "file:///a")],
    )

    with pytest.raises(DependencyNotFoundError, match="1.25.x"):
        manifest.default_version("nginx")


def test_fetch_copies_file_uri_and_verifies_digest(
    manifest: Manifest, nginx_archive: Path, archive_path: Path
) -> None:
    dependency = manifest.default_version("nginx")

    manifest.fetch(dependency, archive_path)

    assert archive_path.read_bytes() == nginx_archive.read_bytes()


def test_fetch_rejects_digest_mismatch(
    nginx_archive: Path, archive_path: Path, tmp_path: Path
) -> None:
    manifest = Manifest(root_dir=tmp_path, default_versions={}, dependencies=[])
    dependency = Dependency("nginx", "1.25.3", nginx_archive.as_uri(), sha256="0" * 64)

    with pytest.raises(FetchError, match="sha256 mismatch"):
        manifest.fetch(dependency, archive_path)


def test_fetch_missing_local_archive_raises(tmp_path: Path, archive_path: Path) -> None:
    manifest = Manifest(root_dir=tmp_path, default_versions={}, dependencies=[])
    dependency = Dependency("nginx", "1.25.3", (tmp_path / "absent.tgz").as_uri())

    with pytest.raises(FetchError):
        manifest.fetch(dependency, archive_path)


def test_fetch_downloads_over_http(
    nginx_archive: Path, archive_path: Path, tmp_path: Path
) -> None:
    payload = nginx_archive.read_bytes()
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, content=payload)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        manifest = Manifest(
            root_dir=tmp_path, default_versions={}, dependencies=[], client=client
        )
        dependency = Dependency(
            "nginx",
            "1.25.3",
            "https://buildpacks.example.invalid/nginx-1.25.3.tgz",
            sha256=file_sha256(nginx_archive),
        )
        manifest.fetch(dependency, archive_path)

    assert requested == ["https://buildpacks.example.invalid/nginx-1.25.3.tgz"]
    assert archive_path.read_bytes() == payload


def test_fetch_http_error_raises_fetch_error(archive_path: Path, tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, request=request)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        manifest = Manifest(
            root_dir=tmp_path, default_versions={}, dependencies=[], client=client
        )
        dependency = Dependency("nginx", "1.25.3", "https://example.invalid/missing.tgz")

        with pytest.raises(FetchError, match="Failed to fetch nginx 1.25.3"):
            manifest.fetch(dependency, archive_path)


@pytest.mark.parametrize(
    "section",
    [
        pytest.param("default_versions:\n- name: nginx\n  version: 1.10\n", id="default"),
        pytest.param(
            "dependencies:\n- name: nginx\n  version: 1.10\n  uri: file:///a\n",
            id="dependency",
        ),
    ],
)
def test_load_rejects_unquoted_numeric_version(tmp_path: Path, section: str) -> None:
    """``1.10`` parses as a float and would silently become ``1.1``."""

    manifest_file = write_manifest(tmp_path / "manifest.yml", section)

    with pytest.raises(StageError, match="must be a quoted string"):
        Manifest.load(manifest_file)


def test_load_accepts_quoted_numeric_version(tmp_path: Path) -> None:
    manifest_file = write_manifest(
        tmp_path / "manifest.yml",
        'default_versions:\n- name: nginx\n  version: "1.10"\n',
    )

    assert Manifest.load(manifest_file).default_versions == {"nginx": "1.10"}


def test_repository_manifest_explains_how_to_pin_nginx() -> None:
    repo_manifest = Path(__file__).resolve().parents[1] / "manifest.yml"
    manifest = Manifest.load(repo_manifest)

    with pytest.raises(DependencyNotFoundError) as exc:
        manifest.default_version("nginx")

    message = str(exc.value)
    assert "add a pinned nginx entry with uri and sha256" in message
    assert str(repo_manifest) in message


def test_fetch_unwritable_destination_raises_fetch_error(
    nginx_archive: Path, tmp_path: Path
) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    manifest = Manifest(root_dir=tmp_path, default_versions={}, dependencies=[])
    dependency = Dependency(
        "nginx", "1.25.3", nginx_archive.as_uri(), sha256=file_sha256(nginx_archive)
    )

    with pytest.raises(FetchError, match="Failed to fetch nginx 1.25.3"):
        manifest.fetch(dependency, blocker / "downloads" / "nginx.tgz")


def test_fetch_unreadable_download_raises_fetch_error(
    nginx_archive: Path,
    archive_path: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def fail(path: Path) -> str:
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr("staticfile_stage.manifest.file_sha256", fail)
    manifest = Manifest(root_dir=tmp_path, default_versions={}, dependencies=[])
    dependency = Dependency("nginx", "1.25.3", nginx_archive.as_uri(), sha256="0" * 64)

    with pytest.raises(FetchError, match="Failed to fetch nginx 1.25.3"):
        manifest.fetch(dependency, archive_path)

"""Dependency manifest used to locate and download the nginx distribution.

The manifest lives at the root of the tool's resource directory::

    language: staticfile
    default_versions:
      - name: nginx
        version: 1.25.x
    dependencies:
      - name: nginx
        version: 1.25.3
        uri: https://example.invalid/nginx-1.25.3.tgz
        sha256: 0f1e...

``x`` components in a default version act as wildcards; the highest matching
dependency wins.
"""

from __future__ import annotations

import dataclasses
import hashlib
import shutil
import typing as typ
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx
import yaml

from .errors import DependencyNotFoundError, FetchError, StageError

__all__ = [
    "Dependency",
    "DependencyResolver",
    "Manifest",
    "file_sha256",
    "version_matches",
]

DOWNLOAD_TIMEOUT = 60.0


@dataclasses.dataclass(frozen=True, slots=True)
class Dependency:
    """Versioned archive registered in the manifest."""

    name: str
    version: str
    uri: str
    sha256: str = ""


class DependencyResolver(typ.Protocol):
    """Source of versioned dependency archives."""

    def default_version(self, name: str) -> Dependency: ...

    def fetch(self, dependency: Dependency, destination: Path) -> None: ...


def _version_key(version: str) -> tuple[int, ...]:
    parts: list[int] = []
    for part in version.split("."):
        digits = "".join(char for char in part if char.isdigit())
        parts.append(int(digits) if digits else 0)
    return tuple(parts)


def version_matches(constraint: str, version: str) -> bool:
    """Return ``True`` when ``version`` satisfies the wildcard ``constraint``.

    Examples
    --------
    >>> version_matches("1.25.x", "1.25.3")
    True
    >>> version_matches("1.x", "2.0.1")
    False
    >>> version_matches("1.25.3", "1.25.3")
    True
    """

    wanted = constraint.split(".")
    actual = version.split(".")
    if wanted[-1] in {"x", "*"}:
        if len(actual) < len(wanted):
            return False
        actual = actual[: len(wanted)]
    elif len(actual) != len(wanted):
        return False
    return all(
        want in {"x", "*"} or want == have
        for want, have in zip(wanted, actual, strict=True)
    )


def _version_text(entry: dict[str, typ.Any], path: Path) -> str:
    version = entry["version"]
    if not isinstance(version, str):
        message = (
            f"Version {version!r} of {entry['name']} in {path} must be a quoted "
            "string, e.g. version: \"1.10\""
        )
        raise StageError(message)
    return version


def file_sha256(path: Path) -> str:
    """Return the hex sha256 digest of ``path``."""

    hasher = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(8192), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


@dataclasses.dataclass(slots=True)
class Manifest:
    """Dependency manifest loaded from ``manifest.yml``.

    Parameters
    ----------
    root_dir : Path
        Resource directory containing the manifest.
    default_versions : dict[str, str]
        Version constraint per dependency name.
    dependencies : list[Dependency]
        Archives available for download.
    language : str, default=""
        Name of the buildpack the manifest belongs to.
    client : httpx.Client | None, optional
        Client used for ``http(s)`` downloads; one is created per fetch when
        omitted.
    """

    root_dir: Path
    default_versions: dict[str, str]
    dependencies: list[Dependency]
    language: str = ""
    client: httpx.Client | None = None

    @classmethod
    def load(cls, path: Path, *, client: httpx.Client | None = None) -> Manifest:
        """Read the manifest at ``path``.

        Raises
        ------
        StageError
            Raised when the file is missing or malformed.
        """

        try:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except (OSError, yaml.YAMLError) as exc:
            message = f"Unable to load manifest {path}: {exc}"
            raise StageError(message) from exc
        if not isinstance(data, dict):
            message = f"Manifest {path} must be a mapping"
            raise StageError(message)

        try:
            defaults = {
                entry["name"]: _version_text(entry, path)
                for entry in data.get("default_versions") or []
            }
            dependencies = [
                Dependency(
                    name=entry["name"],
                    version=_version_text(entry, path),
                    uri=entry["uri"],
                    sha256=entry.get("sha256", ""),
                )
                for entry in data.get("dependencies") or []
            ]
        except (KeyError, TypeError) as exc:
            message = f"Malformed manifest entry in {path}: {exc}"
            raise StageError(message) from exc

        return cls(
            root_dir=path.parent,
            default_versions=defaults,
            dependencies=dependencies,
            language=data.get("language", ""),
            client=client,
        )

    def default_version(self, name: str) -> Dependency:
        """Return the highest dependency matching ``name``'s default version.

        Raises
        ------
        DependencyNotFoundError
            Raised when no default is declared or no dependency matches it.
        """

        constraint = self.default_versions.get(name)
        if constraint is None:
            message = (
                f"No default version registered for {name}; "
                f"{self._pin_hint(name)}"
            )
            raise DependencyNotFoundError(message)
        candidates = [
            dependency
            for dependency in self.dependencies
            if dependency.name == name
            and version_matches(constraint, dependency.version)
        ]
        if not candidates:
            message = (
                f"No {name} dependency in the manifest matches {constraint}; "
                f"{self._pin_hint(name)}"
            )
            raise DependencyNotFoundError(message)
        return max(candidates, key=lambda dependency: _version_key(dependency.version))

    def fetch(self, dependency: Dependency, destination: Path) -> None:
        """Download ``dependency`` to ``destination`` and verify its digest.

        Raises
        ------
        FetchError
            Raised when the download fails or the sha256 digest differs.
        """

        parsed = urlparse(dependency.uri)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            if parsed.scheme in {"", "file"}:
                shutil.copyfile(unquote(parsed.path), destination)
            else:
                self._download(dependency.uri, destination)
            digest = file_sha256(destination) if dependency.sha256 else ""
        except (OSError, httpx.HTTPError) as exc:
            message = f"Failed to fetch {dependency.name} {dependency.version}: {exc}"
            raise FetchError(message) from exc

        if dependency.sha256 and digest != dependency.sha256.lower():
            message = (
                f"sha256 mismatch for {dependency.name} {dependency.version}: "
                f"expected {dependency.sha256}, got {digest}"
            )
            raise FetchError(message)

    def _pin_hint(self, name: str) -> str:
        return (
            f"add a pinned {name} entry with uri and sha256 under "
            f"dependencies in {self.root_dir / 'manifest.yml'}"
        )

    def _download(self, uri: str, destination: Path) -> None:
        client = self.client or httpx.Client(
            follow_redirects=True, timeout=DOWNLOAD_TIMEOUT
        )
        try:
            with client.stream("GET", uri) as response:
                response.raise_for_status()
                with destination.open("wb") as handle:
                    for chunk in response.iter_bytes():
                        handle.write(chunk)
        finally:
            if client is not self.client:
                client.close()

#!/usr/bin/env -S uv run python
# /// script
# requires-python = ">=3.12"
# dependencies = [
#   "cyclopts>=3.24.0,<4.0.0",
#   "httpx>=0.27",
#   "plumbum>=1.8",
#   "pyyaml>=6.0",
# ]
# ///

"""Stage a static application for serving with nginx.

The platform invokes this script with the build and cache directories. The
cache directory is accepted for compatibility and otherwise unused. The
``staticfile_stage`` package sits beside this file, so running the script by
path imports it without an install step.

Examples
--------
Compile an application checkout in place::

    export BUILDPACK_DIR="$(pwd)"
    uv run scripts/compile.py /tmp/app /tmp/cache
"""

from __future__ import annotations

from pathlib import Path

import cyclopts

from staticfile_stage import Logger, Manifest, StageError, buildpack_dir, compile_app

REPO_ROOT = Path(__file__).resolve().parents[1]

app = cyclopts.App(help="Stage a static application and install nginx.")


@app.default
def main(build_dir: Path, cache_dir: Path) -> None:  # noqa: ARG001 - platform contract passes the cache directory
    """Compile ``build_dir`` into a deployable static site.

    Parameters
    ----------
    build_dir:
        Application tree supplied by the platform; modified in place.
    cache_dir:
        Build cache directory supplied by the platform.
    """
    logger = Logger()
    resource_root = buildpack_dir(REPO_ROOT)
    try:
        manifest = Manifest.load(resource_root / "manifest.yml")
    except StageError as exc:
        logger.error(str(exc))
        raise SystemExit(1) from exc

    try:
        compile_app(
            Path(build_dir),
            manifest,
            resource_root=resource_root,
            logger=logger,
        )
    except (OSError, StageError) as exc:
        raise SystemExit(1) from exc


if __name__ == "__main__":
    app()

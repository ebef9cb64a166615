"""Console output in the format buildpack users expect.

Every helper prints a single record to the configured stream, so the
messages interleave correctly with output from the platform itself.

Examples
--------
Capture the output of a step in memory::

    import io
    from staticfile_stage.log import Logger

    buffer = io.StringIO()
    Logger(buffer).begin_step("Setting up nginx")
    assert buffer.getvalue() == "-----> Setting up nginx\\n"
"""

from __future__ import annotations

import sys
import typing as typ

__all__ = ["Logger"]

STEP_PREFIX = "-----> "
INDENT = "       "


class Logger:
    """Write buildpack-style progress messages to ``stream``.

    Parameters
    ----------
    stream : TextIO | None, optional
        Destination for log records. ``None`` resolves :data:`sys.stdout` at
        write time so pytest's ``capsys`` sees the output.
    """

    def __init__(self, stream: typ.TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> typ.TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def begin_step(self, message: str) -> None:
        """Announce the start of a pipeline step."""
        self._write(f"{STEP_PREFIX}{message}")

    def info(self, message: str) -> None:
        self._write(f"{INDENT}{message}")

    def warning(self, message: str) -> None:
        self._write(f"{INDENT}**WARNING** {message}")

    def error(self, message: str) -> None:
        self._write(f"{INDENT}**ERROR** {message}")

    def protip(self, tip: str, url: str) -> None:
        """Point the user at documentation for the feature just enabled."""
        self._write(f"{INDENT}PRO TIP: {tip}")
        self._write(f"{INDENT}Visit {url}")

    def _write(self, line: str) -> None:
        print(line, file=self.stream, flush=True)

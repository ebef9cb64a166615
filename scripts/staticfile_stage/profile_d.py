"""Startup hook executed by the platform before nginx starts."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .errors import ScriptWriteError

if typ.TYPE_CHECKING:
    from .log import Logger

__all__ = ["INIT_SCRIPT", "PROFILE_D", "SCRIPT_NAME", "write_startup_script"]

PROFILE_D = ".profile.d"
SCRIPT_NAME = "staticfile.sh"
SCRIPT_MODE = 0o755

INIT_SCRIPT = """
# ------------------------------------------------------------------------------------------------
# Copyright 2013 Jordon Bedwell.
# Apache License.
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may not use this file
# except  in compliance with the License. You may obtain a copy of the License at:
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software distributed under the
# License is distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND,
# either express or implied. See the License for the specific language governing permissions
# and  limitations under the License.
# ------------------------------------------------------------------------------------------------

export APP_ROOT=$HOME
export LD_LIBRARY_PATH=$APP_ROOT/nginx/lib:$LD_LIBRARY_PATH

mv $APP_ROOT/nginx/conf/nginx.conf $APP_ROOT/nginx/conf/orig.conf
erb $APP_ROOT/nginx/conf/orig.conf > $APP_ROOT/nginx/conf/nginx.conf

if [[ ! -f $APP_ROOT/nginx/logs/access.log ]]; then
    mkfifo $APP_ROOT/nginx/logs/access.log
fi

if [[ ! -f $APP_ROOT/nginx/logs/error.log ]]; then
    mkfifo $APP_ROOT/nginx/logs/error.log
fi

cat < $APP_ROOT/nginx/logs/access.log &
(>&2 cat) < $APP_ROOT/nginx/logs/error.log &
"""


def write_startup_script(build_dir: Path, logger: Logger) -> Path:
    """Write :data:`INIT_SCRIPT` to ``build_dir/.profile.d/staticfile.sh``.

    Raises
    ------
    ScriptWriteError
        Raised when the directory or script cannot be written.
    """

    logger.begin_step(f"Writing {PROFILE_D} startup script")

    script = build_dir / PROFILE_D / SCRIPT_NAME
    try:
        script.parent.mkdir(parents=True, exist_ok=True)
        script.write_bytes(INIT_SCRIPT.encode("utf-8"))
        script.chmod(SCRIPT_MODE)
    except OSError as exc:
        message = f"Unable to write {script}: {exc}"
        raise ScriptWriteError(message) from exc
    return script

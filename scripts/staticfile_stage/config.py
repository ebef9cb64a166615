"""Directive models and loader for the ``Staticfile``.

The ``Staticfile`` is a flat YAML mapping of directive names to scalar values.
Each recognised directive maps onto a :class:`Setting` whose state records
whether the directive was absent, present but not enabling, or enabling.

Usage
-----
Load the directives for a build directory::

    from pathlib import Path
    from staticfile_stage.config import load_directives
    from staticfile_stage.log import Logger

    config = load_directives(Path("/tmp/app"), Logger())
    print(config.root_relative)
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ
from pathlib import Path

import yaml

from .errors import ConfigParseError

if typ.TYPE_CHECKING:
    from .log import Logger

__all__ = [
    "AUTH_FILE",
    "AUTH_DOCS_URL",
    "DIRECTIVES",
    "DIRECTIVES_FILE",
    "Configuration",
    "Directive",
    "Setting",
    "SettingState",
    "load_directives",
]

DIRECTIVES_FILE = "Staticfile"
AUTH_FILE = "Staticfile.auth"
AUTH_DOCS_URL = (
    "http://docs.cloudfoundry.org/buildpacks/staticfile/index.html#authentication"
)


class SettingState(enum.Enum):
    """Whether a directive was omitted, declined or switched on."""

    UNSET = "unset"
    DISABLED = "disabled"
    ENABLED = "enabled"


@dataclasses.dataclass(frozen=True, slots=True)
class Setting:
    """Value of a single directive.

    Attributes
    ----------
    state : SettingState
        ``UNSET`` when the key is absent, ``DISABLED`` when present with a
        value that does not switch the feature on, ``ENABLED`` otherwise.
    value : str
        Payload carried by enabled string directives such as ``root`` and
        ``location_include``. Empty for flag-style directives.
    """

    state: SettingState = SettingState.UNSET
    value: str = ""

    @property
    def enabled(self) -> bool:
        return self.state is SettingState.ENABLED


UNSET = Setting()


@dataclasses.dataclass(frozen=True, slots=True)
class Configuration:
    """Directives parsed from the ``Staticfile``.

    The instance is created once per run by :func:`load_directives` and is
    read-only afterwards.

    Attributes
    ----------
    root_dir : Setting
        Application root relative to the build directory.
    host_dot_files : Setting
        Serve files whose names start with a dot.
    location_include : Setting
        Path of an nginx snippet included in the ``location /`` block.
    directory_index : Setting
        Generate listings for directories without an index file.
    ssi : Setting
        Enable server side includes.
    push_state : Setting
        Rewrite unknown paths to ``/`` for client-side routers.
    hsts : Setting
        Send the ``Strict-Transport-Security`` header.
    force_https : Setting
        Redirect plain HTTP requests to HTTPS.
    basic_auth : bool
        ``True`` when ``Staticfile.auth`` exists in the build directory.
    auth_file : Path | None
        Location of the credentials file when :attr:`basic_auth` is set.
    """

    root_dir: Setting = UNSET
    host_dot_files: Setting = UNSET
    location_include: Setting = UNSET
    directory_index: Setting = UNSET
    ssi: Setting = UNSET
    push_state: Setting = UNSET
    hsts: Setting = UNSET
    force_https: Setting = UNSET
    basic_auth: bool = False
    auth_file: Path | None = None

    @property
    def root_relative(self) -> str:
        """Root directory as written by the user, ``"."`` when unset."""
        return self.root_dir.value if self.root_dir.enabled else "."


def _is_true(value: str) -> bool:
    return value.strip().lower() == "true"


def _flag(predicate: typ.Callable[[str], bool]) -> typ.Callable[[str], Setting]:
    def interpret(value: str) -> Setting:
        if predicate(value):
            return Setting(SettingState.ENABLED)
        return Setting(SettingState.DISABLED)

    return interpret


def _payload(value: str) -> Setting:
    if value:
        return Setting(SettingState.ENABLED, value)
    return Setting(SettingState.DISABLED)


@dataclasses.dataclass(frozen=True, slots=True)
class Directive:
    """Bind a ``Staticfile`` key to a :class:`Configuration` field."""

    key: str
    field: str
    interpret: typ.Callable[[str], Setting]
    message: str

    def describe(self, setting: Setting) -> str:
        return self.message.format(value=setting.value)


# Evaluated in this order regardless of the order keys appear in the file.
DIRECTIVES: tuple[Directive, ...] = (
    Directive("root", "root_dir", _payload, "Using root folder {value}"),
    Directive(
        "host_dot_files",
        "host_dot_files",
        _flag(_is_true),
        "Enabling hosting of dotfiles",
    ),
    Directive(
        "location_include",
        "location_include",
        _payload,
        "Enabling location include file {value}",
    ),
    Directive(
        "directory",
        "directory_index",
        _flag(bool),
        "Enabling directory index for folders without index.html files",
    ),
    Directive("ssi", "ssi", _flag(lambda value: value == "enabled"), "Enabling SSI"),
    Directive(
        "pushstate",
        "push_state",
        _flag(lambda value: value == "enabled"),
        "Enabling pushstate",
    ),
    Directive(
        "http_strict_transport_security", "hsts", _flag(_is_true), "Enabling HSTS"
    ),
    Directive(
        "force_https", "force_https", _flag(_is_true), "Enabling HTTPS redirect"
    ),
)


def load_directives(build_dir: Path, logger: Logger) -> Configuration:
    """Load the ``Staticfile`` from ``build_dir``.

    Parameters
    ----------
    build_dir : Path
        Build directory that may contain ``Staticfile`` and
        ``Staticfile.auth``.
    logger : Logger
        Receives one begin-step line per enabled feature.

    Returns
    -------
    Configuration
        Parsed directives; all defaults when the ``Staticfile`` is absent.

    Raises
    ------
    ConfigParseError
        Raised when the ``Staticfile`` exists but is not a flat YAML mapping.
    """

    values = _read_directives(build_dir / DIRECTIVES_FILE)

    fields: dict[str, typ.Any] = {}
    for directive in DIRECTIVES:
        if directive.key not in values:
            continue
        setting = directive.interpret(values[directive.key])
        fields[directive.field] = setting
        if setting.enabled:
            logger.begin_step(directive.describe(setting))

    auth_file = build_dir / AUTH_FILE
    if auth_file.is_file():
        logger.begin_step(f"Enabling basic authentication using {AUTH_FILE}")
        logger.protip("Learn about basic authentication", AUTH_DOCS_URL)
        fields |= {"basic_auth": True, "auth_file": auth_file}

    return Configuration(**fields)


def _read_directives(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        message = f"Unable to parse {path}: {exc}"
        raise ConfigParseError(message) from exc
    except OSError as exc:
        message = f"Unable to read {path}: {exc}"
        raise ConfigParseError(message) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        message = (
            f"{path.name} must be a mapping of directive names to values, "
            f"found {type(data).__name__}"
        )
        raise ConfigParseError(message)
    return {str(key): _coerce_scalar(key, value, path) for key, value in data.items()}


def _coerce_scalar(key: object, value: object, path: Path) -> str:
    """Return ``value`` as the string a string-to-string YAML decode would give.

    Examples
    --------
    >>> _coerce_scalar("host_dot_files", True, Path("Staticfile"))
    'true'
    >>> _coerce_scalar("root", None, Path("Staticfile"))
    ''
    """

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        message = f"Directive '{key}' in {path.name} must be a scalar value"
        raise ConfigParseError(message)
    return str(value)

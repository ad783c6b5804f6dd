"""Settings for the MiniRef server and notebook.

Values are layered, later sources winning:

1. built-in defaults
2. a TOML file (``miniref.toml`` in the working directory, or the path in
   ``MINIREF_CONFIG``)::

       [miniref]
       notes_dir = "notes"
       port      = 3000
       recursive = false

3. ``MINIREF_<KEY>`` environment variables (``MINIREF_NOTES_DIR`` …)
"""

from __future__ import annotations

import dataclasses
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from miniref.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "miniref.toml"
ENV_PREFIX = "MINIREF_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    notes_dir: Path = Path("notes")
    host: str = "127.0.0.1"
    port: int = 3000
    recursive: bool = False
    strict: bool = False
    log_level: str = "INFO"


_FIELDS = {f.name: f for f in dataclasses.fields(Settings)}


def _coerce(key: str, value: Any) -> Any:
    default = _FIELDS[key].default
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ConfigError(f"{key}: expected a boolean, got {value!r}")
    if isinstance(default, int):
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{key}: expected an integer, got {value!r}") from exc
    if isinstance(default, Path):
        return Path(os.path.expanduser(str(value)))
    if key == "log_level":
        level = str(value).strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ConfigError(f"{key}: unknown logging level {value!r}")
        return level
    return str(value)


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    section = data.get("miniref", data)
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: [miniref] must be a table")
    return section


def load_settings(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build :class:`Settings` from defaults, config file and environment."""
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    explicit = config_path is not None or f"{ENV_PREFIX}CONFIG" in env
    path = Path(config_path or env.get(f"{ENV_PREFIX}CONFIG") or DEFAULT_CONFIG_NAME)
    if path.is_file():
        base = path.parent
        for key, raw in _read_config_file(path).items():
            if key not in _FIELDS:
                logger.warning("Ignoring unknown config key %r in %s", key, path)
                continue
            values[key] = _coerce(key, raw)
        # relative notes_dir in a config file is relative to that file
        if "notes_dir" in values and not values["notes_dir"].is_absolute():
            values["notes_dir"] = base / values["notes_dir"]
    elif explicit:
        raise ConfigError(f"config file not found: {path}")

    for key in _FIELDS:
        raw = env.get(f"{ENV_PREFIX}{key.upper()}")
        if raw is not None:
            values[key] = _coerce(key, raw)

    return Settings(**values)

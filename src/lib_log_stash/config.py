"""Configuration sources feeding :meth:`LogStasher.load_from_config`.

Purpose
-------
Collect settings from the places deployments actually keep them: a nearby
``.env`` file, ``LOGSTASH_*`` environment variables, and TOML config files.
Every source produces the same plain mapping that ``load_from_config``
consumes, so precedence is just mapping order.

Contents
--------
* ``.env`` support: :data:`DOTENV_ENV_VAR`, :func:`should_use_dotenv`,
  :func:`enable_dotenv`.
* :func:`config_from_env` - environment variables to config mapping.
* :func:`load_config_file` - TOML file to config mapping.
* :func:`merge_configs` - combine sources, later ones winning per key.

System Role
-----------
Used by the CLI and available to host applications at startup. Values that
cannot be interpreted raise :class:`ConfigurationError` immediately.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from lib_log_stash.domain.errors import ConfigurationError

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover - exercised on Python 3.10 only
    import tomli as tomllib

LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LIB_LOG_STASH_USE_DOTENV"
ENV_PREFIX = "LOGSTASH_"
CONFIG_TABLES: tuple[tuple[str, ...], ...] = (("logstasher",), ("tool", "lib_log_stash"))

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_dotenv_loaded: Path | None = None


def _reset_dotenv_state_for_testing() -> None:
    """Forget which ``.env`` file was loaded."""

    global _dotenv_loaded
    _dotenv_loaded = None


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether to load ``.env``; an explicit CLI choice beats the env toggle.

    Examples
    --------
    >>> should_use_dotenv(explicit=None, env_value="1")
    True
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` walking upwards; existing variables win.

    Returns the resolved path that was loaded, or ``None`` when no file was
    found. The file is loaded at most once per process.
    """

    global _dotenv_loaded
    if _dotenv_loaded is not None:
        return _dotenv_loaded

    if search_from is not None:
        candidate = _find_upwards(search_from)
    else:
        found = find_dotenv(usecwd=True)
        candidate = Path(found) if found else None
    if candidate is None:
        LOGGER.debug("no .env file found")
        return None

    load_dotenv(candidate, override=False)
    _dotenv_loaded = candidate.resolve()
    LOGGER.debug("loaded environment from %s", _dotenv_loaded)
    return _dotenv_loaded


def _find_upwards(start: Path) -> Path | None:
    directory = start.resolve()
    for folder in (directory, *directory.parents):
        candidate = folder / ".env"
        if candidate.is_file():
            return candidate
    return None


def _parse_bool(name: str, raw: str) -> bool:
    """Interpret ``raw`` strictly as a boolean.

    Examples
    --------
    >>> _parse_bool("X", " Yes ")
    True
    >>> _parse_bool("X", "off")
    False
    """

    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {raw!r}")


def _parse_metadata(name: str, raw: str) -> dict[str, Any]:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{name} must be a JSON object: {exc.msg}") from exc
    if not isinstance(value, dict):
        raise ConfigurationError(f"{name} must be a JSON object, got {type(value).__name__}")
    return value


def config_from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Build a configuration mapping from ``LOGSTASH_*`` variables.

    Recognised variables: ``LOGSTASH_METADATA`` (JSON object),
    ``LOGSTASH_DEVICE`` (``stdout``/``syslog``/``console``),
    ``LOGSTASH_SYSLOG_IDENTITY``, ``LOGSTASH_SYSLOG_FACILITY``,
    ``LOGSTASH_SYSLOG_PRIORITY``, ``LOGSTASH_SYSLOG_FLAGS`` (comma separated),
    ``LOGSTASH_INCLUDE_PARAMETERS``, ``LOGSTASH_SERIALIZE_PARAMETERS`` and
    ``LOGSTASH_SILENCE_STANDARD_LOGGING``.

    Examples
    --------
    >>> config_from_env({"LOGSTASH_DEVICE": "syslog", "LOGSTASH_SYSLOG_FLAGS": "LOG_PID, LOG_CONS"})
    {'device': {'type': 'syslog', 'flags': ['LOG_PID', 'LOG_CONS']}}
    >>> config_from_env({"LOGSTASH_INCLUDE_PARAMETERS": "0"})
    {'include_parameters': False}
    """

    env = os.environ if environ is None else environ
    config: dict[str, Any] = {}

    raw_metadata = env.get(f"{ENV_PREFIX}METADATA")
    if raw_metadata:
        config["metadata"] = _parse_metadata(f"{ENV_PREFIX}METADATA", raw_metadata)

    device_type = env.get(f"{ENV_PREFIX}DEVICE")
    if device_type:
        device: dict[str, Any] = {"type": device_type.strip()}
        for field in ("identity", "facility", "priority"):
            value = env.get(f"{ENV_PREFIX}SYSLOG_{field.upper()}")
            if value:
                device[field] = value.strip()
        flags = env.get(f"{ENV_PREFIX}SYSLOG_FLAGS")
        if flags:
            device["flags"] = [part.strip() for part in flags.split(",") if part.strip()]
        config["device"] = device

    for key in ("include_parameters", "serialize_parameters", "silence_standard_logging"):
        name = f"{ENV_PREFIX}{key.upper()}"
        raw = env.get(name)
        if raw is not None and raw.strip():
            config[key] = _parse_bool(name, raw)

    return config


def load_config_file(path: Path | str) -> dict[str, Any]:
    """Read a TOML configuration file.

    Settings may live at the top level, in a ``[logstasher]`` table, or in
    ``[tool.lib_log_stash]`` (for ``pyproject.toml``).
    """

    file_path = Path(path)
    try:
        with file_path.open("rb") as handle:
            document = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"configuration file not found: {file_path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"invalid TOML in {file_path}: {exc}") from exc

    for table_path in CONFIG_TABLES:
        section: Any = document
        for part in table_path:
            section = section.get(part) if isinstance(section, dict) else None
        if isinstance(section, dict):
            LOGGER.debug("using [%s] from %s", ".".join(table_path), file_path)
            return dict(section)
    return dict(document)


def merge_configs(*sources: Mapping[str, Any]) -> dict[str, Any]:
    """Combine configuration mappings; later sources override earlier keys."""

    merged: dict[str, Any] = {}
    for source in sources:
        merged.update(source)
    return merged


__all__ = [
    "DOTENV_ENV_VAR",
    "ENV_PREFIX",
    "config_from_env",
    "enable_dotenv",
    "load_config_file",
    "merge_configs",
    "should_use_dotenv",
]

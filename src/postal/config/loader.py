"""YAML configuration loading for postal.

Configuration is read from a single YAML file and returned as a
:class:`box.Box` so sections can be reached with attribute access
(``config.mailer.host``).

Lookup order when no explicit path is given:

1. ``$POSTAL_CONFIG``
2. ``postal.conf.yml`` in the current working directory

String values may pull secrets from the environment: ``${NAME}`` must be
set, ``${NAME:-fallback}`` falls back when the variable is unset or empty.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from box import Box

from postal.config.exceptions import ConfigFileNotFoundError, ConfigFormatError, EnvVarError

log = logging.getLogger(__name__)

DEFAULT_FILENAME = "postal.conf.yml"
CONFIG_ENV_VAR = "POSTAL_CONFIG"

# ${NAME} or ${NAME:-fallback}
_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_]\w*)(?::-(?P<fallback>[^}]*))?\}", re.ASCII)

_cache: Box | None = None


def _interpolate(node: Any, source: str | None) -> Any:
    """Substitute environment references in every string under *node*.

    Mappings and lists are rebuilt, other scalars are returned untouched.
    ``${NAME:-fallback}`` follows the shell rule and uses *fallback* when
    ``NAME`` is unset or empty. A bare ``${NAME}`` must be set, an empty
    value is kept.

    Raises:
        EnvVarError: If a bare reference names an unset variable.

    Examples:
        >>> os.environ["POSTAL_DOCTEST_HOST"] = "smtp.example.com"
        >>> _interpolate({"url": ["${POSTAL_DOCTEST_HOST}:${POSTAL_DOCTEST_PORT:-587}"]}, None)
        {'url': ['smtp.example.com:587']}
    """
    if isinstance(node, dict):
        return {key: _interpolate(value, source) for key, value in node.items()}
    if isinstance(node, list):
        return [_interpolate(item, source) for item in node]
    if not isinstance(node, str):
        return node

    def lookup(match: re.Match[str]) -> str:
        name, fallback = match.group("name", "fallback")
        current = os.environ.get(name)
        if fallback is not None:
            return current or fallback
        if current is None:
            raise EnvVarError(name, source)
        return current

    return _REFERENCE.sub(lookup, node)


def _resolve_path(path: str | Path | None) -> Path:
    searched: list[str] = []

    if path is not None:
        candidate = Path(path).expanduser()
        if candidate.is_file():
            return candidate
        raise ConfigFileNotFoundError([str(candidate)])

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path).expanduser()
        if candidate.is_file():
            return candidate
        searched.append(str(candidate))

    candidate = Path.cwd() / DEFAULT_FILENAME
    if candidate.is_file():
        return candidate
    searched.append(str(candidate))

    raise ConfigFileNotFoundError(searched)


def load_config(path: str | Path | None = None, *, encoding: str = "utf-8") -> Box:
    """Load a YAML configuration file and cache it.

    Args:
        path: Explicit config file. When omitted the lookup order of this
            module's docstring applies.
        encoding: File encoding.

    Returns:
        The parsed configuration with environment variables expanded.

    Raises:
        ConfigFileNotFoundError: If no file can be located.
        ConfigFormatError: If the file is not valid YAML or not a mapping.
        EnvVarError: If a required ``${VAR}`` is not set.
    """
    global _cache  # pylint: disable=global-statement

    config_path = _resolve_path(path)
    log.debug("Loading configuration from %s", config_path)

    try:
        raw = yaml.safe_load(config_path.read_text(encoding=encoding))
    except yaml.YAMLError as exc:
        raise ConfigFormatError(f"Invalid YAML in {config_path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigFormatError(f"Top level of {config_path} must be a mapping, got {type(raw).__name__}")

    _cache = Box(_interpolate(raw, str(config_path)))
    return _cache


def get_config() -> Box:
    """Return the cached configuration, loading it on first use."""
    if _cache is None:
        return load_config()
    return _cache


def clear_config() -> None:
    """Forget the cached configuration."""
    global _cache  # pylint: disable=global-statement
    _cache = None

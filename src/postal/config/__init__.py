"""Configuration loading for postal.

Examples:
    >>> from postal.config import load_config
    >>> config = load_config("postal.conf.yml")  # doctest: +SKIP
    >>> config.mailer.host  # doctest: +SKIP
    'smtp.gmail.com'
"""

from postal.config.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigFormatError,
    EnvVarError,
    PostalError,
)
from postal.config.loader import clear_config, get_config, load_config

__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "EnvVarError",
    "PostalError",
    "clear_config",
    "get_config",
    "load_config",
]

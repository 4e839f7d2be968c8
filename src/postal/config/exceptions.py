"""Exceptions raised by the postal.config module.

Exception hierarchy::

    PostalError (base for every postal error)
        ConfigError (base for configuration errors)
            ConfigFileNotFoundError (no config file could be located)
            ConfigFormatError (file is not a YAML mapping)
            EnvVarError (required ${VAR} is not set)
"""

from __future__ import annotations


class PostalError(Exception):
    """Base exception for all postal errors."""


class ConfigError(PostalError):
    """Base exception for configuration loading errors."""


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """No configuration file could be found.

    Attributes:
        searched: Paths that were tried, in lookup order.
    """

    def __init__(self, searched: list[str]) -> None:
        """Initialize ConfigFileNotFoundError.

        Args:
            searched: Paths that were tried, in lookup order.
        """
        super().__init__(f"Configuration file not found (searched: {', '.join(searched) or '(nothing)'})")
        self.searched = searched


class ConfigFormatError(ConfigError):
    """The configuration file cannot be parsed into a mapping."""


class EnvVarError(ConfigError):
    """A required environment variable referenced in the config is not set.

    Attributes:
        var_name: Name of the missing variable.
        source: Config file that referenced it, if known.
    """

    def __init__(self, var_name: str, source: str | None = None) -> None:
        """Initialize EnvVarError.

        Args:
            var_name: Name of the missing variable.
            source: Config file that referenced it, if known.
        """
        where = f" (referenced in {source})" if source else ""
        super().__init__(f"Environment variable '{var_name}' is not set{where}")
        self.var_name = var_name
        self.source = source

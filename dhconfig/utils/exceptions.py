"""
dhconfig.utils.exceptions
=========================

Error taxonomy for the configuration loader.

None of these are raised through the public session API. They are logged,
recorded as diagnostics and handed back inside result objects.
"""


class DhConfigError(Exception):
    """Base exception for all dhconfig errors."""
    pass


class ConfigurationError(DhConfigError):
    """Error in configuration settings."""
    pass


class InvalidDirectoryError(ConfigurationError):
    """The config directory is missing, empty or does not exist."""
    pass


class MissingConfigFileError(ConfigurationError):
    """A requested config file does not exist."""
    pass


class InvalidConfigFileError(ConfigurationError):
    """A config file exists but could not be parsed into a settings tree."""
    pass


class InvalidDelimiterError(ConfigurationError):
    """A key delimiter was empty or not a string."""
    pass

"""
Utility functions and classes.

This package provides the error taxonomy, logging helpers and the
singleton metaclass shared across dhconfig.
"""

from dhconfig.utils.exceptions import (
    DhConfigError, ConfigurationError, InvalidDirectoryError,
    MissingConfigFileError, InvalidConfigFileError, InvalidDelimiterError
)
from dhconfig.utils.logging import configure_logging, get_logger, LoggerBridge
from dhconfig.utils.singleton_meta import SingletonMeta

__all__ = [
    'DhConfigError',
    'ConfigurationError',
    'InvalidDirectoryError',
    'MissingConfigFileError',
    'InvalidConfigFileError',
    'InvalidDelimiterError',
    'configure_logging',
    'get_logger',
    'LoggerBridge',
    'SingletonMeta',
]

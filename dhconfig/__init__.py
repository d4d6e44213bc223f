"""
dhconfig package initialization.

Re-exports the public configuration API.
"""

from dhconfig.config import (
    ConfigSession,
    LoadResult,
    Lookup,
    SourceStore,
    create,
    reset,
    resolve_key,
)
from dhconfig.utils.exceptions import ConfigurationError

__version__ = "0.1.0"

__all__ = [
    'ConfigSession',
    'ConfigurationError',
    'LoadResult',
    'Lookup',
    'SourceStore',
    'create',
    'reset',
    'resolve_key',
]

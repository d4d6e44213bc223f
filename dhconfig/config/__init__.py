"""
Configuration loading for dhconfig.

This package resolves the deployment environment, loads JSON settings files
from a directory and layers them under command-line and environment overrides:
- Key paths in the caller's delimiter (keypath)
- Prioritised sources with first-match lookup (sources)
- The session tying both together (session)
"""

from dhconfig.config.keypath import (
    CANONICAL_SEPARATOR,
    Lookup,
    ValueKind,
    kind_of,
    resolve_key,
    traverse,
)
from dhconfig.config.results import Diagnostic, LoadResult
from dhconfig.config.session import ConfigSession, SharedConfigSession, create, reset
from dhconfig.config.settings import LoaderSettings, load_settings
from dhconfig.config.sources import Source, SourceKind, SourceStore, parse_argv, parse_environ

__all__ = [
    'CANONICAL_SEPARATOR',
    'Lookup',
    'ValueKind',
    'kind_of',
    'resolve_key',
    'traverse',
    'Diagnostic',
    'LoadResult',
    'ConfigSession',
    'SharedConfigSession',
    'create',
    'reset',
    'LoaderSettings',
    'load_settings',
    'Source',
    'SourceKind',
    'SourceStore',
    'parse_argv',
    'parse_environ',
]

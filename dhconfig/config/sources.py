"""
dhconfig.config.sources
=======================

Ordered, prioritised configuration sources and the lookup rules between them.

Precedence, highest first:

1. ``argv``       command-line flags
2. ``env``        process environment (plus optional ``.env`` values below it)
3. files          one source per loaded file, the most recent load winning
4. ``overrides``  values set programmatically (e.g. the environment name)

A lookup is resolved by the *first* source whose tree holds the whole key
path. Nested objects are never merged across sources: once a source wins,
any further traversal stays inside that source's subtree.
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import yaml
from dotenv import dotenv_values

from dhconfig.config.keypath import Lookup, split_key, traverse
from dhconfig.config.results import LoadResult
from dhconfig.config.settings import LoaderSettings, load_settings
from dhconfig.utils.exceptions import InvalidConfigFileError, MissingConfigFileError
from dhconfig.utils.logging import LoggerBridge

logger = logging.getLogger(__name__)

ARGV_SOURCE = "argv"
ENV_SOURCE = "env"
OVERRIDES_SOURCE = "overrides"
POSITIONALS_KEY = "_"
RESERVED_SOURCES = frozenset({ARGV_SOURCE, ENV_SOURCE, OVERRIDES_SOURCE})

YAML_SUFFIXES = {".yaml", ".yml"}

_INT_RE = re.compile(r"^-?(0|[1-9]\d*)$")
_FLOAT_RE = re.compile(r"^-?(\d+\.\d*|\.\d+)([eE][-+]?\d+)?$")
_ARGV_KEY_SPLIT = re.compile(r"[:.]")

ArgvProvider = Callable[[], Sequence[str]]
EnvironProvider = Callable[[], Mapping[str, str]]


class SourceKind(str, Enum):
    ARGV = "argv"
    ENV = "env"
    FILE = "file"
    OVERRIDES = "overrides"


@dataclass
class Source:
    """One named, prioritised settings tree."""
    name: str
    tree: Dict[str, Any]
    priority: int
    kind: SourceKind = SourceKind.FILE
    path: Optional[Path] = None
    sequence: int = 0

    def lookup(self, canonical_key: str) -> Lookup:
        return traverse(self.tree, split_key(canonical_key))


# --------------------------------------------------------------------------- #
# Tree building helpers                                                       #
# --------------------------------------------------------------------------- #
def parse_value(raw: str) -> Any:
    """Coerce a command-line string into a bool or number where it reads as one."""
    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if _INT_RE.match(raw):
        return int(raw)
    if _FLOAT_RE.match(raw):
        return float(raw)
    return raw


def set_path(tree: Dict[str, Any], segments: Sequence[str], value: Any) -> None:
    """Write *value* at *segments*, creating (or replacing) intermediate mappings."""
    node = tree
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = value


def _is_flag(arg: str) -> bool:
    return arg.startswith("-") and len(arg) > 1 and not _INT_RE.match(arg) and not _FLOAT_RE.match(arg)


def _assign_flag(tree: Dict[str, Any], key: str, value: Any) -> None:
    segments = [s for s in _ARGV_KEY_SPLIT.split(key) if s]
    if not segments:
        return
    existing = traverse(tree, segments)
    # repeated flags collect into a list
    if existing.found and not isinstance(existing.value, dict):
        previous = existing.value if isinstance(existing.value, list) else [existing.value]
        value = previous + [value]
    set_path(tree, segments, value)


def parse_argv(args: Iterable[str], parse_values: bool = True) -> Dict[str, Any]:
    """
    Turn command-line arguments into a settings tree.

    Supports ``--key value``, ``--key=value``, ``--flag``, ``--no-flag``,
    grouped short flags (``-vx``) and ``--`` to end option parsing. Keys
    containing ``:`` or ``.`` build nested mappings. Positional arguments
    are collected, in order, under ``"_"``.
    """
    coerce = parse_value if parse_values else (lambda raw: raw)
    args = list(args)
    tree: Dict[str, Any] = {}
    positionals: List[str] = []

    i = 0
    while i < len(args):
        arg = args[i]
        nxt = args[i + 1] if i + 1 < len(args) else None

        if arg == "--":
            positionals.extend(args[i + 1:])
            break

        if arg.startswith("--") and len(arg) > 2:
            body = arg[2:]
            if "=" in body:
                key, raw = body.split("=", 1)
                _assign_flag(tree, key, coerce(raw))
            elif body.startswith("no-") and len(body) > 3:
                _assign_flag(tree, body[3:], False)
            elif nxt is not None and not _is_flag(nxt):
                _assign_flag(tree, body, coerce(nxt))
                i += 1
            else:
                _assign_flag(tree, body, True)
        elif _is_flag(arg):
            letters = arg[1:]
            if "=" in letters:
                key, raw = letters.split("=", 1)
                _assign_flag(tree, key, coerce(raw))
            else:
                for letter in letters[:-1]:
                    _assign_flag(tree, letter, True)
                if nxt is not None and not _is_flag(nxt):
                    _assign_flag(tree, letters[-1], coerce(nxt))
                    i += 1
                else:
                    _assign_flag(tree, letters[-1], True)
        else:
            positionals.append(arg)
        i += 1

    tree[POSITIONALS_KEY] = positionals
    return tree


def parse_environ(environ: Mapping[str, Optional[str]], separator: str = "__") -> Dict[str, Any]:
    """
    Turn environment variables into a settings tree.

    Every variable is kept under its flat name. When *separator* is set,
    names containing it are also nested (``APP__PORT`` -> ``APP.PORT``),
    unless a flat variable already owns that slot.
    """
    tree: Dict[str, Any] = {k: v for k, v in environ.items() if v is not None}
    if not separator:
        return tree
    for name, value in list(tree.items()):
        if separator not in name:
            continue
        segments = [s for s in name.split(separator) if s]
        if len(segments) < 2:
            continue
        node = tree
        for segment in segments[:-1]:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                node = None
                break
            node = child
        if node is not None and not isinstance(node.get(segments[-1]), dict):
            node[segments[-1]] = value
    return tree


def read_tree(path: Union[str, Path], encoding: str = "utf-8") -> Dict[str, Any]:
    """Parse a JSON (or YAML) file into a settings tree.

    Raises:
        MissingConfigFileError: if *path* does not exist.
        InvalidConfigFileError: if the file cannot be parsed or is not a mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise MissingConfigFileError(f"Config file not found: {path}")
    try:
        with path.open("r", encoding=encoding) as fh:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(fh)
            else:
                data = json.load(fh)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise InvalidConfigFileError(f"Failed to parse config file {path}: {exc}") from exc

    if data is None and path.suffix.lower() in YAML_SUFFIXES:
        data = {}
    if not isinstance(data, dict):
        raise InvalidConfigFileError(
            f"Config file {path} must hold an object at the top level, got {type(data).__name__}"
        )
    return data


# --------------------------------------------------------------------------- #
# Store                                                                       #
# --------------------------------------------------------------------------- #
class SourceStore:
    """
    The merge / precedence engine.

    ``argv`` and ``environ`` may be fixed values or zero-argument callables;
    when omitted the live ``sys.argv[1:]`` and ``os.environ`` are read on every
    :meth:`reload_volatile_sources`.
    """

    def __init__(
        self,
        settings: LoaderSettings | None = None,
        logger: LoggerBridge | None = None,
        argv: Sequence[str] | ArgvProvider | None = None,
        environ: Mapping[str, str] | EnvironProvider | None = None,
        dotenv_path: Path | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.log = logger or LoggerBridge()
        self.dotenv_path = dotenv_path
        self._argv = argv
        self._environ = environ
        self._sources: Dict[str, Source] = {}
        self._sequence = 0
        self._lock = threading.RLock()

    # ------------------------------------------------------------------ #
    # Source management                                                  #
    # ------------------------------------------------------------------ #
    def add(self, source: Source) -> Source:
        """Register *source*, replacing any source with the same name."""
        with self._lock:
            self._sequence += 1
            source.sequence = self._sequence
            self._sources[source.name] = source
            logger.debug("Registered source %s (priority %s)", source.name, source.priority)
            return source

    def remove(self, name: str) -> bool:
        with self._lock:
            return self._sources.pop(name, None) is not None

    def sources(self) -> List[Source]:
        """Snapshot of sources, highest precedence first."""
        with self._lock:
            return sorted(
                self._sources.values(),
                key=lambda s: (s.priority, s.sequence),
                reverse=True,
            )

    def names(self) -> List[str]:
        return [s.name for s in self.sources()]

    def source(self, name: str) -> Optional[Source]:
        return self._sources.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def __len__(self) -> int:
        return len(self._sources)

    @property
    def lock(self) -> threading.RLock:
        """The lock serialising store mutations."""
        return self._lock

    # ------------------------------------------------------------------ #
    # Files                                                              #
    # ------------------------------------------------------------------ #
    def load_file(self, name: str, path: Union[str, Path]) -> LoadResult:
        """Parse *path* and register it as source *name*.

        A missing or unparsable file, or a *name* that belongs to a built-in
        source, is logged and leaves every source as it was.
        """
        path = Path(path)
        if name in RESERVED_SOURCES:
            exc = InvalidConfigFileError(f"Config name {name!r} is reserved for a built-in source")
            self.log.error(str(exc))
            return LoadResult.failure(name, exc, path)
        try:
            tree = read_tree(path, self.settings.file_encoding)
        except MissingConfigFileError as exc:
            self.log.error(f"Failed to load config file at path: {path}")
            return LoadResult.failure(name, exc, path)
        except InvalidConfigFileError as exc:
            self.log.error(str(exc))
            return LoadResult.failure(name, exc, path)

        self.add(Source(
            name=name,
            tree=tree,
            priority=self.settings.priorities.file,
            kind=SourceKind.FILE,
            path=path,
        ))
        return LoadResult.success(name, path)

    def load_file_by_path(self, name: str, path: Union[str, Path]) -> LoadResult:
        """Same as :meth:`load_file` for a caller-supplied full path."""
        if Path(path).is_file():
            self.log.info(f"Loading config file at path: {path}")
        return self.load_file(name, path)

    # ------------------------------------------------------------------ #
    # Volatile sources                                                   #
    # ------------------------------------------------------------------ #
    def current_argv(self) -> List[str]:
        argv = self._argv() if callable(self._argv) else self._argv
        return list(sys.argv[1:] if argv is None else argv)

    def current_environ(self) -> Dict[str, str]:
        environ = self._environ() if callable(self._environ) else self._environ
        values: Dict[str, str] = {}
        if self.dotenv_path is not None and self.dotenv_path.is_file():
            values.update({k: v for k, v in dotenv_values(self.dotenv_path).items() if v is not None})
        values.update(os.environ if environ is None else environ)
        return values

    def reload_volatile_sources(self) -> None:
        """Re-ingest argv and the environment so they outrank every loaded file."""
        with self._lock:
            self.add(Source(
                name=ENV_SOURCE,
                tree=parse_environ(self.current_environ(), self.settings.env_separator),
                priority=self.settings.priorities.env,
                kind=SourceKind.ENV,
            ))
            self.add(Source(
                name=ARGV_SOURCE,
                tree=parse_argv(self.current_argv(), self.settings.parse_argv_values),
                priority=self.settings.priorities.argv,
                kind=SourceKind.ARGV,
            ))

    def positionals(self) -> List[str]:
        """Positional command-line arguments from the last argv ingestion."""
        argv = self._sources.get(ARGV_SOURCE)
        if argv is None:
            return []
        return list(argv.tree.get(POSITIONALS_KEY, []))

    # ------------------------------------------------------------------ #
    # Overrides                                                          #
    # ------------------------------------------------------------------ #
    def set_override(self, key: str, value: Any) -> None:
        """Set canonical *key* in the lowest-priority ``overrides`` source."""
        with self._lock:
            source = self._sources.get(OVERRIDES_SOURCE)
            if source is None or source.kind is not SourceKind.OVERRIDES:
                source = self.add(Source(
                    name=OVERRIDES_SOURCE,
                    tree={},
                    priority=self.settings.priorities.overrides,
                    kind=SourceKind.OVERRIDES,
                ))
            set_path(source.tree, split_key(key), value)

    # ------------------------------------------------------------------ #
    # Lookup                                                             #
    # ------------------------------------------------------------------ #
    def get(self, canonical_key: str) -> Lookup:
        """First source (by precedence) that holds the whole key wins."""
        if not isinstance(canonical_key, str):
            return Lookup.missing()
        for source in self.sources():
            found = source.lookup(canonical_key)
            if found.found:
                return found
        return Lookup.missing()

    def value(self, canonical_key: str, default: Any = None) -> Any:
        return self.get(canonical_key).unwrap(default)

    def winner(self, canonical_key: str) -> Optional[Source]:
        """The source that answers *canonical_key*, if any."""
        if not isinstance(canonical_key, str):
            return None
        for source in self.sources():
            if source.lookup(canonical_key).found:
                return source
        return None

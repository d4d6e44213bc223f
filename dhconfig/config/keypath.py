"""
dhconfig.config.keypath
=======================

Key path resolution and nested traversal of settings trees.

Callers address nested settings with their own delimiter
(``"serverSettings.port"``). Internally every key is held in canonical form,
segments joined by ``":"``. Traversal never raises: a missing segment or a
non-mapping value yields :meth:`Lookup.missing`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Mapping, Sequence

CANONICAL_SEPARATOR = ":"


class ValueKind(str, Enum):
    """Tag describing what a settings value is."""

    SCALAR = "scalar"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    NULL = "null"


def kind_of(value: Any) -> ValueKind:
    """Classify *value* as one of the :class:`ValueKind` variants."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


@dataclass(frozen=True)
class Lookup:
    """Result of a traversal: ``found`` tells absence apart from a stored ``None``."""

    found: bool
    value: Any = None

    @classmethod
    def hit(cls, value: Any) -> "Lookup":
        return cls(True, value)

    @classmethod
    def missing(cls) -> "Lookup":
        return _MISSING

    @property
    def kind(self) -> ValueKind:
        return kind_of(self.value)

    def unwrap(self, default: Any = None) -> Any:
        """Return the value, or *default* when nothing was found."""
        return self.value if self.found else default


_MISSING = Lookup(False)


def resolve_key(raw: str, delimiter: str) -> str:
    """Translate *raw* from the caller's *delimiter* into canonical form.

    Non-string keys are returned unchanged and never match a settings key.

    >>> resolve_key("serverSettings.port", ".")
    'serverSettings:port'
    >>> resolve_key("serverSettings:port", ":")
    'serverSettings:port'
    """
    if not isinstance(raw, str):
        return raw
    if delimiter and delimiter in raw:
        return join_key(raw.split(delimiter))
    return raw


def split_key(canonical: str) -> List[str]:
    """Split a canonical key into its path segments."""
    return canonical.split(CANONICAL_SEPARATOR)


def join_key(segments: Iterable[str]) -> str:
    return CANONICAL_SEPARATOR.join(segments)


def step(value: Any, key: str) -> Lookup:
    """Go one level deeper into *value*, which must be a mapping holding *key*."""
    if not isinstance(key, str) or kind_of(value) is not ValueKind.MAPPING or key not in value:
        return Lookup.missing()
    return Lookup.hit(value[key])


def traverse(tree: Any, segments: Sequence[str]) -> Lookup:
    """Follow *segments* down from *tree*."""
    current = Lookup.hit(tree)
    for segment in segments:
        current = step(current.value, segment)
        if not current.found:
            break
    return current


def descend(start: Lookup, keys: Sequence[str], delimiter: str) -> Lookup:
    """Continue a lookup through *keys*, one level per key.

    Each key is canonicalised and used as a literal key of the current
    mapping, so ``descend(hit, ["a.b"], ".")`` looks up ``"a:b"`` rather
    than walking two levels.
    """
    current = start
    for key in keys:
        if not current.found:
            break
        current = step(current.value, resolve_key(key, delimiter))
    return current

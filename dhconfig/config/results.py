"""Result and diagnostic value objects returned by loader operations."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from dhconfig.utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class Diagnostic:
    """A recorded, non-fatal failure."""
    operation: str
    error: ConfigurationError
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def message(self) -> str:
        return str(self.error)

    @property
    def error_type(self) -> str:
        return type(self.error).__name__


@dataclass(frozen=True)
class LoadResult:
    """Outcome of loading one config file into a source."""
    name: str
    path: Optional[Path] = None
    loaded: bool = False
    error: Optional[ConfigurationError] = None

    def __bool__(self) -> bool:
        return self.loaded

    @classmethod
    def success(cls, name: str, path: Path) -> "LoadResult":
        return cls(name=name, path=path, loaded=True)

    @classmethod
    def failure(cls, name: str, error: ConfigurationError, path: Optional[Path] = None) -> "LoadResult":
        return cls(name=name, path=path, loaded=False, error=error)

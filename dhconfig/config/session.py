"""
dhconfig.config.session
=======================

The configuration session: one process's view of its settings.

A session owns a :class:`~dhconfig.config.sources.SourceStore` and the
caller-facing key delimiter. It knows the config directory, picks the
deployment environment and loads ``{config_directory}/{name}.json`` files.

Failures (bad directory, missing file, bad delimiter) never raise. They are
logged through the logger collaborator, appended to :attr:`diagnostics` and,
for loads, returned inside a :class:`~dhconfig.config.results.LoadResult`.

Typical use from a composition root::

    from dhconfig import create

    config = create("config/", logger)
    config.load_config("all")
    config.load_environment_config("local")
    port = config.get("serverSettings", "port")
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union

from dhconfig.config.keypath import Lookup, ValueKind, descend, resolve_key
from dhconfig.config.results import Diagnostic, LoadResult
from dhconfig.config.settings import LoaderSettings, load_settings
from dhconfig.config.sources import ArgvProvider, EnvironProvider, SourceStore
from dhconfig.utils.exceptions import (
    ConfigurationError,
    InvalidDelimiterError,
    InvalidDirectoryError,
    MissingConfigFileError,
)
from dhconfig.utils.logging import LoggerBridge, get_logger
from dhconfig.utils.singleton_meta import SingletonMeta


class ConfigSession:
    """
    Layered configuration for one process.

    Parameters
    ----------
    config_directory : str | Path
        Directory holding the ``<name>.json`` config files. It must exist.
    logger : object, optional
        Anything exposing ``info``/``warn``/``error``. Defaults to the
        ``dhconfig`` logger.
    argv : sequence or callable, optional
        Command-line arguments (program name excluded). Defaults to the live
        ``sys.argv[1:]``.
    environ : mapping or callable, optional
        Environment variables. Defaults to the live ``os.environ``.
    settings : LoaderSettings, optional
        Loader behaviour. Defaults to :func:`load_settings`.
    """

    def __init__(
        self,
        config_directory: Union[str, Path, None],
        logger: Any = None,
        *,
        argv: Sequence[str] | ArgvProvider | None = None,
        environ: Mapping[str, str] | EnvironProvider | None = None,
        settings: LoaderSettings | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.logger = logger
        self.log = LoggerBridge(logger, get_logger())
        self.delimiter: str = self.settings.delimiter
        self.debug = False
        self.diagnostics: List[Diagnostic] = []

        self.config_directory: Optional[Path] = Path(config_directory) if config_directory else None
        self.functional = self._valid_directory(self.config_directory)

        dotenv_path = None
        if self.functional and self.settings.dotenv_file:
            dotenv_path = self.config_directory / self.settings.dotenv_file

        self.store = SourceStore(
            settings=self.settings,
            logger=self.log,
            argv=argv,
            environ=environ,
            dotenv_path=dotenv_path,
        )

        if not self.functional:
            self._record("create", InvalidDirectoryError(
                f"Config directory is invalid: {config_directory!r}"
            ))
            self.error("Config directory is invalid.")
            return

        # command line and environment are available from the start
        self.store.reload_volatile_sources()

    # ------------------------------------------------------------------ #
    # Logging                                                            #
    # ------------------------------------------------------------------ #
    def info(self, message: str) -> None:
        self.log.info(message)

    def warn(self, message: str) -> None:
        self.log.warn(message)

    def error(self, message: str) -> None:
        self.log.error(message)

    def set_debug_mode(self, debug_mode_on: bool) -> None:
        """Log every key resolution at debug level while on."""
        self.debug = bool(debug_mode_on)

    def _record(self, operation: str, error: ConfigurationError) -> ConfigurationError:
        self.diagnostics.append(Diagnostic(operation, error))
        return error

    @staticmethod
    def _valid_directory(directory: Optional[Path]) -> bool:
        return directory is not None and str(directory) != "" and directory.is_dir()

    # ------------------------------------------------------------------ #
    # Files                                                              #
    # ------------------------------------------------------------------ #
    def get_config_file_path(self, config_name: str) -> Optional[Path]:
        """
        Path of ``<config_directory>/<config_name><ext>``.

        Returns ``None`` (and logs) when the session has no usable directory
        or the file does not exist.
        """
        if not self.functional:
            self.error(f"Failed to load config file for configuration: {config_name}")
            return None

        file_name = f"{config_name}{self.settings.file_extension}"
        file_path = self.config_directory / file_name
        if file_path.is_file():
            self.info(f"Loading config file: {file_name}")
            return file_path

        self.error(f"Failed to load config file for configuration: {config_name}")
        return None

    def _missing(self, operation: str, config_name: str) -> LoadResult:
        error = self._record(operation, MissingConfigFileError(
            f"No config file for configuration {config_name!r} in {self.config_directory}"
        ))
        return LoadResult.failure(config_name, error)

    def _load(self, operation: str, config_name: str, file_path: Path, by_path: bool) -> LoadResult:
        if by_path:
            result = self.store.load_file_by_path(config_name, file_path)
        else:
            result = self.store.load_file(config_name, file_path)
        if result.error is not None:
            self._record(operation, result.error)
        return result

    def load_config(self, config_name: str) -> LoadResult:
        """Load ``<config_directory>/<config_name>.json`` as source *config_name*."""
        config_file_path = self.get_config_file_path(config_name)
        if config_file_path is None:
            return self._missing("load_config", config_name)

        result = self._load("load_config", config_name, config_file_path, by_path=False)

        # argv and env must outrank the file just loaded
        self.store.reload_volatile_sources()
        return result

    def load_config_with_path(self, config_name: str, file_path: Union[str, Path]) -> LoadResult:
        """Load the file at *file_path* as source *config_name*."""
        if not self.functional:
            self.error(f"Failed to load config file at path: {file_path}")
            return LoadResult.failure(config_name, self._record(
                "load_config_with_path",
                InvalidDirectoryError("Session has no valid config directory"),
            ), Path(file_path))

        result = self._load("load_config_with_path", config_name, Path(file_path), by_path=True)
        if result:
            self.store.reload_volatile_sources()
        return result

    # ------------------------------------------------------------------ #
    # Environment selection                                              #
    # ------------------------------------------------------------------ #
    def _environment_variable(self) -> Optional[str]:
        return self.store.current_environ().get(self.settings.environment_variable) or None

    def resolve_environment_name(self, default_config: str) -> tuple[str, str]:
        """
        Pick the environment name and say where it came from.

        Order: the environment variable (``NODE_ENV`` by default), then the
        last positional command-line argument, then *default_config*.
        """
        name = self._environment_variable()
        if name:
            return name, "environment"

        positionals = self.store.positionals()
        if positionals:
            return str(positionals[-1]), "argv"

        return default_config, "default"

    def set_environment_name(self, default_config: str) -> Optional[str]:
        """Resolve and record the environment name without loading a file."""
        if not self.functional:
            self.error("Config directory is invalid.")
            return None

        config_name, origin = self.resolve_environment_name(default_config)
        if origin != "environment":
            self.info(f"Setting environment name to: {config_name}")

        self.store.set_override(self.settings.environment_name_key, config_name)
        self.store.reload_volatile_sources()
        return config_name

    def load_environment_config(self, default_config: str) -> LoadResult:
        """Resolve the environment name, load its file and record the name."""
        if not self.functional:
            self.error("Config directory is invalid.")
            return LoadResult.failure(default_config, self._record(
                "load_environment_config",
                InvalidDirectoryError("Session has no valid config directory"),
            ))

        config_name, origin = self.resolve_environment_name(default_config)
        if origin != "environment":
            self.info(f"Running as: {config_name}")

        config_file_path = self.get_config_file_path(config_name)
        if config_file_path is not None:
            result = self._load("load_environment_config", config_name, config_file_path, by_path=False)
        else:
            result = self._missing("load_environment_config", config_name)

        self.store.set_override(self.settings.environment_name_key, config_name)
        self.store.reload_volatile_sources()
        return result

    def load_environment_variables(self) -> None:
        """Re-read the command line and environment."""
        if self.functional:
            self.store.reload_volatile_sources()

    reload_volatile_sources = load_environment_variables

    def get_environment_name(self) -> Optional[str]:
        return self.store.value(self.settings.environment_name_key)

    # ------------------------------------------------------------------ #
    # Keys                                                               #
    # ------------------------------------------------------------------ #
    def set_delimiter(self, delimiter: Any) -> bool:
        """Use *delimiter* for nested keys. Empty or non-string values are rejected."""
        if not isinstance(delimiter, str) or not delimiter:
            self._record("set_delimiter", InvalidDelimiterError(
                f"Invalid delimiter specified: {delimiter!r}"
            ))
            self.error("Invalid delimiter specified.")
            return False

        with self.store.lock:
            self.delimiter = delimiter
        return True

    def lookup(self, keys: Sequence[str]) -> Lookup:
        """
        Resolve *keys* as a path.

        The first key (in the session delimiter) is answered by the source
        store; each further key steps one level into that value.
        """
        if not keys or not self.functional:
            return Lookup.missing()

        first = resolve_key(keys[0], self.delimiter)
        if self.debug:
            self.log.debug(f"Resolving {list(keys)!r} (first key {first!r})")

        return descend(self.store.get(first), keys[1:], self.delimiter)

    def get(self, *keys: str) -> Any:
        """Value at *keys*, or ``None`` when any part of the path is missing."""
        found = self.lookup(keys)
        if not found.found:
            return None
        if found.kind in (ValueKind.MAPPING, ValueKind.SEQUENCE):
            return copy.deepcopy(found.value)
        return found.value

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.lookup([key]).found


# --------------------------------------------------------------------------- #
# Process-wide session                                                        #
# --------------------------------------------------------------------------- #
class SharedConfigSession(ConfigSession, metaclass=SingletonMeta):
    """The process-wide session returned by :func:`create`."""


def create(config_directory: Union[str, Path, None], logger: Any = None, **kwargs: Any) -> ConfigSession:
    """
    Return the process-wide session, creating it on first call.

    Later calls return the same instance; their arguments are ignored, so the
    first caller's directory and logger win.
    """
    return SharedConfigSession(config_directory, logger, **kwargs)


def reset() -> None:
    """Drop the process-wide session (tests, application teardown)."""
    SharedConfigSession.reset_instance()

import logging
from pathlib import Path
from logging import Handler
from typing import Any, Optional, Sequence

PACKAGE_LOGGER = "dhconfig"


def configure_logging(level: int = logging.INFO, log_to_file: bool = False, log_dir: str = "logs") -> None:
    """
    Configure root logging for the application.
    """
    handlers: list[Handler] = [logging.StreamHandler()]
    if log_to_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(Path(log_dir) / "dhconfig.log"), encoding="utf-8")
        handlers.append(file_handler)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=handlers
    )


def get_logger(name: str = "") -> logging.Logger:
    """
    Get a logger with the given name, pre-configured.
    """
    return logging.getLogger(name or PACKAGE_LOGGER)


class LoggerBridge:
    """
    Routes log calls to an injected logger collaborator.

    The collaborator can be anything exposing ``info``/``warn``/``error``
    (a ``logging.Logger``, a structlog logger, a test double...). Methods the
    collaborator does not have go to the package logger instead.
    """

    def __init__(self, collaborator: Any = None, fallback: Optional[logging.Logger] = None):
        self.collaborator = collaborator
        self.fallback = fallback or get_logger()

    def _emit(self, names: Sequence[str], level: int, message: str) -> None:
        if self.collaborator is not None:
            for name in names:
                method = getattr(self.collaborator, name, None)
                if callable(method):
                    method(message)
                    return
        self.fallback.log(level, message)

    def debug(self, message: str) -> None:
        self._emit(("debug",), logging.DEBUG, message)

    def info(self, message: str) -> None:
        self._emit(("info",), logging.INFO, message)

    def warn(self, message: str) -> None:
        self._emit(("warning", "warn"), logging.WARNING, message)

    warning = warn

    def error(self, message: str) -> None:
        self._emit(("error",), logging.ERROR, message)

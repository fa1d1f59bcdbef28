import sys
import logging
from typing import Mapping, Optional

from colorlog import ColoredFormatter

SUPPORTED_LOG_LEVELS = [
    "DEBUG",
    "INFO",
    "SUCCESS",
    "NOTE",
    "WARNING",
    "ERROR",
    "CRITICAL",
]

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "white",
    "SUCCESS": "green",
    "NOTE": "blue",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

LOGGER_NAMESPACE = "linuxdeploy-plugin-qt"


def get_log_level(environ: Optional[Mapping[str, str]] = None) -> str:
    """Verbose logging is enabled by setting $DEBUG to any value."""
    if environ is None:
        environ = {}
    return "DEBUG" if environ.get("DEBUG") is not None else "INFO"


class _StderrHandler(logging.StreamHandler):
    """
    linuxdeploy shows plugin output inline with its own, so everything is
    written to the current sys.stderr, looked up on every record.
    """

    def __init__(self):
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, _value):
        pass


def _create_formatter() -> ColoredFormatter:
    return ColoredFormatter(
        "%(log_color)s%(levelname)s - %(name)s : %(message)s",
        reset=True,
        log_colors=LOG_COLORS,
        style="%",
    )


class Logger:
    """Thin wrapper around one colored logging.Logger per class or function name."""

    _loggers = {}
    SUCCESS_LEVEL_NUM = 25
    NOTE_LEVEL_NUM = 26

    def __init__(self, log_level: str, name: str):
        self.logger = self._configure_logger(log_level, name or LOGGER_NAMESPACE)

    @classmethod
    def _configure_logger(cls, log_level, name):
        if log_level not in SUPPORTED_LOG_LEVELS:
            print(
                f"WARNING: Invalid log level '{log_level}', falling back to 'INFO'.",
                file=sys.stderr,
            )
            log_level = "INFO"

        logging.addLevelName(cls.SUCCESS_LEVEL_NUM, "SUCCESS")
        logging.addLevelName(cls.NOTE_LEVEL_NUM, "NOTE")

        logger = cls._loggers.get(name)
        if logger is None:
            logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
            logger.propagate = False

            handler = _StderrHandler()
            handler.setFormatter(_create_formatter())
            logger.addHandler(handler)

            cls._loggers[name] = logger

        # the level may differ between runs in one process, e.g. with $DEBUG
        logger.setLevel(log_level)
        return logger

    def _log_custom(self, level, message, args, kwargs):
        if self.logger.isEnabledFor(level):
            self.logger._log(level, message, args, **kwargs)

    def debug(self, message, *args, **kwargs):
        self.logger.debug(message, *args, **kwargs)

    def info(self, message, *args, **kwargs):
        self.logger.info(message, *args, **kwargs)

    def success(self, message, *args, **kwargs):
        self._log_custom(Logger.SUCCESS_LEVEL_NUM, message, args, kwargs)

    def note(self, message, *args, **kwargs):
        self._log_custom(Logger.NOTE_LEVEL_NUM, message, args, kwargs)

    def warning(self, message, *args, **kwargs):
        self.logger.warning(message, *args, **kwargs)

    def error(self, message, *args, **kwargs):
        # fatal conditions are one line, tracebacks are logged at debug level
        self.logger.error(message, *args, **kwargs)

    def critical(self, message, *args, **kwargs):
        self.logger.critical(message, *args, **kwargs)

    def get_level_name(self) -> str:
        return logging.getLevelName(self.logger.level)
